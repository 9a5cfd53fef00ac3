"""
keygate.auth.models

Auth domain models.

Responsibilities:
- Define the authenticated caller identity (`Identity`) carried through the proxy pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Identity:
    """
    Authenticated caller identity.
    """

    caller_id: str
    display_name: str


# --- Module Notes -----------------------------------------------------------
# The identity never carries the caller's credential; only the id reaches the access log.
