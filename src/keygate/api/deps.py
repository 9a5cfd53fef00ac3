"""
keygate.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Encapsulate app.state access patterns (store, forwarding proxy).
"""

from __future__ import annotations

from fastapi import Request

from keygate.db.store import Store
from keygate.proxy.forwarder import ForwardingProxy


def store_from_app(request: Request) -> Store:
    # Created on app startup in `keygate.api.app.create_app`.
    return request.app.state.store  # type: ignore[attr-defined]


def forwarder_from_app(request: Request) -> ForwardingProxy:
    return request.app.state.forwarder  # type: ignore[attr-defined]
