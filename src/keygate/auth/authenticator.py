"""
keygate.auth.authenticator

Static bearer-credential authentication against the caller registry.

Responsibilities:
- Normalize the raw Authorization header value into a credential.
- Resolve the credential to an `Identity` or a typed `Rejected` outcome.
"""

from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError

from keygate.auth.models import Identity
from keygate.db.store import Store
from keygate.observability.logging import get_logger
from keygate.proxy.results import Rejected, RejectionReason

log = get_logger(__name__)

BEARER_PREFIX = "Bearer "


def extract_credential(header_value: str | None) -> str:
    """
    `"  Bearer tok  "` -> `"tok"`. The prefix is case-sensitive: `"bearer tok"`
    is returned whole and will simply not match any registered credential.
    """

    if not header_value:
        return ""
    value = header_value.strip()
    if value.startswith(BEARER_PREFIX):
        value = value[len(BEARER_PREFIX) :]
    return value.strip()


class Authenticator:
    def __init__(self, store: Store) -> None:
        self._store = store

    async def authenticate(self, header_value: str | None) -> Identity | Rejected:
        credential = extract_credential(header_value)
        if not credential:
            return Rejected(RejectionReason.missing)

        try:
            # Plain equality lookup in the store; no constant-time comparison.
            caller = await self._store.caller_for_credential(credential)
        except (SQLAlchemyError, OSError) as e:
            # Store trouble must never authenticate anyone.
            log.error("caller_lookup_failed", error=str(e))
            return Rejected(RejectionReason.internal)

        if caller is None:
            return Rejected(RejectionReason.invalid)
        return Identity(caller_id=caller.id, display_name=caller.display_name)


# --- Module Notes -----------------------------------------------------------
# The proxy calls this once per request; there is no credential cache, so
# revoking a caller with keygate-admin takes effect immediately.
