"""
keygate.proxy.access_log

Best-effort access-log sink for proxied requests.

Responsibilities:
- Append one audit entry per authenticated and resolved request.
- Bound how long a slow write may hold up the request, and never let a failed
  write change the caller-visible outcome.
"""

from __future__ import annotations

import asyncio

from sqlalchemy.exc import SQLAlchemyError

from keygate.auth.models import Identity
from keygate.db.store import Store
from keygate.observability.logging import get_logger

log = get_logger(__name__)


class AccessLogSink:
    def __init__(self, store: Store, *, timeout_seconds: float) -> None:
        self._store = store
        self._timeout_seconds = timeout_seconds

    async def record(self, identity: Identity, path: str) -> bool:
        try:
            await asyncio.wait_for(
                self._store.append_access(caller_id=identity.caller_id, path=path),
                timeout=self._timeout_seconds,
            )
        except TimeoutError:
            log.warning(
                "access_log_write_failed",
                caller_id=identity.caller_id,
                error=f"timed out after {self._timeout_seconds}s",
            )
            return False
        except (SQLAlchemyError, OSError) as e:
            log.warning("access_log_write_failed", caller_id=identity.caller_id, error=str(e))
            return False
        return True


# --- Module Notes -----------------------------------------------------------
# On timeout the request stops waiting; the database driver may still finish the
# write on its worker thread, so a late entry can appear.
