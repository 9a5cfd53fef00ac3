"""
keygate.db.repositories.access_log

Repository for `AccessLogEntry` rows.

Responsibilities:
- Append one entry per proxied request.
- Query recent entries (optionally per caller) and prune by age.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from keygate.db.models import AccessLogEntry


class AccessLogRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, *, caller_id: str, path: str) -> AccessLogEntry:
        # Entries are append-only; created_at is assigned here, never by the caller.
        entry = AccessLogEntry(caller_id=caller_id, path=path)
        self._session.add(entry)
        await self._session.flush()
        return entry

    async def list_recent(
        self, *, limit: int = 100, caller_id: str | None = None
    ) -> list[AccessLogEntry]:
        # Newest first; id breaks ties between entries written in the same instant.
        stmt = select(AccessLogEntry)
        if caller_id is not None:
            stmt = stmt.where(AccessLogEntry.caller_id == caller_id)
        stmt = stmt.order_by(desc(AccessLogEntry.created_at), desc(AccessLogEntry.id)).limit(limit)
        return list((await self._session.execute(stmt)).scalars().all())

    async def delete_older_than(self, cutoff: datetime) -> int:
        result = await self._session.execute(
            delete(AccessLogEntry).where(AccessLogEntry.created_at < cutoff)
        )
        return result.rowcount


# --- Module Notes -----------------------------------------------------------
# The (caller_id, created_at) index backs `list_recent(caller_id=...)`.
