"""
keygate.db.store

The store capability handed to the proxy components.

Responsibilities:
- Own the session factory and open one short transaction per operation.
- Expose exactly the reads/writes the request path needs.
"""

from __future__ import annotations

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from keygate.db.models import AccessLogEntry, Caller, Provider
from keygate.db.repositories.access_log import AccessLogRepo
from keygate.db.repositories.callers import CallerRepo
from keygate.db.repositories.providers import ProviderRepo


class Store:
    """
    Nothing is cached here: each call reads the current persisted state, so a
    deleted caller or provider is gone for the very next request.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def caller_for_credential(self, credential: str) -> Caller | None:
        async with self._session_factory() as session:
            return await CallerRepo(session).get_by_credential(credential)

    async def provider(self, name: str) -> Provider | None:
        async with self._session_factory() as session:
            return await ProviderRepo(session).get(name)

    async def append_access(self, *, caller_id: str, path: str) -> AccessLogEntry:
        async with self._session_factory() as session:
            entry = await AccessLogRepo(session).add(caller_id=caller_id, path=path)
            await session.commit()
            return entry

    async def ping(self) -> None:
        async with self._session_factory() as session:
            await session.execute(text("SELECT 1"))
