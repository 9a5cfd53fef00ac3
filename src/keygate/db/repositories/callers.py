from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from keygate.db.models import Caller


class CallerRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, *, caller_id: str, display_name: str, credential: str) -> Caller:
        caller = Caller(id=caller_id, display_name=display_name, credential=credential)
        self._session.add(caller)
        await self._session.flush()
        return caller

    async def get(self, caller_id: str) -> Caller | None:
        return await self._session.get(Caller, caller_id)

    async def get_by_credential(self, credential: str) -> Caller | None:
        # Exact match; the unique index guarantees at most one row.
        stmt = select(Caller).where(Caller.credential == credential)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def list_all(self) -> list[Caller]:
        stmt = select(Caller).order_by(Caller.id)
        return list((await self._session.execute(stmt)).scalars().all())

    async def delete(self, caller_id: str) -> bool:
        result = await self._session.execute(delete(Caller).where(Caller.id == caller_id))
        return result.rowcount > 0
