from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from keygate.db.models import Provider


class ProviderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, *, name: str, base_url: str, credential: str) -> Provider:
        provider = Provider(name=name, base_url=base_url, credential=credential)
        self._session.add(provider)
        await self._session.flush()
        return provider

    async def get(self, name: str) -> Provider | None:
        return await self._session.get(Provider, name)

    async def list_all(self) -> list[Provider]:
        stmt = select(Provider).order_by(Provider.name)
        return list((await self._session.execute(stmt)).scalars().all())

    async def delete(self, name: str) -> bool:
        result = await self._session.execute(delete(Provider).where(Provider.name == name))
        return result.rowcount > 0
