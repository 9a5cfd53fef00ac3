"""
keygate.admin.registry

Registry administration service (transaction owner for keygate-admin).

Responsibilities:
- Validate and create callers (issuing their credential) and providers.
- List and delete registry entries.
- Read and prune the access log.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime, timedelta

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from keygate.db.models import AccessLogEntry, Caller, Provider
from keygate.db.repositories.access_log import AccessLogRepo
from keygate.db.repositories.callers import CallerRepo
from keygate.db.repositories.providers import ProviderRepo
from keygate.observability.logging import get_logger
from keygate.proxy.resolver import RESERVED_NAMES

log = get_logger(__name__)


class RegistryError(Exception):
    pass


def issue_credential(caller_id: str) -> str:
    """
    `alice@example.com` -> `alice-<32 hex chars>`. The readable prefix makes a
    leaked key easy to attribute; the uuid4 part is what makes it secret.
    """

    local, at, _ = caller_id.partition("@")
    if not at or not local:
        raise RegistryError("please use the caller's email as user id")
    return f"{local}-{uuid.uuid4().hex}"


def validate_provider_name(name: str) -> None:
    if not name:
        raise RegistryError("provider name must not be empty")
    if "/" in name:
        raise RegistryError("provider name must not contain '/'")
    if name in RESERVED_NAMES:
        raise RegistryError(f"provider name {name!r} is reserved")


class RegistryAdmin:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def add_caller(self, *, caller_id: str, display_name: str) -> Caller:
        credential = issue_credential(caller_id)
        async with self._session_factory() as session:
            try:
                caller = await CallerRepo(session).create(
                    caller_id=caller_id, display_name=display_name, credential=credential
                )
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                raise RegistryError(f"caller {caller_id!r} already exists") from e
        log.info("caller_added", caller_id=caller_id)
        return caller

    async def list_callers(self) -> list[Caller]:
        async with self._session_factory() as session:
            return await CallerRepo(session).list_all()

    async def delete_caller(self, caller_id: str) -> bool:
        # Access-log entries for the caller are kept for audit.
        async with self._session_factory() as session:
            deleted = await CallerRepo(session).delete(caller_id)
            await session.commit()
        log.info("caller_deleted", caller_id=caller_id, found=deleted)
        return deleted

    async def add_provider(self, *, name: str, base_url: str, credential: str) -> Provider:
        validate_provider_name(name)
        if not base_url:
            raise RegistryError("provider api url must not be empty")
        async with self._session_factory() as session:
            try:
                provider = await ProviderRepo(session).create(
                    name=name, base_url=base_url, credential=credential
                )
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                raise RegistryError(f"provider {name!r} already exists") from e
        log.info("provider_added", provider=name, base_url=base_url)
        return provider

    async def list_providers(self) -> list[Provider]:
        async with self._session_factory() as session:
            return await ProviderRepo(session).list_all()

    async def delete_provider(self, name: str) -> bool:
        async with self._session_factory() as session:
            deleted = await ProviderRepo(session).delete(name)
            await session.commit()
        log.info("provider_deleted", provider=name, found=deleted)
        return deleted

    async def recent_access(
        self, *, limit: int = 100, caller_id: str | None = None
    ) -> list[AccessLogEntry]:
        async with self._session_factory() as session:
            return await AccessLogRepo(session).list_recent(limit=limit, caller_id=caller_id)

    async def prune_access(self, *, days: int, now: datetime | None = None) -> int:
        if days <= 0:
            raise RegistryError("days must be a positive integer")
        now = now or datetime.now(tz=UTC).replace(tzinfo=None)
        cutoff = now - timedelta(days=days)
        async with self._session_factory() as session:
            deleted = await AccessLogRepo(session).delete_older_than(cutoff)
            await session.commit()
        log.info("access_log_pruned", days=days, deleted=deleted)
        return deleted


# --- Module Notes -----------------------------------------------------------
# Timestamps are naive UTC throughout, matching `keygate.db.models._utcnow`.
