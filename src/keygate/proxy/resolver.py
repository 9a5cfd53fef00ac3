"""
keygate.proxy.resolver

Path-prefix routing to registered providers.

Responsibilities:
- Split a request path into provider name and remainder.
- Look the provider up in the registry on every call.
"""

from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError

from keygate.db.store import Store
from keygate.observability.logging import get_logger
from keygate.proxy.results import LookupFailed, NotFound, Resolution

log = get_logger(__name__)

# Served by the health router ahead of the catch-all proxy route.
RESERVED_NAMES: frozenset[str] = frozenset({"healthz", "readyz"})


def split_path(path: str) -> tuple[str, str]:
    """
    `/p/x/y` -> (`p`, `/x/y`); `/p` -> (`p`, ``); `/` -> (``, ``).
    """

    rest = path[1:] if path.startswith("/") else path
    name, sep, tail = rest.partition("/")
    return name, sep + tail


class ProviderResolver:
    def __init__(self, store: Store) -> None:
        self._store = store

    async def resolve(self, path: str) -> Resolution | NotFound | LookupFailed:
        name, remainder = split_path(path)
        if not name:
            # Nothing can be registered under an empty name; skip the lookup.
            return NotFound(provider_name=name)

        try:
            provider = await self._store.provider(name)
        except (SQLAlchemyError, OSError) as e:
            log.error("provider_lookup_failed", provider=name, error=str(e))
            return LookupFailed(provider_name=name, error=str(e))

        if provider is None:
            return NotFound(provider_name=name)
        return Resolution(
            provider_name=provider.name,
            base_url=provider.base_url,
            credential=provider.credential,
            remainder=remainder,
        )
