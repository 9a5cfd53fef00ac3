"""
tests.test_resolver

Provider name parsing and registry lookup.
"""

from __future__ import annotations

import pytest
from sqlalchemy.exc import OperationalError

from keygate.admin.registry import RegistryAdmin
from keygate.db.store import Store
from keygate.proxy.resolver import ProviderResolver, split_path
from keygate.proxy.results import LookupFailed, NotFound, Resolution


class _CountingStore:
    def __init__(self) -> None:
        self.lookups: list[str] = []

    async def provider(self, name: str):
        self.lookups.append(name)
        return None


class _BrokenStore:
    async def provider(self, name: str):
        raise OperationalError("SELECT ...", {}, Exception("database is locked"))


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("/p/x/y", ("p", "/x/y")),
        ("/p/", ("p", "/")),
        ("/p", ("p", "")),
        ("/p//x", ("p", "//x")),
        ("/", ("", "")),
        ("", ("", "")),
        ("//x", ("", "/x")),
        ("p/x", ("p", "/x")),
    ],
)
def test_split_path(path: str, expected: tuple[str, str]) -> None:
    assert split_path(path) == expected


@pytest.mark.asyncio
async def test_resolves_registered_provider(admin: RegistryAdmin, store: Store) -> None:
    await admin.add_provider(name="p", base_url="https://api.example.com", credential="sk-up")

    result = await ProviderResolver(store).resolve("/p/x/y")

    assert result == Resolution(
        provider_name="p",
        base_url="https://api.example.com",
        credential="sk-up",
        remainder="/x/y",
    )
    assert result.upstream_url == "https://api.example.com/x/y"


@pytest.mark.asyncio
async def test_bare_provider_path_has_empty_remainder(admin: RegistryAdmin, store: Store) -> None:
    await admin.add_provider(name="p", base_url="https://api.example.com/v1", credential="k")

    result = await ProviderResolver(store).resolve("/p")

    assert isinstance(result, Resolution)
    assert result.remainder == ""
    assert result.upstream_url == "https://api.example.com/v1"


@pytest.mark.asyncio
async def test_unknown_provider_is_not_found(admin: RegistryAdmin, store: Store) -> None:
    await admin.add_provider(name="p", base_url="https://api.example.com", credential="k")
    resolver = ProviderResolver(store)

    assert await resolver.resolve("/unknown/foo") == NotFound(provider_name="unknown")
    # Names are matched exactly, not by prefix.
    assert await resolver.resolve("/pp/foo") == NotFound(provider_name="pp")


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["", "/", "//x"])
async def test_empty_segment_is_not_found_without_lookup(path: str) -> None:
    store = _CountingStore()

    result = await ProviderResolver(store).resolve(path)  # type: ignore[arg-type]

    assert isinstance(result, NotFound)
    assert store.lookups == []


@pytest.mark.asyncio
async def test_store_failure_is_lookup_failure() -> None:
    result = await ProviderResolver(_BrokenStore()).resolve("/p/x")  # type: ignore[arg-type]

    assert isinstance(result, LookupFailed)
    assert result.status_code == 500


def test_resolution_repr_hides_credential() -> None:
    resolution = Resolution(
        provider_name="p", base_url="https://x", credential="sk-secret", remainder="/a"
    )
    assert "sk-secret" not in repr(resolution)
