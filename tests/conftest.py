"""
tests.conftest

Shared fixtures for the proxy and admin test suites.

Responsibilities:
- Point every test at its own SQLite file under tmp_path.
- Boot the FastAPI app (lifespan included) against a mocked upstream.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from dataclasses import dataclass
from pathlib import Path

import httpx
import pytest
import pytest_asyncio

from keygate.admin.registry import RegistryAdmin
from keygate.api.app import create_app
from keygate.db.init_db import init_db
from keygate.db.session import create_engine, create_sessionmaker
from keygate.db.store import Store
from keygate.settings import Settings

UpstreamHandler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        env="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'keygate.db'}",
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def admin(settings: Settings) -> AsyncIterator[RegistryAdmin]:
    engine = create_engine(settings)
    await init_db(engine)
    try:
        yield RegistryAdmin(create_sessionmaker(engine))
    finally:
        await engine.dispose()


@pytest_asyncio.fixture
async def store(settings: Settings) -> AsyncIterator[Store]:
    engine = create_engine(settings)
    await init_db(engine)
    try:
        yield Store(create_sessionmaker(engine))
    finally:
        await engine.dispose()


@dataclass
class RunningProxy:
    client: httpx.AsyncClient
    admin: RegistryAdmin
    store: Store
    upstream_requests: list[httpx.Request]


@asynccontextmanager
async def running_proxy(settings: Settings, handler: UpstreamHandler) -> AsyncIterator[RunningProxy]:
    """
    Serve the app in-process: inbound traffic over ASGITransport, upstream
    traffic into `handler` via MockTransport. Every upstream request is recorded.
    """

    seen: list[httpx.Request] = []

    def recording_handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    app = create_app(settings=settings, upstream_transport=httpx.MockTransport(recording_handler))
    # httpx ASGITransport does not run lifespan events; drive them explicitly.
    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://proxy.test") as client:
            yield RunningProxy(
                client=client,
                admin=RegistryAdmin(create_sessionmaker(app.state.engine)),
                store=app.state.store,
                upstream_requests=seen,
            )


@pytest.fixture
def proxy_factory(
    settings: Settings,
) -> Callable[[UpstreamHandler], AbstractAsyncContextManager[RunningProxy]]:
    # Usage: `async with proxy_factory(handler) as proxy: ...`
    def _factory(handler: UpstreamHandler) -> AbstractAsyncContextManager[RunningProxy]:
        return running_proxy(settings, handler)

    return _factory


@pytest.fixture
def ok_upstream() -> UpstreamHandler:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200, content=b'{"ok":true}', headers={"content-type": "application/json"}
        )

    return handler
