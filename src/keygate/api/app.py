"""
keygate.api.app

FastAPI app factory for the keygate proxy server.

Responsibilities:
- Build the FastAPI application and register routers/middleware.
- Initialize and dispose shared infrastructure (DB engine, store, outbound HTTP pool).
- Provide a single composition root where the proxy components are wired together.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from keygate import __version__
from keygate.api.routers.health import router as health_router
from keygate.api.routers.proxy import router as proxy_router
from keygate.auth.authenticator import Authenticator
from keygate.db.init_db import init_db
from keygate.db.session import create_engine, create_sessionmaker
from keygate.db.store import Store
from keygate.observability.logging import configure_logging, get_logger
from keygate.observability.middleware import RequestContextMiddleware
from keygate.proxy.access_log import AccessLogSink
from keygate.proxy.forwarder import ForwardingProxy
from keygate.proxy.resolver import ProviderResolver
from keygate.settings import Settings

log = get_logger(__name__)


def create_app(
    *,
    settings: Settings,
    upstream_transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """
    `upstream_transport` replaces the network transport of the outbound client
    (tests pass an `httpx.MockTransport`); None means real connections.
    """

    configure_logging(service_name=settings.service_name, level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        engine = create_engine(settings)
        # create_all is idempotent; keygate-admin may already have created the tables.
        await init_db(engine)
        store = Store(create_sessionmaker(engine))

        # One pooled client for all upstream calls. timeout=None matches the
        # "no proxy-imposed timeout" default.
        http = httpx.AsyncClient(
            transport=upstream_transport,
            timeout=httpx.Timeout(settings.upstream_timeout_seconds),
            follow_redirects=False,
        )

        app.state.engine = engine
        app.state.store = store
        app.state.http = http
        app.state.forwarder = ForwardingProxy(
            authenticator=Authenticator(store),
            resolver=ProviderResolver(store),
            access_log=AccessLogSink(store, timeout_seconds=settings.access_log_timeout_seconds),
            http=http,
        )
        try:
            yield
        finally:
            await http.aclose()
            await engine.dispose()
            log.info("shutdown")

    # Every path outside the health probes belongs to a provider, so no docs routes.
    app = FastAPI(
        title="keygate",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )

    app.add_middleware(RequestContextMiddleware)
    app.include_router(health_router, tags=["health"])
    # Must stay last: the proxy route matches every path.
    app.include_router(proxy_router)

    return app


# --- Module Notes -----------------------------------------------------------
# Components receive the `Store` explicitly; nothing outside this factory reaches
# into app.state except the dependency helpers in `keygate.api.deps`.
