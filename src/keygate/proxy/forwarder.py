"""
keygate.proxy.forwarder

The request pipeline: authenticate -> resolve -> log -> forward -> relay.

Responsibilities:
- Run the stages strictly in order and stop at the first failure outcome.
- Translate the caller credential into the provider credential on the way out.
- Stream the upstream response back without buffering it.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import httpx
import structlog
from starlette.background import BackgroundTask
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response, StreamingResponse

from keygate.auth.authenticator import Authenticator
from keygate.observability.logging import get_logger
from keygate.proxy.access_log import AccessLogSink
from keygate.proxy.headers import AUTHORIZATION, build_response_headers, build_upstream_headers
from keygate.proxy.resolver import ProviderResolver
from keygate.proxy.results import (
    Failure,
    LookupFailed,
    NotFound,
    Rejected,
    Resolution,
    TransportFailed,
)

log = get_logger(__name__)


def failure_response(failure: Failure) -> Response:
    # Plain text only: no upstream detail, credentials, or tracebacks reach the caller.
    return PlainTextResponse(failure.body, status_code=failure.status_code)


def _has_body(request: Request) -> bool:
    return "content-length" in request.headers or "transfer-encoding" in request.headers


class ForwardingProxy:
    """
    One instance per app; it holds no per-request state, so concurrent requests
    share it freely along with the outbound connection pool in `http`.
    """

    def __init__(
        self,
        *,
        authenticator: Authenticator,
        resolver: ProviderResolver,
        access_log: AccessLogSink,
        http: httpx.AsyncClient,
    ) -> None:
        self._authenticator = authenticator
        self._resolver = resolver
        self._access_log = access_log
        self._http = http

    async def handle(self, request: Request) -> Response:
        path = request.url.path

        identity = await self._authenticator.authenticate(request.headers.get(AUTHORIZATION))
        if isinstance(identity, Rejected):
            log.info("auth_rejected", reason=identity.reason.value)
            return failure_response(identity)
        structlog.contextvars.bind_contextvars(caller_id=identity.caller_id)

        resolution = await self._resolver.resolve(path)
        if isinstance(resolution, NotFound):
            log.info("provider_not_found", provider=resolution.provider_name)
            return failure_response(resolution)
        if isinstance(resolution, LookupFailed):
            return failure_response(resolution)
        structlog.contextvars.bind_contextvars(provider=resolution.provider_name)

        # Logged before forwarding: the attempt is audited even if the upstream is down.
        await self._access_log.record(identity, path)

        upstream = await self._forward(request, resolution)
        if isinstance(upstream, TransportFailed):
            return failure_response(upstream)
        return self._relay(upstream, resolution)

    async def _forward(
        self, request: Request, resolution: Resolution
    ) -> httpx.Response | TransportFailed:
        url = resolution.upstream_url
        if request.url.query:
            url = f"{url}?{request.url.query}"

        try:
            upstream_request = self._http.build_request(
                request.method,
                url,
                headers=build_upstream_headers(
                    request.headers.raw, credential=resolution.credential
                ),
                content=request.stream() if _has_body(request) else None,
            )
            # No retry: a failed attempt is reported, never replayed.
            return await self._http.send(upstream_request, stream=True)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            error = f"{type(e).__name__}: {e}"
            log.error(
                "upstream_transport_error",
                provider=resolution.provider_name,
                upstream_url=resolution.upstream_url,
                error=error,
            )
            return TransportFailed(
                provider_name=resolution.provider_name,
                upstream_url=resolution.upstream_url,
                error=error,
            )

    def _relay(self, upstream: httpx.Response, resolution: Resolution) -> Response:
        log.info(
            "proxied",
            upstream_url=resolution.upstream_url,
            status_code=upstream.status_code,
        )
        response = StreamingResponse(
            self._stream_body(upstream, resolution),
            status_code=upstream.status_code,
            # Also closes the upstream if the caller vanished before streaming began.
            background=BackgroundTask(upstream.aclose),
        )
        response.raw_headers = build_response_headers(upstream.headers.raw)
        return response

    async def _stream_body(
        self, upstream: httpx.Response, resolution: Resolution
    ) -> AsyncIterator[bytes]:
        try:
            if upstream.is_stream_consumed:
                # Transports may hand back a response whose body is already read.
                yield upstream.content
            else:
                # Raw chunks: content-encoding is relayed untouched, like the headers.
                async for chunk in upstream.aiter_raw():
                    yield chunk
        except httpx.HTTPError as e:
            log.error(
                "upstream_stream_error",
                provider=resolution.provider_name,
                upstream_url=resolution.upstream_url,
                error=f"{type(e).__name__}: {e}",
            )
            raise
        finally:
            # Runs on normal completion, upstream errors, and caller disconnects (cancellation).
            await upstream.aclose()


# --- Module Notes -----------------------------------------------------------
# Status codes reach the caller from exactly two places: `failure_response` for
# the outcomes in `keygate.proxy.results`, and the upstream's own status in `_relay`.
