"""
keygate.observability.middleware

ASGI middleware for request-scoped logging context.

Responsibilities:
- Generate/propagate request IDs and echo them on the response.
- Bind request metadata into structlog contextvars.
"""

from __future__ import annotations

import uuid

import structlog
from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

REQUEST_ID_HEADER = "x-request-id"


class RequestContextMiddleware:
    """
    Plain ASGI rather than `BaseHTTPMiddleware`: streamed response bodies and
    client disconnects reach the proxy endpoint directly.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = Headers(scope=scope).get(REQUEST_ID_HEADER) or str(uuid.uuid4())

        async def send_with_request_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                # A relayed upstream x-request-id is passed through unchanged.
                if REQUEST_ID_HEADER not in headers:
                    headers[REQUEST_ID_HEADER] = request_id
            await send(message)

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            path=scope["path"],
            method=scope["method"],
        )
        try:
            await self.app(scope, receive, send_with_request_id)
        finally:
            # Avoid leaking context across requests under async concurrency.
            structlog.contextvars.clear_contextvars()


# --- Module Notes -----------------------------------------------------------
# The proxy binds `caller_id` and `provider` into the same context once it knows them.
# A caller-supplied x-request-id is also forwarded upstream with the other headers.
