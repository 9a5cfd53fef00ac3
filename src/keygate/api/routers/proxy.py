"""
keygate.api.routers.proxy

Catch-all route handing every other request to the forwarding proxy.

Responsibilities:
- Accept any common HTTP method on any path.
- Delegate to `ForwardingProxy.handle`; no request parsing happens here.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from starlette.responses import Response

from keygate.api.deps import forwarder_from_app
from keygate.proxy.forwarder import ForwardingProxy

router = APIRouter()

PROXY_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


@router.api_route("/{path:path}", methods=PROXY_METHODS, include_in_schema=False)
async def proxy(
    request: Request,
    path: str,
    forwarder: ForwardingProxy = Depends(forwarder_from_app),
) -> Response:
    # `path` is bound only to make the route match; the proxy reads request.url.path.
    return await forwarder.handle(request)
