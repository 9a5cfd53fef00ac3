"""
keygate.proxy.headers

Header rewriting for both directions of the proxy.

Responsibilities:
- Request path: copy caller headers, swap in the provider credential, force
  the JSON content type.
- Response path: copy upstream headers as-is, duplicates included.
- Leave connection framing to the transport on either side.
"""

from __future__ import annotations

from collections.abc import Iterable

AUTHORIZATION = "authorization"
CONTENT_TYPE = "content-type"
FORCED_CONTENT_TYPE = "application/json"

# Managed by the transport on each hop; the body is re-framed by httpx/uvicorn.
FRAMING_HEADERS: frozenset[str] = frozenset(
    {
        "host",
        "transfer-encoding",
        "connection",
        "keep-alive",
    }
)

_REWRITTEN: frozenset[str] = frozenset({AUTHORIZATION, CONTENT_TYPE})

RawHeaders = list[tuple[bytes, bytes]]


def _name(raw_name: bytes) -> str:
    return raw_name.decode("latin-1").lower()


def build_upstream_headers(
    request_headers: Iterable[tuple[bytes, bytes]], *, credential: str
) -> RawHeaders:
    """
    Every caller header passes through untouched except:

    - ``Authorization`` becomes ``Bearer <provider credential>``; the caller's
      own credential never leaves the proxy.
    - ``Content-Type`` is always ``application/json``, whatever the caller sent.
    """

    headers: RawHeaders = [
        (name, value)
        for name, value in request_headers
        if _name(name) not in _REWRITTEN and _name(name) not in FRAMING_HEADERS
    ]
    headers.append((AUTHORIZATION.encode("latin-1"), f"Bearer {credential}".encode("latin-1")))
    headers.append((CONTENT_TYPE.encode("latin-1"), FORCED_CONTENT_TYPE.encode("latin-1")))
    return headers


def build_response_headers(upstream_headers: Iterable[tuple[bytes, bytes]]) -> RawHeaders:
    # ASGI wants lower-cased names; values and repeated headers are kept verbatim.
    return [
        (name.lower(), value)
        for name, value in upstream_headers
        if _name(name) not in FRAMING_HEADERS
    ]
