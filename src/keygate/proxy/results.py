"""
keygate.proxy.results

Outcome types returned by the proxy pipeline stages.

Responsibilities:
- Give each failure a caller-facing status code and a plain, non-leaking body.
- Keep the success payloads (`Resolution`) typed and immutable.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import ClassVar

from starlette.status import (
    HTTP_401_UNAUTHORIZED,
    HTTP_404_NOT_FOUND,
    HTTP_500_INTERNAL_SERVER_ERROR,
)


class RejectionReason(enum.StrEnum):
    missing = "missing_credential"
    invalid = "invalid_credential"
    internal = "internal_error"


@dataclass(frozen=True, slots=True)
class Rejected:
    reason: RejectionReason

    status_code: ClassVar[int] = HTTP_401_UNAUTHORIZED
    body: ClassVar[str] = "Unauthorized"


@dataclass(frozen=True, slots=True)
class NotFound:
    provider_name: str

    status_code: ClassVar[int] = HTTP_404_NOT_FOUND
    body: ClassVar[str] = "Provider not found"


@dataclass(frozen=True, slots=True)
class LookupFailed:
    provider_name: str
    error: str

    status_code: ClassVar[int] = HTTP_500_INTERNAL_SERVER_ERROR
    body: ClassVar[str] = "Internal Server Error"


@dataclass(frozen=True, slots=True)
class TransportFailed:
    provider_name: str
    upstream_url: str
    error: str

    status_code: ClassVar[int] = HTTP_500_INTERNAL_SERVER_ERROR
    body: ClassVar[str] = "Internal Server Error"


Failure = Rejected | NotFound | LookupFailed | TransportFailed


@dataclass(frozen=True, slots=True)
class Resolution:
    provider_name: str
    base_url: str
    credential: str
    remainder: str

    def __repr__(self) -> str:
        # Keep the upstream credential out of logs and tracebacks.
        return (
            f"Resolution(provider_name={self.provider_name!r}, base_url={self.base_url!r}, "
            f"remainder={self.remainder!r})"
        )

    @property
    def upstream_url(self) -> str:
        # Plain concatenation: duplicate slashes are preserved, not normalized.
        return self.base_url + self.remainder


# --- Module Notes -----------------------------------------------------------
# `body` strings are the whole caller-visible payload for failures; diagnostic
# detail (`error`, `upstream_url`) only ever goes to the structured log.
