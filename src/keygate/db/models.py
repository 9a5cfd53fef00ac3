"""
keygate.db.models

Persistence schema shared by the proxy and the admin CLI.

Responsibilities:
- Define ORM models for the registry and the audit trail:
  - Caller: registered consumer and its issued credential
  - Provider: upstream target reachable under a path prefix
  - AccessLogEntry: append-only record of proxied requests
"""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from keygate.db.base import Base


def _utcnow() -> datetime:
    # Persist naive UTC timestamps; SQLite has no tz-aware column type.
    return datetime.now(tz=UTC).replace(tzinfo=None)


class Caller(Base):
    __tablename__ = "callers"

    # Email-like external identifier, e.g. "alice@example.com".
    id: Mapped[str] = mapped_column(String(320), primary_key=True)
    display_name: Mapped[str] = mapped_column(String(256), nullable=False)
    credential: Mapped[str] = mapped_column(String(256), nullable=False, unique=True, index=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)


class Provider(Base):
    __tablename__ = "providers"

    # First path segment used for routing; never contains "/".
    name: Mapped[str] = mapped_column(String(128), primary_key=True)
    base_url: Mapped[str] = mapped_column(Text, nullable=False)
    credential: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)


class AccessLogEntry(Base):
    __tablename__ = "access_log"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Not a foreign key: entries outlive the caller they reference.
    caller_id: Mapped[str] = mapped_column(String(320), nullable=False, index=True)
    path: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, index=True)

    __table_args__ = (Index("ix_access_log_caller_created", "caller_id", "created_at"),)


# --- Module Notes -----------------------------------------------------------
# Credentials are stored as issued. Hashing them would change the exact-match
# lookup contract the authenticator relies on.
