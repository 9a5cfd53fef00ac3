"""
keygate.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Provide liveness probe (`/healthz`).
- Provide readiness probe (`/readyz`) with store connectivity validation.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from keygate.api.deps import store_from_app
from keygate.db.store import Store

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(store: Store = Depends(store_from_app)) -> dict[str, str]:
    await store.ping()
    return {"status": "ready"}
