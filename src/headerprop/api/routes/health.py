"""Health check endpoints."""

from __future__ import annotations

import asyncio

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy"}


@router.get("/ready")
async def ready(request: Request):
    if not await asyncio.to_thread(request.app.state.cache_backend.ping):
        return JSONResponse(status_code=503, content={"status": "unavailable", "cache": "down"})
    return {"status": "ready"}
