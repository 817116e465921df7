"""Admin endpoints for out-of-band header cache recovery."""

from __future__ import annotations

from fastapi import APIRouter, Request

router = APIRouter(tags=["admin"])


@router.get("/headers")
async def get_header(request: Request, prefix: str = "") -> dict:
    """Return the cached header of a folder prefix."""
    header = await request.app.state.header_cache.get(prefix)
    return {
        "prefix": prefix,
        "header": header.model_dump() if header is not None else None,
    }


@router.delete("/headers")
async def reset_header(request: Request, prefix: str = "") -> dict:
    """Reset a folder prefix back to an empty header."""
    await request.app.state.header_cache.reset(prefix)
    return {"prefix": prefix, "reset": True}
