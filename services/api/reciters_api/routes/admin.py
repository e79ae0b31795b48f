"""Admin endpoints for cache management.

These endpoints are intended for operators (e.g. after bulk imports).
In production, consider adding authentication (API key or admin token).
"""

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from reciters_api.routes.deps import get_cache
from reciters_api.stores.cache import TTLCache

router = APIRouter()
logger = logging.getLogger("uvicorn.error")


class CacheClearResponse(BaseModel):
    """Response from the cache clear endpoint."""

    cleared: int


@router.delete("/cache", response_model=CacheClearResponse)
async def clear_cache(cache: TTLCache = Depends(get_cache)) -> CacheClearResponse:
    """Drop every cached search and stats entry; `cleared` counts unexpired ones."""
    cleared = cache.clear()
    logger.info(f"[admin] cache cleared entries={cleared}")
    return CacheClearResponse(cleared=cleared)
