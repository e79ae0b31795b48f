"""API routes."""

from fastapi import APIRouter

from reciters_api.routes import admin, reciters, results

api_router = APIRouter()

# Reciter registry
api_router.include_router(reciters.router, prefix="/v1/reciters", tags=["reciters"])

# Graded results
api_router.include_router(results.router, prefix="/v1/results", tags=["results"])

# Admin endpoints (cache management)
api_router.include_router(admin.router, prefix="/v1/admin", tags=["admin"])
