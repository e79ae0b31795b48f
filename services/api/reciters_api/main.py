"""FastAPI application entry point.

Reciters API - registry search, pagination and graded result leaderboards.
"""

from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from reciters_api.routes import api_router
from reciters_api.schemas import ErrorResponse
from reciters_api.services.errors import DataAccessError
from reciters_api.settings import get_settings
from reciters_api.stores.cache import TTLCache
from reciters_api.stores.supabase import client_from_settings

logger = logging.getLogger("uvicorn.error")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Creates the database client and the process-wide cache on startup,
    closes the client on shutdown.
    """
    settings = get_settings()

    if not settings.supabase_key:
        logger.warning("SUPABASE_KEY is not set - requests will be anonymous")

    app.state.db = client_from_settings(settings)
    app.state.cache = TTLCache()
    logger.info(f"Database gateway configured: {settings.rest_url}")

    yield

    await app.state.db.aclose()
    app.state.cache.clear()


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Reciter registry and results API",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(DataAccessError)
    async def data_access_exception_handler(request: Request, exc: DataAccessError) -> JSONResponse:
        """Failed queries that chose to raise: 502 with a displayable message."""
        body = ErrorResponse.build(
            code=exc.code,
            message=str(exc),
            detail={"operation": exc.operation} if settings.debug else None,
        )
        return JSONResponse(status_code=502, content=body.model_dump())

    # Exception handler for structured error format
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Global exception handler returning structured error format."""
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        body = ErrorResponse.build(
            code="INTERNAL_ERROR",
            message=str(exc) if settings.debug else "Internal server error",
        )
        return JSONResponse(status_code=500, content=body.model_dump())

    # Health check endpoint
    @app.get("/health", tags=["health"])
    async def health_check() -> dict[str, bool]:
        """Health check endpoint."""
        return {"ok": True}

    # Include API routes
    app.include_router(api_router)

    return app


# Application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "reciters_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
