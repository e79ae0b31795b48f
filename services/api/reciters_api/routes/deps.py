"""FastAPI dependencies for the shared database client and cache.

Both objects are created in the application lifespan and stored on
`app.state`; tests replace them via `app.dependency_overrides`.
"""

from fastapi import Request
from postgrest import AsyncPostgrestClient

from reciters_api.stores.cache import TTLCache


def get_db(request: Request) -> AsyncPostgrestClient:
    db = getattr(request.app.state, "db", None)
    if db is None:
        raise RuntimeError("Database client not initialized.")
    return db


def get_cache(request: Request) -> TTLCache:
    cache = getattr(request.app.state, "cache", None)
    if cache is None:
        raise RuntimeError("Cache not initialized.")
    return cache
