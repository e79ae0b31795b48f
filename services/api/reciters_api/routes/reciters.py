"""Reciter endpoints.

GET  /v1/reciters                      - paginated listing
GET  /v1/reciters/search?q=            - name search (cached 5 minutes)
GET  /v1/reciters/stats                - registration stats (cached 5 minutes)
GET  /v1/reciters/exists?name=         - advisory existence check
GET  /v1/reciters/category/{category}  - listing by category
POST /v1/reciters                      - register a reciter

Routers are thin: call services for the queries.
"""

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from postgrest import AsyncPostgrestClient

from reciters_api.models import NewReciter, Reciter
from reciters_api.routes.deps import get_cache, get_db
from reciters_api.schemas import ReciterExists, RecitersPage, RegistrationStats
from reciters_api.services.reciters import (
    add_reciter,
    check_reciter_exists,
    get_reciters,
    get_reciters_by_category,
    get_registration_stats_with_cache,
    search_reciters_with_cache,
)
from reciters_api.stores.cache import TTLCache

router = APIRouter()


@router.get("", response_model=RecitersPage)
async def list_reciters(
    page: int = Query(default=1, ge=1, description="1-based page number"),
    limit: int = Query(default=50, ge=1, le=500, description="Page size"),
    db: AsyncPostgrestClient = Depends(get_db),
) -> RecitersPage:
    return await get_reciters(db, page=page, limit=limit)


@router.get("/search", response_model=list[Reciter])
async def search(
    q: str = Query(default="", max_length=200, description="Name fragment"),
    db: AsyncPostgrestClient = Depends(get_db),
    cache: TTLCache = Depends(get_cache),
) -> list[Reciter]:
    return await search_reciters_with_cache(db, cache, q)


@router.get("/stats", response_model=RegistrationStats)
async def registration_stats(
    db: AsyncPostgrestClient = Depends(get_db),
    cache: TTLCache = Depends(get_cache),
) -> RegistrationStats:
    return await get_registration_stats_with_cache(db, cache)


@router.get("/exists", response_model=ReciterExists)
async def reciter_exists(
    name: str = Query(min_length=1, max_length=200),
    db: AsyncPostgrestClient = Depends(get_db),
) -> ReciterExists:
    return ReciterExists(name=name, exists=await check_reciter_exists(db, name))


@router.get("/category/{category}", response_model=list[Reciter])
async def by_category(
    category: str = Path(min_length=1, max_length=100),
    db: AsyncPostgrestClient = Depends(get_db),
) -> list[Reciter]:
    return await get_reciters_by_category(db, category)


@router.post("", response_model=Reciter, status_code=status.HTTP_201_CREATED)
async def register_reciter(
    reciter: NewReciter,
    db: AsyncPostgrestClient = Depends(get_db),
) -> Reciter:
    """Register a reciter unless one with the same name (ignoring case) exists.

    Raises:
        HTTPException 409: A reciter with this name is already registered.
        HTTPException 502: The database did not store the row.
    """
    if await check_reciter_exists(db, reciter.name):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Reciter already registered: {reciter.name}",
        )

    created = await add_reciter(db, reciter)
    if created is None:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Reciter could not be saved",
        )
    return created
