"""Result endpoints.

GET /v1/results?q=     - ranked results (filtered by name when q is given)
GET /v1/results/stats  - aggregate grade statistics

A failed search raises SearchError, rendered by the app's DataAccessError
handler as a 502 with a message suitable for display.
"""

from fastapi import APIRouter, Depends, Query
from postgrest import AsyncPostgrestClient

from reciters_api.models import Result
from reciters_api.routes.deps import get_db
from reciters_api.schemas import ResultsStats
from reciters_api.services.results import get_all_results, get_results_stats, search_results

router = APIRouter()


@router.get("", response_model=list[Result])
async def list_results(
    q: str | None = Query(default=None, max_length=200, description="Name fragment"),
    db: AsyncPostgrestClient = Depends(get_db),
) -> list[Result]:
    if q is not None and q.strip():
        return await search_results(db, q)
    return await get_all_results(db)


@router.get("/stats", response_model=ResultsStats)
async def results_stats(db: AsyncPostgrestClient = Depends(get_db)) -> ResultsStats:
    return await get_results_stats(db)
