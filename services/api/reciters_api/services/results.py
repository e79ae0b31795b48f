"""Result queries: ranked search, ranked listing, aggregate stats.

Ranking:
1. Sort by grade DESC (done by the database)
2. rank = 1-based position in that order
3. id = raw `no` column

Unlike the other query functions, `search_results` defaults to
ErrorPolicy.RAISE and raises SearchError with a message for end users.
"""

import logging
import math

import httpx
from postgrest import APIError, AsyncPostgrestClient
from pydantic import ValidationError

from reciters_api.models import Result, rank_rows
from reciters_api.schemas import ResultsStats
from reciters_api.settings import get_settings
from reciters_api.services.errors import ErrorPolicy, SearchError, handle_failure
from reciters_api.services.reciters import count_categories, response_rows

logger = logging.getLogger("uvicorn.error")


def _table() -> str:
    return get_settings().results_table


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward +infinity (2.5 -> 3, -2.5 -> -2)."""
    return math.floor(value + 0.5)


def _grade(value: object) -> int | float:
    """Missing grades count as 0; numeric strings are parsed, ints stay ints."""
    if not value:
        return 0
    if isinstance(value, (int, float)):
        return value
    return float(value)


async def search_results(
    db: AsyncPostgrestClient,
    term: str,
    *,
    on_error: ErrorPolicy = ErrorPolicy.RAISE,
) -> list[Result]:
    """Find results whose name contains the trimmed term, ranked by grade.

    Raises:
        SearchError: On failure when `on_error` is RAISE (the default).
    """
    term = term.strip()
    logger.debug(f"Searching results for: {term!r}")

    try:
        response = await (
            db.table(_table())
            .select("*")
            .ilike("name", f"%{term}%")
            .order("grade", desc=True)
            .execute()
        )

        rows = response_rows(response.data)
        if not rows:
            logger.info(f"No results found for: {term!r}")
            return []

        ranked = rank_rows(rows)
    except (APIError, httpx.HTTPError, ValidationError) as e:
        return handle_failure(
            "searching results",
            e,
            on_error=on_error,
            default=[],
            error_cls=SearchError,
        )

    logger.debug(f"Result search {term!r}: {len(ranked)} rows")
    return ranked


async def get_all_results(
    db: AsyncPostgrestClient,
    *,
    on_error: ErrorPolicy = ErrorPolicy.FALLBACK,
) -> list[Result]:
    """All results ranked by grade descending."""
    try:
        response = await db.table(_table()).select("*").order("grade", desc=True).execute()
        return rank_rows(response_rows(response.data))
    except (APIError, httpx.HTTPError, ValidationError) as e:
        return handle_failure("fetching all results", e, on_error=on_error, default=[])


async def get_results_stats(
    db: AsyncPostgrestClient,
    *,
    on_error: ErrorPolicy = ErrorPolicy.FALLBACK,
) -> ResultsStats:
    """Count, rounded mean grade, top grade and per-category counts.

    Missing grades count as 0.
    """
    try:
        response = await db.table(_table()).select("grade, category").execute()
        rows = response_rows(response.data)
        grades = [_grade(row.get("grade")) for row in rows]
    except (APIError, httpx.HTTPError, TypeError, ValueError) as e:
        return handle_failure("fetching results stats", e, on_error=on_error, default=ResultsStats())

    total = len(grades)
    return ResultsStats(
        total_students=total,
        average_grade=round_half_up(sum(grades) / total) if total else 0,
        top_grade=max(grades) if total else 0,
        categories_count=count_categories(rows),
    )
