"""Reciter queries: search, pagination, category listing, registration stats.

Every function issues its request(s) against the `reciters` table and
normalizes the response. Failures are logged and, under the default
ErrorPolicy.FALLBACK, turned into an empty/zero value:
- lists -> []
- page -> {data: [], count: 0, hasMore: false}
- stats -> zeros
- insert -> None
- existence check -> False

Null `data`/`count` on success is treated the same as "no rows".
"""

import copy
from datetime import datetime, timedelta, timezone
import logging
from typing import Any

import httpx
from postgrest import APIError, AsyncPostgrestClient, CountMethod
from pydantic import ValidationError

from reciters_api.models import NewReciter, Reciter
from reciters_api.schemas import RecitersPage, RegistrationStats
from reciters_api.settings import get_settings
from reciters_api.services.errors import ErrorPolicy, handle_failure
from reciters_api.stores.cache import TTLCache

logger = logging.getLogger("uvicorn.error")

# Cache keys
PREFIX_SEARCH = "search_"
KEY_REGISTRATION_STATS = "registration_stats"

RECENT_REGISTRATION_WINDOW = timedelta(days=7)


def _table() -> str:
    return get_settings().reciters_table


def _escape_like(value: str) -> str:
    """Escape LIKE wildcards (`%`, `_`, `\\`) in a pattern.

    PostgREST also reads `*` as `%` and offers no escape for it, so callers
    that need an exact match must re-check the returned names.
    """
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _iso_utc(moment: datetime) -> str:
    """UTC timestamp with millisecond precision and a "Z" suffix."""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def response_rows(data: Any) -> list[dict]:
    return data if isinstance(data, list) else []


def count_categories(rows: list[dict]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for row in rows:
        category = row.get("category")
        if category:
            key = str(category)
            counts[key] = counts.get(key, 0) + 1
    return counts


async def search_reciters(
    db: AsyncPostgrestClient,
    term: str,
    *,
    on_error: ErrorPolicy = ErrorPolicy.FALLBACK,
) -> list[Reciter]:
    """Find reciters whose name contains `term` (case-insensitive), sorted by name."""
    try:
        response = await (
            db.table(_table())
            .select("*")
            .ilike("name", f"%{term}%")
            .order("name")
            .execute()
        )
        return [Reciter.model_validate(row) for row in response_rows(response.data)]
    except (APIError, httpx.HTTPError, ValidationError) as e:
        return handle_failure("searching reciters", e, on_error=on_error, default=[])


async def get_reciters(
    db: AsyncPostgrestClient,
    page: int = 1,
    limit: int = 50,
    *,
    on_error: ErrorPolicy = ErrorPolicy.FALLBACK,
) -> RecitersPage:
    """Get one page of reciters sorted by name, with the total count.

    Args:
        db: Database client.
        page: 1-based page number.
        limit: Page size.

    Returns:
        RecitersPage; `has_more` is `count > page * limit`.
    """
    start = (page - 1) * limit
    end = start + limit - 1

    try:
        response = await (
            db.table(_table())
            .select("*", count=CountMethod.exact)
            .range(start, end)
            .order("name")
            .execute()
        )
        count = response.count or 0
        return RecitersPage(
            data=[Reciter.model_validate(row) for row in response_rows(response.data)],
            count=count,
            has_more=count > page * limit,
        )
    except (APIError, httpx.HTTPError, ValidationError) as e:
        return handle_failure("fetching reciters", e, on_error=on_error, default=RecitersPage())


async def get_reciters_by_category(
    db: AsyncPostgrestClient,
    category: str,
    *,
    on_error: ErrorPolicy = ErrorPolicy.FALLBACK,
) -> list[Reciter]:
    """List reciters in exactly `category`, sorted by name."""
    try:
        response = await (
            db.table(_table())
            .select("*")
            .eq("category", category)
            .order("name")
            .execute()
        )
        return [Reciter.model_validate(row) for row in response_rows(response.data)]
    except (APIError, httpx.HTTPError, ValidationError) as e:
        return handle_failure("fetching reciters by category", e, on_error=on_error, default=[])


async def get_registration_stats(
    db: AsyncPostgrestClient,
    *,
    now: datetime | None = None,
    on_error: ErrorPolicy = ErrorPolicy.FALLBACK,
) -> RegistrationStats:
    """Count reciters overall, per category, and registered in the last 7 days.

    Issues three requests in sequence: a head-only total count, the non-null
    category column, and a head-only count of rows created since now - 7 days.
    """
    now = now or datetime.now(timezone.utc)
    week_ago = now - RECENT_REGISTRATION_WINDOW

    try:
        total = await db.table(_table()).select("*", count=CountMethod.exact, head=True).execute()

        categories = await (
            db.table(_table())
            .select("category")
            .not_.is_("category", None)
            .execute()
        )

        recent = await (
            db.table(_table())
            .select("*", count=CountMethod.exact, head=True)
            .gte("created_at", _iso_utc(week_ago))
            .execute()
        )
    except (APIError, httpx.HTTPError) as e:
        return handle_failure(
            "fetching registration stats", e, on_error=on_error, default=RegistrationStats()
        )

    return RegistrationStats(
        total_reciters=total.count or 0,
        categories_count=count_categories(response_rows(categories.data)),
        recent_registrations=recent.count or 0,
    )


async def add_reciter(
    db: AsyncPostgrestClient,
    reciter: NewReciter,
    *,
    on_error: ErrorPolicy = ErrorPolicy.FALLBACK,
) -> Reciter | None:
    """Insert one reciter and return the stored row (None on failure)."""
    try:
        response = await db.table(_table()).insert(reciter.to_row()).execute()
        rows = response_rows(response.data)
        if not rows:
            # A successful insert with no representation; nothing to return.
            return None
        created = Reciter.model_validate(rows[0])
    except (APIError, httpx.HTTPError, ValidationError) as e:
        return handle_failure("adding reciter", e, on_error=on_error, default=None)

    logger.info(f"Added reciter id={created.id} name={created.name!r}")
    return created


async def check_reciter_exists(
    db: AsyncPostgrestClient,
    name: str,
    *,
    on_error: ErrorPolicy = ErrorPolicy.FALLBACK,
) -> bool:
    """Check whether a reciter with this exact name exists, ignoring case.

    The gateway narrows candidates with ILIKE; the exact comparison happens
    here because `*` in the name still acts as a wildcard there.
    Advisory only: nothing prevents a concurrent insert of the same name.
    """
    try:
        response = await (
            db.table(_table())
            .select("id, name")
            .ilike("name", _escape_like(name))
            .execute()
        )
    except (APIError, httpx.HTTPError) as e:
        return handle_failure("checking reciter existence", e, on_error=on_error, default=False)

    wanted = name.casefold()
    return any(str(row.get("name") or "").casefold() == wanted for row in response_rows(response.data))


# ============================================================
# Cached variants
# ============================================================
# Hits hand back a deep copy so callers cannot edit what the cache holds.


async def search_reciters_with_cache(
    db: AsyncPostgrestClient,
    cache: TTLCache,
    term: str,
) -> list[Reciter]:
    """`search_reciters` memoized under "search_<lowercased term>"."""
    cache_key = f"{PREFIX_SEARCH}{term.lower()}"
    cached = cache.get(cache_key)
    if cached is not None:
        logger.debug(f"Reciter search cache HIT for {cache_key!r}")
        return copy.deepcopy(cached)

    results = await search_reciters(db, term)
    cache.set(cache_key, copy.deepcopy(results))
    return results


async def get_registration_stats_with_cache(
    db: AsyncPostgrestClient,
    cache: TTLCache,
) -> RegistrationStats:
    """`get_registration_stats` memoized under a constant key."""
    cached = cache.get(KEY_REGISTRATION_STATS)
    if cached is not None:
        logger.debug("Registration stats cache HIT")
        return cached.model_copy(deep=True)

    stats = await get_registration_stats(db)
    cache.set(KEY_REGISTRATION_STATS, stats.model_copy(deep=True))
    return stats
