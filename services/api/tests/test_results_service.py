"""Tests for ranked result queries and grade statistics."""

import httpx
import pytest

from reciters_api.services.errors import SEARCH_FAILED_MESSAGE, ErrorPolicy, SearchError
from reciters_api.services.results import (
    get_all_results,
    get_results_stats,
    round_half_up,
    search_results,
)


@pytest.fixture
def leaderboard(gateway):
    gateway.tables["reciterResults"] = [
        {"no": 11, "name": "Ahmad Ali", "category": 1, "grade": 70},
        {"no": 12, "name": "Sara Ali", "category": "full", "grade": 95},
        {"no": 13, "name": "Yusuf Hamdan", "category": "full", "grade": 80},
    ]
    return gateway


class TestSearchResults:
    @pytest.mark.asyncio
    async def test_ranks_by_grade_descending(self, leaderboard, db):
        ranked = await search_results(db, "")

        assert [(r.grade, r.rank) for r in ranked] == [(95, 1), (80, 2), (70, 3)]
        assert [r.id for r in ranked] == [12, 13, 11]
        assert all(r.id == r.no for r in ranked)

    @pytest.mark.asyncio
    async def test_term_is_trimmed_and_ranks_restart(self, leaderboard, db):
        ranked = await search_results(db, "  ali ")

        assert leaderboard.requests[0].url.params["name"] == "ilike.%ali%"
        assert [(r.name, r.rank) for r in ranked] == [("Sara Ali", 1), ("Ahmad Ali", 2)]

    @pytest.mark.asyncio
    async def test_normalizes_missing_fields(self, gateway, db):
        gateway.tables["reciterResults"] = [{"no": 1, "name": None, "category": None, "grade": None}]

        (only,) = await get_all_results(db)

        assert only.name == ""
        assert only.category == ""
        assert only.grade == 0
        assert only.rank == 1

    @pytest.mark.asyncio
    async def test_numeric_category_becomes_text(self, leaderboard, db):
        ranked = await search_results(db, "Ahmad")
        assert ranked[0].category == "1"

    @pytest.mark.asyncio
    async def test_no_match_is_empty_list(self, leaderboard, db):
        assert await search_results(db, "nobody") == []

    @pytest.mark.asyncio
    async def test_failure_raises_user_facing_error(self, leaderboard, db):
        leaderboard.fail(status=500)

        with pytest.raises(SearchError) as exc_info:
            await search_results(db, "ali")

        assert str(exc_info.value) == SEARCH_FAILED_MESSAGE
        assert str(exc_info.value)

    @pytest.mark.asyncio
    async def test_transport_failure_raises_user_facing_error(self, leaderboard, db):
        leaderboard.transport_error = httpx.ReadTimeout("timed out")
        with pytest.raises(SearchError):
            await search_results(db, "ali")

    @pytest.mark.asyncio
    async def test_failure_can_fall_back(self, leaderboard, db):
        leaderboard.fail()
        assert await search_results(db, "ali", on_error=ErrorPolicy.FALLBACK) == []


class TestGetAllResults:
    @pytest.mark.asyncio
    async def test_ranked(self, leaderboard, db):
        ranked = await get_all_results(db)
        assert [(r.no, r.rank) for r in ranked] == [(12, 1), (13, 2), (11, 3)]

    @pytest.mark.asyncio
    async def test_failure_returns_empty_list(self, leaderboard, db):
        leaderboard.fail(status=500)
        assert await get_all_results(db) == []


class TestResultsStats:
    @pytest.mark.asyncio
    async def test_aggregates(self, gateway, db):
        gateway.tables["reciterResults"] = [
            {"no": 1, "category": "a", "grade": 60},
            {"no": 2, "category": "b", "grade": 70},
            {"no": 3, "category": "a", "grade": 100},
        ]

        stats = await get_results_stats(db)

        assert stats.total_students == 3
        assert stats.average_grade == 77
        assert stats.top_grade == 100
        assert stats.categories_count == {"a": 2, "b": 1}
        assert gateway.requests[0].url.params["select"] == "grade,category"

    @pytest.mark.asyncio
    async def test_missing_grades_count_as_zero(self, gateway, db):
        gateway.tables["reciterResults"] = [
            {"no": 1, "category": None, "grade": None},
            {"no": 2, "category": "", "grade": 90},
        ]

        stats = await get_results_stats(db)

        assert stats.total_students == 2
        assert stats.average_grade == 45
        assert stats.top_grade == 90
        assert stats.categories_count == {}

    @pytest.mark.asyncio
    async def test_integer_grades_stay_integers(self, gateway, db):
        gateway.tables["reciterResults"] = [
            {"no": 1, "category": "a", "grade": 100},
            {"no": 2, "category": "a", "grade": 87.5},
        ]

        stats = await get_results_stats(db)
        ranked = await get_all_results(db)

        assert type(stats.top_grade) is int
        assert stats.model_dump(by_alias=True)["topGrade"] == 100
        assert [type(r.grade) for r in ranked] == [int, float]
        assert ranked[0].model_dump_json().count('"grade":100,') == 1

    @pytest.mark.asyncio
    async def test_empty_table(self, gateway, db):
        stats = await get_results_stats(db)
        assert (stats.total_students, stats.average_grade, stats.top_grade) == (0, 0, 0)

    @pytest.mark.asyncio
    async def test_failure_returns_zeros(self, gateway, db):
        gateway.fail()
        stats = await get_results_stats(db)
        assert stats.total_students == 0
        assert stats.categories_count == {}


def test_round_half_up_matches_ui_rounding():
    assert round_half_up(76.666) == 77
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(2.4999) == 2
