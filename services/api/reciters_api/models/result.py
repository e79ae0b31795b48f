"""Result records.

Represents rows of the `reciterResults` table. Rows are keyed by the raw
`no` column; `id` mirrors it. `rank` is derived at read time (1-based position
in grade-descending order) and never persisted.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Result(BaseModel):
    """A graded entry with its leaderboard position."""

    model_config = ConfigDict(extra="allow")

    no: int | str
    id: int | str | None = None
    name: str = ""
    category: str = ""
    grade: int | float = 0
    rank: int = Field(ge=1)
    created_at: datetime | None = None

    @model_validator(mode="before")
    @classmethod
    def _id_from_no(cls, data: Any) -> Any:
        if isinstance(data, dict) and "no" in data:
            data = {**data, "id": data["no"]}
        return data

    @field_validator("name", mode="before")
    @classmethod
    def _name_or_empty(cls, v: object) -> object:
        return v or ""

    @field_validator("category", mode="before")
    @classmethod
    def _category_as_text(cls, v: object) -> str:
        # Categories may be stored as numbers ("level 1", 1, ...).
        if v is None:
            return ""
        return str(v)

    @field_validator("grade", mode="before")
    @classmethod
    def _grade_or_zero(cls, v: object) -> object:
        return 0 if v is None else v


def rank_rows(rows: list[dict[str, Any]]) -> list[Result]:
    """Attach 1-based ranks to rows already sorted by grade descending."""
    return [Result.model_validate({**row, "rank": index}) for index, row in enumerate(rows, start=1)]
