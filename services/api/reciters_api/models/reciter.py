"""Reciter records.

Represents rows of the `reciters` table:
- id and created_at are assigned by the database
- category is optional
- name uniqueness is not enforced (existence checks are advisory)

Unknown columns are preserved so callers see the full row.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Reciter(BaseModel):
    """A registered reciter."""

    model_config = ConfigDict(extra="allow")

    id: int | str
    name: str
    category: str | None = None
    created_at: datetime | None = None

    def __repr__(self) -> str:
        return f"<Reciter {self.name} ({self.category or '-'})>"


class NewReciter(BaseModel):
    """Insert payload for a reciter.

    id and created_at are server-assigned and never sent.
    """

    model_config = ConfigDict(extra="allow")

    name: str = Field(min_length=1)
    category: str | None = None

    def to_row(self) -> dict:
        row = self.model_dump(exclude_none=True)
        row.pop("id", None)
        row.pop("created_at", None)
        return row
