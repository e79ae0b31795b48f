"""Schemas for reciter listings and registration statistics."""

from pydantic import BaseModel, Field

from reciters_api.models import Reciter


class RecitersPage(BaseModel):
    """One page of reciters plus the total row count.

    `has_more` is true when the total exceeds page * limit.
    """

    data: list[Reciter] = Field(default_factory=list)
    count: int = Field(default=0, ge=0)
    has_more: bool = Field(alias="hasMore", default=False)

    model_config = {"populate_by_name": True}


class RegistrationStats(BaseModel):
    """Registration counters for the reciters table."""

    total_reciters: int = Field(alias="totalReciters", default=0, ge=0)
    categories_count: dict[str, int] = Field(alias="categoriesCount", default_factory=dict)
    recent_registrations: int = Field(alias="recentRegistrations", default=0, ge=0)

    model_config = {"populate_by_name": True}


class ReciterExists(BaseModel):
    """Response for the advisory existence check."""

    name: str
    exists: bool
