"""Schemas for result statistics."""

from pydantic import BaseModel, Field


class ResultsStats(BaseModel):
    """Aggregates over all graded results."""

    total_students: int = Field(alias="totalStudents", default=0, ge=0)
    average_grade: int = Field(alias="averageGrade", default=0)
    top_grade: int | float = Field(alias="topGrade", default=0)
    categories_count: dict[str, int] = Field(alias="categoriesCount", default_factory=dict)

    model_config = {"populate_by_name": True}
