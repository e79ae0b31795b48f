"""Pydantic schemas for API responses."""

from reciters_api.schemas.common import ErrorDetail, ErrorResponse
from reciters_api.schemas.reciters import ReciterExists, RecitersPage, RegistrationStats
from reciters_api.schemas.results import ResultsStats

__all__ = [
    "ErrorDetail",
    "ErrorResponse",
    "ReciterExists",
    "RecitersPage",
    "RegistrationStats",
    "ResultsStats",
]
