"""Record models.

Models represent rows returned by the database gateway:
- reciters: registered reciters
- reciterResults: graded results with a derived rank

Rows are validated here, where data enters from the client.
"""

from reciters_api.models.reciter import NewReciter, Reciter
from reciters_api.models.result import Result, rank_rows

__all__ = ["NewReciter", "Reciter", "Result", "rank_rows"]
