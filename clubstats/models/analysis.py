from typing import List

from pydantic import BaseModel


class MissingDataInfo(BaseModel):
    """Which required columns, matches and opponents are missing data."""

    missing_columns: List[str] = []  # Required columns with no data in any record
    affected_matches: int = 0
    affected_opponents: List[str] = []
    completeness_percentage: int = 100
