from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .enums import Aggregation, GroupBy
from clubstats.utils.values import parse_date


class _CamelModel(BaseModel):
    """Accepts both the client's camelCase keys and snake_case field names."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )


class AxisSpec(_CamelModel):
    key: str = ""  # Column key for the x-axis (e.g. 'Date', 'Match')
    label: Optional[str] = None


class SeriesSpec(_CamelModel):
    key: str = Field(..., min_length=1, description="Column key plotted on the y-axis.")
    label: Optional[str] = None
    aggregation: Optional[Aggregation] = None  # Falls back to settings.default_aggregation


class DateRange(_CamelModel):
    start: Optional[str] = None  # ISO date string, inclusive
    end: Optional[str] = None  # ISO date string, inclusive

    @field_validator("start", "end")
    @classmethod
    def _must_parse(cls, value: Optional[str]) -> Optional[str]:
        if value and parse_date(value) is None:
            raise ValueError(f"unparseable date-range bound: {value!r}")
        return value or None


class ChartFilters(_CamelModel):
    teams: List[str] = []
    opponents: List[str] = []
    seasons: List[int] = []
    date_range: Optional[DateRange] = None


class ChartRenderRequest(_CamelModel):
    """One chart render, built by the caller and consumed once."""

    x_axis: AxisSpec = AxisSpec()
    series: List[SeriesSpec] = []
    filters: Optional[ChartFilters] = None
    group_by: Optional[GroupBy] = None

    @model_validator(mode="after")
    def _needs_axis_or_series(self) -> "ChartRenderRequest":
        if not self.x_axis.key.strip() and not self.series:
            raise ValueError("chart request needs an x-axis key or at least one series")
        return self


class ChartPoint(BaseModel):
    x: Any
    y: Optional[float] = None


class ChartSeries(BaseModel):
    key: str
    label: str
    data: List[ChartPoint] = []


class ChartSeriesCollection(BaseModel):
    """Chart-ready series sharing one x-axis."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    x_key: str
    x_label: str
    series: List[ChartSeries] = []

    def to_payload(self) -> Dict[str, Any]:
        """The `{xKey, xLabel, series: [{key, label, data: [{x, y}]}]}` shape charts consume."""
        return self.model_dump(by_alias=True)
