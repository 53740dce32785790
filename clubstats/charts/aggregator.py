# clubstats/charts/aggregator.py
from datetime import timedelta
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from loguru import logger
from pydantic import ValidationError

from clubstats.config.settings import settings
from clubstats.models.chart import (
    ChartFilters,
    ChartPoint,
    ChartRenderRequest,
    ChartSeries,
    ChartSeriesCollection,
    SeriesSpec,
)
from clubstats.models.enums import Aggregation, GroupBy
from clubstats.normalization.deduplicator import CanonicalRecord
from clubstats.normalization.opponents import opponent_names_match
from clubstats.utils.values import (
    Number,
    is_date_only,
    iso_date,
    parse_date,
    parse_season,
    to_number,
)

# Columns that may carry the team / opponent name, canonical spelling first
TEAM_COLUMNS = ("Team", "team", "teamName", "Team Name")
OPPONENT_COLUMNS = ("Opponent", "opponent", "opponentName", "Opponent Name")
DEFAULT_DATE_KEY = "Date"


class ChartRequestError(ValueError):
    """Raised when a chart request fails validation at the pipeline boundary."""

    pass


def parse_chart_request(
    payload: Union[ChartRenderRequest, Mapping[str, Any]],
) -> ChartRenderRequest:
    """Validate a client chart request once, before any records are touched."""
    if isinstance(payload, ChartRenderRequest):
        return payload
    try:
        return ChartRenderRequest.model_validate(payload)
    except ValidationError as e:
        raise ChartRequestError(f"Invalid chart request: {e}") from e


# --- Filtering ---


def _present_columns(records: Sequence[CanonicalRecord], candidates: Iterable[str]) -> List[str]:
    return [column for column in candidates if any(column in record for record in records)]


def _find_season_column(records: Sequence[CanonicalRecord]) -> Optional[str]:
    for record in records:
        for key in record:
            if str(key).lower() == "season":
                return key
    return None


def _contains_name(value: str, needle: str) -> bool:
    return needle.lower() in value.lower()


def _similar_opponent(value: str, needle: str) -> bool:
    # Misspelled opponents ("Rovrs") still match when close enough
    return _contains_name(value, needle) or opponent_names_match(value, needle)


def _filter_by_name(
    records: List[CanonicalRecord],
    needles: List[str],
    candidates: Iterable[str],
    label: str,
    matches: Callable[[str, str], bool] = _contains_name,
) -> List[CanonicalRecord]:
    columns = _present_columns(records, candidates)
    if not columns:
        logger.debug(f"No {label} column present; {label} filter skipped.")
        return records
    return [
        record
        for record in records
        if any(
            matches(str(record.get(column) or ""), needle)
            for column in columns
            for needle in needles
        )
    ]


def filter_records(
    records: Iterable[CanonicalRecord], filters: Optional[ChartFilters], x_key: str = ""
) -> List[CanonicalRecord]:
    """Keep the records that satisfy every supplied chart filter.

    A filter whose column is absent from the data is skipped. The date-range
    filter is the exception: once active, a record whose date cannot be parsed
    is dropped.
    """
    filtered = list(records)
    if not filters:
        return filtered

    if filters.teams:
        filtered = _filter_by_name(filtered, filters.teams, TEAM_COLUMNS, "team")

    if filters.opponents:
        filtered = _filter_by_name(
            filtered, filters.opponents, OPPONENT_COLUMNS, "opponent", _similar_opponent
        )

    if filters.seasons:
        season_key = _find_season_column(filtered)
        if season_key is None:
            logger.debug("No season column present; season filter skipped.")
        else:
            wanted = set(filters.seasons)
            filtered = [r for r in filtered if parse_season(r.get(season_key)) in wanted]

    date_range = filters.date_range
    if date_range and (date_range.start or date_range.end):
        date_key = x_key or DEFAULT_DATE_KEY
        start = parse_date(date_range.start) if date_range.start else None
        end = parse_date(date_range.end) if date_range.end else None
        if end is not None and is_date_only(date_range.end):
            # A bare end date includes that whole day
            end = end + timedelta(days=1) - timedelta(microseconds=1)

        kept = []
        for record in filtered:
            when = parse_date(record.get(date_key))
            if when is None:
                continue
            if start is not None and when < start:
                continue
            if end is not None and when > end:
                continue
            kept.append(record)
        if len(kept) < len(filtered):
            logger.debug(f"Date range filter dropped {len(filtered) - len(kept)} records.")
        filtered = kept

    return filtered


# --- Grouping ---


def group_records(
    records: Iterable[CanonicalRecord], group_by: Optional[GroupBy], x_key: str = ""
) -> Dict[str, List[CanonicalRecord]]:
    """Bucket records by ISO date, or one bucket per record for match/team grouping."""
    grouped: Dict[str, List[CanonicalRecord]] = {}
    if group_by == GroupBy.DATE:
        date_key = x_key or DEFAULT_DATE_KEY
        for record in records:
            key = iso_date(record.get(date_key)) or settings.unknown_date_bucket
            grouped.setdefault(key, []).append(record)
    else:
        for index, record in enumerate(records):
            grouped[f"point_{index}"] = [record]
    return grouped


# --- Aggregation ---


def aggregate_values(values: Sequence[Number], aggregation: Aggregation) -> Optional[Number]:
    """Reduce the numeric observations of one group. Empty input gives None."""
    if not values:
        return None
    if aggregation == Aggregation.SUM:
        return sum(values)
    if aggregation == Aggregation.AVG:
        return sum(values) / len(values)
    return values[0]  # first seen, never sorted


def _group_y(rows: List[CanonicalRecord], spec: SeriesSpec) -> Optional[Number]:
    if len(rows) == 1:
        return to_number(rows[0].get(spec.key))
    values = [v for v in (to_number(row.get(spec.key)) for row in rows) if v is not None]
    aggregation = spec.aggregation or Aggregation(settings.default_aggregation)
    return aggregate_values(values, aggregation)


def _group_x(rows: List[CanonicalRecord], group_key: str, group_by: Optional[GroupBy], x_key: str) -> Any:
    if group_by == GroupBy.DATE:
        return group_key
    value = rows[0].get(x_key) if x_key else None
    return group_key if value is None or value == "" else value


def _is_plain_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def sort_points(points: List[ChartPoint]) -> List[ChartPoint]:
    """Sort by x when every x is a string or every x is a number; mixed x keeps input order."""
    xs = [point.x for point in points]
    if all(isinstance(x, str) for x in xs):
        # Case-insensitive first, lowercase before uppercase on ties, like localeCompare
        return sorted(points, key=lambda p: (p.x.casefold(), p.x.swapcase()))
    if all(_is_plain_number(x) for x in xs):
        return sorted(points, key=lambda p: p.x)
    return list(points)


def aggregate(
    records: Iterable[CanonicalRecord],
    request: Union[ChartRenderRequest, Mapping[str, Any]],
) -> ChartSeriesCollection:
    """Turn canonical records into chart-ready series for one render request.

    Records are filtered, grouped, reduced per series and sorted along the
    shared x-axis. Groups always yield a point; y is None when the group has
    no numeric observation for that series.
    """
    request = parse_chart_request(request)
    x_key = request.x_axis.key
    x_label = request.x_axis.label or x_key

    filtered = filter_records(records, request.filters, x_key)
    grouped = group_records(filtered, request.group_by, x_key)

    series = []
    for spec in request.series:
        points = [
            ChartPoint(x=_group_x(rows, group_key, request.group_by, x_key), y=_group_y(rows, spec))
            for group_key, rows in grouped.items()
        ]
        series.append(ChartSeries(key=spec.key, label=spec.label or spec.key, data=sort_points(points)))

    logger.info(
        f"Aggregated {len(filtered)} records into {len(grouped)} groups across {len(series)} series (x: '{x_key}')."
    )
    return ChartSeriesCollection(x_key=x_key, x_label=x_label, series=series)
