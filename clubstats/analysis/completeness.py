# clubstats/analysis/completeness.py
import math
from typing import Any, Iterable, List, Sequence

from loguru import logger

from clubstats.classification.classifier import classify
from clubstats.models.analysis import MissingDataInfo
from clubstats.models.enums import Category
from clubstats.normalization.deduplicator import CanonicalRecord, RawRecord, deduplicate
from clubstats.utils.values import is_empty_placeholder, to_strict_number

_HALF_CATEGORIES = (Category.BASIC_STATS_1ST_HALF, Category.BASIC_STATS_2ND_HALF)


def _has_numeric(value: Any) -> bool:
    return to_strict_number(value) is not None


def missing_data_info(
    records: Sequence[CanonicalRecord],
    required_columns: Iterable[str],
    opponent_key: str = "Opponent",
) -> MissingDataInfo:
    """Report gaps in `required_columns` across a set of matches.

    Columns with no numeric value anywhere are listed as missing and are not
    counted against individual matches; for the rest, every match lacking a
    numeric value is counted along with its opponent.
    """
    required = list(required_columns)
    if not records or not required:
        return MissingDataInfo()

    present = [c for c in required if any(_has_numeric(r.get(c)) for r in records)]
    affected_matches = 0
    affected_opponents = set()
    total_missing = 0

    for record in records:
        gaps = sum(1 for column in present if not _has_numeric(record.get(column)))
        if gaps:
            affected_matches += 1
            total_missing += gaps
            opponent = record.get(opponent_key)
            if opponent and isinstance(opponent, str):
                affected_opponents.add(opponent)

    total_possible = len(present) * len(records)
    completeness = (
        math.floor((total_possible - total_missing) / total_possible * 100 + 0.5)
        if total_possible
        else 100
    )

    info = MissingDataInfo(
        missing_columns=[c for c in required if c not in present],
        affected_matches=affected_matches,
        affected_opponents=sorted(affected_opponents),
        completeness_percentage=completeness,
    )
    if info.missing_columns or affected_matches:
        logger.info(
            f"{affected_matches}/{len(records)} matches have gaps; "
            f"{len(info.missing_columns)} required columns have no data ({completeness}% complete)."
        )
    return info


def half_time_fields(record: RawRecord) -> List[str]:
    """Canonical fields of `record` that belong to a half-scoped basic-stats section."""
    return [field for field in deduplicate(record) if classify(field) in _HALF_CATEGORIES]


def has_half_time_stats(record: RawRecord) -> bool:
    """True when at least one half-scoped basic stat is recorded with a non-empty value."""
    canonical = deduplicate(record)
    return any(
        not is_empty_placeholder(canonical[field]) for field in half_time_fields(canonical)
    )
