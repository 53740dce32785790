# clubstats/classification/layout.py
from typing import Any, Dict, Iterable, List, Optional, Tuple

from loguru import logger

from clubstats.classification.classifier import classify, is_computed_field, is_opponent_field
from clubstats.models.enums import Category
from clubstats.normalization.canonicalizer import canonicalize
from clubstats.normalization.deduplicator import RawRecord, deduplicate

# Order in which categories are laid out in match forms
CATEGORY_ORDER: Tuple[Category, ...] = (
    Category.GAME_INFO,
    Category.BASIC_STATS_1ST_HALF,
    Category.BASIC_STATS_2ND_HALF,
    Category.SHOTS_MAP,
    Category.POSSESSION_LOCATION,
    Category.PASS_LOCATION,
    Category.PASS_STRINGS,
    Category.OTHER,
)

# Always offered for entry, even when no stored match has them yet
REQUIRED_FIELDS: Tuple[str, ...] = (
    "Possession Mins (1st)",
    "Possession Mins (2nd)",
    "Opp Possession Mins (1st)",
    "Opp Possession Mins (2nd)",
    "Throw-in (1st)",
    "Throw-in (2nd)",
    "Opp Throw-in (1st)",
    "Opp Throw-in (2nd)",
)


def split_by_side(fields: Iterable[str]) -> Tuple[List[str], List[str]]:
    """Split field names into (team fields, opponent fields), keeping order."""
    team: List[str] = []
    opponent: List[str] = []
    for field in fields:
        (opponent if is_opponent_field(field) else team).append(field)
    return team, opponent


def organize_fields(
    column_keys: Iterable[str], record: Optional[RawRecord] = None
) -> Dict[Category, Dict[str, Any]]:
    """Group editable fields by category for a match form.

    Column keys and REQUIRED_FIELDS are canonicalized, computed fields are
    dropped and case-insensitive duplicates collapse to the first spelling.
    Values come from `record` (deduplicated); missing values are "".
    """
    values = deduplicate(record or {})
    grouped: Dict[Category, Dict[str, Any]] = {}
    seen = set()

    for key in [*column_keys, *REQUIRED_FIELDS]:
        field = canonicalize(key)
        if not field or is_computed_field(field):
            continue
        folded = field.lower()
        if folded in seen:
            continue
        seen.add(folded)

        value = values.get(field)
        grouped.setdefault(classify(field), {})[field] = "" if value is None else value

    logger.debug(
        f"Organized {len(seen)} fields into {len(grouped)} categories: {[c.value for c in grouped]}"
    )
    return {category: grouped[category] for category in CATEGORY_ORDER if category in grouped}
