# clubstats/classification/classifier.py
import re
from functools import lru_cache
from typing import Callable, Iterable, List, NamedTuple, Optional, Tuple

from clubstats.classification.keywords import (
    COMPUTED_FIELDS,
    COMPUTED_PASS_STRING_LABELS,
    COMPUTED_POSSESSION_FIELDS,
    COMPUTED_SET_PIECE_NAMES,
    COMPUTED_SET_PIECE_PHRASES,
    FIRST_HALF_MARKERS,
    GAME_INFO_KEYWORDS,
    HALF_SHOTS_MAP_PHRASES,
    OPPONENT_MARKERS,
    PASS_LOCATION_PHRASES,
    PASS_STRING_PHRASES,
    POSSESSION_LOCATION_PHRASES,
    SECOND_HALF_MARKERS,
    SHOTS_MAP_PHRASES,
)
from clubstats.models.enums import Category

# A pass-string length between 3 and 10, not part of a longer number
_STRING_LENGTH_TOKEN = re.compile(r"(?<!\d)(?:10|[3-9])(?!\d)")
_WHITESPACE = re.compile(r"\s+")


class ClassificationRule(NamedTuple):
    name: str
    predicate: Callable[[str], bool]  # Receives the lowercased field name
    category: Category


def _contains_any(lower: str, phrases: Iterable[str]) -> bool:
    return any(phrase in lower for phrase in phrases)


def _is_first_half(lower: str) -> bool:
    return _contains_any(lower, FIRST_HALF_MARKERS)


def _is_second_half(lower: str) -> bool:
    return _contains_any(lower, SECOND_HALF_MARKERS)


def _is_half_scoped(lower: str) -> bool:
    return _is_first_half(lower) or _is_second_half(lower)


def _is_game_info(lower: str) -> bool:
    return _contains_any(lower, GAME_INFO_KEYWORDS)


def _mentions_pass_strings(lower: str) -> bool:
    return _contains_any(lower, PASS_STRING_PHRASES)


def _is_half_pass_strings(lower: str) -> bool:
    return _is_half_scoped(lower) and _mentions_pass_strings(lower)


def _is_half_shots_map(lower: str) -> bool:
    return _is_half_scoped(lower) and _contains_any(lower, HALF_SHOTS_MAP_PHRASES)


def _is_computed_pass_string_total(lower: str) -> bool:
    return _contains_any(lower, COMPUTED_PASS_STRING_LABELS)


def _is_pass_strings(lower: str) -> bool:
    if _mentions_pass_strings(lower):
        return True
    return "pass" in lower and bool(_STRING_LENGTH_TOKEN.search(lower))


def _is_shots_map(lower: str) -> bool:
    return _contains_any(lower, SHOTS_MAP_PHRASES)


def _is_possession_location(lower: str) -> bool:
    return _contains_any(lower, POSSESSION_LOCATION_PHRASES)


def _is_pass_location(lower: str) -> bool:
    return _contains_any(lower, PASS_LOCATION_PHRASES)


# Evaluated top to bottom, first match wins. Keyword sets overlap, so the
# order is part of the contract.
CLASSIFICATION_RULES: Tuple[ClassificationRule, ...] = (
    ClassificationRule("game_info", _is_game_info, Category.GAME_INFO),
    ClassificationRule("half_pass_strings", _is_half_pass_strings, Category.PASS_STRINGS),
    ClassificationRule("half_shots_map", _is_half_shots_map, Category.SHOTS_MAP),
    ClassificationRule("first_half", _is_first_half, Category.BASIC_STATS_1ST_HALF),
    ClassificationRule("second_half", _is_second_half, Category.BASIC_STATS_2ND_HALF),
    ClassificationRule(
        "computed_pass_string_total", _is_computed_pass_string_total, Category.OTHER
    ),
    ClassificationRule("pass_strings", _is_pass_strings, Category.PASS_STRINGS),
    ClassificationRule("shots_map", _is_shots_map, Category.SHOTS_MAP),
    ClassificationRule(
        "possession_location", _is_possession_location, Category.POSSESSION_LOCATION
    ),
    ClassificationRule("pass_location", _is_pass_location, Category.PASS_LOCATION),
)


def _lower(name: str) -> str:
    return _WHITESPACE.sub(" ", name).strip().lower()


def matching_rule(name: str) -> Optional[ClassificationRule]:
    """The first rule that claims `name`, or None when it falls through to Other."""
    lower = _lower(name)
    for rule in CLASSIFICATION_RULES:
        if rule.predicate(lower):
            return rule
    return None


@lru_cache(maxsize=4096)
def classify(name: str) -> Category:
    """Display category for a canonical (or raw) field name. Never raises."""
    rule = matching_rule(name)
    return rule.category if rule else Category.OTHER


def has_half_indicator(name: str) -> bool:
    return _is_half_scoped(_lower(name))


def is_opponent_field(name: str) -> bool:
    """True for fields describing the opponent ("Opp ...", "... Against")."""
    return _contains_any(name.lower(), OPPONENT_MARKERS)


def is_computed_field(name: str) -> bool:
    """True for server-derived fields that must not appear in edit or upload forms."""
    lower = _lower(name)

    for field in COMPUTED_POSSESSION_FIELDS:
        if lower in (field, f"opp {field}"):
            return True

    if not _is_half_scoped(lower):
        if _contains_any(lower, COMPUTED_SET_PIECE_PHRASES) or lower in COMPUTED_SET_PIECE_NAMES:
            return True

    return _contains_any(lower, COMPUTED_FIELDS)


def editable_fields(names: Iterable[str]) -> List[str]:
    """Drop computed fields, keeping order."""
    return [name for name in names if not is_computed_field(name)]
