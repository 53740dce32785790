# clubstats/normalization/deduplicator.py
import re
from typing import Any, Dict, Iterable, List, Optional

from loguru import logger

from clubstats.config.settings import settings
from clubstats.normalization.canonicalizer import canonicalize
from clubstats.utils.values import is_empty_placeholder

# Type aliases for the two record shapes the pipeline passes around
RawRecord = Dict[str, Any]
CanonicalRecord = Dict[str, Any]

# A raw key typed the way canonical names look ("Shots Against") is trusted
# over camelCase / snake_case spellings of the same field.
_TITLE_CASE_KEY = re.compile(r"^[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*$")

# Verbose aliases that never displace the short canonical key's value
_DEFERRING_ALIASES: Dict[str, frozenset] = {
    "Date": frozenset({"match date", "matchdate"}),
    "Opponent": frozenset({"opponent name", "opponentname"}),
}


def _is_title_case_key(key: str) -> bool:
    return bool(_TITLE_CASE_KEY.match(key))


def _is_deferring_alias(canonical_key: str, raw_key: str) -> bool:
    aliases = _DEFERRING_ALIASES.get(canonical_key)
    return bool(aliases) and raw_key.strip().lower() in aliases


def _should_replace(
    canonical_key: str,
    current_key: str,
    current_value: Any,
    raw_key: str,
    value: Any,
    tie_policy: str,
) -> bool:
    """Decide whether a later observation of a canonical field replaces the slot."""
    current_empty = is_empty_placeholder(current_value)
    new_empty = is_empty_placeholder(value)

    # Non-empty always beats a placeholder, whichever arrives first
    if current_empty != new_empty:
        return current_empty
    if current_empty:
        return False
    if _is_deferring_alias(canonical_key, raw_key):
        return False
    if current_value == value:
        return False

    new_is_title = _is_title_case_key(raw_key)
    current_is_title = _is_title_case_key(current_key)
    if new_is_title != current_is_title:
        return new_is_title
    return tie_policy == "last"


def deduplicate(record: RawRecord, tie_policy: Optional[str] = None) -> CanonicalRecord:
    """Collapse a raw record onto canonical field names.

    Keys holding None are dropped. When several raw keys canonicalize to the
    same name the values are merged: non-empty beats empty, the short "Date" /
    "Opponent" keys beat their verbose aliases, a Title-Case source key beats a
    camelCase or snake_case one, and any remaining tie is settled by
    `tie_policy` ("first" keeps the first value seen, "last" takes the newest).
    """
    tie_policy = tie_policy or settings.merge_tie_policy
    merged: CanonicalRecord = {}
    winning_keys: Dict[str, str] = {}

    for raw_key, value in record.items():
        if value is None:
            continue

        canonical_key = canonicalize(str(raw_key))
        if canonical_key not in merged:
            merged[canonical_key] = value
            winning_keys[canonical_key] = raw_key
            continue

        if _should_replace(
            canonical_key,
            winning_keys[canonical_key],
            merged[canonical_key],
            raw_key,
            value,
            tie_policy,
        ):
            logger.debug(
                f"'{canonical_key}': value from '{raw_key}' replaces value from '{winning_keys[canonical_key]}'"
            )
            merged[canonical_key] = value
            winning_keys[canonical_key] = raw_key
        else:
            logger.debug(
                f"'{canonical_key}': keeping value from '{winning_keys[canonical_key]}' over '{raw_key}'"
            )

    return merged


def deduplicate_records(
    records: Iterable[RawRecord], tie_policy: Optional[str] = None
) -> List[CanonicalRecord]:
    """Apply `deduplicate` to every record, keeping order."""
    return [deduplicate(record, tie_policy) for record in records]


def deduplicate_columns(records: Iterable[RawRecord]) -> List[str]:
    """Sorted union of canonical keys across records, for building forms and tables."""
    columns = set()
    for record in records:
        columns.update(deduplicate(record).keys())
    return sorted(columns)
