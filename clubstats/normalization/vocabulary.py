# clubstats/normalization/vocabulary.py
"""Fixed rewrite tables used by the field-name canonicalizer.

Everything here is data: the canonicalizer walks these tables in order and
never special-cases a field name in code. Bump VOCABULARY_VERSION whenever an
entry changes, since stored column lists were produced with an older table.
"""
import re
from types import MappingProxyType
from typing import Callable, Mapping, Tuple, Union

VOCABULARY_VERSION = 3

Replacement = Union[str, Callable[["re.Match[str]"], str]]
RewriteRule = Tuple["re.Pattern[str]", Replacement]


def _rule(pattern: str, replacement: Replacement) -> RewriteRule:
    return re.compile(pattern, re.IGNORECASE), replacement


def _attached_half(match: "re.Match[str]") -> str:
    return f" ({match.group(1).lower()})"


# Half indicators fold to a "(1st)" / "(2nd)" suffix. The parenthesised form
# must fold before the bare form, otherwise "(1st Half)" becomes "((1st))".
HALF_INDICATOR_RULES: Tuple[RewriteRule, ...] = (
    # "For1st Half", "shotsAgainst2ndHalf": indicator glued to a lowercase letter
    _rule(r"(?<=[a-z])(1st|2nd)\s*half", _attached_half),
    _rule(r"\(\s*(?:1st|first)\s*half\s*\)", "(1st)"),
    _rule(r"\(\s*(?:2nd|second)\s*half\s*\)", "(2nd)"),
    _rule(r"\b(?:1st|first)\s*half\b", "(1st)"),
    _rule(r"\b(?:2nd|second)\s*half\b", "(2nd)"),
    _rule(r"\(first\)", "(1st)"),
    _rule(r"\(second\)", "(2nd)"),
    # "Shots Against(1st)" -> "Shots Against (1st)"
    _rule(r"(?<=\S)(\((?:1st|2nd)\))", r" \1"),
)

# Known misspellings, longest phrase first so the "opp" forms win.
TYPO_CORRECTIONS: Tuple[RewriteRule, ...] = (
    _rule(r"\bopp\s+passed\s+completed\b", "Opp Passes Completed"),
    _rule(r"\bopp\s+passed\s+comp\b", "Opp Passes Comp"),
    _rule(r"\bpassed\s+completed\b", "Passes Completed"),
    _rule(r"\bpassed\s+comp\b", "Passes Comp"),
)

# "Opponent Conversion Rate", "Opp Conv. Rate", ... -> "Opp Conv Rate"
OPPONENT_METRIC_RULES: Tuple[RewriteRule, ...] = (
    _rule(r"\bopp(?:onent)?\.?\s+conv(?:ersion|\.)?\s+rate\b", "Opp Conv Rate"),
)

# Already canonical: Title-Case words with an optional single "(...)" suffix
CANONICAL_SHAPE = re.compile(r"^[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*(?:\s*\([^)]+\))?$")

# Case-insensitive exact matches on the processed name; an entry wins outright.
FIELD_SYNONYMS: Mapping[str, str] = MappingProxyType(
    {
        "opponent": "Opponent",
        "opponentname": "Opponent",
        "opponent name": "Opponent",
        "team": "Team",
        "teamname": "Team",
        "team name": "Team",
        "teamid": "Team ID",  # A numeric id, kept apart from the team name
        "team id": "Team ID",
        "date": "Date",
        "matchdate": "Date",
        "match date": "Date",
        "competitiontype": "Competition Type",
        "competition type": "Competition Type",
        "homeaway": "Home/Away",
        "home/away": "Home/Away",
        "home away": "Home/Away",
    }
)

# Stat acronyms keep their conventional casing instead of Title-Case
PRESERVED_WORDS: Mapping[str, str] = MappingProxyType(
    {
        "xg": "xG",
        "xga": "xGA",
        "tsr": "TSR",
        "spi": "SPI",
        "ppm": "PPM",
        "lpc": "LPC",
        "id": "ID",
    }
)
