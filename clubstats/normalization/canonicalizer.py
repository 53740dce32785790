# clubstats/normalization/canonicalizer.py
import re
from functools import lru_cache
from typing import Iterable, List, Optional

from clubstats.normalization.vocabulary import (
    CANONICAL_SHAPE,
    FIELD_SYNONYMS,
    HALF_INDICATOR_RULES,
    OPPONENT_METRIC_RULES,
    PRESERVED_WORDS,
    TYPO_CORRECTIONS,
    RewriteRule,
)

_WHITESPACE = re.compile(r"\s+")
_CAMEL_BOUNDARY = re.compile(r"([a-z])([A-Z])")


def _collapse_whitespace(name: str) -> str:
    return _WHITESPACE.sub(" ", name).strip()


def _apply_rules(name: str, rules: Iterable[RewriteRule]) -> str:
    for pattern, replacement in rules:
        name = pattern.sub(replacement, name)
    return name


def _apply_phrase_rules(name: str) -> str:
    """Half indicators, then typo corrections, then opponent-metric phrasing."""
    name = _apply_rules(name, HALF_INDICATOR_RULES)
    name = _apply_rules(name, TYPO_CORRECTIONS)
    return _apply_rules(name, OPPONENT_METRIC_RULES)


def _title_word(word: str) -> str:
    preserved = PRESERVED_WORDS.get(word.lower())
    if preserved:
        return preserved
    return word[:1].upper() + word[1:].lower()


def _has_paren(word: str) -> bool:
    return "(" in word or ")" in word


def _split_compound_words(name: str) -> str:
    """Split camelCase and snake_case tokens into Title-Case words.

    Parenthesised tokens are left alone so suffixes like "(xG)" survive.
    """
    if not (_CAMEL_BOUNDARY.search(name) or "_" in name):
        return name
    words = []
    for token in name.split(" "):
        if _has_paren(token) or token.lower() in PRESERVED_WORDS:
            words.append(token)
            continue
        token = _CAMEL_BOUNDARY.sub(r"\1 \2", token)
        words.extend(_title_word(part) for part in re.split(r"[_ ]+", token) if part)
    return " ".join(words)


def _lookup_synonym(name: str) -> Optional[str]:
    return FIELD_SYNONYMS.get(_collapse_whitespace(name).lower())


def _format_words(name: str) -> str:
    return " ".join(
        word if _has_paren(word) else _title_word(word)
        for word in name.split()
        if word
    )


@lru_cache(maxsize=4096)
def canonicalize(name: str) -> str:
    """Map an arbitrary field-name spelling to its canonical display name.

    "shotsAgainst1stHalf", "shots_against_1st_half" and
    "Shots Against (1st Half)" all become "Shots Against (1st)". The function is
    pure and idempotent: canonicalize(canonicalize(x)) == canonicalize(x).
    """
    normalized = _collapse_whitespace(name)
    if not normalized:
        return normalized

    normalized = _apply_phrase_rules(normalized)

    synonym = _lookup_synonym(normalized)
    if synonym:
        return synonym

    if CANONICAL_SHAPE.match(normalized):
        return _format_words(normalized)

    split = _split_compound_words(normalized)
    if split != normalized:
        # Splitting can expose phrases ("Shots First Half") the first pass could not see
        normalized = _apply_phrase_rules(split)

    if normalized == normalized.lower() and " " not in normalized and "(" not in normalized:
        normalized = normalized[:1].upper() + normalized[1:]

    synonym = _lookup_synonym(normalized)
    if synonym:
        return synonym

    return _format_words(normalized)


def canonicalize_all(names: Iterable[str]) -> List[str]:
    """Canonicalize each name, keeping input order and duplicates."""
    return [canonicalize(name) for name in names]
