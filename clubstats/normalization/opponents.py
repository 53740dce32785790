# clubstats/normalization/opponents.py
import re
from typing import Iterable, Optional, Tuple

from rapidfuzz.distance import Levenshtein

from clubstats.config.settings import settings

_WHITESPACE = re.compile(r"\s+")
_PUNCTUATION = re.compile(r"[.,\-_]")

# Score given when one normalized name contains the other ("Rovers" / "Rovers FC")
PARTIAL_MATCH_SCORE = 0.8


def normalize_opponent_name(name: Optional[str]) -> str:
    """Lowercase, collapse whitespace and drop the punctuation sheets disagree on."""
    if not name:
        return ""
    normalized = _WHITESPACE.sub(" ", str(name).strip().lower())
    return _PUNCTUATION.sub("", normalized)


def opponent_similarity(first: Optional[str], second: Optional[str]) -> float:
    """Similarity of two opponent names on a 0-1 scale (1.0 means identical)."""
    a = normalize_opponent_name(first)
    b = normalize_opponent_name(second)
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0
    if a in b or b in a:
        return PARTIAL_MATCH_SCORE
    return Levenshtein.normalized_similarity(a, b)


def opponent_names_match(
    first: Optional[str], second: Optional[str], threshold: Optional[float] = None
) -> bool:
    if threshold is None:
        threshold = settings.opponent_match_threshold
    return opponent_similarity(first, second) >= threshold


def best_opponent_match(
    name: str, candidates: Iterable[str], threshold: Optional[float] = None
) -> Optional[Tuple[str, float]]:
    """The most similar candidate and its score, or None when nothing clears the threshold."""
    if threshold is None:
        threshold = settings.opponent_match_threshold
    if not name:
        return None

    best: Optional[Tuple[str, float]] = None
    for candidate in candidates:
        score = opponent_similarity(name, candidate)
        if score >= threshold and (best is None or score > best[1]):
            best = (candidate, score)
    return best
