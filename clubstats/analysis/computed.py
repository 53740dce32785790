# clubstats/analysis/computed.py
"""Server-derived match stats computed from the raw counts of a canonical record.

Whole-match totals come from the two halves when either half has a non-zero
count, and fall back to the value entered for the whole match otherwise.
Ratios are percentages (0-100) except PPM, which is passes per possession
minute. A stat whose inputs are missing or zero is left out, never set to 0.
"""
import re
from typing import Dict, Optional, Tuple

from loguru import logger

from clubstats.normalization.deduplicator import CanonicalRecord
from clubstats.utils.values import Number, to_number

# "3-pass String", "Opp 7-pass Strings", "opponent 4 pass strings"
_PASS_STRING_KEY = re.compile(r"^(?:(opp|opponent)\s+)?(\d+)\s*-?\s*pass\s+strings?$", re.IGNORECASE)
PASS_STRING_LENGTHS = range(3, 11)

# 15% more weight for every pass beyond the third
WEIGHTED_SPI_BONUS = 0.15

# Whole-match totals that are summed from their "(1st)" / "(2nd)" halves
WHOLE_MATCH_TOTALS: Tuple[str, ...] = (
    "Goals For",
    "Goals Against",
    "Shots For",
    "Shots Against",
    "Attempts For",
    "Attempts Against",
    "Passes For",
    "Passes Against",
)
HALF_SUMMED_STATS: Tuple[str, ...] = WHOLE_MATCH_TOTALS + ("Possession Mins", "Opp Possession Mins")


def _count(record: CanonicalRecord, key: str) -> Number:
    return to_number(record.get(key)) or 0


def whole_match_value(record: CanonicalRecord, stat: str) -> Optional[Number]:
    """Sum of the "(1st)" and "(2nd)" values, or the whole-match entry when both halves are empty."""
    first = _count(record, f"{stat} (1st)")
    second = _count(record, f"{stat} (2nd)")
    if first > 0 or second > 0:
        return first + second
    return to_number(record.get(stat))


def pass_string_counts(record: CanonicalRecord) -> Tuple[Dict[int, Number], Dict[int, Number]]:
    """Strings per length (3-10) for the team and the opponent, positive counts only."""
    team: Dict[int, Number] = {}
    opponent: Dict[int, Number] = {}
    for key, value in record.items():
        match = _PASS_STRING_KEY.match(str(key).strip())
        if not match:
            continue
        length = int(match.group(2))
        count = to_number(value)
        if length not in PASS_STRING_LENGTHS or not count or count <= 0:
            continue
        side = opponent if match.group(1) else team
        side.setdefault(length, count)
    return team, opponent


def _share(part: Number, total: Number) -> float:
    return part / total * 100


def _spi(counts: Dict[int, Number], total_passes: Optional[Number]) -> Tuple[Optional[float], Optional[float]]:
    """(SPI, weighted SPI): passes made inside strings as a share of all passes."""
    if not total_passes or total_passes <= 0 or not counts:
        return None, None
    in_strings = sum(length * count for length, count in counts.items())
    weighted = sum(
        length * count * (1 + (length - 3) * WEIGHTED_SPI_BONUS)
        for length, count in counts.items()
    )
    return _share(in_strings, total_passes), _share(weighted, total_passes)


def compute_match_stats(record: CanonicalRecord) -> Dict[str, Number]:
    """Derive totals, ratios and pass-string aggregates from a canonical record.

    Keys are canonical field names; every one of them except the whole-match
    totals is hidden from edit forms by the computed-field filter.
    """
    computed: Dict[str, Number] = {}

    totals = {stat: whole_match_value(record, stat) for stat in HALF_SUMMED_STATS}
    for stat in WHOLE_MATCH_TOTALS:
        if totals[stat] is not None:
            computed[stat] = totals[stat]

    # Total attempts are goals plus (non-goal) shots, per half
    attempts = {}
    for side, prefix in (("For", ""), ("Against", "Opp ")):
        halves = [
            _count(record, f"Goals {side} ({half})") + _count(record, f"Shots {side} ({half})")
            for half in ("1st", "2nd")
        ]
        attempts[side] = sum(halves)
        if any(h > 0 for h in halves):
            computed[f"{prefix}Total Attempts (1st)"] = halves[0]
            computed[f"{prefix}Total Attempts (2nd)"] = halves[1]
            computed[f"{prefix}Total Attempts"] = attempts[side]

    all_attempts = attempts["For"] + attempts["Against"]
    if all_attempts > 0:
        computed["TSR"] = _share(attempts["For"], all_attempts)
        computed["Opp TSR"] = _share(attempts["Against"], all_attempts)

    if totals["Goals For"] is not None and attempts["For"] > 0:
        computed["Conversion Rate"] = _share(totals["Goals For"], attempts["For"])
    if totals["Goals Against"] is not None and attempts["Against"] > 0:
        computed["Opp Conv Rate"] = _share(totals["Goals Against"], attempts["Against"])

    passes_for, passes_against = totals["Passes For"], totals["Passes Against"]
    if passes_for is not None and passes_against is not None and passes_for + passes_against > 0:
        computed["Pass Share"] = _share(passes_for, passes_for + passes_against)
        computed["Opp Pass Share"] = _share(passes_against, passes_for + passes_against)

    for prefix, passes, minutes in (
        ("", passes_for, totals["Possession Mins"]),
        ("Opp ", passes_against, totals["Opp Possession Mins"]),
    ):
        if passes is not None and minutes and minutes > 0:
            computed[f"{prefix}PPM"] = passes / minutes

    for prefix in ("", "Opp "):
        inside = to_number(record.get(f"{prefix}Inside Box Attempts"))
        if inside is not None:
            computed[f"{prefix}Inside Box Attempts %"] = inside
            computed[f"{prefix}Outside Box Attempts %"] = 100 - inside

    team_strings, opponent_strings = pass_string_counts(record)
    if team_strings:
        computed["LPC"] = max(team_strings)
        three_to_five = sum(team_strings.get(n, 0) for n in (3, 4, 5))
        six_plus = sum(c for n, c in team_strings.items() if n >= 6)
        four_plus = sum(c for n, c in team_strings.items() if n >= 4)
        for name, total in (
            ("Pass Strings (3-5)", three_to_five),
            ("Pass Strings (6+)", six_plus),
            ("Pass Strings <4", team_strings.get(3, 0)),
            ("Pass Strings 4+", four_plus),
        ):
            if total > 0:
                computed[name] = total

    for prefix, counts, passes in (
        ("", team_strings, passes_for),
        ("Opp ", opponent_strings, passes_against),
    ):
        spi, spi_weighted = _spi(counts, passes)
        if spi is not None:
            computed[f"{prefix}SPI"] = spi
            computed[f"{prefix}SPI (W)"] = spi_weighted

    logger.debug(f"Computed {len(computed)} derived stats: {sorted(computed)}")
    return computed


def with_computed_stats(record: CanonicalRecord) -> CanonicalRecord:
    """The record with its derived stats laid over the raw values."""
    return {**record, **compute_match_stats(record)}
