# clubstats/classification/keywords.py
"""Keyword tables behind field classification and computed-field exclusion.

All matching is done on lowercased names. Update these tables rather than the
rule functions when a new stat column shows up.
"""
from typing import Tuple

KEYWORDS_VERSION = 3

GAME_INFO_KEYWORDS: Tuple[str, ...] = (
    "team",
    "opponent",
    "date",
    "competition",
    "season",
    "result",
    "venue",
    "referee",
    "notes",
    "home/away",
    "home away",
)

FIRST_HALF_MARKERS: Tuple[str, ...] = ("1st half", "1st", "first half", "first")
SECOND_HALF_MARKERS: Tuple[str, ...] = ("2nd half", "2nd", "second half", "second")

PASS_STRING_PHRASES: Tuple[str, ...] = ("pass string", "passstring")

# Server-computed pass string totals; they are never a raw pass string column
COMPUTED_PASS_STRING_LABELS: Tuple[str, ...] = (
    "pass strings (3-5)",
    "pass strings (3–5)",
    "pass strings (6+)",
    "pass strings <4",
    "pass strings 4+",
)

# Conversion rates, xG and box-share percentages, scoped to a half
HALF_SHOTS_MAP_PHRASES: Tuple[str, ...] = (
    "inside box conv rate",
    "outside box conv rate",
    "opp conv rate",
    "xg",
    "% attempts inside box",
    "% attempts outside box",
    "attempts inside box %",
    "attempts outside box %",
)

# Whole-match fields additionally route generic conversion rates to the map
SHOTS_MAP_PHRASES: Tuple[str, ...] = HALF_SHOTS_MAP_PHRASES + ("conversion rate",)

POSSESSION_LOCATION_PHRASES: Tuple[str, ...] = (
    "possess % (def)",
    "possess % (mid)",
    "possess % (att)",
)

PASS_LOCATION_PHRASES: Tuple[str, ...] = ("pass % by zone", "pass % zone")

OPPONENT_MARKERS: Tuple[str, ...] = ("opp", "opponent", "(opp)", "(opponent)", "against")

# Derived on the server; hidden from edit and upload forms
COMPUTED_FIELDS: Tuple[str, ...] = (
    "tsr",
    "total shots ratio",
    "opp tsr",
    "opp total shots ratio",
    "conversion rate",
    "opp conversion rate",
    "opp conv rate",
    "spi",
    "spi (w)",
    "opp spi",
    "opp spi (w)",
    "pass share",
    "opp pass share",
    "ppm",
    "passes per minute",
    "opp ppm",
    "opp passes per minute",
    "lpc",
    "longest pass chain",
    "opp lpc",
    "opp longest pass chain",
    "passes completed",
    "opp passes completed",
    "opp pass completed",
    "total attempts",
    "opp total attempts",
    "inside box attempts %",
    "outside box attempts %",
    "opp inside box attempts %",
    "opp outside box attempts %",
    "result",
) + COMPUTED_PASS_STRING_LABELS

# Whole-match possession aggregates; matched on the exact name only so
# "Possession Mins (1st)" stays editable
COMPUTED_POSSESSION_FIELDS: Tuple[str, ...] = ("possession", "possessions won")

# Whole-match set-piece totals; the per-half counts remain editable
COMPUTED_SET_PIECE_PHRASES: Tuple[str, ...] = (
    "corners for",
    "corner for",
    "corners against",
    "corner against",
    "free kicks for",
    "freekick for",
    "free kicks against",
    "freekick against",
    "penalty for",
    "penalties for",
    "penalty against",
    "penalties against",
)
COMPUTED_SET_PIECE_NAMES: Tuple[str, ...] = ("penalty", "penalties")
