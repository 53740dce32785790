from enum import Enum


class Category(str, Enum):
    GAME_INFO = "Game Info"
    BASIC_STATS_1ST_HALF = "Basic Stats (1st Half)"
    BASIC_STATS_2ND_HALF = "Basic Stats (2nd Half)"
    SHOTS_MAP = "Shots Map"
    POSSESSION_LOCATION = "Possession Location"
    PASS_LOCATION = "Pass Location"
    PASS_STRINGS = "Pass Strings"
    OTHER = "Other"  # Catch-all, never filtered out


class Aggregation(str, Enum):
    NONE = "none"  # First parseable value in iteration order
    AVG = "avg"
    SUM = "sum"


class GroupBy(str, Enum):
    MATCH = "match"
    DATE = "date"
    TEAM = "team"
