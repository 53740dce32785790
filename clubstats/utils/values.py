# clubstats/utils/values.py
import math
import re
from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional, Union

Number = Union[int, float]

# Leading numeric prefix, the way spreadsheets hand us "45%" or "2.3 xG"
_LEADING_NUMBER = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_LEADING_INT = re.compile(r"^[+-]?\d+")

_EPOCH = datetime(1970, 1, 1)

# Tried in order after ISO 8601; US month-first matches how the sheets were entered
_DATE_FORMATS = (
    "%m/%d/%Y",
    "%m/%d/%y",
    "%Y/%m/%d",
    "%b %d, %Y",
    "%B %d, %Y",
    "%d %b %Y",
    "%d %B %Y",
)


def is_empty_placeholder(value: Any) -> bool:
    """True for the values that stand in for "no observation": None, "" and numeric 0."""
    if value is None:
        return True
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return value == 0
    if isinstance(value, str):
        return value == ""
    return False


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def to_number(value: Any) -> Optional[Number]:
    """Coerce a cell to a number, or None when nothing numeric can be read.

    Numbers pass through untouched (including 0). Strings are read like
    JavaScript's parseFloat: the longest leading numeric prefix wins, so
    "45%" gives 45.0 and "n/a" gives None.
    """
    if _is_number(value):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        return value
    if is_empty_placeholder(value) or isinstance(value, bool):
        return None
    match = _LEADING_NUMBER.match(str(value).strip())
    if not match:
        return None
    number = float(match.group(0))
    if math.isinf(number):
        return None
    return number


def to_strict_number(value: Any) -> Optional[Number]:
    """Like `to_number`, but the whole cell must be numeric ("45%" gives None)."""
    if _is_number(value):
        return to_number(value)
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text or not _LEADING_NUMBER.fullmatch(text):
        return None
    return to_number(text)


def parse_date(value: Any) -> Optional[datetime]:
    """Parse a date-ish cell into a naive UTC datetime, or None.

    Numbers are read as epoch milliseconds, the way exported JS timestamps
    arrive.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    elif _is_number(value):
        if not math.isfinite(value):
            return None
        try:
            return _EPOCH + timedelta(milliseconds=value)
        except OverflowError:
            return None
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        parsed = None
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            for fmt in _DATE_FORMATS:
                try:
                    parsed = datetime.strptime(text, fmt)
                    break
                except ValueError:
                    continue
        if parsed is None:
            return None
    else:
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def is_date_only(value: Any) -> bool:
    """True when a string bound names a whole day rather than an instant."""
    if isinstance(value, datetime) or _is_number(value):
        return False
    if isinstance(value, date):
        return True
    parsed = parse_date(value)
    return parsed is not None and "T" not in str(value) and ":" not in str(value)


def iso_date(value: Any) -> Optional[str]:
    """The ISO `YYYY-MM-DD` portion of a parseable date, else None."""
    parsed = parse_date(value)
    return parsed.date().isoformat() if parsed else None


def parse_season(value: Any) -> Optional[int]:
    """Leading integer of a season cell ("2024", 2024, "2024-25" -> 2024)."""
    if _is_number(value):
        return int(value) if math.isfinite(value) else None
    if value is None or isinstance(value, bool):
        return None
    match = _LEADING_INT.match(str(value).strip())
    return int(match.group(0)) if match else None
