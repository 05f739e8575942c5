"""
Date-key and rounding helpers shared by the engine modules.

Date keys are local calendar days formatted as YYYY-MM-DD. Timestamps are
milliseconds since the Unix epoch, the way the session store records them.
"""

from datetime import date, datetime, timedelta
import math
import time
from typing import Union

DATE_KEY_FORMAT = '%Y-%m-%d'
MS_PER_DAY = 24 * 60 * 60 * 1000


def round_half_up(value: float, digits: int = 0) -> Union[int, float]:
    """
    Round to `digits` decimals with halves going up (37.5 -> 38).

    Python's round() rounds halves to even, which would shift values that
    sit exactly on a .5 boundary.

    Args:
        value: Number to round
        digits: Decimal places to keep

    Returns:
        int when digits == 0, otherwise float
    """
    if digits == 0:
        return int(math.floor(value + 0.5))
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def to_date_key(timestamp_ms: float) -> str:
    """Convert an epoch-millisecond timestamp to its local YYYY-MM-DD key."""
    return datetime.fromtimestamp(timestamp_ms / 1000.0).strftime(DATE_KEY_FORMAT)


def parse_date_key(date_key: str) -> date:
    """Parse a YYYY-MM-DD key into a date."""
    return datetime.strptime(date_key, DATE_KEY_FORMAT).date()


def add_days(date_key: str, days: int) -> str:
    """Shift a date key by a whole number of calendar days."""
    return (parse_date_key(date_key) + timedelta(days=days)).strftime(DATE_KEY_FORMAT)


def day_of_week(date_key: str) -> int:
    """Monday-based weekday index (Monday = 0 ... Sunday = 6)."""
    return parse_date_key(date_key).weekday()

