"""
Week identity helpers for memoizing generated plans.

The engine never caches anything itself. A caller that wants to skip
regenerating a plan keeps its own mapping keyed by build_plan_cache_key();
a miss simply regenerates an identical plan.
"""

from typing import Tuple, Union

from .utils import add_days, day_of_week

CACHE_KEY_DELIMITER = ':'


def get_monday_of_week(date_key: str) -> str:
    """
    Monday (YYYY-MM-DD) of the Monday-to-Sunday week containing `date_key`.

    Returns the key unchanged when it already is a Monday; month and year
    boundaries are crossed as needed.
    """
    return add_days(date_key, -day_of_week(date_key))


def get_week_dates(monday_key: str) -> Tuple[str, ...]:
    """Seven consecutive date keys starting at `monday_key`."""
    return tuple(add_days(monday_key, offset) for offset in range(7))


def _format_signal(value: Union[str, int, float]) -> str:
    # 300 and 300.0 must produce the same key
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_plan_cache_key(
    week_of: str,
    session_count: int,
    other_signal: Union[str, int, float]
) -> str:
    """
    Build a memoization key for a weekly plan.

    Two keys are equal exactly when week, session count and the extra
    signal (typically the threshold pace) are all equal.

    Args:
        week_of: Monday date key
        session_count: Number of sessions the plan was generated from
        other_signal: Any further input that should invalidate the plan

    Returns:
        Colon-delimited key, e.g. '2026-02-09:5:300'
    """
    return CACHE_KEY_DELIMITER.join(
        (week_of, str(session_count), _format_signal(other_signal))
    )
