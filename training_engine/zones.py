"""
Running pace zones derived from a threshold pace.

Each zone is a fixed percentage band of the lactate-threshold pace
(seconds per kilometre). Slower paces are larger numbers, so each zone's
min_pace is its slow end and max_pace its fast end.
"""

import math
from typing import Optional, Sequence, Tuple

from .models import RunningZone, ZoneName
from .utils import round_half_up


# (name, label, slow multiplier, fast multiplier, colour)
ZONE_DEFINITIONS: Tuple[Tuple[ZoneName, str, float, float, str], ...] = (
    (ZoneName.RECOVERY, 'Recovery', 1.40, 1.29, '#60a5fa'),
    (ZoneName.EASY, 'Easy', 1.29, 1.16, '#34d399'),
    (ZoneName.TEMPO, 'Tempo', 1.16, 1.05, '#fbbf24'),
    (ZoneName.THRESHOLD, 'Threshold', 1.05, 0.97, '#f97316'),
    (ZoneName.VO2MAX, 'VO2max', 0.97, 0.86, '#ef4444'),
)


def compute_running_zones(threshold_pace_sec: float) -> Tuple[RunningZone, ...]:
    """
    Derive the five running zones from a threshold pace.

    Adjacent zones share a boundary (zone[i].max_pace == zone[i+1].min_pace)
    because neighbouring multipliers are identical and rounding is applied
    to the same product.

    Args:
        threshold_pace_sec: Lactate-threshold pace in seconds per kilometre

    Returns:
        Zones ordered slowest (recovery) to fastest (vo2max), or an empty
        tuple when the threshold pace is not a positive finite number
    """
    if not math.isfinite(threshold_pace_sec) or threshold_pace_sec <= 0:
        return ()

    return tuple(
        RunningZone(
            name=name,
            label=label,
            min_pace=round_half_up(threshold_pace_sec * slow_pct),
            max_pace=round_half_up(threshold_pace_sec * fast_pct),
            color=color,
        )
        for name, label, slow_pct, fast_pct, color in ZONE_DEFINITIONS
    )


def get_zone_for_pace(
    pace_sec: float,
    zones: Sequence[RunningZone]
) -> Optional[RunningZone]:
    """
    Find the zone containing a pace.

    Both bounds are inclusive; on a shared boundary the slower zone wins.

    Args:
        pace_sec: Pace in seconds per kilometre
        zones: Zones from compute_running_zones

    Returns:
        The matching zone, or None when the pace is outside every band
    """
    for zone in zones:
        if zone.contains(pace_sec):
            return zone
    return None


def get_zone(name: ZoneName, zones: Sequence[RunningZone]) -> Optional[RunningZone]:
    """Look up a zone by name."""
    for zone in zones:
        if zone.name == name:
            return zone
    return None


def get_zone_mid_pace(zone: RunningZone) -> int:
    """Midpoint of a zone's bounds, rounded to the nearest second."""
    return round_half_up((zone.min_pace + zone.max_pace) / 2)
