"""
Training load metrics: daily stress, CTL, ATL, TSB and ACWR.

Implements the Performance Management Chart recurrence (Coggan & Allen):

    acc_t = acc_{t-1} + (stress_t - acc_{t-1}) * alpha,  alpha = 1 - e^(-1/N)

with N = 42 days for chronic load and N = 7 for acute load. After N days of
constant stress S from zero the accumulator equals S * (1 - e^(-1)). This differs
from the 2 / (N + 1) smoothing factor common in finance.

The series is recomputed from the full history on every call; nothing is
cached or updated incrementally.

Run the demo with: python -m training_engine.metrics
"""

import math
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd
from loguru import logger

from .config import EngineConfig, DEFAULT_CONFIG
from .models import DailyMetrics, Sport, TrainingSession
from .utils import round_half_up, to_date_key, now_ms, parse_date_key, DATE_KEY_FORMAT, MS_PER_DAY


def ewma_alpha(days: float) -> float:
    """Smoothing factor for an N-day time constant: 1 - e^(-1/N)."""
    return 1.0 - math.exp(-1.0 / days)


def ewma_step(previous: float, today_stress: float, days: float) -> float:
    """
    Advance the accumulator by one day.

    Non-finite stress counts as 0. A non-finite result keeps the previous
    value so a single bad input cannot poison the rest of the series.

    Args:
        previous: Accumulator value for the previous day
        today_stress: Stress logged today
        days: Time constant N in days

    Returns:
        Accumulator value for today
    """
    safe_stress = today_stress if math.isfinite(today_stress) else 0.0
    result = previous + (safe_stress - previous) * ewma_alpha(days)
    return result if math.isfinite(result) else previous


def calculate_ewma(values: Sequence[float], days: float) -> np.ndarray:
    """
    Run the recurrence over a daily series, starting from 0.

    Args:
        values: Daily stress values in chronological order, no gaps
        days: Time constant N in days

    Returns:
        Array of accumulator values, one per input day
    """
    values = np.asarray(values, dtype=float)
    ewma = np.zeros(len(values))

    acc = 0.0
    for i, value in enumerate(values):
        acc = ewma_step(acc, float(value), days)
        ewma[i] = acc

    return ewma


def _qualifying_sessions(
    sessions: Sequence[TrainingSession],
    include_ghosts: bool
) -> List[TrainingSession]:
    if include_ghosts:
        return list(sessions)
    return [s for s in sessions if not s.is_planned]


def aggregate_daily_stress(
    sessions: Sequence[TrainingSession],
    end_date_ms: Optional[float] = None
) -> pd.Series:
    """
    Sum stress per local calendar day over a gap-free day range.

    The range runs from the earliest session's day to the end date's day,
    both inclusive. Days without sessions are 0. Sessions after the end
    date fall outside the range and are dropped.

    Args:
        sessions: Sessions already filtered for ghosts
        end_date_ms: Last day of the range (default: now)

    Returns:
        Float series indexed by day (DatetimeIndex); empty when there are
        no sessions or the end date precedes the first session
    """
    if not sessions:
        return pd.Series(dtype=float)

    keys = pd.to_datetime(
        [to_date_key(s.date_ms) for s in sessions], format=DATE_KEY_FORMAT
    )
    stress = [s.tss if math.isfinite(s.tss) else 0.0 for s in sessions]

    end_key = to_date_key(now_ms() if end_date_ms is None else end_date_ms)
    days = pd.date_range(start=keys.min(), end=pd.Timestamp(end_key), freq='D')

    return (
        pd.Series(stress, index=keys, dtype=float)
        .groupby(level=0)
        .sum()
        .reindex(days, fill_value=0.0)
    )


def compute_metrics(
    sessions: Sequence[TrainingSession],
    end_date_ms: Optional[float] = None,
    include_ghosts: bool = False,
    config: Optional[EngineConfig] = None
) -> List[DailyMetrics]:
    """
    Compute one DailyMetrics entry per day from the first session to the end date.

    Args:
        sessions: Session history (planned sessions are skipped by default)
        end_date_ms: Last day to compute, epoch ms (default: today)
        include_ghosts: Include planned sessions in the load
        config: Engine parameters (EWMA windows)

    Returns:
        Chronological, gap-free list of metrics; empty for empty input
    """
    if config is None:
        config = DEFAULT_CONFIG

    qualifying = _qualifying_sessions(sessions, include_ghosts)
    daily = aggregate_daily_stress(qualifying, end_date_ms)
    if daily.empty:
        return []

    stress = daily.to_numpy(dtype=float)
    ctl = calculate_ewma(stress, config.ctl_days)
    atl = calculate_ewma(stress, config.atl_days)
    tsb = ctl - atl
    acwr = np.divide(atl, ctl, out=np.zeros_like(atl), where=ctl > 0)

    metrics = [
        DailyMetrics(
            date=day.strftime(DATE_KEY_FORMAT),
            tss=float(stress[i]),
            ctl=round_half_up(float(ctl[i]), 1),
            atl=round_half_up(float(atl[i]), 1),
            tsb=round_half_up(float(tsb[i]), 1),
            acwr=round_half_up(float(acwr[i]), 2),
        )
        for i, day in enumerate(daily.index)
    ]

    logger.debug(
        f"[METRICS] Computed {len(metrics)} days from {len(qualifying)} sessions "
        f"({metrics[0].date} to {metrics[-1].date})"
    )
    return metrics


def get_current_metrics(
    sessions: Sequence[TrainingSession],
    end_date_ms: Optional[float] = None,
    config: Optional[EngineConfig] = None
) -> Optional[DailyMetrics]:
    """Latest metrics snapshot, or None when there is no history."""
    metrics = compute_metrics(sessions, end_date_ms=end_date_ms, config=config)
    return metrics[-1] if metrics else None


def get_data_maturity_days(
    sessions: Sequence[TrainingSession],
    today_ms: Optional[float] = None
) -> int:
    """
    Count calendar days of logged history, first session day through today.

    Matches the length of the series compute_metrics returns for the same
    inputs, so a single session logged today gives 1.

    Args:
        sessions: Session history (planned sessions are ignored)
        today_ms: Reference "today", epoch ms (default: now)

    Returns:
        Number of days, 0 when there is no history up to today
    """
    logged = _qualifying_sessions(sessions, include_ghosts=False)
    if not logged:
        return 0

    first = min(parse_date_key(to_date_key(s.date_ms)) for s in logged)
    today = parse_date_key(to_date_key(now_ms() if today_ms is None else today_ms))
    return max(0, (today - first).days + 1)


if __name__ == '__main__':
    print("Testing load metrics...")

    start = now_ms() - 42 * MS_PER_DAY
    demo = [
        TrainingSession(id=f"day-{i}", sport=Sport.RUNNING, date_ms=start + i * MS_PER_DAY,
                        duration_sec=3600, distance_m=10000, tss=50)
        for i in range(42)
    ]
    series = compute_metrics(demo, end_date_ms=start + 41 * MS_PER_DAY)
    last = series[-1]
    print(f"After 42 days at TSS 50: CTL={last.ctl} ATL={last.atl} TSB={last.tsb} ACWR={last.acwr}")
