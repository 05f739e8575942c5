"""
Report helpers for the chart and calendar layers.

Turns engine outputs into a pandas frame for fitness/fatigue/form charts
and into plain text for quick inspection.
"""

from typing import Sequence

import pandas as pd

from .models import DailyMetrics, WeeklyPlan, WorkoutType

METRIC_COLUMNS = ['tss', 'ctl', 'atl', 'tsb', 'acwr']


def metrics_to_frame(metrics: Sequence[DailyMetrics]) -> pd.DataFrame:
    """
    Daily metrics as a DataFrame indexed by date.

    Args:
        metrics: Output of compute_metrics

    Returns:
        DataFrame with columns tss, ctl, atl, tsb, acwr and a DatetimeIndex
        named 'date'; empty (with those columns) for empty input
    """
    if not metrics:
        return pd.DataFrame(
            columns=METRIC_COLUMNS, index=pd.DatetimeIndex([], name='date'), dtype=float
        )

    frame = pd.DataFrame([m.to_dict() for m in metrics])
    frame['date'] = pd.to_datetime(frame['date'])
    return frame.set_index('date')[METRIC_COLUMNS]


def weekly_load_summary(metrics: Sequence[DailyMetrics]) -> pd.DataFrame:
    """
    Weekly (Monday-start) totals and end-of-week values.

    Returns:
        DataFrame indexed by week start with total tss and the last
        ctl/atl/tsb/acwr of each week
    """
    frame = metrics_to_frame(metrics)
    if frame.empty:
        return frame

    weekly = frame.resample('W-SUN', label='left', closed='right')
    summary = weekly[['ctl', 'atl', 'tsb', 'acwr']].last()
    summary.insert(0, 'tss', weekly['tss'].sum())
    summary.index = summary.index + pd.Timedelta(days=1)
    summary.index.name = 'week_of'
    return summary


def format_weekly_plan(plan: WeeklyPlan) -> str:
    """
    Format a plan as readable text.

    Args:
        plan: Generated weekly plan

    Returns:
        One line per day plus a TSS total
    """
    lines = [f"Week of {plan.week_of} ({plan.context.mode.value})", "=" * 50]

    for workout in plan.workouts:
        if workout.type == WorkoutType.REST:
            lines.append(f"{workout.day_label:10s}: REST")
            continue
        minutes = workout.estimated_duration_sec / 60
        lines.append(
            f"{workout.day_label:10s}: {workout.title:22s} "
            f"({minutes:.0f} min, {workout.estimated_tss} TSS)"
        )

    lines.append("-" * 50)
    lines.append(f"Total estimated TSS: {plan.total_estimated_tss}")
    if plan.workouts:
        lines.append(plan.workouts[0].rationale)

    return "\n".join(lines)
