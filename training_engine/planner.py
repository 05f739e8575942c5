"""
Coach Planner: runs the whole pipeline for a caller.

Ties the modules together the way a UI hook or service would use them:
session history -> daily metrics -> classification -> weekly plan, with an
optional caller-owned cache so a plan is only regenerated when its inputs
change.
"""

from dataclasses import dataclass
from typing import Optional, Dict, Any, List, MutableMapping, Sequence

from loguru import logger

from .coaching import get_coaching_recommendation, get_load_state
from .config import EngineConfig, DEFAULT_CONFIG
from .messages import get_form_message_detailed
from .metrics import compute_metrics
from .models import CoachingRecommendation, DailyMetrics, TrainingSession, WeeklyPlan
from .prescription import generate_weekly_plan
from .reports import format_weekly_plan
from .utils import now_ms, to_date_key
from .week_key import build_plan_cache_key, get_monday_of_week
from .zones import compute_running_zones


@dataclass(frozen=True)
class CoachSnapshot:
    """Everything a coaching view needs for one day."""
    today: str
    metrics: List[DailyMetrics]
    recommendation: CoachingRecommendation
    detailed_message: str
    plan: Optional[WeeklyPlan]

    @property
    def latest(self) -> Optional[DailyMetrics]:
        """Most recent metrics entry, if any."""
        return self.metrics[-1] if self.metrics else None


class CoachPlanner:
    """
    Orchestrates metrics, classification and prescription.

    Holds only configuration; every call recomputes from the sessions it is
    given.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        """
        Initialize the planner.

        Args:
            config: Engine parameters (default: DEFAULT_CONFIG)
        """
        self.config = config if config is not None else DEFAULT_CONFIG

    def plan_week(
        self,
        sessions: Sequence[TrainingSession],
        threshold_pace_sec: Optional[float],
        today_ms: Optional[float] = None,
        cache: Optional[MutableMapping[str, WeeklyPlan]] = None
    ) -> Optional[WeeklyPlan]:
        """
        Plan the week containing today.

        Args:
            sessions: Full session history
            threshold_pace_sec: Threshold pace (sec/km); None or <= 0 means
                no zones can be derived and no plan is generated
            today_ms: Reference time, epoch ms (default: now)
            cache: Caller-owned mapping of cache key -> plan

        Returns:
            WeeklyPlan, or None without a usable threshold pace
        """
        zones = compute_running_zones(threshold_pace_sec or 0)
        if not zones:
            logger.debug("[PLAN] No threshold pace set, skipping plan generation")
            return None

        if today_ms is None:
            today_ms = now_ms()
        today = to_date_key(today_ms)

        key = build_plan_cache_key(get_monday_of_week(today), len(sessions), threshold_pace_sec)
        if cache is not None and key in cache:
            logger.debug(f"[PLAN] Cache hit for {key}")
            return cache[key]

        metrics = compute_metrics(sessions, end_date_ms=today_ms, config=self.config)
        latest = metrics[-1] if metrics else None
        plan = generate_weekly_plan(latest, sessions, zones, today, len(metrics), self.config)

        if cache is not None:
            cache[key] = plan
        return plan

    def snapshot(
        self,
        sessions: Sequence[TrainingSession],
        threshold_pace_sec: Optional[float] = None,
        today_ms: Optional[float] = None
    ) -> CoachSnapshot:
        """
        Compute metrics, recommendation and plan in one pass.

        Data maturity is the length of the daily series, i.e. the number of
        days from the first logged session through today.
        """
        if today_ms is None:
            today_ms = now_ms()
        today = to_date_key(today_ms)

        metrics = compute_metrics(sessions, end_date_ms=today_ms, config=self.config)
        latest = metrics[-1] if metrics else None
        maturity = len(metrics)

        recommendation = get_coaching_recommendation(latest, maturity, self.config)
        zones = compute_running_zones(threshold_pace_sec or 0)
        plan = (
            generate_weekly_plan(latest, sessions, zones, today, maturity, self.config)
            if zones else None
        )

        return CoachSnapshot(
            today=today,
            metrics=metrics,
            recommendation=recommendation,
            detailed_message=get_form_message_detailed(recommendation, self.config),
            plan=plan,
        )

    def get_summary(self, snapshot: CoachSnapshot) -> Dict[str, Any]:
        """
        Summarize a snapshot as a plain dictionary.

        Args:
            snapshot: Output of snapshot()

        Returns:
            Dictionary with classification fields and the plan, if any
        """
        rec = snapshot.recommendation
        summary = {
            'today': snapshot.today,
            'days_of_data': len(snapshot.metrics),
            'recommendation': rec.to_dict(),
            'load_state': get_load_state(rec.acwr, rec.data_maturity_days, self.config).value,
            'detailed_message': snapshot.detailed_message,
        }

        if snapshot.latest is not None:
            summary['latest'] = snapshot.latest.to_dict()

        if snapshot.plan is not None:
            summary['plan'] = snapshot.plan.to_dict()

        return summary

    def format_snapshot(self, snapshot: CoachSnapshot) -> str:
        """
        Format a snapshot as readable text.

        Args:
            snapshot: Output of snapshot()

        Returns:
            Formatted string
        """
        rec = snapshot.recommendation
        lines = [
            f"Coaching for {snapshot.today}",
            "=" * 50,
            f"Form: {rec.status.value} (TSB {rec.tsb:+.1f})",
            f"ACWR: {rec.acwr:.2f} ({rec.injury_risk.value} injury risk)",
            f"Days of data: {rec.data_maturity_days}",
            "",
            snapshot.detailed_message,
        ]

        if snapshot.plan is not None:
            lines.extend(["", format_weekly_plan(snapshot.plan)])

        return "\n".join(lines)
