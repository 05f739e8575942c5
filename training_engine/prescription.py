"""
Prescription Engine: seven-day workout plans from the current load state.

Plan generation is a pipeline of pure stages, each returning a new tuple:

1. Template selection keyed by form status (or the conservative no-data
   template while history is too short to trust ACWR)
2. Load guardrails keyed by load state (strip or soften intensity)
3. Hard/easy repair so no two intensity days are adjacent
4. Step expansion with pace targets from the athlete's zones
5. TSS and duration estimation

Based on:
- Hard/easy sequencing (Bowerman)
- Gabbett (2016): ACWR-driven load reduction
- Coggan & Allen (2010): TSS-per-hour intensity rates

Run the demo with: python -m training_engine.prescription
"""

from typing import Dict, Optional, Sequence, Tuple

from loguru import logger

from .coaching import get_form_status, get_injury_risk, get_load_state
from .config import EngineConfig, DEFAULT_CONFIG
from .models import (
    INTENSITY_TYPES,
    DailyMetrics,
    FormStatus,
    LoadState,
    PlanContext,
    PlanMode,
    PrescribedWorkout,
    RunningZone,
    StepType,
    TrainingSession,
    WeeklyPlan,
    WorkoutStep,
    WorkoutType,
    ZoneName,
)
from .utils import round_half_up
from .week_key import get_monday_of_week, get_week_dates
from .zones import get_zone, get_zone_mid_pace


DAY_NAMES = ('Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday')

WeekTemplate = Tuple[WorkoutType, ...]

R = WorkoutType.REST
REC = WorkoutType.RECOVERY
E = WorkoutType.EASY
T = WorkoutType.TEMPO
LR = WorkoutType.LONG_RUN
THR = WorkoutType.THRESHOLD_INTERVALS
VO2 = WorkoutType.VO2MAX_INTERVALS

# ═══════════════════════════════════════════════════════════════════════════════
# WEEK TEMPLATES (Monday..Sunday)
# ═══════════════════════════════════════════════════════════════════════════════

# Every form template rests on Saturday; undertraining never upgrades it.
REST_ANCHOR_INDEX = 5

NO_DATA_TEMPLATE: WeekTemplate = (R, E, R, E, E, E, E)

_FRESH_TEMPLATE: WeekTemplate = (E, VO2, REC, THR, T, R, LR)

FORM_TEMPLATES: Dict[FormStatus, WeekTemplate] = {
    FormStatus.OVERLOAD: (R, REC, R, REC, R, E, E),
    FormStatus.OPTIMAL: (E, THR, REC, VO2, T, R, LR),
    FormStatus.NEUTRAL: (E, THR, REC, T, E, R, LR),
    FormStatus.FRESH: _FRESH_TEMPLATE,
    FormStatus.DETRAINING: _FRESH_TEMPLATE,
}

# ═══════════════════════════════════════════════════════════════════════════════
# WORKOUT SKELETONS
# ═══════════════════════════════════════════════════════════════════════════════
# (step type, minutes, zone, repeat)

StepSpec = Tuple[StepType, int, ZoneName, Optional[int]]

WORKOUT_SKELETONS: Dict[WorkoutType, Tuple[str, Tuple[StepSpec, ...]]] = {
    WorkoutType.REST: ('Rest Day', ()),
    WorkoutType.RECOVERY: ('25min Recovery', (
        (StepType.WORK, 25, ZoneName.RECOVERY, None),
    )),
    WorkoutType.EASY: ('45min Easy', (
        (StepType.WORK, 45, ZoneName.EASY, None),
    )),
    WorkoutType.LONG_RUN: ('90min Long Run', (
        (StepType.WORK, 75, ZoneName.EASY, None),
        (StepType.WORK, 15, ZoneName.TEMPO, None),
    )),
    WorkoutType.TEMPO: ('45min Tempo', (
        (StepType.WARMUP, 10, ZoneName.EASY, None),
        (StepType.WORK, 25, ZoneName.TEMPO, None),
        (StepType.COOLDOWN, 10, ZoneName.EASY, None),
    )),
    WorkoutType.THRESHOLD_INTERVALS: ('5x5min @ Threshold', (
        (StepType.WARMUP, 10, ZoneName.EASY, None),
        (StepType.WORK, 5, ZoneName.THRESHOLD, 5),
        (StepType.RECOVERY, 2, ZoneName.RECOVERY, 5),
        (StepType.COOLDOWN, 10, ZoneName.EASY, None),
    )),
    WorkoutType.VO2MAX_INTERVALS: ('5x3min @ VO2max', (
        (StepType.WARMUP, 15, ZoneName.EASY, None),
        (StepType.WORK, 3, ZoneName.VO2MAX, 5),
        (StepType.RECOVERY, 3, ZoneName.RECOVERY, 5),
        (StepType.COOLDOWN, 10, ZoneName.EASY, None),
    )),
}

GUARDRAIL_NOTES: Dict[LoadState, str] = {
    LoadState.IMMATURE: '',
    LoadState.TRANSITIONING: '',
    LoadState.HIGH_RISK: ' Load spike detected: intervals removed and hard days softened to easy running.',
    LoadState.MODERATE_RISK: ' Load is ramping quickly: intervals and the long run are replaced with easy running.',
    LoadState.UNDERTRAINING: ' Recent load is below your baseline: one extra easy run added.',
    LoadState.SWEET_SPOT: '',
}


# ═══════════════════════════════════════════════════════════════════════════════
# STAGE 1: TEMPLATE SELECTION
# ═══════════════════════════════════════════════════════════════════════════════

def select_template(form_status: Optional[FormStatus]) -> WeekTemplate:
    """Base week for a form status; None selects the no-data template."""
    if form_status is None:
        return NO_DATA_TEMPLATE
    return FORM_TEMPLATES[form_status]


# ═══════════════════════════════════════════════════════════════════════════════
# STAGE 2: LOAD GUARDRAILS
# ═══════════════════════════════════════════════════════════════════════════════

def _downgrade_for_high_risk(template: WeekTemplate) -> WeekTemplate:
    def downgrade(t: WorkoutType) -> WorkoutType:
        if t in (THR, VO2):
            return R
        if t in (T, LR):
            return E
        return t
    return tuple(downgrade(t) for t in template)


def _downgrade_for_moderate_risk(template: WeekTemplate) -> WeekTemplate:
    return tuple(E if t in (THR, VO2, LR) else t for t in template)


def _upgrade_for_undertraining(template: WeekTemplate) -> WeekTemplate:
    # Prefer turning a rest day into a run; fall back to a recovery day.
    for target in (R, REC):
        for i, t in enumerate(template):
            if t == target and i != REST_ANCHOR_INDEX:
                return template[:i] + (E,) + template[i + 1:]
    return template


def apply_load_guardrails(
    template: WeekTemplate,
    load_state: LoadState
) -> WeekTemplate:
    """
    Soften or strengthen a week according to the load state.

    Rules:
        - high-risk: intervals -> rest, long run and tempo -> easy
        - moderate-risk: intervals and long run -> easy, tempo kept
        - undertraining: one rest (else recovery) day -> easy, never the
          Saturday rest anchor
        - sweet-spot, immature, transitioning: unchanged

    Args:
        template: Seven workout types, Monday first
        load_state: Current load state

    Returns:
        New template; the input is never modified
    """
    if load_state == LoadState.HIGH_RISK:
        return _downgrade_for_high_risk(template)
    elif load_state == LoadState.MODERATE_RISK:
        return _downgrade_for_moderate_risk(template)
    elif load_state == LoadState.UNDERTRAINING:
        return _upgrade_for_undertraining(template)
    elif load_state in (LoadState.SWEET_SPOT, LoadState.IMMATURE, LoadState.TRANSITIONING):
        return tuple(template)
    raise ValueError(f"Unhandled load state: {load_state}")


# ═══════════════════════════════════════════════════════════════════════════════
# STAGE 3: HARD/EASY REPAIR
# ═══════════════════════════════════════════════════════════════════════════════

def enforce_hard_easy(template: WeekTemplate) -> WeekTemplate:
    """
    Replace any intensity day that directly follows another with easy.

    Scans Monday to Sunday, so the earlier of two adjacent hard days is kept.
    """
    result = list(template)
    for i in range(1, len(result)):
        if result[i] in INTENSITY_TYPES and result[i - 1] in INTENSITY_TYPES:
            logger.debug(f"[PLAN] Day {i}: {result[i].value} follows {result[i - 1].value}, set to easy")
            result[i] = E
    return tuple(result)


def has_back_to_back_intensity(types: Sequence[WorkoutType]) -> bool:
    """Whether any two adjacent days are both intensity days."""
    return any(
        a in INTENSITY_TYPES and b in INTENSITY_TYPES
        for a, b in zip(types, types[1:])
    )


# ═══════════════════════════════════════════════════════════════════════════════
# STAGE 4: STEP EXPANSION
# ═══════════════════════════════════════════════════════════════════════════════

def _build_step(
    step_type: StepType,
    minutes: int,
    zone_name: ZoneName,
    repeat: Optional[int],
    zones: Sequence[RunningZone]
) -> WorkoutStep:
    zone = get_zone(zone_name, zones)
    pace_min, pace_max = (zone.min_pace, zone.max_pace) if zone else (0, 0)
    return WorkoutStep(
        type=step_type,
        duration_sec=minutes * 60,
        zone=zone_name,
        target_pace_min=pace_min,
        target_pace_max=pace_max,
        repeat=repeat,
    )


def build_workout(
    workout_type: WorkoutType,
    zones: Sequence[RunningZone]
) -> Tuple[str, Tuple[WorkoutStep, ...]]:
    """
    Expand a workout type into its title and timed steps.

    Args:
        workout_type: Type to expand
        zones: Athlete's running zones (pace targets)

    Returns:
        Tuple of (title, steps); rest has no steps
    """
    title, specs = WORKOUT_SKELETONS[workout_type]
    steps = tuple(
        _build_step(step_type, minutes, zone_name, repeat, zones)
        for step_type, minutes, zone_name, repeat in specs
    )
    return title, steps


def compute_steps_duration(steps: Sequence[WorkoutStep]) -> int:
    """Total duration in seconds, counting repeats."""
    return sum(s.total_duration_sec for s in steps)


# ═══════════════════════════════════════════════════════════════════════════════
# STAGE 5: ESTIMATION
# ═══════════════════════════════════════════════════════════════════════════════

def _tss_for_duration(
    workout_type: WorkoutType,
    duration_sec: float,
    config: EngineConfig
) -> int:
    if workout_type == WorkoutType.REST:
        return 0
    rate = config.tss_rate(workout_type.value)
    return round_half_up((duration_sec / 3600.0) * rate)


def estimate_workout_tss(
    workout: PrescribedWorkout,
    config: Optional[EngineConfig] = None
) -> int:
    """
    Estimate TSS from duration and a per-type hourly rate.

    Rates: recovery 30, easy 50, long run 55, tempo 65, threshold 75,
    VO2max 85 TSS/hour. Rest is always 0.

    Args:
        workout: Workout with estimated_duration_sec set
        config: Engine parameters (TSS rates)

    Returns:
        Estimated TSS rounded to the nearest integer
    """
    if config is None:
        config = DEFAULT_CONFIG
    return _tss_for_duration(workout.type, workout.estimated_duration_sec, config)


def estimate_workout_distance(
    workout: PrescribedWorkout,
    zones: Sequence[RunningZone]
) -> int:
    """
    Estimate distance by running each step at its zone's mid pace.

    Args:
        workout: Workout to estimate
        zones: Athlete's running zones

    Returns:
        Distance in metres, rounded; 0 for rest
    """
    if workout.type == WorkoutType.REST:
        return 0

    meters = 0.0
    for s in workout.steps:
        zone = get_zone(s.zone, zones)
        if zone is None:
            continue
        mid_pace = get_zone_mid_pace(zone)
        if mid_pace <= 0:
            continue
        meters += s.total_duration_sec / mid_pace * 1000.0
    return round_half_up(meters)


# ═══════════════════════════════════════════════════════════════════════════════
# PLAN ASSEMBLY
# ═══════════════════════════════════════════════════════════════════════════════

def get_rationale(context: PlanContext, config: Optional[EngineConfig] = None) -> str:
    """
    Explain why the week looks the way it does.

    Any plan generated from fewer than 4 weeks of history says the metrics
    are still stabilizing.
    """
    if config is None:
        config = DEFAULT_CONFIG

    if context.form_status is None:
        return (
            'No training history yet. Starting with a conservative plan of easy '
            'runs while your metrics are stabilizing.'
        )

    tsb = round_half_up(context.tsb)
    risk = get_injury_risk(context.acwr, config)
    text = (
        f"TSB is {'+' if context.tsb > 0 else ''}{tsb}. "
        f"Form: {context.form_status.value}. "
        f"ACWR {context.acwr:.2f} ({risk.value} injury risk)."
    )

    if context.data_maturity_days < config.maturity_stable_days:
        text += (
            f" Metrics are still stabilizing ({context.data_maturity_days} days of data); "
            f"the plan stays conservative until 4 weeks of history."
        )

    if context.load_state is not None:
        text += GUARDRAIL_NOTES[context.load_state]

    return text


def _resolve_week(
    latest_metrics: Optional[DailyMetrics],
    data_maturity_days: int,
    config: EngineConfig
) -> Tuple[PlanContext, WeekTemplate]:
    if latest_metrics is None:
        return PlanContext(mode=PlanMode.NO_DATA), NO_DATA_TEMPLATE

    form_status = get_form_status(latest_metrics.tsb, config)
    load_state = get_load_state(latest_metrics.acwr, data_maturity_days, config)

    # Short history: ACWR is unreliable, stay conservative. A high-risk spike
    # during the transition band still gets the guarded form template.
    if load_state in (LoadState.IMMATURE, LoadState.TRANSITIONING):
        context = PlanContext(
            mode=PlanMode.NO_DATA,
            form_status=form_status,
            tsb=latest_metrics.tsb,
            acwr=latest_metrics.acwr,
            data_maturity_days=data_maturity_days,
            load_state=load_state,
        )
        return context, NO_DATA_TEMPLATE

    context = PlanContext(
        mode=PlanMode.NORMAL,
        form_status=form_status,
        tsb=latest_metrics.tsb,
        acwr=latest_metrics.acwr,
        data_maturity_days=data_maturity_days,
        load_state=load_state,
    )
    template = apply_load_guardrails(select_template(form_status), load_state)
    return context, template


def generate_weekly_plan(
    latest_metrics: Optional[DailyMetrics],
    sessions: Sequence[TrainingSession],
    zones: Sequence[RunningZone],
    today_key: str,
    data_maturity_days: int,
    config: Optional[EngineConfig] = None
) -> WeeklyPlan:
    """
    Generate the Monday-to-Sunday plan for the week containing `today_key`.

    The same inputs always produce an equal plan.

    Args:
        latest_metrics: Most recent DailyMetrics, or None without history
        sessions: Session history the metrics were computed from
        zones: Athlete's running zones; callers without a threshold pace
            should not generate a plan
        today_key: Today's date key (YYYY-MM-DD)
        data_maturity_days: Days since the first logged session
        config: Engine parameters

    Returns:
        WeeklyPlan whose total_estimated_tss is the sum of its workouts
    """
    if config is None:
        config = DEFAULT_CONFIG

    context, template = _resolve_week(latest_metrics, data_maturity_days, config)
    template = enforce_hard_easy(template)

    monday = get_monday_of_week(today_key)
    rationale = get_rationale(context, config)

    workouts = []
    for i, (date_key, workout_type) in enumerate(zip(get_week_dates(monday), template)):
        title, steps = build_workout(workout_type, zones)
        duration = compute_steps_duration(steps)
        workouts.append(PrescribedWorkout(
            id=f"plan-{date_key}",
            date=date_key,
            day_label=DAY_NAMES[i],
            type=workout_type,
            title=title,
            rationale=rationale,
            steps=steps,
            estimated_duration_sec=duration,
            estimated_tss=_tss_for_duration(workout_type, duration, config),
            is_taper=False,
        ))

    logger.debug(
        f"[PLAN] Week of {monday}: mode={context.mode.value} "
        f"load_state={context.load_state.value if context.load_state else None} "
        f"sessions={len(sessions)} types={[t.value for t in template]}"
    )

    return WeeklyPlan(
        week_of=monday,
        workouts=tuple(workouts),
        total_estimated_tss=sum(w.estimated_tss for w in workouts),
        context=context,
    )


if __name__ == '__main__':
    from .zones import compute_running_zones

    print("Testing Prescription Engine...")
    print("=" * 60)

    demo_zones = compute_running_zones(270)
    for tsb in (-35, -15, 0, 10, 30):
        for acwr in (0.6, 1.0, 1.4, 1.6):
            metrics = DailyMetrics(date='2026-02-20', tss=50, ctl=40, atl=40, tsb=tsb, acwr=acwr)
            plan = generate_weekly_plan(metrics, [], demo_zones, '2026-02-20', 60)
            types = [w.type.value for w in plan.workouts]
            assert not has_back_to_back_intensity(plan.workout_types), types
            print(f"TSB {tsb:4d} ACWR {acwr:.1f}: {plan.total_estimated_tss:4d} TSS  {types}")

    print("\nAll tests passed!")
