"""
Tests for the weekly prescription engine.

Tests cover:
1. Plan shape (dates, labels, totals)
2. Form-status templates
3. Load guardrails and the data-maturity branch
4. Hard/easy alternation across every template x load state
5. Step expansion and TSS / distance estimation

Run with: python -m pytest tests/test_prescription.py -v
"""

import itertools
import runpy

import pytest

from training_engine.models import (
    INTENSITY_TYPES,
    FormStatus,
    LoadState,
    PlanMode,
    PrescribedWorkout,
    StepType,
    WorkoutType,
    ZoneName,
)
from training_engine.prescription import (
    FORM_TEMPLATES,
    NO_DATA_TEMPLATE,
    REST_ANCHOR_INDEX,
    apply_load_guardrails,
    build_workout,
    enforce_hard_easy,
    estimate_workout_distance,
    estimate_workout_tss,
    generate_weekly_plan,
    has_back_to_back_intensity,
    select_template,
)

TODAY = '2026-02-20'        # Friday
MATURE = 60

# TSB values landing in each form status
FORM_TSB = {
    FormStatus.DETRAINING: 30,
    FormStatus.FRESH: 10,
    FormStatus.NEUTRAL: 0,
    FormStatus.OPTIMAL: -15,
    FormStatus.OVERLOAD: -35,
}


def _workout(workout_type, duration_sec=0, steps=()):
    return PrescribedWorkout(
        id='test', date=TODAY, day_label='Monday', type=workout_type,
        title='', rationale='', steps=steps, estimated_duration_sec=duration_sec,
    )


# =============================================================================
# Plan shape
# =============================================================================

class TestPlanShape:
    """Tests for the structure of a generated plan."""

    def test_seven_workouts(self, make_metrics, zones):
        """A plan always has seven days."""
        plan = generate_weekly_plan(make_metrics(), [], zones, TODAY, MATURE)
        assert len(plan.workouts) == 7

    def test_starts_on_monday(self, make_metrics, zones):
        """The week starts on the Monday on or before today."""
        plan = generate_weekly_plan(make_metrics(), [], zones, TODAY, MATURE)
        assert plan.week_of == '2026-02-16'
        assert plan.workouts[0].date == '2026-02-16'
        assert plan.workouts[0].day_label == 'Monday'
        assert plan.workouts[6].date == '2026-02-22'
        assert plan.workouts[6].day_label == 'Sunday'

    def test_ids_follow_dates(self, make_metrics, zones):
        """Workout ids are derived from their dates."""
        plan = generate_weekly_plan(make_metrics(), [], zones, TODAY, MATURE)
        assert [w.id for w in plan.workouts] == [f"plan-{w.date}" for w in plan.workouts]

    @pytest.mark.parametrize("tsb,acwr,maturity", [
        (-10, 1.0, MATURE), (-35, 1.6, MATURE), (30, 0.5, MATURE), (0, 1.0, 10),
    ])
    def test_total_is_exact_sum(self, make_metrics, zones, tsb, acwr, maturity):
        """total_estimated_tss equals the sum of the workouts."""
        plan = generate_weekly_plan(make_metrics(tsb=tsb, acwr=acwr), [], zones, TODAY, maturity)
        assert plan.total_estimated_tss == sum(w.estimated_tss for w in plan.workouts)

    def test_neutral_week_total(self, make_metrics, zones):
        """Neutral sweet-spot week: 38+69+13+49+38+0+83."""
        plan = generate_weekly_plan(make_metrics(tsb=0, acwr=1.0), [], zones, TODAY, MATURE)
        assert plan.total_estimated_tss == 290

    def test_rest_days_are_empty(self, make_metrics, zones):
        """Rest has no steps, no duration and no TSS."""
        plan = generate_weekly_plan(make_metrics(tsb=-35), [], zones, TODAY, MATURE)
        rests = [w for w in plan.workouts if w.type == WorkoutType.REST]
        assert rests
        for w in rests:
            assert w.steps == ()
            assert w.estimated_tss == 0
            assert w.estimated_duration_sec == 0

    def test_active_days_have_pace_targets(self, make_metrics, zones):
        """Every step carries positive pace bounds, slower bound first."""
        plan = generate_weekly_plan(make_metrics(tsb=-15), [], zones, TODAY, MATURE)
        for w in plan.workouts:
            if w.type == WorkoutType.REST:
                continue
            assert w.steps
            for s in w.steps:
                assert s.target_pace_max > 0
                assert s.target_pace_min >= s.target_pace_max

    def test_deterministic(self, make_metrics, zones):
        """Identical inputs give identical plans."""
        args = (make_metrics(tsb=-15, acwr=1.1), [], zones, TODAY, MATURE)
        first, second = generate_weekly_plan(*args), generate_weekly_plan(*args)
        assert first == second
        assert first.to_dict() == second.to_dict()

    def test_never_tapers(self, make_metrics, zones):
        """No taper branch exists, so is_taper is always false."""
        plan = generate_weekly_plan(make_metrics(), [], zones, TODAY, MATURE)
        assert not any(w.is_taper for w in plan.workouts)


# =============================================================================
# Templates
# =============================================================================

class TestTemplates:
    """Tests for form-status templates."""

    def test_every_status_has_template(self):
        """Each form status selects a seven-day template."""
        for status in FormStatus:
            assert len(select_template(status)) == 7
        assert select_template(None) == NO_DATA_TEMPLATE

    def test_saturday_rest_anchor(self):
        """Non-overload templates rest on Saturday."""
        for status, template in FORM_TEMPLATES.items():
            if status != FormStatus.OVERLOAD:
                assert template[REST_ANCHOR_INDEX] == WorkoutType.REST

    def test_overload_mostly_rest(self, make_metrics, zones):
        """Overload gives at least four rest/recovery days and no intensity."""
        plan = generate_weekly_plan(make_metrics(tsb=-35), [], zones, TODAY, MATURE)
        types = plan.workout_types
        assert sum(t in (WorkoutType.REST, WorkoutType.RECOVERY) for t in types) >= 4
        assert not INTENSITY_TYPES & set(types)

    def test_optimal_includes_threshold_and_long_run(self, make_metrics, zones):
        """Optimal form carries threshold intervals and a long run."""
        plan = generate_weekly_plan(make_metrics(tsb=-15), [], zones, TODAY, MATURE)
        assert WorkoutType.THRESHOLD_INTERVALS in plan.workout_types
        assert WorkoutType.LONG_RUN in plan.workout_types

    @pytest.mark.parametrize("tsb", [10, 30])
    def test_fresh_and_detraining_include_intervals(self, make_metrics, zones, tsb):
        """Fresh and detraining carry VO2max and threshold intervals."""
        plan = generate_weekly_plan(make_metrics(tsb=tsb, acwr=1.0), [], zones, TODAY, MATURE)
        assert WorkoutType.VO2MAX_INTERVALS in plan.workout_types
        assert WorkoutType.THRESHOLD_INTERVALS in plan.workout_types

    def test_no_metrics_is_conservative(self, zones):
        """No history gives the no-data plan with only the mode in context."""
        plan = generate_weekly_plan(None, [], zones, TODAY, 0)
        assert plan.context.to_dict() == {'mode': 'no-data'}
        types = plan.workout_types
        assert sum(t == WorkoutType.EASY for t in types) >= 4
        assert not INTENSITY_TYPES & set(types)
        assert 'stabilizing' in plan.workouts[0].rationale


# =============================================================================
# Data maturity branch
# =============================================================================

class TestMaturityBranch:
    """Tests for the immature / transitioning branch."""

    @pytest.mark.parametrize("status", list(FormStatus))
    def test_immature_any_form(self, make_metrics, zones, status):
        """14 days of data: no intensity and a stabilizing rationale."""
        plan = generate_weekly_plan(
            make_metrics(tsb=FORM_TSB[status], acwr=1.0), [], zones, TODAY, 14
        )
        assert not INTENSITY_TYPES & set(plan.workout_types)
        assert plan.context.mode == PlanMode.NO_DATA
        assert plan.context.form_status == status
        assert 'stabilizing' in plan.workouts[0].rationale

    @pytest.mark.parametrize("acwr", [0.5, 1.0, 1.4])
    def test_transitioning_stays_conservative(self, make_metrics, zones, acwr):
        """21-27 days without a spike keeps the no-data template."""
        plan = generate_weekly_plan(make_metrics(tsb=-15, acwr=acwr), [], zones, TODAY, 24)
        assert plan.workout_types == NO_DATA_TEMPLATE
        assert plan.context.load_state == LoadState.TRANSITIONING
        assert 'stabilizing' in plan.workouts[0].rationale

    def test_transitioning_spike_uses_guarded_template(self, make_metrics, zones):
        """A spike above 1.5 in the transition band uses the high-risk form week."""
        plan = generate_weekly_plan(make_metrics(tsb=-15, acwr=1.6), [], zones, TODAY, 24)
        assert plan.context.mode == PlanMode.NORMAL
        assert plan.context.load_state == LoadState.HIGH_RISK
        assert plan.workout_types != NO_DATA_TEMPLATE
        assert not INTENSITY_TYPES & set(plan.workout_types)
        assert 'stabilizing' in plan.workouts[0].rationale

    def test_mature_rationale_not_stabilizing(self, make_metrics, zones):
        """Four weeks of history drops the stabilizing note."""
        plan = generate_weekly_plan(make_metrics(tsb=-15, acwr=1.0), [], zones, TODAY, MATURE)
        assert 'stabilizing' not in plan.workouts[0].rationale
        assert 'TSB is -15' in plan.workouts[0].rationale


# =============================================================================
# Guardrails
# =============================================================================

class TestGuardrails:
    """Tests for load-state guardrails."""

    @pytest.mark.parametrize("status", list(FormStatus))
    def test_high_risk(self, make_metrics, zones, status):
        """ACWR 1.6: no intervals or long run, tempo replaced by easy."""
        plan = generate_weekly_plan(
            make_metrics(tsb=FORM_TSB[status], acwr=1.6), [], zones, TODAY, MATURE
        )
        assert not INTENSITY_TYPES & set(plan.workout_types)

    def test_high_risk_adds_rest(self, make_metrics, zones):
        """Stripped intervals become rest days."""
        plan = generate_weekly_plan(make_metrics(tsb=-15, acwr=1.6), [], zones, TODAY, MATURE)
        assert plan.workout_types.count(WorkoutType.REST) >= 2

    def test_moderate_risk_keeps_tempo(self):
        """Moderate risk strips intervals and long run but leaves tempo."""
        result = apply_load_guardrails(FORM_TEMPLATES[FormStatus.NEUTRAL], LoadState.MODERATE_RISK)
        assert WorkoutType.TEMPO in result
        assert not {WorkoutType.THRESHOLD_INTERVALS, WorkoutType.VO2MAX_INTERVALS,
                    WorkoutType.LONG_RUN} & set(result)

    def test_high_risk_downgrades_tempo(self):
        """High risk turns tempo into easy."""
        result = apply_load_guardrails(FORM_TEMPLATES[FormStatus.NEUTRAL], LoadState.HIGH_RISK)
        assert WorkoutType.TEMPO not in result
        assert result[3] == WorkoutType.EASY

    @pytest.mark.parametrize("status", list(FormStatus))
    def test_undertraining_upgrades_one_day(self, status):
        """Exactly one rest/recovery day becomes easy, never Saturday."""
        template = FORM_TEMPLATES[status]
        result = apply_load_guardrails(template, LoadState.UNDERTRAINING)
        changed = [i for i, (a, b) in enumerate(zip(template, result)) if a != b]
        assert len(changed) == 1
        i = changed[0]
        assert i != REST_ANCHOR_INDEX
        assert template[i] in (WorkoutType.REST, WorkoutType.RECOVERY)
        assert result[i] == WorkoutType.EASY

    def test_undertraining_falls_back_to_recovery(self):
        """With only the Saturday rest, a recovery day is upgraded."""
        result = apply_load_guardrails(FORM_TEMPLATES[FormStatus.NEUTRAL], LoadState.UNDERTRAINING)
        assert result[REST_ANCHOR_INDEX] == WorkoutType.REST
        assert result[2] == WorkoutType.EASY

    @pytest.mark.parametrize("status", list(FormStatus))
    def test_sweet_spot_passthrough(self, status):
        """Sweet spot leaves the template untouched."""
        template = FORM_TEMPLATES[status]
        assert apply_load_guardrails(template, LoadState.SWEET_SPOT) == template


class TestHardEasy:
    """Tests for hard/easy alternation."""

    @pytest.mark.parametrize("status,state", list(itertools.product(FormStatus, LoadState)))
    def test_no_adjacent_intensity_any_combination(self, status, state):
        """Guardrails plus repair never leave two hard days in a row."""
        result = enforce_hard_easy(apply_load_guardrails(FORM_TEMPLATES[status], state))
        assert not has_back_to_back_intensity(result)

    @pytest.mark.parametrize("tsb", list(FORM_TSB.values()))
    @pytest.mark.parametrize("acwr", [0.5, 0.8, 1.0, 1.3, 1.4, 1.5, 1.6, 2.2])
    @pytest.mark.parametrize("maturity", [0, 14, 21, 27, 28, MATURE])
    def test_generated_plans_alternate(self, make_metrics, zones, tsb, acwr, maturity):
        """No generated plan has adjacent intensity days."""
        plan = generate_weekly_plan(make_metrics(tsb=tsb, acwr=acwr), [], zones, TODAY, maturity)
        for prev, curr in zip(plan.workouts, plan.workouts[1:]):
            assert not (prev.is_intensity and curr.is_intensity), \
                f"{prev.type.value} followed by {curr.type.value}"

    def test_repair_keeps_earlier_day(self):
        """The later of two adjacent hard days is softened."""
        template = FORM_TEMPLATES[FormStatus.OPTIMAL]
        repaired = enforce_hard_easy(template)
        assert repaired[3] == WorkoutType.VO2MAX_INTERVALS
        assert repaired[4] == WorkoutType.EASY


# =============================================================================
# Steps and estimation
# =============================================================================

class TestWorkoutStructure:
    """Tests for step expansion."""

    def test_threshold_intervals(self, zones):
        """Warmup, 5x work at threshold, 5x recovery, cooldown."""
        _, steps = build_workout(WorkoutType.THRESHOLD_INTERVALS, zones)
        assert [s.type for s in steps] == [
            StepType.WARMUP, StepType.WORK, StepType.RECOVERY, StepType.COOLDOWN,
        ]
        assert steps[1].repeat == 5
        assert steps[1].zone == ZoneName.THRESHOLD
        assert steps[2].repeat == 5
        assert (steps[1].target_pace_min, steps[1].target_pace_max) == (284, 262)

    def test_long_run(self, zones):
        """Easy segment then tempo segment."""
        _, steps = build_workout(WorkoutType.LONG_RUN, zones)
        assert len(steps) == 2
        assert steps[0].zone == ZoneName.EASY
        assert steps[1].zone == ZoneName.TEMPO

    def test_rest(self, zones):
        """Rest has no steps."""
        title, steps = build_workout(WorkoutType.REST, zones)
        assert title == 'Rest Day'
        assert steps == ()

    @pytest.mark.parametrize("workout_type,minutes", [
        (WorkoutType.RECOVERY, 25),
        (WorkoutType.EASY, 45),
        (WorkoutType.TEMPO, 45),
        (WorkoutType.LONG_RUN, 90),
        (WorkoutType.THRESHOLD_INTERVALS, 55),
        (WorkoutType.VO2MAX_INTERVALS, 55),
    ])
    def test_durations(self, zones, workout_type, minutes):
        """Durations count repeats."""
        _, steps = build_workout(workout_type, zones)
        assert sum(s.total_duration_sec for s in steps) == minutes * 60


class TestEstimation:
    """Tests for TSS and distance estimates."""

    def test_rest_tss_zero(self):
        """Rest is always 0 TSS."""
        assert estimate_workout_tss(_workout(WorkoutType.REST, 3600)) == 0

    def test_easy_tss(self):
        """45 min easy at 50 TSS/hour rounds 37.5 up to 38."""
        assert estimate_workout_tss(_workout(WorkoutType.EASY, 45 * 60)) == 38

    def test_zero_duration(self):
        """Zero duration gives 0 TSS."""
        assert estimate_workout_tss(_workout(WorkoutType.TEMPO, 0)) == 0

    def test_plan_tss_matches_estimator(self, make_metrics, zones):
        """Each workout's TSS matches estimate_workout_tss."""
        plan = generate_weekly_plan(make_metrics(tsb=10), [], zones, TODAY, MATURE)
        for w in plan.workouts:
            assert w.estimated_tss == estimate_workout_tss(w)

    def test_rest_distance_zero(self, zones):
        """Rest covers no distance."""
        assert estimate_workout_distance(_workout(WorkoutType.REST), zones) == 0

    def test_easy_distance(self, zones):
        """45 min at the easy mid pace (331 s/km) is 8157 m."""
        _, steps = build_workout(WorkoutType.EASY, zones)
        workout = _workout(WorkoutType.EASY, 45 * 60, steps)
        assert estimate_workout_distance(workout, zones) == 8157

    def test_distance_without_zones(self, zones):
        """Steps whose zone is unknown contribute nothing."""
        _, steps = build_workout(WorkoutType.EASY, zones)
        assert estimate_workout_distance(_workout(WorkoutType.EASY, 2700, steps), ()) == 0


class TestDemo:
    """Tests for the module demo."""

    def test_runs_as_module(self, capsys):
        """python -m training_engine.prescription prints a plan per state."""
        runpy.run_module('training_engine.prescription', run_name='__main__')
        assert 'All tests passed!' in capsys.readouterr().out
