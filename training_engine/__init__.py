"""
Training-load and prescription engine for endurance training.

This package turns a training history into:
- Daily load metrics (CTL, ATL, TSB, ACWR)
- Readiness and load/risk classifications
- A seven-day workout plan with pace targets

All functions are pure: they read their arguments, never mutate them, and
hold no module-level state.
"""

# Configuration
from .config import EngineConfig, DEFAULT_CONFIG

# Value types
from .models import (
    Sport,
    StressMethod,
    ZoneName,
    FormStatus,
    LoadState,
    InjuryRisk,
    WorkoutType,
    StepType,
    PlanMode,
    INTENSITY_TYPES,
    TrainingSession,
    DailyMetrics,
    RunningZone,
    CoachingRecommendation,
    WorkoutStep,
    PrescribedWorkout,
    PlanContext,
    WeeklyPlan,
)

# Zone model
from .zones import (
    compute_running_zones,
    get_zone_for_pace,
    get_zone_mid_pace,
)

# Load metrics
from .metrics import (
    ewma_alpha,
    calculate_ewma,
    compute_metrics,
    get_current_metrics,
    get_data_maturity_days,
)

# Session stress
from .stress import (
    calculate_trimp,
    calculate_tss,
    calculate_session_stress,
    compare_tss,
)

# Classification
from .coaching import (
    get_form_status,
    get_load_state,
    get_injury_risk,
    get_form_message,
    get_coaching_recommendation,
)
from .messages import (
    get_form_message_detailed,
    get_acwr_color,
)

# Prescription
from .prescription import (
    generate_weekly_plan,
    estimate_workout_tss,
    estimate_workout_distance,
)

# Plan cache key
from .week_key import (
    get_monday_of_week,
    build_plan_cache_key,
)

# Reports and orchestration
from .reports import (
    metrics_to_frame,
    weekly_load_summary,
    format_weekly_plan,
)
from .planner import (
    CoachPlanner,
    CoachSnapshot,
)

__all__ = [
    # Config
    'EngineConfig',
    'DEFAULT_CONFIG',
    # Models
    'Sport',
    'StressMethod',
    'ZoneName',
    'FormStatus',
    'LoadState',
    'InjuryRisk',
    'WorkoutType',
    'StepType',
    'PlanMode',
    'INTENSITY_TYPES',
    'TrainingSession',
    'DailyMetrics',
    'RunningZone',
    'CoachingRecommendation',
    'WorkoutStep',
    'PrescribedWorkout',
    'PlanContext',
    'WeeklyPlan',
    # Zones
    'compute_running_zones',
    'get_zone_for_pace',
    'get_zone_mid_pace',
    # Metrics
    'ewma_alpha',
    'calculate_ewma',
    'compute_metrics',
    'get_current_metrics',
    'get_data_maturity_days',
    # Stress
    'calculate_trimp',
    'calculate_tss',
    'calculate_session_stress',
    'compare_tss',
    # Classification
    'get_form_status',
    'get_load_state',
    'get_injury_risk',
    'get_form_message',
    'get_coaching_recommendation',
    'get_form_message_detailed',
    'get_acwr_color',
    # Prescription
    'generate_weekly_plan',
    'estimate_workout_tss',
    'estimate_workout_distance',
    # Week key
    'get_monday_of_week',
    'build_plan_cache_key',
    # Reports / planner
    'metrics_to_frame',
    'weekly_load_summary',
    'format_weekly_plan',
    'CoachPlanner',
    'CoachSnapshot',
]
