"""
Value types shared across the engine.

Every type here except TrainingSession is a derived value: produced by a
single engine call and safe to discard or recompute. All dataclasses are
frozen and hold tuples, so no stage can mutate another stage's output.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Dict, Any, Tuple


class Sport(Enum):
    """Sport recorded for a session."""
    RUNNING = "running"
    CYCLING = "cycling"
    SWIMMING = "swimming"


class StressMethod(Enum):
    """How a session's stress score was derived."""
    TSS = "tss"             # Power-based Training Stress Score
    TRIMP = "trimp"         # Heart-rate impulse, normalized to TSS scale
    DURATION = "duration"   # No usable power or HR; estimated from time


class ZoneName(Enum):
    """Running pace zones, slowest to fastest."""
    RECOVERY = "recovery"
    EASY = "easy"
    TEMPO = "tempo"
    THRESHOLD = "threshold"
    VO2MAX = "vo2max"


class FormStatus(Enum):
    """Readiness classification derived from TSB."""
    DETRAINING = "detraining"
    FRESH = "fresh"
    NEUTRAL = "neutral"
    OPTIMAL = "optimal"
    OVERLOAD = "overload"


class LoadState(Enum):
    """Load/risk classification derived from ACWR and data maturity."""
    IMMATURE = "immature"
    TRANSITIONING = "transitioning"
    HIGH_RISK = "high-risk"
    MODERATE_RISK = "moderate-risk"
    UNDERTRAINING = "undertraining"
    SWEET_SPOT = "sweet-spot"


class InjuryRisk(Enum):
    """Maturity-agnostic injury risk tier from ACWR."""
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


class WorkoutType(Enum):
    """Prescribed workout types."""
    REST = "rest"
    RECOVERY = "recovery"
    EASY = "easy"
    TEMPO = "tempo"
    LONG_RUN = "long-run"
    THRESHOLD_INTERVALS = "threshold-intervals"
    VO2MAX_INTERVALS = "vo2max-intervals"


# Days that count as "hard" for hard/easy alternation
INTENSITY_TYPES = frozenset({
    WorkoutType.THRESHOLD_INTERVALS,
    WorkoutType.VO2MAX_INTERVALS,
    WorkoutType.TEMPO,
    WorkoutType.LONG_RUN,
})


class StepType(Enum):
    """Segment role within a workout."""
    WARMUP = "warmup"
    WORK = "work"
    RECOVERY = "recovery"
    COOLDOWN = "cooldown"


class PlanMode(Enum):
    """Which generation branch produced a weekly plan."""
    NORMAL = "normal"
    NO_DATA = "no-data"


@dataclass(frozen=True)
class TrainingSession:
    """
    A historical or planned workout record.

    Owned by the session store; the engine only reads it. Planned ("ghost")
    sessions are excluded from load computation unless explicitly included.
    """
    id: str
    sport: Sport
    date_ms: float              # Start time, epoch milliseconds
    duration_sec: float
    distance_m: float
    tss: float
    stress_method: StressMethod = StressMethod.TSS
    is_planned: bool = False
    name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'id': self.id,
            'name': self.name,
            'sport': self.sport.value,
            'date_ms': self.date_ms,
            'duration_sec': self.duration_sec,
            'distance_m': self.distance_m,
            'tss': self.tss,
            'stress_method': self.stress_method.value,
            'is_planned': self.is_planned,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'TrainingSession':
        """Create a session from a store record."""
        return cls(
            id=str(d['id']),
            sport=Sport(d.get('sport', Sport.RUNNING.value)),
            date_ms=d['date_ms'],
            duration_sec=d.get('duration_sec', 0.0),
            distance_m=d.get('distance_m', 0.0),
            tss=d.get('tss', 0.0),
            stress_method=StressMethod(d.get('stress_method', StressMethod.TSS.value)),
            is_planned=bool(d.get('is_planned', False)),
            name=d.get('name'),
        )


@dataclass(frozen=True)
class DailyMetrics:
    """One day of the load series."""
    date: str       # YYYY-MM-DD
    tss: float      # Summed stress for the day
    ctl: float      # Chronic load (fitness), 1 decimal
    atl: float      # Acute load (fatigue), 1 decimal
    tsb: float      # Form = ctl - atl, 1 decimal
    acwr: float     # atl / ctl (0 when ctl is 0), 2 decimals

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'date': self.date,
            'tss': self.tss,
            'ctl': self.ctl,
            'atl': self.atl,
            'tsb': self.tsb,
            'acwr': self.acwr,
        }


@dataclass(frozen=True)
class RunningZone:
    """
    A pace band in seconds per kilometre.

    min_pace is the slower bound and therefore the larger number.
    """
    name: ZoneName
    label: str
    min_pace: int
    max_pace: int
    color: str

    def contains(self, pace_sec: float) -> bool:
        """Whether `pace_sec` lies within [max_pace, min_pace]."""
        return self.max_pace <= pace_sec <= self.min_pace

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'name': self.name.value,
            'label': self.label,
            'min_pace': self.min_pace,
            'max_pace': self.max_pace,
            'color': self.color,
        }


@dataclass(frozen=True)
class CoachingRecommendation:
    """Snapshot of readiness and risk for messaging."""
    status: FormStatus
    message: str
    tsb: float
    acwr: float
    injury_risk: InjuryRisk
    data_maturity_days: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'status': self.status.value,
            'message': self.message,
            'tsb': self.tsb,
            'acwr': self.acwr,
            'injury_risk': self.injury_risk.value,
            'data_maturity_days': self.data_maturity_days,
        }


@dataclass(frozen=True)
class WorkoutStep:
    """
    A single segment of a prescribed workout.

    target_pace_min is the slower bound (>= target_pace_max).
    """
    type: StepType
    duration_sec: int
    zone: ZoneName
    target_pace_min: int
    target_pace_max: int
    repeat: Optional[int] = None
    distance: Optional[float] = None

    @property
    def total_duration_sec(self) -> int:
        """Duration including repeats."""
        return self.duration_sec * (self.repeat or 1)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, omitting unset optional fields."""
        d: Dict[str, Any] = {
            'type': self.type.value,
            'duration_sec': self.duration_sec,
            'zone': self.zone.value,
            'target_pace_min': self.target_pace_min,
            'target_pace_max': self.target_pace_max,
        }
        if self.repeat is not None:
            d['repeat'] = self.repeat
        if self.distance is not None:
            d['distance'] = self.distance
        return d


@dataclass(frozen=True)
class PrescribedWorkout:
    """A single day of a weekly plan."""
    id: str
    date: str
    day_label: str
    type: WorkoutType
    title: str
    rationale: str
    steps: Tuple[WorkoutStep, ...] = ()
    estimated_duration_sec: int = 0
    estimated_tss: int = 0
    is_taper: bool = False

    @property
    def is_intensity(self) -> bool:
        """Whether this day counts as hard for alternation."""
        return self.type in INTENSITY_TYPES

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'id': self.id,
            'date': self.date,
            'day_label': self.day_label,
            'type': self.type.value,
            'title': self.title,
            'rationale': self.rationale,
            'is_taper': self.is_taper,
            'steps': [s.to_dict() for s in self.steps],
            'estimated_duration_sec': self.estimated_duration_sec,
            'estimated_tss': self.estimated_tss,
        }


@dataclass(frozen=True)
class PlanContext:
    """
    Records which branch generated a plan and the inputs it saw.

    A plan built with no metrics at all carries only the mode.
    """
    mode: PlanMode
    form_status: Optional[FormStatus] = None
    tsb: Optional[float] = None
    acwr: Optional[float] = None
    data_maturity_days: Optional[int] = None
    load_state: Optional[LoadState] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, omitting fields the branch did not set."""
        d: Dict[str, Any] = {'mode': self.mode.value}
        if self.form_status is not None:
            d['form_status'] = self.form_status.value
        if self.tsb is not None:
            d['tsb'] = self.tsb
        if self.acwr is not None:
            d['acwr'] = self.acwr
        if self.data_maturity_days is not None:
            d['data_maturity_days'] = self.data_maturity_days
        if self.load_state is not None:
            d['load_state'] = self.load_state.value
        return d


@dataclass(frozen=True)
class WeeklyPlan:
    """Seven prescribed workouts, Monday through Sunday."""
    week_of: str
    workouts: Tuple[PrescribedWorkout, ...]
    total_estimated_tss: int
    context: PlanContext

    @property
    def workout_types(self) -> Tuple[WorkoutType, ...]:
        """Workout types in day order."""
        return tuple(w.type for w in self.workouts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'week_of': self.week_of,
            'workouts': [w.to_dict() for w in self.workouts],
            'total_estimated_tss': self.total_estimated_tss,
            'context': self.context.to_dict(),
        }
