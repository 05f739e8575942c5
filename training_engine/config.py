"""
Tunable constants for the training-load and prescription engine.

Every threshold the classifier and the prescription engine compare against
lives here so alternative parameter sets can be evaluated side by side.
Engine functions take an optional `config` and fall back to DEFAULT_CONFIG.
"""

from dataclasses import dataclass, field, asdict, fields
from typing import Dict, Any, Mapping, Tuple, Union


TSSRates = Tuple[Tuple[str, float], ...]


def _default_tss_per_hour() -> Dict[str, float]:
    return {
        'recovery': 30.0,
        'easy': 50.0,
        'long-run': 55.0,
        'tempo': 65.0,
        'threshold-intervals': 75.0,
        'vo2max-intervals': 85.0,
    }


def _freeze_rates(rates: Union[Mapping[str, float], TSSRates]) -> TSSRates:
    # Sorted pairs so equal tables compare and hash equal
    items = rates.items() if isinstance(rates, Mapping) else rates
    return tuple(sorted((str(k), float(v)) for k, v in items))


@dataclass(frozen=True)
class EngineConfig:
    """
    Parameters for load metrics, classification and plan generation.

    ACWR thresholds define the mature-data load bands, form thresholds define
    the TSB bands, and maturity days gate whether load-based classification
    is trusted at all.
    """

    # ═══════════════════════════════════════════════════════════════════════════
    # EWMA WINDOWS (days)
    # ═══════════════════════════════════════════════════════════════════════════

    ctl_days: int = 42          # Chronic load ("fitness")
    atl_days: int = 7           # Acute load ("fatigue")

    # ═══════════════════════════════════════════════════════════════════════════
    # ACWR THRESHOLDS
    # ═══════════════════════════════════════════════════════════════════════════

    acwr_undertraining: float = 0.8   # Below this: undertraining
    acwr_moderate: float = 1.3        # Above this: moderate risk
    acwr_high: float = 1.5            # Above this: high risk

    # ═══════════════════════════════════════════════════════════════════════════
    # FORM (TSB) THRESHOLDS
    # ═══════════════════════════════════════════════════════════════════════════

    form_detraining: float = 25.0     # TSB above this: detraining
    form_fresh: float = 5.0           # TSB at or above this: fresh
    form_neutral: float = -10.0       # TSB at or above this: neutral
    form_optimal: float = -30.0       # TSB at or above this: optimal, else overload

    # ═══════════════════════════════════════════════════════════════════════════
    # DATA MATURITY (days of history)
    # ═══════════════════════════════════════════════════════════════════════════

    maturity_immature_days: int = 21  # Below this: immature
    maturity_stable_days: int = 28    # Below this: transitioning

    # ═══════════════════════════════════════════════════════════════════════════
    # PRESCRIPTION
    # ═══════════════════════════════════════════════════════════════════════════

    # Workout type value -> TSS per hour. Accepts a dict; stored as sorted
    # (type, rate) pairs so the config stays immutable and hashable.
    tss_per_hour: TSSRates = field(default_factory=_default_tss_per_hour)

    def __post_init__(self):
        object.__setattr__(self, "tss_per_hour", _freeze_rates(self.tss_per_hour))

    def tss_rates(self) -> Dict[str, float]:
        """TSS-per-hour table as a fresh dictionary."""
        return dict(self.tss_per_hour)

    def tss_rate(self, workout_type: str) -> float:
        """TSS per hour for a workout type value, e.g. 'easy'."""
        return self.tss_rates()[workout_type]

    def to_dict(self) -> Dict[str, Any]:
        """Convert parameters to dictionary."""
        d = asdict(self)
        d['tss_per_hour'] = self.tss_rates()
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'EngineConfig':
        """
        Create parameters from dictionary.

        Missing keys keep their defaults; unknown keys are rejected.

        Raises:
            ValueError: If `d` contains keys that are not config fields
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(d) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")

        values = dict(d)
        if 'tss_per_hour' in values:
            merged = _default_tss_per_hour()
            merged.update(dict(values['tss_per_hour']))
            values['tss_per_hour'] = merged
        return cls(**values)

    def validate(self) -> Tuple[bool, str]:
        """Validate parameter constraints."""
        issues = []

        if not (0 < self.atl_days < self.ctl_days):
            issues.append("EWMA windows: 0 < atl_days < ctl_days")

        if not (0 < self.acwr_undertraining < self.acwr_moderate < self.acwr_high):
            issues.append("ACWR thresholds must be in ascending order")

        if not (self.form_optimal < self.form_neutral < self.form_fresh
                < self.form_detraining):
            issues.append("Form thresholds must be in ascending order")

        if not (0 <= self.maturity_immature_days <= self.maturity_stable_days):
            issues.append("Maturity: 0 <= immature_days <= stable_days")

        rates = self.tss_rates()
        missing = set(_default_tss_per_hour()) - set(rates)
        if missing:
            issues.append(f"TSS rate missing for: {', '.join(sorted(missing))}")
        if any(rate < 0 for rate in rates.values()):
            issues.append("TSS rates must be non-negative")

        if issues:
            return False, "; ".join(issues)
        return True, "Valid"


DEFAULT_CONFIG = EngineConfig()
