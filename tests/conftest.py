"""Shared fixtures for engine tests."""

from datetime import datetime, timedelta

import pytest

from training_engine import compute_running_zones
from training_engine.models import DailyMetrics, Sport, StressMethod, TrainingSession


@pytest.fixture
def make_session():
    """Factory for TrainingSession objects on a local calendar day."""
    counter = {'n': 0}

    def _make(day: datetime, tss: float = 50.0, is_planned: bool = False, **overrides):
        counter['n'] += 1
        fields = dict(
            id=f"session-{counter['n']}",
            sport=Sport.RUNNING,
            date_ms=day.timestamp() * 1000,
            duration_sec=3600.0,
            distance_m=10000.0,
            tss=tss,
            stress_method=StressMethod.TSS,
            is_planned=is_planned,
        )
        fields.update(overrides)
        return TrainingSession(**fields)

    return _make


@pytest.fixture
def consecutive_sessions(make_session):
    """Factory for one session per day for `n` days starting at `start`."""
    def _build(start: datetime, n: int, tss: float = 50.0):
        return [make_session(start + timedelta(days=i), tss=tss) for i in range(n)]
    return _build


@pytest.fixture
def start_day():
    """A fixed local noon start day (Monday 2026-01-05)."""
    return datetime(2026, 1, 5, 12)


@pytest.fixture
def zones():
    """Zones for a 4:30/km threshold pace."""
    return compute_running_zones(270)


@pytest.fixture
def make_metrics():
    """Factory for a DailyMetrics snapshot with overrides."""
    def _make(**overrides):
        fields = dict(date='2026-02-20', tss=50.0, ctl=40.0, atl=50.0, tsb=-10.0, acwr=1.0)
        fields.update(overrides)
        return DailyMetrics(**fields)
    return _make
