"""
Load classification: form status, load state and injury risk.

Based on:
- Coggan & Allen (2010): TSB bands for readiness
- Gabbett (2016): ACWR injury risk thresholds (0.8 / 1.3 / 1.5)

All classifications are total: every input maps to exactly one member.
ACWR readings from fewer than 21 days of history are not trusted, and
21-27 days is a transition band where only a high-risk spike is acted on.
"""

from typing import Optional

from .config import EngineConfig, DEFAULT_CONFIG
from .models import (
    CoachingRecommendation,
    DailyMetrics,
    FormStatus,
    InjuryRisk,
    LoadState,
)


FORM_MESSAGES = {
    FormStatus.DETRAINING: 'Detraining risk. Increase volume.',
    FormStatus.FRESH: 'Prime State. Ready to Race.',
    FormStatus.NEUTRAL: 'Neutral Zone. Maintain aerobic focus.',
    FormStatus.OPTIMAL: 'Productive Overload. Keep pushing.',
    FormStatus.OVERLOAD: 'Deep Fatigue. High Risk. Rest recommended.',
}

NO_DATA_MESSAGE = 'Not enough data yet. Upload sessions to get recommendations.'


def get_form_status(tsb: float, config: Optional[EngineConfig] = None) -> FormStatus:
    """
    Classify form (TSB) into a readiness band.

    Each cut is inclusive on its lower side:
        tsb > 25        detraining
        5 <= tsb <= 25  fresh
        -10 <= tsb < 5  neutral
        -30 <= tsb < -10 optimal
        tsb < -30       overload

    Args:
        tsb: Training stress balance (ctl - atl)
        config: Engine parameters (form thresholds)

    Returns:
        FormStatus
    """
    if config is None:
        config = DEFAULT_CONFIG

    if tsb > config.form_detraining:
        return FormStatus.DETRAINING
    elif tsb >= config.form_fresh:
        return FormStatus.FRESH
    elif tsb >= config.form_neutral:
        return FormStatus.NEUTRAL
    elif tsb >= config.form_optimal:
        return FormStatus.OPTIMAL
    else:
        return FormStatus.OVERLOAD


def get_load_state(
    acwr: float,
    data_maturity_days: int,
    config: Optional[EngineConfig] = None
) -> LoadState:
    """
    Classify ACWR into a load state, gated by data maturity.

    States:
        - immature: < 21 days of history, regardless of ACWR
        - transitioning: 21-27 days, unless ACWR > 1.5 (then high-risk)
        - high-risk: ACWR > 1.5
        - moderate-risk: 1.3 < ACWR <= 1.5
        - undertraining: ACWR < 0.8
        - sweet-spot: 0.8 <= ACWR <= 1.3

    Args:
        acwr: Acute:Chronic Workload Ratio
        data_maturity_days: Days since the first logged session
        config: Engine parameters (ACWR thresholds, maturity bands)

    Returns:
        LoadState
    """
    if config is None:
        config = DEFAULT_CONFIG

    if data_maturity_days < config.maturity_immature_days:
        return LoadState.IMMATURE

    if data_maturity_days < config.maturity_stable_days:
        if acwr > config.acwr_high:
            return LoadState.HIGH_RISK
        return LoadState.TRANSITIONING

    if acwr > config.acwr_high:
        return LoadState.HIGH_RISK
    elif acwr > config.acwr_moderate:
        return LoadState.MODERATE_RISK
    elif acwr < config.acwr_undertraining:
        return LoadState.UNDERTRAINING
    else:
        return LoadState.SWEET_SPOT


def get_injury_risk(acwr: float, config: Optional[EngineConfig] = None) -> InjuryRisk:
    """
    Maturity-agnostic injury risk tier.

    Undertraining counts as low risk; the 1.3 and 1.5 cuts match the
    mature branch of get_load_state exactly.
    """
    if config is None:
        config = DEFAULT_CONFIG

    if acwr <= config.acwr_moderate:
        return InjuryRisk.LOW
    elif acwr <= config.acwr_high:
        return InjuryRisk.MODERATE
    else:
        return InjuryRisk.HIGH


def get_form_message(status: FormStatus) -> str:
    """Short headline for a form status."""
    return FORM_MESSAGES[status]


def get_coaching_recommendation(
    metrics: Optional[DailyMetrics],
    data_maturity_days: int,
    config: Optional[EngineConfig] = None
) -> CoachingRecommendation:
    """
    Combine form status, injury risk and data maturity into a snapshot.

    Args:
        metrics: Latest daily metrics, or None when there is no history
        data_maturity_days: Days since the first logged session
        config: Engine parameters

    Returns:
        CoachingRecommendation; neutral and zero-valued without metrics
    """
    if metrics is None:
        return CoachingRecommendation(
            status=FormStatus.NEUTRAL,
            message=NO_DATA_MESSAGE,
            tsb=0.0,
            acwr=0.0,
            injury_risk=InjuryRisk.LOW,
            data_maturity_days=data_maturity_days,
        )

    status = get_form_status(metrics.tsb, config)
    return CoachingRecommendation(
        status=status,
        message=get_form_message(status),
        tsb=metrics.tsb,
        acwr=metrics.acwr,
        injury_risk=get_injury_risk(metrics.acwr, config),
        data_maturity_days=data_maturity_days,
    )
