"""
Coaching copy layered on top of the load classifier.

The detailed message depends on both axes: the form status picks the row
and the load state picks the column. Data maturity wins over everything,
then undertraining, then the risk tiers, then the sweet-spot baseline.
"""

from typing import Dict, Optional

from .coaching import get_load_state
from .config import EngineConfig, DEFAULT_CONFIG
from .models import CoachingRecommendation, FormStatus, LoadState


_STABILIZING = 'Your fitness metrics are still stabilizing (less than 4 weeks of data). '

IMMATURE_MESSAGES: Dict[FormStatus, str] = {
    FormStatus.DETRAINING: _STABILIZING + (
        'Early readings suggest your recent training has been light. Focus on '
        'consistency; the numbers get more reliable as your history grows.'
    ),
    FormStatus.FRESH: _STABILIZING + (
        'You look well rested so far. Keep training steadily and the picture '
        'will sharpen over the coming weeks.'
    ),
    FormStatus.NEUTRAL: _STABILIZING + (
        'Your load looks balanced so far. Keep logging sessions; reliable '
        'coaching needs about 4 weeks of history.'
    ),
    FormStatus.OPTIMAL: _STABILIZING + (
        'Early signs point to a solid training load. Stay consistent and watch '
        'how you feel while the metrics settle.'
    ),
    FormStatus.OVERLOAD: _STABILIZING + (
        'Early readings show high fatigue for such a short history. An easy day '
        'is reasonable, but treat these numbers as preliminary.'
    ),
}

UNDERTRAINING_MESSAGES: Dict[FormStatus, str] = {
    FormStatus.DETRAINING: (
        'Fitness is declining and your recent load sits well below your '
        'long-term average. Ramp volume back up gradually to stop the slide.'
    ),
    FormStatus.FRESH: (
        'You are rested, but recent load is well under your baseline. You can '
        'perform now, though a long stretch like this will erode fitness.'
    ),
    FormStatus.NEUTRAL: (
        'Readiness is balanced, but weekly load has dropped below your chronic '
        'average. A moderate increase keeps fitness on track.'
    ),
    FormStatus.OPTIMAL: (
        'You have trained hard lately, yet acute load is below your long-term '
        'average, as after a sudden taper. Make sure the cut is intentional.'
    ),
    FormStatus.OVERLOAD: (
        'Fatigue is high even though recent load is low for your history. '
        'Stress outside training may be adding up. Recover before adding volume.'
    ),
}

SWEET_SPOT_MESSAGES: Dict[FormStatus, str] = {
    FormStatus.DETRAINING: (
        'Fitness is starting to fade because training has been too light. You '
        'are fully recovered and ready for more stimulus, so build volume back up.'
    ),
    FormStatus.FRESH: (
        'You are rested and fitness is high relative to fatigue. This is the '
        'state for racing or key workouts.'
    ),
    FormStatus.NEUTRAL: (
        'Load and recovery are in balance. This is normal training territory; '
        'keep following the plan with an aerobic focus.'
    ),
    FormStatus.OPTIMAL: (
        'You have been training hard and your body is adapting. Fitness is '
        'growing; support it with sleep and fuelling.'
    ),
    FormStatus.OVERLOAD: (
        'You are carrying heavy fatigue from recent training. Take easy days or '
        'a full rest day before the next hard session.'
    ),
}

MODERATE_RISK_MESSAGES: Dict[FormStatus, str] = {
    FormStatus.DETRAINING: (
        'Fitness is declining and your ramp rate is elevated. Return gradually '
        'rather than with a sudden spike.'
    ),
    FormStatus.FRESH: (
        'You are rested, but training has ramped faster than usual. Watch for '
        'early signs of strain and skip another big increase this week.'
    ),
    FormStatus.NEUTRAL: (
        'Readiness is balanced, but the ramp rate is above the safe band. Hold '
        'steady this week so your body can catch up.'
    ),
    FormStatus.OPTIMAL: (
        'You are in a productive phase with a moderately elevated ramp. Keep '
        'going, but do not stack another increase on top.'
    ),
    FormStatus.OVERLOAD: (
        'Deep fatigue plus an elevated ramp puts real stress on your body. Easy '
        'days or full rest before any hard training.'
    ),
}

HIGH_RISK_MESSAGES: Dict[FormStatus, str] = {
    FormStatus.DETRAINING: (
        'Fitness is declining and your recent load spike is in the high-risk '
        'band. Back off and rebuild over 2-3 weeks instead of catching up.'
    ),
    FormStatus.FRESH: (
        'You are rested, but load has spiked sharply. Being fresh does not '
        'protect against a spike; scale back this week.'
    ),
    FormStatus.NEUTRAL: (
        'Readiness is balanced, but load has climbed dangerously fast. Reduce '
        'volume or intensity for the next few days.'
    ),
    FormStatus.OPTIMAL: (
        'High fatigue combined with a rapid ramp is the riskiest combination. '
        'Take a recovery day now.'
    ),
    FormStatus.OVERLOAD: (
        'You are deeply fatigued with a dangerous load spike. Rest now and do '
        'not resume hard training until fatigue subsides.'
    ),
}

# Load tier -> message table. Immature and transitioning share a table.
_MESSAGE_TABLES: Dict[LoadState, Dict[FormStatus, str]] = {
    LoadState.IMMATURE: IMMATURE_MESSAGES,
    LoadState.TRANSITIONING: IMMATURE_MESSAGES,
    LoadState.UNDERTRAINING: UNDERTRAINING_MESSAGES,
    LoadState.MODERATE_RISK: MODERATE_RISK_MESSAGES,
    LoadState.HIGH_RISK: HIGH_RISK_MESSAGES,
    LoadState.SWEET_SPOT: SWEET_SPOT_MESSAGES,
}


def get_form_message_detailed(
    rec: CoachingRecommendation,
    config: Optional[EngineConfig] = None
) -> str:
    """
    Detailed coaching message for a recommendation.

    Args:
        rec: Recommendation from get_coaching_recommendation
        config: Engine parameters

    Returns:
        One of 25 distinct messages (5 form statuses x 5 load tiers)
    """
    state = get_load_state(rec.acwr, rec.data_maturity_days, config)
    return _MESSAGE_TABLES[state][rec.status]


def get_acwr_color(acwr: float, config: Optional[EngineConfig] = None) -> str:
    """
    Traffic-light colour for an ACWR gauge.

    Yellow below the undertraining cut and in the moderate band, green in
    the sweet spot, red above the high-risk cut.
    """
    if config is None:
        config = DEFAULT_CONFIG

    if acwr < config.acwr_undertraining:
        return 'yellow'
    elif acwr <= config.acwr_moderate:
        return 'green'
    elif acwr <= config.acwr_high:
        return 'yellow'
    else:
        return 'red'
