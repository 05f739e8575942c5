"""
Session stress scoring: TSS, TRIMP and the duration fallback.

Based on:
- Banister (1991): TRIMP formula
- Coggan & Allen (2010): Training Stress Score from normalized power

A session's stress is computed once when it is stored; the load metrics
only read the resulting `tss` value. TRIMP is normalized so that one hour
at lactate threshold scores about 100, the same scale as TSS.
"""

from dataclasses import dataclass
import math
from typing import Optional, Tuple

import numpy as np

from .models import StressMethod
from .utils import round_half_up


# Gender-specific Banister coefficients (a, b) for Y = a * e^(b * deltaHR).
# The female `a` varies between sources; 0.86 follows most current tools.
BANISTER = {
    'male': (0.64, 1.92),
    'female': (0.86, 1.67),
}

# Lactate threshold as a fraction of heart rate reserve
THRESHOLD_HR_RATIO = 0.88

# TSS/hour assumed when neither power nor heart rate is available
DURATION_TSS_PER_HOUR = 30.0


def calculate_delta_hr(hr_avg: float, hr_rest: float, hr_max: float) -> float:
    """
    Calculate heart rate reserve fraction (Delta HR).

    Args:
        hr_avg: Average heart rate during session (bpm)
        hr_rest: Resting heart rate (bpm)
        hr_max: Maximum heart rate (bpm)

    Returns:
        Delta HR as fraction [0, 1]; 0 when hr_max <= hr_rest
    """
    if hr_max <= hr_rest:
        return 0.0
    delta_hr = (hr_avg - hr_rest) / (hr_max - hr_rest)
    return float(np.clip(delta_hr, 0.0, 1.0))


def calculate_y_factor(delta_hr: float, gender: str = 'male') -> float:
    """
    Calculate the Y weighting factor for TRIMP.

    Any gender other than 'female' uses the male coefficients.
    """
    a, b = BANISTER['female' if gender == 'female' else 'male']
    return a * math.exp(b * delta_hr)


def calculate_trimp(
    hr_avg: float,
    duration_sec: float,
    hr_rest: float,
    hr_max: float,
    gender: str = 'male'
) -> float:
    """
    Calculate TRIMP normalized to the TSS scale.

    TRIMP = duration_min × ΔHR × Y, divided by the TRIMP of one hour at
    threshold (ΔHR = 0.88) and multiplied by 100.

    Args:
        hr_avg: Average heart rate during session (bpm)
        duration_sec: Session duration in seconds
        hr_rest: Resting heart rate (bpm)
        hr_max: Maximum heart rate (bpm)
        gender: 'male', 'female' or 'other'

    Returns:
        TSS-scale TRIMP rounded to one decimal, or 0 when the heart rates are
        physiologically invalid (hr_max <= hr_rest, hr_avg outside the range)
    """
    if hr_max <= hr_rest or hr_avg <= hr_rest or hr_avg > hr_max:
        return 0.0

    delta_hr = calculate_delta_hr(hr_avg, hr_rest, hr_max)
    trimp = (duration_sec / 60.0) * delta_hr * calculate_y_factor(delta_hr, gender)

    threshold_hour = 60.0 * THRESHOLD_HR_RATIO * calculate_y_factor(THRESHOLD_HR_RATIO, gender)
    return round_half_up(trimp / threshold_hour * 100.0, 1)


def calculate_tss(
    normalized_power: float,
    duration_sec: float,
    ftp: float
) -> Optional[float]:
    """
    Calculate power-based Training Stress Score.

    TSS = (duration_sec × NP × IF) / (FTP × 3600) × 100, with IF = NP / FTP.

    Returns:
        TSS rounded to one decimal, or None when FTP or NP is not positive
    """
    if ftp <= 0 or normalized_power <= 0:
        return None
    intensity_factor = normalized_power / ftp
    tss = (duration_sec * normalized_power * intensity_factor) / (ftp * 3600.0) * 100.0
    return round_half_up(tss, 1)


def calculate_session_stress(
    duration_sec: float,
    hr_avg: Optional[float] = None,
    hr_rest: float = 60.0,
    hr_max: float = 190.0,
    gender: str = 'male',
    normalized_power: Optional[float] = None,
    ftp: Optional[float] = None
) -> Tuple[float, StressMethod]:
    """
    Score a session, preferring power over heart rate over duration.

    Args:
        duration_sec: Session duration in seconds
        hr_avg: Average heart rate (bpm), if recorded
        hr_rest: Resting heart rate (bpm)
        hr_max: Maximum heart rate (bpm)
        gender: Athlete gender for Banister coefficients
        normalized_power: Normalized power (W), if recorded
        ftp: Functional threshold power (W), if set

    Returns:
        Tuple of (stress score, method used)
    """
    if ftp and normalized_power:
        tss = calculate_tss(normalized_power, duration_sec, ftp)
        if tss is not None:
            return tss, StressMethod.TSS

    if hr_avg and hr_avg > 0:
        return calculate_trimp(hr_avg, duration_sec, hr_rest, hr_max, gender), StressMethod.TRIMP

    return float(round_half_up(duration_sec / 3600.0 * DURATION_TSS_PER_HOUR)), StressMethod.DURATION


@dataclass(frozen=True)
class TSSComparison:
    """Device-reported TSS against the app-computed value."""
    device_tss: float
    computed_tss: float
    delta: float
    divergence_percent: float
    confidence: str                 # 'high' (<=5%), 'moderate' (<=15%), 'low'
    warning: Optional[str] = None


def compare_tss(device_tss: Optional[float], computed_tss: float) -> Optional[TSSComparison]:
    """
    Compare device-reported TSS with the computed value.

    Returns:
        TSSComparison, or None when the device did not report TSS
    """
    if device_tss is None:
        return None

    delta = abs(device_tss - computed_tss)
    divergence = delta / device_tss * 100.0 if device_tss > 0 else 0.0

    warning = None
    if divergence <= 5:
        confidence = 'high'
    elif divergence <= 15:
        confidence = 'moderate'
    else:
        confidence = 'low'
        warning = (
            f"TSS diverges by {divergence:.0f}% from device value, check FTP setting "
            f"(device: {device_tss:g}, app: {computed_tss:g})"
        )

    return TSSComparison(
        device_tss=device_tss,
        computed_tss=computed_tss,
        delta=delta,
        divergence_percent=divergence,
        confidence=confidence,
        warning=warning,
    )
