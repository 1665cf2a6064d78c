"""
insights/scorer/resilience_scorer.py
Recovery Resilience Score — reduces recovery periods to a 0–100 score
and a level label.

SCORE (baseline 40, each factor adds (sub_score - 50) * weight):
  success rate    30%  successful / total * 100
  severity        25%  mean of 100 - difficulty over recovered challenges
                       (difficulty 20 severe / 35 moderate / 50 mild)
  quality/speed   25%  mean of min(100, max(20, 100 - hours/0.72) + strength bonus)
  trend           20%  50 + trend_percent * 0.5, plus a consistency bonus
                       once 3+ recoveries exist; clamped 0–100
A factor with nothing to measure sits at 50 and contributes nothing.

This is a PLAUSIBLE heuristic for a dashboard card, not a validated
psychometric instrument.
"""

import logging
import math
from statistics import mean, pvariance
from typing import Dict, List, Optional

from insights.config import get_setting
from insights.detectors.recovery_pairing import pair_recoveries
from insights.models.record import (
    JournalRecord,
    RecoveryPeriod,
    ResilienceResult,
    ScoreBreakdown,
)

logger = logging.getLogger(__name__)

BASELINE_SCORE = 40.0
NEUTRAL        = 50.0

FACTOR_WEIGHTS = {
    'success_rate': 0.30,
    'severity':     0.25,
    'quality':      0.25,
    'trend':        0.20,
}

CHALLENGE_DIFFICULTY = {'severe': 20, 'moderate': 35, 'mild': 50}
STRENGTH_BONUS       = {'strong': 20, 'moderate': 10, 'mild': 5}

SPEED_HOURS_PER_POINT = 0.72     # 72h → 0 before the floor
SPEED_FLOOR           = 20.0
CONSISTENCY_MAX_BONUS = 20.0

TREND_MIN_RECOVERIES       = 4
TREND_SAMPLE               = 2
TREND_THRESHOLD            = 20
CONSISTENCY_MIN_RECOVERIES = 3
MIN_RECORDS                = 2

LEVEL_THRESHOLDS = (
    ('High',     75),
    ('Good',     55),
    ('Moderate', 35),
)


# ── PIPELINE ENTRY POINT ─────────────────────────────────────

def compute_recovery_resilience(
    records: List[JournalRecord],
    config:  Optional[Dict] = None,
) -> ResilienceResult:
    """Classify → pair → score. Pure; safe to call on every render."""
    if len(records) < MIN_RECORDS:
        return ResilienceResult()
    periods = pair_recoveries(records, config)
    return score_periods(periods, config)


def score_periods(
    periods: List[RecoveryPeriod],
    config:  Optional[Dict] = None,
) -> ResilienceResult:
    """Reduce the full period list. Every branch has a numeric fallback."""
    successes = [p for p in periods if p.recovery is not None and p.elapsed_hours is not None]
    hours = [p.elapsed_hours for p in successes]

    average = mean(hours) if hours else 0.0
    trend_percent = compute_trend_percent(hours)
    trend = _trend_label(trend_percent)

    breakdown = ScoreBreakdown(
        success_rate = success_rate_score(periods, successes),
        severity     = severity_score(successes),
        quality      = quality_score(successes),
        trend        = trend_score(trend_percent, hours),
    )
    breakdown.success_contribution  = (breakdown.success_rate - NEUTRAL) * FACTOR_WEIGHTS['success_rate']
    breakdown.severity_contribution = (breakdown.severity - NEUTRAL) * FACTOR_WEIGHTS['severity']
    breakdown.quality_contribution  = (breakdown.quality - NEUTRAL) * FACTOR_WEIGHTS['quality']
    breakdown.trend_contribution    = (breakdown.trend - NEUTRAL) * FACTOR_WEIGHTS['trend']

    raw = (
        BASELINE_SCORE
        + breakdown.success_contribution
        + breakdown.severity_contribution
        + breakdown.quality_contribution
        + breakdown.trend_contribution
    )
    score = int(_clamp(round_half_up(raw), 0, 100))
    level = classify_level(score) if periods else 'Unknown'

    display = int(get_setting(config, 'display_periods'))
    result = ResilienceResult(
        average_recovery_hours = average,
        trend                  = trend,
        trend_percent          = trend_percent,
        score                  = score,
        level                  = level,
        recovery_periods       = periods[-display:] if periods and display > 0 else [],
        total_challenges       = len(periods),
        successful_recoveries  = len(successes),
        success_rate           = (len(successes) / len(periods) * 100.0) if periods else 0.0,
        breakdown              = breakdown,
    )
    logger.info(
        f"Resilience scored: {len(periods)} challenge(s), {len(successes)} recovered, "
        f"score={score} level={level}"
    )
    return result


# ── FACTORS ──────────────────────────────────────────────────

def success_rate_score(periods: List[RecoveryPeriod], successes: List[RecoveryPeriod]) -> float:
    if not periods:
        return NEUTRAL
    return len(successes) / len(periods) * 100.0


def severity_score(successes: List[RecoveryPeriod]) -> float:
    """Recovering from harder challenges scores higher."""
    if not successes:
        return NEUTRAL
    return mean(
        100 - CHALLENGE_DIFFICULTY.get(p.challenge_severity, CHALLENGE_DIFFICULTY['mild'])
        for p in successes
    )


def recovery_quality(hours: float, strength: Optional[str]) -> float:
    """Speed (faster is better, floored) plus strength bonus, capped at 100."""
    speed = max(SPEED_FLOOR, 100.0 - hours / SPEED_HOURS_PER_POINT)
    return min(100.0, speed + STRENGTH_BONUS.get(strength or '', 0))


def quality_score(successes: List[RecoveryPeriod]) -> float:
    if not successes:
        return NEUTRAL
    return mean(recovery_quality(p.elapsed_hours, p.recovery_strength) for p in successes)


def trend_score(trend_percent: int, hours: List[float]) -> float:
    value = NEUTRAL + trend_percent * 0.5
    if len(hours) >= CONSISTENCY_MIN_RECOVERIES:
        value += consistency_bonus(hours)
    return _clamp(value, 0.0, 100.0)


def consistency_bonus(hours: List[float]) -> float:
    """Inverse variance of recovery times, in days. Identical times earn the max."""
    days = [h / 24.0 for h in hours]
    return CONSISTENCY_MAX_BONUS / (1.0 + pvariance(days))


def compute_trend_percent(hours: List[float]) -> int:
    """
    Signed improvement of the last 2 recoveries over the 2 before them.
    Positive = recovering faster. 0 until 4 recoveries exist.
    """
    if len(hours) < TREND_MIN_RECOVERIES:
        return 0
    recent  = mean(hours[-TREND_SAMPLE:])
    earlier = mean(hours[-2 * TREND_SAMPLE:-TREND_SAMPLE])
    if earlier <= 0:
        return 0
    return int(round_half_up((earlier - recent) / earlier * 100.0))


def classify_level(score: float) -> str:
    for label, floor in LEVEL_THRESHOLDS:
        if score >= floor:
            return label
    return 'Low'


# ── HELPERS ──────────────────────────────────────────────────

def _trend_label(trend_percent: int) -> str:
    if trend_percent > TREND_THRESHOLD:
        return 'up'
    if trend_percent < -TREND_THRESHOLD:
        return 'down'
    return 'neutral'


def round_half_up(value: float) -> float:
    return math.floor(value + 0.5)


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))
