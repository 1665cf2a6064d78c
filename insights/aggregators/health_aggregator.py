"""
insights/aggregators/health_aggregator.py
Dashboard health insights computed alongside recovery resilience.

  burnout risk     — last 14 days: stress moods (40%), low energy (30%),
                     work-life balance signals (30%)
  growth momentum  — per-day entry scores over 14 days, short-term trend,
                     high-performance streaks
  business health  — radar view over 30 days: stress management (inverted
                     burnout), growth momentum, recovery resilience, overall

Every function takes `now` so results are reproducible in tests and in
the API. Like the resilience score, these are PLAUSIBLE heuristics for
dashboard cards, not validated instruments.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from insights.config import get_setting
from insights.detectors.entry_classifier import (
    effective_category,
    effective_mood,
    normalized_confidence,
)
from insights.models.record import JournalRecord
from insights.scorer.resilience_scorer import compute_recovery_resilience, round_half_up

logger = logging.getLogger(__name__)

# ── BURNOUT ──────────────────────────────────────────────────

STRESS_MOODS        = ('stressed', 'overwhelmed', 'frustrated', 'anxious', 'tired', 'sad', 'conflicted')
LOW_ENERGY_MOODS    = ('tired', 'exhausted', 'drained')
BALANCE_SIGNALS     = ('overwhelm', 'work late', 'no time')
POSITIVE_MOODS      = ('excited', 'confident', 'motivated', 'accomplished', 'inspired')

BURNOUT_LEVELS = (('high', 70), ('medium', 40))

# ── MOMENTUM ─────────────────────────────────────────────────

MOOD_SCORES: Dict[str, int] = {
    'excited': 90, 'accomplished': 95, 'confident': 85, 'motivated': 88,
    'inspired': 92, 'optimistic': 80, 'focused': 75, 'determined': 85,
    'curious': 70, 'analytical': 65, 'thoughtful': 60, 'reflective': 60,
    'neutral': 50, 'uncertain': 40, 'conflicted': 35, 'frustrated': 25,
    'stressed': 20, 'overwhelmed': 15, 'tired': 30, 'sad': 25,
}
CATEGORY_SCORES: Dict[str, int] = {
    'achievement': 90, 'growth': 85, 'planning': 70, 'learning': 65,
    'research': 60, 'challenge': 40,
}
POSITIVE_SIGNALS = (
    'success', 'win', 'breakthrough', 'growth', 'progress', 'achievement',
    'excited', 'accomplished', 'milestone', 'launched', 'completed', 'solved',
)
NEGATIVE_SIGNALS = (
    'failed', 'struggle', 'problem', 'issue', 'stuck', 'difficult',
    'frustrat', 'stress', 'overwhelm', 'behind', 'delay',
)
HIGH_PERFORMANCE_SCORE = 75
HIGH_PERFORMANCE_MIN_DAYS = 2
MOMENTUM_TREND_THRESHOLD = 5

# ── RADAR ────────────────────────────────────────────────────

RADAR_HIGH_STRESS   = ('overwhelmed', 'burned out', 'exhausted', 'desperate')
RADAR_MEDIUM_STRESS = ('stressed', 'frustrated', 'anxious', 'pressured', 'worried')
RADAR_LOW_STRESS    = ('tired', 'sad', 'conflicted', 'uncertain', 'disappointed')
RADAR_DRAINED_MOODS = ('tired', 'exhausted', 'drained', 'depleted', 'burned out')
WORK_STRESS_KEYWORDS = (
    'working late', 'deadline pressure', 'too much work', 'no breaks', 'overwhelm',
    'constant meetings', 'unrealistic expectations', 'work weekends', 'no time',
)
SELF_CARE_KEYWORDS = ('took a break', 'went for walk', 'relaxed', 'vacation', 'rest day', 'self-care')
SELF_CARE_MOODS    = ('relaxed', 'refreshed', 'recharged', 'peaceful', 'calm')
CONFIDENT_MOODS    = ('confident', 'excited', 'motivated', 'optimistic', 'inspired')
ACHIEVEMENT_MOODS  = ('excited', 'confident', 'accomplished', 'proud', 'successful')
RADAR_POSITIVE     = ('excited', 'confident', 'motivated', 'accomplished', 'inspired', 'optimistic', 'energized')

RESILIENCE_NO_CHALLENGES = 80    # challenges never logged
RESILIENCE_NO_DATA       = 50


# ── DATA MODEL ───────────────────────────────────────────────

@dataclass
class BurnoutAssessment:
    risk:    int       = 0
    level:   str       = 'low'      # low / medium / high
    factors: List[str] = field(default_factory=list)


@dataclass
class DailyMomentum:
    date:  str      # YYYY-MM-DD
    day:   str      # e.g. "Mar 04"
    score: int


@dataclass
class MomentumAssessment:
    current_score:            int                 = 0
    trend:                    str                 = 'neutral'
    trend_value:              int                 = 0
    daily_scores:             List[DailyMomentum] = field(default_factory=list)
    high_performance_periods: List[str]           = field(default_factory=list)


@dataclass
class BusinessHealthMetrics:
    burnout_risk:        int = 0    # inverted: high = well managed stress
    growth_momentum:     int = 0
    recovery_resilience: int = 0
    overall_health:      int = 0


# ── BURNOUT RISK ─────────────────────────────────────────────

def compute_burnout_risk(
    records: List[JournalRecord],
    now:     Optional[datetime] = None,
    config:  Optional[Dict]     = None,
) -> BurnoutAssessment:
    """Burnout risk over the recent window, with human-readable factors."""
    if not records:
        return BurnoutAssessment()

    recent = _recent(records, now, int(get_setting(config, 'burnout_window_days')))
    if not recent:
        return BurnoutAssessment(factors=['Insufficient recent data'])

    total = len(recent)
    factors: List[str] = []

    stress_ratio = sum(1 for r in recent if effective_mood(r) in STRESS_MOODS) / total
    if stress_ratio > 0.6:
        factors.append('High stress patterns')
    elif stress_ratio > 0.3:
        factors.append('Moderate stress levels')

    energy_ratio = sum(1 for r in recent if _low_energy(r, LOW_ENERGY_MOODS)) / total
    if energy_ratio > 0.5:
        factors.append('Consistently low energy')
    elif energy_ratio > 0.25:
        factors.append('Some energy concerns')

    balance_ratio = sum(
        1 for r in recent
        if effective_category(r) == 'challenge' or _contains_any(r, BALANCE_SIGNALS)
    ) / total
    if balance_ratio > 0.4:
        factors.append('Work-life balance concerns')
    elif balance_ratio > 0.2:
        factors.append('Some balance challenges')

    risk = stress_ratio * 40 + energy_ratio * 30 + balance_ratio * 30
    level = _burnout_level(risk)

    if level == 'low':
        positive = sum(1 for r in recent if effective_mood(r) in POSITIVE_MOODS)
        if positive > total * 0.5:
            factors.append('Strong positive mindset')

    return BurnoutAssessment(risk=int(round_half_up(risk)), level=level, factors=factors)


def _burnout_level(risk: float) -> str:
    for label, floor in BURNOUT_LEVELS:
        if risk >= floor:
            return label
    return 'low'


# ── GROWTH MOMENTUM ──────────────────────────────────────────

def score_entry_momentum(record: JournalRecord) -> float:
    """Single-entry momentum 0–100: baseline 50 moved by mood, category, content."""
    score = 50.0

    mood_score = MOOD_SCORES.get(effective_mood(record))
    if mood_score is not None:
        score += (mood_score - 50) * 0.4

    category_score = CATEGORY_SCORES.get(effective_category(record))
    if category_score is not None:
        score += (category_score - 50) * 0.3

    content = (record.content or '').lower()
    bonus = sum(10 for s in POSITIVE_SIGNALS if s in content)
    bonus -= sum(10 for s in NEGATIVE_SIGNALS if s in content)
    score += max(-30, min(30, bonus)) * 0.3

    return max(0.0, min(100.0, score))


def compute_growth_momentum(
    records: List[JournalRecord],
    now:     Optional[datetime] = None,
    config:  Optional[Dict]     = None,
) -> MomentumAssessment:
    """Daily momentum series (empty days sit at 50), trend and hot streaks."""
    if not records:
        return MomentumAssessment()

    now = _now(now)
    days = int(get_setting(config, 'momentum_window_days'))

    by_day: Dict[str, List[float]] = {}
    for r in _recent(records, now, days):
        key = r.created_at.astimezone(timezone.utc).strftime('%Y-%m-%d')
        by_day.setdefault(key, []).append(score_entry_momentum(r))

    daily: List[DailyMomentum] = []
    scores: List[float] = []
    for offset in range(days - 1, -1, -1):
        date = now - timedelta(days=offset)
        key = date.strftime('%Y-%m-%d')
        day_scores = by_day.get(key, [])
        avg = sum(day_scores) / len(day_scores) if day_scores else 50.0
        daily.append(DailyMomentum(date=key, day=date.strftime('%b %d'), score=int(round_half_up(avg))))
        scores.append(avg)

    recent_avg  = _avg(scores[-3:], 50.0)
    earlier_avg = _avg(scores[-7:-3], 50.0)
    trend_value = int(round_half_up(recent_avg - earlier_avg))
    if trend_value > MOMENTUM_TREND_THRESHOLD:
        trend = 'up'
    elif trend_value < -MOMENTUM_TREND_THRESHOLD:
        trend = 'down'
    else:
        trend = 'neutral'

    return MomentumAssessment(
        current_score            = int(round_half_up(scores[-1])),
        trend                    = trend,
        trend_value              = trend_value,
        daily_scores             = daily,
        high_performance_periods = high_performance_periods(daily),
    )


def high_performance_periods(daily: List[DailyMomentum]) -> List[str]:
    """Runs of 2+ consecutive days scoring 75 or more, e.g. 'Mar 01 - Mar 03 (3 days)'."""
    periods: List[str] = []
    streak: List[DailyMomentum] = []
    for day in daily + [None]:
        if day is not None and day.score >= HIGH_PERFORMANCE_SCORE:
            streak.append(day)
            continue
        if len(streak) >= HIGH_PERFORMANCE_MIN_DAYS:
            periods.append(f"{streak[0].day} - {streak[-1].day} ({len(streak)} days)")
        streak = []
    return periods


# ── BUSINESS HEALTH RADAR ────────────────────────────────────

def compute_business_health(
    records: List[JournalRecord],
    now:     Optional[datetime] = None,
    config:  Optional[Dict]     = None,
) -> BusinessHealthMetrics:
    """Radar metrics. Resilience reuses the full recovery-resilience pipeline."""
    if not records:
        return BusinessHealthMetrics()

    recent = _recent(records, now, int(get_setting(config, 'health_window_days')))
    stress_management = max(0, 100 - radar_burnout_risk(recent))
    momentum = radar_growth_momentum(recent, now, config)
    resilience = radar_resilience(records, config)

    overall = int(round_half_up((stress_management + momentum + resilience) / 3))
    logger.info(
        f"Business health: stress={stress_management} momentum={momentum} "
        f"resilience={resilience} overall={overall}"
    )
    return BusinessHealthMetrics(
        burnout_risk        = stress_management,
        growth_momentum     = momentum,
        recovery_resilience = resilience,
        overall_health      = overall,
    )


def radar_burnout_risk(entries: List[JournalRecord]) -> int:
    """Tiered stress (40) + drained energy (30) + work stress (30), minus self-care credit."""
    if not entries:
        return 0
    if len(entries) < 3:
        return 20

    total = len(entries)
    moods = [effective_mood(e) for e in entries]

    risk = (
        sum(1 for m in moods if m in RADAR_HIGH_STRESS) / total * 40
        + sum(1 for m in moods if m in RADAR_MEDIUM_STRESS) / total * 25
        + sum(1 for m in moods if m in RADAR_LOW_STRESS) / total * 15
    )
    risk += sum(1 for e in entries if _low_energy(e, RADAR_DRAINED_MOODS)) / total * 30
    risk += sum(
        1 for e in entries
        if effective_category(e) == 'challenge' or _contains_any(e, WORK_STRESS_KEYWORDS)
    ) / total * 30

    self_care = sum(
        1 for e in entries
        if _contains_any(e, SELF_CARE_KEYWORDS) or effective_mood(e) in SELF_CARE_MOODS
    )
    if self_care:
        risk -= min(15, self_care * 3)

    return int(max(0, min(100, round_half_up(risk))))


def radar_growth_momentum(
    entries: List[JournalRecord],
    now:     Optional[datetime] = None,
    config:  Optional[Dict]     = None,
) -> int:
    """Growth share (35%), confidence (25%), achievements (25%), positivity (15%) + recent boost."""
    if not entries:
        return 0
    if len(entries) < 3:
        return 30

    total = len(entries)
    moods = [effective_mood(e) for e in entries]
    categories = [effective_category(e) for e in entries]
    score = 0.0

    # 15% of entries growth-focused earns full marks
    growth_ratio = sum(1 for c in categories if c == 'growth') / total
    score += min(100.0, growth_ratio / 0.15 * 100) * 0.35

    scale = get_setting(config, 'confidence_scale')
    confidences = [c for c in (normalized_confidence(e, scale) for e in entries) if c]
    if confidences:
        avg_confidence = sum(confidences) / len(confidences)
        score += max(0.0, min(100.0, (avg_confidence - 45) * 2)) * 0.25
    else:
        confident_ratio = sum(1 for m in moods if m in CONFIDENT_MOODS) / total
        score += min(100.0, confident_ratio * 200) * 0.25

    # 10% achievements earns full marks
    achievements = sum(
        1 for m, c in zip(moods, categories) if c == 'achievement' or m in ACHIEVEMENT_MOODS
    )
    score += min(100.0, achievements / total / 0.10 * 100) * 0.25

    positivity = sum(1 for m in moods if m in RADAR_POSITIVE) / total
    score += min(100.0, positivity * 150) * 0.15

    last_week = _recent(entries, now, 7)
    if last_week:
        recent_positive = sum(1 for e in last_week if effective_mood(e) in RADAR_POSITIVE)
        if recent_positive / len(last_week) > 0.6:
            score += 10

    return int(max(0, min(100, round_half_up(score))))


def radar_resilience(records: List[JournalRecord], config: Optional[Dict] = None) -> int:
    result = compute_recovery_resilience(records, config)
    if result.level != 'Unknown':
        return result.score
    if len(records) >= 2:
        return RESILIENCE_NO_CHALLENGES
    return RESILIENCE_NO_DATA


# ── HELPERS ──────────────────────────────────────────────────

def _now(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc)


def _recent(records: List[JournalRecord], now: Optional[datetime], days: int) -> List[JournalRecord]:
    cutoff = _now(now) - timedelta(days=days)
    return [r for r in records if r.created_at > cutoff]


def _low_energy(record: JournalRecord, moods) -> bool:
    """Sentiment energy 'low', or a drained sentiment mood. The legacy mood field is not read."""
    if record.sentiment is None:
        return False
    energy = record.sentiment.energy
    mood = record.sentiment.primary_mood
    return (
        (isinstance(energy, str) and energy.lower() == 'low')
        or (isinstance(mood, str) and mood.strip().lower() in moods)
    )


def _contains_any(record: JournalRecord, phrases) -> bool:
    content = (record.content or '').lower()
    return any(p in content for p in phrases)


def _avg(values: List[float], default: float) -> float:
    return sum(values) / len(values) if values else default
