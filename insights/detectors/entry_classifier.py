"""
insights/detectors/entry_classifier.py
Labels each journal entry as challenge, recovery, both or neither.
Pure Python, deterministic, case-insensitive. Never raises: a missing
or malformed field simply contributes no signal.

Tiers are checked highest first (severe > moderate > mild for
challenges, strong > moderate > mild for recoveries). The first tier
with any mood, category or content match wins.
"""

import math
from typing import Any, Dict, List, Optional, Tuple

from insights.config import get_setting
from insights.models.record import ClassifiedRecord, JournalRecord

# ── SIGNAL DICTIONARIES ──────────────────────────────────────
# Each tier: (moods, categories, content substrings). Extend freely,
# but keep challenge and recovery vocabularies disjoint.

Tier = Tuple[Tuple[str, ...], Tuple[str, ...], Tuple[str, ...]]

CHALLENGE_TIERS: Dict[str, Tier] = {
    'severe': (
        ('overwhelmed', 'burned out', 'exhausted', 'desperate', 'devastated'),
        (),
        ('crisis', 'disaster', 'failed', 'devastat', 'burnout', 'bankrupt'),
    ),
    'moderate': (
        ('stressed', 'frustrated', 'anxious', 'pressured', 'worried'),
        ('challenge',),
        ('setback', 'struggle', 'difficult'),
    ),
    'mild': (
        ('sad', 'conflicted', 'uncertain', 'tired', 'disappointed', 'discouraged'),
        (),
        ('problem', 'issue', 'stuck', 'behind'),
    ),
}

RECOVERY_TIERS: Dict[str, Tier] = {
    'strong': (
        ('accomplished', 'excited', 'proud', 'energized'),
        ('achievement', 'milestone'),
        ('breakthrough', 'resolved', 'solved', 'success', 'milestone'),
    ),
    'moderate': (
        ('confident', 'optimistic', 'motivated', 'determined', 'inspired'),
        ('growth',),
        ('solution', 'progress', 'fixed', 'turned around'),
    ),
    'mild': (
        ('relieved', 'hopeful', 'calm', 'refreshed', 'relaxed'),
        (),
        ('better', 'improving', 'recovered', 'back on track'),
    ),
}

# Strength assigned when only the confidence rule qualified the entry
CONFIDENCE_ONLY_STRENGTH = 'moderate'

# A substring inside a word starting with one of these ("unsuccessful",
# "unresolved", "non-issue") is not a match
NEGATION_PREFIXES = ('un', 'non')


def effective_mood(record: JournalRecord) -> str:
    """Sentiment mood wins over the legacy mood field. Lower-cased, '' if none."""
    sentiment = getattr(record, 'sentiment', None)
    mood = getattr(sentiment, 'primary_mood', None) or getattr(record, 'mood', None)
    return mood.strip().lower() if isinstance(mood, str) else ''


def effective_category(record: JournalRecord) -> str:
    """Sentiment business category wins over the legacy category field."""
    sentiment = getattr(record, 'sentiment', None)
    category = getattr(sentiment, 'business_category', None) or getattr(record, 'category', None)
    return category.strip().lower() if isinstance(category, str) else ''


def normalized_confidence(record: JournalRecord, scale: str = 'auto') -> Optional[float]:
    """
    Confidence on the 0–100 scale, or None when absent or unusable.

    scale='auto' treats values in [0, 1] as fractions, larger values as
    percentages. 'fraction' always multiplies by 100, 'percent' never does.
    """
    raw: Any = getattr(getattr(record, 'sentiment', None), 'confidence', None)
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return None
    value = float(raw)
    if not math.isfinite(value) or value < 0:
        return None
    if scale == 'fraction' or (scale == 'auto' and value <= 1.0):
        value *= 100.0
    return value


def classify_entry(record: JournalRecord, config: Optional[Dict] = None) -> ClassifiedRecord:
    """Classify one entry. See module docstring for tier precedence."""
    mood     = effective_mood(record)
    category = effective_category(record)
    content  = record.content.lower() if isinstance(getattr(record, 'content', None), str) else ''

    severity = _match_tier(CHALLENGE_TIERS, mood, category, content)
    strength = _match_tier(RECOVERY_TIERS, mood, category, content)

    if strength is None:
        threshold  = float(get_setting(config, 'confidence_threshold'))
        confidence = normalized_confidence(record, get_setting(config, 'confidence_scale'))
        if confidence is not None and confidence >= threshold:
            strength = CONFIDENCE_ONLY_STRENGTH

    return ClassifiedRecord(
        record             = record,
        is_challenge       = severity is not None,
        challenge_severity = severity,
        is_recovery        = strength is not None,
        recovery_strength  = strength,
    )


def classify_entries(records: List[JournalRecord], config: Optional[Dict] = None) -> List[ClassifiedRecord]:
    return [classify_entry(r, config) for r in records]


def _match_tier(tiers: Dict[str, Tier], mood: str, category: str, content: str) -> Optional[str]:
    for tier, (moods, categories, substrings) in tiers.items():
        if mood and mood in moods:
            return tier
        if category and category in categories:
            return tier
        if content and any(_mentions(content, s) for s in substrings):
            return tier
    return None


def _mentions(content: str, term: str) -> bool:
    """True if term occurs at least once in a word that is not negated."""
    start = content.find(term)
    while start != -1:
        word_start = max(content.rfind(ch, 0, start) for ch in ' \t\n') + 1
        if not content[word_start:start].startswith(NEGATION_PREFIXES):
            return True
        start = content.find(term, start + 1)
    return False
