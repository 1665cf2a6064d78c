"""
insights/detectors/recovery_pairing.py
Pairs every challenge entry with the first recovery entry that follows it.

For a challenge at position i (time-ordered), entries after it are
scanned until one falls more than window_days whole days later. The
first recovery-classified entry strictly later in time closes the
period. No ranking among candidates: earliest wins.

Worst case O(n²). Volumes are personal-journal scale.
"""

import logging
from typing import Dict, List, Optional

from insights.config import get_setting
from insights.detectors.entry_classifier import classify_entries
from insights.models.record import ClassifiedRecord, JournalRecord, RecoveryPeriod

logger = logging.getLogger(__name__)

SECONDS_PER_HOUR = 3600.0


def pair_recoveries(
    records: List[JournalRecord],
    config:  Optional[Dict] = None,
) -> List[RecoveryPeriod]:
    """
    Build one RecoveryPeriod per challenge, in chronological order.
    Input need not be sorted; the caller's list is not modified.
    """
    ordered = sorted(records, key=lambda r: r.created_at)
    classified = classify_entries(ordered, config)
    window_days = int(get_setting(config, 'window_days'))

    periods: List[RecoveryPeriod] = []
    for i, entry in enumerate(classified):
        if not entry.is_challenge:
            continue
        periods.append(_find_recovery(classified, i, window_days))

    paired = sum(1 for p in periods if p.recovery is not None)
    logger.debug(f"Pairing: {len(periods)} challenge(s), {paired} paired within {window_days}d")
    return periods


def _find_recovery(
    classified:  List[ClassifiedRecord],
    index:       int,
    window_days: int,
) -> RecoveryPeriod:
    challenge = classified[index]
    start = challenge.record.created_at

    for later in classified[index + 1:]:
        delta = later.record.created_at - start
        if delta.days > window_days:
            break
        if delta.total_seconds() <= 0:
            continue
        if later.is_recovery:
            return RecoveryPeriod(
                challenge          = challenge.record,
                recovery           = later.record,
                elapsed_hours      = delta.total_seconds() / SECONDS_PER_HOUR,
                challenge_severity = challenge.challenge_severity or 'mild',
                recovery_strength  = later.recovery_strength,
            )

    return RecoveryPeriod(
        challenge          = challenge.record,
        challenge_severity = challenge.challenge_severity or 'mild',
    )
