"""
insights/scorer — recovery resilience scoring.
"""

from insights.scorer.resilience_scorer import (
    classify_level,
    compute_recovery_resilience,
    score_periods,
)

__all__ = [
    "classify_level",
    "compute_recovery_resilience",
    "score_periods",
]
