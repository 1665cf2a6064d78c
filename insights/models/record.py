"""
insights/models/record.py
Shared dataclass schema. Parsers, detectors, scorers and the API
all use these types. Do not add logic here — data only.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass
class SentimentData:
    """AI sentiment block attached to a journal entry (may be partial)."""
    primary_mood:      Optional[str]   = None
    business_category: Optional[str]   = None
    confidence:        Optional[float] = None   # 0–100 or 0–1, see config.confidence_scale
    energy:            Optional[str]   = None   # low / medium / high
    emotions:          List[str]       = field(default_factory=list)
    insights:          List[str]       = field(default_factory=list)


@dataclass
class JournalRecord:
    """Normalized journal entry. Read-only input to every insight."""
    id:          str
    created_at:  datetime                  # always tz-aware (UTC if source was naive)
    content:     str
    title:       str                       = ''
    mood:        Optional[str]             = None   # legacy field
    category:    Optional[str]             = None   # legacy field
    sentiment:   Optional[SentimentData]   = None
    source_file: str                       = ''


@dataclass
class ClassifiedRecord:
    """Output of the entry classifier for one record."""
    record:             JournalRecord
    is_challenge:       bool          = False
    challenge_severity: Optional[str] = None    # mild / moderate / severe
    is_recovery:        bool          = False
    recovery_strength:  Optional[str] = None    # mild / moderate / strong


@dataclass
class RecoveryPeriod:
    """One challenge and the first recovery that followed it, if any."""
    challenge:          JournalRecord
    recovery:           Optional[JournalRecord] = None
    elapsed_hours:      Optional[float]         = None   # set iff recovery is set
    challenge_severity: str                     = 'mild'
    recovery_strength:  Optional[str]           = None


@dataclass
class ScoreBreakdown:
    """Per-factor sub-scores (0–100) and their signed score contributions."""
    success_rate:             float = 50.0
    severity:                 float = 50.0
    quality:                  float = 50.0
    trend:                    float = 50.0
    success_contribution:     float = 0.0
    severity_contribution:    float = 0.0
    quality_contribution:     float = 0.0
    trend_contribution:       float = 0.0


@dataclass
class ResilienceResult:
    """Recovery resilience for a full record list. Recomputed on every call."""
    average_recovery_hours: float                = 0.0
    trend:                  str                  = 'neutral'   # up / down / neutral
    trend_percent:          int                  = 0
    score:                  int                  = 0
    level:                  str                  = 'Unknown'   # High / Good / Moderate / Low / Unknown
    recovery_periods:       List[RecoveryPeriod] = field(default_factory=list)  # display tail only
    total_challenges:       int                  = 0
    successful_recoveries:  int                  = 0
    success_rate:           float                = 0.0
    breakdown:              ScoreBreakdown       = field(default_factory=ScoreBreakdown)
