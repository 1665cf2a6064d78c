"""
insights/report.py
Structured dashboard report: recovery resilience plus the health cards.

Input: List[JournalRecord].
Output: InsightsReport suitable for the CLI text view, the API and export.
Entry content is never copied into the report; periods reference entries
by id, title and timestamp only.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from insights.aggregators.health_aggregator import (
    BurnoutAssessment,
    BusinessHealthMetrics,
    MomentumAssessment,
    compute_burnout_risk,
    compute_business_health,
    compute_growth_momentum,
)
from insights.models.record import JournalRecord, RecoveryPeriod, ResilienceResult
from insights.scorer.resilience_scorer import compute_recovery_resilience, round_half_up


# ── REPORT SCHEMA ────────────────────────────────────────────

@dataclass
class PeriodSummary:
    challenge_id:    str
    challenge_title: str
    challenge_at:    str
    recovery_id:     Optional[str]
    recovery_at:     Optional[str]
    elapsed_hours:   Optional[float]
    elapsed_label:   str               # "10h" / "2d" / "Ongoing"
    severity:        str
    strength:        Optional[str]


@dataclass
class ResilienceSummary:
    score:                  int
    level:                  str
    average_recovery_hours: float
    average_recovery_label: str
    trend:                  str
    trend_percent:          int
    success_rate:           float
    total_challenges:       int
    successful_recoveries:  int
    insight:                str
    recent_periods:         List[PeriodSummary] = field(default_factory=list)
    breakdown:              Dict[str, float]    = field(default_factory=dict)


@dataclass
class InsightsReport:
    entry_count:      int
    date_range_start: Optional[str]
    date_range_end:   Optional[str]
    resilience:       ResilienceSummary
    burnout:          BurnoutAssessment
    momentum:         MomentumAssessment
    health:           BusinessHealthMetrics
    generated_at:     str


LEVEL_INSIGHTS = {
    'High':     "Excellent recovery ability! You bounce back quickly from setbacks and maintain momentum.",
    'Good':     "Good resilience. You recover well from challenges with consistent patterns.",
    'Moderate': "Moderate resilience. Focus on developing coping strategies and support systems.",
    'Low':      "Low resilience detected. Consider building stress management and recovery practices.",
}
NO_DATA_INSIGHT = "Insufficient data to assess recovery patterns. Continue journaling through challenges."


def format_recovery_time(hours: float) -> str:
    """Compact duration: 10h, 3d, 2w."""
    if hours < 24:
        return f"{int(round_half_up(hours))}h"
    if hours < 168:
        return f"{int(round_half_up(hours / 24))}d"
    return f"{int(round_half_up(hours / 168))}w"


def resilience_insight(result: ResilienceResult) -> str:
    if not result.total_challenges:
        return NO_DATA_INSIGHT
    return LEVEL_INSIGHTS.get(result.level, NO_DATA_INSIGHT)


def summarize_resilience(result: ResilienceResult) -> ResilienceSummary:
    b = result.breakdown
    return ResilienceSummary(
        score                  = result.score,
        level                  = result.level,
        average_recovery_hours = round(result.average_recovery_hours, 2),
        average_recovery_label = (
            format_recovery_time(result.average_recovery_hours)
            if result.average_recovery_hours > 0 else 'N/A'
        ),
        trend                  = result.trend,
        trend_percent          = result.trend_percent,
        success_rate           = round(result.success_rate, 1),
        total_challenges       = result.total_challenges,
        successful_recoveries  = result.successful_recoveries,
        insight                = resilience_insight(result),
        recent_periods         = [_summarize_period(p) for p in result.recovery_periods],
        breakdown              = {
            'success_rate': round(b.success_rate, 2),
            'severity':     round(b.severity, 2),
            'quality':      round(b.quality, 2),
            'trend':        round(b.trend, 2),
        },
    )


def build_report(
    records: List[JournalRecord],
    now:     Optional[datetime] = None,
    config:  Optional[Dict]     = None,
) -> InsightsReport:
    """Run every insight over the same record list."""
    now = now or datetime.now(timezone.utc)
    stamps = [r.created_at for r in records]

    return InsightsReport(
        entry_count      = len(records),
        date_range_start = min(stamps).isoformat() if stamps else None,
        date_range_end   = max(stamps).isoformat() if stamps else None,
        resilience       = summarize_resilience(compute_recovery_resilience(records, config)),
        burnout          = compute_burnout_risk(records, now, config),
        momentum         = compute_growth_momentum(records, now, config),
        health           = compute_business_health(records, now, config),
        generated_at     = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
    )


def report_to_dict(report: Any) -> Dict:
    """Convert a report (or any nested dataclass) to a JSON-serializable dict."""
    def _dataclass_to_dict(obj):
        if hasattr(obj, "__dataclass_fields__"):
            return {k: _dataclass_to_dict(getattr(obj, k)) for k in obj.__dataclass_fields__}
        if isinstance(obj, list):
            return [_dataclass_to_dict(x) for x in obj]
        if isinstance(obj, dict):
            return {k: _dataclass_to_dict(v) for k, v in obj.items()}
        if isinstance(obj, datetime):
            return obj.isoformat()
        return obj

    return _dataclass_to_dict(report)


def render_text(report: InsightsReport) -> str:
    """Human-readable report for the terminal."""
    r = report.resilience
    lines = [
        "BIZZIN INSIGHTS REPORT",
        "=" * 58,
        "",
        f"  Entries analysed    : {report.entry_count}",
        f"  Date range          : {report.date_range_start or '-'} → {report.date_range_end or '-'}",
        "",
        "  Recovery Resilience",
        f"    Score             : {r.score} ({r.level})",
        f"    Avg recovery time : {r.average_recovery_label}",
        f"    Recovery trend    : {_trend_text(r.trend, r.trend_percent)}",
        f"    Success rate      : {r.success_rate:.0f}% of {r.total_challenges} challenge(s)",
        f"    Insight           : {r.insight}",
    ]
    if r.recent_periods:
        lines.append("    Recent patterns   :")
        for p in r.recent_periods:
            lines.append(f"      - {p.challenge_title or 'Challenge Entry'}: {p.elapsed_label}")

    b = report.burnout
    lines += [
        "",
        f"  Burnout Risk        : {b.risk} ({b.level.upper()})",
    ]
    for factor in b.factors:
        lines.append(f"    - {factor}")

    m = report.momentum
    lines += [
        "",
        f"  Growth Momentum     : {m.current_score} (trend {m.trend}, {m.trend_value:+d})",
    ]
    for period in m.high_performance_periods:
        lines.append(f"    - High performance: {period}")

    h = report.health
    lines += [
        "",
        "  Business Health",
        f"    Stress management : {h.burnout_risk}%",
        f"    Growth momentum   : {h.growth_momentum}%",
        f"    Resilience        : {h.recovery_resilience}%",
        f"    Overall           : {h.overall_health}%",
        "",
        "=" * 58,
    ]
    return "\n".join(lines)


# ── HELPERS ──────────────────────────────────────────────────

def _summarize_period(period: RecoveryPeriod) -> PeriodSummary:
    recovered = period.recovery is not None and period.elapsed_hours is not None
    return PeriodSummary(
        challenge_id    = period.challenge.id,
        challenge_title = period.challenge.title,
        challenge_at    = period.challenge.created_at.isoformat(),
        recovery_id     = period.recovery.id if recovered else None,
        recovery_at     = period.recovery.created_at.isoformat() if recovered else None,
        elapsed_hours   = round(period.elapsed_hours, 2) if recovered else None,
        elapsed_label   = format_recovery_time(period.elapsed_hours) if recovered else 'Ongoing',
        severity        = period.challenge_severity,
        strength        = period.recovery_strength if recovered else None,
    )


def _trend_text(trend: str, percent: int) -> str:
    if trend == 'up':
        return f"{percent}% Faster"
    if trend == 'down':
        return f"{abs(percent)}% Slower"
    return "Stable"
