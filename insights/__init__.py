"""
Bizzin Insights — journal analytics behind the dashboard cards.

    parsers      — journal export → JournalRecord
    detectors    — entry classifier, recovery pairing
    scorer       — recovery resilience score
    aggregators  — burnout risk, growth momentum, business health
    report       — combined report, text rendering, JSON export
"""

__version__ = "1.0.0"
