"""
tests/test_pairing.py
Challenge → recovery pairing: window, ordering, first-match rule.
"""

from datetime import datetime, timedelta, timezone

from insights.detectors.recovery_pairing import pair_recoveries
from insights.models.record import JournalRecord

T0 = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


def _at(hours, mood, rid=None, content="Daily update."):
    return JournalRecord(
        id=rid or f"{mood}-{hours}",
        created_at=T0 + timedelta(hours=hours),
        content=content,
        mood=mood,
    )


class TestPairRecoveries:

    def test_recovery_within_window_is_paired(self):
        periods = pair_recoveries([_at(0, "stressed"), _at(10, "accomplished")])
        assert len(periods) == 1
        p = periods[0]
        assert p.recovery is not None
        assert p.elapsed_hours == 10.0
        assert p.challenge_severity == "moderate"
        assert p.recovery_strength == "strong"

    def test_fractional_hours_are_kept(self):
        periods = pair_recoveries([_at(0, "stressed"), _at(1.5, "relieved")])
        assert periods[0].elapsed_hours == 1.5

    def test_recovery_after_eight_days_is_not_paired(self):
        periods = pair_recoveries([_at(0, "stressed"), _at(8 * 24, "accomplished")])
        assert len(periods) == 1
        assert periods[0].recovery is None
        assert periods[0].elapsed_hours is None

    def test_window_counts_whole_days(self):
        # 7 days 23 hours is still 7 whole days
        periods = pair_recoveries([_at(0, "stressed"), _at(7 * 24 + 23, "accomplished")])
        assert periods[0].recovery is not None

    def test_configured_window(self):
        recs = [_at(0, "stressed"), _at(3 * 24, "accomplished")]
        assert pair_recoveries(recs, {"window_days": 2})[0].recovery is None
        assert pair_recoveries(recs, {"window_days": 3})[0].recovery is not None

    def test_first_recovery_wins(self):
        recs = [
            _at(0, "stressed", rid="c"),
            _at(5, "relieved", rid="first"),
            _at(6, "accomplished", rid="second"),
        ]
        p = pair_recoveries(recs)[0]
        assert p.recovery.id == "first"
        assert p.recovery_strength == "mild"

    def test_unsorted_input_is_ordered_first(self):
        recs = [_at(10, "accomplished", rid="r"), _at(0, "stressed", rid="c")]
        periods = pair_recoveries(recs)
        assert periods[0].recovery.id == "r"
        assert [r.id for r in recs] == ["r", "c"]

    def test_recovery_before_challenge_is_ignored(self):
        periods = pair_recoveries([_at(0, "accomplished"), _at(5, "stressed")])
        assert len(periods) == 1
        assert periods[0].recovery is None

    def test_same_timestamp_is_not_a_recovery(self):
        recs = [_at(0, "stressed", rid="c"), _at(0, "accomplished", rid="r")]
        assert pair_recoveries(recs)[0].recovery is None

    def test_one_period_per_challenge(self):
        recs = [
            _at(0, "stressed", rid="c1"),
            _at(2, "sad", rid="c2"),
            _at(4, "accomplished", rid="r"),
        ]
        periods = pair_recoveries(recs)
        assert [p.challenge.id for p in periods] == ["c1", "c2"]
        assert all(p.recovery.id == "r" for p in periods)
        assert [p.elapsed_hours for p in periods] == [4.0, 2.0]

    def test_challenge_can_close_earlier_challenge(self):
        # "Resolved ... issue" is both mild challenge and strong recovery
        recs = [
            _at(0, "stressed", rid="c1"),
            _at(3, None, rid="both", content="Resolved the billing issue"),
        ]
        periods = pair_recoveries(recs)
        assert len(periods) == 2
        assert periods[0].recovery.id == "both"
        assert periods[1].recovery is None

    def test_no_challenges_yields_no_periods(self):
        assert pair_recoveries([_at(0, "excited"), _at(5, "neutral")]) == []

    def test_empty_input(self):
        assert pair_recoveries([]) == []
