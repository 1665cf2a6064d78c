"""
tests/test_parsers.py
Unit tests for the journal export parser.
Generates synthetic journal JSON — no real entries needed.
"""

import json
from datetime import datetime, timezone

import pytest

from insights.parsers.journal_parser import (
    load_records,
    parse_entries,
    parse_journal_directory,
    parse_journal_file,
    parse_timestamp,
    records_from_dicts,
)


# ── FIXTURE: Synthetic journal export ────────────────────────

SAMPLE_ENTRIES = [
    {
        "id": "a1",
        "title": "Supplier fell through",
        "content": "Big setback with the supplier today.",
        "mood": "Stressed",
        "category": "Challenge",
        "created_at": "2024-03-01T09:00:00Z",
    },
    {
        "id": "a2",
        "title": "Back on track",
        "content": "Found a new supplier.",
        "created_at": "2024-03-01T19:00:00+00:00",
        "sentiment_data": {
            "primary_mood": "Accomplished",
            "business_category": "Achievement",
            "confidence": 88,
            "energy": "high",
            "emotions": ["relief", 3],
        },
    },
    {
        "id": "a3",
        "content": "Legacy timestamp only.",
        "entry_date": 1709370000000,
    },
    {"id": "broken", "content": "No timestamp at all."},
    "not-an-entry",
]


@pytest.fixture
def journal_dir(tmp_path):
    (tmp_path / 'journal-2024-03.json').write_text(json.dumps(SAMPLE_ENTRIES), encoding='utf-8')
    return tmp_path


# ── ENTRY NORMALIZATION ──────────────────────────────────────

class TestParseEntries:

    def test_unusable_entries_are_skipped(self):
        records = parse_entries(SAMPLE_ENTRIES)
        assert [r.id for r in records] == ["a1", "a2", "a3"]

    def test_timestamps_are_tz_aware(self):
        for r in parse_entries(SAMPLE_ENTRIES):
            assert r.created_at.tzinfo is not None

    def test_legacy_fields(self):
        rec = parse_entries(SAMPLE_ENTRIES)[0]
        assert rec.mood == "Stressed"
        assert rec.category == "Challenge"
        assert rec.sentiment is None
        assert rec.created_at == datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)

    def test_sentiment_block(self):
        rec = parse_entries(SAMPLE_ENTRIES)[1]
        assert rec.sentiment.primary_mood == "Accomplished"
        assert rec.sentiment.business_category == "Achievement"
        assert rec.sentiment.confidence == 88.0
        assert rec.sentiment.energy == "high"
        assert rec.sentiment.emotions == ["relief"]

    def test_entry_date_fallback(self):
        rec = parse_entries(SAMPLE_ENTRIES)[2]
        assert rec.created_at == datetime.fromtimestamp(1709370000, tz=timezone.utc)
        assert rec.title == ""

    def test_null_content_becomes_empty(self):
        rec = parse_entries([{"id": "x", "content": None, "created_at": "2024-03-01T00:00:00Z"}])[0]
        assert rec.content == ""

    def test_source_is_recorded(self):
        rec = records_from_dicts(SAMPLE_ENTRIES[:1])[0]
        assert rec.source_file == "api"


class TestParseTimestamp:

    def test_zulu(self):
        assert parse_timestamp("2024-03-01T09:00:00Z") == datetime(2024, 3, 1, 9, tzinfo=timezone.utc)

    def test_naive_is_utc(self):
        assert parse_timestamp("2024-03-01T09:00:00").tzinfo == timezone.utc

    def test_epoch_millis(self):
        assert parse_timestamp(0) == datetime(1970, 1, 1, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", [None, "", "yesterday", True, {"t": 1}])
    def test_unparseable(self, value):
        assert parse_timestamp(value) is None


# ── FILE / DIRECTORY ─────────────────────────────────────────

class TestJournalFiles:

    def test_parse_file(self, journal_dir):
        records = parse_journal_file(journal_dir / 'journal-2024-03.json')
        assert len(records) == 3
        assert all(r.source_file == 'journal-2024-03.json' for r in records)

    def test_wrapped_export(self, tmp_path):
        path = tmp_path / 'journal-wrapped.json'
        path.write_text(json.dumps({"entries": SAMPLE_ENTRIES[:2]}), encoding='utf-8')
        assert len(parse_journal_file(path)) == 2

    def test_data_key(self, tmp_path):
        path = tmp_path / 'journal-data.json'
        path.write_text(json.dumps({"data": SAMPLE_ENTRIES[:1]}), encoding='utf-8')
        assert len(parse_journal_file(path)) == 1

    def test_bom_is_stripped(self, tmp_path):
        path = tmp_path / 'journal-bom.json'
        path.write_bytes(b'\xef\xbb\xbf' + json.dumps(SAMPLE_ENTRIES[:1]).encode('utf-8'))
        assert len(parse_journal_file(path)) == 1

    def test_malformed_json_returns_empty(self, tmp_path):
        bad = tmp_path / 'journal-bad.json'
        bad.write_text('[{"id": BROKEN', encoding='utf-8')
        assert parse_journal_file(bad) == []

    def test_unexpected_shape_returns_empty(self, tmp_path):
        bad = tmp_path / 'journal-shape.json'
        bad.write_text('"just a string"', encoding='utf-8')
        assert parse_journal_file(bad) == []

    def test_missing_file_returns_empty(self, tmp_path):
        assert parse_journal_file(tmp_path / 'journal-missing.json') == []

    def test_deduplication_in_directory(self, journal_dir):
        # Same export twice under a different name
        content = (journal_dir / 'journal-2024-03.json').read_text()
        (journal_dir / 'journal-2024-03-copy.json').write_text(content, encoding='utf-8')
        records = parse_journal_directory(journal_dir)
        assert len(records) == 3

    def test_directory_is_sorted(self, tmp_path):
        (tmp_path / 'journal-b.json').write_text(json.dumps([SAMPLE_ENTRIES[0]]), encoding='utf-8')
        (tmp_path / 'journal-a.json').write_text(json.dumps([SAMPLE_ENTRIES[2]]), encoding='utf-8')
        records = parse_journal_directory(tmp_path)
        assert [r.id for r in records] == ["a1", "a3"]

    def test_other_files_are_ignored(self, journal_dir):
        (journal_dir / 'notes.json').write_text(json.dumps(SAMPLE_ENTRIES), encoding='utf-8')
        assert len(parse_journal_directory(journal_dir)) == 3

    def test_empty_directory(self, tmp_path):
        assert parse_journal_directory(tmp_path) == []

    def test_load_records_accepts_file_or_directory(self, journal_dir):
        assert len(load_records(journal_dir)) == 3
        assert len(load_records(journal_dir / 'journal-2024-03.json')) == 3


class TestTimestampForms:

    def test_five_digit_fraction(self):
        assert parse_timestamp("2024-03-01T10:00:00.12345+00:00") == datetime(
            2024, 3, 1, 10, 0, 0, 123450, tzinfo=timezone.utc)

    def test_long_fraction_is_truncated(self):
        assert parse_timestamp("2024-03-01T10:00:00.1234567Z").microsecond == 123456

    def test_hour_only_offset(self):
        assert parse_timestamp("2024-03-01T10:00:00+00") == datetime(2024, 3, 1, 10, tzinfo=timezone.utc)

    def test_compact_offset(self):
        assert parse_timestamp("2024-03-01T10:00:00.5+0530") == datetime(
            2024, 3, 1, 4, 30, 0, 500000, tzinfo=timezone.utc)

    def test_space_separator(self):
        assert parse_timestamp("2024-03-01 10:00:00.12+00") == datetime(
            2024, 3, 1, 10, 0, 0, 120000, tzinfo=timezone.utc)

    def test_date_only(self):
        assert parse_timestamp("2024-03-01") == datetime(2024, 3, 1, tzinfo=timezone.utc)

    def test_trimmed_fraction_entry_is_kept(self):
        records = parse_entries([
            {"id": "p1", "content": "", "created_at": "2024-03-01T10:00:00.12345+00:00"},
        ])
        assert [r.id for r in records] == ["p1"]
