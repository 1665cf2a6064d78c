"""
insights/parsers/journal_parser.py
Parses journal exports (journal-*.json) pulled from the hosted backend.

Accepts a bare JSON array of entries, or an object wrapping the array
under "entries" or "data" (the shape the REST client returns).
Parsing is lenient: a bad field becomes None, an entry with no usable
timestamp is skipped. Journal content is never logged.
"""

import json
import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from insights.models.record import JournalRecord, SentimentData

logger = logging.getLogger(__name__)

BOM_UTF8 = b'\xef\xbb\xbf'

# Time part of an ISO-8601 string: fraction of any length, offset as
# +HH, +HHMM or +HH:MM. datetime.fromisoformat on 3.10 only takes 3 or 6
# fraction digits and +HH:MM offsets.
ISO_TIME_TAIL = re.compile(
    r'(?P<time>[T ]\d{2}:\d{2}(?::\d{2})?)'
    r'(?:[.,](?P<fraction>\d+))?'
    r'(?P<offset>[+-]\d{2}(?::?\d{2})?)?$'
)


def parse_entries(items: Iterable[Any], source: str = '') -> List[JournalRecord]:
    """
    Normalize raw entry dicts into JournalRecord.
    Non-dict items and entries without a parseable timestamp are dropped.
    Order is preserved; sorting is the caller's concern.
    """
    records: List[JournalRecord] = []
    skipped = 0
    for item in items or []:
        rec = _parse_entry(item, source)
        if rec is None:
            skipped += 1
            continue
        records.append(rec)
    if skipped:
        logger.debug(f"Skipped {skipped} unusable entr{'y' if skipped == 1 else 'ies'} from {source or 'input'}")
    return records


def parse_journal_file(path: Path) -> List[JournalRecord]:
    """
    Parse a single journal export file.
    Returns list of JournalRecord — empty list on read or JSON failure.
    """
    path = Path(path)
    try:
        raw = path.read_bytes()
        if raw.startswith(BOM_UTF8):
            raw = raw[len(BOM_UTF8):]
        data = json.loads(raw.decode('utf-8', errors='replace'))
    except OSError as e:
        logger.error(f"File read error {path.name}: {e}")
        return []
    except json.JSONDecodeError as e:
        logger.error(f"JSON parse error in {path.name}: {e}")
        return []

    if isinstance(data, dict):
        data = data.get('entries', data.get('data', []))
    if not isinstance(data, list):
        logger.error(f"Unexpected export shape in {path.name}: {type(data).__name__}")
        return []

    records = parse_entries(data, source=path.name)
    logger.info(f"Parsed {len(records)} journal entries from {path.name}")
    return records


def parse_journal_directory(directory: Path) -> List[JournalRecord]:
    """
    Parse all journal-*.json files in a directory.
    Deduplicates on id (or on (created_at, content) when id is empty).
    """
    directory = Path(directory)
    all_records: List[JournalRecord] = []
    seen: set = set()

    files = sorted(directory.glob('journal-*.json'))
    if not files:
        logger.warning(f"No journal-*.json files found in {directory}")
        return []

    for path in files:
        for rec in parse_journal_file(path):
            key = rec.id or (rec.created_at, rec.content)
            if key in seen:
                continue
            seen.add(key)
            all_records.append(rec)

    all_records.sort(key=lambda r: r.created_at)
    logger.info(f"Total journal entries after dedup: {len(all_records)}")
    return all_records


def load_records(path: Path) -> List[JournalRecord]:
    """Parse a file or a directory of exports, whichever path points to."""
    path = Path(path)
    if path.is_dir():
        return parse_journal_directory(path)
    return parse_journal_file(path)


# ── HELPERS ──────────────────────────────────────────────────

def _parse_entry(item: Any, source: str) -> Optional[JournalRecord]:
    if not isinstance(item, dict):
        return None
    created = parse_timestamp(item.get('created_at')) or parse_timestamp(item.get('entry_date'))
    if created is None:
        return None
    return JournalRecord(
        id          = _text(item.get('id')),
        created_at  = created,
        content     = _text(item.get('content')),
        title       = _text(item.get('title')),
        mood        = _optional_text(item.get('mood')),
        category    = _optional_text(item.get('category')),
        sentiment   = _parse_sentiment(item.get('sentiment_data', item.get('sentiment'))),
        source_file = source,
    )


def _parse_sentiment(raw: Any) -> Optional[SentimentData]:
    if not isinstance(raw, dict):
        return None
    return SentimentData(
        primary_mood      = _optional_text(raw.get('primary_mood')),
        business_category = _optional_text(raw.get('business_category')),
        confidence        = _number(raw.get('confidence')),
        energy            = _optional_text(raw.get('energy')),
        emotions          = _text_list(raw.get('emotions')),
        insights          = _text_list(raw.get('insights')),
    )


def parse_timestamp(value: Any) -> Optional[datetime]:
    """ISO-8601 string, epoch milliseconds or datetime → tz-aware datetime."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OSError, OverflowError, ValueError):
            return None
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith(('Z', 'z')):
            text = text[:-1] + '+00:00'
        try:
            dt = datetime.fromisoformat(_normalize_iso(text))
        except ValueError:
            return None
    else:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _normalize_iso(text: str) -> str:
    """Pad the fraction to microseconds and expand the offset to +HH:MM."""
    m = ISO_TIME_TAIL.search(text)
    if not m:
        return text
    tail = m.group('time')
    if m.group('fraction'):
        tail += '.' + m.group('fraction')[:6].ljust(6, '0')
    offset = m.group('offset')
    if offset:
        digits = offset[1:].replace(':', '')
        tail += f"{offset[0]}{digits[:2]}:{digits[2:4] or '00'}"
    return text[:m.start()] + tail


def _text(value: Any) -> str:
    if value is None:
        return ''
    return value if isinstance(value, str) else str(value)

def _optional_text(value: Any) -> Optional[str]:
    if not isinstance(value, str) or not value.strip():
        return None
    return value.strip()

def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None

def _text_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, str)]


def records_from_dicts(items: List[Dict[str, Any]]) -> List[JournalRecord]:
    """Convenience for API callers that already hold decoded JSON."""
    return parse_entries(items, source='api')
