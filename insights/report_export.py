"""
insights/report_export.py
JSON export of an InsightsReport.

Every export includes: report metadata (generated_at, run parameters),
a data integrity hash (SHA-256 of the export content before the hash is
added) and the export format version. No journal content is exported.
"""

import hashlib
import json
from typing import Any, Dict, Optional

from insights.report import InsightsReport, report_to_dict


EXPORT_FORMAT_VERSION = "1.0"


def _build_export_payload(
    report: InsightsReport,
    parameters: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Build export payload (no hash yet)."""
    return {
        "export_format_version": EXPORT_FORMAT_VERSION,
        "report_metadata": {
            "generated_at": report.generated_at,
            "parameters": dict(parameters) if parameters else {},
        },
        "report": report_to_dict(report),
    }


def content_hash(payload: Dict[str, Any]) -> str:
    """SHA-256 of canonical JSON serialization of payload (no hash field)."""
    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def export_to_dict(
    report: InsightsReport,
    parameters: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    payload = _build_export_payload(report, parameters)
    return {**payload, "content_hash_sha256": content_hash(payload)}


def export_to_json(
    report: InsightsReport,
    parameters: Optional[Dict[str, Any]] = None,
    indent: Optional[int] = 2,
) -> str:
    """Export report to a JSON string with metadata, hash and format version."""
    return json.dumps(export_to_dict(report, parameters), indent=indent, default=str)


def verify_export(export: Dict[str, Any]) -> bool:
    """True only if the embedded hash matches the rest of the export."""
    expected = export.get("content_hash_sha256")
    if not expected or not isinstance(expected, str):
        return False
    payload = {k: v for k, v in export.items() if k != "content_hash_sha256"}
    return content_hash(payload) == expected
