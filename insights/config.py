"""
insights/config.py
Automated config with auto-detection. Persists to insights_config.json.
Every tunable used by the classifier, pairing engine and cards lives here.
"""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "insights_config.json"

DEFAULT_CONFIG = {
    "journal_dir": None,
    "window_days": 7,              # pairing lookahead, whole days
    "confidence_threshold": 75,    # on the 0–100 scale
    "confidence_scale": "auto",    # auto / percent / fraction
    "display_periods": 5,
    "burnout_window_days": 14,
    "momentum_window_days": 14,
    "health_window_days": 30,
    "api_host": "127.0.0.1",
    "api_port": 8766,
}

CONFIDENCE_SCALES = ("auto", "percent", "fraction")

# Common export locations to auto-detect
AUTO_DETECT_PATHS = [
    Path.home() / "Bizzin" / "exports",
    Path.home() / "Downloads" / "bizzin-journal",
    Path.home() / "JournalExport",
    Path("exports"),
]


def _config_path(project_root: Optional[Path] = None) -> Path:
    root = project_root or Path.cwd()
    return root / CONFIG_FILENAME


def load_config(project_root: Optional[Path] = None) -> Dict[str, Any]:
    """Load config from insights_config.json. Returns defaults if missing or invalid."""
    path = _config_path(project_root)
    if path.exists():
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            if not isinstance(data, dict):
                raise ValueError("config root must be a JSON object")
            validate_config(data)
            return {**DEFAULT_CONFIG, **data}
        except (json.JSONDecodeError, OSError, ValueError) as e:
            logger.warning(f"Config load failed: {e}")
    return dict(DEFAULT_CONFIG)


def save_config(config: Dict[str, Any], project_root: Optional[Path] = None) -> Path:
    """Persist config to insights_config.json."""
    path = _config_path(project_root)
    path.write_text(json.dumps(config, indent=2), encoding="utf-8")
    return path


def validate_config(config: Dict[str, Any]) -> None:
    """Raise ValueError for settings the pipeline cannot use."""
    unknown = set(config) - set(DEFAULT_CONFIG)
    if unknown:
        raise ValueError(f"Unknown setting(s): {sorted(unknown)}")
    if config.get("confidence_scale", "auto") not in CONFIDENCE_SCALES:
        raise ValueError(f"confidence_scale must be one of {CONFIDENCE_SCALES}")
    threshold = config.get("confidence_threshold", 0)
    if (isinstance(threshold, bool) or not isinstance(threshold, (int, float))
            or not math.isfinite(threshold) or threshold < 0):
        raise ValueError("confidence_threshold must be a non-negative number")
    for key in ("window_days", "display_periods", "burnout_window_days",
                "momentum_window_days", "health_window_days"):
        value = config.get(key, 1)
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ValueError(f"{key} must be a positive integer")


def get_setting(config: Optional[Dict[str, Any]], key: str) -> Any:
    """Read one setting, falling back to DEFAULT_CONFIG when absent or None."""
    if config:
        value = config.get(key)
        if value is not None:
            return value
    return DEFAULT_CONFIG[key]


def auto_detect_journal_dir() -> Optional[Path]:
    """Scan common paths for journal-*.json exports. Returns first match or None."""
    for d in AUTO_DETECT_PATHS:
        try:
            if d.exists() and d.is_dir() and list(d.glob("journal-*.json")):
                return d
        except OSError:
            continue
    return None


def ensure_config(project_root: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load or create config. Auto-detect journal_dir if not set.
    Returns merged config.
    """
    config = load_config(project_root)
    if not config.get("journal_dir"):
        detected = auto_detect_journal_dir()
        if detected:
            config["journal_dir"] = str(detected)
            logger.info(f"Auto-detected journal dir: {detected}")
    return config
