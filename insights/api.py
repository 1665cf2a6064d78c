"""
insights/api.py
─────────────────────────────────────────────────────────────────────────────
Bizzin Insights — Dual-mode API layer

TWO USAGE MODES:
  1. Importable module (dashboard backend, scripts):
         from insights.api import InsightsAPI
         api = InsightsAPI()
         result = api.resilience(entries)          # entries: list of dicts

  2. FastAPI HTTP server (dashboard cards via fetch()):
         python -m insights.api                    # default: port 8766
         python -m insights.api --port 9000
         uvicorn insights.api:app --port 8766

ENDPOINTS:
  POST /resilience      — recovery resilience card
  POST /burnout         — burnout risk card
  POST /momentum        — growth momentum card
  POST /health-metrics  — business health radar
  POST /report          — everything above in one payload
  GET  /health          — liveness
  GET  /config          — current settings
  POST /config          — update and persist settings

Entries arrive in the request body exactly as the hosted backend returns
them. Nothing is stored: every call recomputes from the posted list.
CORS: localhost-only. The server binds to 127.0.0.1 by default.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from fastapi import Body, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from insights import __version__
from insights.aggregators.health_aggregator import (
    compute_burnout_risk,
    compute_business_health,
    compute_growth_momentum,
)
from insights.config import load_config, save_config, validate_config
from insights.models.record import JournalRecord
from insights.parsers.journal_parser import records_from_dicts
from insights.report import build_report, report_to_dict, summarize_resilience
from insights.scorer.resilience_scorer import compute_recovery_resilience

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# IMPORTABLE CLASS
# ═══════════════════════════════════════════════════════════════════════════

class InsightsAPI:
    """
    Pure-Python wrapper around the insight pipelines.
    No HTTP layer required — import and call directly.

    Usage:
        api = InsightsAPI(project_root=Path("."))
        api.resilience(entries)
        api.health_metrics(entries, now=datetime(2024, 3, 1, tzinfo=timezone.utc))
        api.update_config({"window_days": 10})
    """

    def __init__(self, project_root: Optional[Path] = None, config: Optional[Dict[str, Any]] = None):
        self.project_root = Path(project_root) if project_root else Path.cwd()
        if config is not None:
            validate_config(config)
        self.config = config if config is not None else load_config(self.project_root)

    # ── INTERNAL ──────────────────────────────────────────────────────────

    def _records(self, entries: List[Any]) -> List[JournalRecord]:
        if entries and all(isinstance(e, JournalRecord) for e in entries):
            return list(entries)
        return records_from_dicts(entries)

    def _config(self, overrides: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        if not overrides:
            return self.config
        clean = {k: v for k, v in overrides.items() if v is not None}
        validate_config(clean)
        return {**self.config, **clean}

    # ── INSIGHTS ──────────────────────────────────────────────────────────

    def resilience(self, entries: List[Any], overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        result = compute_recovery_resilience(self._records(entries), self._config(overrides))
        return report_to_dict(summarize_resilience(result))

    def burnout(self, entries: List[Any], now: Optional[datetime] = None,
                overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return report_to_dict(compute_burnout_risk(self._records(entries), now, self._config(overrides)))

    def momentum(self, entries: List[Any], now: Optional[datetime] = None,
                 overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return report_to_dict(compute_growth_momentum(self._records(entries), now, self._config(overrides)))

    def health_metrics(self, entries: List[Any], now: Optional[datetime] = None,
                       overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return report_to_dict(compute_business_health(self._records(entries), now, self._config(overrides)))

    def report(self, entries: List[Any], now: Optional[datetime] = None,
               overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        records = self._records(entries)
        logger.info(f"Report requested for {len(records)} entries")
        return report_to_dict(build_report(records, now, self._config(overrides)))

    # ── CONFIG ────────────────────────────────────────────────────────────

    def get_config(self) -> Dict[str, Any]:
        return dict(self.config)

    def update_config(self, update: Dict[str, Any]) -> Dict[str, Any]:
        """Validate, merge and persist. Raises ValueError on bad settings."""
        validate_config(update or {})
        self.config = {**self.config, **(update or {})}
        save_config(self.config, self.project_root)
        logger.info(f"Config updated: {sorted((update or {}).keys())}")
        return dict(self.config)


# ═══════════════════════════════════════════════════════════════════════════
# REQUEST / RESPONSE MODELS
# ═══════════════════════════════════════════════════════════════════════════

class SentimentIn(BaseModel):
    primary_mood:      Optional[str] = None
    business_category: Optional[str] = None
    confidence:        Optional[float] = None
    energy:            Optional[str] = None
    emotions:          List[str] = Field(default_factory=list)
    insights:          List[str] = Field(default_factory=list)


class JournalEntryIn(BaseModel):
    id:             Optional[str] = None
    title:          Optional[str] = None
    content:        Optional[str] = None
    mood:           Optional[str] = None
    category:       Optional[str] = None
    created_at:     Optional[Union[int, datetime]] = None
    entry_date:     Optional[Union[int, datetime]] = None
    sentiment_data: Optional[SentimentIn] = None


class InsightsRequest(BaseModel):
    entries:     List[JournalEntryIn] = Field(default_factory=list)
    now:         Optional[datetime] = None
    window_days: Optional[int] = Field(None, ge=1, le=90)


class BusinessHealthMetricsOut(BaseModel):
    burnout_risk:        int = Field(ge=0, le=100)
    growth_momentum:     int = Field(ge=0, le=100)
    recovery_resilience: int = Field(ge=0, le=100)
    overall_health:      int = Field(ge=0, le=100)


def _entries(req: InsightsRequest) -> List[Dict[str, Any]]:
    return [e.model_dump() for e in req.entries]


def _overrides(req: InsightsRequest) -> Dict[str, Any]:
    return {"window_days": req.window_days} if req.window_days else {}


# ═══════════════════════════════════════════════════════════════════════════
# FASTAPI HTTP APP
# ═══════════════════════════════════════════════════════════════════════════

def _build_app(project_root: Optional[Path] = None, config: Optional[Dict[str, Any]] = None) -> FastAPI:
    """Build and return the FastAPI application instance."""
    _api = InsightsAPI(project_root=project_root, config=config)

    _app = FastAPI(
        title       = "Bizzin Insights API",
        description = "Journal insights for the dashboard: resilience, burnout, momentum, health",
        version     = __version__,
        docs_url    = "/docs",
        redoc_url   = None,
    )

    _app.add_middleware(
        CORSMiddleware,
        allow_origins     = [
            "http://localhost",
            "http://localhost:5173",
            "http://127.0.0.1",
            "http://127.0.0.1:5173",
        ],
        allow_methods     = ["GET", "POST", "OPTIONS"],
        allow_headers     = ["Content-Type"],
        allow_credentials = False,
    )

    def _run(name: str, fn, *args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc))
        except Exception as exc:
            logger.error(f"{name} endpoint error: {exc}", exc_info=True)
            raise HTTPException(status_code=500, detail=f"{name} failed: {exc}")

    @_app.post("/resilience", summary="Recovery resilience score")
    def resilience(req: InsightsRequest):
        """Classify → pair → score. Fewer than 2 entries returns score 0, level Unknown."""
        return _run("Resilience", _api.resilience, _entries(req), _overrides(req))

    @_app.post("/burnout", summary="Burnout risk")
    def burnout(req: InsightsRequest):
        return _run("Burnout", _api.burnout, _entries(req), req.now, _overrides(req))

    @_app.post("/momentum", summary="Growth momentum")
    def momentum(req: InsightsRequest):
        return _run("Momentum", _api.momentum, _entries(req), req.now, _overrides(req))

    @_app.post("/health-metrics", summary="Business health radar",
               response_model=BusinessHealthMetricsOut)
    def health_metrics(req: InsightsRequest):
        return _run("Health metrics", _api.health_metrics, _entries(req), req.now, _overrides(req))

    @_app.post("/report", summary="All insights in one payload")
    def report(req: InsightsRequest):
        return _run("Report", _api.report, _entries(req), req.now, _overrides(req))

    @_app.get("/health", summary="Health check")
    def health():
        return {"status": "ok", "version": __version__}

    @_app.get("/config", summary="Get config")
    def get_config():
        return {"config": _api.get_config()}

    @_app.post("/config", summary="Save config")
    def save_config_endpoint(update: Dict[str, Any] = Body(default_factory=dict)):
        """Persist settings to insights_config.json. Unknown keys are rejected."""
        config = _run("Config", _api.update_config, update)
        return {"status": "ok", "config": config}

    return _app


# Module-level app instance — used by uvicorn insights.api:app
app = _build_app()


# ═══════════════════════════════════════════════════════════════════════════
# CLI ENTRYPOINT — python -m insights.api
# ═══════════════════════════════════════════════════════════════════════════

if __name__ == "__main__":
    import argparse

    import uvicorn

    parser = argparse.ArgumentParser(
        prog        = "insights.api",
        description = "Bizzin Insights API Server",
    )
    parser.add_argument("--port", type=int, default=8766,
                        help="Port to bind (default: 8766)")
    parser.add_argument("--host", type=str, default="127.0.0.1",
                        help="Host to bind — DO NOT change to 0.0.0.0 on shared networks")
    parser.add_argument("--root", type=Path, default=Path.cwd(),
                        help="Directory holding insights_config.json")
    args = parser.parse_args()

    uvicorn.run(_build_app(project_root=args.root), host=args.host, port=args.port, log_level="info")
