#!/usr/bin/env python3
"""
run_insights.py — Config-driven Bizzin Insights runner
Uses insights_config.json. Run from project root.

  python run_insights.py           # text report for journal_dir (uses config)
  python run_insights.py --json    # JSON export instead
  python run_insights.py --api     # start API server

Config is created manually or via POST /config. Auto-detects the export dir if not set.
"""

import argparse
import sys
from pathlib import Path


def main():
    parser = argparse.ArgumentParser(description="Bizzin Insights — automated runner")
    parser.add_argument("--api", action="store_true", help="Start API server")
    parser.add_argument("--json", action="store_true", help="Print JSON export instead of text")
    args = parser.parse_args()

    root = Path(__file__).parent

    from insights.config import ensure_config

    config = ensure_config(root)

    if args.api:
        import uvicorn
        from insights.api import _build_app
        app = _build_app(project_root=root, config=config)
        host, port = config["api_host"], int(config["api_port"])
        print(f"Starting API at http://{host}:{port}")
        uvicorn.run(app, host=host, port=port, log_level="info")
        return

    journal_dir = config.get("journal_dir")
    if not journal_dir or not Path(journal_dir).exists():
        print("No journal dir. Set journal_dir in insights_config.json", file=sys.stderr)
        sys.exit(1)

    from insights.cli import main as cli_main
    argv = ["--input", journal_dir, "--config-dir", str(root)]
    if args.json:
        argv.append("--json")
    sys.exit(cli_main(argv))


if __name__ == "__main__":
    main()
