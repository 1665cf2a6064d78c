"""
insights/cli.py
Command-line interface for Bizzin Insights.

USAGE:
  python -m insights.cli --input ./exports/journal-2024-03.json
  python -m insights.cli --input ./exports --json --output report.json
  python -m insights.cli --input ./exports --now 2024-03-31T23:59:00Z

EXAMPLES:
  # Text report for every journal-*.json in a directory
  insights --input ./exports

  # Wider recovery window, JSON export with integrity hash
  insights --input journal.json --window-days 10 --json -o report.json
"""

import argparse
import logging
import sys
import time
from pathlib import Path

from insights.config import ensure_config, validate_config
from insights.parsers.journal_parser import load_records, parse_timestamp
from insights.report import build_report, render_text
from insights.report_export import export_to_json

logger = logging.getLogger(__name__)

GREEN  = '\033[92m'
YELLOW = '\033[93m'
RED    = '\033[91m'
CYAN   = '\033[96m'
RESET  = '\033[0m'
BOLD   = '\033[1m'


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog        = 'insights',
        description = 'Bizzin Insights — resilience, burnout and momentum from journal exports',
        formatter_class = argparse.RawDescriptionHelpFormatter,
        epilog = """
NOTE:
  Scores are dashboard heuristics, not clinical assessments.
  All processing is local — journal content is never written to output.
        """
    )
    parser.add_argument(
        '--input', '-i',
        type    = Path,
        help    = 'Journal export file, or directory of journal-*.json (default: journal_dir from config)',
    )
    parser.add_argument(
        '--now',
        default = None,
        help    = 'Reference time for windowed cards, ISO-8601 (default: current time)',
    )
    parser.add_argument(
        '--window-days',
        type    = int,
        default = None,
        help    = 'Recovery lookahead window in days (default: 7)',
    )
    parser.add_argument(
        '--json',
        action  = 'store_true',
        help    = 'Emit the JSON export instead of the text report',
    )
    parser.add_argument(
        '--output', '-o',
        type    = Path,
        default = None,
        help    = 'Write the report to this file instead of stdout',
    )
    parser.add_argument(
        '--config-dir',
        type    = Path,
        default = Path.cwd(),
        help    = 'Directory holding insights_config.json (default: current directory)',
    )
    parser.add_argument(
        '--verbose', '-v',
        action  = 'store_true',
        help    = 'Enable debug logging',
    )
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    # ── LOGGING SETUP ────────────────────────────────────────
    logging.basicConfig(
        level   = logging.DEBUG if args.verbose else logging.INFO,
        format  = '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt = '%H:%M:%S',
    )

    config = ensure_config(args.config_dir)
    if args.window_days is not None:
        try:
            validate_config({'window_days': args.window_days})
        except ValueError as e:
            _err(str(e))
            return 1
        config['window_days'] = args.window_days

    source = args.input or (Path(config['journal_dir']) if config.get('journal_dir') else None)
    if source is None:
        _err("No input given and no journal_dir configured. Use --input.")
        return 1
    if not source.exists():
        _err(f"Input not found: {source}")
        return 1

    now = None
    if args.now:
        now = parse_timestamp(args.now)
        if now is None:
            _err(f"Could not parse --now: {args.now}")
            return 1

    # ── PARSE ────────────────────────────────────────────────
    _step(f"Reading {source}...")
    t0 = time.time()
    records = load_records(source)
    _ok(f"{len(records)} entries parsed in {_elapsed(t0)}")
    if not records:
        _print(f"{YELLOW}No usable journal entries found in {source}{RESET}")

    # ── ANALYSE ──────────────────────────────────────────────
    report = build_report(records, now=now, config=config)

    if args.json:
        text = export_to_json(report, parameters={
            'input':       str(source),
            'now':         now.isoformat() if now else None,
            'window_days': config.get('window_days'),
        })
    else:
        text = render_text(report)

    if args.output:
        args.output.write_text(text + '\n', encoding='utf-8')
        _ok(f"Report written to {args.output.resolve()}")
    else:
        _print(text)
    return 0


# ── PRINT HELPERS ────────────────────────────────────────────

def _step(msg):  _print(f"  {CYAN}→{RESET} {msg}", stream=sys.stderr)
def _ok(msg):    _print(f"  {GREEN}✓{RESET} {msg}", stream=sys.stderr)
def _err(msg):   _print(f"{RED}Error: {msg}{RESET}", stream=sys.stderr)
def _print(msg, stream=None): print(msg, file=stream or sys.stdout)

def _elapsed(t0: float) -> str:
    s = time.time() - t0
    return f"{s:.1f}s" if s < 60 else f"{int(s//60)}m {int(s%60)}s"


if __name__ == '__main__':
    sys.exit(main())
