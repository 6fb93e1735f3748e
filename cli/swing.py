#!/usr/bin/env python3
"""
Swing signal CLI.

Subcommands:
- analyze:  all signals for one ticker in a date range
- evaluate: explained verdict for one ticker on one date
- scan:     verdicts for every tracked ticker on one date
- daily:    top daily candidates across tracked tickers

Bars are read from a directory of SYMBOL.csv files. Results are printed as
JSON on stdout; logs go to stderr (and optionally a log file).

Usage:
    python -m cli.swing analyze AAPL --from 2024-01-01 --data-dir data/prices
    python -m cli.swing evaluate AAPL --date 2024-06-03 --preset debug --verbose
    python -m cli.swing scan --date 2024-06-03 --override rsiMin=40 --override entryMode=any
    python -m cli.swing daily --top-n 10
"""
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

# Add project root to path so `swingscan` is importable when run as a script
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

import yaml

from swingscan.data.store import CsvBarStore
from swingscan.scan.service import SwingService
from swingscan.shared.dates import parse_int_date
from swingscan.shared.defaults import (
    DAILY_MIN_MEDIAN_DOLLAR_VOL,
    DAILY_MIN_SCORE,
    DAILY_SCAN_LOOKBACK_DAYS,
    DAILY_TOP_N,
)
from swingscan.shared.errors import SwingError
from swingscan.signals.config import DEFAULT_PRESET, PRESET_NAMES, normalize_overrides
from swingscan.signals.config_loader import load_preset_file


logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = "data/prices"


def setup_logging(log_path: Optional[Path] = None, verbose: bool = False):
    """
    Setup logging to stderr and optionally to file.

    Args:
        log_path: Path to log file (None = stderr only)
        verbose: If True, use DEBUG level, otherwise INFO
    """
    level = logging.DEBUG if verbose else logging.INFO

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    # stdout carries the JSON result
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_path:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def parse_date_arg(text: str) -> int:
    """argparse type for YYYY-MM-DD / YYYYMMDD dates."""
    try:
        return parse_int_date(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def parse_override(text: str) -> Tuple[str, Any]:
    """
    argparse type for KEY=VALUE overrides.

    The value is parsed as a YAML scalar, so 40 -> int, 1.5 -> float,
    false -> bool and anything else stays a string.
    """
    key, sep, raw = text.partition("=")
    key = key.strip()
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"Override must be KEY=VALUE, got '{text}'")
    try:
        value = yaml.safe_load(raw) if raw.strip() else raw
    except yaml.YAMLError:
        value = raw
    return key, value


def collect_overrides(pairs: Optional[List[Tuple[str, Any]]]) -> Dict[str, Any]:
    """Later --override flags win over earlier ones."""
    return {key: value for key, value in (pairs or [])}


def load_preset_and_overrides(args: argparse.Namespace) -> Tuple[str, Dict[str, Any]]:
    """
    Combine --config, --preset and --override.

    Precedence: --override > --config overrides; --preset > --config preset.
    """
    preset = args.preset
    overrides: Dict[str, Any] = {}
    if args.config:
        file_preset, overrides = load_preset_file(args.config)
        if preset is None:
            preset = file_preset
    overrides.update(normalize_overrides(collect_overrides(args.override)))
    return preset or DEFAULT_PRESET, overrides


def _add_config_args(parser: argparse.ArgumentParser):
    parser.add_argument(
        "--preset",
        type=str,
        default=None,
        help=f"Preset name: {', '.join(PRESET_NAMES)} (default: {DEFAULT_PRESET})",
    )
    parser.add_argument(
        "--override",
        type=parse_override,
        action="append",
        metavar="KEY=VALUE",
        help="Config override, repeatable (e.g. --override rsiMin=40 --override entry_mode=any)",
    )
    parser.add_argument(
        "--config",
        type=str,
        help="YAML file with 'preset' and 'overrides' keys",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Swing-entry signal engine over daily price CSVs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Signals for AAPL since the start of 2024 with the balanced preset
  python -m cli.swing analyze AAPL --from 2024-01-01

  # Why did (or didn't) AAPL trigger on this date?
  python -m cli.swing evaluate AAPL --date 2024-06-03 --explain

  # Fleet scan including failing tickers
  python -m cli.swing scan --date 2024-06-03 --explain
        """,
    )
    parser.add_argument(
        "--data-dir",
        type=str,
        default=DEFAULT_DATA_DIR,
        help=f"Directory with SYMBOL.csv price files (default: {DEFAULT_DATA_DIR})",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable DEBUG logging",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        help="Also write logs to this file",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze = subparsers.add_parser("analyze", help="All signals for one ticker in a date range")
    analyze.add_argument("ticker", type=str, help="Ticker symbol")
    analyze.add_argument("--from", dest="from_date", type=parse_date_arg, required=True,
                         help="First signal date (YYYY-MM-DD)")
    analyze.add_argument("--to", dest="to_date", type=parse_date_arg,
                         help="Last signal date (default: today)")
    _add_config_args(analyze)

    evaluate = subparsers.add_parser("evaluate", help="Explained verdict for one ticker on one date")
    evaluate.add_argument("ticker", type=str, help="Ticker symbol")
    evaluate.add_argument("--date", type=parse_date_arg, required=True, help="Evaluation date (YYYY-MM-DD)")
    evaluate.add_argument("--explain", action="store_true", help="Also list passing checks")
    _add_config_args(evaluate)

    scan = subparsers.add_parser("scan", help="Evaluate every tracked ticker on one date")
    scan.add_argument("--date", type=parse_date_arg, required=True, help="Evaluation date (YYYY-MM-DD)")
    scan.add_argument("--explain", action="store_true", help="Include failing tickers with reasons")
    _add_config_args(scan)

    daily = subparsers.add_parser("daily", help="Top daily candidates across tracked tickers")
    daily.add_argument("--lookback-days", type=int, default=DAILY_SCAN_LOOKBACK_DAYS,
                       help=f"Calendar days of history (default: {DAILY_SCAN_LOOKBACK_DAYS})")
    daily.add_argument("--min-dollar-volume", type=float, default=DAILY_MIN_MEDIAN_DOLLAR_VOL,
                       help=f"Median dollar volume floor (default: {DAILY_MIN_MEDIAN_DOLLAR_VOL:,.0f})")
    daily.add_argument("--min-score", type=float, default=DAILY_MIN_SCORE,
                       help=f"Minimum daily score (default: {DAILY_MIN_SCORE})")
    daily.add_argument("--top-n", type=int, default=DAILY_TOP_N,
                       help=f"Maximum picks (default: {DAILY_TOP_N})")
    daily.add_argument("--as-of", type=parse_date_arg, help="Scan date (default: today)")

    return parser


def run_command(args: argparse.Namespace, service: SwingService) -> Any:
    """Dispatch a parsed command; returns a JSON-serializable result."""
    if args.command == "daily":
        picks = service.run_daily_scan(
            lookback_days=args.lookback_days,
            min_median_dollar_vol=args.min_dollar_volume,
            min_daily_score=args.min_score,
            top_n=args.top_n,
            as_of=args.as_of,
        )
        return [p.to_dict() for p in picks]

    preset, overrides = load_preset_and_overrides(args)

    if args.command == "analyze":
        signals = service.analyze_swing(
            args.ticker, args.from_date, args.to_date, preset=preset, overrides=overrides,
        )
        return {"ticker": args.ticker, "preset": preset, "signals": [s.to_dict() for s in signals]}

    if args.command == "evaluate":
        result = service.evaluate_ticker_for_date(
            args.ticker, args.date, preset=preset, overrides=overrides, verbose=args.explain,
        )
        return result.to_dict()

    outcomes = service.scan_tickers_for_date(
        args.date, preset=preset, overrides=overrides, verbose=args.explain,
    )
    return [o.to_dict() for o in outcomes]


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(Path(args.log_file) if args.log_file else None, verbose=args.verbose)

    try:
        service = SwingService(CsvBarStore(args.data_dir))
        result = run_command(args, service)
    except (SwingError, FileNotFoundError) as e:
        logger.error(str(e))
        return 1

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
