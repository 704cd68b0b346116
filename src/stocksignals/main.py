"""
stocksignals - command line entry point.

Loads daily price bars from a CSV or JSON file, computes the technical
indicators and prints the signal summary as JSON on stdout.

CSV files need a ``date`` column plus open, high, low, close, volume.
JSON files hold a list of bar records as returned by the history endpoint.
"""

import argparse
import json
from pathlib import Path
import sys
from typing import Any, Sequence

import pandas as pd

from stocksignals.analysis import analyze
from stocksignals.config import get_settings
from stocksignals.data import PriceBar, bars_from_dataframe, bars_from_records
from stocksignals.utils import LogConfig, add_context, get_logger, setup_logging


def load_bars(path: Path) -> list[PriceBar]:
    """
    Load price bars from a CSV or JSON file, oldest first.

    Args:
        path: File to read; the suffix selects the format.

    Returns:
        List of PriceBar in file order.

    Raises:
        ValueError: If the format is unsupported or the records are malformed.
    """
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return bars_from_dataframe(pd.read_csv(path))
    if suffix == ".json":
        with path.open(encoding="utf-8") as f:
            records = json.load(f)
        if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
            raise ValueError("JSON input must be a list of bar records")
        return bars_from_records(records)
    raise ValueError(f"Unsupported input format: {suffix or path.name}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stocksignals",
        description="Compute technical indicators and trading signals for daily bars.",
    )
    parser.add_argument("path", type=Path, help="CSV or JSON file with daily price bars")
    parser.add_argument(
        "--indicators",
        default=None,
        help="Comma-separated indicator groups (sma,ema,rsi,macd,bollinger)",
    )
    parser.add_argument("--symbol", default=None, help="Symbol label added to log entries")
    parser.add_argument(
        "--series",
        action="store_true",
        help="Include the full indicator series in the output",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """
    Run the command line interface.

    Returns:
        Exit code (0 for success, 1 when the input cannot be loaded).
    """
    args = build_parser().parse_args(argv)
    settings = get_settings()

    setup_logging(LogConfig.from_settings(settings.logging))
    logger = get_logger(__name__)

    with add_context(symbol=args.symbol or args.path.stem):
        try:
            bars = load_bars(args.path)
        except (OSError, ValueError) as e:
            logger.error("bars_load_failed", path=str(args.path), error=str(e))
            return 1

        logger.info("bars_loaded", path=str(args.path), bars=len(bars))
        bundle, summary = analyze(bars, args.indicators, settings)
        logger.info(
            "analysis_complete",
            trend=summary.trend,
            strength=summary.strength,
            events=summary.events,
        )

    output: dict[str, Any] = {"summary": summary.to_dict()}
    if args.series:
        output["indicators"] = bundle.to_dict(bars)

    json.dump(output, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
