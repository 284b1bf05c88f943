# scripts/run_backtest.py
"""CLI entry point for walk-forward backtests.

Fetches history for each symbol from Twelve Data (or reads a CSV with
timestamp/close/volume columns) and prints a summary table.

Example:
    python scripts/run_backtest.py --symbols EUR/USD BTC/USD --timeframe 1min --seed 7
    python scripts/run_backtest.py --csv data/eurusd.csv --symbols EUR/USD
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Add repo root to path
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

import pandas as pd

from src.edge_core.config.settings import get_settings
from src.edge_core.data.contracts import observations_from_frame
from src.edge_core.data.market_data import SUPPORTED_TIMEFRAMES, ApiKeyRotator, TwelveDataProvider
from src.edge_core.errors import EdgeCoreError
from src.edge_core.experiments.batch_runner import (
    BacktestJob,
    run_backtest_batch,
    summarize_backtest_results,
)
from src.edge_core.logging_config import generate_run_id, setup_logging
from src.edge_core.logging_utils import get_logger
from src.edge_core.utils.random_state import seed_or_default

logger = get_logger("edge_core.scripts.run_backtest")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run walk-forward backtests")
    parser.add_argument("--symbols", nargs="+", required=True, help="Symbols, e.g. EUR/USD")
    parser.add_argument(
        "--timeframe", default="1min", choices=SUPPORTED_TIMEFRAMES, help="Bar timeframe"
    )
    parser.add_argument("--csv", type=Path, default=None, help="Read history from CSV instead")
    parser.add_argument(
        "--seed", type=int, default=None, help="Root seed (default: EDGE_DEFAULT_SEED)"
    )
    parser.add_argument("--max-workers", type=int, default=None, help="Parallel backtests")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(run_id=generate_run_id("backtest"), level=args.log_level)
    settings = get_settings()
    seed = seed_or_default(args.seed)

    jobs: list[BacktestJob] = []
    if args.csv is not None:
        history = observations_from_frame(pd.read_csv(args.csv))
        jobs = [BacktestJob(s, args.timeframe, history, seed=seed) for s in args.symbols]
    else:
        if not settings.twelve_data_api_keys:
            logger.error("No API keys configured (EDGE_TWELVE_DATA_API_KEYS)")
            return 1
        provider = TwelveDataProvider(
            key_rotator=ApiKeyRotator(settings.twelve_data_api_keys),
            base_url=settings.twelve_data_base_url,
            output_size=settings.market_data_output_size,
            timeout=settings.request_timeout_seconds,
        )
        for symbol in args.symbols:
            try:
                history = provider.fetch(symbol, args.timeframe)
            except EdgeCoreError as e:
                logger.error(f"Skipping {symbol}: {e}")
                continue
            jobs.append(BacktestJob(symbol, args.timeframe, history, seed=seed))

    outcomes = run_backtest_batch(jobs, max_workers=args.max_workers)
    summary = summarize_backtest_results(outcomes)
    print(summary.to_string(index=False))
    return 0 if all(o.status == "success" for o in outcomes) else 1


if __name__ == "__main__":
    sys.exit(main())
