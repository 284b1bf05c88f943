"""Experiment orchestration: batches of independent backtests."""

from src.edge_core.experiments.batch_runner import (
    BacktestJob,
    BacktestOutcome,
    run_backtest_batch,
    summarize_backtest_results,
)

__all__ = [
    "BacktestJob",
    "BacktestOutcome",
    "run_backtest_batch",
    "summarize_backtest_results",
]
