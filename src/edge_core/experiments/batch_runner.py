"""Batch runner for independent backtests.

Backtests for different symbols or timeframes share no mutable state, so a
batch can run them on a thread or process pool. Results come back in
submission order regardless of completion order.

Example:
    >>> from src.edge_core.experiments.batch_runner import BacktestJob, run_backtest_batch
    >>> jobs = [
    ...     BacktestJob("EUR/USD", "1min", eurusd_history, seed=1),
    ...     BacktestJob("BTC/USD", "5min", btcusd_history, seed=2),
    ... ]
    >>> outcomes = run_backtest_batch(jobs, max_workers=2)
    >>> summary = summarize_backtest_results(outcomes)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Literal

import pandas as pd

from src.edge_core.config.models import BacktestConfig
from src.edge_core.data.contracts import ObservationPoint
from src.edge_core.errors import EdgeCoreError
from src.edge_core.qa.backtest_engine import BacktestResult, run_backtest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BacktestJob:
    """One backtest to run.

    Attributes:
        symbol: Symbol label
        timeframe: Timeframe label
        history: Observations ordered ascending by time
        seed: Optional root seed for this run
        config: Optional BacktestConfig
    """

    symbol: str
    timeframe: str
    history: Sequence[ObservationPoint]
    seed: int | None = None
    config: BacktestConfig | None = None


@dataclass(frozen=True)
class BacktestOutcome:
    """Result or failure of one job.

    Attributes:
        job_index: Position of the job in the submitted batch
        symbol: Symbol label
        timeframe: Timeframe label
        result: BacktestResult (None if the run failed)
        status: "success" or "failed"
        error_message: Error message if status == "failed"
        retryable: Whether the failure is advisory (e.g. insufficient data)
    """

    job_index: int
    symbol: str
    timeframe: str
    result: BacktestResult | None
    status: Literal["success", "failed"] = "success"
    error_message: str | None = None
    retryable: bool = False


def _run_job(job: BacktestJob) -> BacktestResult:
    return run_backtest(job.symbol, job.timeframe, job.history, config=job.config, seed=job.seed)


def run_backtest_batch(
    jobs: Sequence[BacktestJob],
    max_workers: int | None = None,
    use_processes: bool = False,
) -> list[BacktestOutcome]:
    """Run independent backtests concurrently.

    Pipeline errors (insufficient data, training failures) are captured per
    job so one bad series does not abort the batch; any other exception
    propagates.

    Args:
        jobs: Backtests to run
        max_workers: Pool size (None = executor default)
        use_processes: If True, use a ProcessPoolExecutor instead of threads

    Returns:
        One BacktestOutcome per job, in submission order
    """
    if not jobs:
        return []

    executor_cls: type[Executor] = ProcessPoolExecutor if use_processes else ThreadPoolExecutor
    outcomes: list[BacktestOutcome | None] = [None] * len(jobs)

    logger.info(
        f"Running {len(jobs)} backtests ({executor_cls.__name__}, max_workers={max_workers})"
    )

    with executor_cls(max_workers=max_workers) as executor:
        futures = {executor.submit(_run_job, job): idx for idx, job in enumerate(jobs)}
        for future in as_completed(futures):
            idx = futures[future]
            job = jobs[idx]
            try:
                result = future.result()
            except EdgeCoreError as e:
                logger.warning(f"Backtest {idx} ({job.symbol} {job.timeframe}) failed: {e}")
                outcomes[idx] = BacktestOutcome(
                    job_index=idx,
                    symbol=job.symbol,
                    timeframe=job.timeframe,
                    result=None,
                    status="failed",
                    error_message=str(e),
                    retryable=e.retryable,
                )
                continue
            outcomes[idx] = BacktestOutcome(
                job_index=idx, symbol=job.symbol, timeframe=job.timeframe, result=result
            )

    return [o for o in outcomes if o is not None]


def summarize_backtest_results(outcomes: Sequence[BacktestOutcome]) -> pd.DataFrame:
    """One row per job with the headline statistics.

    Columns: job_index, symbol, timeframe, status, win_rate, total_trades,
    wins, losses, profit_simulation, drawdown, consecutive_wins, period,
    error_message. Failed jobs carry NaN statistics.
    """
    columns = [
        "job_index",
        "symbol",
        "timeframe",
        "status",
        "win_rate",
        "total_trades",
        "wins",
        "losses",
        "profit_simulation",
        "drawdown",
        "consecutive_wins",
        "period",
        "error_message",
    ]
    rows = []
    for outcome in outcomes:
        row = {
            "job_index": outcome.job_index,
            "symbol": outcome.symbol,
            "timeframe": outcome.timeframe,
            "status": outcome.status,
            "error_message": outcome.error_message,
        }
        if outcome.result is not None:
            stats = outcome.result.to_dict()
            row.update({k: stats[k] for k in columns if k in stats and k not in row})
        rows.append(row)

    return pd.DataFrame(rows, columns=columns)
