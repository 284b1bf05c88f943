# tests/test_experiments_batch_runner.py
"""Tests for batch backtests."""

from __future__ import annotations

import sys
from pathlib import Path

import pandas as pd
import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from src.edge_core.experiments import batch_runner
from src.edge_core.experiments.batch_runner import (
    BacktestJob,
    run_backtest_batch,
    summarize_backtest_results,
)
from src.edge_core.qa.backtest_engine import run_backtest
from src.edge_core.signals.signal_api import ModelSignal, SignalType

pytestmark = pytest.mark.unit


def _always_buy(window, seed):
    return (
        ModelSignal("FOREST-ENSEMBLE", SignalType.BUY, 90, 0.95),
        ModelSignal("TF-LSTM", SignalType.BUY, 90),
    )


@pytest.fixture
def deterministic_jobs(monkeypatch):
    """Route batch jobs through a fixed always-BUY ensemble."""

    def _run_job(job):
        return run_backtest(job.symbol, job.timeframe, job.history, config=job.config, ensemble_fn=_always_buy)

    monkeypatch.setattr(batch_runner, "_run_job", _run_job)


class TestRunBacktestBatch:
    """Tests for run_backtest_batch()."""

    def test_empty_batch(self):
        assert run_backtest_batch([]) == []

    def test_results_in_submission_order(self, deterministic_jobs, rising_history, falling_history):
        jobs = [
            BacktestJob("EUR/USD", "1min", rising_history),
            BacktestJob("GBP/USD", "5min", falling_history),
            BacktestJob("USD/JPY", "1min", rising_history[:60]),
        ]
        outcomes = run_backtest_batch(jobs, max_workers=3)

        assert [o.job_index for o in outcomes] == [0, 1, 2]
        assert [o.symbol for o in outcomes] == ["EUR/USD", "GBP/USD", "USD/JPY"]
        assert all(o.status == "success" for o in outcomes)
        assert outcomes[0].result.wins == 69
        assert outcomes[1].result.losses == 69
        assert outcomes[2].result.total_trades == 29

    def test_failure_is_captured_per_job(self, deterministic_jobs, rising_history):
        jobs = [
            BacktestJob("EUR/USD", "1min", rising_history),
            BacktestJob("SHORT", "1min", rising_history[:10]),
        ]
        outcomes = run_backtest_batch(jobs, max_workers=2)

        assert outcomes[0].status == "success"
        assert outcomes[1].status == "failed"
        assert outcomes[1].result is None
        assert outcomes[1].retryable
        assert "insufficient data" in outcomes[1].error_message


class TestSummarizeBacktestResults:
    """Tests for summarize_backtest_results()."""

    def test_summary_frame(self, deterministic_jobs, rising_history):
        outcomes = run_backtest_batch(
            [
                BacktestJob("EUR/USD", "1min", rising_history),
                BacktestJob("SHORT", "1min", rising_history[:10]),
            ]
        )
        summary = summarize_backtest_results(outcomes)

        assert isinstance(summary, pd.DataFrame)
        assert list(summary["symbol"]) == ["EUR/USD", "SHORT"]
        assert summary.loc[0, "win_rate"] == 100.0
        assert summary.loc[0, "period"] == "100 Bars"
        assert pd.isna(summary.loc[1, "win_rate"])
        assert summary.loc[1, "status"] == "failed"

    def test_empty_summary_has_columns(self):
        summary = summarize_backtest_results([])
        assert summary.empty
        assert "profit_simulation" in summary.columns
