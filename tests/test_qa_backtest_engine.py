# tests/test_qa_backtest_engine.py
"""Tests for the walk-forward backtest simulator.

Most tests inject a deterministic ``ensemble_fn`` so the money-management
state machine can be checked exactly; the full model-driven run is marked slow.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from src.edge_core.config.models import BacktestConfig
from src.edge_core.data.contracts import observations_to_frame
from src.edge_core.errors import (
    BacktestCancelledError,
    InsufficientDataError,
    TrainingFailureError,
)
from src.edge_core.qa.backtest_engine import SimulationState, run_backtest
from src.edge_core.signals.signal_api import ModelSignal, SignalType
from src.edge_core.utils.cancellation import CancellationToken

pytestmark = pytest.mark.unit


def _pair(signal: SignalType) -> tuple[ModelSignal, ModelSignal]:
    return (
        ModelSignal("FOREST-ENSEMBLE", signal, 80, 0.9 if signal is SignalType.BUY else 0.1),
        ModelSignal("TF-LSTM", signal, 80),
    )


def always(signal: SignalType):
    def _fn(window, seed):
        return _pair(signal)

    return _fn


class TestSimulationState:
    """Tests for the money-management state machine."""

    def test_win_and_loss_arithmetic(self):
        state = SimulationState(initial_balance=1000.0)
        state.record_win(10.0, 0.85)
        state.record_win(10.0, 0.85)
        state.record_loss(10.0)

        assert state.balance == pytest.approx(1007.0)
        assert state.wins == 2
        assert state.losses == 1
        assert state.total_trades == 3
        assert state.consecutive_wins == 0
        assert state.max_consecutive_wins == 2
        # Balance above the initial balance yields a negative (ignored) drawdown
        assert state.max_drawdown_pct == 0.0

    def test_drawdown_against_initial_balance(self):
        state = SimulationState(initial_balance=1000.0)
        state.record_loss(10.0)
        state.record_loss(10.0)
        assert state.max_drawdown_pct == pytest.approx(2.0)


class TestRunBacktest:
    """Tests for run_backtest() with a deterministic ensemble."""

    def test_insufficient_history(self, rising_history):
        with pytest.raises(InsufficientDataError) as exc_info:
            run_backtest("EUR/USD", "1min", rising_history[:49], ensemble_fn=always(SignalType.BUY))
        assert exc_info.value.required == 50
        assert exc_info.value.actual == 49
        assert exc_info.value.retryable

    def test_all_wins(self, rising_history):
        result = run_backtest("EUR/USD", "1min", rising_history, ensemble_fn=always(SignalType.BUY))

        # indices 30..98
        assert result.total_trades == 69
        assert result.wins == 69
        assert result.losses == 0
        assert result.win_rate == 100.0
        assert result.profit_simulation == pytest.approx(69 * 8.5)
        assert result.drawdown == 0.0
        assert result.consecutive_wins == 69
        assert result.symbol == "EUR/USD"
        assert result.timeframe == "1min"
        assert result.period == "100 Bars"

    def test_all_losses(self, rising_history):
        result = run_backtest("EUR/USD", "1min", rising_history, ensemble_fn=always(SignalType.SELL))

        assert result.total_trades == 69
        assert result.losses == 69
        assert result.win_rate == 0.0
        assert result.profit_simulation == pytest.approx(-690.0)
        assert result.drawdown == pytest.approx(69.0)
        assert result.consecutive_wins == 0

    def test_put_wins_on_falling_prices(self, falling_history):
        result = run_backtest("EUR/USD", "1min", falling_history, ensemble_fn=always(SignalType.SELL))
        assert result.wins == 69

    def test_zero_move_is_a_loss(self, flat_history):
        for signal in (SignalType.BUY, SignalType.SELL):
            result = run_backtest("EUR/USD", "1min", flat_history, ensemble_fn=always(signal))
            assert result.wins == 0
            assert result.losses == 69

    def test_no_trades(self, rising_history):
        result = run_backtest("EUR/USD", "1min", rising_history, ensemble_fn=always(SignalType.HOLD))
        assert result.total_trades == 0
        assert result.win_rate == 0.0
        assert result.profit_simulation == 0.0
        assert result.drawdown == 0.0

    def test_disagreement_is_not_traded(self, rising_history):
        def split(window, seed):
            forest, _ = _pair(SignalType.BUY)
            _, lstm = _pair(SignalType.SELL)
            return forest, lstm

        result = run_backtest("EUR/USD", "1min", rising_history, ensemble_fn=split)
        assert result.total_trades == 0

    def test_neutral_indices_keep_the_streak(self, rising_history):
        def every_other(window, seed):
            return _pair(SignalType.BUY if len(window) % 2 == 0 else SignalType.HOLD)

        result = run_backtest("EUR/USD", "1min", rising_history, ensemble_fn=every_other)
        # odd indices 31..97
        assert result.total_trades == 34
        assert result.consecutive_wins == 34

    def test_drawdown_is_literal_not_peak_to_trough(self, rising_history):
        def wins_then_losses(window, seed):
            return _pair(SignalType.BUY if len(window) <= 40 else SignalType.SELL)

        result = run_backtest(
            "EUR/USD", "1min", rising_history[:50], ensemble_fn=wins_then_losses
        )
        # i = 30..39 win (+85), i = 40..48 lose (-90): balance 995
        assert result.wins == 10
        assert result.losses == 9
        assert result.consecutive_wins == 10
        assert result.profit_simulation == pytest.approx(-5.0)
        assert result.win_rate == pytest.approx(10 / 19 * 100)
        assert result.drawdown == pytest.approx(0.5)

    def test_windows_are_expanding_prefixes(self, rising_history):
        lengths = []

        def record(window, seed):
            lengths.append(len(window))
            assert window[-1] is rising_history[len(window) - 1]
            return _pair(SignalType.HOLD)

        run_backtest("EUR/USD", "1min", rising_history, ensemble_fn=record)
        assert lengths == list(range(31, 100))

    def test_seeds_are_derived_from_root_seed(self, rising_history):
        def collect(bucket):
            def _fn(window, seed):
                bucket.append(seed)
                return _pair(SignalType.HOLD)

            return _fn

        first, second, other = [], [], []
        run_backtest("EUR/USD", "1min", rising_history, seed=5, ensemble_fn=collect(first))
        run_backtest("EUR/USD", "1min", rising_history, seed=5, ensemble_fn=collect(second))
        run_backtest("EUR/USD", "1min", rising_history, seed=6, ensemble_fn=collect(other))

        assert first == second
        assert first != other
        assert len(set(first)) == len(first)

    def test_custom_config(self, rising_history):
        config = BacktestConfig(initial_balance=500.0, stake=5.0, payout=0.9)
        result = run_backtest(
            "EUR/USD", "1min", rising_history, config=config, ensemble_fn=always(SignalType.BUY)
        )
        assert result.profit_simulation == pytest.approx(69 * 4.5)

    def test_accepts_dataframe(self, rising_history):
        df = observations_to_frame(rising_history)
        result = run_backtest("EUR/USD", "1min", df, ensemble_fn=always(SignalType.BUY))
        assert result.total_trades == 69

    def test_trade_log(self, rising_history):
        result = run_backtest(
            "EUR/USD",
            "1min",
            rising_history,
            ensemble_fn=always(SignalType.BUY),
            include_trades=True,
        )
        assert len(result.trades) == result.total_trades
        first = result.trades[0]
        assert first.index == 30
        assert first.time == rising_history[30].time
        assert first.won
        assert first.balance == pytest.approx(1008.5)

        data = result.to_dict(include_trades=True)
        assert data["trades"][0]["direction"] == "CALL"
        assert "trades" not in result.to_dict()


class TestCancellation:
    """Tests for cooperative cancellation."""

    def test_cancelled_before_start(self, rising_history):
        token = CancellationToken()
        token.cancel()
        with pytest.raises(BacktestCancelledError) as exc_info:
            run_backtest(
                "EUR/USD", "1min", rising_history, cancel_token=token,
                ensemble_fn=always(SignalType.BUY),
            )
        assert exc_info.value.index == 30

    def test_cancelled_mid_run(self, rising_history):
        token = CancellationToken()

        def cancelling(window, seed):
            if len(window) == 36:
                token.cancel()
            return _pair(SignalType.BUY)

        with pytest.raises(BacktestCancelledError) as exc_info:
            run_backtest(
                "EUR/USD", "1min", rising_history, cancel_token=token, ensemble_fn=cancelling
            )
        assert exc_info.value.index == 36


class TestTrainingFailure:
    """A predictor failure aborts the run instead of being scored."""

    def test_failure_propagates_and_stops_the_walk(self, rising_history):
        lengths = []

        def failing_at_40(window, seed):
            lengths.append(len(window))
            if len(window) == 40:
                raise TrainingFailureError("TF-LSTM", "loss diverged")
            return _pair(SignalType.BUY)

        with pytest.raises(TrainingFailureError, match="loss diverged"):
            run_backtest("EUR/USD", "1min", rising_history[:60], ensemble_fn=failing_at_40)

        assert lengths == list(range(31, 41))
        assert lengths[-1] == 40


@pytest.mark.slow
@pytest.mark.advanced
class TestModelDrivenBacktest:
    """Full walk-forward runs with both predictors trained at every index."""

    def test_seeded_run_is_reproducible(self, random_walk_history):
        first = run_backtest("EUR/USD", "1min", random_walk_history, seed=1234)
        second = run_backtest("EUR/USD", "1min", random_walk_history, seed=1234)

        assert first == second
        assert first.wins + first.losses == first.total_trades
        assert 0.0 <= first.win_rate <= 100.0
        assert first.drawdown >= 0.0
        assert first.profit_simulation == pytest.approx(
            first.wins * 8.5 - first.losses * 10.0
        )

    def test_seeded_zigzag_run_is_reproducible(self, points_factory):
        # Up on even steps, down on odd steps, with an upward drift
        prices = [1.0]
        for i in range(1, 100):
            prices.append(prices[-1] + (0.0010 if i % 2 == 0 else -0.0006))
        history = points_factory(prices)

        first = run_backtest("EUR/USD", "1min", history, seed=5)
        second = run_backtest("EUR/USD", "1min", history, seed=5)

        assert first == second
        assert first.wins + first.losses == first.total_trades
        assert 0.0 <= first.win_rate <= 100.0
        assert first.drawdown >= 0.0
