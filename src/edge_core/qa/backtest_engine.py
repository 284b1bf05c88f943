"""Walk-forward backtest simulator.

The simulator replays the signal pipeline across a history, one index at a
time, and scores every consensus trade against the realized next move:

1. Train both predictors on all observations up to and including index i
   (expanding window, so later iterations train on strictly more data)
2. Merge their signals with the strict-agreement consensus rule
3. Skip NEUTRAL indices; otherwise compare the direction with
   price[i+1] - price[i] (a zero move is a loss for either direction)
4. Apply fixed-stake money management: a win credits stake * payout, a loss
   debits the stake and updates the drawdown

Iterations are strictly sequential because each depends on the simulation
state left by the previous one. Separate runs share no state and may run
concurrently.

Drawdown is measured against the initial balance, not a running equity peak:
on every loss, (initial - balance) / initial * 100 is compared with the worst
value seen so far.

Example usage:
    >>> from src.edge_core.qa.backtest_engine import run_backtest
    >>> result = run_backtest("EUR/USD", "1min", history, seed=7)
    >>> result.win_rate, result.total_trades
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import asdict, dataclass, field
from functools import partial
from typing import Any

import pandas as pd

from src.edge_core.config.models import BacktestConfig, ClassifierConfig, RegressorConfig
from src.edge_core.data.contracts import ObservationPoint, observations_from_frame
from src.edge_core.errors import BacktestCancelledError, InsufficientDataError
from src.edge_core.signals.ensemble import aggregate_consensus, run_ensemble
from src.edge_core.signals.signal_api import ConsensusDirection, ModelSignal
from src.edge_core.utils.cancellation import CancellationToken
from src.edge_core.utils.random_state import spawn_seeds
from src.edge_core.utils.timing import StepTiming, timed_step

logger = logging.getLogger(__name__)

EnsembleFn = Callable[[Sequence[ObservationPoint], int], tuple[ModelSignal, ModelSignal]]


@dataclass
class SimulationState:
    """Mutable state of one simulation run.

    Attributes:
        initial_balance: Balance at simulation start
        balance: Current simulated balance
        wins: Number of winning trades
        losses: Number of losing trades
        consecutive_wins: Current winning streak
        max_consecutive_wins: Best winning streak observed
        max_drawdown_pct: Worst drawdown (percent of initial balance) observed
    """

    initial_balance: float
    balance: float = field(init=False)
    wins: int = 0
    losses: int = 0
    consecutive_wins: int = 0
    max_consecutive_wins: int = 0
    max_drawdown_pct: float = 0.0

    def __post_init__(self) -> None:
        self.balance = self.initial_balance

    @property
    def total_trades(self) -> int:
        return self.wins + self.losses

    def record_win(self, stake: float, payout: float) -> None:
        self.wins += 1
        self.consecutive_wins += 1
        self.max_consecutive_wins = max(self.max_consecutive_wins, self.consecutive_wins)
        self.balance += stake * payout

    def record_loss(self, stake: float) -> None:
        self.losses += 1
        self.consecutive_wins = 0
        self.balance -= stake
        drawdown = (self.initial_balance - self.balance) / self.initial_balance * 100.0
        self.max_drawdown_pct = max(self.max_drawdown_pct, drawdown)


@dataclass(frozen=True)
class TradeRecord:
    """One simulated trade (only collected with include_trades=True)."""

    index: int
    time: Any
    direction: ConsensusDirection
    entry_price: float
    exit_price: float
    won: bool
    balance: float


@dataclass(frozen=True)
class BacktestResult:
    """Result of a backtest run.

    Attributes:
        win_rate: wins / total_trades * 100 (0 when no trades occurred)
        total_trades: wins + losses
        wins: Number of winning trades
        losses: Number of losing trades
        profit_simulation: Final balance minus initial balance
        drawdown: Maximum drawdown in percent of the initial balance (>= 0)
        consecutive_wins: Best winning streak
        symbol: Simulated symbol
        timeframe: Bar timeframe of the history
        period: Descriptive label, e.g. "100 Bars"
        trades: Trade log (empty unless include_trades=True)
    """

    win_rate: float
    total_trades: int
    wins: int
    losses: int
    profit_simulation: float
    drawdown: float
    consecutive_wins: int
    symbol: str
    timeframe: str
    period: str
    trades: tuple[TradeRecord, ...] = ()

    def to_dict(self, include_trades: bool = False) -> dict[str, Any]:
        data = asdict(self)
        if include_trades:
            data["trades"] = [
                {**asdict(t), "direction": t.direction.value} for t in self.trades
            ]
        else:
            data.pop("trades")
        return data


def _finalize(
    state: SimulationState,
    symbol: str,
    timeframe: str,
    n_bars: int,
    trades: list[TradeRecord],
) -> BacktestResult:
    total = state.total_trades
    return BacktestResult(
        win_rate=(state.wins / total * 100.0) if total > 0 else 0.0,
        total_trades=total,
        wins=state.wins,
        losses=state.losses,
        profit_simulation=state.balance - state.initial_balance,
        drawdown=max(0.0, state.max_drawdown_pct),
        consecutive_wins=state.max_consecutive_wins,
        symbol=symbol,
        timeframe=timeframe,
        period=f"{n_bars} Bars",
        trades=tuple(trades),
    )


def run_backtest(
    symbol: str,
    timeframe: str,
    history: Sequence[ObservationPoint] | pd.DataFrame,
    config: BacktestConfig | None = None,
    seed: int | None = None,
    cancel_token: CancellationToken | None = None,
    ensemble_fn: EnsembleFn | None = None,
    classifier_config: ClassifierConfig | None = None,
    regressor_config: RegressorConfig | None = None,
    include_trades: bool = False,
) -> BacktestResult:
    """Run the walk-forward backtest over ``history``.

    Args:
        symbol: Symbol label carried into the result
        timeframe: Timeframe label carried into the result
        history: Observations ordered ascending by time (or a price DataFrame,
            see data.contracts.observations_from_frame)
        config: Optional BacktestConfig (default: BacktestConfig())
        seed: Optional root seed. Each index gets its own derived seed, so a
            fixed seed makes the whole run reproducible. None keeps training
            stochastic.
        cancel_token: Optional token checked once per index; when set the run
            stops with BacktestCancelledError
        ensemble_fn: Optional replacement for run_ensemble, called as
            ensemble_fn(window, seed) and returning (forest, lstm) signals
        classifier_config: Optional config for the pattern classifier
        regressor_config: Optional config for the sequence regressor
        include_trades: If True, the result carries the trade log

    Returns:
        BacktestResult

    Raises:
        InsufficientDataError: If history is shorter than config.min_history
        BacktestCancelledError: If cancel_token is set during the run
        TrainingFailureError: If a predictor fails; the run is aborted
    """
    config = config or BacktestConfig()
    if isinstance(history, pd.DataFrame):
        history = observations_from_frame(history)

    n_bars = len(history)
    if n_bars < config.min_history:
        raise InsufficientDataError("backtest", config.min_history, n_bars)

    if ensemble_fn is None:
        ensemble_fn = partial(
            _default_ensemble,
            classifier_config=classifier_config,
            regressor_config=regressor_config,
        )

    indices = range(config.start_index, n_bars - 1)
    iteration_seeds = spawn_seeds(seed, len(indices))

    state = SimulationState(initial_balance=config.initial_balance)
    trades: list[TradeRecord] = []
    timings: dict[str, StepTiming] = {}

    logger.info(
        f"Backtest started: symbol={symbol}, timeframe={timeframe}, bars={n_bars}, "
        f"indices={len(indices)}, seed={seed}"
    )

    with timed_step("walk_forward_loop", timings, logger, meta={"symbol": symbol}):
        for i, iteration_seed in zip(indices, iteration_seeds):
            if cancel_token is not None and cancel_token.cancelled:
                logger.info(f"Backtest for {symbol} cancelled at index {i}")
                raise BacktestCancelledError(symbol, i)

            window = history[: i + 1]
            forest, lstm = ensemble_fn(window, iteration_seed)
            direction = aggregate_consensus(forest, lstm).direction
            if direction is ConsensusDirection.NEUTRAL:
                continue

            entry_price = history[i].price
            exit_price = history[i + 1].price
            move = exit_price - entry_price
            won = (direction is ConsensusDirection.CALL and move > 0) or (
                direction is ConsensusDirection.PUT and move < 0
            )

            if won:
                state.record_win(config.stake, config.payout)
            else:
                state.record_loss(config.stake)

            logger.debug(
                f"[{symbol}] i={i} {direction.value} move={move:+.6f} "
                f"{'WIN' if won else 'LOSS'} balance={state.balance:.2f}"
            )
            if include_trades:
                trades.append(
                    TradeRecord(
                        index=i,
                        time=history[i].time,
                        direction=direction,
                        entry_price=entry_price,
                        exit_price=exit_price,
                        won=won,
                        balance=state.balance,
                    )
                )

    result = _finalize(state, symbol, timeframe, n_bars, trades)
    logger.info(
        f"Backtest finished: symbol={symbol}, trades={result.total_trades}, "
        f"win_rate={result.win_rate:.2f}%, profit={result.profit_simulation:+.2f}, "
        f"drawdown={result.drawdown:.2f}%, "
        f"duration={timings['walk_forward_loop'].duration_ms:.0f}ms"
    )
    return result


def _default_ensemble(
    window: Sequence[ObservationPoint],
    seed: int,
    classifier_config: ClassifierConfig | None = None,
    regressor_config: RegressorConfig | None = None,
) -> tuple[ModelSignal, ModelSignal]:
    return run_ensemble(
        window,
        seed=seed,
        classifier_config=classifier_config,
        regressor_config=regressor_config,
    )
