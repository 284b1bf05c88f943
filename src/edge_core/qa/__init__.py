"""Quality assurance: walk-forward backtest simulation."""

from src.edge_core.qa.backtest_engine import (
    BacktestResult,
    SimulationState,
    TradeRecord,
    run_backtest,
)

__all__ = ["BacktestResult", "SimulationState", "TradeRecord", "run_backtest"]
