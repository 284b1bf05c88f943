"""Backtest endpoint."""
from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from src.edge_core.api.dependencies import get_provider
from src.edge_core.api.errors import to_http_exception
from src.edge_core.api.models import BacktestRequest, BacktestResponse, to_points
from src.edge_core.data.contracts import validate_observations
from src.edge_core.errors import EdgeCoreError
from src.edge_core.logging_utils import get_logger
from src.edge_core.qa.backtest_engine import run_backtest
from src.edge_core.utils.random_state import seed_or_default

router = APIRouter()
logger = get_logger(__name__)


@router.post("/backtest", response_model=BacktestResponse)
def post_backtest(body: BacktestRequest, request: Request) -> BacktestResponse:
    """Run a walk-forward backtest.

    Uses ``body.history`` when given, otherwise fetches the symbol's history
    from the configured market data provider.

    Raises:
        HTTPException: 422 for invalid or insufficient history, 500 if
            training fails, 503 if the provider is unavailable
    """
    try:
        if body.history is not None:
            history = to_points(body.history)
        else:
            history = get_provider(request).fetch(body.symbol, body.timeframe)
        validate_observations(history)
        result = run_backtest(
            body.symbol,
            body.timeframe,
            history,
            seed=seed_or_default(body.seed),
            include_trades=body.include_trades,
        )
    except EdgeCoreError as e:
        logger.warning(f"Backtest for {body.symbol} failed: {e}")
        raise to_http_exception(e) from e
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    return BacktestResponse(**result.to_dict(include_trades=body.include_trades))
