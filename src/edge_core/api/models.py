"""Pydantic models for the FastAPI endpoints.

Request bodies carry observation windows as JSON; responses mirror the core
dataclasses (PhysicsDescriptor, ModelSignal, BacktestResult, market context).
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.edge_core.data.contracts import ObservationPoint
from src.edge_core.features.physics import MomentumDirection
from src.edge_core.market.brokers import BrokerId, PhysicsBias
from src.edge_core.market.sessions import VolatilityBias
from src.edge_core.signals.signal_api import ConsensusDirection, SignalType


# ============================================================================
# Observation Models
# ============================================================================

class ObservationModel(BaseModel):
    """One price observation.

    ``time`` is passed through unchanged (epoch number or ISO string).
    """
    time: Any = Field(..., description="Timestamp (epoch or ISO string)")
    price: float = Field(..., description="Close price")
    volume: float = Field(0.0, ge=0, description="Traded volume")
    high: Optional[float] = Field(None, description="High (defaults to price)")
    low: Optional[float] = Field(None, description="Low (defaults to price)")

    model_config = ConfigDict(extra="forbid")

    def to_point(self) -> ObservationPoint:
        return ObservationPoint(
            time=self.time, price=self.price, volume=self.volume, high=self.high, low=self.low
        )


def to_points(observations: list[ObservationModel]) -> list[ObservationPoint]:
    return [o.to_point() for o in observations]


class WindowRequest(BaseModel):
    """Observation window, ordered ascending by time."""
    window: list[ObservationModel] = Field(..., description="Observations, oldest first")
    seed: Optional[int] = Field(None, description="Seed for reproducible training")

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "example": {
                "window": [
                    {"time": 1700000000, "price": 1.0851, "volume": 120.0},
                    {"time": 1700000060, "price": 1.0853, "volume": 98.0},
                ],
                "seed": 7,
            }
        },
    )


# ============================================================================
# Physics / Signal Models
# ============================================================================

class PhysicsResponse(BaseModel):
    """Physics descriptor of a window."""
    volatility: float = Field(..., ge=0)
    velocity: float
    spread: float = Field(..., ge=0)
    regime_strength: float = Field(..., ge=0, le=100)
    momentum_direction: MomentumDirection
    noise_floor: float = Field(..., ge=0)


class ModelSignalModel(BaseModel):
    """One predictor's signal."""
    model_name: str
    signal: SignalType
    confidence: int = Field(..., ge=0, le=100)
    probability: Optional[float] = Field(None, ge=0, le=1)

    model_config = ConfigDict(protected_namespaces=())


class EnsembleResponse(BaseModel):
    """Both predictor signals, the consensus and context flags."""
    forest: ModelSignalModel
    lstm: ModelSignalModel
    consensus: ConsensusDirection
    physics: PhysicsResponse
    momentum_mismatch: bool = Field(
        ..., description="True when the consensus runs against window momentum"
    )


# ============================================================================
# Backtest Models
# ============================================================================

class BacktestRequest(BaseModel):
    """Backtest request.

    When ``history`` is omitted the server fetches it from the configured
    market data provider.
    """
    symbol: str = Field(..., description="Symbol, e.g. 'EUR/USD'")
    timeframe: str = Field("1min", description="Bar timeframe")
    history: Optional[list[ObservationModel]] = Field(None, description="Observations, oldest first")
    seed: Optional[int] = Field(None, description="Root seed for reproducible runs")
    include_trades: bool = Field(False, description="Return the trade log")

    model_config = ConfigDict(extra="forbid")


class TradeModel(BaseModel):
    index: int
    time: Any
    direction: ConsensusDirection
    entry_price: float
    exit_price: float
    won: bool
    balance: float


class BacktestResponse(BaseModel):
    """Backtest statistics."""
    win_rate: float = Field(..., ge=0, le=100)
    total_trades: int = Field(..., ge=0)
    wins: int = Field(..., ge=0)
    losses: int = Field(..., ge=0)
    profit_simulation: float
    drawdown: float = Field(..., ge=0)
    consecutive_wins: int = Field(..., ge=0)
    symbol: str
    timeframe: str
    period: str
    trades: Optional[list[TradeModel]] = None


# ============================================================================
# Market Context Models
# ============================================================================

class MarketSessionModel(BaseModel):
    name: str
    is_open: bool


class MarketStatusResponse(BaseModel):
    """Global trading-session status."""
    sessions: list[MarketSessionModel]
    volatility_bias: VolatilityBias
    recommendation: str


class BrokerProfileModel(BaseModel):
    broker_id: BrokerId
    name: str
    tick_resolution: float
    observed_spread: float
    max_expiry: int
    is_synthetic: bool
    reliability_score: int
    physics_bias: PhysicsBias


class IndicatorModel(BaseModel):
    rsi: bool
    macd: bool
    bollinger_bands: bool
    ichimoku: bool
    smc: bool
    vsa: bool
    liquidity: bool
    multi_htf: bool
    neural_cross_check: bool
    vwap: bool
    atr: bool
    manipulation_overlay: bool
    reasoning: list[str]


class SymbolProfileResponse(BaseModel):
    """Market context for one symbol, computed from freshly fetched history."""
    symbol: str
    timeframe: str
    is_open: bool
    physics: PhysicsResponse
    broker: BrokerProfileModel
    indicators: IndicatorModel
