"""Market physics descriptors.

A PhysicsDescriptor summarizes a whole observation window:

- volatility:         mean absolute tick-to-tick price change
- noise_floor:        population std-dev of those absolute changes
- velocity:           (price[last] - price[last-10]) / 10
- spread:             volatility * 0.1
- regime_strength:    efficiency ratio * 100, capped at 100, where the
                      efficiency ratio is |net displacement| / total path
- momentum_direction: BULL / BEAR / FLAT from the trailing five prices

compute_physics is pure and never raises: windows shorter than 20 points
get NEUTRAL_PHYSICS.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import asdict, dataclass
from enum import Enum

import numpy as np

from src.edge_core.config.constants import (
    DEFAULT_REGIME_STRENGTH,
    DEFAULT_SPREAD,
    MOMENTUM_BEAR_FACTOR,
    MOMENTUM_BULL_FACTOR,
    MOMENTUM_LOOKBACK,
    PHYSICS_MIN_WINDOW,
    SPREAD_FACTOR,
    VELOCITY_LOOKBACK,
)
from src.edge_core.data.contracts import ObservationPoint, price_array


class MomentumDirection(str, Enum):
    """Short-term momentum direction."""

    BULL = "BULL"
    BEAR = "BEAR"
    FLAT = "FLAT"


@dataclass(frozen=True)
class PhysicsDescriptor:
    """Aggregate statistics of an observation window.

    Attributes:
        volatility: Mean absolute successive price change (>= 0)
        velocity: Signed rate of change over the last 10 ticks
        spread: Estimated spread, volatility * 0.1 (>= 0)
        regime_strength: Trend efficiency in [0, 100]
        momentum_direction: BULL, BEAR or FLAT
        noise_floor: Dispersion of tick-to-tick move sizes (>= 0)
    """

    volatility: float
    velocity: float
    spread: float
    regime_strength: float
    momentum_direction: MomentumDirection
    noise_floor: float

    def to_dict(self) -> dict[str, float | str]:
        data = asdict(self)
        data["momentum_direction"] = self.momentum_direction.value
        return data


NEUTRAL_PHYSICS = PhysicsDescriptor(
    volatility=0.0,
    velocity=0.0,
    spread=DEFAULT_SPREAD,
    regime_strength=DEFAULT_REGIME_STRENGTH,
    momentum_direction=MomentumDirection.FLAT,
    noise_floor=0.0,
)


def momentum_direction(prices: np.ndarray, lookback: int = MOMENTUM_LOOKBACK) -> MomentumDirection:
    """Compare the first and last of the trailing ``lookback`` prices."""
    window = prices[-lookback:]
    first, last = window[0], window[-1]
    if last > first * MOMENTUM_BULL_FACTOR:
        return MomentumDirection.BULL
    if last < first * MOMENTUM_BEAR_FACTOR:
        return MomentumDirection.BEAR
    return MomentumDirection.FLAT


def compute_physics(window: Sequence[ObservationPoint]) -> PhysicsDescriptor:
    """Compute the physics descriptor of ``window``.

    Args:
        window: Observations ordered ascending by time

    Returns:
        PhysicsDescriptor; NEUTRAL_PHYSICS when fewer than 20 points are given

    Example:
        >>> points = [ObservationPoint(time=i, price=100.0 + i) for i in range(20)]
        >>> compute_physics(points).momentum_direction
        <MomentumDirection.BULL: 'BULL'>
    """
    if len(window) < PHYSICS_MIN_WINDOW:
        return NEUTRAL_PHYSICS

    prices = price_array(window)
    abs_moves = np.abs(np.diff(prices))

    volatility = float(abs_moves.mean())
    noise_floor = float(abs_moves.std())

    total_path = float(abs_moves.sum())
    displacement = abs(prices[-1] - prices[0])
    efficiency_ratio = displacement / (total_path or 1.0)

    velocity = (prices[-1] - prices[-1 - VELOCITY_LOOKBACK]) / VELOCITY_LOOKBACK

    return PhysicsDescriptor(
        volatility=volatility,
        velocity=float(velocity),
        spread=volatility * SPREAD_FACTOR,
        regime_strength=float(min(100.0, efficiency_ratio * 100.0)),
        momentum_direction=momentum_direction(prices),
        noise_floor=noise_floor,
    )
