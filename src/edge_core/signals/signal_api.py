"""Signal API: standardized representation of model and consensus signals.

A ModelSignal is the output of one predictor for one inference call. A
ConsensusSignal is the ternary trade direction derived from the two model
signals. Neither is persisted.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any


class SignalType(str, Enum):
    """Directional signal emitted by a single predictor."""

    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"


class ConsensusDirection(str, Enum):
    """Ternary trade signal derived from the predictor consensus."""

    CALL = "CALL"
    PUT = "PUT"
    NEUTRAL = "NEUTRAL"


@dataclass(frozen=True)
class ModelSignal:
    """One predictor's signal.

    Attributes:
        model_name: Opaque predictor identifier (e.g. "FOREST-ENSEMBLE", "TF-LSTM")
        signal: BUY, SELL or HOLD
        confidence: Integer confidence in [0, 100]
        probability: Optional probability in [0, 1] that the next price is higher
    """

    model_name: str
    signal: SignalType
    confidence: int
    probability: float | None = None

    def __post_init__(self) -> None:
        if not 0 <= self.confidence <= 100:
            raise ValueError(f"confidence must be in [0, 100], got {self.confidence}")
        if self.probability is not None and not (
            math.isfinite(self.probability) and 0.0 <= self.probability <= 1.0
        ):
            raise ValueError(f"probability must be in [0, 1], got {self.probability}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "model_name": self.model_name,
            "signal": self.signal.value,
            "confidence": self.confidence,
            "probability": self.probability,
        }


@dataclass(frozen=True)
class ConsensusSignal:
    """Ternary trade direction."""

    direction: ConsensusDirection

    @property
    def is_trade(self) -> bool:
        return self.direction is not ConsensusDirection.NEUTRAL


def hold_signal(model_name: str) -> ModelSignal:
    """Neutral signal returned when a predictor has too little data to train."""
    return ModelSignal(model_name=model_name, signal=SignalType.HOLD, confidence=0)
