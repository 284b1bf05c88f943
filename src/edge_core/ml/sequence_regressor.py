"""Sequence regressor (predictor B, identifier "TF-LSTM").

Predicts the next min-max normalized price from the preceding eight:

    8 normalized prices -> Dense(16, tanh) -> Dense(1, linear)

The price series is normalized to [0, 1] over the whole supplied window,
split into overlapping sub-windows with the following value as target, and
fitted with squared error and Adam for a fixed number of epochs. The model is
retrained on every call; no state survives between calls.

Signal mapping (diff = predicted - last normalized value):
    diff >  0.0002 -> BUY
    diff < -0.0002 -> SELL
    otherwise      -> HOLD
    confidence = min(100, round(|diff| * 10000))

The identifier is kept for compatibility with downstream consumers; the model
has no recurrent memory beyond its fixed input window.
"""

from __future__ import annotations

import logging
import warnings
from collections.abc import Sequence

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view
from sklearn.exceptions import ConvergenceWarning
from sklearn.neural_network import MLPRegressor

from src.edge_core.config.constants import REGRESSOR_NAME
from src.edge_core.config.models import RegressorConfig
from src.edge_core.data.contracts import ObservationPoint, price_array
from src.edge_core.errors import TrainingFailureError
from src.edge_core.signals.signal_api import ModelSignal, SignalType, hold_signal
from src.edge_core.utils.random_state import resolve_seed

logger = logging.getLogger(__name__)


def normalize_prices(prices: np.ndarray) -> np.ndarray:
    """Min-max normalize to [0, 1]; a flat series maps to zeros."""
    low = prices.min()
    span = prices.max() - low
    return (prices - low) / (span or 1.0)


def build_sequences(
    normalized: np.ndarray, sequence_length: int
) -> tuple[np.ndarray, np.ndarray]:
    """Overlapping sub-windows of ``sequence_length`` and their next value.

    Returns:
        Tuple of (X, y) with X of shape (n - sequence_length, sequence_length)
    """
    xs = sliding_window_view(normalized[:-1], sequence_length)
    ys = normalized[sequence_length:]
    return xs, ys


def classify_diff(diff: float, config: RegressorConfig) -> SignalType:
    """Map a predicted normalized move to BUY / SELL / HOLD."""
    if diff > config.diff_threshold:
        return SignalType.BUY
    if diff < -config.diff_threshold:
        return SignalType.SELL
    return SignalType.HOLD


def diff_confidence(diff: float) -> int:
    return min(100, int(round(abs(diff) * 10000)))


def run_sequence_regressor(
    window: Sequence[ObservationPoint],
    config: RegressorConfig | None = None,
    seed: int | None = None,
) -> ModelSignal:
    """Train the regressor on ``window`` and predict the next normalized price.

    Args:
        window: Observations ordered ascending by time
        config: Optional RegressorConfig (default: RegressorConfig())
        seed: Optional seed for weight initialization and shuffling
            (None = stochastic training)

    Returns:
        ModelSignal named "TF-LSTM"; a HOLD signal with confidence 0 when
        fewer than ``min_observations`` prices are given

    Raises:
        TrainingFailureError: If inputs, training loss or prediction are not finite
    """
    config = config or RegressorConfig()
    if len(window) < config.min_observations:
        return hold_signal(REGRESSOR_NAME)

    prices = price_array(window)
    if not np.isfinite(prices).all():
        logger.error(f"[{REGRESSOR_NAME}] non-finite prices in a window of {len(window)} points")
        raise TrainingFailureError(REGRESSOR_NAME, "non-finite price values")

    normalized = normalize_prices(prices)
    xs, ys = build_sequences(normalized, config.sequence_length)

    model = MLPRegressor(
        hidden_layer_sizes=(config.hidden_units,),
        activation="tanh",
        solver="adam",
        alpha=0.0,
        learning_rate_init=config.learning_rate,
        batch_size=min(config.batch_size, len(ys)),
        max_iter=config.epochs,
        shuffle=True,
        # Never stop before the configured number of epochs
        n_iter_no_change=config.epochs,
        early_stopping=False,
        random_state=resolve_seed(seed),
    )

    try:
        with warnings.catch_warnings():
            # A fixed epoch budget always ends "unconverged"
            warnings.simplefilter("ignore", category=ConvergenceWarning)
            model.fit(xs, ys)
    except ValueError as e:
        logger.error(f"[{REGRESSOR_NAME}] training failed: {e}")
        raise TrainingFailureError(REGRESSOR_NAME, str(e)) from e

    if not np.isfinite(model.loss_):
        logger.error(f"[{REGRESSOR_NAME}] loss diverged ({model.loss_})")
        raise TrainingFailureError(REGRESSOR_NAME, "non-finite training loss")

    predicted = float(model.predict(normalized[-config.sequence_length :][np.newaxis, :])[0])
    if not np.isfinite(predicted):
        logger.error(f"[{REGRESSOR_NAME}] non-finite prediction")
        raise TrainingFailureError(REGRESSOR_NAME, "non-finite prediction")

    diff = predicted - float(normalized[-1])
    signal = classify_diff(diff, config)
    logger.debug(
        f"[{REGRESSOR_NAME}] samples={len(ys)} loss={model.loss_:.6f} "
        f"diff={diff:.6f} signal={signal.value}"
    )
    return ModelSignal(
        model_name=REGRESSOR_NAME,
        signal=signal,
        confidence=diff_confidence(diff),
    )
