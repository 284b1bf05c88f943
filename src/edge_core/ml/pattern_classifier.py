"""Pattern classifier (predictor A, identifier "FOREST-ENSEMBLE").

A small feed-forward binary classifier trained from scratch on every call:

    4 features -> Dense(12, tanh) -> Dense(6, relu) -> Dense(1, logistic)

It is fitted on the labelled window features of the supplied history with
binary cross-entropy and Adam for a fixed number of epochs (no early
stopping, no validation split), then scores the latest feature vector.

Signal mapping:
    probability > 0.60 -> BUY
    probability < 0.40 -> SELL
    otherwise          -> HOLD
    confidence = round(|probability - 0.5| * 200)

The identifier is kept for compatibility with downstream consumers; the model
is not a tree ensemble.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

import numpy as np
import torch
from torch import nn

from src.edge_core.config.constants import CLASSIFIER_NAME
from src.edge_core.config.models import ClassifierConfig
from src.edge_core.data.contracts import ObservationPoint
from src.edge_core.errors import TrainingFailureError
from src.edge_core.features.window_features import (
    FEATURE_COLUMNS,
    build_training_set,
    latest_feature_vector,
)
from src.edge_core.signals.signal_api import ModelSignal, SignalType, hold_signal
from src.edge_core.utils.random_state import resolve_seed

logger = logging.getLogger(__name__)


def _glorot_uniform_(layer: nn.Linear, generator: torch.Generator) -> None:
    """Glorot-uniform weights and zero bias, drawn from a private generator."""
    fan_out, fan_in = layer.weight.shape
    bound = math.sqrt(6.0 / (fan_in + fan_out))
    with torch.no_grad():
        layer.weight.uniform_(-bound, bound, generator=generator)
        layer.bias.zero_()


def build_classifier_network(
    hidden_units: tuple[int, int], generator: torch.Generator
) -> nn.Sequential:
    """Build the classifier network; the final layer emits a logit."""
    first, second = hidden_units
    network = nn.Sequential(
        nn.Linear(len(FEATURE_COLUMNS), first),
        nn.Tanh(),
        nn.Linear(first, second),
        nn.ReLU(),
        nn.Linear(second, 1),
    )
    for module in network:
        if isinstance(module, nn.Linear):
            _glorot_uniform_(module, generator)
    return network


def _fit(
    network: nn.Sequential,
    features: np.ndarray,
    labels: np.ndarray,
    config: ClassifierConfig,
    generator: torch.Generator,
) -> float:
    """Train ``network`` in place; return the last mini-batch loss."""
    xs = torch.as_tensor(features, dtype=torch.float32)
    ys = torch.as_tensor(labels, dtype=torch.float32).unsqueeze(1)
    n_samples = xs.shape[0]

    optimizer = torch.optim.Adam(network.parameters(), lr=config.learning_rate)
    loss_fn = nn.BCEWithLogitsLoss()

    last_loss = float("nan")
    network.train()
    for epoch in range(config.epochs):
        order = torch.randperm(n_samples, generator=generator)
        for start in range(0, n_samples, config.batch_size):
            batch = order[start : start + config.batch_size]
            optimizer.zero_grad()
            loss = loss_fn(network(xs[batch]), ys[batch])
            if not torch.isfinite(loss):
                logger.error(f"[{CLASSIFIER_NAME}] loss diverged in epoch {epoch + 1}")
                raise TrainingFailureError(
                    CLASSIFIER_NAME, f"non-finite loss in epoch {epoch + 1}"
                )
            loss.backward()
            optimizer.step()
            last_loss = loss.item()

    return last_loss


def classify_probability(probability: float, config: ClassifierConfig) -> SignalType:
    """Map a next-price-up probability to BUY / SELL / HOLD."""
    if probability > config.buy_threshold:
        return SignalType.BUY
    if probability < config.sell_threshold:
        return SignalType.SELL
    return SignalType.HOLD


def probability_confidence(probability: float) -> int:
    """Distance from 0.5 on a 0-100 scale."""
    return min(100, int(round(abs(probability - 0.5) * 200)))


def run_pattern_classifier(
    window: Sequence[ObservationPoint],
    config: ClassifierConfig | None = None,
    seed: int | None = None,
) -> ModelSignal:
    """Train the classifier on ``window`` and score its latest observation.

    Args:
        window: Observations ordered ascending by time
        config: Optional ClassifierConfig (default: ClassifierConfig())
        seed: Optional seed for weight initialization and shuffling
            (None = stochastic training)

    Returns:
        ModelSignal named "FOREST-ENSEMBLE" with the next-price-up probability;
        a HOLD signal with confidence 0 when fewer than ``min_observations``
        points are given

    Raises:
        TrainingFailureError: If features, loss or prediction are not finite
    """
    config = config or ClassifierConfig()
    if len(window) < config.min_observations:
        return hold_signal(CLASSIFIER_NAME)

    features, labels = build_training_set(window, window_size=config.window_size)
    current = np.asarray(
        [latest_feature_vector(window, window_size=config.window_size)], dtype="float64"
    )
    if not (np.isfinite(features).all() and np.isfinite(current).all()):
        logger.error(f"[{CLASSIFIER_NAME}] non-finite features in a window of {len(window)} points")
        raise TrainingFailureError(CLASSIFIER_NAME, "non-finite feature values")

    generator = torch.Generator()
    generator.manual_seed(resolve_seed(seed))

    network = build_classifier_network(config.hidden_units, generator)
    last_loss = _fit(network, features, labels, config, generator)

    network.eval()
    with torch.no_grad():
        probability = torch.sigmoid(
            network(torch.as_tensor(current, dtype=torch.float32))
        ).item()

    if not math.isfinite(probability):
        logger.error(f"[{CLASSIFIER_NAME}] non-finite prediction (last loss {last_loss})")
        raise TrainingFailureError(CLASSIFIER_NAME, "non-finite prediction")

    signal = classify_probability(probability, config)
    logger.debug(
        f"[{CLASSIFIER_NAME}] samples={len(labels)} loss={last_loss:.4f} "
        f"p={probability:.4f} signal={signal.value}"
    )
    return ModelSignal(
        model_name=CLASSIFIER_NAME,
        signal=signal,
        confidence=probability_confidence(probability),
        probability=probability,
    )
