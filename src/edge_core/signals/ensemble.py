"""Ensemble layer: run both predictors and merge their signals.

The two predictors are independent, so run_ensemble trains them concurrently
and joins both results before the consensus rule runs. The consensus rule is
strict agreement:

    (BUY, BUY)   -> CALL
    (SELL, SELL) -> PUT
    anything else -> NEUTRAL

Example:
    >>> from src.edge_core.signals.ensemble import aggregate_consensus, run_ensemble
    >>> forest, lstm = run_ensemble(history, seed=11)
    >>> aggregate_consensus(forest, lstm).direction
    <ConsensusDirection.NEUTRAL: 'NEUTRAL'>
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor

from src.edge_core.config.constants import CLASSIFIER_NAME, REGRESSOR_NAME
from src.edge_core.config.models import ClassifierConfig, RegressorConfig
from src.edge_core.data.contracts import ObservationPoint
from src.edge_core.features.physics import MomentumDirection, PhysicsDescriptor
from src.edge_core.ml.pattern_classifier import run_pattern_classifier
from src.edge_core.ml.sequence_regressor import run_sequence_regressor
from src.edge_core.signals.signal_api import (
    ConsensusDirection,
    ConsensusSignal,
    ModelSignal,
    SignalType,
)
from src.edge_core.utils.random_state import spawn_seeds

logger = logging.getLogger(__name__)


def run_ensemble(
    window: Sequence[ObservationPoint],
    seed: int | None = None,
    classifier_config: ClassifierConfig | None = None,
    regressor_config: RegressorConfig | None = None,
) -> tuple[ModelSignal, ModelSignal]:
    """Run both predictors on ``window``.

    Args:
        window: Observations ordered ascending by time
        seed: Optional root seed; each predictor receives its own child seed
            (None = stochastic, results differ between calls)
        classifier_config: Optional config for the pattern classifier
        regressor_config: Optional config for the sequence regressor

    Returns:
        Tuple of (FOREST-ENSEMBLE signal, TF-LSTM signal)

    Raises:
        TrainingFailureError: If either predictor fails; the other result is
            discarded
    """
    classifier_seed, regressor_seed = spawn_seeds(seed, 2)

    with ThreadPoolExecutor(max_workers=2, thread_name_prefix="ensemble") as executor:
        forest_future = executor.submit(
            run_pattern_classifier, window, classifier_config, classifier_seed
        )
        lstm_future = executor.submit(
            run_sequence_regressor, window, regressor_config, regressor_seed
        )
        forest = forest_future.result()
        lstm = lstm_future.result()

    return forest, lstm


def aggregate_consensus(forest: ModelSignal, lstm: ModelSignal) -> ConsensusSignal:
    """Strict-agreement consensus of the classifier and regressor signals."""
    if forest.signal is SignalType.BUY and lstm.signal is SignalType.BUY:
        return ConsensusSignal(ConsensusDirection.CALL)
    if forest.signal is SignalType.SELL and lstm.signal is SignalType.SELL:
        return ConsensusSignal(ConsensusDirection.PUT)
    return ConsensusSignal(ConsensusDirection.NEUTRAL)


def consensus_from_signals(signals: Iterable[ModelSignal]) -> ConsensusSignal:
    """Look up the two named predictor signals and apply the consensus rule.

    Raises:
        ValueError: If either the FOREST-ENSEMBLE or the TF-LSTM signal is missing
    """
    by_name = {s.model_name: s for s in signals}
    missing = [n for n in (CLASSIFIER_NAME, REGRESSOR_NAME) if n not in by_name]
    if missing:
        raise ValueError(f"Consensus requires signals from {missing}")
    return aggregate_consensus(by_name[CLASSIFIER_NAME], by_name[REGRESSOR_NAME])


def has_momentum_mismatch(
    direction: ConsensusDirection, physics: PhysicsDescriptor
) -> bool:
    """True when a trade direction runs against the window's momentum."""
    if direction is ConsensusDirection.CALL:
        return physics.momentum_direction is MomentumDirection.BEAR
    if direction is ConsensusDirection.PUT:
        return physics.momentum_direction is MomentumDirection.BULL
    return False
