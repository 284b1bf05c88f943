"""Self-training predictors.

Both predictors are retrained from scratch on every call and return a
ModelSignal:

- pattern_classifier: feed-forward classifier over window features ("FOREST-ENSEMBLE")
- sequence_regressor: feed-forward regressor over normalized price windows ("TF-LSTM")

Usage:
    from src.edge_core.ml import run_pattern_classifier, run_sequence_regressor

    forest = run_pattern_classifier(history, seed=7)
    lstm = run_sequence_regressor(history, seed=7)
"""
from __future__ import annotations

from src.edge_core.ml.pattern_classifier import run_pattern_classifier
from src.edge_core.ml.sequence_regressor import run_sequence_regressor

__all__ = ["run_pattern_classifier", "run_sequence_regressor"]
