# tests/test_ml_pattern_classifier.py
"""Tests for the pattern classifier (FOREST-ENSEMBLE)."""

from __future__ import annotations

import math
import sys
from pathlib import Path

import pytest
import torch

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from src.edge_core.config.models import ClassifierConfig
from src.edge_core.data.contracts import ObservationPoint
from src.edge_core.errors import TrainingFailureError
from src.edge_core.ml.pattern_classifier import (
    build_classifier_network,
    classify_probability,
    probability_confidence,
    run_pattern_classifier,
)
from src.edge_core.signals.signal_api import SignalType

pytestmark = pytest.mark.advanced


class TestSignalMapping:
    """Tests for the probability -> signal mapping."""

    @pytest.mark.parametrize(
        "probability,expected",
        [
            (0.61, SignalType.BUY),
            (0.60, SignalType.HOLD),
            (0.50, SignalType.HOLD),
            (0.40, SignalType.HOLD),
            (0.39, SignalType.SELL),
        ],
    )
    def test_thresholds(self, probability, expected):
        assert classify_probability(probability, ClassifierConfig()) is expected

    def test_confidence(self):
        assert probability_confidence(0.5) == 0
        assert probability_confidence(0.75) == 50
        assert probability_confidence(0.25) == 50
        assert probability_confidence(1.0) == 100
        assert probability_confidence(0.0) == 100


class TestNetwork:
    """Tests for the network layout."""

    def test_layer_sizes_and_activations(self):
        generator = torch.Generator().manual_seed(0)
        network = build_classifier_network((12, 6), generator)

        linear = [m for m in network if isinstance(m, torch.nn.Linear)]
        assert [(m.in_features, m.out_features) for m in linear] == [(4, 12), (12, 6), (6, 1)]
        assert isinstance(network[1], torch.nn.Tanh)
        assert isinstance(network[3], torch.nn.ReLU)
        assert all(torch.count_nonzero(m.bias) == 0 for m in linear)

    def test_same_generator_seed_same_weights(self):
        a = build_classifier_network((12, 6), torch.Generator().manual_seed(3))
        b = build_classifier_network((12, 6), torch.Generator().manual_seed(3))
        for pa, pb in zip(a.parameters(), b.parameters()):
            assert torch.equal(pa, pb)


class TestRunPatternClassifier:
    """Tests for run_pattern_classifier()."""

    def test_short_window_holds(self, points_factory):
        signal = run_pattern_classifier(points_factory([1.0 + 0.001 * i for i in range(29)]))
        assert signal.model_name == "FOREST-ENSEMBLE"
        assert signal.signal is SignalType.HOLD
        assert signal.confidence == 0
        assert signal.probability is None

    def test_output_contract(self, random_walk_history):
        signal = run_pattern_classifier(random_walk_history, seed=11)

        assert signal.model_name == "FOREST-ENSEMBLE"
        assert 0 <= signal.confidence <= 100
        assert 0.0 <= signal.probability <= 1.0
        assert signal.signal is classify_probability(signal.probability, ClassifierConfig())

    def test_seeded_runs_are_reproducible(self, random_walk_history):
        first = run_pattern_classifier(random_walk_history, seed=5)
        second = run_pattern_classifier(random_walk_history, seed=5)
        assert first == second

    def test_minimum_window_trains(self, random_walk_history):
        signal = run_pattern_classifier(random_walk_history[:30], seed=1)
        assert signal.probability is not None

    def test_non_finite_feature_raises(self, points_factory):
        points = points_factory([1.0 + 0.001 * i for i in range(40)])
        points[20] = ObservationPoint(time=points[20].time, price=math.inf, volume=1.0)
        with pytest.raises(TrainingFailureError, match="FOREST-ENSEMBLE"):
            run_pattern_classifier(points, seed=1)

    def test_custom_config(self, random_walk_history):
        config = ClassifierConfig(epochs=2, hidden_units=(4, 2), min_observations=40)
        assert run_pattern_classifier(random_walk_history[:39], config=config).confidence == 0
        signal = run_pattern_classifier(random_walk_history, config=config, seed=2)
        assert signal.probability is not None
