"""Feature extraction modules.

This package handles:
- Window feature vectors and labelled training sets for the pattern classifier
- Physics descriptors (volatility, velocity, noise floor, regime strength)
"""

from src.edge_core.features.physics import (
    NEUTRAL_PHYSICS,
    MomentumDirection,
    PhysicsDescriptor,
    compute_physics,
)
from src.edge_core.features.window_features import (
    FEATURE_COLUMNS,
    FeatureVector,
    build_training_set,
    compute_feature_vector,
    latest_feature_vector,
)

__all__ = [
    "NEUTRAL_PHYSICS",
    "MomentumDirection",
    "PhysicsDescriptor",
    "compute_physics",
    "FEATURE_COLUMNS",
    "FeatureVector",
    "build_training_set",
    "compute_feature_vector",
    "latest_feature_vector",
]
