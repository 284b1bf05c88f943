"""Window features for the pattern classifier.

Each feature vector describes the latest observation relative to a trailing
window of ``window_size`` observations:

- window_return:  price[i] / price[window_start] - 1
- volume_zscore:  (volume[i] - mean(window volume)) / mean(window volume)
- range_position: (price[i] - min(window)) / (max(window) - min(window))
- momentum:       price[i] / price[i-1] - 1

Zero divisors (flat prices, zero volume) are floored to 1.

Training pairs use the ``window_size`` points strictly before ``i`` and label
whether ``price[i+1] > price[i]``; the inference vector uses the trailing
window ending at (and including) the latest point.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import NamedTuple

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from src.edge_core.config.constants import FEATURE_WINDOW_SIZE
from src.edge_core.data.contracts import ObservationPoint, price_array, volume_array

FEATURE_COLUMNS = ["window_return", "volume_zscore", "range_position", "momentum"]


class FeatureVector(NamedTuple):
    """Fixed-length feature tuple fed to the pattern classifier."""

    window_return: float
    volume_zscore: float
    range_position: float
    momentum: float


def _floor_divisor(values: np.ndarray) -> np.ndarray:
    # 0 (and NaN) divisors become 1
    return np.where((values == 0) | np.isnan(values), 1.0, values)


def _feature_matrix(
    current_prices: np.ndarray,
    previous_prices: np.ndarray,
    current_volumes: np.ndarray,
    price_windows: np.ndarray,
    volume_windows: np.ndarray,
) -> np.ndarray:
    """Compute feature rows from aligned current values and 2-D windows."""
    window_return = current_prices / price_windows[:, 0] - 1.0

    avg_volume = volume_windows.mean(axis=1)
    volume_zscore = (current_volumes - avg_volume) / _floor_divisor(avg_volume)

    low = price_windows.min(axis=1)
    high = price_windows.max(axis=1)
    range_position = (current_prices - low) / _floor_divisor(high - low)

    momentum = current_prices / previous_prices - 1.0

    return np.column_stack([window_return, volume_zscore, range_position, momentum])


def build_training_set(
    points: Sequence[ObservationPoint],
    window_size: int = FEATURE_WINDOW_SIZE,
) -> tuple[np.ndarray, np.ndarray]:
    """Build (feature, label) pairs for every index ``i`` in [window_size, n-2].

    Args:
        points: Observations ordered ascending by time
        window_size: Number of preceding points forming each window (default: 10)

    Returns:
        Tuple of (X, y):
        - X: float64 array of shape (n - window_size - 1, 4), columns FEATURE_COLUMNS
        - y: float64 array of 0/1 labels, 1 when the next price is higher

    Both arrays are empty when fewer than ``window_size + 2`` points are given.
    """
    n = len(points)
    n_samples = n - window_size - 1
    if n_samples <= 0:
        return np.empty((0, len(FEATURE_COLUMNS))), np.empty(0)

    prices = price_array(points)
    volumes = volume_array(points)

    # Window for index i covers [i - window_size, i); i runs window_size..n-2
    price_windows = sliding_window_view(prices[: n - 2], window_size)
    volume_windows = sliding_window_view(volumes[: n - 2], window_size)
    current = slice(window_size, n - 1)
    previous = slice(window_size - 1, n - 2)

    with np.errstate(divide="ignore", invalid="ignore"):
        features = _feature_matrix(
            prices[current],
            prices[previous],
            volumes[current],
            price_windows,
            volume_windows,
        )

    labels = (prices[window_size + 1 :] > prices[current]).astype("float64")
    return features, labels


def latest_feature_vector(
    points: Sequence[ObservationPoint],
    window_size: int = FEATURE_WINDOW_SIZE,
) -> FeatureVector:
    """Feature vector for the most recent observation.

    The window is the trailing ``window_size`` points including the latest.

    Raises:
        ValueError: If fewer than ``window_size`` points (or fewer than 2) are given
    """
    n = len(points)
    if n < max(window_size, 2):
        raise ValueError(
            f"latest_feature_vector needs at least {max(window_size, 2)} points, got {n}"
        )

    prices = price_array(points)
    volumes = volume_array(points)

    with np.errstate(divide="ignore", invalid="ignore"):
        row = _feature_matrix(
            prices[-1:],
            prices[-2:-1],
            volumes[-1:],
            prices[-window_size:][np.newaxis, :],
            volumes[-window_size:][np.newaxis, :],
        )[0]

    return FeatureVector(*(float(v) for v in row))


def compute_feature_vector(
    points: Sequence[ObservationPoint],
    index: int,
    window_size: int = FEATURE_WINDOW_SIZE,
) -> FeatureVector:
    """Feature vector of ``points[index]`` against the ``window_size`` points before it.

    This is the per-row form of build_training_set.

    Raises:
        ValueError: If ``index`` is outside [window_size, len(points) - 1]
    """
    if not window_size <= index < len(points):
        raise ValueError(
            f"index must be in [{window_size}, {len(points) - 1}], got {index}"
        )

    prices = price_array(points)
    volumes = volume_array(points)
    start = index - window_size

    with np.errstate(divide="ignore", invalid="ignore"):
        row = _feature_matrix(
            prices[index : index + 1],
            prices[index - 1 : index],
            volumes[index : index + 1],
            prices[start:index][np.newaxis, :],
            volumes[start:index][np.newaxis, :],
        )[0]

    return FeatureVector(*(float(v) for v in row))
