"""Request-scoped random state utilities for reproducible training runs.

Every predictor call and every backtest run owns its randomness: seeds are
derived from a caller-supplied root seed through numpy's SeedSequence, so two
runs executing concurrently never share or mutate process-wide RNG state.

Note:
    - A seed of None draws fresh OS entropy (stochastic production mode).
    - Child seeds derived from the same root seed are stable across runs.
"""

from __future__ import annotations

import logging

import numpy as np

from src.edge_core.config.settings import get_settings

logger = logging.getLogger(__name__)


def spawn_seeds(seed: int | None, n: int) -> list[int]:
    """Derive ``n`` independent integer seeds from a root seed.

    Args:
        seed: Root seed (None = fresh entropy, results differ per call)
        n: Number of child seeds to derive

    Returns:
        List of ``n`` non-negative 32-bit integer seeds

    Example:
        >>> spawn_seeds(42, 2) == spawn_seeds(42, 2)
        True
    """
    if n < 0:
        raise ValueError(f"n must be >= 0, got {n}")
    children = np.random.SeedSequence(seed).spawn(n)
    return [int(child.generate_state(1, dtype=np.uint32)[0]) for child in children]


def seed_or_default(seed: int | None) -> int | None:
    """Return ``seed``, or the configured EDGE_DEFAULT_SEED when it is None.

    Entry points (API routers, CLI) call this once per request so a
    process-wide seed makes every run reproducible; core functions keep
    treating None as fresh entropy.
    """
    if seed is not None:
        return seed
    return get_settings().default_seed


def resolve_seed(seed: int | None) -> int:
    """Return ``seed`` unchanged, or a freshly drawn seed when it is None.

    Libraries that only accept integer seeds (e.g. scikit-learn's
    ``random_state``) get a concrete value without falling back to the
    global NumPy RNG.
    """
    if seed is not None:
        return int(seed)
    return spawn_seeds(None, 1)[0]
