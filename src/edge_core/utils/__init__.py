"""Utility modules for the Neural Edge Engine."""

from src.edge_core.utils.cancellation import CancellationToken
from src.edge_core.utils.random_state import resolve_seed, seed_or_default, spawn_seeds
from src.edge_core.utils.timing import StepTiming, timed_step

__all__ = ["CancellationToken", "resolve_seed", "seed_or_default", "spawn_seeds", "StepTiming", "timed_step"]
