"""Signal generation modules.

This package handles:
- Standardized model and consensus signal types (signal_api)
- Running both predictors and the strict-agreement consensus rule (ensemble)

Note: only the signal types are re-exported here. The ensemble module imports
the predictors, which themselves depend on signal_api; import it directly via
src.edge_core.signals.ensemble.
"""

from src.edge_core.signals.signal_api import (
    ConsensusDirection,
    ConsensusSignal,
    ModelSignal,
    SignalType,
    hold_signal,
)

__all__ = [
    "ConsensusDirection",
    "ConsensusSignal",
    "ModelSignal",
    "SignalType",
    "hold_signal",
]
