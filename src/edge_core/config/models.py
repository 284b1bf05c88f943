"""Pydantic models for strict configuration validation.

All models use extra="forbid" so unknown keys are rejected at validation
time. Defaults reproduce the fixed constants of the pipeline; callers only
override them for experiments and tests.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from src.edge_core.config import constants as c


# ============================================================================
# Predictor Configuration
# ============================================================================


class ClassifierConfig(BaseModel):
    """Configuration for the pattern classifier (predictor A).

    Attributes:
        window_size: Trailing window used to build feature vectors (default: 10)
        hidden_units: Sizes of the tanh and relu hidden layers (default: (12, 6))
        epochs: Passes over the training set (default: 15)
        learning_rate: Adam learning rate (default: 0.015)
        batch_size: Mini-batch size (default: 32)
        min_observations: Minimum window length before training (default: 30)
        buy_threshold: Probability above which the signal is BUY (default: 0.60)
        sell_threshold: Probability below which the signal is SELL (default: 0.40)
    """

    window_size: int = Field(default=c.FEATURE_WINDOW_SIZE, ge=2)
    hidden_units: tuple[int, int] = Field(default=c.CLASSIFIER_HIDDEN_UNITS)
    epochs: int = Field(default=c.TRAINING_EPOCHS, ge=1)
    learning_rate: float = Field(default=c.CLASSIFIER_LEARNING_RATE, gt=0)
    batch_size: int = Field(default=c.TRAINING_BATCH_SIZE, ge=1)
    min_observations: int = Field(default=c.CLASSIFIER_MIN_OBSERVATIONS, ge=1)
    buy_threshold: float = Field(default=c.CLASSIFIER_BUY_THRESHOLD, ge=0.5, le=1.0)
    sell_threshold: float = Field(default=c.CLASSIFIER_SELL_THRESHOLD, ge=0.0, le=0.5)

    @model_validator(mode="after")
    def validate_window(self) -> "ClassifierConfig":
        """Training needs at least one labelled sample after the first window."""
        if self.min_observations < self.window_size + 2:
            raise ValueError(
                f"min_observations ({self.min_observations}) must be >= "
                f"window_size + 2 ({self.window_size + 2})"
            )
        if self.sell_threshold >= self.buy_threshold:
            raise ValueError("sell_threshold must be < buy_threshold")
        return self

    model_config = ConfigDict(extra="forbid", frozen=True)


class RegressorConfig(BaseModel):
    """Configuration for the sequence regressor (predictor B).

    Attributes:
        sequence_length: Length of the normalized input sub-windows (default: 8)
        hidden_units: Size of the tanh hidden layer (default: 16)
        epochs: Passes over the training set (default: 15)
        learning_rate: Adam learning rate (default: 0.02)
        batch_size: Mini-batch size (default: 32)
        min_observations: Minimum number of prices before training (default: 20)
        diff_threshold: Predicted move beyond which the signal is directional
    """

    sequence_length: int = Field(default=c.REGRESSOR_SEQUENCE_LENGTH, ge=1)
    hidden_units: int = Field(default=c.REGRESSOR_HIDDEN_UNITS, ge=1)
    epochs: int = Field(default=c.TRAINING_EPOCHS, ge=1)
    learning_rate: float = Field(default=c.REGRESSOR_LEARNING_RATE, gt=0)
    batch_size: int = Field(default=c.TRAINING_BATCH_SIZE, ge=1)
    min_observations: int = Field(default=c.REGRESSOR_MIN_OBSERVATIONS, ge=2)
    diff_threshold: float = Field(default=c.REGRESSOR_DIFF_THRESHOLD, ge=0)

    @model_validator(mode="after")
    def validate_sequence(self) -> "RegressorConfig":
        """At least one sub-window/target pair must exist."""
        if self.min_observations <= self.sequence_length:
            raise ValueError(
                f"min_observations ({self.min_observations}) must be > "
                f"sequence_length ({self.sequence_length})"
            )
        return self

    model_config = ConfigDict(extra="forbid", frozen=True)


# ============================================================================
# Backtest Configuration
# ============================================================================


class BacktestConfig(BaseModel):
    """Money management and loop bounds for the backtest simulator.

    Attributes:
        initial_balance: Starting simulated balance (default: 1000)
        stake: Amount risked per trade (default: 10)
        payout: Fraction of the stake credited on a win (default: 0.85)
        start_index: First index evaluated by the walk-forward loop (default: 30)
        min_history: Minimum history length accepted (default: 50)
    """

    initial_balance: float = Field(default=c.DEFAULT_INITIAL_BALANCE, gt=0)
    stake: float = Field(default=c.DEFAULT_STAKE, gt=0)
    payout: float = Field(default=c.DEFAULT_PAYOUT, gt=0)
    start_index: int = Field(default=c.BACKTEST_START_INDEX, ge=1)
    min_history: int = Field(default=c.BACKTEST_MIN_HISTORY, ge=2)

    @model_validator(mode="after")
    def validate_bounds(self) -> "BacktestConfig":
        """The loop must have at least one index to evaluate."""
        if self.start_index >= self.min_history - 1:
            raise ValueError(
                f"start_index ({self.start_index}) must be < min_history - 1 "
                f"({self.min_history - 1})"
            )
        return self

    model_config = ConfigDict(extra="forbid", frozen=True)
