"""Central constants for the signal pipeline.

This module contains all magic numbers and default values used throughout the system.
This ensures consistency and makes it easy to adjust parameters in one place.
"""

# Feature extraction
FEATURE_WINDOW_SIZE = 10  # Trailing window for feature vectors
PHYSICS_MIN_WINDOW = 20  # Minimum points for a physics descriptor
MOMENTUM_LOOKBACK = 5  # Trailing prices compared for momentum direction
MOMENTUM_BULL_FACTOR = 1.0001
MOMENTUM_BEAR_FACTOR = 0.9999
VELOCITY_LOOKBACK = 10
SPREAD_FACTOR = 0.1  # spread = volatility * SPREAD_FACTOR

# Neutral physics returned below PHYSICS_MIN_WINDOW
DEFAULT_SPREAD = 0.0001
DEFAULT_REGIME_STRENGTH = 50.0

# Predictor A (pattern classifier)
CLASSIFIER_NAME = "FOREST-ENSEMBLE"
CLASSIFIER_MIN_OBSERVATIONS = 30
CLASSIFIER_HIDDEN_UNITS = (12, 6)
CLASSIFIER_LEARNING_RATE = 0.015
CLASSIFIER_BUY_THRESHOLD = 0.60
CLASSIFIER_SELL_THRESHOLD = 0.40

# Predictor B (sequence regressor)
REGRESSOR_NAME = "TF-LSTM"
REGRESSOR_MIN_OBSERVATIONS = 20
REGRESSOR_SEQUENCE_LENGTH = 8
REGRESSOR_HIDDEN_UNITS = 16
REGRESSOR_LEARNING_RATE = 0.02
REGRESSOR_DIFF_THRESHOLD = 0.0002

# Shared training parameters
TRAINING_EPOCHS = 15
TRAINING_BATCH_SIZE = 32

# Backtest money management
DEFAULT_INITIAL_BALANCE = 1000.0
DEFAULT_STAKE = 10.0
DEFAULT_PAYOUT = 0.85
BACKTEST_START_INDEX = 30  # First index with enough context for both predictors
BACKTEST_MIN_WINDOW = 40
BACKTEST_LOOKBACK_BUFFER = 10
BACKTEST_MIN_HISTORY = BACKTEST_MIN_WINDOW + BACKTEST_LOOKBACK_BUFFER  # 50

# Market data provider
TWELVE_DATA_BASE_URL = "https://api.twelvedata.com"
DEFAULT_OUTPUT_SIZE = 100
DEFAULT_REQUEST_TIMEOUT = 30.0
OTC_SUFFIX = " (OTC)"
