"""Engine defaults shared across analysis methods."""

# Lag-regressor training
HIDDEN_UNITS = 20
BATCH_SIZE = 32
LEARNING_RATE = 0.001
ARIMA_EPOCHS = 50
GARCH_EPOCHS = 100

# Numeric guards
NORMALIZE_EPSILON = 1e-8
RSI_LOSS_EPSILON = 0.001
DENOMINATOR_EPSILON = 1e-12

# Pairwise methods
MIN_OVERLAP = 30
SIGNIFICANCE_LEVEL = 0.05

# VAR heuristic
VAR_WINDOW = 100
MAX_VAR_LAG = 5
TREND_STRENGTH_THRESHOLD = 0.1
MIN_TREND_POINTS = 10
COEFFICIENT_DAMPING = 0.5

# Trading calendar
CALENDAR_TAIL = 20

# Rounding applied to indicator output
RSI_DECIMALS = 2
MACD_DECIMALS = 4
