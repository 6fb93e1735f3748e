"""
Centralized default values for indicator and swing parameters.

This is the SINGLE SOURCE OF TRUTH for all indicator periods and swing
thresholds. All modules should import from here to ensure consistency.
"""

# Indicator periods used by the swing evaluator
SMA_SHORT_PERIOD = 50
SMA_LONG_PERIOD = 200  # Longest lookback; fewer bars than this can never pass
EMA_PERIOD = 20
RSI_PERIOD = 14
ATR_PERIOD = 14
HIGHEST_PERIOD = 20  # Rolling high for breakout detection (on highs)
VOLUME_SMA_PERIOD = 20

# Base swing thresholds (preset "manual" uses these unchanged)
RSI_MIN = 45.0
RSI_MAX = 60.0
REL_VOL_MIN = 1.8
ATR_MULT = 1.5
MAX_STRETCH_PCT = 10.0
NEAR_PCT_50 = 8.0
COOLDOWN_BARS = 5  # Declared only; de-duplication is a one-bar look-back

# Reserved tightness parameters (declared, not used by any filter yet)
BB_LEN = 20
BB_MULT = 2.0

# Signal construction
SWING_LEN = 10  # Trailing bars for swing low (stop) and swing high (reward)
SWING_STOP_BUFFER_PCT = 0.2  # Stop placed 0.2% below the swing low
TARGET_R_MULTIPLES = (1.0, 1.5, 2.0)

# Bar windows fetched from the store
LOOKBACK_BARS = 500  # Max bars for point evaluation
LOOKBACK_CALENDAR_DAYS = 500  # Calendar-day window for fleet scans and range warm-up

# Daily candidate scoring
DAILY_MIN_BARS = 50
DAILY_LIQUIDITY_WINDOW = 40
DAILY_SCAN_LOOKBACK_DAYS = 120  # ~6 months so EMAs/ATRs are stable
DAILY_MIN_MEDIAN_DOLLAR_VOL = 2_000_000.0
DAILY_MIN_SCORE = 0.60
DAILY_TOP_N = 25
