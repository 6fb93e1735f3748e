"""
Technical indicators for swing signal evaluation.

Provides SMA, EMA, RSI, ATR and rolling highs over bar sequences, plus the
percentile/median/clamp helpers used by the daily scorer.

Every series function returns a pd.Series aligned index-for-index with its
input. Positions without enough lookback hold NaN, never 0. Inputs are never
mutated.
"""
import math
from typing import Iterable, Optional, Sequence, Union

import numpy as np
import pandas as pd

from ..shared.defaults import (
    SMA_SHORT_PERIOD, SMA_LONG_PERIOD, EMA_PERIOD, RSI_PERIOD,
    ATR_PERIOD, HIGHEST_PERIOD, VOLUME_SMA_PERIOD,
)

Values = Union[pd.Series, Sequence[float], np.ndarray]


def _as_series(values: Values) -> pd.Series:
    """Float copy of the input as a Series (keeps the index of a Series input)."""
    if isinstance(values, pd.Series):
        return values.astype(float)
    return pd.Series(np.asarray(list(values), dtype=float))


def sma(values: Values, period: int) -> pd.Series:
    """Simple moving average of the trailing window; NaN for index < period - 1."""
    return _as_series(values).rolling(period, min_periods=period).mean()


def ema(values: Values, period: int) -> pd.Series:
    """
    Exponential moving average seeded with the first value.

    out[0] = values[0]; out[i] = a * values[i] + (1 - a) * out[i-1], a = 2 / (period + 1).
    Always defined (no warm-up gap): callers must discount early values.
    """
    return _as_series(values).ewm(span=period, adjust=False).mean()


def rsi(values: Values, period: int = RSI_PERIOD) -> pd.Series:
    """
    Calculate Relative Strength Index (RSI).

    RSI = 100 - (100 / (1 + RS))
    RS = Average Gain / Average Loss

    Average gain/loss is the plain mean of per-bar up/down moves over the
    trailing `period` moves (not Wilder smoothing). RSI is 100 when the
    average loss is 0. NaN for index < period.
    """
    prices = _as_series(values)
    delta = prices.diff()
    gain = delta.clip(lower=0.0)
    loss = (-delta).clip(lower=0.0)

    avg_gain = gain.rolling(period, min_periods=period).mean()
    avg_loss = loss.rolling(period, min_periods=period).mean()

    rs = avg_gain / avg_loss.replace(0.0, np.nan)
    out = 100 - (100 / (1 + rs))
    return out.mask(avg_loss == 0.0, 100.0)


def true_range(highs: Values, lows: Values, closes: Values) -> pd.Series:
    """True range per bar; NaN at index 0 (no previous close)."""
    high = _as_series(highs)
    low = _as_series(lows)
    close = _as_series(closes)
    if not (len(high) == len(low) == len(close)):
        raise ValueError(
            f"highs/lows/closes must have equal length, got {len(high)}/{len(low)}/{len(close)}"
        )
    prev_close = close.shift(1)
    tr = pd.concat([
        high - low,
        (high - prev_close).abs(),
        (low - prev_close).abs(),
    ], axis=1).max(axis=1, skipna=False)
    return tr


def atr(highs: Values, lows: Values, closes: Values, period: int = ATR_PERIOD) -> pd.Series:
    """
    Calculate ATR (Average True Range) as an EMA of the true range.

    The true-range array starts at bar 1, so index 0 is NaN and index i holds
    the EMA through true-range entry i-1 (bar i). Evaluators read atr[i-1]
    to stay free of lookahead.

    Returns:
        Series of ATR values, same length as the inputs (all NaN for < 2 bars)
    """
    tr = true_range(highs, lows, closes)
    out = pd.Series(np.nan, index=tr.index, dtype=float)
    if len(tr) < 2:
        return out
    out.iloc[1:] = ema(tr.iloc[1:], period).to_numpy()
    return out


def highest(values: Values, period: int) -> pd.Series:
    """Rolling max over the trailing window; NaN until the window fills."""
    return _as_series(values).rolling(period, min_periods=period).max()


def percentile(sorted_values: Sequence[float], p: float) -> float:
    """
    Linear interpolation between order statistics of an ascending sequence.

    p is clamped to [0, 1]. Returns NaN on empty input.
    """
    n = len(sorted_values)
    if n == 0:
        return math.nan
    p = clamp(p, 0.0, 1.0)
    idx = p * (n - 1)
    i = int(math.floor(idx))
    frac = idx - i
    if i >= n - 1:
        return float(sorted_values[n - 1])
    return float(sorted_values[i] + (sorted_values[i + 1] - sorted_values[i]) * frac)


def median(values: Iterable[float]) -> float:
    """Median (NaN on empty input)."""
    return percentile(sorted(values), 0.5)


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


class TechnicalIndicators:
    """Calculates the indicator set used by the swing evaluator."""

    def __init__(
        self,
        sma_short_period: int = SMA_SHORT_PERIOD,  # From shared.defaults
        sma_long_period: int = SMA_LONG_PERIOD,  # From shared.defaults
        ema_period: int = EMA_PERIOD,  # From shared.defaults
        rsi_period: int = RSI_PERIOD,  # From shared.defaults
        atr_period: int = ATR_PERIOD,  # From shared.defaults
        highest_period: int = HIGHEST_PERIOD,
        volume_sma_period: int = VOLUME_SMA_PERIOD,
    ):
        self.sma_short_period = sma_short_period
        self.sma_long_period = sma_long_period
        self.ema_period = ema_period
        self.rsi_period = rsi_period
        self.atr_period = atr_period
        self.highest_period = highest_period
        self.volume_sma_period = volume_sma_period

    @property
    def min_bars(self) -> int:
        """Bars needed before every indicator is defined."""
        return max(
            self.sma_short_period,
            self.sma_long_period,
            self.rsi_period + 1,
            self.highest_period,
            2,
        )

    def calculate_all(self, data: pd.DataFrame) -> pd.DataFrame:
        """
        Calculate all swing indicators and return them as a DataFrame.

        Args:
            data: DataFrame with 'High', 'Low', 'Close', 'Volume' columns,
                ascending by date

        Returns:
            DataFrame (same index as data) with price columns and
            sma50, sma200, ema20, rsi14, atr14, highest20, vol_sma20
        """
        close = data["Close"].astype(float)
        high = data["High"].astype(float)
        low = data["Low"].astype(float)
        volume = data["Volume"].astype(float)

        df = pd.DataFrame(index=data.index)
        df["close"] = close
        df["high"] = high
        df["low"] = low
        df["volume"] = volume
        df["sma50"] = sma(close, self.sma_short_period)
        df["sma200"] = sma(close, self.sma_long_period)
        df["ema20"] = ema(close, self.ema_period)
        df["rsi14"] = rsi(close, self.rsi_period)
        df["atr14"] = atr(high, low, close, self.atr_period)
        df["highest20"] = highest(high, self.highest_period)
        df["vol_sma20"] = sma(volume, self.volume_sma_period)
        return df


def value_at(series: Union[pd.Series, np.ndarray], i: int) -> Optional[float]:
    """Positional lookup that returns None for out-of-range or NaN positions."""
    if i < 0 or i >= len(series):
        return None
    v = series.iloc[i] if isinstance(series, pd.Series) else series[i]
    if pd.isna(v):
        return None
    return float(v)
