"""
Tests for technical indicators (SMA, EMA, RSI, ATR, rolling highs) and helpers.
"""
import math

import pytest
import pandas as pd
import numpy as np
from swingscan.indicators.technical import (
    TechnicalIndicators,
    sma,
    ema,
    rsi,
    true_range,
    atr,
    highest,
    percentile,
    median,
    clamp,
    value_at,
)


@pytest.fixture
def sample_ohlcv():
    """Create sample OHLCV data for testing."""
    dates = pd.date_range('2020-01-01', periods=250, freq='D')
    rng = np.random.default_rng(7)
    base = 100 + np.arange(250) * 0.3
    noise = rng.normal(0, 1.5, 250)

    return pd.DataFrame({
        'Open': base + noise,
        'High': base + abs(noise) + 1,
        'Low': base - abs(noise) - 1,
        'Close': base + noise * 0.5,
        'Volume': rng.integers(1_000_000, 5_000_000, 250),
    }, index=dates)


class TestSMA:
    """Test simple moving average."""

    def test_sma_values(self):
        """NaN until the window fills, then the trailing mean."""
        out = sma([1, 2, 3, 4, 5], 3)
        assert np.isnan(out.iloc[0]) and np.isnan(out.iloc[1])
        assert list(out.iloc[2:]) == [2.0, 3.0, 4.0]

    def test_sma_length(self):
        assert len(sma(list(range(10)), 4)) == 10

    def test_sma_short_input_all_nan(self):
        """Fewer values than the period: nothing defined, no error."""
        assert sma([1.0, 2.0], 5).isna().all()

    def test_input_not_mutated(self):
        """Indicator functions never modify their input."""
        values = pd.Series([1.0, 2.0, 3.0, 4.0])
        original = values.copy()
        sma(values, 2)
        ema(values, 2)
        pd.testing.assert_series_equal(values, original)


class TestEMA:
    """Test EMA calculation."""

    def test_ema_seeded_with_first_value(self):
        """out[0] is the first value; later values follow the EMA recursion."""
        out = ema([1.0, 2.0, 3.0], 2)
        alpha = 2 / 3
        assert out.iloc[0] == 1.0
        assert out.iloc[1] == pytest.approx(alpha * 2 + (1 - alpha) * 1)
        assert out.iloc[2] == pytest.approx(alpha * 3 + (1 - alpha) * out.iloc[1])

    def test_ema_always_defined(self):
        assert not ema([5.0] * 10, 20).isna().any()

    def test_ema_constant_series(self):
        """A constant series has a constant EMA."""
        out = ema([7.0] * 30, 10)
        assert out.iloc[-1] == pytest.approx(7.0)


class TestRSI:
    """Test RSI calculation."""

    def test_rsi_range(self, sample_ohlcv):
        """RSI should be between 0 and 100."""
        valid = rsi(sample_ohlcv['Close'], 14).dropna()
        assert valid.min() >= 0
        assert valid.max() <= 100

    def test_rsi_warmup(self):
        """NaN for index < period, defined from index == period."""
        out = rsi(np.arange(1.0, 31.0), 14)
        assert out.iloc[:14].isna().all()
        assert not np.isnan(out.iloc[14])

    def test_rsi_100_when_no_losses(self):
        """A strictly rising series has RSI 100."""
        out = rsi(np.arange(1.0, 31.0), 14)
        assert (out.dropna() == 100.0).all()

    def test_rsi_100_on_flat_series(self):
        """No losses at all (avg_loss == 0) gives 100."""
        out = rsi([10.0] * 20, 14)
        assert out.iloc[-1] == 100.0

    def test_rsi_balanced_moves(self):
        """Equal gains and losses give RS = 1, RSI = 50."""
        out = rsi([1.0, 2.0, 1.0, 2.0, 1.0], 2)
        assert out.iloc[2] == pytest.approx(50.0)
        assert out.iloc[4] == pytest.approx(50.0)

    def test_rsi_all_losses(self):
        """A strictly falling series has RSI 0."""
        out = rsi(np.arange(30.0, 0.0, -1.0), 14)
        assert out.iloc[-1] == pytest.approx(0.0)

    def test_rsi_period(self, sample_ohlcv):
        """Different periods should give different results."""
        rsi7 = rsi(sample_ohlcv['Close'], 7).dropna()
        rsi14 = rsi(sample_ohlcv['Close'], 14).dropna()
        assert not rsi7.equals(rsi14)


class TestATR:
    """Test true range and ATR."""

    def test_true_range_first_undefined(self):
        """No previous close at index 0."""
        tr = true_range([11.0, 12.0], [9.0, 10.0], [10.0, 11.0])
        assert np.isnan(tr.iloc[0])
        assert tr.iloc[1] == pytest.approx(2.0)

    def test_true_range_uses_gap(self):
        """Gap up: |high - prev_close| exceeds high - low."""
        tr = true_range([10.0, 15.0], [9.0, 14.5], [9.5, 15.0])
        assert tr.iloc[1] == pytest.approx(5.5)

    def test_true_range_length_mismatch(self):
        """Mismatched input lengths raise ValueError."""
        with pytest.raises(ValueError, match="equal length"):
            true_range([1.0, 2.0], [1.0], [1.0, 2.0])

    def test_atr_alignment(self):
        """Index 0 is NaN; index 1 is the first true range (EMA seed)."""
        highs = [11.0, 12.0, 13.0, 14.0]
        lows = [9.0, 10.0, 11.0, 12.0]
        closes = [10.0, 11.0, 12.0, 13.0]
        out = atr(highs, lows, closes, 14)
        assert np.isnan(out.iloc[0])
        assert out.iloc[1] == pytest.approx(2.0)
        assert len(out) == 4

    def test_atr_flat_bars_zero(self):
        """Flat bars have zero ATR after index 0."""
        flat = [10.0] * 60
        out = atr(flat, flat, flat, 14)
        assert np.isnan(out.iloc[0])
        assert (out.iloc[1:] == 0.0).all()

    def test_atr_too_few_bars(self):
        """Fewer than two bars: all NaN."""
        assert atr([10.0], [9.0], [9.5], 14).isna().all()
        assert len(atr([], [], [], 14)) == 0


class TestHighest:
    """Test rolling highest."""

    def test_highest_window(self):
        """Rolling max over the trailing window."""
        out = highest([1.0, 5.0, 3.0, 2.0, 4.0], 3)
        assert out.iloc[:2].isna().all()
        assert list(out.iloc[2:]) == [5.0, 5.0, 4.0]


class TestHelpers:
    """Test percentile, median, clamp and value_at."""

    def test_percentile_interpolates(self):
        """Linear interpolation between order statistics."""
        assert percentile([1.0, 2.0, 3.0, 4.0], 0.5) == pytest.approx(2.5)
        assert percentile([1.0, 2.0, 3.0, 4.0], 0.0) == 1.0
        assert percentile([1.0, 2.0, 3.0, 4.0], 1.0) == 4.0

    def test_percentile_clamps_p(self):
        """p outside [0, 1] is clamped."""
        assert percentile([1.0, 2.0], 1.5) == 2.0
        assert percentile([1.0, 2.0], -1.0) == 1.0

    def test_percentile_empty_is_nan(self):
        assert math.isnan(percentile([], 0.5))

    def test_median_sorts(self):
        """Median of unsorted input, odd and even lengths."""
        assert median([3.0, 1.0, 2.0]) == 2.0
        assert median([4.0, 1.0, 3.0, 2.0]) == pytest.approx(2.5)

    def test_clamp(self):
        assert clamp(5, 0, 1) == 1
        assert clamp(-5, 0, 1) == 0
        assert clamp(0.3, 0, 1) == 0.3

    def test_value_at(self):
        """None for NaN and out-of-range positions."""
        s = pd.Series([np.nan, 2.0])
        assert value_at(s, 0) is None
        assert value_at(s, 1) == 2.0
        assert value_at(s, -1) is None
        assert value_at(s, 2) is None
        assert value_at(np.array([1.5]), 0) == 1.5


class TestTechnicalIndicators:
    """Test the combined indicator frame."""

    def test_min_bars_is_longest_lookback(self):
        """SMA200 sets the minimum bar count by default."""
        assert TechnicalIndicators().min_bars == 200
        assert TechnicalIndicators(sma_long_period=100).min_bars == 100

    def test_calculate_all_columns(self, sample_ohlcv):
        """Every indicator column is present and aligned with the input."""
        df = TechnicalIndicators().calculate_all(sample_ohlcv)
        expected = {'close', 'high', 'low', 'volume', 'sma50', 'sma200',
                    'ema20', 'rsi14', 'atr14', 'highest20', 'vol_sma20'}
        assert expected.issubset(df.columns)
        assert len(df) == len(sample_ohlcv)

    def test_calculate_all_warmup(self, sample_ohlcv):
        """SMA200 is defined from bar 199, SMA50 from bar 49."""
        df = TechnicalIndicators().calculate_all(sample_ohlcv)
        assert df['sma200'].iloc[:199].isna().all()
        assert not np.isnan(df['sma200'].iloc[199])
        assert not np.isnan(df['sma50'].iloc[49])

    def test_highest_uses_highs(self, sample_ohlcv):
        """highest20 reads highs, not closes."""
        df = TechnicalIndicators().calculate_all(sample_ohlcv)
        assert df['highest20'].iloc[-1] == pytest.approx(sample_ohlcv['High'].iloc[-20:].max())
