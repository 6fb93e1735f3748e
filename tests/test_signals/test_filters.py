"""
Tests for daily filters and the entry gate.
"""
from dataclasses import replace

import pytest
from swingscan.signals.config import resolve_config
from swingscan.signals.filters import (
    BarSnapshot,
    PriceAboveSma50Filter,
    TrendAlignedFilter,
    RsiRangeFilter,
    RelativeVolumeFilter,
    StretchFilter,
    get_daily_filters,
    evaluate_entry_gate,
)
from swingscan.shared.types import EntryMode


@pytest.fixture
def bar():
    """A bar that passes every daily filter of the manual preset."""
    return BarSnapshot(
        index=250,
        close=105.0,
        sma50=100.0,
        sma200=95.0,
        ema20=104.0,
        rsi=52.0,
        atr_at_i=2.0,
        rel_vol=2.0,
        pct_above50=5.0,
        breakout_level=104.5,
        prev_close=103.0,
        prev_ema20=103.5,
        prev_rsi=48.0,
    )


@pytest.fixture
def manual():
    return resolve_config("manual")


class TestDailyFilters:
    """Each filter reports pass/fail with a diagnostic message."""

    def test_registry_order(self, manual):
        """Filters run in a fixed order."""
        names = [f.name for f in get_daily_filters(manual)]
        assert names == ["price_above_sma50", "trend_aligned", "rsi_range", "relative_volume", "stretch"]

    def test_all_pass(self, bar, manual):
        """The fixture bar passes every filter."""
        assert all(f.evaluate(bar, manual).passed for f in get_daily_filters(manual))

    def test_price_below_sma50(self, bar, manual):
        """Close under SMA50 fails when required."""
        below = replace(bar, close=99.0)
        outcome = PriceAboveSma50Filter().evaluate(below, manual)
        assert not outcome.passed
        assert outcome.message == "price not above SMA50"

    def test_price_filter_not_required(self, bar):
        """The SMA50 check passes when not required."""
        config = resolve_config("manual", {"requirePriceAbove50": False})
        outcome = PriceAboveSma50Filter().evaluate(replace(bar, close=99.0), config)
        assert outcome.passed

    def test_trend_not_aligned(self, bar, manual):
        """SMA50 under SMA200 fails."""
        outcome = TrendAlignedFilter().evaluate(replace(bar, sma200=101.0), manual)
        assert not outcome.passed
        assert outcome.message == "SMA50 not above SMA200 (trend not aligned)"

    def test_rsi_outside_band(self, bar, manual):
        """RSI outside the band fails with one decimal."""
        outcome = RsiRangeFilter().evaluate(replace(bar, rsi=38.24), manual)
        assert not outcome.passed
        assert outcome.message == "rsi 38.2 outside 45-60"

    def test_rsi_band_inclusive(self, bar, manual):
        """Band edges pass."""
        assert RsiRangeFilter().evaluate(replace(bar, rsi=45.0), manual).passed
        assert RsiRangeFilter().evaluate(replace(bar, rsi=60.0), manual).passed

    def test_relative_volume(self, bar, manual):
        """Relative volume must reach the floor."""
        outcome = RelativeVolumeFilter().evaluate(replace(bar, rel_vol=1.2), manual)
        assert not outcome.passed
        assert outcome.message == "relVol 1.20 < 1.8"
        assert RelativeVolumeFilter().evaluate(replace(bar, rel_vol=1.8), manual).passed

    def test_stretch(self, bar, manual):
        """Too far above SMA50 fails."""
        outcome = StretchFilter().evaluate(replace(bar, pct_above50=12.4), manual)
        assert not outcome.passed
        assert outcome.message == "pctAbove50 12.40 > 10"


class TestEntryGate:
    """Breakout and pullback-reclaim detection."""

    def test_breakout(self, bar):
        """Close above the prior 20-bar high passes in breakout mode."""
        config = resolve_config("manual", {"entryMode": "breakout"})
        gate = evaluate_entry_gate(bar, config)
        assert gate.is_breakout
        assert gate.passed
        assert gate.message.startswith("entry gate passed (breakout:true")

    def test_close_equal_to_prior_high_is_not_breakout(self, bar):
        """Breakout needs a strictly higher close."""
        config = resolve_config("manual", {"entryMode": "breakout"})
        gate = evaluate_entry_gate(replace(bar, breakout_level=105.0), config)
        assert not gate.is_breakout
        assert not gate.passed

    def test_pullback_reclaim(self, bar, manual):
        """Near SMA50, crossing up through EMA20, RSI rising."""
        gate = evaluate_entry_gate(bar, manual)
        assert manual.entry_mode == EntryMode.PULLBACK
        assert gate.is_pullback_reclaim
        assert gate.passed

    def test_pullback_needs_cross(self, bar, manual):
        """Previous close already above EMA20: no reclaim."""
        gate = evaluate_entry_gate(replace(bar, prev_close=104.0), manual)
        assert not gate.is_pullback_reclaim
        assert not gate.passed
        assert gate.message == "entry gate failed (breakout:true, pullback:false)"

    def test_pullback_needs_rising_rsi(self, bar, manual):
        """Falling RSI blocks the reclaim."""
        gate = evaluate_entry_gate(replace(bar, prev_rsi=55.0), manual)
        assert not gate.is_pullback_reclaim

    def test_pullback_needs_proximity(self, bar):
        """Too far from SMA50 blocks the reclaim."""
        config = resolve_config("manual", {"nearPct50": 4.0})
        gate = evaluate_entry_gate(bar, config)
        assert not gate.is_pullback_reclaim

    def test_any_mode(self, bar):
        """Any mode passes on either gate and fails on neither."""
        config = resolve_config("manual", {"entryMode": "any"})
        no_reclaim = replace(bar, prev_close=104.0)
        assert evaluate_entry_gate(no_reclaim, config).passed
        neither = replace(no_reclaim, breakout_level=110.0)
        assert not evaluate_entry_gate(neither, config).passed

    def test_gate_not_required(self, bar):
        """An unmet gate passes when not required."""
        config = resolve_config("manual", {"entryMode": "breakout", "requireEntryGate": False})
        gate = evaluate_entry_gate(replace(bar, breakout_level=110.0), config)
        assert not gate.raw
        assert gate.passed

    def test_flat_bars_no_breakout(self):
        """Flat prices: close equals the prior high, ATR 0, no breakout."""
        flat = BarSnapshot(
            index=59, close=10.0, sma50=10.0, sma200=10.0, ema20=10.0, rsi=100.0,
            atr_at_i=0.0, rel_vol=1.0, pct_above50=0.0, breakout_level=10.0,
            prev_close=10.0, prev_ema20=10.0, prev_rsi=100.0,
        )
        gate = evaluate_entry_gate(flat, resolve_config("debug"))
        assert not gate.is_breakout
        assert not gate.is_pullback_reclaim
