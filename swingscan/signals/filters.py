"""
Pluggable daily filters and the entry gate for swing evaluation.

Each filter evaluates one bar snapshot and returns a FilterOutcome carrying a
human-readable message for operator diagnosis. The evaluator walks the ordered
list from get_daily_filters(); new filters register there without changing
evaluator logic.
"""
from dataclasses import dataclass
from typing import List, Optional, Protocol

from .config import SwingConfig
from ..shared.types import EntryMode


@dataclass(frozen=True)
class BarSnapshot:
    """Indicator values derived for one candidate bar."""
    index: int
    close: float
    sma50: float
    sma200: float
    ema20: float
    rsi: float
    atr_at_i: float  # ATR as of the previous bar (no lookahead)
    rel_vol: float
    pct_above50: float
    breakout_level: float  # prior-bar 20-day high
    prev_close: Optional[float] = None
    prev_ema20: Optional[float] = None
    prev_rsi: Optional[float] = None


@dataclass(frozen=True)
class FilterOutcome:
    """Result of one predicate; message describes the measured value."""
    name: str
    passed: bool
    message: str


@dataclass(frozen=True)
class EntryGateOutcome:
    is_breakout: bool
    is_pullback_reclaim: bool
    raw: bool
    passed: bool
    message: str


def _num(value: float) -> str:
    """Compact threshold formatting (45.0 -> '45', 1.8 -> '1.8')."""
    return f"{value:g}"


def _flag(value: bool) -> str:
    return "true" if value else "false"


class DailyFilter(Protocol):
    """Protocol for a daily filter predicate."""

    name: str

    def evaluate(self, bar: BarSnapshot, config: SwingConfig) -> FilterOutcome:
        """
        Evaluate the filter at this bar.

        Args:
            bar: Derived indicator values for the candidate bar
            config: Resolved swing configuration

        Returns:
            FilterOutcome (passed=True when the filter does not block the bar)
        """
        ...


class PriceAboveSma50Filter:
    """Close above the 50-day SMA (gated by require_price_above50)."""

    name = "price_above_sma50"

    def evaluate(self, bar: BarSnapshot, config: SwingConfig) -> FilterOutcome:
        above = bar.close > bar.sma50
        if above:
            return FilterOutcome(self.name, True, "price above SMA50")
        if not config.require_price_above50:
            return FilterOutcome(self.name, True, "price not above SMA50 (not required)")
        return FilterOutcome(self.name, False, "price not above SMA50")


class TrendAlignedFilter:
    """50-day SMA above 200-day SMA (gated by require_trend_aligned)."""

    name = "trend_aligned"

    def evaluate(self, bar: BarSnapshot, config: SwingConfig) -> FilterOutcome:
        aligned = bar.sma50 > bar.sma200
        if aligned:
            return FilterOutcome(self.name, True, "SMA50 above SMA200")
        if not config.require_trend_aligned:
            return FilterOutcome(self.name, True, "SMA50 not above SMA200 (not required)")
        return FilterOutcome(self.name, False, "SMA50 not above SMA200 (trend not aligned)")


class RsiRangeFilter:
    """RSI inside [rsi_min, rsi_max]."""

    name = "rsi_range"

    def evaluate(self, bar: BarSnapshot, config: SwingConfig) -> FilterOutcome:
        band = f"{_num(config.rsi_min)}-{_num(config.rsi_max)}"
        if config.rsi_min <= bar.rsi <= config.rsi_max:
            return FilterOutcome(self.name, True, f"rsi {bar.rsi:.1f} within {band}")
        return FilterOutcome(self.name, False, f"rsi {bar.rsi:.1f} outside {band}")


class RelativeVolumeFilter:
    """Volume relative to its 20-day average at least rel_vol_min."""

    name = "relative_volume"

    def evaluate(self, bar: BarSnapshot, config: SwingConfig) -> FilterOutcome:
        if bar.rel_vol >= config.rel_vol_min:
            return FilterOutcome(
                self.name, True, f"relVol {bar.rel_vol:.2f} >= {_num(config.rel_vol_min)}"
            )
        return FilterOutcome(
            self.name, False, f"relVol {bar.rel_vol:.2f} < {_num(config.rel_vol_min)}"
        )


class StretchFilter:
    """Close no more than max_stretch_pct above the 50-day SMA."""

    name = "stretch"

    def evaluate(self, bar: BarSnapshot, config: SwingConfig) -> FilterOutcome:
        if bar.pct_above50 <= config.max_stretch_pct:
            return FilterOutcome(
                self.name, True,
                f"pctAbove50 {bar.pct_above50:.2f} <= {_num(config.max_stretch_pct)}",
            )
        return FilterOutcome(
            self.name, False,
            f"pctAbove50 {bar.pct_above50:.2f} > {_num(config.max_stretch_pct)}",
        )


def get_daily_filters(config: SwingConfig) -> List[DailyFilter]:
    """
    Return the ordered list of daily filters for this config.

    Order: price vs SMA50, trend alignment, RSI band, relative volume, stretch.
    Reserved flags (RESERVED_FLAGS in config) register no predicate yet.
    """
    return [
        PriceAboveSma50Filter(),
        TrendAlignedFilter(),
        RsiRangeFilter(),
        RelativeVolumeFilter(),
        StretchFilter(),
    ]


def evaluate_entry_gate(bar: BarSnapshot, config: SwingConfig) -> EntryGateOutcome:
    """
    Breakout / pullback-reclaim entry gate.

    Breakout: close above the prior bar's 20-day high (today excluded).
    Pullback-reclaim: close within near_pct50 of SMA50, crossing up through
    EMA20 on this bar, with RSI rising.
    """
    is_breakout = bar.close > bar.breakout_level
    near_sma50 = abs(bar.pct_above50) <= config.near_pct50
    reclaim_ema20 = (
        bar.prev_close is not None
        and bar.prev_ema20 is not None
        and bar.close > bar.ema20
        and bar.prev_close <= bar.prev_ema20
    )
    rsi_rising = bar.prev_rsi is not None and bar.rsi > bar.prev_rsi
    is_pullback_reclaim = near_sma50 and reclaim_ema20 and rsi_rising

    if config.entry_mode == EntryMode.BREAKOUT:
        raw = is_breakout
    elif config.entry_mode == EntryMode.PULLBACK:
        raw = is_pullback_reclaim
    else:
        raw = is_breakout or is_pullback_reclaim

    detail = f"(breakout:{_flag(is_breakout)}, pullback:{_flag(is_pullback_reclaim)})"
    if raw:
        passed, message = True, f"entry gate passed {detail}"
    elif not config.require_entry_gate:
        passed, message = True, f"entry gate not required {detail}"
    else:
        passed, message = False, f"entry gate failed {detail}"
    return EntryGateOutcome(is_breakout, is_pullback_reclaim, raw, passed, message)
