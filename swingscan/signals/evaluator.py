"""
Swing entry evaluator.

Overlays indicators on one ticker's daily bars and decides where an entry
condition newly triggers:
- Daily filters (price vs SMA50, trend, RSI band, relative volume, stretch)
- Entry gate (breakout or pullback-reclaim, per entry_mode)
- First-occurrence de-duplication (one-bar look-back)
- Signal construction (ATR/swing-low stop, 1R/1.5R/2R targets)

Two modes share the same per-bar logic: a full-history scan that yields every
firing bar, and a point evaluation for one date that explains its verdict.
"""
import logging
import sys
from bisect import bisect_left
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence

import numpy as np
import pandas as pd

from .config import SwingConfig
from .filters import (
    BarSnapshot,
    EntryGateOutcome,
    FilterOutcome,
    evaluate_entry_gate,
    get_daily_filters,
)
from ..data.store import bars_to_frame
from ..indicators.technical import TechnicalIndicators, value_at
from ..shared.defaults import SWING_LEN, SWING_STOP_BUFFER_PCT, TARGET_R_MULTIPLES
from ..shared.errors import InvalidInput
from ..shared.types import EvaluationResult, PriceBar, Signal, SignalMeta


logger = logging.getLogger(__name__)

REASON_NO_DATA = "no price data"
REASON_INSUFFICIENT = "insufficient indicator history"
REASON_DAILY_FAILED = "core daily filters not all true"
REASON_ENTRY_FAILED = "entryPass false (either core filters or entry gate failed)"
REASON_NOT_FIRST = "not first pass: previous bar also passed"

# Indicators that must be defined before a bar can be evaluated
REQUIRED_COLUMNS = ("sma50", "sma200", "rsi14", "atr14", "highest20")


def _check_ascending(dates: Sequence[int]) -> None:
    """Raise InvalidInput unless dates are strictly increasing."""
    if any(a >= b for a, b in zip(dates, dates[1:])):
        raise InvalidInput("bars must be ascending by trade_date with no duplicate dates")


@dataclass
class BarCheck:
    """Steps 1-5 of the evaluation at one bar."""
    defined: bool
    snapshot: Optional[BarSnapshot] = None
    outcomes: List[FilterOutcome] = field(default_factory=list)
    gate: Optional[EntryGateOutcome] = None
    daily_all: bool = False
    entry_pass: bool = False


class SwingEvaluator:
    """
    Evaluates swing entries for one resolved configuration.

    Stateless between calls: every call recomputes indicators from the bars
    it is given.
    """

    def __init__(self, config: SwingConfig, technical_indicators: Optional[TechnicalIndicators] = None):
        """
        Args:
            config: Resolved SwingConfig
            technical_indicators: Indicator calculator (default periods when None)
        """
        self.config = config
        self.technical_indicators = technical_indicators or TechnicalIndicators()
        self.filters = get_daily_filters(config)

    def compute_indicators(self, bars: Sequence[PriceBar]) -> pd.DataFrame:
        """Indicator frame aligned positionally with bars."""
        _check_ascending([b.trade_date for b in bars])
        return self.technical_indicators.calculate_all(bars_to_frame(bars))

    def check_bar(self, cols: Dict[str, np.ndarray], i: int) -> BarCheck:
        """
        Run the daily filters and entry gate at bar i.

        Args:
            cols: Indicator columns as arrays (from compute_indicators)
            i: Bar position

        Returns:
            BarCheck; defined=False when any required indicator is missing at i
        """
        if i < 0 or any(value_at(cols[c], i) is None for c in REQUIRED_COLUMNS):
            return BarCheck(defined=False)

        close = float(cols["close"][i])
        sma50 = float(cols["sma50"][i])
        atr_prev = value_at(cols["atr14"], i - 1)
        atr_at_i = atr_prev if atr_prev is not None else (value_at(cols["atr14"], i) or 0.0)

        vol_avg = value_at(cols["vol_sma20"], i)
        rel_vol = float(cols["volume"][i]) / max(vol_avg if vol_avg is not None else 1.0, 1.0)

        breakout_level = value_at(cols["highest20"], i - 1)
        if breakout_level is None:
            breakout_level = float(cols["highest20"][i])

        snapshot = BarSnapshot(
            index=i,
            close=close,
            sma50=sma50,
            sma200=float(cols["sma200"][i]),
            ema20=float(cols["ema20"][i]),
            rsi=float(cols["rsi14"][i]),
            atr_at_i=atr_at_i,
            rel_vol=rel_vol,
            pct_above50=(close / sma50 - 1.0) * 100.0,
            breakout_level=breakout_level,
            prev_close=value_at(cols["close"], i - 1),
            prev_ema20=value_at(cols["ema20"], i - 1),
            prev_rsi=value_at(cols["rsi14"], i - 1),
        )

        outcomes = [f.evaluate(snapshot, self.config) for f in self.filters]
        daily_all = all(o.passed for o in outcomes)
        gate = evaluate_entry_gate(snapshot, self.config)
        return BarCheck(
            defined=True,
            snapshot=snapshot,
            outcomes=outcomes,
            gate=gate,
            daily_all=daily_all,
            entry_pass=daily_all and gate.passed,
        )

    def build_signal(self, cols: Dict[str, np.ndarray], check: BarCheck, trade_date: int) -> Signal:
        """Entry, stop and R-multiple targets for a firing bar."""
        bar = check.snapshot
        i = bar.index
        entry_px = bar.close
        start = max(0, i - SWING_LEN + 1)
        swing_low = float(np.min(cols["low"][start:i + 1]))
        swing_high_ref = float(np.max(cols["high"][start:i + 1]))

        stop_atr = entry_px - self.config.atr_mult * bar.atr_at_i
        stop_swing = swing_low * (1.0 - SWING_STOP_BUFFER_PCT / 100.0)
        stop = min(stop_atr, stop_swing)
        risk_per_share = max(entry_px - stop, sys.float_info.min)

        targets = tuple(entry_px + r * risk_per_share for r in TARGET_R_MULTIPLES)
        return Signal(
            date=int(trade_date),
            entry_px=entry_px,
            stop=stop,
            targets=targets,
            rr_to_swing=(swing_high_ref - entry_px) / risk_per_share,
            meta=SignalMeta(
                rsi=bar.rsi,
                rel_vol=bar.rel_vol,
                pct_above50=bar.pct_above50,
                entry_mode=self.config.entry_mode,
            ),
        )

    def iter_signals(self, bars: Sequence[PriceBar]) -> Iterator[Signal]:
        """
        Yield every bar where the entry condition newly triggers, oldest first.

        Repeat calls over unchanged bars reproduce the same sequence.
        """
        if len(bars) < self.technical_indicators.min_bars:
            return
        ind = self.compute_indicators(bars)
        cols = {c: ind[c].to_numpy() for c in ind.columns}

        prev_pass = self.check_bar(cols, 0).entry_pass
        for i in range(1, len(bars)):
            check = self.check_bar(cols, i)
            if check.entry_pass and (self.config.allow_repeat_entries or not prev_pass):
                yield self.build_signal(cols, check, bars[i].trade_date)
            prev_pass = check.entry_pass

    def scan(self, bars: Sequence[PriceBar]) -> List[Signal]:
        """Full-history scan: all firing signals in chronological order."""
        signals = list(self.iter_signals(bars))
        logger.debug(f"Scan over {len(bars)} bars produced {len(signals)} signals")
        return signals

    def evaluate_at(
        self,
        bars: Sequence[PriceBar],
        for_date: int,
        verbose: bool = False,
    ) -> EvaluationResult:
        """
        Evaluate the bar dated for_date and explain the verdict.

        Indicators are computed over bars up to and including for_date.
        Missing data, a date outside the window, or too little history give a
        failing result with a reason; none of them raise.

        Args:
            bars: Ascending bars for one ticker
            for_date: Integer date YYYYMMDD to evaluate
            verbose: Also list the checks that passed

        Returns:
            EvaluationResult with passed flag, reasons and the signal on a pass
        """
        if not bars:
            return EvaluationResult(passed=False, reasons=[REASON_NO_DATA])

        dates = [b.trade_date for b in bars]
        _check_ascending(dates)
        idx = bisect_left(dates, for_date)
        if idx >= len(dates) or dates[idx] != for_date:
            logger.warning(f"Date {for_date} not found in price data ({dates[0]}..{dates[-1]})")
            return EvaluationResult(passed=False, reasons=[f"date {for_date} not found in price data"])

        window = bars[:idx + 1]
        if len(window) < self.technical_indicators.min_bars:
            return EvaluationResult(passed=False, reasons=[REASON_INSUFFICIENT])

        ind = self.compute_indicators(window)
        cols = {c: ind[c].to_numpy() for c in ind.columns}
        check = self.check_bar(cols, idx)
        if not check.defined:
            return EvaluationResult(passed=False, reasons=[REASON_INSUFFICIENT])

        prev_entry_pass = False
        if not self.config.allow_repeat_entries:
            prev_entry_pass = self.check_bar(cols, idx - 1).entry_pass
        fires = check.entry_pass and (self.config.allow_repeat_entries or not prev_entry_pass)

        reasons = self._reasons(check, prev_entry_pass, verbose)
        if not fires:
            return EvaluationResult(passed=False, reasons=reasons)

        signal = self.build_signal(cols, check, window[idx].trade_date)
        return EvaluationResult(passed=True, reasons=reasons if verbose else [], signal=signal)

    def _reasons(self, check: BarCheck, prev_entry_pass: bool, verbose: bool) -> List[str]:
        """Human-readable diagnosis, failing checks only unless verbose."""
        reasons = [o.message for o in check.outcomes if verbose or not o.passed]
        if verbose or not check.gate.passed:
            reasons.append(check.gate.message)

        if not check.daily_all:
            reasons.append(REASON_DAILY_FAILED)
        elif verbose:
            reasons.append("core daily filters all true")

        if not check.entry_pass:
            reasons.append(REASON_ENTRY_FAILED)
        if self.config.allow_repeat_entries:
            if verbose:
                reasons.append("repeat entries allowed")
        elif prev_entry_pass:
            reasons.append(REASON_NOT_FIRST)
        elif verbose:
            reasons.append("first pass: previous bar did not pass")
        return reasons


def scan_signals(bars: Sequence[PriceBar], config: SwingConfig) -> List[Signal]:
    """Full-history scan of bars under config."""
    return SwingEvaluator(config).scan(bars)


def evaluate_at(
    bars: Sequence[PriceBar],
    for_date: int,
    config: SwingConfig,
    verbose: bool = False,
) -> EvaluationResult:
    """Point evaluation of the bar dated for_date under config."""
    return SwingEvaluator(config).evaluate_at(bars, for_date, verbose=verbose)
