"""
Daily candidate scoring.

Ranks liquid tickers by a composite of trend, volatility contraction and
recent price structure. Used by the daily scan to shortlist names for the
next session; independent of the swing entry evaluator.
"""
import logging
import math
from typing import Optional, Sequence

import numpy as np

from ..indicators.technical import atr, clamp, ema, median
from ..shared.defaults import (
    DAILY_LIQUIDITY_WINDOW,
    DAILY_MIN_BARS,
    DAILY_MIN_SCORE,
    DAILY_MIN_MEDIAN_DOLLAR_VOL,
)
from ..shared.types import DailyCandidate, PriceBar


logger = logging.getLogger(__name__)

# Score weights
TREND_WEIGHT = 0.45
CONTRACTION_WEIGHT = 0.35
STRUCTURE_WEIGHT = 0.2

# ATR(5)/ATR(20) ratio mapped linearly: 0.6 -> 1.0, 0.9 -> 0.0
CONTRACTION_BEST_RATIO = 0.6
CONTRACTION_WORST_RATIO = 0.9

UPPER_CLOSE_POSITION = 0.6
PIVOT_BARS = 5
STOP_ATR_MULT = 1.5
MIN_RISK_PER_SHARE = 0.01


def _trailing_return(closes: np.ndarray, bars_back: int) -> float:
    if len(closes) <= bars_back:
        return 0.0
    return closes[-1] / closes[-1 - bars_back] - 1.0


def evaluate_daily_candidate(
    symbol: str,
    bars: Sequence[PriceBar],
    min_median_dollar_vol: float = DAILY_MIN_MEDIAN_DOLLAR_VOL,
    min_daily_score: float = DAILY_MIN_SCORE,
) -> Optional[DailyCandidate]:
    """
    Score one ticker's daily bars.

    Components:
    - trend: close > EMA20 > EMA50 (0 or 1)
    - contraction: ATR(5)/ATR(20), tighter is better (0..1)
    - structure: strong closes over the last 3 bars plus 10/20-bar momentum (0..1)

    Args:
        symbol: Ticker symbol (carried into the result)
        bars: Daily bars, any order
        min_median_dollar_vol: Liquidity floor on the 40-bar median of close * volume
        min_daily_score: Minimum composite score to qualify

    Returns:
        DailyCandidate, or None when history is short, the ticker is illiquid,
        or the score is below min_daily_score
    """
    if len(bars) < DAILY_MIN_BARS:
        return None

    ordered = sorted(bars, key=lambda b: b.trade_date)
    closes = np.array([b.close for b in ordered], dtype=float)
    highs = np.array([b.high for b in ordered], dtype=float)
    lows = np.array([b.low for b in ordered], dtype=float)

    tail = ordered[-DAILY_LIQUIDITY_WINDOW:]
    median_dollar_vol = median([b.close * max(1, b.volume) for b in tail])
    if not median_dollar_vol >= min_median_dollar_vol:
        logger.debug(f"{symbol}: median dollar volume {median_dollar_vol:,.0f} below floor")
        return None

    last_close = float(closes[-1])
    ema20 = float(ema(closes, 20).iloc[-1])
    ema50 = float(ema(closes, 50).iloc[-1])
    atr14 = float(atr(highs, lows, closes, 14).iloc[-1])
    atr5 = float(atr(highs, lows, closes, 5).iloc[-1])
    atr20 = float(atr(highs, lows, closes, 20).iloc[-1])

    trend_score = 1.0 if last_close > ema20 > ema50 else 0.0

    contraction_score = 0.0
    if math.isfinite(atr5) and math.isfinite(atr20) and atr20 > 0:
        ratio = atr5 / atr20
        span = CONTRACTION_WORST_RATIO - CONTRACTION_BEST_RATIO
        contraction_score = clamp(1.0 - (ratio - CONTRACTION_BEST_RATIO) / span, 0.0, 1.0)

    last3 = ordered[-3:]
    upper_closes = 0
    for bar in last3:
        bar_range = max(1e-9, bar.high - bar.low)
        if (bar.close - bar.low) / bar_range >= UPPER_CLOSE_POSITION:
            upper_closes += 1
    upper_close_score = upper_closes / max(1, len(last3))

    momentum_score = (
        (0.5 if _trailing_return(closes, 10) >= 0 else 0.0)
        + (0.5 if _trailing_return(closes, 20) >= 0 else 0.0)
    )
    structure_score = 0.6 * upper_close_score + 0.4 * momentum_score

    daily_score = (
        TREND_WEIGHT * trend_score
        + CONTRACTION_WEIGHT * contraction_score
        + STRUCTURE_WEIGHT * structure_score
    )
    if daily_score < min_daily_score:
        return None

    pivot_high = float(highs[-PIVOT_BARS:].max())
    recent_low = float(lows[-PIVOT_BARS:].min())
    stop_suggestion = min(recent_low, last_close - STOP_ATR_MULT * atr14)

    return DailyCandidate(
        symbol=symbol,
        daily_score=daily_score,
        trend_score=trend_score,
        contraction_score=contraction_score,
        structure_score=structure_score,
        pivot_high=pivot_high,
        stop_suggestion=stop_suggestion,
        atr14=atr14,
        risk_per_share=max(MIN_RISK_PER_SHARE, pivot_high - stop_suggestion),
        median_dollar_volume40=median_dollar_vol,
    )
