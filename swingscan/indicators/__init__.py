"""
Indicator calculation module.

Pure numeric functions over bar sequences (SMA, EMA, RSI, ATR, rolling max,
percentile/median) and the TechnicalIndicators bundle used by the evaluator.
"""
from .technical import (
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

__all__ = [
    'TechnicalIndicators',
    'sma',
    'ema',
    'rsi',
    'true_range',
    'atr',
    'highest',
    'percentile',
    'median',
    'clamp',
    'value_at',
]
