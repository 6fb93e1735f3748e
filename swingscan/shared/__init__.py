"""
Shared types, defaults and helpers for the swing engine.

This module provides:
- Value types (PriceBar, Signal, EvaluationResult, ...)
- Centralized default values for indicator periods and thresholds
- Integer trade-date helpers
- The error taxonomy
"""
from .types import (
    EntryMode,
    PriceBar,
    TickerIdentity,
    Signal,
    SignalMeta,
    EvaluationResult,
    ScanOutcome,
    DailyCandidate,
    FinalPick,
)
from .errors import SwingError, NotFound, InsufficientHistory, InvalidInput, UpstreamFailure
from .dates import (
    IntDate,
    to_int_date,
    from_int_date,
    parse_int_date,
    add_days_int,
    today_int_utc,
    days_ago_int_utc,
)

__all__ = [
    'EntryMode',
    'PriceBar',
    'TickerIdentity',
    'Signal',
    'SignalMeta',
    'EvaluationResult',
    'ScanOutcome',
    'DailyCandidate',
    'FinalPick',
    'SwingError',
    'NotFound',
    'InsufficientHistory',
    'InvalidInput',
    'UpstreamFailure',
    'IntDate',
    'to_int_date',
    'from_int_date',
    'parse_int_date',
    'add_days_int',
    'today_int_utc',
    'days_ago_int_utc',
]
