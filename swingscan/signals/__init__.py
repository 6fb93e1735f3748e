"""
Swing signal module.

Config resolution (presets + overrides), the pluggable daily filters, the
swing entry evaluator and the daily candidate scorer.
"""
from .config import (
    SwingConfig,
    BASE_CONFIG,
    PRESET_OVERRIDES,
    PRESET_NAMES,
    DEFAULT_PRESET,
    normalize_overrides,
    resolve_config,
)
from .config_loader import load_config_from_yaml, load_preset_file
from .filters import (
    BarSnapshot,
    FilterOutcome,
    EntryGateOutcome,
    DailyFilter,
    PriceAboveSma50Filter,
    TrendAlignedFilter,
    RsiRangeFilter,
    RelativeVolumeFilter,
    StretchFilter,
    get_daily_filters,
    evaluate_entry_gate,
)
from .evaluator import SwingEvaluator, scan_signals, evaluate_at
from .daily_score import evaluate_daily_candidate

__all__ = [
    'SwingConfig',
    'BASE_CONFIG',
    'PRESET_OVERRIDES',
    'PRESET_NAMES',
    'DEFAULT_PRESET',
    'normalize_overrides',
    'resolve_config',
    'load_config_from_yaml',
    'load_preset_file',
    'BarSnapshot',
    'FilterOutcome',
    'EntryGateOutcome',
    'DailyFilter',
    'PriceAboveSma50Filter',
    'TrendAlignedFilter',
    'RsiRangeFilter',
    'RelativeVolumeFilter',
    'StretchFilter',
    'get_daily_filters',
    'evaluate_entry_gate',
    'SwingEvaluator',
    'scan_signals',
    'evaluate_at',
    'evaluate_daily_candidate',
]
