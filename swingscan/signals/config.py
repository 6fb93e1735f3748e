"""
Swing configuration: base defaults, named presets and caller overrides.

Resolution is an ordered shallow merge, later wins:
base defaults, then preset partial overrides, then caller partial overrides.
The result is one frozen SwingConfig with every field populated.
Config validation runs at construction time (fail fast with clear errors).
"""
import math
from dataclasses import dataclass, asdict, fields
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from ..shared.types import EntryMode
from ..shared.errors import InvalidInput
from ..shared.defaults import (
    RSI_MIN, RSI_MAX, REL_VOL_MIN, ATR_MULT,
    MAX_STRETCH_PCT, NEAR_PCT_50, COOLDOWN_BARS,
    BB_LEN, BB_MULT,
)

DEFAULT_PRESET = "balanced"

# Declared for forward compatibility; no filter reads them yet.
RESERVED_FLAGS = (
    "require_macd_above0",
    "use_mtf_confirm",
    "use_base_tightness",
    "use_candle_quality",
    "use_gap_guard",
    "bb_len",
    "bb_mult",
    "cooldown_bars",
)


def _validate_config(
    *,
    rsi_min: float,
    rsi_max: float,
    rel_vol_min: float,
    atr_mult: float,
    max_stretch_pct: float,
    near_pct50: float,
    cooldown_bars: int,
    bb_len: int,
    bb_mult: float,
) -> None:
    """Validate thresholds. Raises InvalidInput (a ValueError) with clear message on failure."""
    if not (0 <= rsi_min <= 100) or not (0 <= rsi_max <= 100):
        raise InvalidInput(f"rsi_min/rsi_max must be in [0, 100], got {rsi_min}/{rsi_max}")
    if rsi_min > rsi_max:
        raise InvalidInput(f"rsi_min ({rsi_min}) must not exceed rsi_max ({rsi_max})")
    if rel_vol_min < 0:
        raise InvalidInput(f"rel_vol_min must be >= 0, got {rel_vol_min}")
    if atr_mult < 0:
        raise InvalidInput(f"atr_mult must be >= 0, got {atr_mult}")
    if max_stretch_pct < 0:
        raise InvalidInput(f"max_stretch_pct must be >= 0, got {max_stretch_pct}")
    if near_pct50 < 0:
        raise InvalidInput(f"near_pct50 must be >= 0, got {near_pct50}")
    if cooldown_bars < 0:
        raise InvalidInput(f"cooldown_bars must be >= 0, got {cooldown_bars}")
    if bb_len < 1:
        raise InvalidInput(f"bb_len must be >= 1, got {bb_len}")
    if bb_mult <= 0:
        raise InvalidInput(f"bb_mult must be > 0, got {bb_mult}")


@dataclass(frozen=True)
class SwingConfig:
    """Fully resolved threshold/flag set for the swing evaluator."""

    preset: str = "manual"

    # Core daily filters (from shared.defaults)
    rsi_min: float = RSI_MIN
    rsi_max: float = RSI_MAX
    rel_vol_min: float = REL_VOL_MIN  # volume / 20-day average volume
    atr_mult: float = ATR_MULT  # stop = entry - atr_mult * ATR
    max_stretch_pct: float = MAX_STRETCH_PCT  # max % above SMA50
    near_pct50: float = NEAR_PCT_50  # |% from SMA50| for pullback entries
    entry_mode: EntryMode = EntryMode.PULLBACK

    # Gates
    require_price_above50: bool = True
    require_trend_aligned: bool = True  # SMA50 > SMA200
    require_entry_gate: bool = True
    allow_repeat_entries: bool = False
    cooldown_bars: int = COOLDOWN_BARS  # reserved: de-dup is a one-bar look-back

    # Reserved flags (declared, currently no-ops)
    require_macd_above0: bool = True
    use_mtf_confirm: bool = True
    use_base_tightness: bool = True
    use_candle_quality: bool = True
    use_gap_guard: bool = True

    # Reserved tightness params
    bb_len: int = BB_LEN
    bb_mult: float = BB_MULT

    def __post_init__(self) -> None:
        if not isinstance(self.entry_mode, EntryMode):
            raise InvalidInput(f"entry_mode must be an EntryMode, got {self.entry_mode!r}")
        _validate_config(
            rsi_min=self.rsi_min,
            rsi_max=self.rsi_max,
            rel_vol_min=self.rel_vol_min,
            atr_mult=self.atr_mult,
            max_stretch_pct=self.max_stretch_pct,
            near_pct50=self.near_pct50,
            cooldown_bars=self.cooldown_bars,
            bb_len=self.bb_len,
            bb_mult=self.bb_mult,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["entry_mode"] = self.entry_mode.value
        return data


BASE_CONFIG = SwingConfig()


# Partial overrides per preset (applied on top of BASE_CONFIG)
PRESET_OVERRIDES: Mapping[str, Mapping[str, Any]] = MappingProxyType({
    "manual": MappingProxyType({}),

    # Very loose settings to surface every bar with defined indicators
    "debug": MappingProxyType({
        "rsi_min": 0.0,
        "rsi_max": 100.0,
        "rel_vol_min": 0.0,
        "atr_mult": 3.0,
        "max_stretch_pct": 200.0,
        "near_pct50": 200.0,
        "entry_mode": EntryMode.BREAKOUT,
        "cooldown_bars": 0,
        "require_price_above50": False,
        "require_trend_aligned": False,
        "require_entry_gate": False,
        "require_macd_above0": False,
        "allow_repeat_entries": True,  # cooldown 0: no repeat suppression
        "use_mtf_confirm": False,
        "use_base_tightness": False,
        "use_candle_quality": False,
        "use_gap_guard": False,
    }),

    "aggressive": MappingProxyType({
        "rsi_min": 40.0,
        "rsi_max": 65.0,
        "rel_vol_min": 1.3,
        "atr_mult": 1.5,
        "max_stretch_pct": 15.0,
        "near_pct50": 10.0,
        "entry_mode": EntryMode.BREAKOUT,
        "cooldown_bars": 3,
    }),

    "balanced": MappingProxyType({
        "rsi_min": 43.0,
        "rsi_max": 62.0,
        "rel_vol_min": 1.5,
        "atr_mult": 1.5,
        "max_stretch_pct": 12.0,
        "near_pct50": 8.0,
        "entry_mode": EntryMode.BREAKOUT,
        "cooldown_bars": 4,
    }),

    "conservative": MappingProxyType({
        "rsi_min": 45.0,
        "rsi_max": 60.0,
        "rel_vol_min": 1.8,
        "atr_mult": 1.5,
        "max_stretch_pct": 10.0,
        "near_pct50": 6.0,
        "entry_mode": EntryMode.PULLBACK,
        "cooldown_bars": 5,
    }),
})

PRESET_NAMES = tuple(PRESET_OVERRIDES.keys())


# Field kinds for override coercion
_BOOL_FIELDS = frozenset({
    "require_price_above50", "require_trend_aligned", "require_entry_gate",
    "allow_repeat_entries", "require_macd_above0", "use_mtf_confirm",
    "use_base_tightness", "use_candle_quality", "use_gap_guard",
})
_INT_FIELDS = frozenset({"cooldown_bars", "bb_len"})
_FLOAT_FIELDS = frozenset({
    "rsi_min", "rsi_max", "rel_vol_min", "atr_mult",
    "max_stretch_pct", "near_pct50", "bb_mult",
})
OVERRIDABLE_FIELDS = frozenset(f.name for f in fields(SwingConfig)) - {"preset"}

# camelCase names used by the serving layer
_CAMEL_ALIASES = {
    "rsiMin": "rsi_min",
    "rsiMax": "rsi_max",
    "relVolMin": "rel_vol_min",
    "atrMult": "atr_mult",
    "maxStretchPct": "max_stretch_pct",
    "nearPct50": "near_pct50",
    "entryMode": "entry_mode",
    "requirePriceAbove50": "require_price_above50",
    "requireTrendAligned": "require_trend_aligned",
    "requireEntryGate": "require_entry_gate",
    "allowRepeatEntries": "allow_repeat_entries",
    "cooldownBars": "cooldown_bars",
    "requireMacdAbove0": "require_macd_above0",
    "useMTFConfirm": "use_mtf_confirm",
    "useBaseTightness": "use_base_tightness",
    "useCandleQuality": "use_candle_quality",
    "useGapGuard": "use_gap_guard",
    "bbLen": "bb_len",
    "bbMult": "bb_mult",
}

_TRUE_STRINGS = frozenset({"true", "1", "yes", "on"})
_FALSE_STRINGS = frozenset({"false", "0", "no", "off"})


def _coerce_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        v = value.strip().lower()
        if v in _TRUE_STRINGS:
            return True
        if v in _FALSE_STRINGS:
            return False
    raise InvalidInput(f"{name} must be a boolean, got {value!r}")


def _coerce_float(name: str, value: Any) -> float:
    if isinstance(value, bool):
        raise InvalidInput(f"{name} must be a number, got {value!r}")
    if isinstance(value, (int, float)):
        out = float(value)
    elif isinstance(value, str):
        try:
            out = float(value.strip())
        except ValueError:
            raise InvalidInput(f"{name} must be a number, got {value!r}") from None
    else:
        raise InvalidInput(f"{name} must be a number, got {value!r}")
    if not math.isfinite(out):
        raise InvalidInput(f"{name} must be finite, got {value!r}")
    return out


def _coerce_int(name: str, value: Any) -> int:
    out = _coerce_float(name, value)
    if not out.is_integer():
        raise InvalidInput(f"{name} must be an integer, got {value!r}")
    return int(out)


def _coerce_entry_mode(value: Any) -> EntryMode:
    if isinstance(value, EntryMode):
        return value
    if isinstance(value, str):
        try:
            return EntryMode(value.strip().lower())
        except ValueError:
            pass
    valid = ", ".join(m.value for m in EntryMode)
    raise InvalidInput(f"entry_mode must be one of {valid}, got {value!r}")


def normalize_overrides(overrides: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Validate and coerce a caller override payload.

    Keys may be snake_case field names or the camelCase names used by the
    serving layer. Unknown keys and values of the wrong type raise InvalidInput.

    Returns:
        Dict keyed by SwingConfig field name with typed values
    """
    if overrides is None:
        return {}
    if not isinstance(overrides, Mapping):
        raise InvalidInput(f"overrides must be a mapping, got {type(overrides).__name__}")

    out: Dict[str, Any] = {}
    for key, value in overrides.items():
        name = _CAMEL_ALIASES.get(key, key)
        if name not in OVERRIDABLE_FIELDS:
            raise InvalidInput(f"Unknown override '{key}'")
        if name in _BOOL_FIELDS:
            out[name] = _coerce_bool(name, value)
        elif name in _INT_FIELDS:
            out[name] = _coerce_int(name, value)
        elif name in _FLOAT_FIELDS:
            out[name] = _coerce_float(name, value)
        else:
            out[name] = _coerce_entry_mode(value)
    return out


def resolve_config(
    preset: str = DEFAULT_PRESET,
    overrides: Optional[Mapping[str, Any]] = None,
) -> SwingConfig:
    """
    Merge base defaults, preset overrides and caller overrides into one config.

    Args:
        preset: One of PRESET_NAMES (case-insensitive)
        overrides: Optional partial overrides (see normalize_overrides)

    Returns:
        Frozen SwingConfig

    Raises:
        InvalidInput: Unknown preset, malformed override or out-of-range value
    """
    name = str(preset).strip().lower()
    if name not in PRESET_OVERRIDES:
        raise InvalidInput(f"Unknown preset '{preset}'. Available: {list(PRESET_NAMES)}")
    caller = normalize_overrides(overrides)

    merged = {f.name: getattr(BASE_CONFIG, f.name) for f in fields(SwingConfig)}
    merged.update(PRESET_OVERRIDES[name])
    merged.update(caller)
    merged["preset"] = name
    return SwingConfig(**merged)
