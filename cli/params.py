#!/usr/bin/env python3
"""
Parameter reference CLI.

Shows all configurable swing parameters, their defaults, and the presets.
"""
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from swingscan.shared.defaults import (
    SMA_SHORT_PERIOD, SMA_LONG_PERIOD, EMA_PERIOD, RSI_PERIOD,
    ATR_PERIOD, HIGHEST_PERIOD, VOLUME_SMA_PERIOD,
    SWING_LEN, SWING_STOP_BUFFER_PCT, TARGET_R_MULTIPLES,
    LOOKBACK_BARS, LOOKBACK_CALENDAR_DAYS,
    DAILY_MIN_BARS, DAILY_SCAN_LOOKBACK_DAYS, DAILY_MIN_MEDIAN_DOLLAR_VOL,
    DAILY_MIN_SCORE, DAILY_TOP_N,
)
from swingscan.signals.config import (
    BASE_CONFIG, DEFAULT_PRESET, PRESET_NAMES, RESERVED_FLAGS, resolve_config,
)


# Columns shown in the preset comparison table
PRESET_COLUMNS = [
    ("rsi_min", "rsiMin"),
    ("rsi_max", "rsiMax"),
    ("rel_vol_min", "relVol"),
    ("atr_mult", "atrX"),
    ("max_stretch_pct", "stretch%"),
    ("near_pct50", "near50%"),
    ("entry_mode", "mode"),
    ("allow_repeat_entries", "repeat"),
]


def _fmt(value) -> str:
    if hasattr(value, "value"):
        return str(value.value)
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


def format_preset_table() -> str:
    """Preset comparison table, one row per preset."""
    header = f"  {'preset':<14}" + "".join(f"{label:>10}" for _, label in PRESET_COLUMNS)
    lines = [header, "  " + "-" * (len(header) - 2)]
    for name in PRESET_NAMES:
        config = resolve_config(name)
        row = f"  {name:<14}" + "".join(f"{_fmt(getattr(config, field)):>10}" for field, _ in PRESET_COLUMNS)
        lines.append(row)
    return "\n".join(lines)


def main():
    """Print all configurable parameters with their defaults and the presets."""

    print("=" * 80)
    print("SWING SIGNAL PARAMETER REFERENCE")
    print("=" * 80)
    print()

    print("INDICATORS (fixed periods)")
    print("-" * 80)
    print(f"  SMA short / long     {SMA_SHORT_PERIOD} / {SMA_LONG_PERIOD} bars on close")
    print(f"  EMA                  {EMA_PERIOD} bars on close (seeded with first close)")
    print(f"  RSI                  {RSI_PERIOD} bars (simple average of gains/losses)")
    print(f"  ATR                  {ATR_PERIOD} bars (EMA of true range)")
    print(f"  Breakout high        {HIGHEST_PERIOD}-bar highest high, prior bar")
    print(f"  Volume average       {VOLUME_SMA_PERIOD}-bar SMA of volume")
    print(f"  Minimum history      {SMA_LONG_PERIOD} bars before any bar can pass")
    print()

    print("THRESHOLDS (override with --override KEY=VALUE)")
    print("-" * 80)
    print()
    print(f"  rsiMin / rsiMax       RSI band: {_fmt(BASE_CONFIG.rsi_min)}-{_fmt(BASE_CONFIG.rsi_max)} (base)")
    print("                        Range: 0-100, rsiMin <= rsiMax")
    print(f"  relVolMin             Volume / 20-day average: {_fmt(BASE_CONFIG.rel_vol_min)} (base)")
    print(f"  atrMult               Stop distance in ATRs: {_fmt(BASE_CONFIG.atr_mult)} (base)")
    print(f"  maxStretchPct         Max % above SMA50: {_fmt(BASE_CONFIG.max_stretch_pct)} (base)")
    print(f"  nearPct50             Pullback proximity to SMA50 (%): {_fmt(BASE_CONFIG.near_pct50)} (base)")
    print(f"  entryMode             breakout | pullback | any: {_fmt(BASE_CONFIG.entry_mode)} (base)")
    print()

    print("GATES")
    print("-" * 80)
    print()
    print("  requirePriceAbove50   Close must be above SMA50 (default: yes)")
    print("  requireTrendAligned   SMA50 must be above SMA200 (default: yes)")
    print("  requireEntryGate      Breakout/pullback gate must pass (default: yes)")
    print("  allowRepeatEntries    Fire on consecutive passing bars (default: no)")
    print("                        When off, a bar fires only if the previous bar did not pass")
    print()
    print("  Reserved (accepted, no effect yet):")
    print("    " + ", ".join(RESERVED_FLAGS))
    print()

    print("SIGNAL CONSTRUCTION")
    print("-" * 80)
    print()
    print(f"  Stop     min(entry - atrMult * ATR(prev bar), {SWING_LEN}-bar swing low - {SWING_STOP_BUFFER_PCT}%)")
    print(f"  Targets  entry + {', '.join(f'{r:g}' for r in TARGET_R_MULTIPLES)} R")
    print(f"  rrToSwing  ({SWING_LEN}-bar swing high - entry) / R")
    print()

    print("PRESETS (--preset NAME)")
    print("-" * 80)
    print()
    print(format_preset_table())
    print()
    print(f"  Default: {DEFAULT_PRESET}")
    print("  debug disables every gate and allows repeat entries")
    print()

    print("DATA WINDOWS")
    print("-" * 80)
    print()
    print(f"  Point evaluation    last {LOOKBACK_BARS} bars up to the date")
    print(f"  Fleet scan          {LOOKBACK_CALENDAR_DAYS} calendar days up to the date")
    print(f"  Range analysis      {LOOKBACK_CALENDAR_DAYS} calendar days of warm-up before --from")
    print()

    print("DAILY SCAN")
    print("-" * 80)
    print()
    print(f"  --lookback-days     {DAILY_SCAN_LOOKBACK_DAYS} (tickers with < {DAILY_MIN_BARS} bars skipped)")
    print(f"  --min-dollar-volume {DAILY_MIN_MEDIAN_DOLLAR_VOL:,.0f} (40-bar median close * volume)")
    print(f"  --min-score         {DAILY_MIN_SCORE:g}")
    print(f"  --top-n             {DAILY_TOP_N}")
    print()

    print("=" * 80)
    print()
    print("USAGE EXAMPLES:")
    print("-" * 80)
    print()
    print("  # Signals since 2024 with defaults")
    print("  python -m cli.swing analyze AAPL --from 2024-01-01")
    print()
    print("  # Explain one date with a looser RSI band")
    print("  python -m cli.swing evaluate AAPL --date 2024-06-03 --override rsiMin=40 --explain")
    print()
    print("  # Fleet scan with the conservative preset")
    print("  python -m cli.swing scan --date 2024-06-03 --preset conservative")
    print()
    print("=" * 80)

    return 0


if __name__ == "__main__":
    sys.exit(main())
