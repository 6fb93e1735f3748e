"""
Swing-entry signal engine.

Provides unified interfaces for:
- Indicator calculations (SMA, EMA, RSI, ATR, rolling highs)
- Swing configuration presets and overrides
- Signal evaluation (full-history scan and single-date point evaluation)
- Fleet scanning across all tracked tickers
"""
