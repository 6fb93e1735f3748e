"""
Data access module.

BarStore interface to the external bar/ticker store, with in-memory and
CSV-directory implementations and OHLCV frame conversion helpers.
"""
from .store import (
    BarStore,
    InMemoryBarStore,
    CsvBarStore,
    bars_to_frame,
    frame_to_bars,
    normalize_bars,
)

__all__ = [
    'BarStore',
    'InMemoryBarStore',
    'CsvBarStore',
    'bars_to_frame',
    'frame_to_bars',
    'normalize_bars',
]
