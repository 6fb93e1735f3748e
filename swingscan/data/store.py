"""
Bar and ticker store collaborators.

The engine reads price history only through the BarStore interface:
ticker lookup, the tracked-ticker directory, and bar retrieval by date range.
Two implementations ship here:
- InMemoryBarStore: bars held in memory (tests, embedding in a server)
- CsvBarStore: one SYMBOL.csv per ticker (Date,Open,High,Low,Close,Volume)

Every fetch returns bars ascending by trade_date with duplicate dates removed.
"""
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Union

import numpy as np
import pandas as pd

from ..shared.defaults import LOOKBACK_BARS
from ..shared.types import PriceBar, TickerIdentity


logger = logging.getLogger(__name__)

PRICE_COLUMNS = ["Open", "High", "Low", "Close"]


def bars_to_frame(bars: Sequence[PriceBar]) -> pd.DataFrame:
    """Convert bars to a positional DataFrame with Date/Open/High/Low/Close/Volume columns."""
    return pd.DataFrame({
        "Date": np.array([b.trade_date for b in bars], dtype=np.int64),
        "Open": np.array([b.open for b in bars], dtype=float),
        "High": np.array([b.high for b in bars], dtype=float),
        "Low": np.array([b.low for b in bars], dtype=float),
        "Close": np.array([b.close for b in bars], dtype=float),
        "Volume": np.array([b.volume for b in bars], dtype=float),
    })


def _int_dates(values: Union[pd.Index, pd.Series]) -> np.ndarray:
    """Datetime-like or YYYYMMDD-like values -> int64 YYYYMMDD."""
    if pd.api.types.is_integer_dtype(values):
        return np.asarray(values, dtype=np.int64)
    ts = pd.DatetimeIndex(pd.to_datetime(values))
    return np.asarray(ts.year * 10000 + ts.month * 100 + ts.day, dtype=np.int64)


def frame_to_bars(df: pd.DataFrame) -> List[PriceBar]:
    """
    Normalize an OHLCV DataFrame into an ascending, deduplicated bar list.

    The date comes from a 'Date' column when present, otherwise from the index.
    Rows with non-finite prices are dropped; missing volume counts as 0.
    The first row wins when a date repeats.

    Args:
        df: DataFrame with Open/High/Low/Close (and optionally Volume) columns

    Returns:
        List of PriceBar sorted by trade_date
    """
    missing = [c for c in PRICE_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Price data missing required columns: {missing}")
    if df.empty:
        return []

    dates = _int_dates(df["Date"]) if "Date" in df.columns else _int_dates(df.index)
    out = pd.DataFrame({c: pd.to_numeric(df[c], errors="coerce").to_numpy() for c in PRICE_COLUMNS})
    volume = df["Volume"] if "Volume" in df.columns else pd.Series(0, index=df.index)
    out["Volume"] = pd.to_numeric(volume, errors="coerce").fillna(0).to_numpy()
    out["Date"] = dates

    finite = np.isfinite(out[PRICE_COLUMNS].to_numpy()).all(axis=1)
    dropped = int((~finite).sum())
    if dropped:
        logger.debug(f"Dropped {dropped} rows with invalid prices")
    out = out[finite]
    out = out.drop_duplicates(subset="Date", keep="first").sort_values("Date", kind="stable")

    return [
        PriceBar(
            trade_date=int(row.Date),
            open=float(row.Open),
            high=float(row.High),
            low=float(row.Low),
            close=float(row.Close),
            volume=int(row.Volume),
        )
        for row in out.itertuples(index=False)
    ]


def normalize_bars(bars: Iterable[PriceBar]) -> List[PriceBar]:
    """Sort by trade_date and keep the first bar of each date."""
    seen = set()
    unique = []
    for bar in sorted(bars, key=lambda b: b.trade_date):
        if bar.trade_date not in seen:
            seen.add(bar.trade_date)
            unique.append(bar)
    return unique


class BarStore(ABC):
    """Read interface to the external bar/ticker store."""

    @abstractmethod
    def lookup_ticker(self, symbol: str) -> Optional[TickerIdentity]:
        """Return the ticker identity for a symbol, or None if unknown."""
        raise NotImplementedError

    @abstractmethod
    def list_tracked_tickers(self) -> List[TickerIdentity]:
        """Return all tickers the fleet scan should cover."""
        raise NotImplementedError

    @abstractmethod
    def fetch_bars(self, ticker_id: int, from_date: int, to_date: int) -> List[PriceBar]:
        """Return bars with from_date <= trade_date <= to_date, ascending, deduplicated."""
        raise NotImplementedError

    def fetch_recent_bars_before(
        self,
        ticker_id: int,
        on_or_before: int,
        max_count: int = LOOKBACK_BARS,
    ) -> List[PriceBar]:
        """Return up to max_count most recent bars dated on or before on_or_before, ascending."""
        bars = self.fetch_bars(ticker_id, 0, on_or_before)
        if max_count <= 0:
            return []
        return bars[-max_count:]


def _slice_range(bars: Sequence[PriceBar], from_date: int, to_date: int) -> List[PriceBar]:
    return [b for b in bars if from_date <= b.trade_date <= to_date]


class InMemoryBarStore(BarStore):
    """
    Bar store backed by in-memory bar lists.

    Ticker ids are assigned 1.. in the order symbols are given. Only tickers
    whose asset type is STOCK are tracked for fleet scans.
    """

    def __init__(
        self,
        bars_by_symbol: Mapping[str, Iterable[PriceBar]],
        asset_types: Optional[Mapping[str, str]] = None,
    ):
        asset_types = asset_types or {}
        self._tickers: List[TickerIdentity] = []
        self._bars: Dict[int, List[PriceBar]] = {}
        for i, (symbol, bars) in enumerate(bars_by_symbol.items(), start=1):
            identity = TickerIdentity(
                id=i,
                symbol=symbol,
                asset_type=asset_types.get(symbol, "STOCK"),
            )
            self._tickers.append(identity)
            self._bars[i] = normalize_bars(bars)
        self._by_symbol = {t.symbol: t for t in self._tickers}

    def lookup_ticker(self, symbol: str) -> Optional[TickerIdentity]:
        return self._by_symbol.get(symbol)

    def list_tracked_tickers(self) -> List[TickerIdentity]:
        return [t for t in self._tickers if t.asset_type == "STOCK"]

    def fetch_bars(self, ticker_id: int, from_date: int, to_date: int) -> List[PriceBar]:
        if ticker_id not in self._bars:
            raise KeyError(f"Unknown ticker id {ticker_id}")
        return _slice_range(self._bars[ticker_id], from_date, to_date)


class CsvBarStore(BarStore):
    """
    Bar store reading one CSV file per ticker from a directory.

    Files are named SYMBOL.csv with a Date index column and OHLCV columns,
    as written by the price download tooling. The directory is listed once at
    construction: ticker ids are assigned 1.. in sorted symbol order and stay
    bound to that file for the life of the store. Files added later are not
    visible until a new store is built.
    """

    def __init__(self, data_dir: Union[str, Path]):
        """
        Args:
            data_dir: Directory containing SYMBOL.csv files
        """
        self.data_dir = Path(data_dir)
        if not self.data_dir.is_dir():
            raise FileNotFoundError(f"Data directory not found: {self.data_dir}")

        paths = sorted(self.data_dir.glob("*.csv"), key=lambda p: p.stem)
        self._tickers: List[TickerIdentity] = [
            TickerIdentity(id=i, symbol=p.stem) for i, p in enumerate(paths, start=1)
        ]
        self._paths: Dict[int, Path] = {t.id: p for t, p in zip(self._tickers, paths)}
        self._by_symbol = {t.symbol: t for t in self._tickers}
        logger.debug(f"Indexed {len(self._tickers)} tickers in {self.data_dir}")

    def lookup_ticker(self, symbol: str) -> Optional[TickerIdentity]:
        if symbol in self._by_symbol:
            return self._by_symbol[symbol]
        for t in self._tickers:
            if t.symbol.upper() == symbol.upper():
                return t
        return None

    def list_tracked_tickers(self) -> List[TickerIdentity]:
        return list(self._tickers)

    def fetch_bars(self, ticker_id: int, from_date: int, to_date: int) -> List[PriceBar]:
        if ticker_id not in self._paths:
            raise KeyError(f"Unknown ticker id {ticker_id}")
        path = self._paths[ticker_id]
        df = pd.read_csv(path, index_col=0)
        bars = frame_to_bars(df)
        logger.debug(f"Loaded {len(bars)} bars from {path}")
        return _slice_range(bars, from_date, to_date)
