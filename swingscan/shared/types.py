"""
Shared types for swing signal modules.

This module consolidates the value types passed between the store, the
evaluator and the fleet scanner. All of them are transient: created per
call and discarded after use.
"""
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class EntryMode(Enum):
    """Which entry gate a bar must satisfy."""
    BREAKOUT = "breakout"
    PULLBACK = "pullback"
    ANY = "any"


@dataclass(frozen=True)
class PriceBar:
    """One daily OHLCV observation. trade_date is an integer YYYYMMDD."""
    trade_date: int
    open: float
    high: float
    low: float
    close: float
    volume: int = 0


@dataclass(frozen=True)
class TickerIdentity:
    """Row of the ticker directory."""
    id: int
    symbol: str
    exchange: str = "UNKNOWN"
    asset_type: str = "STOCK"


@dataclass(frozen=True)
class SignalMeta:
    """Indicator values at signal time (for operator review)."""
    rsi: float
    rel_vol: float
    pct_above50: float
    entry_mode: EntryMode


@dataclass(frozen=True)
class Signal:
    """
    A swing entry with stop and R-multiple targets.

    Immutable value: two signals are equal when all their fields are.
    """
    date: int
    entry_px: float
    stop: float
    targets: Tuple[float, float, float]
    rr_to_swing: Optional[float]
    meta: SignalMeta

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        data = asdict(self)
        data["targets"] = list(self.targets)
        data["meta"]["entry_mode"] = self.meta.entry_mode.value
        return data


@dataclass
class EvaluationResult:
    """Outcome of evaluating one ticker on one date."""
    passed: bool
    reasons: List[str] = field(default_factory=list)
    signal: Optional[Signal] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"passed": self.passed, "reasons": list(self.reasons)}
        if self.signal is not None:
            data["signal"] = self.signal.to_dict()
        return data


@dataclass
class ScanOutcome:
    """Per-ticker entry of a fleet scan."""
    id: int
    symbol: str
    passed: bool
    signal: Optional[Signal] = None
    next_entry_date: Optional[int] = None
    reasons: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        if self.passed:
            return {
                "id": self.id,
                "symbol": self.symbol,
                "signals": [self.signal.to_dict()] if self.signal is not None else [],
                "nextEntryDate": self.next_entry_date,
            }
        return {
            "id": self.id,
            "symbol": self.symbol,
            "passed": False,
            "reasons": list(self.reasons),
        }


@dataclass(frozen=True)
class DailyCandidate:
    """Daily-score breakdown for one ticker."""
    symbol: str
    daily_score: float
    trend_score: float
    contraction_score: float
    structure_score: float
    pivot_high: float
    stop_suggestion: float
    atr14: float
    risk_per_share: float
    median_dollar_volume40: float


@dataclass(frozen=True)
class FinalPick:
    """Ranked daily-scan result."""
    symbol: str
    final_score: float  # == daily_score (no intraday component)
    daily_score: float
    entry_pivot: float
    stop_suggestion: float
    risk_per_share: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
