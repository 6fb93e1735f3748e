"""
Serving-layer swing operations over a bar store.

SwingService wires the config resolver, the evaluator and the BarStore:
- analyze_swing: every signal for one ticker inside a date range
- evaluate_ticker_for_date: explained verdict for one ticker on one date
- scan_tickers_for_date: verdicts for every tracked ticker on one date
- run_daily_scan: top daily candidates across tracked tickers

Store errors surface as UpstreamFailure, except inside a fleet scan where each
ticker is isolated and a failure becomes that ticker's outcome.
"""
import logging
from collections import Counter
from typing import Any, Callable, List, Mapping, Optional

from ..data.store import BarStore
from ..shared.dates import add_days_int, from_int_date, today_int_utc
from ..shared.defaults import (
    DAILY_MIN_BARS,
    DAILY_MIN_MEDIAN_DOLLAR_VOL,
    DAILY_MIN_SCORE,
    DAILY_SCAN_LOOKBACK_DAYS,
    DAILY_TOP_N,
    LOOKBACK_BARS,
    LOOKBACK_CALENDAR_DAYS,
)
from ..shared.errors import InvalidInput, SwingError, UpstreamFailure
from ..shared.types import (
    EvaluationResult,
    FinalPick,
    PriceBar,
    ScanOutcome,
    Signal,
    TickerIdentity,
)
from ..signals.config import DEFAULT_PRESET, resolve_config
from ..signals.daily_score import evaluate_daily_candidate
from ..signals.evaluator import SwingEvaluator


logger = logging.getLogger(__name__)

REASON_TICKER_NOT_FOUND = "ticker not found"


def _check_date(name: str, value: int) -> int:
    try:
        from_int_date(value)
    except (TypeError, ValueError) as err:
        raise InvalidInput(f"{name} must be a valid YYYYMMDD date, got {value!r}") from err
    return int(value)


class SwingService:
    """
    Swing operations backed by a BarStore.

    Holds no state between calls apart from last_failure_summary, the
    failure-reason counts of the most recent fleet scan.
    """

    def __init__(self, store: BarStore):
        """
        Args:
            store: Ticker directory and bar source
        """
        self.store = store
        self.last_failure_summary: Counter = Counter()

    def _store_call(self, description: str, fn: Callable[..., Any], *args: Any) -> Any:
        """Call the store, wrapping any failure as UpstreamFailure."""
        try:
            return fn(*args)
        except SwingError:
            raise
        except Exception as err:
            raise UpstreamFailure(f"{description} failed: {err}") from err

    def _lookup(self, symbol: str) -> Optional[TickerIdentity]:
        identity = self._store_call(f"lookup of {symbol}", self.store.lookup_ticker, symbol)
        if identity is None:
            logger.info(f"Ticker {symbol} not found")
        return identity

    def _tracked_tickers(self) -> List[TickerIdentity]:
        return self._store_call("listing tracked tickers", self.store.list_tracked_tickers)

    def analyze_swing(
        self,
        ticker: str,
        from_date: int,
        to_date: Optional[int] = None,
        preset: str = DEFAULT_PRESET,
        overrides: Optional[Mapping[str, Any]] = None,
    ) -> List[Signal]:
        """
        All swing signals for one ticker dated within [from_date, to_date].

        Bars from LOOKBACK_CALENDAR_DAYS before from_date are fetched as
        indicator warm-up; signals in the warm-up window are discarded.

        Args:
            ticker: Symbol
            from_date: First signal date (YYYYMMDD)
            to_date: Last signal date (default: today, UTC)
            preset: Preset name
            overrides: Partial config overrides

        Returns:
            Signals in chronological order ([] for an unknown ticker)

        Raises:
            InvalidInput: Bad preset, override or date range
            UpstreamFailure: Store failure
        """
        config = resolve_config(preset, overrides)
        from_date = _check_date("from_date", from_date)
        to_date = today_int_utc() if to_date is None else _check_date("to_date", to_date)
        if from_date > to_date:
            raise InvalidInput(f"from_date {from_date} is after to_date {to_date}")

        identity = self._lookup(ticker)
        if identity is None:
            return []

        warmup_start = add_days_int(from_date, -LOOKBACK_CALENDAR_DAYS)
        bars: List[PriceBar] = self._store_call(
            f"fetching bars for {identity.symbol}",
            self.store.fetch_bars, identity.id, warmup_start, to_date,
        )
        signals = SwingEvaluator(config).scan(bars)
        in_range = [s for s in signals if from_date <= s.date <= to_date]
        logger.info(
            f"{identity.symbol}: {len(in_range)} signals between {from_date} and {to_date} "
            f"(preset={config.preset})"
        )
        return in_range

    def evaluate_ticker_for_date(
        self,
        ticker: str,
        date: int,
        preset: str = DEFAULT_PRESET,
        overrides: Optional[Mapping[str, Any]] = None,
        verbose: bool = False,
    ) -> EvaluationResult:
        """
        Explained verdict for one ticker on one date.

        Uses up to LOOKBACK_BARS bars dated on or before date.

        Raises:
            InvalidInput: Bad preset, override or date
            UpstreamFailure: Store failure
        """
        config = resolve_config(preset, overrides)
        date = _check_date("date", date)

        identity = self._lookup(ticker)
        if identity is None:
            return EvaluationResult(passed=False, reasons=[REASON_TICKER_NOT_FOUND])

        bars = self._store_call(
            f"fetching bars for {identity.symbol}",
            self.store.fetch_recent_bars_before, identity.id, date, LOOKBACK_BARS,
        )
        return SwingEvaluator(config).evaluate_at(bars, date, verbose=verbose)

    def scan_tickers_for_date(
        self,
        date: int,
        preset: str = DEFAULT_PRESET,
        overrides: Optional[Mapping[str, Any]] = None,
        verbose: bool = False,
    ) -> List[ScanOutcome]:
        """
        Evaluate every tracked ticker on one date.

        Tickers are evaluated one after another, each in its own error
        boundary. Passing tickers are always reported; failing tickers
        (including per-ticker errors) only when verbose.

        Args:
            date: Evaluation date (YYYYMMDD)
            preset: Preset name
            overrides: Partial config overrides
            verbose: Include failing tickers with their reasons

        Returns:
            ScanOutcome per reported ticker, in directory order

        Raises:
            InvalidInput: Bad preset, override or date
            UpstreamFailure: The ticker directory could not be listed
        """
        config = resolve_config(preset, overrides)
        date = _check_date("date", date)
        evaluator = SwingEvaluator(config)
        tickers = self._tracked_tickers()
        from_date = add_days_int(date, -LOOKBACK_CALENDAR_DAYS)
        next_entry_date = add_days_int(date, 1)

        outcomes: List[ScanOutcome] = []
        failure_counts: Counter = Counter()
        passed = 0
        for ticker in tickers:
            try:
                bars = self.store.fetch_bars(ticker.id, from_date, date)
                result = evaluator.evaluate_at(bars, date, verbose=verbose)
            except Exception as err:
                logger.error(f"Error evaluating {ticker.symbol} for {date}: {err}")
                failure_counts[str(err)] += 1
                if verbose:
                    outcomes.append(ScanOutcome(
                        id=ticker.id, symbol=ticker.symbol, passed=False, reasons=[str(err)],
                    ))
                continue

            if result.passed:
                passed += 1
                outcomes.append(ScanOutcome(
                    id=ticker.id,
                    symbol=ticker.symbol,
                    passed=True,
                    signal=result.signal,
                    next_entry_date=next_entry_date,
                ))
                continue

            failure_counts.update(result.reasons)
            if verbose:
                outcomes.append(ScanOutcome(
                    id=ticker.id, symbol=ticker.symbol, passed=False, reasons=list(result.reasons),
                ))

        self.last_failure_summary = failure_counts
        logger.info(
            f"Scan {date} (preset={config.preset}): {passed}/{len(tickers)} tickers passed"
        )
        for reason, count in failure_counts.most_common():
            logger.info(f"  {count:4d}  {reason}")
        return outcomes

    def run_daily_scan(
        self,
        lookback_days: int = DAILY_SCAN_LOOKBACK_DAYS,
        min_median_dollar_vol: float = DAILY_MIN_MEDIAN_DOLLAR_VOL,
        min_daily_score: float = DAILY_MIN_SCORE,
        top_n: int = DAILY_TOP_N,
        as_of: Optional[int] = None,
    ) -> List[FinalPick]:
        """
        Rank tracked tickers by daily candidate score.

        Args:
            lookback_days: Calendar days of history to load per ticker
            min_median_dollar_vol: Liquidity floor
            min_daily_score: Minimum score to qualify
            top_n: Maximum picks returned
            as_of: Scan date (default: today, UTC)

        Returns:
            FinalPicks sorted by score, best first
        """
        if lookback_days < 1 or top_n < 1:
            raise InvalidInput("lookback_days and top_n must be positive")
        as_of = today_int_utc() if as_of is None else _check_date("as_of", as_of)
        since = add_days_int(as_of, -lookback_days)

        picks: List[FinalPick] = []
        for ticker in self._tracked_tickers():
            try:
                bars = self.store.fetch_bars(ticker.id, since, as_of)
            except Exception as err:
                logger.error(f"Error loading bars for {ticker.symbol}: {err}")
                continue
            if len(bars) < DAILY_MIN_BARS:
                logger.debug(f"{ticker.symbol}: only {len(bars)} bars since {since}, skipping")
                continue

            candidate = evaluate_daily_candidate(
                ticker.symbol, bars,
                min_median_dollar_vol=min_median_dollar_vol,
                min_daily_score=min_daily_score,
            )
            if candidate is None:
                continue

            logger.info(f"Picked {ticker.symbol} with score {candidate.daily_score:.3f}")
            picks.append(FinalPick(
                symbol=candidate.symbol,
                final_score=candidate.daily_score,
                daily_score=candidate.daily_score,
                entry_pivot=candidate.pivot_high,
                stop_suggestion=candidate.stop_suggestion,
                risk_per_share=candidate.risk_per_share,
            ))

        picks.sort(key=lambda p: p.final_score, reverse=True)
        return picks[:top_n]
