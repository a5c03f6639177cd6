"""
Market Scanner
Runs the signal strategy over the whole asset universe concurrently
"""

import time
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Sequence

from core.errors import DataInsufficientError
from core.models import AssetClass, AssetSpec, ScanResult, Signal, SignalType, Venue, is_finite_price


# Bars required before a signal is computed
MIN_HISTORY_POINTS = 20


def find_best_opportunities(signals: Sequence[Signal], min_strength: float = 50,
                            limit: int = 5) -> List[Signal]:
    """
    Strongest non-HOLD signals at or above min_strength

    Ties keep their input order.
    """
    actionable = [
        s for s in signals
        if s.signal_type is not SignalType.HOLD and s.strength >= min_strength
    ]
    return sorted(actionable, key=lambda s: s.strength, reverse=True)[:limit]


class MarketScanner:
    """
    Multi-venue scanner
    One failing asset never aborts the batch; failures are counted in the result
    """

    def __init__(self, adapters: Dict[Venue, object], strategy, logger, journal=None,
                 history_bars: int = 100, max_workers: int = 8):
        """
        Initialize scanner

        Args:
            adapters: Venue adapter per venue
            strategy: Strategy exposing analyze(series)
            logger: Logger instance
            journal: Optional TradeJournal receiving signal events
            history_bars: Bars requested per asset
            max_workers: Thread pool size
        """
        self.adapters = adapters
        self.strategy = strategy
        self.logger = logger
        self.journal = journal
        self.history_bars = max(history_bars, MIN_HISTORY_POINTS)
        self.max_workers = max(1, max_workers)

    def _fetch_signal(self, spec: AssetSpec) -> Optional[Signal]:
        adapter = self.adapters[spec.venue]
        symbol = spec.symbol

        if spec.asset_class is AssetClass.CRYPTO:
            symbol = adapter.resolve_available_symbol(spec.symbol, spec.fallback_symbol)
            if not symbol:
                self.logger.debug(f"{spec.symbol} not tradable on {adapter.name}, skipping")
                return None

        series = adapter.get_historical_series(symbol, self.history_bars)
        if len(series) < MIN_HISTORY_POINTS:
            raise DataInsufficientError(
                f"Insufficient data for {symbol}",
                symbol=symbol,
                available=len(series),
                required=MIN_HISTORY_POINTS
            )

        price = adapter.get_spot_price(symbol)
        if not is_finite_price(price):
            self.logger.debug(f"No current price for {symbol}, skipping")
            return None

        analysis = self.strategy.analyze(series)
        return Signal(
            symbol=symbol,
            venue=spec.venue,
            asset_class=spec.asset_class,
            current_price=price,
            indicator_value=analysis['indicator_value'],
            signal_type=analysis['signal_type'],
            strength=analysis['strength'],
        )

    def scan_asset(self, spec: AssetSpec) -> Optional[Signal]:
        """Signal for one asset, or None when it cannot be computed"""
        try:
            return self._fetch_signal(spec)
        except DataInsufficientError as e:
            self.logger.debug(f"{e} ({e.available}/{e.required} bars)")
        except Exception as e:
            self.logger.error(f"Error scanning {spec.symbol}: {e}")
        return None

    def scan_all(self, universe: Sequence[AssetSpec]) -> ScanResult:
        """
        Scan every asset concurrently and wait for all of them

        Returns:
            ScanResult with buy/sell lists sorted by strength (descending)
        """
        start = time.time()
        signals: List[Signal] = []
        error_count = 0

        if universe:
            with ThreadPoolExecutor(max_workers=min(self.max_workers, len(universe))) as executor:
                futures = [(spec, executor.submit(self._fetch_signal, spec)) for spec in universe]

                # Submission order keeps ties stable
                for spec, future in futures:
                    try:
                        signal = future.result()
                    except DataInsufficientError as e:
                        self.logger.debug(f"{e} ({e.available}/{e.required} bars)")
                        continue
                    except Exception as e:
                        error_count += 1
                        self.logger.error(f"Error scanning {spec.symbol}: {e}")
                        continue

                    if signal is not None:
                        signals.append(signal)

        buy = sorted((s for s in signals if s.signal_type is SignalType.BUY),
                     key=lambda s: s.strength, reverse=True)
        sell = sorted((s for s in signals if s.signal_type is SignalType.SELL),
                      key=lambda s: s.strength, reverse=True)
        hold = [s for s in signals if s.signal_type is SignalType.HOLD]

        for signal in buy + sell:
            self.logger.signal_detected(
                symbol=signal.symbol,
                signal_type=signal.signal_type.value,
                strength=signal.strength,
                indicator=signal.indicator_value,
                venue=signal.venue.display_name
            )

        if self.journal is not None:
            self.journal.record_signals(signals)

        duration = time.time() - start
        result = ScanResult(
            signals=signals,
            buy=buy,
            sell=sell,
            hold=hold,
            error_count=error_count,
            duration=duration,
        )

        self.logger.scan_summary(
            total=result.total,
            buy_count=result.buy_count,
            sell_count=result.sell_count,
            errors=error_count,
            duration=duration
        )
        return result

    def find_best_opportunities(self, signals: Sequence[Signal], min_strength: float = 50,
                                limit: int = 5) -> List[Signal]:
        return find_best_opportunities(signals, min_strength, limit)
