"""
Trading Bot
Run-state machine driving the scan -> decide -> act cycle across both venues
"""

import threading
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from core.errors import ConnectivityError, CycleError, HaltCondition, OrderRejected
from core.models import AssetClass, AssetSpec, Position, RunState, Signal, TradeRecord, Venue
from core.position_manager import PositionManager
from core.scheduler import CycleScheduler


MIN_SIGNAL_STRENGTH = 50
OPPORTUNITY_POOL_SIZE = 5
TOP_CANDIDATE_COUNT = 3


class TradingBot:
    """
    Orchestrator
    STOPPED -> RUNNING -> PAUSED/STOPPED; one cycle per scheduler tick
    """

    def __init__(self, config, logger, venues, risk_manager, scanner, journal=None,
                 universe: Optional[Sequence[AssetSpec]] = None):
        """
        Initialize trading bot

        Args:
            config: Configuration object
            logger: Logger instance
            venues: VenueManager holding one adapter per venue
            risk_manager: RiskManager instance
            scanner: MarketScanner instance
            journal: Optional TradeJournal for trade and session events
            universe: Assets to scan (defaults to config.universe())
        """
        self.config = config
        self.logger = logger
        self.venues = venues
        self.risk_manager = risk_manager
        self.scanner = scanner
        self.journal = journal
        self.universe: List[AssetSpec] = list(universe) if universe is not None else config.universe()

        self.min_signal_strength = getattr(config, 'MIN_SIGNAL_STRENGTH', MIN_SIGNAL_STRENGTH)
        self.top_candidate_count = getattr(config, 'TOP_CANDIDATE_COUNT', TOP_CANDIDATE_COUNT)

        self.state = RunState.STOPPED
        self.positions = PositionManager(logger)
        self.scheduler: Optional[CycleScheduler] = None
        self.halt: Optional[HaltCondition] = None
        self._lock = threading.RLock()

        self.stats: Dict[str, Any] = {
            'trades_executed': 0,
            'last_scan_time': None,
            'last_signals': [],
            'errors': 0,
            'cycles_run': 0,
            'last_error': None,
        }

        self.logger.system("Trading bot initialized", assets=len(self.universe))

    # Control surface

    def start(self, universe: Optional[Sequence[AssetSpec]] = None) -> bool:
        """
        Start trading

        Returns:
            True when the bot entered RUNNING
        """
        with self._lock:
            if self.state is RunState.RUNNING:
                self.logger.warning("Bot already running")
                return False

            self.logger.system("Starting trading bot...")

            try:
                self.venues.test_connections()
                balance = self.venues.get_total_balance()['total']
            except ConnectivityError as e:
                self.state = RunState.STOPPED
                self.stats['last_error'] = str(e)
                self.logger.error(f"Failed to connect to venues: {e}")
                return False

            if universe is not None:
                self.universe = list(universe)

            self.risk_manager.reset_daily_session(balance)
            self.halt = None
            self.stats['last_error'] = None
            self.state = RunState.RUNNING

            self.logger.system(
                f"Bot started - monitoring {len(self.universe)} assets",
                interval=f"{self.config.scan_interval_seconds:.0f}s"
            )

            self.run_cycle()

            # The first cycle may already have halted trading
            if self.state is RunState.RUNNING:
                self._schedule()

            return self.state is RunState.RUNNING

    def pause(self) -> bool:
        with self._lock:
            self._cancel_schedule()
            if self.state is not RunState.RUNNING:
                return False
            self.state = RunState.PAUSED
            self.logger.system("Bot paused")
            return True

    def stop(self) -> bool:
        with self._lock:
            self._cancel_schedule()
            previous = self.state
            self.state = RunState.STOPPED
            if previous is not RunState.STOPPED and self.journal is not None:
                self.journal.record_session(self.risk_manager.session_stats())
            self.logger.system("Bot stopped")
            return True

    def get_status(self) -> Dict[str, Any]:
        stats = dict(self.stats)
        stats['last_signals'] = [s.to_document() for s in self.stats['last_signals']]
        if isinstance(stats['last_scan_time'], datetime):
            stats['last_scan_time'] = stats['last_scan_time'].isoformat()

        return {
            'status': self.state.value,
            'halt_reason': self.halt.reason if self.halt else None,
            'stats': stats,
            'session_stats': self.risk_manager.session_stats(),
        }

    def get_session_stats(self) -> Dict[str, Any]:
        return self.risk_manager.session_stats()

    def close_position(self, symbol: str) -> bool:
        """Close an open position by symbol on whichever venue holds it"""
        with self._lock:
            position = self.venues.find_position(symbol)
            if position is None:
                self.logger.warning(f"No open position for {symbol}")
                return False
            try:
                self._close(position, reason='manual')
            except (OrderRejected, ConnectivityError) as e:
                self.logger.error(f"Error closing position {symbol}: {e}")
                self.stats['last_error'] = str(e)
                return False
            return True

    # Scheduling

    def _schedule(self):
        self._cancel_schedule()
        self.scheduler = CycleScheduler(self.config.scan_interval_seconds, self.run_cycle, self.logger)
        self.scheduler.start()

    def _cancel_schedule(self):
        scheduler, self.scheduler = self.scheduler, None
        if scheduler is not None:
            scheduler.cancel()

    # Cycle

    def run_cycle(self):
        """Run one scan/decide/act cycle; no-op unless RUNNING"""
        with self._lock:
            if self.state is not RunState.RUNNING:
                return

            try:
                self._cycle()
            except Exception as e:
                error = CycleError(f"Error in scan cycle: {e}", context={'type': type(e).__name__})
                self.stats['errors'] += 1
                self.stats['last_error'] = str(error)
                self.logger.error(str(error), exc_info=True)
            finally:
                self.stats['cycles_run'] += 1

    def _cycle(self):
        balances = self.venues.get_total_balance()
        balance = balances['total']
        self.positions.load(self.venues.get_all_positions())

        self.risk_manager.update_daily_pnl(balance)

        if self.risk_manager.should_halt():
            self._halt(HaltCondition("Daily limits reached", reason='daily_limit'))
            return

        if self.risk_manager.circuit_breaker(balance):
            self.logger.critical("CIRCUIT BREAKER ACTIVATED. Closing all positions...")
            self.venues.close_all_positions()
            self._halt(HaltCondition("Circuit breaker tripped", reason='circuit_breaker'))
            return

        session = self.risk_manager.session
        self.logger.performance_update(
            balance=balance,
            daily_pnl=session.current_pnl,
            pnl_percent=self.risk_manager.session_stats()['pnl_percent'],
            open_positions=len(self.positions)
        )

        self._check_exits()

        if self.journal is not None:
            self.journal.prune_expired()

        result = self.scanner.scan_all(self.universe)
        self.stats['last_scan_time'] = datetime.now()
        self.stats['last_signals'] = list(result.signals)

        opportunities = self.scanner.find_best_opportunities(
            result.buy, self.min_signal_strength, OPPORTUNITY_POOL_SIZE
        )
        candidates = opportunities[:self.top_candidate_count]

        if candidates:
            self._execute_candidates(candidates)
        else:
            self.logger.info("No strong signals detected")

    def _halt(self, condition: HaltCondition):
        self.halt = condition
        self.logger.risk_layer_triggered(
            layer='TradingBot',
            reason=str(condition),
            action='Stopping bot'
        )
        if self.journal is not None:
            self.journal.log_event('CRITICAL', str(condition), reason=condition.reason)
        self.stop()

    def _check_exits(self):
        for position in self.positions.get_all_positions():
            if not self.risk_manager.should_exit(position):
                continue
            try:
                self._close(position, reason=self.risk_manager.exit_reason(position))
            except Exception as e:
                self.logger.error(f"Error closing position {position.symbol}: {e}")

    def _close(self, position: Position, reason: str):
        adapter = self.venues.get_adapter(position.venue)
        adapter.close_position(position.symbol)
        self.positions.remove_position(position.symbol)

        self.logger.trade_exit(
            symbol=position.symbol,
            pnl=position.unrealized_pnl,
            pnl_percent=position.unrealized_pnl_percent,
            reason=reason
        )
        if self.journal is not None:
            self.journal.record_trade(TradeRecord(
                symbol=position.symbol,
                venue=position.venue,
                side='sell',
                quantity=position.quantity,
                price=position.current_price,
                indicator_value=None,
            ))

    def _execute_candidates(self, candidates: Sequence[Signal]):
        self.logger.info(f"Found {len(candidates)} trading opportunities")
        market_open: Dict[Venue, bool] = {}

        for signal in candidates:
            symbol = signal.symbol
            venue = signal.venue
            adapter = self.venues.get_adapter(venue)

            if not self.risk_manager.can_open_position(self.positions.get_all_positions(), venue):
                self.logger.info(f"Position limit reached, skipping {symbol}")
                continue

            if self.positions.has_position(symbol):
                self.logger.info(f"Already have position in {symbol}, skipping")
                continue

            try:
                if venue not in market_open:
                    market_open[venue] = adapter.is_market_open()
                if not market_open[venue]:
                    self.logger.info(f"{adapter.name} market closed, skipping {symbol}")
                    continue

                self._buy(signal, adapter)
            except (OrderRejected, ConnectivityError) as e:
                self.logger.error(f"Failed to execute trade for {symbol}: {e}")
            except Exception as e:
                self.logger.error(f"Unexpected error trading {symbol}: {e}", exc_info=True)

    def _buy(self, signal: Signal, adapter):
        symbol = signal.symbol
        price = signal.current_price
        venue_balance = adapter.get_balance()

        # Equities size on free cash, crypto on the venue total
        if signal.asset_class is AssetClass.STOCK:
            funding = float(venue_balance.get('cash') or 0)
        else:
            funding = float(venue_balance.get('total') or 0)

        quantity = self.risk_manager.position_size(funding, price, signal.asset_class)

        minimum = adapter.minimum_order_size(symbol) if not quantity.is_discrete else 1
        if quantity.amount < minimum:
            self.logger.position_rejected(symbol=symbol, reason='Position too small', layer='TradingBot',
                                          quantity=str(quantity), minimum=minimum)
            return

        validation = self.risk_manager.validate_trade(
            'buy', symbol, quantity, price,
            self.positions.get_all_positions(), funding, venue=signal.venue
        )
        if not validation:
            self.logger.info(f"Trade rejected for {symbol}: {validation.reason}")
            return

        order = adapter.submit_market_order(symbol, quantity, 'buy')

        self.risk_manager.record_trade()
        self.stats['trades_executed'] += 1
        self.positions.add_provisional(symbol, signal.venue, quantity, price)

        self.logger.trade_entry(
            symbol=symbol,
            side='buy',
            quantity=str(quantity),
            price=price,
            venue=adapter.name,
            order_id=order.order_id,
            strength=f"{signal.strength:.0f}",
            stop_loss=f"{self.risk_manager.stop_loss.stop_loss_price(price):.2f}",
            take_profit=f"{self.risk_manager.stop_loss.take_profit_price(price):.2f}"
        )
        if self.journal is not None:
            self.journal.record_trade(TradeRecord(
                symbol=symbol,
                venue=signal.venue,
                side='buy',
                quantity=float(quantity),
                price=price,
                indicator_value=signal.indicator_value,
            ))
