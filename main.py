#!/usr/bin/env python3
"""
Dual-Venue Momentum Trader - Main entry point
Scans equities (Alpaca) and crypto (Kraken) and trades RSI signals
"""

import sys
import signal
import argparse
import threading
import time

from config import Config
from bot_logging import Logger
from core import MarketScanner, TradingBot
from database import TradeJournal, create_store
from exchange import VenueManager
from risk import RiskManager
from strategies import RSIStrategy
from utils.helpers import format_currency, format_duration, format_timestamp


class DualVenueApp:
    """Wires configuration, venues, risk and the trading bot together"""

    def __init__(self, config: Config):
        self.config = config
        self.logger = Logger(config)
        self.shutdown_event = threading.Event()
        self.started_at = time.time()

        self.store = create_store(config, self.logger)
        self.journal = TradeJournal(self.store, self.logger)
        self.journal.prune_expired()
        self.venues = VenueManager.from_config(config, self.logger)
        self.risk_manager = RiskManager(config.risk_config(), self.logger)

        strategy = RSIStrategy.from_config(config)
        self.scanner = MarketScanner(
            self.venues.adapters,
            strategy,
            self.logger,
            journal=self.journal,
            history_bars=config.HISTORY_BARS,
            max_workers=config.SCAN_MAX_WORKERS
        )
        self.bot = TradingBot(
            config,
            self.logger,
            self.venues,
            self.risk_manager,
            self.scanner,
            journal=self.journal
        )

        self.logger.system(f"Configuration loaded: {config!r}")

    def run(self, once: bool = False) -> int:
        signal.signal(signal.SIGINT, self.signal_handler)

        if not self.bot.start():
            status = self.bot.get_status()
            print(f"❌ Bot failed to start: {status['stats']['last_error'] or status['halt_reason']}")
            self.shutdown()
            return 1

        if once:
            self.shutdown()
            return 0

        try:
            while not self.shutdown_event.wait(1.0):
                if self.bot.get_status()['status'] == 'stopped':
                    self.logger.system("Bot stopped itself, exiting")
                    break
        except KeyboardInterrupt:
            pass
        finally:
            self.shutdown()

        return 0

    def signal_handler(self, signum, frame):
        """Handle shutdown signal"""
        print("\n\n⚠️  Shutdown signal received...")
        self.shutdown_event.set()

    def shutdown(self):
        """Graceful shutdown"""
        self.bot.stop()
        self.print_summary()
        self.store.close()

    def print_summary(self):
        status = self.bot.get_status()
        session = status['session_stats']
        stats = status['stats']
        currency = self.config.BASE_CURRENCY

        print("\n" + "=" * 60)
        print(f"  SESSION SUMMARY - {format_timestamp()}")
        print("=" * 60)
        print(f"  Start balance:   {format_currency(session['start_balance'], currency)}")
        print(f"  Daily P&L:       {format_currency(session['current_pnl'], currency)} ({session['pnl_percent']:+.2f}%)")
        print(f"  Trades:          {stats['trades_executed']}")
        print(f"  Cycles / errors: {stats['cycles_run']} / {stats['errors']}")
        print(f"  Runtime:         {format_duration(time.time() - self.started_at)}")
        if status['halt_reason']:
            print(f"  Halted by:       {status['halt_reason']}")
        print("=" * 60 + "\n")


def main():
    parser = argparse.ArgumentParser(description='Dual-Venue Momentum Trader')
    parser.add_argument('--interval', type=int, default=None,
                        help='Scan interval in seconds (default: SCAN_INTERVAL_MS from .env)')
    parser.add_argument('--once', action='store_true',
                        help='Run a single scan cycle and exit')
    parser.add_argument('--env-file', type=str, default=None,
                        help='Path to a .env file')

    args = parser.parse_args()

    try:
        config = Config(args.env_file)
    except ValueError as e:
        print(f"❌ {e}")
        sys.exit(2)

    if args.interval is not None:
        if args.interval < 1:
            parser.error('--interval must be at least 1 second')
        config.SCAN_INTERVAL_MS = args.interval * 1000

    if not config.is_paper_trading():
        print("\n⚠️  WARNING: LIVE TRADING MODE!")
        print("   Real money will be at risk!")
        print()
        confirm = input("Are you sure? Type 'YES' to continue: ")
        if confirm != 'YES':
            print("Aborted.")
            sys.exit(0)

    app = DualVenueApp(config)
    sys.exit(app.run(once=args.once))


if __name__ == "__main__":
    main()
