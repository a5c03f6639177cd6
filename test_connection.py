#!/usr/bin/env python3
"""
Venue Connection Test
Checks connectivity, balance and market data on both trading venues

Usage:
    python test_connection.py                  # Tests both venues
    python test_connection.py --venue crypto   # Tests one venue
"""

import sys
import argparse

from config import Config
from bot_logging import Logger
from core.errors import ConnectivityError
from core.models import Venue
from exchange import AlpacaAdapter, KrakenAdapter
from utils.helpers import format_currency


def print_header(title):
    print()
    print("=" * 80)
    print(title.center(80))
    print("=" * 80)
    print()


def print_success(message):
    print(f"   ✅ {message}")


def print_error(message):
    print(f"   ❌ {message}")


def print_info(message):
    print(f"   ℹ️  {message}")


def test_venue(adapter, sample_symbol: str, currency: str) -> bool:
    """Run connection, balance and price checks against one adapter"""
    print(f"\n🔗 Connecting to {adapter.name}...")

    try:
        adapter.test_connection()
        print_success("Connected")
    except ConnectivityError as e:
        print_error(str(e))
        api = getattr(adapter, 'api', None)
        if api is not None:
            stats = api.get_error_statistics()
            print_info(f"HTTP errors: {stats['total_errors']} {stats['errors_by_endpoint']}")
        return False

    try:
        balance = adapter.get_balance()
        print_success(f"Balance: {format_currency(balance['total'], currency)} "
                      f"(cash {format_currency(balance['cash'], currency)})")
    except ConnectivityError as e:
        print_error(f"Balance check failed: {e}")
        return False

    print_info(f"Market open: {adapter.is_market_open()}")

    price = adapter.get_spot_price(sample_symbol)
    if price is None:
        print_error(f"No price for {sample_symbol}")
        return False
    print_success(f"{sample_symbol} last price: {price:.2f}")

    positions = adapter.get_positions()
    print_info(f"Open positions: {len(positions)}")
    return True


def main():
    parser = argparse.ArgumentParser(description='Test venue connectivity')
    parser.add_argument('--venue', choices=[v.value for v in Venue], default=None,
                        help='Only test one venue')
    args = parser.parse_args()

    print_header("DUAL-VENUE TRADER - CONNECTION TEST")

    config = Config()
    logger = Logger(config)

    checks = []
    if args.venue in (None, Venue.EQUITIES.value):
        sample = config.STOCK_SYMBOLS[0] if config.STOCK_SYMBOLS else 'AAPL'
        checks.append((AlpacaAdapter(config, logger), sample, 'USD'))
    if args.venue in (None, Venue.CRYPTO.value):
        adapter = KrakenAdapter(config, logger)
        pair = config.CRYPTO_PAIRS[0] if config.CRYPTO_PAIRS else None
        sample = adapter.resolve_available_symbol(pair.symbol, pair.fallback_symbol) if pair else 'BTC/EUR'
        checks.append((adapter, sample or 'BTC/EUR', config.BASE_CURRENCY))

    results = {adapter.name: test_venue(adapter, sample, currency) for adapter, sample, currency in checks}

    print_header("RESULTS")
    for name, ok in results.items():
        (print_success if ok else print_error)(name)

    sys.exit(0 if all(results.values()) else 1)


if __name__ == "__main__":
    main()
