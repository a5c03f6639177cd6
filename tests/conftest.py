"""Pytest configuration and shared fixtures."""

from datetime import datetime, timedelta
from typing import Dict, List, Optional

import ccxt
import pytest

from bot_logging import Logger
from config import Config
from core.errors import ConnectivityError, OrderRejected
from core.models import OrderResult, Position, PricePoint, Quantity, RiskConfig, Venue
from exchange import BaseVenueAdapter, VenueManager
from strategies import classify


class FakeVenueAdapter(BaseVenueAdapter):
    """In-memory venue with scripted balances, prices and history"""

    def __init__(self, venue: Venue, total: float = 5000.0, cash: Optional[float] = None):
        self.venue = venue
        self.total = total
        self.cash = total if cash is None else cash
        self.positions: List[Position] = []
        self.series: Dict[str, List[float]] = {}
        self.prices: Dict[str, float] = {}
        self.markets: Optional[set] = None
        self.fail_symbols = set()
        self.reject_symbols = set()
        self.close_fail = set()
        self.market_open = True
        self.connected = True
        self.balance_error: Optional[Exception] = None
        self.min_size = 0.001
        self.orders: List[OrderResult] = []
        self.closed: List[str] = []

    def test_connection(self) -> bool:
        if not self.connected:
            raise ConnectivityError(f"{self.name} unreachable", venue=self.venue.value)
        return True

    def get_balance(self):
        if self.balance_error is not None:
            raise self.balance_error
        return {'total': self.total, 'cash': self.cash}

    def get_positions(self):
        return list(self.positions)

    def get_historical_series(self, symbol, count=100):
        if symbol in self.fail_symbols:
            raise RuntimeError(f"history feed down for {symbol}")
        start = datetime(2024, 1, 1)
        return [
            PricePoint(timestamp=start + timedelta(days=i), close=close)
            for i, close in enumerate(self.series.get(symbol, []))
        ]

    def get_spot_price(self, symbol):
        return self.prices.get(symbol)

    def is_market_open(self):
        return self.market_open

    def submit_market_order(self, symbol, quantity: Quantity, side):
        if symbol in self.reject_symbols:
            raise OrderRejected(f"rejected {symbol}", symbol=symbol, side=side)
        order = OrderResult(
            order_id=f"order-{len(self.orders) + 1}",
            symbol=symbol,
            side=side,
            quantity=float(quantity),
            status='accepted',
            venue=self.venue,
        )
        self.orders.append(order)
        return order

    def close_position(self, symbol):
        if symbol in self.close_fail:
            raise OrderRejected(f"cannot close {symbol}", symbol=symbol, side='sell')
        self.closed.append(symbol)
        self.positions = [p for p in self.positions if p.symbol != symbol]
        return True

    def close_all_positions(self):
        self.closed.extend(p.symbol for p in self.positions)
        self.positions = []
        return True

    def minimum_order_size(self, symbol):
        return self.min_size

    def resolve_available_symbol(self, primary, fallback=None):
        if self.markets is None or primary in self.markets:
            return primary
        if fallback and fallback in self.markets:
            return fallback
        return None

    def set_indicator(self, symbol: str, value: float, price: float = 100.0, bars: int = 25):
        """Script a series whose last close LastCloseStrategy reads as the indicator"""
        self.series[symbol] = [50.0] * (bars - 1) + [value]
        self.prices[symbol] = price


class FakeExchange:
    """Minimal stand-in for a ccxt kraken instance"""

    def __init__(self):
        self.markets = {
            'BTC/EUR': {'limits': {'amount': {'min': 0.0001}}},
            'ETH/USD': {'limits': {'amount': {}}},
        }
        self.balance = {
            'total': {'EUR': 100.0, 'USD': 100.0, 'BTC': 0.01},
            'free': {'EUR': 100.0, 'USD': 100.0, 'BTC': 0.01},
            'used': {},
        }
        self.tickers = {'BTC/EUR': {'last': 20000.0}}
        self.closes: Dict[str, List[float]] = {}
        self.order_error = None
        self.orders = []
        self.load_calls = 0

    def hold(self, currency: str, amount: float):
        self.balance['total'][currency] = amount
        self.balance['free'][currency] = amount

    def load_markets(self):
        self.load_calls += 1
        return self.markets

    def market(self, symbol):
        if symbol not in self.markets:
            raise ccxt.BadSymbol(symbol)
        return self.markets[symbol]

    def fetch_balance(self):
        return self.balance

    def fetch_ticker(self, symbol):
        if symbol not in self.tickers:
            raise ccxt.BadSymbol(symbol)
        return self.tickers[symbol]

    def fetch_ohlcv(self, symbol, timeframe, since, limit):
        closes = self.closes.get(symbol) or [100.0 + i for i in range(limit)]
        return [[1704067200000 + i * 86400000, 1, 1, 1, close, 10] for i, close in enumerate(closes)]

    def create_market_order(self, symbol, side, amount):
        if self.order_error is not None:
            raise self.order_error
        self.orders.append((symbol, side, amount))
        return {'id': f'K{len(self.orders)}', 'status': 'closed'}


class LastCloseStrategy:
    """Treats the last close of a series as its indicator value"""

    def analyze(self, series):
        value = series[-1].close
        signal_type, strength = classify(value)
        return {'indicator_value': value, 'signal_type': signal_type, 'strength': strength}


@pytest.fixture
def config(monkeypatch, tmp_path) -> Config:
    """Config built from a controlled environment"""
    env = {
        'LOG_OUTPUT': 'console',
        'LOG_LEVEL': 'WARNING',
        'DATA_DIRECTORY': str(tmp_path / 'data'),
        'STORAGE_BACKEND': 'json',
        'SCAN_INTERVAL_MS': '60000',
        'STOCK_SYMBOLS': 'AAPL,MSFT',
        'CRYPTO_PAIRS': 'BTC/EUR:BTC/USD',
        'RETRY_ATTEMPTS': '3',
        'RETRY_DELAY': '0',
        'ALPACA_PAPER': 'true',
        'MONGODB_RETENTION_DAYS': '0',
    }
    for key, value in env.items():
        monkeypatch.setenv(key, value)

    env_file = tmp_path / '.env'
    env_file.write_text('')
    return Config(str(env_file))


@pytest.fixture
def logger(config) -> Logger:
    return Logger(config)


@pytest.fixture
def risk_config() -> RiskConfig:
    return RiskConfig()


@pytest.fixture
def equities() -> FakeVenueAdapter:
    return FakeVenueAdapter(Venue.EQUITIES)


@pytest.fixture
def crypto() -> FakeVenueAdapter:
    return FakeVenueAdapter(Venue.CRYPTO)


@pytest.fixture
def venues(equities, crypto, logger) -> VenueManager:
    return VenueManager([equities, crypto], logger)


@pytest.fixture
def strategy() -> LastCloseStrategy:
    return LastCloseStrategy()


@pytest.fixture
def exchange() -> FakeExchange:
    return FakeExchange()
