"""
Kraken Adapter
Crypto venue adapter built on the CCXT unified API
"""

import time
from datetime import datetime
from typing import Dict, Any, List, Optional

import ccxt

from core.errors import ConnectivityError, OrderRejected
from core.models import OrderResult, Position, PricePoint, Quantity, Venue
from .base_client import BaseVenueAdapter, DEFAULT_MIN_ORDER_SIZE


class KrakenAdapter(BaseVenueAdapter):
    """
    Kraken spot adapter
    Balances are reported in EUR; USD holdings are converted with a fixed rate
    """

    venue = Venue.CRYPTO
    exchange_id = 'kraken'

    def __init__(self, config, logger, exchange=None):
        """
        Initialize Kraken adapter

        Args:
            config: Configuration object
            logger: Logger instance
            exchange: Optional pre-built ccxt exchange instance
        """
        self.config = config
        self.logger = logger
        self.usd_to_eur = config.USD_TO_EUR_RATE
        self.exchange = exchange or self._initialize_exchange()
        self._markets_loaded = False

        self.logger.system(f"CCXT client initialized: {self.exchange_id}")

    def _initialize_exchange(self):
        exchange_class = getattr(ccxt, self.exchange_id)
        return exchange_class({
            'apiKey': self.config.KRAKEN_API_KEY,
            'secret': self.config.KRAKEN_SECRET_KEY,
            'enableRateLimit': True,
            'timeout': int(self.config.API_TIMEOUT * 1000),
        })

    def _load_markets(self):
        if not self._markets_loaded:
            self.exchange.load_markets()
            self._markets_loaded = True
        return self.exchange.markets

    def _to_eur(self, balances: Dict[str, Any]) -> float:
        total = float(balances.get('EUR') or 0)
        total += float(balances.get('USD') or 0) * self.usd_to_eur
        return total

    def test_connection(self) -> bool:
        try:
            start = time.time()
            self.exchange.fetch_balance()
            self.logger.api_call('GET', 'kraken:balance', duration=time.time() - start)
            self.logger.system("Kraken connected")
            return True
        except ccxt.BaseError as e:
            raise ConnectivityError(f"Kraken connection failed: {e}", venue=self.venue.value) from e

    def get_balance(self) -> Dict[str, Any]:
        try:
            balance = self.exchange.fetch_balance()
        except ccxt.BaseError as e:
            raise ConnectivityError(f"Error fetching Kraken balance: {e}", venue=self.venue.value) from e

        free = balance.get('free') or {}
        return {
            'exchange': self.name,
            'total': self._to_eur(balance.get('total') or {}),
            'cash': self._to_eur(free),
            'free': free,
            'used': balance.get('used') or {},
        }

    def _holding_symbol(self, currency: str) -> str:
        """Market a holding trades on: the EUR pair, else the USD pair"""
        eur_pair, usd_pair = f"{currency}/EUR", f"{currency}/USD"
        try:
            markets = self._load_markets()
        except ccxt.BaseError as e:
            self.logger.debug(f"Markets unavailable, naming {currency} holding {eur_pair}: {e}")
            return eur_pair
        if eur_pair not in markets and usd_pair in markets:
            return usd_pair
        return eur_pair

    def get_positions(self) -> List[Position]:
        try:
            balance = self.exchange.fetch_balance()
        except ccxt.BaseError as e:
            self.logger.error(f"Error getting Kraken positions: {e}")
            return []

        positions = []
        for currency, amount in (balance.get('total') or {}).items():
            if not amount or amount <= 0 or currency in ('EUR', 'USD'):
                continue

            # Same symbol the scanner resolves for this asset
            symbol = self._holding_symbol(currency)
            price = self.get_spot_price(symbol)
            market_value = 0.0
            if price is None:
                self.logger.debug(f"Could not price {currency}")
            else:
                market_value = price * amount
                if symbol.endswith('/USD'):
                    market_value *= self.usd_to_eur

            # Entry prices are not tracked on spot balances
            positions.append(Position(
                symbol=symbol,
                venue=self.venue,
                quantity=float(amount),
                current_price=price or 0.0,
                market_value=market_value,
            ))

        return positions

    def get_historical_series(self, symbol: str, count: int = 100) -> List[PricePoint]:
        start = time.time()
        ohlcv = self.exchange.fetch_ohlcv(symbol, '1d', None, count)
        self.logger.api_call('GET', f'kraken:ohlcv:{symbol}', duration=time.time() - start)

        return [
            PricePoint(timestamp=datetime.fromtimestamp(candle[0] / 1000), close=float(candle[4]))
            for candle in ohlcv
        ]

    def get_spot_price(self, symbol: str) -> Optional[float]:
        try:
            ticker = self.exchange.fetch_ticker(symbol)
        except ccxt.BaseError as e:
            self.logger.debug(f"Error getting price for {symbol}: {e}")
            return None
        last = ticker.get('last')
        return float(last) if last is not None else None

    def is_market_open(self) -> bool:
        return True

    def resolve_available_symbol(self, primary: str, fallback: Optional[str] = None) -> Optional[str]:
        try:
            markets = self._load_markets()
        except ccxt.BaseError as e:
            self.logger.error(f"Error checking symbol availability: {e}")
            return None

        if primary in markets:
            return primary
        if fallback and fallback in markets:
            self.logger.debug(f"{primary} not available, using {fallback}")
            return fallback

        self.logger.warning(f"Neither {primary} nor {fallback} available on Kraken")
        return None

    def minimum_order_size(self, symbol: str) -> float:
        try:
            self._load_markets()
            market = self.exchange.market(symbol)
        except ccxt.BaseError as e:
            self.logger.debug(f"Error getting min order size for {symbol}: {e}")
            return DEFAULT_MIN_ORDER_SIZE
        minimum = ((market.get('limits') or {}).get('amount') or {}).get('min')
        return float(minimum) if minimum else DEFAULT_MIN_ORDER_SIZE

    def submit_market_order(self, symbol: str, quantity: Quantity, side: str) -> OrderResult:
        amount = float(quantity)
        try:
            order = self.exchange.create_market_order(symbol, side, amount)
        except (ccxt.InsufficientFunds, ccxt.InvalidOrder) as e:
            raise OrderRejected(f"Kraken rejected {side} {symbol}: {e}", symbol=symbol, side=side) from e
        except ccxt.NetworkError as e:
            raise ConnectivityError(f"Kraken unreachable placing {side} {symbol}: {e}", venue=self.venue.value) from e
        except ccxt.ExchangeError as e:
            raise OrderRejected(f"Kraken error on {side} {symbol}: {e}", symbol=symbol, side=side) from e

        return OrderResult(
            order_id=str(order.get('id')),
            symbol=symbol,
            side=side,
            quantity=amount,
            status=str(order.get('status')),
            venue=self.venue,
        )

    def close_position(self, symbol: str) -> bool:
        base = symbol.split('/')[0]
        try:
            balance = self.exchange.fetch_balance()
        except ccxt.BaseError as e:
            raise ConnectivityError(f"Error closing position {symbol}: {e}", venue=self.venue.value) from e

        amount = (balance.get('free') or {}).get(base)
        if not amount or amount <= 0:
            self.logger.warning(f"No balance to close for {symbol}")
            return False

        self.submit_market_order(symbol, Quantity.units(amount), 'sell')
        self.logger.info(f"Closed position for {symbol}")
        return True

    def close_all_positions(self) -> bool:
        closed_all = True
        for position in self.get_positions():
            try:
                self.close_position(position.symbol)
            except (OrderRejected, ConnectivityError) as e:
                self.logger.error(f"Failed to close {position.symbol}: {e}")
                closed_all = False
        return closed_all
