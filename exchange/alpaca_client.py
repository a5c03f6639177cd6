"""
Alpaca Adapter
Equities venue adapter over the Alpaca trading and market data REST APIs
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Any, List, Optional

from core.errors import ConnectivityError, OrderRejected
from core.models import OrderResult, Position, PricePoint, Quantity, Venue
from .api_manager import APIManager
from .base_client import BaseVenueAdapter


def _parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value.replace('Z', '+00:00'))


class AlpacaAdapter(BaseVenueAdapter):
    """
    Alpaca equities adapter
    Orders are whole-share market orders with day time-in-force
    """

    venue = Venue.EQUITIES

    def __init__(self, config, logger, api: Optional[APIManager] = None):
        self.config = config
        self.logger = logger
        self.api = api or APIManager(config, logger)
        self.base_url = config.ALPACA_BASE_URL.rstrip('/')
        self.data_url = config.ALPACA_DATA_URL.rstrip('/')

        self.logger.system(
            f"Alpaca initialized ({'PAPER' if config.is_paper_trading() else 'LIVE'} trading)"
        )

    @property
    def headers(self) -> Dict[str, str]:
        return {
            'APCA-API-KEY-ID': self.config.ALPACA_API_KEY,
            'APCA-API-SECRET-KEY': self.config.ALPACA_SECRET_KEY,
        }

    def _trading(self, method: str, path: str, body: Optional[Dict[str, Any]] = None):
        return self.api.request(method, f"{self.base_url}{path}", headers=self.headers,
                                body=body, endpoint=f"alpaca:{path}")

    def _data(self, path: str, params: Optional[Dict[str, Any]] = None):
        return self.api.request('GET', f"{self.data_url}{path}", headers=self.headers,
                                params=params, endpoint=f"alpaca-data:{path}")

    def _account(self) -> Dict[str, Any]:
        account = self._trading('GET', '/v2/account')
        if account is None:
            raise ConnectivityError(
                f"Alpaca account unavailable: {self.api.last_error}",
                venue=self.venue.value
            )
        return account

    def test_connection(self) -> bool:
        account = self._account()
        self.logger.system(f"Alpaca connected - Account: {account.get('account_number')}")
        return True

    def get_balance(self) -> Dict[str, Any]:
        account = self._account()
        return {
            'exchange': self.name,
            'total': float(account.get('portfolio_value') or 0),
            'cash': float(account.get('cash') or 0),
            'equity': float(account.get('equity') or 0),
            'buying_power': float(account.get('buying_power') or 0),
        }

    def get_positions(self) -> List[Position]:
        positions = self._trading('GET', '/v2/positions')
        if positions is None:
            self.logger.error(f"Error getting Alpaca positions: {self.api.last_error}")
            return []

        return [
            Position(
                symbol=pos['symbol'],
                venue=self.venue,
                quantity=float(pos['qty']),
                entry_price=float(pos.get('avg_entry_price') or 0),
                current_price=float(pos.get('current_price') or 0),
                market_value=float(pos.get('market_value') or 0),
                unrealized_pnl=float(pos.get('unrealized_pl') or 0),
                unrealized_pnl_percent=float(pos.get('unrealized_plpc') or 0) * 100,
            )
            for pos in positions
        ]

    def get_historical_series(self, symbol: str, count: int = 100) -> List[PricePoint]:
        end = datetime.now(timezone.utc)
        start = end - timedelta(days=count)
        data = self._data(f'/v2/stocks/{symbol}/bars', params={
            'timeframe': '1Day',
            'start': start.strftime('%Y-%m-%dT%H:%M:%SZ'),
            'limit': count,
        })
        if data is None:
            raise ConnectivityError(f"Bars unavailable for {symbol}: {self.api.last_error}",
                                    venue=self.venue.value)

        return [
            PricePoint(timestamp=_parse_timestamp(bar['t']), close=float(bar['c']))
            for bar in data.get('bars') or []
        ]

    def get_spot_price(self, symbol: str) -> Optional[float]:
        data = self._data(f'/v2/stocks/{symbol}/trades/latest')
        if not data or 'trade' not in data:
            self.logger.debug(f"No latest trade for {symbol}")
            return None
        return float(data['trade']['p'])

    def is_market_open(self) -> bool:
        clock = self._trading('GET', '/v2/clock')
        if clock is None:
            self.logger.warning("Error checking market status, assuming closed")
            return False
        return bool(clock.get('is_open'))

    def submit_market_order(self, symbol: str, quantity: Quantity, side: str) -> OrderResult:
        order = self._trading('POST', '/v2/orders', body={
            'symbol': symbol,
            'qty': str(quantity),
            'side': side,
            'type': 'market',
            'time_in_force': 'day',
        })
        if order is None:
            raise OrderRejected(
                f"Alpaca rejected {side} {quantity} {symbol}: {self.api.last_error}",
                symbol=symbol,
                side=side
            )

        return OrderResult(
            order_id=str(order.get('id')),
            symbol=symbol,
            side=side,
            quantity=float(quantity),
            status=str(order.get('status')),
            venue=self.venue,
        )

    def close_position(self, symbol: str) -> bool:
        if self._trading('DELETE', f'/v2/positions/{symbol}') is None:
            raise OrderRejected(f"Error closing position {symbol}: {self.api.last_error}",
                                symbol=symbol, side='sell')
        self.logger.info(f"Closed position for {symbol}")
        return True

    def close_all_positions(self) -> bool:
        if self._trading('DELETE', '/v2/positions') is None:
            self.logger.error(f"Error closing all Alpaca positions: {self.api.last_error}")
            return False
        self.logger.info("Closed all Alpaca positions")
        return True
