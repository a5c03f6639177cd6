"""
Base Venue Adapter
Abstract base class defining the interface every trading venue implements
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, List, Optional

from core.models import OrderResult, Position, PricePoint, Quantity, Venue


DEFAULT_MIN_ORDER_SIZE = 0.001


class BaseVenueAdapter(ABC):
    """
    Abstract base class for venue adapters
    One instance per venue; all calls are synchronous and bounded by timeouts
    """

    venue: Venue

    @abstractmethod
    def test_connection(self) -> bool:
        """
        Check the venue is reachable with the configured credentials

        Raises:
            ConnectivityError: when the venue cannot be reached
        """

    @abstractmethod
    def get_balance(self) -> Dict[str, Any]:
        """
        Get account balance

        Returns:
            Mapping with at least 'total' (base currency) and 'cash'
        """

    @abstractmethod
    def get_positions(self) -> List[Position]:
        """Get open positions"""

    @abstractmethod
    def get_historical_series(self, symbol: str, count: int = 100) -> List[PricePoint]:
        """
        Get daily close prices

        Args:
            symbol: Venue symbol
            count: Number of bars

        Returns:
            Price points ascending by time
        """

    @abstractmethod
    def get_spot_price(self, symbol: str) -> Optional[float]:
        """Latest traded price, or None when unavailable"""

    @abstractmethod
    def is_market_open(self) -> bool:
        """Whether the venue accepts orders right now"""

    @abstractmethod
    def submit_market_order(self, symbol: str, quantity: Quantity, side: str) -> OrderResult:
        """
        Submit a market order

        Raises:
            OrderRejected: when the venue refuses the order
        """

    @abstractmethod
    def close_position(self, symbol: str) -> bool:
        """Close the whole position in a symbol"""

    @abstractmethod
    def close_all_positions(self) -> bool:
        """Liquidate every open position on the venue"""

    def minimum_order_size(self, symbol: str) -> float:
        return DEFAULT_MIN_ORDER_SIZE

    def resolve_available_symbol(self, primary: str, fallback: Optional[str] = None) -> Optional[str]:
        return primary

    @property
    def name(self) -> str:
        return self.venue.display_name
