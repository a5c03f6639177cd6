"""
Venue Manager
Coordinates the equities and crypto venue adapters
"""

from typing import Dict, Any, Iterable, List, Optional

from core.errors import ConnectivityError
from core.models import Position, Venue
from .base_client import BaseVenueAdapter


class VenueManager:
    """
    Manages one adapter per venue
    Aggregates balances and positions across venues
    """

    def __init__(self, adapters: Iterable[BaseVenueAdapter], logger):
        """
        Initialize venue manager

        Args:
            adapters: One adapter per venue
            logger: Logger instance
        """
        self.logger = logger
        self.adapters: Dict[Venue, BaseVenueAdapter] = {}

        for adapter in adapters:
            if adapter.venue in self.adapters:
                raise ValueError(f"Duplicate adapter for venue {adapter.venue.value}")
            self.adapters[adapter.venue] = adapter

        self.logger.system(
            f"Venue manager initialized with {len(self.adapters)} venues",
            venues=','.join(a.name for a in self.adapters.values())
        )

    @classmethod
    def from_config(cls, config, logger) -> "VenueManager":
        from .alpaca_client import AlpacaAdapter
        from .ccxt_client import KrakenAdapter

        return cls([AlpacaAdapter(config, logger), KrakenAdapter(config, logger)], logger)

    def get_adapter(self, venue: Venue) -> BaseVenueAdapter:
        adapter = self.adapters.get(venue)
        if adapter is None:
            raise KeyError(f"No adapter configured for {venue.value}")
        return adapter

    def test_connections(self) -> Dict[Venue, bool]:
        """
        Check every venue

        Raises:
            ConnectivityError: naming the first venue that failed
        """
        results = {}
        for venue, adapter in self.adapters.items():
            try:
                results[venue] = bool(adapter.test_connection())
            except ConnectivityError:
                raise
            except Exception as e:
                raise ConnectivityError(f"{adapter.name} connection failed: {e}", venue=venue.value) from e

            if not results[venue]:
                raise ConnectivityError(f"{adapter.name} connection failed", venue=venue.value)

        return results

    def get_total_balance(self) -> Dict[str, Any]:
        """
        Sum venue totals

        Returns:
            {'total': float, 'venues': {venue: balance mapping}}
        """
        balances = {venue: adapter.get_balance() for venue, adapter in self.adapters.items()}
        return {
            'total': sum(float(b.get('total') or 0) for b in balances.values()),
            'venues': balances,
        }

    def get_all_positions(self) -> List[Position]:
        positions: List[Position] = []
        for adapter in self.adapters.values():
            positions.extend(adapter.get_positions())
        return positions

    def find_position(self, symbol: str, positions: Optional[List[Position]] = None) -> Optional[Position]:
        for position in positions if positions is not None else self.get_all_positions():
            if position.symbol == symbol:
                return position
        return None

    def close_all_positions(self) -> bool:
        closed_all = True
        for adapter in self.adapters.values():
            try:
                closed_all = adapter.close_all_positions() and closed_all
            except Exception as e:
                self.logger.error(f"Failed to liquidate {adapter.name}: {e}", exc_info=True)
                closed_all = False
        return closed_all
