"""
Position Manager
Tracks open positions within one trading cycle
"""

from typing import Iterable, List, Optional

from core.models import Position, Quantity, Venue


def asset_key(symbol: str) -> str:
    """Base asset of a crypto pair (BTC/EUR and BTC/USD are one holding); stock symbols as-is"""
    return symbol.split('/')[0] if '/' in symbol else symbol


class PositionManager:
    """
    In-cycle position book
    Loaded from the venues at the start of each cycle; buys placed during the
    cycle are appended as provisional positions so limits see them
    """

    def __init__(self, logger, positions: Optional[Iterable[Position]] = None):
        self.logger = logger
        self.open_positions: List[Position] = list(positions or [])

    def load(self, positions: Iterable[Position]):
        self.open_positions = list(positions)

    def add_provisional(self, symbol: str, venue: Venue, quantity: Quantity, price: float) -> Position:
        position = Position(
            symbol=symbol,
            venue=venue,
            quantity=float(quantity),
            entry_price=price,
            current_price=price,
            market_value=quantity.notional(price),
            provisional=True,
        )
        self.open_positions.append(position)
        self.logger.debug(f"Provisional position added: {symbol} x {quantity}")
        return position

    def remove_position(self, symbol: str) -> Optional[Position]:
        for index, position in enumerate(self.open_positions):
            if position.symbol == symbol:
                return self.open_positions.pop(index)
        return None

    def get_position(self, symbol: str) -> Optional[Position]:
        for position in self.open_positions:
            if position.symbol == symbol:
                return position
        return None

    def has_position(self, symbol: str) -> bool:
        """True when the asset is held, whichever quote currency it was bought in"""
        key = asset_key(symbol)
        return any(asset_key(p.symbol) == key for p in self.open_positions)

    def get_all_positions(self) -> List[Position]:
        return list(self.open_positions)

    def __len__(self) -> int:
        return len(self.open_positions)
