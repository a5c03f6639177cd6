"""
Position Sizing
Calculates order quantity from balance, price and aggressiveness
"""

import math
from core.models import AssetClass, Quantity, RiskConfig


# Share of balance committed per trade at 100% aggressiveness
BASE_RISK_PERCENT = 2.0

MIN_STOCK_QUANTITY = 1
MIN_CRYPTO_QUANTITY = 0.001


class PositionSizingLayer:
    """
    Position Sizing
    Stocks are sized in whole shares (minimum 1),
    crypto in fractional units (minimum 0.001)
    """

    def __init__(self, config: RiskConfig, logger):
        self.config = config
        self.logger = logger

    @property
    def risk_fraction(self) -> float:
        return BASE_RISK_PERCENT / 100 * (self.config.aggressiveness / 100)

    def position_value(self, balance: float) -> float:
        return balance * self.risk_fraction

    def position_size(self, balance: float, price: float, asset_class: AssetClass) -> Quantity:
        """
        Calculate order quantity

        Args:
            balance: Balance the position is sized against
            price: Current asset price
            asset_class: STOCK or CRYPTO

        Returns:
            Tagged quantity
        """
        if price is None or price <= 0:
            raise ValueError(f"Cannot size a position at price {price}")

        raw_quantity = self.position_value(balance) / price

        if asset_class is AssetClass.STOCK:
            quantity = Quantity.shares(max(math.floor(raw_quantity), MIN_STOCK_QUANTITY))
        else:
            quantity = Quantity.units(max(raw_quantity, MIN_CRYPTO_QUANTITY))

        self.logger.debug(
            f"Position sizing: {quantity} @ {price:.2f} "
            f"({self.risk_fraction * 100:.2f}% of {balance:.2f})"
        )
        return quantity
