"""
Risk Manager
Coordinates session accounting, sizing, exits and trade validation layers
"""

import dataclasses
from datetime import date
from typing import Any, Callable, Dict, Optional, Sequence

from core.models import AssetClass, Position, Quantity, RiskConfig, TradeValidation, Venue
from .layers import (
    CapitalPreservationLayer,
    CircuitBreakerLayer,
    DailyLimitLayer,
    PositionLimitLayer,
    PositionSizingLayer,
    StopLossManagementLayer,
)


class RiskManager:
    """
    Central Risk Manager
    Owns the DailySession and evaluates buys through the validation layers
    sequentially: PositionLimit -> CapitalPreservation -> DailyLimit
    """

    def __init__(self, config: RiskConfig, logger, clock: Callable[[], date] = date.today):
        self.config = config
        self.logger = logger

        self.daily_limits = DailyLimitLayer(config, logger, clock=clock)
        self.circuit_breaker_layer = CircuitBreakerLayer(config, logger)
        self.position_limits = PositionLimitLayer(config, logger)
        self.sizing = PositionSizingLayer(config, logger)
        self.capital_preservation = CapitalPreservationLayer(config, logger)
        self.stop_loss = StopLossManagementLayer(config, logger)

        self.validation_layers = [
            self.position_limits,
            self.capital_preservation,
            self.daily_limits,
        ]

        self.logger.system(
            "Risk Manager initialized",
            aggressiveness=config.aggressiveness,
            daily_profit_limit=config.daily_profit_limit,
            daily_loss_limit=config.daily_loss_limit
        )

    @property
    def session(self):
        return self.daily_limits.session

    # Session accounting

    def reset_daily_session(self, balance: float) -> bool:
        return self.daily_limits.reset_if_new_day(balance)

    def update_daily_pnl(self, balance: float):
        self.daily_limits.update_pnl(balance)

    def record_trade(self):
        self.daily_limits.record_trade()

    def hit_profit_limit(self) -> bool:
        return self.daily_limits.hit_profit_limit()

    def hit_loss_limit(self) -> bool:
        return self.daily_limits.hit_loss_limit()

    def should_halt(self) -> bool:
        return self.daily_limits.should_halt()

    def circuit_breaker(self, balance: float) -> bool:
        return self.circuit_breaker_layer.is_tripped(balance, self.session.start_balance)

    # Positions

    def can_open_position(self, open_positions: Sequence[Position], venue: Venue) -> bool:
        return self.position_limits.can_open_position(open_positions, venue)

    def position_size(self, balance: float, price: float, asset_class: AssetClass) -> Quantity:
        return self.sizing.position_size(balance, price, asset_class)

    def should_exit(self, position: Position) -> bool:
        return self.stop_loss.should_exit(position)

    def exit_reason(self, position: Position) -> Optional[str]:
        return self.stop_loss.exit_reason(position)

    # Validation

    def validate_trade(self, side: str, symbol: str, quantity, price: float,
                       open_positions: Sequence[Position], balance: float,
                       venue: Optional[Venue] = None) -> TradeValidation:
        """
        Validate a proposed trade

        Sells always pass. Buys pass through every validation layer and are
        rejected by the first layer that refuses them.

        Args:
            side: 'buy' or 'sell'
            symbol: Asset symbol
            quantity: Order quantity (Quantity or number)
            price: Current price
            open_positions: Currently open positions
            balance: Balance the buy is funded from
            venue: Destination venue, inferred from the symbol when omitted

        Returns:
            TradeValidation with the rejection reason when invalid
        """
        if side.lower() != 'buy':
            return TradeValidation(True)

        if venue is None:
            venue = Venue.CRYPTO if '/' in symbol else Venue.EQUITIES

        trade_params: Dict[str, Any] = {
            'side': 'buy',
            'symbol': symbol,
            'quantity': quantity,
            'price': price,
            'venue': venue,
        }
        account_state: Dict[str, Any] = {
            'open_positions': list(open_positions),
            'available_balance': balance,
        }

        for layer in self.validation_layers:
            layer_name = layer.__class__.__name__
            self.logger.debug(f"Risk evaluation: {layer_name} evaluating {symbol}")

            if layer.evaluate(trade_params, account_state) is None:
                self.logger.warning(f"Risk evaluation: {layer_name} rejected {symbol} - trade blocked")
                return TradeValidation(False, layer.rejection_reason)

        self.logger.debug(f"Risk evaluation: trade approved through all {len(self.validation_layers)} layers for {symbol}")
        return TradeValidation(True)

    # Reporting

    def session_stats(self) -> Dict[str, Any]:
        session = self.session
        return {
            'current_pnl': session.current_pnl,
            'pnl_percent': self.daily_limits.pnl_percent(),
            'trade_count': session.trade_count,
            'profit_limit_remaining': self.config.daily_profit_limit - session.current_pnl,
            'loss_limit_remaining': self.config.daily_loss_limit + session.current_pnl,
            'can_trade': not (self.hit_profit_limit() or self.hit_loss_limit()),
            'session_date': session.session_date.isoformat() if session.session_date else None,
            'start_balance': session.start_balance,
        }

    def update_config(self, **changes) -> RiskConfig:
        """Replace the risk config; RiskConfig validation raises ValueError on bad values"""
        new_config = dataclasses.replace(self.config, **changes)
        self.config = new_config

        for layer in (self.daily_limits, self.circuit_breaker_layer, self.position_limits,
                      self.sizing, self.capital_preservation, self.stop_loss):
            layer.config = new_config

        self.logger.system("Risk config updated", **{k: str(v) for k, v in changes.items()})
        return new_config
