"""Stop Loss Management: stop-loss / take-profit exits on open positions"""
from typing import Optional

from core.models import Position, RiskConfig


class StopLossManagementLayer:
    def __init__(self, config: RiskConfig, logger):
        self.config = config
        self.logger = logger

    def stop_loss_price(self, entry_price: float) -> float:
        return entry_price * (1 - self.config.stop_loss_percent / 100)

    def take_profit_price(self, entry_price: float) -> float:
        return entry_price * (1 + self.config.take_profit_percent / 100)

    def exit_reason(self, position: Position) -> Optional[str]:
        """Return 'stop_loss' or 'take_profit' when the position should close"""
        pnl_percent = position.unrealized_pnl_percent

        if pnl_percent <= -self.config.stop_loss_percent:
            return 'stop_loss'
        if pnl_percent >= self.config.take_profit_percent:
            return 'take_profit'
        return None

    def should_exit(self, position: Position) -> bool:
        reason = self.exit_reason(position)
        if reason:
            self.logger.risk_layer_triggered(
                layer='StopLossManagement',
                reason=f'{position.symbol} {reason} at {position.unrealized_pnl_percent:.2f}%',
                action='Close position'
            )
        return reason is not None
