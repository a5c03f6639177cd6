"""
Circuit Breaker
Emergency halt on excessive session loss
"""

from typing import Optional


# Session loss (percent of start balance) that forces full liquidation
CIRCUIT_BREAKER_LOSS_PERCENT = -5.0


class CircuitBreakerLayer:
    """
    Emergency Circuit Breaker
    Trips when the session has lost 5% or more of its start balance
    """

    def __init__(self, config, logger):
        self.config = config
        self.logger = logger

    @staticmethod
    def loss_percent(balance: float, start_balance: float) -> Optional[float]:
        if start_balance <= 0:
            return None
        return (balance - start_balance) / start_balance * 100

    def is_tripped(self, balance: float, start_balance: float) -> bool:
        """Check the breaker against the current balance"""
        loss_percent = self.loss_percent(balance, start_balance)

        if loss_percent is None:
            return False

        if loss_percent <= CIRCUIT_BREAKER_LOSS_PERCENT:
            self.logger.risk_layer_triggered(
                layer='CircuitBreaker',
                reason=f'Session loss {loss_percent:.2f}%',
                action='Liquidate all positions and stop',
                threshold=f'{CIRCUIT_BREAKER_LOSS_PERCENT:.1f}%'
            )
            self.logger.critical(f"CIRCUIT BREAKER ACTIVATED - Loss: {loss_percent:.2f}%")
            return True

        return False
