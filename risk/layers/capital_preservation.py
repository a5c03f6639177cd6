"""Capital Preservation: keep a cash reserve on every buy"""
from typing import Dict, Any, Optional

# Share of balance a single buy may commit
RESERVE_BUFFER = 0.95


class CapitalPreservationLayer:
    def __init__(self, config, logger):
        self.config = config
        self.logger = logger
        self.rejection_reason: Optional[str] = None

    def evaluate(self, trade_params: Dict[str, Any], account_state: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        self.rejection_reason = None
        balance = account_state.get('available_balance', 0.0)
        trade_value = float(trade_params['quantity']) * trade_params['price']

        if trade_value > balance * RESERVE_BUFFER:
            self.rejection_reason = 'Insufficient balance'
            self.logger.position_rejected(
                symbol=trade_params.get('symbol', 'UNKNOWN'),
                reason=self.rejection_reason,
                layer='CapitalPreservation',
                trade_value=f'{trade_value:.2f}',
                usable_balance=f'{balance * RESERVE_BUFFER:.2f}'
            )
            return None

        return trade_params
