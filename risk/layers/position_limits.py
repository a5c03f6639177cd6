"""Position Limits: total and per-venue caps on open positions"""
from typing import Any, Dict, Optional, Sequence

from core.models import Position, RiskConfig, Venue


class PositionLimitLayer:
    def __init__(self, config: RiskConfig, logger):
        self.config = config
        self.logger = logger
        self.rejection_reason: Optional[str] = None

    def can_open_position(self, open_positions: Sequence[Position], venue: Venue) -> bool:
        total = len(open_positions)
        if total >= self.config.max_total_positions:
            self.logger.debug(f"Max total positions reached ({total}/{self.config.max_total_positions})")
            return False

        venue_count = sum(1 for p in open_positions if p.venue is venue)
        venue_max = self.config.max_positions_for(venue)
        if venue_count >= venue_max:
            self.logger.debug(
                f"Max {venue.display_name} positions reached ({venue_count}/{venue_max})"
            )
            return False

        return True

    def evaluate(self, trade_params: Dict[str, Any], account_state: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        self.rejection_reason = None
        open_positions = account_state.get('open_positions', [])

        if not self.can_open_position(open_positions, trade_params['venue']):
            self.rejection_reason = 'Position limit reached'
            self.logger.position_rejected(
                symbol=trade_params.get('symbol', 'UNKNOWN'),
                reason=self.rejection_reason,
                layer='PositionLimit',
                open_positions=len(open_positions),
                max=self.config.max_total_positions
            )
            return None

        return trade_params
