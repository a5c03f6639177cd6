"""Daily Limits: session accounting and profit/loss halts"""
from datetime import date
from typing import Any, Callable, Dict, Optional

from core.models import DailySession, RiskConfig


class DailyLimitLayer:
    """
    Owns the DailySession for the current calendar date
    Trading halts once session P&L reaches the profit target or the loss limit
    """

    def __init__(self, config: RiskConfig, logger, clock: Callable[[], date] = date.today):
        self.config = config
        self.logger = logger
        self.clock = clock
        self.session = DailySession()
        self.rejection_reason: Optional[str] = None

    def reset_if_new_day(self, balance: float) -> bool:
        """Replace the session when the calendar date changed; no-op otherwise"""
        today = self.clock()
        if self.session.session_date == today:
            return False

        self.session = DailySession(
            start_balance=balance,
            current_pnl=0.0,
            trade_count=0,
            session_date=today,
        )
        self.logger.system(f"Daily session reset for {today.isoformat()}", start_balance=f"{balance:.2f}")
        return True

    @property
    def has_session(self) -> bool:
        return self.session.session_date is not None

    def update_pnl(self, balance: float):
        if not self.has_session:
            self.logger.debug("No active session, daily P&L not updated")
            return
        self.session.current_pnl = balance - self.session.start_balance

    def record_trade(self):
        self.session.trade_count += 1

    def hit_profit_limit(self) -> bool:
        return self.session.current_pnl >= self.config.daily_profit_limit

    def hit_loss_limit(self) -> bool:
        return self.session.current_pnl <= -self.config.daily_loss_limit

    def should_halt(self) -> bool:
        if self.hit_profit_limit():
            self.logger.risk_layer_triggered(
                layer='DailyLimit',
                reason='Daily profit limit reached',
                action='Trading halted',
                daily_pnl=f'{self.session.current_pnl:.2f}',
                limit=f'{self.config.daily_profit_limit:.2f}'
            )
            return True

        if self.hit_loss_limit():
            self.logger.risk_layer_triggered(
                layer='DailyLimit',
                reason='Daily loss limit reached',
                action='Trading halted',
                daily_pnl=f'{self.session.current_pnl:.2f}',
                limit=f'{-self.config.daily_loss_limit:.2f}'
            )
            return True

        return False

    def pnl_percent(self) -> float:
        if self.session.start_balance <= 0:
            return 0.0
        return self.session.current_pnl / self.session.start_balance * 100

    def evaluate(self, trade_params: Dict[str, Any], account_state: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        self.rejection_reason = None

        if self.should_halt():
            self.rejection_reason = 'Daily limits reached'
            self.logger.position_rejected(
                symbol=trade_params.get('symbol', 'UNKNOWN'),
                reason=self.rejection_reason,
                layer='DailyLimit',
                daily_pnl=f'{self.session.current_pnl:.2f}'
            )
            return None

        return trade_params
