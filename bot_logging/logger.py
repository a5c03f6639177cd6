"""
Dynamic Logging System
Category-based logging; disabled categories return before any formatting
"""

import logging
import logging.handlers
import os
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from pathlib import Path


LOGGER_NAME = 'dual_venue'

CONSOLE_FORMAT = '%(asctime)s | %(levelname)s | %(message)s'
FILE_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(threadName)s | %(message)s'


class LogCategory(Enum):
    """Log categories, each toggled by a LOG_<CATEGORY> setting"""
    API_CALLS = "api_calls"
    POSITION_REJECTIONS = "position_rejections"
    SIGNALS = "signals"
    RISK_MANAGEMENT = "risk_management"
    TRADE_EXECUTION = "trade_execution"
    PERFORMANCE = "performance"
    SYSTEM_EVENTS = "system_events"
    ERROR_TRACES = "error_traces"

    @property
    def setting(self) -> str:
        return f"LOG_{self.name}"


def render(message: str, context: Dict[str, Any]) -> str:
    """Append non-None context as key=value pairs"""
    pairs = [f"{key}={value}" for key, value in context.items() if value is not None]
    if not pairs:
        return message
    return f"{message} | {' | '.join(pairs)}"


class Logger:
    """
    Trading bot logger
    One child logger per category under the 'dual_venue' root; ERROR_TRACES
    can never be switched off
    """

    def __init__(self, config):
        """
        Initialize logger with configuration

        Args:
            config: Configuration object (LOG_* settings)
        """
        self.config = config
        self.level = getattr(logging, config.LOG_LEVEL, logging.INFO)
        self.main = self._build_main_logger()
        self._loggers: Dict[LogCategory, logging.Logger] = {
            category: self._child(category) for category in LogCategory
        }
        self._category_states: Dict[LogCategory, bool] = {
            category: bool(getattr(config, category.setting, False)) for category in LogCategory
        }
        self._category_states[LogCategory.ERROR_TRACES] = True

    def _handlers(self) -> List[logging.Handler]:
        handlers: List[logging.Handler] = []
        output = self.config.LOG_OUTPUT

        if output in ('console', 'both'):
            console = logging.StreamHandler()
            console.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt='%H:%M:%S'))
            handlers.append(console)

        if output in ('file', 'both'):
            os.makedirs(self.config.LOG_FILE_PATH, exist_ok=True)
            log_file = Path(self.config.LOG_FILE_PATH) / f"{LOGGER_NAME}_{datetime.now():%Y%m%d}.log"
            rotating = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=self.config.LOG_FILE_MAX_SIZE * 1024 * 1024,
                backupCount=self.config.LOG_FILE_BACKUP_COUNT
            )
            rotating.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
            handlers.append(rotating)

        return handlers

    def _build_main_logger(self) -> logging.Logger:
        main_logger = logging.getLogger(LOGGER_NAME)
        main_logger.setLevel(self.level)

        # Rebuilding a Logger replaces the handlers of the previous one
        for handler in list(main_logger.handlers):
            main_logger.removeHandler(handler)
            handler.close()

        for handler in self._handlers():
            handler.setLevel(self.level)
            main_logger.addHandler(handler)
        return main_logger

    def _child(self, category: LogCategory) -> logging.Logger:
        child = logging.getLogger(f'{LOGGER_NAME}.{category.value}')
        child.setLevel(self.level)
        child.propagate = True
        return child

    # ===== Category control =====

    def is_enabled(self, category: LogCategory) -> bool:
        return self._category_states.get(category, False)

    def enable_category(self, category: LogCategory):
        self._category_states[category] = True
        self.system(f"Enabled logging category: {category.value}")

    def disable_category(self, category: LogCategory):
        """Disable a log category (except ERROR_TRACES)"""
        if category is LogCategory.ERROR_TRACES:
            self.warning("Cannot disable ERROR_TRACES category")
            return

        self._category_states[category] = False
        self.system(f"Disabled logging category: {category.value}")

    def get_category_status(self) -> Dict[str, bool]:
        return {category.value: enabled for category, enabled in self._category_states.items()}

    def _log(self, category: LogCategory, level: int, message: str, exc_info: bool = False, **context):
        if not self._category_states.get(category, False):
            return
        self._loggers[category].log(level, render(message, context), exc_info=exc_info)

    # ===== Category-specific logging methods =====

    def api_call(self, method: str, url: str, status: Optional[int] = None, duration: Optional[float] = None, **kwargs):
        self._log(
            LogCategory.API_CALLS,
            logging.DEBUG,
            f"API {method} {url}",
            status=status,
            duration_ms=f"{duration * 1000:.0f}" if duration is not None else None,
            **kwargs
        )

    def position_rejected(self, symbol: str, reason: str, layer: str, **kwargs):
        self._log(
            LogCategory.POSITION_REJECTIONS,
            logging.WARNING,
            f"Position Rejected: {symbol}",
            reason=reason,
            layer=layer,
            **kwargs
        )

    def signal_detected(self, symbol: str, signal_type: str, strength: float, indicator: Optional[float], **kwargs):
        """Log a computed BUY/SELL signal"""
        self._log(
            LogCategory.SIGNALS,
            logging.INFO,
            f"Signal: {signal_type} {symbol}",
            rsi=f"{indicator:.2f}" if indicator is not None else None,
            strength=f"{strength:.0f}",
            **kwargs
        )

    def scan_summary(self, total: int, buy_count: int, sell_count: int, errors: int, duration: float, **kwargs):
        """Log the outcome of a full market scan"""
        self._log(
            LogCategory.SIGNALS,
            logging.INFO,
            "Scan complete",
            signals=total,
            buy=buy_count,
            sell=sell_count,
            errors=errors,
            duration=f"{duration:.1f}s",
            **kwargs
        )

    def risk_layer_triggered(self, layer: str, reason: str, action: str, **kwargs):
        self._log(
            LogCategory.RISK_MANAGEMENT,
            logging.WARNING,
            f"Risk Layer Triggered: {layer}",
            reason=reason,
            action=action,
            **kwargs
        )

    def trade_entry(self, symbol: str, side: str, quantity: str, price: float, venue: str, **kwargs):
        self._log(
            LogCategory.TRADE_EXECUTION,
            logging.INFO,
            f"Trade Entry: {side.upper()} {quantity} {symbol} @ {price:.2f}",
            venue=venue,
            **kwargs
        )

    def trade_exit(self, symbol: str, pnl: float, pnl_percent: float, reason: str, **kwargs):
        self._log(
            LogCategory.TRADE_EXECUTION,
            logging.INFO,
            f"Trade Exit: {symbol} ({reason})",
            pnl=f"{pnl:+.2f}",
            pnl_percent=f"{pnl_percent:+.2f}%",
            **kwargs
        )

    def performance_update(self, balance: float, daily_pnl: float, pnl_percent: float, open_positions: int, **kwargs):
        """Log per-cycle account snapshot"""
        self._log(
            LogCategory.PERFORMANCE,
            logging.INFO,
            "Account Update",
            balance=f"{balance:.2f}",
            daily_pnl=f"{daily_pnl:+.2f}",
            pnl_percent=f"{pnl_percent:+.2f}%",
            open_positions=open_positions,
            **kwargs
        )

    def system(self, message: str, **kwargs):
        self._log(LogCategory.SYSTEM_EVENTS, logging.INFO, message, **kwargs)

    def error(self, message: str, exc_info: bool = False, **kwargs):
        """Log error (always enabled); exc_info attaches the active traceback"""
        self._log(LogCategory.ERROR_TRACES, logging.ERROR, message, exc_info=exc_info, **kwargs)

    # ===== Uncategorized =====

    def debug(self, message: str, **kwargs):
        self.main.debug(render(message, kwargs))

    def info(self, message: str, **kwargs):
        self.main.info(render(message, kwargs))

    def warning(self, message: str, **kwargs):
        self.main.warning(render(message, kwargs))

    def critical(self, message: str, **kwargs):
        self.main.critical(render(message, kwargs))
