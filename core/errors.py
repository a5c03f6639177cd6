"""
Error Taxonomy
Failures raised by venue adapters, the scanner and the trading bot
"""

from typing import Any, Dict, Optional


class TradingBotError(Exception):
    """Base class for all bot errors"""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}


class ConnectivityError(TradingBotError):
    """A venue adapter could not be reached"""

    def __init__(self, message: str, venue: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.venue = venue


class DataInsufficientError(TradingBotError):
    """Not enough price history to compute a signal"""

    def __init__(self, message: str, symbol: Optional[str] = None,
                 available: int = 0, required: int = 0, **kwargs):
        super().__init__(message, **kwargs)
        self.symbol = symbol
        self.available = available
        self.required = required


class OrderRejected(TradingBotError):
    """The venue refused an order"""

    def __init__(self, message: str, symbol: Optional[str] = None,
                 side: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.symbol = symbol
        self.side = side


class HaltCondition(TradingBotError):
    """Daily limit or circuit breaker tripped; labels why trading stopped"""

    def __init__(self, message: str, reason: str = "daily_limit", **kwargs):
        super().__init__(message, **kwargs)
        self.reason = reason


class CycleError(TradingBotError):
    """Unexpected failure inside a scan cycle"""
