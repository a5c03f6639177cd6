"""
Bot Logging Module
Category-based logging; disabled categories are dropped before formatting
Note: Named 'bot_logging' so it does not shadow the standard 'logging' module
"""

from .logger import Logger, LogCategory

__all__ = ['Logger', 'LogCategory']
