"""
Core trading engine and modules
"""

from .trading_bot import TradingBot
from .position_manager import PositionManager
from .scanner import MarketScanner, find_best_opportunities
from .scheduler import CycleScheduler

__all__ = ['TradingBot', 'PositionManager', 'MarketScanner', 'find_best_opportunities', 'CycleScheduler']
