"""
Signal Strategies
"""

from .base_strategy import BaseStrategy
from .rsi_strategy import RSIStrategy, calculate_rsi, classify

__all__ = ['BaseStrategy', 'RSIStrategy', 'calculate_rsi', 'classify']
