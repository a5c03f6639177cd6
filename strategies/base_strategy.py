"""
Base Strategy Class
Abstract base for signal strategies
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional, Sequence, Tuple

from core.models import PricePoint, SignalType


class BaseStrategy(ABC):
    """
    Abstract base class for signal strategies
    Strategies are pure: the same price history always yields the same analysis
    """

    def __init__(self, name: str):
        """
        Initialize strategy

        Args:
            name: Strategy name
        """
        self.name = name

    @abstractmethod
    def calculate_indicator(self, series: Sequence[PricePoint]) -> Optional[float]:
        """
        Calculate the strategy indicator from price history

        Args:
            series: Price points ascending by time

        Returns:
            Latest indicator value, or None when the history is too short
        """
        pass

    @abstractmethod
    def classify(self, value: Optional[float]) -> Tuple[SignalType, float]:
        """
        Map an indicator value to a signal

        Args:
            value: Indicator value, or None when it could not be computed

        Returns:
            (signal_type, strength) with strength in 0-100; HOLD carries 0
        """
        pass

    @abstractmethod
    def analyze(self, series: Sequence[PricePoint]) -> Dict:
        """
        Analyze price history

        Args:
            series: Price points ascending by time

        Returns:
            {
                'indicator_value': float or None,
                'signal_type': SignalType,
                'strength': float (0-100)
            }
        """
        pass

    @staticmethod
    def is_signal_strong(analysis: Dict, min_strength: float = 30) -> bool:
        """Check if an analysis is actionable at the given strength"""
        return (analysis['signal_type'] is not SignalType.HOLD
                and analysis['strength'] >= min_strength)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
