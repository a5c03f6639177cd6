"""
RSI Strategy
Wilder-smoothed RSI classified into BUY / SELL / HOLD with a 0-100 strength
"""

from typing import Dict, Optional, Sequence, Tuple

import numpy as np

from core.models import PricePoint, SignalType
from .base_strategy import BaseStrategy


def calculate_rsi(closes: Sequence[float], period: int = 14) -> Optional[float]:
    """
    Calculate the latest RSI value with Wilder smoothing

    The first average gain/loss is the simple mean of the first `period`
    deltas; every later delta is folded in as (avg * (period - 1) + value) / period.

    Args:
        closes: Close prices ascending by time
        period: RSI period

    Returns:
        RSI in [0, 100], or None when fewer than period + 1 closes are given
    """
    if period < 1:
        raise ValueError("RSI period must be at least 1")
    if closes is None or len(closes) < period + 1:
        return None

    deltas = np.diff(np.asarray(closes, dtype=float))
    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)

    avg_gain = float(gains[:period].mean())
    avg_loss = float(losses[:period].mean())

    for gain, loss in zip(gains[period:], losses[period:]):
        avg_gain = (avg_gain * (period - 1) + gain) / period
        avg_loss = (avg_loss * (period - 1) + loss) / period

    if avg_loss == 0:
        # Flat series has no momentum either way
        return 50.0 if avg_gain == 0 else 100.0

    rs = avg_gain / avg_loss
    return 100.0 - 100.0 / (1.0 + rs)


def classify(value: Optional[float], oversold: float = 30, overbought: float = 70) -> Tuple[SignalType, float]:
    """
    Classify an RSI value

    Returns:
        (signal_type, strength) with strength clamped to [0, 100]
    """
    if value is None:
        return SignalType.HOLD, 0.0

    if value < oversold:
        strength = (oversold - value) / oversold * 100
        return SignalType.BUY, float(min(max(strength, 0.0), 100.0))

    if value > overbought:
        strength = (value - overbought) / (100 - overbought) * 100
        return SignalType.SELL, float(min(max(strength, 0.0), 100.0))

    return SignalType.HOLD, 0.0


class RSIStrategy(BaseStrategy):
    """
    RSI mean-reversion strategy
    - BUY when RSI drops below the oversold threshold
    - SELL when RSI rises above the overbought threshold
    - Strength is the normalized distance past the threshold
    """

    def __init__(self, period: int = 14, oversold: float = 30, overbought: float = 70):
        super().__init__(f"RSI({period})")

        if period < 1:
            raise ValueError("RSI period must be at least 1")
        if not 0 < oversold < overbought < 100:
            raise ValueError("RSI thresholds must satisfy 0 < oversold < overbought < 100")

        self.period = period
        self.oversold = oversold
        self.overbought = overbought

    @classmethod
    def from_config(cls, config) -> "RSIStrategy":
        return cls(
            period=config.RSI_PERIOD,
            oversold=config.RSI_OVERSOLD,
            overbought=config.RSI_OVERBOUGHT,
        )

    def calculate_indicator(self, series: Sequence[PricePoint]) -> Optional[float]:
        if series is None or len(series) < self.period + 1:
            return None
        return calculate_rsi([point.close for point in series], self.period)

    def classify(self, value: Optional[float]) -> Tuple[SignalType, float]:
        return classify(value, self.oversold, self.overbought)

    def analyze(self, series: Sequence[PricePoint]) -> Dict:
        rsi = self.calculate_indicator(series)
        signal_type, strength = self.classify(rsi)

        return {
            'indicator_value': round(rsi, 2) if rsi is not None else None,
            'signal_type': signal_type,
            'strength': strength,
        }
