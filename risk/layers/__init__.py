"""
Risk Management Layers
Individual risk protection layers
"""

from .daily_loss_limit import DailyLimitLayer
from .circuit_breaker import CircuitBreakerLayer, CIRCUIT_BREAKER_LOSS_PERCENT
from .position_limits import PositionLimitLayer
from .position_sizing import PositionSizingLayer
from .capital_preservation import CapitalPreservationLayer, RESERVE_BUFFER
from .stop_loss_management import StopLossManagementLayer

__all__ = [
    'DailyLimitLayer',
    'CircuitBreakerLayer',
    'CIRCUIT_BREAKER_LOSS_PERCENT',
    'PositionLimitLayer',
    'PositionSizingLayer',
    'CapitalPreservationLayer',
    'RESERVE_BUFFER',
    'StopLossManagementLayer'
]
