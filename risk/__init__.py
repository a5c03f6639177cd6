"""Risk management package"""

from .risk_manager import RiskManager

__all__ = ['RiskManager']
