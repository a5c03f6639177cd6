"""
Configuration Module
"""

from .config import Config

__all__ = ['Config']
