"""
Exchange Module
Venue adapters for the equities (Alpaca) and crypto (Kraken via CCXT) venues
"""

from .base_client import BaseVenueAdapter
from .alpaca_client import AlpacaAdapter
from .ccxt_client import KrakenAdapter
from .exchange_manager import VenueManager
from .api_manager import APIManager

__all__ = [
    'BaseVenueAdapter',
    'AlpacaAdapter',
    'KrakenAdapter',
    'VenueManager',
    'APIManager'
]
