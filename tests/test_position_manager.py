"""Tests for the in-cycle position book"""

from core import PositionManager
from core.models import Position, Quantity, Venue
from core.position_manager import asset_key


def held(symbol, venue=Venue.CRYPTO):
    return Position(symbol=symbol, venue=venue, quantity=1.0)


class TestAssetKey:
    """Test base-asset extraction"""

    def test_crypto_pair_uses_base(self):
        assert asset_key('BTC/EUR') == 'BTC'
        assert asset_key('BTC/USD') == 'BTC'

    def test_stock_unchanged(self):
        assert asset_key('AAPL') == 'AAPL'


class TestHasPosition:
    """Test duplicate-holding detection"""

    def test_other_quote_currency_counts_as_held(self, logger):
        book = PositionManager(logger, [held('BTC/EUR')])
        assert book.has_position('BTC/USD')
        assert book.has_position('BTC/EUR')
        assert not book.has_position('ETH/USD')

    def test_stocks_match_exactly(self, logger):
        book = PositionManager(logger, [held('AAPL', Venue.EQUITIES)])
        assert book.has_position('AAPL')
        assert not book.has_position('AAP')

    def test_provisional_entry_is_held(self, logger):
        book = PositionManager(logger)
        position = book.add_provisional('ETH/USD', Venue.CRYPTO, Quantity.units(0.5), 2000)

        assert position.provisional
        assert position.market_value == 1000
        assert book.has_position('ETH/EUR')
        assert len(book) == 1

    def test_remove_matches_exact_symbol(self, logger):
        book = PositionManager(logger, [held('BTC/EUR')])
        assert book.remove_position('BTC/USD') is None
        assert book.remove_position('BTC/EUR').symbol == 'BTC/EUR'
        assert len(book) == 0
