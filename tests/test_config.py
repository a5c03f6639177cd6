"""Tests for environment configuration"""

import pytest

from config import Config
from core.models import AssetClass, Venue


class TestConfig:
    """Test loading and validation"""

    def test_defaults(self, config):
        assert config.AGGRESSIVENESS == 70
        assert config.DAILY_PROFIT_LIMIT == 500
        assert config.DAILY_LOSS_LIMIT == 200
        assert config.MAX_TOTAL_POSITIONS == 5
        assert config.RSI_PERIOD == 14
        assert config.USD_TO_EUR_RATE == pytest.approx(0.92)
        assert config.scan_interval_seconds == 60
        assert config.is_paper_trading()
        assert config.ALPACA_BASE_URL == 'https://paper-api.alpaca.markets'

    def test_crypto_pairs_parsed(self, config):
        pair = config.CRYPTO_PAIRS[0]
        assert pair.symbol == 'BTC/EUR'
        assert pair.fallback_symbol == 'BTC/USD'
        assert pair.venue is Venue.CRYPTO

    def test_pair_without_fallback(self):
        specs = Config._parse_crypto_pairs('eth/eur, ,SOL/EUR:sol/usd')
        assert [(s.symbol, s.fallback_symbol) for s in specs] == [
            ('ETH/EUR', None),
            ('SOL/EUR', 'SOL/USD'),
        ]

    def test_universe_order(self, config):
        universe = config.universe()
        assert [s.symbol for s in universe] == ['AAPL', 'MSFT', 'BTC/EUR']
        assert universe[0].asset_class is AssetClass.STOCK
        assert universe[-1].asset_class is AssetClass.CRYPTO

    def test_risk_config(self, config, monkeypatch, tmp_path):
        monkeypatch.setenv('AGGRESSIVENESS', '90')
        monkeypatch.setenv('MAX_CRYPTO_POSITIONS', '1')
        risk_config = Config(str(tmp_path / '.env')).risk_config()
        assert risk_config.aggressiveness == 90
        assert risk_config.max_crypto_positions == 1

    @pytest.mark.parametrize("key,value", [
        ('AGGRESSIVENESS', '40'),
        ('DAILY_LOSS_LIMIT', '0'),
        ('RSI_OVERSOLD', '80'),
        ('SCAN_INTERVAL_MS', '10'),
        ('STORAGE_BACKEND', 'sqlite'),
        ('LOG_LEVEL', 'TRACE'),
        ('USD_TO_EUR_RATE', '0'),
    ])
    def test_invalid_values(self, config, monkeypatch, tmp_path, key, value):
        monkeypatch.setenv(key, value)
        with pytest.raises(ValueError):
            Config(str(tmp_path / '.env'))

    def test_live_mode(self, config, monkeypatch, tmp_path):
        monkeypatch.setenv('ALPACA_PAPER', 'false')
        live = Config(str(tmp_path / '.env'))
        assert not live.is_paper_trading()
        assert live.ALPACA_BASE_URL == 'https://api.alpaca.markets'
        assert 'paper=False' in repr(live)
