"""
Configuration Management
Loads and validates environment variables and configuration settings
"""

import os
from typing import List, Optional
from dotenv import load_dotenv

from core.models import AssetSpec, RiskConfig


DEFAULT_STOCK_SYMBOLS = 'AAPL,MSFT,GOOGL,AMZN,NVDA,META,TSLA,JPM,V,JNJ'

# PRIMARY:FALLBACK, EUR pairs first with USD fallback on Kraken
DEFAULT_CRYPTO_PAIRS = (
    'BTC/EUR:BTC/USD,ETH/EUR:ETH/USD,USDT/EUR:USDT/USD,BNB/EUR:BNB/USD,'
    'SOL/EUR:SOL/USD,XRP/EUR:XRP/USD,USDC/EUR:USDC/USD,ADA/EUR:ADA/USD,'
    'DOGE/EUR:DOGE/USD,TRX/EUR:TRX/USD'
)


class Config:
    """
    Centralized configuration management for the dual-venue trader
    Loads settings from environment variables with validation
    """

    def __init__(self, env_file: Optional[str] = None):
        """
        Initialize configuration from environment variables

        Args:
            env_file: Path to .env file (optional)
        """
        # Load environment variables
        if env_file:
            load_dotenv(env_file)
        else:
            load_dotenv()

        self._load_configuration()
        self._validate_configuration()

    def _load_configuration(self):
        """Load all configuration values from environment variables"""

        # ===== Venue Credentials =====
        self.ALPACA_API_KEY = os.getenv('ALPACA_API_KEY', '')
        self.ALPACA_SECRET_KEY = os.getenv('ALPACA_SECRET_KEY', '')
        self.ALPACA_PAPER = self._str_to_bool(os.getenv('ALPACA_PAPER', 'true'))
        if self.ALPACA_PAPER:
            self.ALPACA_BASE_URL = 'https://paper-api.alpaca.markets'
        else:
            self.ALPACA_BASE_URL = 'https://api.alpaca.markets'
        self.ALPACA_DATA_URL = os.getenv('ALPACA_DATA_URL', 'https://data.alpaca.markets')

        self.KRAKEN_API_KEY = os.getenv('KRAKEN_API_KEY', '')
        self.KRAKEN_SECRET_KEY = os.getenv('KRAKEN_SECRET_KEY', '')

        # Fixed conversion for USD holdings on the crypto venue (no live FX feed)
        self.BASE_CURRENCY = os.getenv('BASE_CURRENCY', 'EUR')
        self.USD_TO_EUR_RATE = float(os.getenv('USD_TO_EUR_RATE', '0.92'))

        # ===== Asset Universe =====
        stock_symbols_str = os.getenv('STOCK_SYMBOLS', DEFAULT_STOCK_SYMBOLS)
        self.STOCK_SYMBOLS = [s.strip().upper() for s in stock_symbols_str.split(',') if s.strip()]
        crypto_pairs_str = os.getenv('CRYPTO_PAIRS', DEFAULT_CRYPTO_PAIRS)
        self.CRYPTO_PAIRS = self._parse_crypto_pairs(crypto_pairs_str)

        # ===== Risk Management Configuration =====
        self.CAPITAL_BASE = float(os.getenv('CAPITAL_BASE', '5000'))
        self.DAILY_PROFIT_LIMIT = float(os.getenv('DAILY_PROFIT_LIMIT', '500'))
        self.DAILY_LOSS_LIMIT = float(os.getenv('DAILY_LOSS_LIMIT', '200'))
        self.AGGRESSIVENESS = int(os.getenv('AGGRESSIVENESS', '70'))
        self.MAX_TOTAL_POSITIONS = int(os.getenv('MAX_TOTAL_POSITIONS', '5'))
        self.MAX_STOCK_POSITIONS = int(os.getenv('MAX_STOCK_POSITIONS', '3'))
        self.MAX_CRYPTO_POSITIONS = int(os.getenv('MAX_CRYPTO_POSITIONS', '3'))
        self.STOP_LOSS_PERCENT = float(os.getenv('STOP_LOSS_PERCENT', '2'))
        self.TAKE_PROFIT_PERCENT = float(os.getenv('TAKE_PROFIT_PERCENT', '4'))

        # ===== Signal Configuration =====
        self.RSI_PERIOD = int(os.getenv('RSI_PERIOD', '14'))
        self.RSI_OVERSOLD = float(os.getenv('RSI_OVERSOLD', '30'))
        self.RSI_OVERBOUGHT = float(os.getenv('RSI_OVERBOUGHT', '70'))
        self.MIN_SIGNAL_STRENGTH = float(os.getenv('MIN_SIGNAL_STRENGTH', '50'))
        self.TOP_CANDIDATE_COUNT = int(os.getenv('TOP_CANDIDATE_COUNT', '3'))

        # ===== Scanner Configuration =====
        self.SCAN_INTERVAL_MS = int(os.getenv('SCAN_INTERVAL_MS', '60000'))
        self.HISTORY_BARS = int(os.getenv('HISTORY_BARS', '100'))
        self.SCAN_MAX_WORKERS = int(os.getenv('SCAN_MAX_WORKERS', '8'))

        # ===== Logging Configuration =====
        self.LOG_API_CALLS = self._str_to_bool(os.getenv('LOG_API_CALLS', 'false'))
        self.LOG_POSITION_REJECTIONS = self._str_to_bool(os.getenv('LOG_POSITION_REJECTIONS', 'true'))
        self.LOG_SIGNALS = self._str_to_bool(os.getenv('LOG_SIGNALS', 'true'))
        self.LOG_RISK_MANAGEMENT = self._str_to_bool(os.getenv('LOG_RISK_MANAGEMENT', 'true'))
        self.LOG_TRADE_EXECUTION = self._str_to_bool(os.getenv('LOG_TRADE_EXECUTION', 'true'))
        self.LOG_PERFORMANCE = self._str_to_bool(os.getenv('LOG_PERFORMANCE', 'true'))
        self.LOG_SYSTEM_EVENTS = self._str_to_bool(os.getenv('LOG_SYSTEM_EVENTS', 'true'))
        self.LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
        self.LOG_OUTPUT = os.getenv('LOG_OUTPUT', 'both')
        self.LOG_FILE_PATH = os.getenv('LOG_FILE_PATH', './logs')
        self.LOG_FILE_MAX_SIZE = int(os.getenv('LOG_FILE_MAX_SIZE', '10'))
        self.LOG_FILE_BACKUP_COUNT = int(os.getenv('LOG_FILE_BACKUP_COUNT', '5'))

        # ===== Storage Configuration =====
        self.STORAGE_BACKEND = os.getenv('STORAGE_BACKEND', 'json').lower()
        self.DATA_DIRECTORY = os.getenv('DATA_DIRECTORY', './data')
        self.MONGODB_HOST = os.getenv('MONGODB_HOST', 'localhost')
        self.MONGODB_PORT = int(os.getenv('MONGODB_PORT', '27017'))
        self.MONGODB_DATABASE = os.getenv('MONGODB_DATABASE', 'dual_venue_trader')
        self.MONGODB_USERNAME = os.getenv('MONGODB_USERNAME', '')
        self.MONGODB_PASSWORD = os.getenv('MONGODB_PASSWORD', '')
        self.MONGODB_RETENTION_DAYS = int(os.getenv('MONGODB_RETENTION_DAYS', '30'))

        # ===== System Configuration =====
        self.API_TIMEOUT = int(os.getenv('API_TIMEOUT', '10'))
        self.RETRY_ATTEMPTS = int(os.getenv('RETRY_ATTEMPTS', '3'))
        self.RETRY_DELAY = float(os.getenv('RETRY_DELAY', '1'))

    def _validate_configuration(self):
        """Validate critical configuration values"""

        # Validate numeric ranges
        if not 50 <= self.AGGRESSIVENESS <= 100:
            raise ValueError("AGGRESSIVENESS must be between 50 and 100")

        if self.DAILY_PROFIT_LIMIT <= 0 or self.DAILY_LOSS_LIMIT <= 0:
            raise ValueError("DAILY_PROFIT_LIMIT and DAILY_LOSS_LIMIT must be positive")

        if self.MAX_TOTAL_POSITIONS < 1:
            raise ValueError("MAX_TOTAL_POSITIONS must be at least 1")

        if self.RSI_PERIOD < 1:
            raise ValueError("RSI_PERIOD must be at least 1")

        if not 0 < self.RSI_OVERSOLD < self.RSI_OVERBOUGHT < 100:
            raise ValueError("RSI thresholds must satisfy 0 < RSI_OVERSOLD < RSI_OVERBOUGHT < 100")

        if not 0 <= self.MIN_SIGNAL_STRENGTH <= 100:
            raise ValueError("MIN_SIGNAL_STRENGTH must be between 0 and 100")

        if self.TOP_CANDIDATE_COUNT < 1:
            raise ValueError("TOP_CANDIDATE_COUNT must be at least 1")

        if self.SCAN_INTERVAL_MS < 1000:
            raise ValueError("SCAN_INTERVAL_MS must be at least 1000")

        if self.HISTORY_BARS < self.RSI_PERIOD + 1:
            raise ValueError("HISTORY_BARS must exceed RSI_PERIOD")

        if self.USD_TO_EUR_RATE <= 0:
            raise ValueError("USD_TO_EUR_RATE must be positive")

        # Validate storage settings
        if self.STORAGE_BACKEND not in ['json', 'mongodb']:
            raise ValueError("STORAGE_BACKEND must be 'json' or 'mongodb'")

        # Validate log level
        if self.LOG_LEVEL not in ['DEBUG', 'INFO', 'WARNING', 'ERROR']:
            raise ValueError("LOG_LEVEL must be DEBUG, INFO, WARNING, or ERROR")

        if self.LOG_OUTPUT not in ['console', 'file', 'both']:
            raise ValueError("LOG_OUTPUT must be console, file, or both")

        # Create necessary directories
        if self.LOG_OUTPUT in ['file', 'both']:
            os.makedirs(self.LOG_FILE_PATH, exist_ok=True)

    @staticmethod
    def _str_to_bool(value: str) -> bool:
        """Convert string to boolean"""
        return value.lower() in ('true', '1', 'yes', 'on')

    @staticmethod
    def _parse_crypto_pairs(value: str) -> List[AssetSpec]:
        """Parse 'BTC/EUR:BTC/USD,ETH/EUR' into crypto asset specs"""
        specs = []
        for item in value.split(','):
            item = item.strip()
            if not item:
                continue
            primary, _, fallback = item.partition(':')
            specs.append(AssetSpec.crypto(primary.strip().upper(), fallback.strip().upper() or None))
        return specs

    def risk_config(self) -> RiskConfig:
        """Build the immutable risk policy"""
        return RiskConfig(
            capital_base=self.CAPITAL_BASE,
            daily_profit_limit=self.DAILY_PROFIT_LIMIT,
            daily_loss_limit=self.DAILY_LOSS_LIMIT,
            aggressiveness=self.AGGRESSIVENESS,
            max_total_positions=self.MAX_TOTAL_POSITIONS,
            max_stock_positions=self.MAX_STOCK_POSITIONS,
            max_crypto_positions=self.MAX_CRYPTO_POSITIONS,
            stop_loss_percent=self.STOP_LOSS_PERCENT,
            take_profit_percent=self.TAKE_PROFIT_PERCENT,
        )

    def universe(self) -> List[AssetSpec]:
        """Stocks first, then crypto pairs, in configured order"""
        stocks = [AssetSpec.stock(symbol) for symbol in self.STOCK_SYMBOLS]
        return stocks + list(self.CRYPTO_PAIRS)

    @property
    def scan_interval_seconds(self) -> float:
        return self.SCAN_INTERVAL_MS / 1000.0

    def is_paper_trading(self) -> bool:
        """Check if the equities venue points at the paper environment"""
        return self.ALPACA_PAPER

    def __repr__(self) -> str:
        """String representation of configuration"""
        return (
            f"Config(paper={self.ALPACA_PAPER}, "
            f"capital={self.CAPITAL_BASE} {self.BASE_CURRENCY}, "
            f"assets={len(self.STOCK_SYMBOLS)} stocks + {len(self.CRYPTO_PAIRS)} crypto)"
        )
