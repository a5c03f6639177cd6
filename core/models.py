"""
Core Data Models
Typed records shared by the signal engine, scanner, risk manager and bot
"""

import math
from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class Venue(str, Enum):
    """Trading destinations"""
    EQUITIES = "equities"
    CRYPTO = "crypto"

    @property
    def display_name(self) -> str:
        return "Alpaca" if self is Venue.EQUITIES else "Kraken"


class AssetClass(str, Enum):
    """STOCK trades in whole units, CRYPTO in fractions"""
    STOCK = "stock"
    CRYPTO = "crypto"


class SignalType(str, Enum):
    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"


class RunState(str, Enum):
    STOPPED = "stopped"
    RUNNING = "running"
    PAUSED = "paused"


@dataclass(frozen=True)
class AssetSpec:
    symbol: str
    venue: Venue
    asset_class: AssetClass
    fallback_symbol: Optional[str] = None

    @classmethod
    def stock(cls, symbol: str) -> "AssetSpec":
        return cls(symbol=symbol, venue=Venue.EQUITIES, asset_class=AssetClass.STOCK)

    @classmethod
    def crypto(cls, symbol: str, fallback_symbol: Optional[str] = None) -> "AssetSpec":
        return cls(
            symbol=symbol,
            venue=Venue.CRYPTO,
            asset_class=AssetClass.CRYPTO,
            fallback_symbol=fallback_symbol,
        )


@dataclass(frozen=True)
class PricePoint:
    timestamp: datetime
    close: float


@dataclass(frozen=True)
class Quantity:
    """
    Order quantity tagged with its asset class
    A STOCK quantity is always a whole number of shares
    """
    amount: float
    asset_class: AssetClass

    def __post_init__(self):
        if self.amount < 0:
            raise ValueError(f"Quantity cannot be negative: {self.amount}")
        if self.asset_class is AssetClass.STOCK and not float(self.amount).is_integer():
            raise ValueError(f"Fractional share quantity not allowed: {self.amount}")

    @classmethod
    def shares(cls, amount: int) -> "Quantity":
        return cls(amount=int(amount), asset_class=AssetClass.STOCK)

    @classmethod
    def units(cls, amount: float) -> "Quantity":
        return cls(amount=float(amount), asset_class=AssetClass.CRYPTO)

    @property
    def is_discrete(self) -> bool:
        return self.asset_class is AssetClass.STOCK

    def notional(self, price: float) -> float:
        return self.amount * price

    def __float__(self) -> float:
        return float(self.amount)

    def __str__(self) -> str:
        if self.is_discrete:
            return str(int(self.amount))
        return f"{self.amount:.6f}"


@dataclass(frozen=True)
class Signal:
    symbol: str
    venue: Venue
    asset_class: AssetClass
    current_price: float
    indicator_value: Optional[float]
    signal_type: SignalType
    strength: float
    timestamp: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        if self.signal_type is SignalType.HOLD and self.strength != 0:
            raise ValueError("HOLD signals must have zero strength")
        if not 0 <= self.strength <= 100:
            raise ValueError(f"Signal strength out of range: {self.strength}")

    def to_document(self) -> Dict[str, Any]:
        return {
            'symbol': self.symbol,
            'venue': self.venue.value,
            'asset_class': self.asset_class.value,
            'price': self.current_price,
            'indicator_value': self.indicator_value,
            'signal': self.signal_type.value,
            'strength': self.strength,
            'timestamp': self.timestamp,
        }


@dataclass
class Position:
    symbol: str
    venue: Venue
    quantity: float
    entry_price: float = 0.0
    current_price: float = 0.0
    market_value: float = 0.0
    unrealized_pnl: float = 0.0
    unrealized_pnl_percent: float = 0.0
    provisional: bool = False


@dataclass(frozen=True)
class OrderResult:
    order_id: str
    symbol: str
    side: str
    quantity: float
    status: str
    venue: Venue


@dataclass(frozen=True)
class RiskConfig:
    capital_base: float = 5000.0
    daily_profit_limit: float = 500.0
    daily_loss_limit: float = 200.0
    aggressiveness: int = 70
    max_total_positions: int = 5
    max_stock_positions: int = 3
    max_crypto_positions: int = 3
    stop_loss_percent: float = 2.0
    take_profit_percent: float = 4.0

    def __post_init__(self):
        if not 50 <= self.aggressiveness <= 100:
            raise ValueError("aggressiveness must be between 50 and 100")
        if self.daily_profit_limit <= 0 or self.daily_loss_limit <= 0:
            raise ValueError("daily limits must be positive")
        if min(self.max_total_positions, self.max_stock_positions, self.max_crypto_positions) < 0:
            raise ValueError("position limits cannot be negative")
        if self.stop_loss_percent <= 0 or self.take_profit_percent <= 0:
            raise ValueError("stop-loss and take-profit percents must be positive")

    def max_positions_for(self, venue: Venue) -> int:
        if venue is Venue.EQUITIES:
            return self.max_stock_positions
        return self.max_crypto_positions


@dataclass
class DailySession:
    start_balance: float = 0.0
    current_pnl: float = 0.0
    trade_count: int = 0
    session_date: Optional[date] = None


@dataclass(frozen=True)
class TradeValidation:
    valid: bool
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.valid


@dataclass
class ScanResult:
    signals: List[Signal]
    buy: List[Signal]
    sell: List[Signal]
    hold: List[Signal]
    error_count: int
    duration: float

    @property
    def total(self) -> int:
        return len(self.signals)

    @property
    def buy_count(self) -> int:
        return len(self.buy)

    @property
    def sell_count(self) -> int:
        return len(self.sell)


@dataclass(frozen=True)
class TradeRecord:
    symbol: str
    venue: Venue
    side: str
    quantity: float
    price: float
    indicator_value: Optional[float]
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def total(self) -> float:
        return self.quantity * self.price

    def to_document(self) -> Dict[str, Any]:
        document = asdict(self)
        document['venue'] = self.venue.value
        document['total'] = self.total
        return document


def is_finite_price(value: Optional[float]) -> bool:
    return value is not None and math.isfinite(value) and value > 0
