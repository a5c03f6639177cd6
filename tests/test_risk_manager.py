"""Tests for the risk manager and its layers"""

from datetime import date

import pytest

from core.models import AssetClass, Position, Quantity, RiskConfig, Venue
from risk import RiskManager
from risk.layers import CIRCUIT_BREAKER_LOSS_PERCENT


class FakeClock:
    """Controllable calendar date"""

    def __init__(self, today: date):
        self.today = today

    def __call__(self) -> date:
        return self.today


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(date(2024, 3, 1))


@pytest.fixture
def risk(risk_config, logger, clock) -> RiskManager:
    return RiskManager(risk_config, logger, clock=clock)


def make_positions(stocks: int = 0, cryptos: int = 0):
    positions = [Position(symbol=f"STK{i}", venue=Venue.EQUITIES, quantity=1) for i in range(stocks)]
    positions += [Position(symbol=f"C{i}/EUR", venue=Venue.CRYPTO, quantity=0.1) for i in range(cryptos)]
    return positions


class TestDailySession:
    """Test session accounting and daily limits"""

    def test_no_session_before_first_reset(self, risk):
        assert risk.session.session_date is None

    def test_reset_creates_session(self, risk, clock):
        assert risk.reset_daily_session(5000) is True
        assert risk.session.start_balance == 5000
        assert risk.session.session_date == clock.today

    def test_reset_is_idempotent_within_day(self, risk):
        risk.reset_daily_session(5000)
        risk.update_daily_pnl(5100)
        risk.record_trade()

        assert risk.reset_daily_session(9999) is False
        assert risk.session.start_balance == 5000
        assert risk.session.current_pnl == 100
        assert risk.session.trade_count == 1

    def test_reset_replaces_session_on_new_day(self, risk, clock):
        risk.reset_daily_session(5000)
        risk.record_trade()
        clock.today = date(2024, 3, 2)

        assert risk.reset_daily_session(5200) is True
        assert risk.session.start_balance == 5200
        assert risk.session.trade_count == 0

    def test_update_pnl_without_session_is_noop(self, risk):
        risk.update_daily_pnl(4000)
        assert risk.session.current_pnl == 0

    def test_profit_limit(self, risk):
        risk.reset_daily_session(5000)
        risk.update_daily_pnl(5500)
        assert risk.hit_profit_limit()
        assert risk.should_halt()

    def test_loss_limit(self, risk):
        risk.reset_daily_session(5000)
        risk.update_daily_pnl(4800)
        assert risk.hit_loss_limit()
        assert risk.should_halt()

    def test_within_limits(self, risk):
        risk.reset_daily_session(5000)
        risk.update_daily_pnl(5100)
        assert not risk.should_halt()

    def test_session_stats(self, risk):
        risk.reset_daily_session(5000)
        risk.update_daily_pnl(5050)
        risk.record_trade()

        stats = risk.session_stats()
        assert stats['current_pnl'] == 50
        assert stats['pnl_percent'] == pytest.approx(1.0)
        assert stats['trade_count'] == 1
        assert stats['profit_limit_remaining'] == 450
        assert stats['loss_limit_remaining'] == 250
        assert stats['can_trade'] is True
        assert stats['session_date'] == '2024-03-01'
        assert stats['start_balance'] == 5000


class TestCircuitBreaker:
    """Test the -5% emergency stop"""

    def test_threshold_constant(self):
        assert CIRCUIT_BREAKER_LOSS_PERCENT == -5.0

    def test_trips_past_threshold(self, risk):
        risk.reset_daily_session(5000)
        assert risk.circuit_breaker(4740) is True

    def test_holds_before_threshold(self, risk):
        risk.reset_daily_session(5000)
        assert risk.circuit_breaker(4760) is False

    def test_trips_exactly_at_threshold(self, risk):
        risk.reset_daily_session(5000)
        assert risk.circuit_breaker(4750) is True

    def test_zero_start_balance_never_trips(self, risk):
        risk.reset_daily_session(0)
        assert risk.circuit_breaker(0) is False


class TestPositionLimits:
    """Test total and per-venue caps"""

    def test_total_cap_blocks_every_venue(self, risk):
        positions = make_positions(stocks=2, cryptos=3)
        risk.update_config(max_stock_positions=10, max_crypto_positions=10)
        assert not risk.can_open_position(positions, Venue.EQUITIES)
        assert not risk.can_open_position(positions, Venue.CRYPTO)

    def test_venue_cap(self, risk):
        positions = make_positions(stocks=3)
        assert not risk.can_open_position(positions, Venue.EQUITIES)
        assert risk.can_open_position(positions, Venue.CRYPTO)

    def test_room_available(self, risk):
        assert risk.can_open_position(make_positions(stocks=1, cryptos=1), Venue.EQUITIES)


class TestPositionSizing:
    """Test aggressiveness-scaled sizing"""

    def test_small_stock_position_clamped_to_one_share(self, risk):
        assert risk.sizing.risk_fraction == pytest.approx(0.014)
        assert risk.sizing.position_value(5000) == pytest.approx(70)

        quantity = risk.position_size(5000, 100, AssetClass.STOCK)
        assert quantity == Quantity.shares(1)
        assert quantity.is_discrete

    def test_stock_quantity_floors(self, risk):
        assert risk.position_size(100000, 250, AssetClass.STOCK).amount == 5

    def test_crypto_is_fractional(self, risk):
        quantity = risk.position_size(5000, 20000, AssetClass.CRYPTO)
        assert quantity.asset_class is AssetClass.CRYPTO
        assert quantity.amount == pytest.approx(0.0035)

    def test_crypto_minimum(self, risk):
        assert risk.position_size(100, 50000, AssetClass.CRYPTO).amount == pytest.approx(0.001)

    def test_full_aggressiveness(self, risk):
        risk.update_config(aggressiveness=100)
        assert risk.position_size(10000, 100, AssetClass.STOCK).amount == 2

    def test_non_positive_price_rejected(self, risk):
        with pytest.raises(ValueError):
            risk.position_size(5000, 0, AssetClass.STOCK)

    def test_fractional_shares_cannot_be_built(self):
        with pytest.raises(ValueError):
            Quantity(1.5, AssetClass.STOCK)


class TestExits:
    """Test stop-loss and take-profit exits"""

    @pytest.mark.parametrize("pnl_percent,expected", [
        (-2.0, True),
        (-5.0, True),
        (4.0, True),
        (6.0, True),
        (-1.9, False),
        (3.9, False),
        (0.0, False),
    ])
    def test_should_exit(self, risk, pnl_percent, expected):
        position = Position(symbol="AAPL", venue=Venue.EQUITIES, quantity=1,
                            unrealized_pnl_percent=pnl_percent)
        assert risk.should_exit(position) is expected

    def test_exit_reason(self, risk):
        loser = Position(symbol="A", venue=Venue.EQUITIES, quantity=1, unrealized_pnl_percent=-3)
        winner = Position(symbol="B", venue=Venue.EQUITIES, quantity=1, unrealized_pnl_percent=5)
        assert risk.exit_reason(loser) == 'stop_loss'
        assert risk.exit_reason(winner) == 'take_profit'

    def test_exit_price_levels(self, risk):
        assert risk.stop_loss.stop_loss_price(100) == pytest.approx(98)
        assert risk.stop_loss.take_profit_price(100) == pytest.approx(104)


class TestValidateTrade:
    """Test buy validation through the layers"""

    def test_sell_always_valid(self, risk):
        risk.reset_daily_session(5000)
        risk.update_daily_pnl(4000)
        assert risk.validate_trade('sell', 'AAPL', 10, 100, make_positions(stocks=5), 0).valid

    def test_valid_buy(self, risk):
        risk.reset_daily_session(5000)
        result = risk.validate_trade('buy', 'AAPL', Quantity.shares(1), 100, [], 5000)
        assert result.valid
        assert result.reason is None

    def test_reserve_buffer(self, risk):
        risk.reset_daily_session(1000)
        assert risk.validate_trade('buy', 'AAPL', 9, 100, [], 1000).valid
        result = risk.validate_trade('buy', 'AAPL', 10, 100, [], 1000)
        assert not result.valid
        assert result.reason == 'Insufficient balance'

    def test_position_limit_checked_first(self, risk):
        risk.reset_daily_session(100)
        result = risk.validate_trade('buy', 'AAPL', 10, 100, make_positions(stocks=3), 100)
        assert result.reason == 'Position limit reached'

    def test_daily_limits(self, risk):
        risk.reset_daily_session(5000)
        risk.update_daily_pnl(4700)
        result = risk.validate_trade('buy', 'AAPL', 1, 100, [], 5000)
        assert not result
        assert result.reason == 'Daily limits reached'

    def test_venue_inferred_from_symbol(self, risk):
        risk.reset_daily_session(5000)
        risk.update_config(max_crypto_positions=0)
        assert not risk.validate_trade('buy', 'BTC/EUR', 0.001, 100, [], 5000).valid
        assert risk.validate_trade('buy', 'AAPL', 1, 100, [], 5000).valid


class TestUpdateConfig:
    """Test risk config replacement"""

    def test_replaces_frozen_config(self, risk, risk_config):
        new_config = risk.update_config(daily_loss_limit=50)
        assert new_config is not risk_config
        assert risk.config.daily_loss_limit == 50
        assert risk_config.daily_loss_limit == 200

    def test_layers_see_new_config(self, risk):
        risk.reset_daily_session(5000)
        risk.update_config(daily_loss_limit=50)
        risk.update_daily_pnl(4940)
        assert risk.should_halt()

    def test_invalid_change_rejected(self, risk):
        with pytest.raises(ValueError):
            risk.update_config(aggressiveness=40)
        assert risk.config.aggressiveness == 70

    def test_risk_config_defaults(self):
        config = RiskConfig()
        assert config.max_positions_for(Venue.EQUITIES) == 3
        assert config.max_positions_for(Venue.CRYPTO) == 3
