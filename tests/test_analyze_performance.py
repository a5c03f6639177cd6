"""Tests for journal summaries and formatting helpers"""

import pytest

from scripts.analyze_performance import summarize_sessions, summarize_signals, summarize_trades
from utils.helpers import format_currency, format_duration


class TestSummaries:
    """Test pandas journal summaries"""

    def test_trades_grouped_by_venue_and_side(self):
        trades = [
            {'symbol': 'AAPL', 'venue': 'equities', 'side': 'buy', 'total': 100.0},
            {'symbol': 'MSFT', 'venue': 'equities', 'side': 'buy', 'total': 250.0},
            {'symbol': 'BTC/EUR', 'venue': 'crypto', 'side': 'buy', 'total': 70.0},
            {'symbol': 'AAPL', 'venue': 'equities', 'side': 'sell', 'total': 104.0},
        ]
        summary = summarize_trades(trades).set_index(['venue', 'side'])

        assert summary.loc[('equities', 'buy'), 'trades'] == 2
        assert summary.loc[('equities', 'buy'), 'notional'] == pytest.approx(350)
        assert summary.loc[('crypto', 'buy'), 'trades'] == 1

    def test_empty_inputs(self):
        assert summarize_trades([]).empty
        assert summarize_signals([]).empty
        assert summarize_sessions([]).empty

    def test_signals_sorted_by_count(self):
        signals = [
            {'symbol': 'A', 'signal': 'HOLD', 'strength': 0},
            {'symbol': 'B', 'signal': 'BUY', 'strength': 60},
            {'symbol': 'C', 'signal': 'BUY', 'strength': 80},
        ]
        summary = summarize_signals(signals)
        assert list(summary['signal']) == ['BUY', 'HOLD']
        assert summary.iloc[0]['avg_strength'] == pytest.approx(70)

    def test_sessions_keep_last_record_per_day(self):
        sessions = [
            {'session_date': '2024-03-01', 'current_pnl': 10, 'pnl_percent': 0.1, 'trade_count': 1},
            {'session_date': '2024-03-01', 'current_pnl': 40, 'pnl_percent': 0.4, 'trade_count': 3},
            {'session_date': '2024-03-02', 'current_pnl': -5, 'pnl_percent': -0.05, 'trade_count': 1},
            {'session_date': None, 'current_pnl': 0, 'pnl_percent': 0, 'trade_count': 0},
        ]
        summary = summarize_sessions(sessions)
        assert list(summary['session_date']) == ['2024-03-02', '2024-03-01']
        assert summary.iloc[1]['current_pnl'] == 40


class TestHelpers:
    """Test formatting helpers"""

    def test_format_currency(self):
        assert format_currency(1234.5) == '€1,234.50'
        assert format_currency(-20, 'USD') == '-$20.00'
        assert format_currency(5, 'GBP') == 'GBP 5.00'

    def test_format_duration(self):
        assert format_duration(42) == '42s'
        assert format_duration(125) == '2m'
        assert format_duration(5400) == '1.5h'
