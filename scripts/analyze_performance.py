#!/usr/bin/env python3
"""
Performance Analysis
Summarizes the trade journal (trades, signals, sessions) with pandas
"""

import argparse
from typing import Dict, List

import pandas as pd

from config import Config
from bot_logging import Logger
from database import create_store
from utils.helpers import format_currency


def summarize_trades(trades: List[Dict]) -> pd.DataFrame:
    """Per-venue, per-side trade count and notional"""
    if not trades:
        return pd.DataFrame(columns=['venue', 'side', 'trades', 'notional'])

    df = pd.DataFrame(trades)
    summary = df.groupby(['venue', 'side']).agg(
        trades=('symbol', 'count'),
        notional=('total', 'sum')
    ).round(2)
    return summary.reset_index()


def summarize_signals(signals: List[Dict]) -> pd.DataFrame:
    """Signal count and mean strength per signal type"""
    if not signals:
        return pd.DataFrame(columns=['signal', 'count', 'avg_strength'])

    df = pd.DataFrame(signals)
    summary = df.groupby('signal').agg(
        count=('symbol', 'count'),
        avg_strength=('strength', 'mean')
    ).round(2)
    return summary.reset_index().sort_values('count', ascending=False)


def summarize_sessions(sessions: List[Dict]) -> pd.DataFrame:
    """Last recorded P&L per session date"""
    if not sessions:
        return pd.DataFrame(columns=['session_date', 'current_pnl', 'pnl_percent', 'trade_count'])

    df = pd.DataFrame(sessions)
    df = df.dropna(subset=['session_date'])
    daily = df.groupby('session_date').last()[['current_pnl', 'pnl_percent', 'trade_count']]
    return daily.reset_index().sort_values('session_date', ascending=False)


def main():
    parser = argparse.ArgumentParser(description='Summarize the trade journal')
    parser.add_argument('--limit', type=int, default=1000, help='Documents read per collection')
    args = parser.parse_args()

    config = Config()
    logger = Logger(config)
    store = create_store(config, logger)

    print("=" * 60)
    print("  DUAL-VENUE TRADER - Performance Analysis")
    print("=" * 60)

    print("\n📊 TRADES")
    print("-" * 30)
    trades = summarize_trades(store.find_documents('trades', limit=args.limit))
    print("ℹ️ No trades found." if trades.empty else trades.to_string(index=False))

    print("\n📊 SIGNALS")
    print("-" * 30)
    signals = summarize_signals(store.find_documents('signals', limit=args.limit))
    print("ℹ️ No signals found." if signals.empty else signals.to_string(index=False))

    print("\n📊 SESSIONS")
    print("-" * 30)
    sessions = summarize_sessions(store.find_documents('sessions', limit=args.limit))
    if sessions.empty:
        print("ℹ️ No sessions found.")
    else:
        for row in sessions.itertuples(index=False):
            print(f"{row.session_date}: {format_currency(row.current_pnl, config.BASE_CURRENCY)} "
                  f"({row.pnl_percent:+.2f}%), {row.trade_count} trades")

    store.close()
    print("\n" + "=" * 60)


if __name__ == "__main__":
    main()
