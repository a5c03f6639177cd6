"""
Utility Helper Functions
Formatting helpers shared by the CLI and report scripts
"""

from datetime import datetime
from typing import Optional


def format_timestamp(dt: Optional[datetime] = None) -> str:
    """Format datetime for display"""
    if dt is None:
        dt = datetime.now()
    return dt.strftime('%Y-%m-%d %H:%M:%S')


def format_currency(amount: float, currency: str = 'EUR') -> str:
    symbol = {'EUR': '€', 'USD': '$'}.get(currency, f'{currency} ')
    sign = '-' if amount < 0 else ''
    return f"{sign}{symbol}{abs(amount):,.2f}"


def format_duration(seconds: float) -> str:
    """Format duration in human-readable format"""
    if seconds < 60:
        return f"{int(seconds)}s"
    elif seconds < 3600:
        return f"{int(seconds/60)}m"
    else:
        return f"{seconds/3600:.1f}h"
