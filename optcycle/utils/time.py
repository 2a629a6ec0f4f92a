"""
Market time helpers.

Snapshots are processed strictly in non-decreasing timestamp order; these
helpers normalise timestamps to UTC and check that ordering.
"""

from datetime import date, datetime, time, timezone
from typing import Optional


def ensure_utc(market_ts: datetime) -> datetime:
    """
    Normalise a market timestamp to timezone-aware UTC.

    Naive timestamps are taken to already be UTC.
    """
    if market_ts.tzinfo is None:
        return market_ts.replace(tzinfo=timezone.utc)
    return market_ts.astimezone(timezone.utc)


def start_of_day(day: date) -> datetime:
    """UTC midnight of a calendar date."""
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def is_non_decreasing(previous_ts: Optional[datetime], market_ts: datetime) -> bool:
    """
    Check snapshot ordering.

    Args:
        previous_ts: Timestamp of the last processed snapshot, if any
        market_ts: Timestamp of the incoming snapshot

    Returns:
        True if the incoming snapshot may be processed
    """
    if previous_ts is None:
        return True
    return ensure_utc(market_ts) >= ensure_utc(previous_ts)


def format_market_time(market_ts: datetime) -> str:
    """Format market timestamp for logging and order tags."""
    return ensure_utc(market_ts).isoformat()
