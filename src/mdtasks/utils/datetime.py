"""Utilities for date handling."""

from datetime import UTC, date, datetime


def now_utc() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(UTC)


def today() -> date:
    """Get the current local date (task dates are calendar days)."""
    return date.today()
