"""Timestamp parsing utilities."""

from datetime import datetime, UTC
from dateutil import parser as date_parser


def parse_timestamp(timestamp_str: str) -> datetime:
    """Parse a device timestamp into a timezone-aware UTC datetime.

    Supports:
    - "now"
    - ISO-8601: "2024-01-15T08:30:00Z", "2024-01-15 08:30:00+02:00"
    - Anything else python-dateutil understands: "Jan 15 2024 08:30"

    Naive timestamps are taken to be UTC already.

    Args:
        timestamp_str: Timestamp string

    Returns:
        Aware datetime in UTC

    Raises:
        ValueError: If timestamp string cannot be parsed
    """
    timestamp_str = timestamp_str.strip()
    if timestamp_str.lower() == "now":
        return datetime.now(UTC)

    try:
        dt = date_parser.parse(timestamp_str)
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse timestamp '{timestamp_str}': {e}")

    return ensure_utc(dt)


def ensure_utc(dt: datetime) -> datetime:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)
