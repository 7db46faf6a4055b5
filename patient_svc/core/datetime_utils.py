"""
UTC-first datetime utilities.

- Internal processing: timezone-aware datetimes in UTC
- Database storage: ISO 8601 strings in UTC with microseconds (SQLite TEXT)
- API responses: pydantic serializes the datetimes as ISO 8601

Usage:
    from core.datetime_utils import utc_now, to_db_string, from_db_string

    now = utc_now()
    stored = to_db_string(now)         # "2024-01-15T05:00:00.123456Z"
    restored = from_db_string(stored)  # datetime(..., tzinfo=timezone.utc)
"""
import logging
from datetime import datetime, timezone
from typing import Optional, Union

logger = logging.getLogger(__name__)

DB_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def utc_now() -> datetime:
    """Get current datetime in UTC with timezone info."""
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """
    Convert a datetime to UTC.

    Naive datetimes are assumed to already be UTC.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_datetime(value: Union[str, datetime]) -> datetime:
    """
    Parse a datetime value to UTC datetime.

    Accepts datetime objects, ISO 8601 strings (with or without offset or
    'Z' suffix) and SQLite's CURRENT_TIMESTAMP format.

    Raises:
        ValueError: If the value cannot be parsed.
    """
    if isinstance(value, datetime):
        return to_utc(value)

    if not isinstance(value, str):
        raise ValueError(f"Expected datetime or string, got {type(value).__name__}")

    value = value.strip()
    try:
        if value.endswith('Z'):
            value = value[:-1] + '+00:00'
        return to_utc(datetime.fromisoformat(value))
    except ValueError:
        pass

    try:
        return datetime.strptime(value, "%Y-%m-%d %H:%M:%S").replace(tzinfo=timezone.utc)
    except ValueError:
        raise ValueError(f"Cannot parse datetime: '{value}'") from None


def to_db_string(dt: datetime) -> str:
    """Convert datetime to the string stored in SQLite."""
    return to_utc(dt).strftime(DB_FORMAT)


def from_db_string(value: Optional[str]) -> Optional[datetime]:
    """
    Parse datetime string from SQLite storage.

    Returns None for NULL columns and for values that cannot be parsed.
    """
    if value is None:
        return None
    try:
        return parse_datetime(value)
    except ValueError as e:
        logger.warning(f"Failed to parse stored datetime '{value}': {e}")
        return None
