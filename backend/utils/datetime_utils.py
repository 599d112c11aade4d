"""
Date utility functions for log store keys

Logs are bucketed per UTC calendar day, stored as YYYY-MM-DD strings.
"""
from datetime import date, datetime, timezone
from typing import Optional, Union
import logging

logger = logging.getLogger(__name__)


def utc_today() -> str:
    """Today's date in UTC as YYYY-MM-DD"""
    return datetime.now(timezone.utc).date().isoformat()


def to_iso_date(value: Union[date, datetime, str, None]) -> Optional[str]:
    """
    Normalize a date-like value to YYYY-MM-DD

    Handles multiple cases:
    - None -> None
    - datetime -> its UTC date (naive datetimes are taken as UTC)
    - date -> isoformat
    - String (date or full ISO timestamp) -> parsed date
    - Unparseable string -> None with warning

    Args:
        value: date, datetime, string, or None

    Returns:
        YYYY-MM-DD string or None
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date().isoformat()

    if isinstance(value, date):
        return value.isoformat()

    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace('Z', '+00:00')).date().isoformat()
        except ValueError as e:
            logger.warning(f"Failed to parse date string '{value}': {e}")
            return None

    logger.warning(f"Cannot convert {type(value)} to ISO date: {value}")
    return None
