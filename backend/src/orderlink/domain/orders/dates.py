"""Date parsing utilities for synced order data.

Order documents arrive from three systems with inconsistent date shapes:
ISO timestamps from the WooCommerce REST API, ``dd.mm.yyyy`` strings written
by the dashboard (Norwegian locale), and native datetimes from Firestore.
All of them are normalised to timezone-aware UTC datetimes here.
"""

import logging
from datetime import datetime, date, timezone
from typing import Any, Optional

logger = logging.getLogger(__name__)


# Common date format patterns (order matters - most specific first)
DATE_FORMATS = [
    # ISO variants fromisoformat does not accept on every interpreter
    '%Y-%m-%dT%H:%M:%S.%fZ',  # 2025-06-11T10:11:12.123Z
    '%Y-%m-%dT%H:%M:%SZ',     # 2025-06-11T10:11:12Z
    '%Y-%m-%d %H:%M:%S',      # 2025-06-11 10:11:12

    # Norwegian/European formats (DD.MM.YYYY)
    '%d.%m.%Y',          # 11.06.2025
    '%d.%m.%Y, %H:%M:%S',  # 11.06.2025, 10:11:12
    '%d.%m.%y',          # 11.06.25
    '%d/%m/%Y',          # 11/06/2025

    # Other common formats
    '%d %B %Y',          # 11 June 2025
    '%d %b %Y',          # 11 Jun 2025
    '%B %d, %Y',         # June 11, 2025
]


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse a datetime from the shapes found in synced order data.

    Args:
        value: str, date, datetime, or None

    Returns:
        Timezone-aware UTC datetime, or None if the value is empty or
        cannot be parsed. Never raises.

    Examples:
        >>> parse_datetime('2025-06-11')
        datetime(2025, 6, 11, 0, 0, tzinfo=timezone.utc)
        >>> parse_datetime('11.06.2025')
        datetime(2025, 6, 11, 0, 0, tzinfo=timezone.utc)
        >>> parse_datetime('soon')
        None
    """
    if value is None or isinstance(value, bool):
        return None

    # datetime is a subclass of date, check it first
    if isinstance(value, datetime):
        try:
            return ensure_utc(value)
        except OverflowError:
            logger.warning(f"Date out of range after UTC conversion: {value!r}")
            return None
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)

    if not isinstance(value, str):
        value = str(value)

    value = value.strip()
    if not value:
        return None

    try:
        return ensure_utc(datetime.fromisoformat(value.replace('Z', '+00:00')))
    except OverflowError:
        # Valid ISO text whose UTC equivalent falls outside year 1..9999
        logger.warning(f"Date out of range after UTC conversion: {value!r}")
        return None
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            return ensure_utc(datetime.strptime(value, fmt))
        except (ValueError, OverflowError):
            continue

    logger.warning(f"Failed to parse date: {value!r}")
    return None


def format_date_iso(value: Any) -> Optional[str]:
    """Format a date value as ISO ``YYYY-MM-DD``, or None if unparseable."""
    parsed = parse_datetime(value)
    if parsed is None:
        return None
    return parsed.date().isoformat()
