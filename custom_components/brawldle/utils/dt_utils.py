# File: utils/dt_utils.py
"""Date and time utilities for Brawldle.

Pure Python date/time functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

The daily challenge day is defined by a FIXED UTC+2 offset (not a DST-aware
zone and not the user's timezone), so every player sees the target change at
the same absolute instant. Every "now" argument is optional so callers can
inject a clock; naive datetimes are treated as UTC.

Functions:
    - dt_now_utc: Get current datetime in UTC
    - dt_reset_date: Game date (UTC+2) for an instant
    - dt_today_iso: Game date as ISO string
    - dt_yesterday_iso: Previous game date as ISO string
    - dt_previous_day_iso: Day before a given ISO date
    - dt_parse_date: Parse date strings
    - dt_next_reset: Next UTC+2 midnight
    - dt_time_until_next_reset: Hours/minutes until the next reset
    - dt_format_duration: Format timedelta to human-readable string
"""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta, timezone
import logging

# Module-level logger (no HA dependency)
_LOGGER = logging.getLogger(__name__)

# ==============================================================================
# Constants (local copies to avoid circular imports)
# These mirror const.py values but are defined locally for purity.
# ==============================================================================

DAILY_RESET_UTC_OFFSET_HOURS = 2
RESET_TIME_ZONE = timezone(timedelta(hours=DAILY_RESET_UTC_OFFSET_HOURS))


# ==============================================================================
# Current Date/Time Functions
# ==============================================================================


def dt_now_utc() -> datetime:
    """Return the current datetime in UTC (timezone-aware)."""
    return datetime.now(UTC)


def _as_utc(now: datetime | None) -> datetime:
    if now is None:
        return dt_now_utc()
    if now.tzinfo is None:
        # Assume it's in UTC if naive
        return now.replace(tzinfo=UTC)
    return now.astimezone(UTC)


def dt_reset_date(now: datetime | None = None) -> date:
    """Return the game date for an instant, using the fixed UTC+2 offset.

    Args:
        now: Instant to convert. Uses the current time if not provided.

    Returns:
        The calendar date at that instant in UTC+2.

    Example:
        dt_reset_date(datetime(2024, 1, 5, 22, 30, tzinfo=UTC)) → date(2024, 1, 6)
    """
    return _as_utc(now).astimezone(RESET_TIME_ZONE).date()


def dt_today_iso(now: datetime | None = None) -> str:
    """Return today's game date as ISO string (YYYY-MM-DD)."""
    return dt_reset_date(now).isoformat()


def dt_yesterday_iso(now: datetime | None = None) -> str:
    """Return yesterday's game date as ISO string (YYYY-MM-DD)."""
    return (dt_reset_date(now) - timedelta(days=1)).isoformat()


def dt_previous_day_iso(date_str: str) -> str | None:
    """Return the ISO date one day before `date_str`, or None if unparseable."""
    parsed = dt_parse_date(date_str)
    if parsed is None:
        return None
    return (parsed - timedelta(days=1)).isoformat()


# ==============================================================================
# Date Parsing
# ==============================================================================


def dt_parse_date(date_str: str | None) -> date | None:
    """Safely parse an ISO date string into a `datetime.date`.

    Args:
        date_str: Date string to parse, or None

    Returns:
        datetime.date or None if parsing fails.
    """
    if not date_str or not isinstance(date_str, str):
        return None

    try:
        return date.fromisoformat(date_str[:10])
    except ValueError:
        _LOGGER.debug("Could not parse date string: %s", date_str)
        return None


# ==============================================================================
# Reset Countdown
# ==============================================================================


def dt_next_reset(now: datetime | None = None) -> datetime:
    """Return the next UTC+2 midnight as a UTC datetime."""
    next_day = dt_reset_date(now) + timedelta(days=1)
    midnight = datetime.combine(next_day, datetime.min.time(), tzinfo=RESET_TIME_ZONE)
    return midnight.astimezone(UTC)


def dt_time_until_next_reset(now: datetime | None = None) -> tuple[int, int]:
    """Return whole (hours, minutes) left until the next daily reset.

    Example:
        At 21:15 UTC (23:15 UTC+2) → (0, 45)
    """
    current = _as_utc(now)
    remaining = dt_next_reset(current) - current
    total_minutes = int(remaining.total_seconds()) // 60
    hours, minutes = divmod(total_minutes, 60)
    return hours, minutes


def dt_format_duration(td: timedelta | None) -> str:
    """Format a timedelta into a human-readable duration string.

    Args:
        td: timedelta object to format, or None

    Returns:
        Duration string like "1d 6h 30m", or "0" if None/zero.

    Examples:
        dt_format_duration(timedelta(hours=6, minutes=5)) → "6h 5m"
        dt_format_duration(timedelta(minutes=30)) → "30m"
        dt_format_duration(None) → "0"
    """
    if td is None or td <= timedelta():
        return "0"

    total_seconds = int(td.total_seconds())
    if total_seconds <= 0:
        return "0"

    days, remainder = divmod(total_seconds, 86400)  # 24 * 60 * 60
    hours, remainder = divmod(remainder, 3600)  # 60 * 60
    minutes = remainder // 60

    parts: list[str] = []
    if days > 0:
        parts.append(f"{days}d")
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")

    return " ".join(parts) if parts else "0"
