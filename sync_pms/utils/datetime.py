"""Date and time helpers."""

from datetime import date, datetime, timezone


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-aware datetime.

    Used for created_at/updated_at on upserted rows.

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(timezone.utc)


def parse_since(value: str) -> date:
    """
    Parse a YYYY-MM-DD cutoff date as given on the command line.

    Raises:
        ValueError: If value is not a valid ISO calendar date

    Example:
        >>> parse_since("2025-07-20")
        datetime.date(2025, 7, 20)
    """
    return date.fromisoformat(value.strip())
