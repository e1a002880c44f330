"""UTC datetime helpers.

Every datetime in the service is timezone-aware UTC. The record store
exchanges dates as "YYYY-MM-DD HH:MM:SS.sssZ" strings; parse and format
them only through this module.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes and convert aware ones; None passes through."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def from_timestamp_utc(timestamp: float) -> datetime:
    """Aware UTC datetime from a Unix timestamp (JWT exp/iat claims)."""
    return datetime.fromtimestamp(timestamp, tz=UTC)


def format_store_datetime(dt: datetime) -> str:
    """
    Format a datetime the way the record store stores it (millisecond precision, UTC).

    Args:
        dt: Naive (assumed UTC) or aware datetime

    Returns:
        String like "2024-05-01 13:45:00.123Z"
    """
    value = ensure_utc(dt)
    return value.strftime("%Y-%m-%d %H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def parse_store_datetime(value: str) -> datetime:
    """
    Parse a record store date string into a UTC-aware datetime.

    Accepts the store's "YYYY-MM-DD HH:MM:SS.sssZ" form and ISO 8601
    ("T" separator, optional offset).

    Args:
        value: Date string from a store record

    Returns:
        UTC-aware datetime

    Raises:
        ValueError: If the value is empty or not a recognized date.
    """
    if not value:
        raise ValueError("Empty datetime value")
    normalized = value.strip().replace(" ", "T", 1)
    if normalized.endswith("Z"):
        normalized = normalized[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(normalized))
