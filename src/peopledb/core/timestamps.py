"""
UTC normalisation for timestamp columns (stdlib-only).

Dates of birth are stored as naive UTC timestamps and always come back at
a fixed zero offset.  Aware ``datetime`` values compare by instant, so a
value saved at ``-06:00`` and read back at ``+00:00`` compares equal.

Examples:
    >>> from datetime import datetime, timedelta, timezone
    >>> dob = datetime(1980, 11, 15, 15, 15, tzinfo=timezone(timedelta(hours=-6)))
    >>> to_storage(dob)
    '1980-11-15 21:15:00'
    >>> from_storage('1980-11-15 21:15:00') == dob
    True

Tags:
    timestamps, utc, datetime, peopledb, stdlib-only
"""

from datetime import UTC, datetime


def to_utc(dt: datetime) -> datetime:
    """Normalise an aware datetime to UTC.  Naive values are taken as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def to_storage(dt: datetime | None) -> str | None:
    """Render a datetime as a naive UTC ``YYYY-MM-DD HH:MM:SS[.ffffff]`` string."""
    if dt is None:
        return None
    return to_utc(dt).replace(tzinfo=None).isoformat(sep=" ")


def from_storage(value: str | datetime | None) -> datetime | None:
    """Parse a stored timestamp (string or driver datetime) at zero offset."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return to_utc(value)
    return to_utc(datetime.fromisoformat(value))
