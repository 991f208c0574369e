"""Calendar-date keys (YYYY-MM-DD) for date-indexed records."""

from __future__ import annotations

from datetime import date, datetime, timedelta, tzinfo


def date_key(moment: datetime | date, tz: tzinfo | None = None) -> str:
    """Return the local calendar date of *moment* as 'YYYY-MM-DD'.

    Aware datetimes are converted to *tz* first when given; naive datetimes
    are taken as already local.
    """
    if isinstance(moment, datetime):
        if tz is not None and moment.tzinfo is not None:
            moment = moment.astimezone(tz)
        return moment.date().isoformat()
    return moment.isoformat()


def parse_key(key: str) -> date:
    """Parse a date key. Raises ValueError on malformed input."""
    if len(key) != 10:
        raise ValueError(f"Invalid date key: {key!r}")
    return date.fromisoformat(key)


def shift_key(key: str, days: int) -> str:
    """Return the key *days* calendar days after *key* (negative goes back)."""
    return (parse_key(key) + timedelta(days=days)).isoformat()


def previous_key(key: str) -> str:
    return shift_key(key, -1)
