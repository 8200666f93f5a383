"""Strict parser for the `published` date strings stored on insight records.

Values look like ``"January, 01 2020 00:00:00"``: full English month name,
comma, two-digit day, four-digit year and a 24-hour time. Month names match
regardless of case. The values carry no zone and are read as UTC.
"""

import re
from datetime import datetime, timezone
from typing import Any

MONTHS = {
    name: number
    for number, name in enumerate(
        [
            "January", "February", "March", "April", "May", "June", "July",
            "August", "September", "October", "November", "December",
        ],
        start=1,
    )
}

PUBLISHED_PATTERN = re.compile(
    r"(?P<month>[A-Za-z]+), (?P<day>[0-9]{2}) (?P<year>[0-9]{4}) "
    r"(?P<hour>[0-9]{2}):(?P<minute>[0-9]{2}):(?P<second>[0-9]{2})"
)


class PublishedDateError(ValueError):
    """A `published` value does not match the expected format."""


def parse_published(value: Any) -> datetime:
    """Parse a `published` string into an aware UTC datetime.

    Raises:
        PublishedDateError: on any value that is not exactly in the
            ``"Month, DD YYYY HH:MM:SS"`` format or names an impossible date.
    """
    if not isinstance(value, str):
        raise PublishedDateError(f"published must be a string, got {type(value).__name__}")

    match = PUBLISHED_PATTERN.fullmatch(value)
    if match is None:
        raise PublishedDateError(f"Unrecognized published date: {value!r}")

    month = MONTHS.get(match["month"].capitalize())
    if month is None:
        raise PublishedDateError(f"Unknown month name: {match['month']!r}")

    try:
        return datetime(
            int(match["year"]),
            month,
            int(match["day"]),
            int(match["hour"]),
            int(match["minute"]),
            int(match["second"]),
            tzinfo=timezone.utc,
        )
    except ValueError as e:
        raise PublishedDateError(f"Invalid published date {value!r}: {e}") from e


def published_year(value: Any) -> int | None:
    """Year of a `published` value, or None when it cannot be parsed."""
    try:
        return parse_published(value).year
    except PublishedDateError:
        return None
