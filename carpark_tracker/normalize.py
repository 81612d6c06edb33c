"""Map raw spreadsheet rows onto the canonical :class:`ParkingEvent`."""
from __future__ import annotations

import logging
import re
from typing import Optional, Sequence

import pandas as pd

from . import config
from .models import ParkingEvent, RawRow

logger = logging.getLogger(__name__)

_TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")


def _clean(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and pd.isna(value):
        return ""
    return str(value).strip()


def resolve_field(row: RawRow, columns: Sequence[str]) -> str:
    """Return the first non-empty value among ``columns``, or an empty string."""
    for column in columns:
        value = _clean(row.get(column))
        if value:
            return value
    return ""


def _resolve_status(row: RawRow) -> str:
    columns = config.FIELD_COLUMNS["status"]
    if any(column in row for column in columns):
        return resolve_field(row, columns)
    # Legacy exports carry the delivery status in the last column, unnamed.
    values = list(row.values())
    return _clean(values[-1]) if values else ""


def local_timestamp(value: str, tz: str = config.REFERENCE_TIMEZONE) -> Optional[pd.Timestamp]:
    """Parse ``value`` and express it in ``tz``.

    Naive timestamps are taken to be wall-clock times in ``tz`` already.
    Returns ``None`` when the value cannot be parsed.
    """
    # Relative words such as "today" or "now" parse against the clock.
    if not value or not any(char.isdigit() for char in value):
        return None
    try:
        parsed = pd.to_datetime(value, errors="coerce")
    except (TypeError, ValueError, OverflowError):
        return None
    if pd.isna(parsed):
        return None
    if parsed.tzinfo is None:
        return parsed.tz_localize(tz)
    return parsed.tz_convert(tz)


def local_date(value: str, tz: str = config.REFERENCE_TIMEZONE) -> str:
    """Calendar date (``YYYY-MM-DD``) of ``value`` in ``tz``, or ``""``."""
    timestamp = local_timestamp(value, tz)
    if timestamp is None:
        return ""
    return timestamp.strftime("%Y-%m-%d")


def parse_minutes(value: str) -> Optional[int]:
    """Minutes since midnight for an ``HH:MM`` (or ``HH:MM:SS``) string."""
    if not value:
        return None
    match = _TIME_PATTERN.match(value.strip())
    if not match:
        return None
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        return None
    return hour * 60 + minute


def format_minutes(minutes: float) -> str:
    total = int(round(minutes))
    hours, mins = divmod(total, 60)
    return f"{hours:02d}:{mins:02d}"


def normalize_row(row: RawRow, tz: str = config.REFERENCE_TIMEZONE) -> ParkingEvent:
    """Build a :class:`ParkingEvent` from one raw row.

    Never raises on missing or malformed fields: missing values become empty
    strings and rejection is left to :func:`carpark_tracker.filters.keep_event`.
    When the row has no explicit exit date it is derived from the calendar day
    of ``recorded_at`` in ``tz``.
    """
    columns = config.FIELD_COLUMNS
    recorded_at = resolve_field(row, columns["recorded_at"])
    exit_date = resolve_field(row, columns["exit_date"])
    if not exit_date:
        exit_date = local_date(recorded_at, tz)
        if recorded_at and not exit_date:
            logger.debug("Could not derive exit date from %r", recorded_at)

    return ParkingEvent(
        recorded_at=recorded_at,
        location=resolve_field(row, columns["location"]),
        time_of_event=resolve_field(row, columns["time_of_event"]),
        floor=resolve_field(row, columns["floor"]),
        note=resolve_field(row, columns["note"]),
        exit_date=exit_date,
        status=_resolve_status(row),
        map_url=resolve_field(row, columns["map_url"]),
    )


__all__ = [
    "resolve_field",
    "local_timestamp",
    "local_date",
    "parse_minutes",
    "format_minutes",
    "normalize_row",
]
