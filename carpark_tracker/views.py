"""Month and location facets and the filter they drive."""
from __future__ import annotations

from typing import List, Sequence

from . import config
from .models import ParkingEvent


def month_options(events: Sequence[ParkingEvent]) -> List[str]:
    """``"all"`` followed by every ``YYYY-MM`` present in the exit dates, ascending."""
    months = {event.exit_date[:7] for event in events if event.exit_date}
    return [config.ALL, *sorted(months)]


def location_options(events: Sequence[ParkingEvent]) -> List[str]:
    locations = {event.location for event in events if event.location}
    return [config.ALL, *sorted(locations)]


def filter_events(
    events: Sequence[ParkingEvent],
    month: str = config.ALL,
    location: str = config.ALL,
) -> List[ParkingEvent]:
    """Return the events matching the month prefix and exact location, in order."""
    filtered = list(events)
    if month != config.ALL:
        filtered = [event for event in filtered if event.exit_date.startswith(month)]
    if location != config.ALL:
        filtered = [event for event in filtered if event.location == location]
    return filtered


__all__ = ["month_options", "location_options", "filter_events"]
