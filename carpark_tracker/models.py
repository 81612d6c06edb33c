"""Canonical event model and the derived view records."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Mapping

from . import config

RawRow = Mapping[str, object]


class Period(str, Enum):
    """Date scope for the average arrival time view."""

    ALL = "all"
    WEEK = "week"
    MONTH = "month"


class TiePolicy(str, Enum):
    """Which row wins when several rows land on the same trend date and location."""

    LAST_INPUT = "last_input"
    LATEST_RECORDED = "latest_recorded"


@dataclass(frozen=True)
class ParkingEvent:
    """One normalized log entry."""

    recorded_at: str
    location: str
    time_of_event: str = ""
    floor: str = ""
    note: str = ""
    exit_date: str = ""
    status: str = ""
    map_url: str = ""

    @property
    def is_sent(self) -> bool:
        return self.status.startswith(config.SENT_STATUS_PREFIX)


@dataclass(frozen=True)
class LocationCount:
    name: str
    value: int


@dataclass(frozen=True)
class FloorCount:
    floor: str
    count: int


@dataclass(frozen=True)
class TrendPoint:
    date: str
    minutes_by_location: Dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class LocationAverage:
    location: str
    average_minutes: float
    sample_count: int
    display: str


@dataclass(frozen=True)
class DailyCount:
    date: str
    count: int


@dataclass(frozen=True)
class TimeOfDayCount:
    bucket: str
    count: int


@dataclass(frozen=True)
class WeekdayCount:
    weekday: str
    count: int


@dataclass(frozen=True)
class RecentEvent:
    """An event from the recent feed with its time of day ready for display."""

    event: ParkingEvent
    time_display: str


__all__ = [
    "RawRow",
    "Period",
    "TiePolicy",
    "ParkingEvent",
    "LocationCount",
    "FloorCount",
    "TrendPoint",
    "LocationAverage",
    "DailyCount",
    "TimeOfDayCount",
    "WeekdayCount",
    "RecentEvent",
]
