"""Aggregations over the parking event collection.

Every function here is a pure reduction: it takes a sequence of
:class:`ParkingEvent` and returns fresh view records. Rows whose time or date
fields cannot be parsed are skipped by the aggregation that needs them and
still count everywhere else. Empty input gives empty output.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, fields
from typing import List, Optional, Sequence

import pandas as pd

from . import config
from .models import (
    DailyCount,
    FloorCount,
    LocationAverage,
    LocationCount,
    ParkingEvent,
    Period,
    RecentEvent,
    TiePolicy,
    TimeOfDayCount,
    TrendPoint,
    WeekdayCount,
)
from .normalize import format_minutes, local_date, local_timestamp, parse_minutes
from .views import filter_events, location_options, month_options

logger = logging.getLogger(__name__)

EVENT_COLUMNS = [f.name for f in fields(ParkingEvent)]

TIME_OF_DAY_BUCKETS = ["morning", "afternoon", "evening"]

# Sunday first, matching how the dashboard lays out the week
WEEKDAY_ORDER = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


def events_frame(events: Sequence[ParkingEvent]) -> pd.DataFrame:
    return pd.DataFrame([asdict(event) for event in events], columns=EVENT_COLUMNS)


def _minutes(frame: pd.DataFrame) -> pd.Series:
    return pd.to_numeric(frame["time_of_event"].map(parse_minutes), errors="coerce")


def _iso_dates(values: pd.Series) -> pd.Series:
    return pd.to_datetime(values, format="%Y-%m-%d", errors="coerce")


def _reference_now(now: Optional[object], tz: str) -> pd.Timestamp:
    if now is None:
        return pd.Timestamp.now(tz=tz)
    timestamp = pd.Timestamp(now)
    if timestamp.tzinfo is None:
        return timestamp.tz_localize(tz)
    return timestamp.tz_convert(tz)


def _in_period(timestamp: Optional[pd.Timestamp], period: Period, now: pd.Timestamp) -> bool:
    if timestamp is None or pd.isna(timestamp):
        return False
    if period is Period.WEEK:
        week_start = now.normalize() - pd.Timedelta(days=now.weekday())
        return timestamp >= week_start
    if period is Period.MONTH:
        return timestamp.year == now.year and timestamp.month == now.month
    return True


def location_distribution(events: Sequence[ParkingEvent]) -> List[LocationCount]:
    """Events per location, most frequent first; ties keep first-seen order."""
    frame = events_frame(events)
    if frame.empty:
        return []
    counts = frame.groupby("location", sort=False).size().sort_values(ascending=False, kind="stable")
    return [LocationCount(name=str(name), value=int(count)) for name, count in counts.items()]


def floor_distribution(
    events: Sequence[ParkingEvent],
    *,
    location: str = config.PRIMARY_RESIDENCE,
) -> List[FloorCount]:
    """Floor usage at ``location``; pass the unfiltered collection."""
    frame = events_frame(events)
    frame = frame[
        (frame["location"] == location)
        & (frame["floor"] != "")
        & (frame["floor"] != config.FLOOR_NOT_APPLICABLE)
    ]
    if frame.empty:
        return []
    counts = frame.groupby("floor", sort=False).size().sort_values(ascending=False, kind="stable")
    return [FloorCount(floor=str(floor), count=int(count)) for floor, count in counts.items()]


def top_floor(distribution: Sequence[FloorCount]) -> str:
    return distribution[0].floor if distribution else config.EMPTY_DISPLAY


def arrival_trend(
    events: Sequence[ParkingEvent],
    *,
    tracked: Sequence[str] = config.TRACKED_LOCATIONS,
    policy: TiePolicy | str = TiePolicy.LAST_INPUT,
) -> List[TrendPoint]:
    """Per-date arrival minute for each tracked location, weekdays only.

    When several rows share a date and location only one is kept: under
    ``LAST_INPUT`` the one appearing last in ``events``, under
    ``LATEST_RECORDED`` the one with the greatest ``recorded_at``.
    """
    policy = TiePolicy(policy)
    frame = events_frame(events)
    frame = frame[frame["location"].isin(list(tracked))].copy()
    if frame.empty:
        return []

    frame["minutes"] = _minutes(frame)
    dates = _iso_dates(frame["exit_date"])
    frame = frame[frame["minutes"].notna() & dates.notna() & (dates.dt.dayofweek < 5)]
    if frame.empty:
        return []

    if policy is TiePolicy.LATEST_RECORDED:
        frame = frame.sort_values("recorded_at", kind="stable")
    frame = frame.drop_duplicates(subset=["exit_date", "location"], keep="last")

    points: List[TrendPoint] = []
    for date, group in frame.groupby("exit_date", sort=True):
        minutes = {
            str(location): int(value)
            for location, value in zip(group["location"], group["minutes"])
        }
        points.append(TrendPoint(date=str(date), minutes_by_location=minutes))
    return points


def average_arrival_by_location(
    events: Sequence[ParkingEvent],
    *,
    period: Period | str = Period.ALL,
    now: Optional[object] = None,
    tz: str = config.REFERENCE_TIMEZONE,
) -> List[LocationAverage]:
    """Mean arrival minute per location, earliest first.

    ``week`` keeps events recorded since Monday 00:00 of the current week and
    ``month`` those recorded in the current calendar month, both judged in ``tz``.
    """
    period = Period(period)
    frame = events_frame(events)
    if frame.empty:
        return []

    frame["minutes"] = _minutes(frame)
    frame = frame[frame["minutes"].notna() & (frame["location"] != "")]

    if period is not Period.ALL:
        reference = _reference_now(now, tz)
        stamps = [local_timestamp(value, tz) for value in frame["recorded_at"]]
        mask = pd.Series(
            [_in_period(stamp, period, reference) for stamp in stamps],
            index=frame.index,
            dtype=bool,
        )
        frame = frame[mask]

    if frame.empty:
        return []

    grouped = (
        frame.groupby("location", sort=False)["minutes"]
        .agg(["mean", "count"])
        .sort_values("mean", kind="stable")
    )
    return [
        LocationAverage(
            location=str(location),
            average_minutes=float(row["mean"]),
            sample_count=int(row["count"]),
            display=format_minutes(row["mean"]),
        )
        for location, row in grouped.iterrows()
    ]


def daily_counts(
    events: Sequence[ParkingEvent],
    *,
    tz: str = config.REFERENCE_TIMEZONE,
) -> List[DailyCount]:
    """Events per calendar day of ``recorded_at`` in ``tz``, ascending."""
    dates = pd.Series([local_date(event.recorded_at, tz) for event in events], dtype=object)
    dates = dates[dates != ""]
    if dates.empty:
        return []
    counts = dates.value_counts().sort_index()
    return [DailyCount(date=str(date), count=int(count)) for date, count in counts.items()]


def time_of_day_distribution(
    events: Sequence[ParkingEvent],
    *,
    tz: str = config.REFERENCE_TIMEZONE,
) -> List[TimeOfDayCount]:
    hours = []
    for event in events:
        stamp = local_timestamp(event.recorded_at, tz)
        if stamp is not None:
            hours.append(stamp.hour)
    hours = pd.Series(hours, dtype="int64")

    morning = int(((hours >= config.MORNING_START_HOUR) & (hours < config.AFTERNOON_START_HOUR)).sum())
    afternoon = int(((hours >= config.AFTERNOON_START_HOUR) & (hours < config.EVENING_START_HOUR)).sum())
    evening = len(hours) - morning - afternoon
    return [
        TimeOfDayCount(bucket=bucket, count=count)
        for bucket, count in zip(TIME_OF_DAY_BUCKETS, (morning, afternoon, evening))
    ]


def weekday_distribution(events: Sequence[ParkingEvent]) -> List[WeekdayCount]:
    """Events per weekday of ``exit_date``, Sunday first."""
    counts = [0] * 7
    dates = _iso_dates(pd.Series([event.exit_date for event in events], dtype=object)).dropna()
    for day_of_week in dates.dt.dayofweek:
        # pandas counts Monday as 0
        counts[(int(day_of_week) + 1) % 7] += 1
    return [WeekdayCount(weekday=name, count=count) for name, count in zip(WEEKDAY_ORDER, counts)]


def _time_display(event: ParkingEvent, tz: str) -> str:
    minutes = parse_minutes(event.time_of_event)
    if minutes is not None:
        return format_minutes(minutes)
    stamp = local_timestamp(event.recorded_at, tz)
    return stamp.strftime("%H:%M") if stamp is not None else ""


def recent_feed(
    events: Sequence[ParkingEvent],
    *,
    limit: int = config.RECENT_FEED_LIMIT,
    tz: str = config.REFERENCE_TIMEZONE,
) -> List[RecentEvent]:
    """Newest events by exit date, then by recorded timestamp."""
    ordered = sorted(events, key=lambda event: (event.exit_date, event.recorded_at), reverse=True)
    return [RecentEvent(event=event, time_display=_time_display(event, tz)) for event in ordered[:limit]]


@dataclass(frozen=True)
class DashboardViews:
    """Everything the dashboard renders for one selection."""

    months: List[str]
    locations: List[str]
    filtered: List[ParkingEvent]
    total_records: int
    filtered_total: int
    primary_residence_count: int
    workplace_count: int
    top_floor: str
    location_distribution: List[LocationCount]
    floor_distribution: List[FloorCount]
    arrival_trend: List[TrendPoint]
    average_arrival: List[LocationAverage]
    daily_counts: List[DailyCount]
    time_of_day: List[TimeOfDayCount]
    weekdays: List[WeekdayCount]
    recent: List[RecentEvent]

    def as_dict(self) -> dict:
        return asdict(self)


def build_dashboard_views(
    events: Sequence[ParkingEvent],
    *,
    month: str = config.ALL,
    location: str = config.ALL,
    period: Period | str = Period.ALL,
    now: Optional[object] = None,
    tz: str = config.REFERENCE_TIMEZONE,
    policy: TiePolicy | str = TiePolicy.LAST_INPUT,
) -> DashboardViews:
    filtered = filter_events(events, month, location)
    floors = floor_distribution(events)
    views = DashboardViews(
        months=month_options(events),
        locations=location_options(events),
        filtered=filtered,
        total_records=len(events),
        filtered_total=len(filtered),
        primary_residence_count=sum(1 for event in filtered if event.location == config.PRIMARY_RESIDENCE),
        workplace_count=sum(1 for event in filtered if event.location == config.WORKPLACE),
        top_floor=top_floor(floors),
        location_distribution=location_distribution(filtered),
        floor_distribution=floors,
        arrival_trend=arrival_trend(events, policy=policy),
        average_arrival=average_arrival_by_location(events, period=period, now=now, tz=tz),
        daily_counts=daily_counts(filtered, tz=tz),
        time_of_day=time_of_day_distribution(filtered, tz=tz),
        weekdays=weekday_distribution(filtered),
        recent=recent_feed(filtered, tz=tz),
    )
    logger.debug(
        "Built dashboard views for month=%s location=%s period=%s (%s of %s events)",
        month,
        location,
        period,
        views.filtered_total,
        views.total_records,
    )
    return views


__all__ = [
    "events_frame",
    "location_distribution",
    "floor_distribution",
    "top_floor",
    "arrival_trend",
    "average_arrival_by_location",
    "daily_counts",
    "time_of_day_distribution",
    "weekday_distribution",
    "recent_feed",
    "DashboardViews",
    "build_dashboard_views",
]
