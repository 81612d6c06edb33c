"""Shared pytest fixtures for the carpark tracker tests."""

from typing import Optional

import pytest

from carpark_tracker.models import ParkingEvent

CONDO = "คอนโด"

SAMPLE_CSV = """Date,parkingMap,parkingFloor,note,parkingLocation,exitDateReminder ,parkingTime,status
2024-03-11T08:05:00+07:00,https://maps.example/1,5,ปกติ,คอนโด,,08:05,SENT 08:10
2024-03-11T09:10:00+07:00,,-,,ที่ทำงาน,,09:10,SENT 09:15
2024-03-12T08:30:00+07:00,,Welcome to Gboard clipboard,Welcome to Gboard clipboard,คอนโด,,08:30,SENT
2024-03-12T09:00:00+07:00,,-,test run,ที่ทำงาน,,09:00,SENT
2024-03-12T09:20:00+07:00,,-,,ที่ทำงาน,2024-03-13,09:20,FAILED timeout
,,3,,คอนโด,,07:00,SENT
2024-03-16T10:00:00+07:00,,5,weekend,คอนโด,,10:00,SENT
"""


@pytest.fixture
def make_event():
    """Return a function that builds ParkingEvent objects with sensible defaults."""

    def _make_event(
        location: str = CONDO,
        recorded_at: str = "2024-03-11T08:00:00+07:00",
        exit_date: Optional[str] = None,
        **kwargs,
    ) -> ParkingEvent:
        if exit_date is None:
            exit_date = recorded_at[:10]
        return ParkingEvent(recorded_at=recorded_at, location=location, exit_date=exit_date, **kwargs)

    return _make_event


@pytest.fixture
def sample_csv_text():
    return SAMPLE_CSV


@pytest.fixture
def sample_csv_path(tmp_path):
    path = tmp_path / "export.csv"
    path.write_text(SAMPLE_CSV, encoding="utf-8")
    return path
