"""Periodic re-fetching of the event collection.

:class:`RefreshController` owns the current event collection together with the
loading/error/last-refresh status and swaps both under one lock, so a reader
calling :meth:`RefreshController.snapshot` always sees a matching pair.
Refreshes may overlap; each takes a ticket and a result is applied only when
its ticket is newer than the last applied one.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence, Tuple

import requests

from . import config
from .ingest import ingest_rows
from .models import ParkingEvent, RawRow

logger = logging.getLogger(__name__)


def format_countdown(seconds: int) -> str:
    minutes, secs = divmod(max(int(seconds), 0), 60)
    return f"{minutes}:{secs:02d}"


class Countdown:
    """Seconds until the next scheduled refresh, for display only."""

    def __init__(self, interval_seconds: int = config.REFRESH_INTERVAL_SECONDS) -> None:
        self.interval_seconds = interval_seconds
        self.remaining = interval_seconds

    def tick(self) -> int:
        if self.remaining <= 1:
            self.remaining = self.interval_seconds
        else:
            self.remaining -= 1
        return self.remaining

    def reset(self) -> None:
        self.remaining = self.interval_seconds


@dataclass(frozen=True)
class RefreshStatus:
    loading: bool = False
    error: Optional[str] = None
    last_refresh: Optional[datetime] = None
    countdown_seconds: int = config.REFRESH_INTERVAL_SECONDS

    @property
    def countdown_display(self) -> str:
        return format_countdown(self.countdown_seconds)


@dataclass(frozen=True)
class DashboardSnapshot:
    events: Tuple[ParkingEvent, ...]
    status: RefreshStatus


class RefreshController:
    """Holds the latest event collection and replaces it on each refresh."""

    def __init__(
        self,
        fetch_rows: Callable[[], Sequence[RawRow]],
        *,
        interval_seconds: int = config.REFRESH_INTERVAL_SECONDS,
        tz: str = config.REFERENCE_TIMEZONE,
    ) -> None:
        self._fetch_rows = fetch_rows
        self._tz = tz
        self._lock = threading.Lock()
        self._events: Tuple[ParkingEvent, ...] = ()
        self._countdown = Countdown(interval_seconds)
        self._error: Optional[str] = None
        self._last_refresh: Optional[datetime] = None
        self._issued = 0
        self._applied = 0
        self._in_flight: set[int] = set()

    @property
    def interval_seconds(self) -> int:
        return self._countdown.interval_seconds

    def _status(self) -> RefreshStatus:
        return RefreshStatus(
            loading=bool(self._in_flight),
            error=self._error,
            last_refresh=self._last_refresh,
            countdown_seconds=self._countdown.remaining,
        )

    def snapshot(self) -> DashboardSnapshot:
        with self._lock:
            return DashboardSnapshot(events=self._events, status=self._status())

    @property
    def events(self) -> Tuple[ParkingEvent, ...]:
        with self._lock:
            return self._events

    @property
    def status(self) -> RefreshStatus:
        with self._lock:
            return self._status()

    def tick(self) -> int:
        with self._lock:
            return self._countdown.tick()

    def refresh(self) -> bool:
        """Fetch and ingest once. Returns True when the result was applied."""
        with self._lock:
            self._issued += 1
            ticket = self._issued
            self._in_flight.add(ticket)

        try:
            events: List[ParkingEvent] = ingest_rows(self._fetch_rows(), tz=self._tz)
        except (requests.RequestException, OSError, ValueError) as exc:
            with self._lock:
                self._in_flight.discard(ticket)
                if ticket > self._applied:
                    self._error = str(exc) or exc.__class__.__name__
            logger.warning("Refresh %s failed, keeping %s events: %s", ticket, len(self.events), exc)
            return False
        else:
            with self._lock:
                self._in_flight.discard(ticket)
                if ticket < self._applied:
                    logger.info("Discarding refresh %s, refresh %s is newer", ticket, self._applied)
                    return False
                self._applied = ticket
                self._events = tuple(events)
                self._error = None
                self._last_refresh = datetime.now(timezone.utc)
                self._countdown.reset()
            logger.info("Refresh %s loaded %s events", ticket, len(events))
            return True
        finally:
            # Unexpected errors propagate but must not leave the ticket in flight.
            with self._lock:
                self._in_flight.discard(ticket)


class RefreshScheduler:
    """Drives a controller from two background timers.

    One thread refreshes every ``interval_seconds``; the other ticks the
    countdown every second. Manual refreshes call ``controller.refresh()``
    directly from any thread.
    """

    def __init__(
        self,
        controller: RefreshController,
        *,
        tick_seconds: float = config.COUNTDOWN_TICK_SECONDS,
        on_refresh: Optional[Callable[[DashboardSnapshot], None]] = None,
    ) -> None:
        self.controller = controller
        self.tick_seconds = tick_seconds
        self.on_refresh = on_refresh
        self._stop = threading.Event()
        self._threads: List[threading.Thread] = []

    def _refresh_loop(self) -> None:
        while not self._stop.is_set():
            try:
                self.controller.refresh()
                if self.on_refresh is not None:
                    self.on_refresh(self.controller.snapshot())
            except Exception:
                logger.exception("Scheduled refresh failed")
            self._stop.wait(self.controller.interval_seconds)

    def _countdown_loop(self) -> None:
        while not self._stop.wait(self.tick_seconds):
            self.controller.tick()

    def start(self) -> None:
        if self._threads:
            return
        self._stop.clear()
        self._threads = [
            threading.Thread(target=self._refresh_loop, name="carpark-refresh", daemon=True),
            threading.Thread(target=self._countdown_loop, name="carpark-countdown", daemon=True),
        ]
        for thread in self._threads:
            thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        for thread in self._threads:
            thread.join(timeout)
        self._threads = []

    def wait(self, timeout: Optional[float] = None) -> bool:
        return self._stop.wait(timeout)


__all__ = [
    "format_countdown",
    "Countdown",
    "RefreshStatus",
    "DashboardSnapshot",
    "RefreshController",
    "RefreshScheduler",
]
