"""Fetch the published sheet export and turn it into parking events."""
from __future__ import annotations

import io
import json
import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import pandas as pd
import requests

from . import config
from .filters import keep_event
from .models import ParkingEvent, RawRow
from .normalize import normalize_row

logger = logging.getLogger(__name__)


@dataclass
class IngestionStats:
    """Capture summary statistics for an ingestion run."""

    rows_fetched: int = 0
    events_kept: int = 0
    rows_rejected: int = 0
    start_time: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def as_dict(self) -> Dict[str, int]:
        return {
            "rows_fetched": self.rows_fetched,
            "events_kept": self.events_kept,
            "rows_rejected": self.rows_rejected,
            "duration_seconds": int((datetime.now(timezone.utc) - self.start_time).total_seconds()),
        }


@dataclass
class IngestionResult:
    events: List[ParkingEvent]
    stats: IngestionStats


def parse_csv(text: str) -> List[Dict[str, str]]:
    """Split a CSV export into rows keyed by header, preserving column order."""
    if not text.strip():
        return []
    frame = pd.read_csv(
        io.StringIO(text),
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
    )
    return frame.to_dict(orient="records")


def ingest_rows(
    rows: Iterable[RawRow],
    *,
    tz: str = config.REFERENCE_TIMEZONE,
    stats: Optional[IngestionStats] = None,
) -> List[ParkingEvent]:
    """Normalize and filter ``rows`` into a new list, keeping input order."""
    events: List[ParkingEvent] = []
    for row in rows:
        event = normalize_row(row, tz)
        if stats is not None:
            stats.rows_fetched += 1
        if not keep_event(event):
            logger.debug("Rejected row: %s", event)
            if stats is not None:
                stats.rows_rejected += 1
            continue
        events.append(event)
    if stats is not None:
        stats.events_kept += len(events)
    return events


class SheetIngestor:
    """Fetches the sheet export and builds the event collection."""

    def __init__(
        self,
        *,
        url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        tz: str = config.REFERENCE_TIMEZONE,
    ) -> None:
        self.url = url or config.SHEET_CSV_URL
        self.session = session or requests.Session()
        self.tz = tz

    def fetch_text(self) -> str:
        response = self.session.get(self.url, timeout=config.HTTP_TIMEOUT)
        response.raise_for_status()
        # The export is UTF-8 but is often served without a charset header.
        return response.content.decode("utf-8")

    def fetch_rows(self) -> List[Dict[str, str]]:
        rows = parse_csv(self.fetch_text())
        logger.info("Fetched %s rows from %s", len(rows), self.url)
        return rows

    def ingest(self, *, snapshot_path: Optional[str] = None) -> IngestionResult:
        stats = IngestionStats()
        events = ingest_rows(self.fetch_rows(), tz=self.tz, stats=stats)
        if snapshot_path:
            write_snapshot(events, snapshot_path)
        logger.info("Ingestion completed: %s", stats.as_dict())
        return IngestionResult(events=events, stats=stats)


def load_csv_file(path: Path | str) -> List[Dict[str, str]]:
    return parse_csv(Path(path).read_text(encoding="utf-8"))


def write_snapshot(events: Iterable[ParkingEvent], path: Path | str) -> int:
    """Write events as newline-delimited JSON and return how many were written."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    written = 0
    with path.open("w", encoding="utf-8") as handle:
        for event in events:
            handle.write(json.dumps(asdict(event), ensure_ascii=False))
            handle.write("\n")
            written += 1
    logger.debug("Wrote %s events to %s", written, path)
    return written


def run_ingestion(
    *,
    url: Optional[str] = None,
    input_path: Optional[str] = None,
    snapshot_path: Optional[str] = None,
    tz: str = config.REFERENCE_TIMEZONE,
) -> IngestionResult:
    if input_path:
        stats = IngestionStats()
        events = ingest_rows(load_csv_file(input_path), tz=tz, stats=stats)
        if snapshot_path:
            write_snapshot(events, snapshot_path)
        logger.info("Ingestion completed: %s", stats.as_dict())
        return IngestionResult(events=events, stats=stats)

    ingestor = SheetIngestor(url=url, tz=tz)
    return ingestor.ingest(snapshot_path=snapshot_path)


__all__ = [
    "IngestionStats",
    "IngestionResult",
    "SheetIngestor",
    "parse_csv",
    "ingest_rows",
    "load_csv_file",
    "write_snapshot",
    "run_ingestion",
]
