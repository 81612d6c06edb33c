import json

import pytest
import requests

from carpark_tracker.ingest import (
    IngestionStats,
    SheetIngestor,
    ingest_rows,
    parse_csv,
    run_ingestion,
    write_snapshot,
)


class FakeResponse:
    def __init__(self, text: str = "", status_code: int = 200) -> None:
        self.content = text.encode("utf-8")
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}")


class FakeSession:
    def __init__(self, response: FakeResponse) -> None:
        self.response = response
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append((url, timeout))
        return self.response


class TestParseCsv:
    def test_headers_keep_trailing_whitespace_and_order(self, sample_csv_text):
        rows = parse_csv(sample_csv_text)
        assert len(rows) == 7
        assert "exitDateReminder " in rows[0]
        assert list(rows[0])[-1] == "status"
        assert rows[0]["parkingLocation"] == "คอนโด"

    def test_missing_cells_are_empty_strings(self, sample_csv_text):
        rows = parse_csv(sample_csv_text)
        assert rows[0]["exitDateReminder "] == ""

    def test_empty_text_gives_no_rows(self):
        assert parse_csv("") == []
        assert parse_csv("Date,parkingLocation\n") == []


class TestIngestRows:
    def test_rejects_noise_and_keeps_input_order(self, sample_csv_text):
        events = ingest_rows(parse_csv(sample_csv_text))
        assert [event.recorded_at for event in events] == [
            "2024-03-11T08:05:00+07:00",
            "2024-03-11T09:10:00+07:00",
            "2024-03-12T09:20:00+07:00",
            "2024-03-16T10:00:00+07:00",
        ]
        assert events[2].exit_date == "2024-03-13"
        assert events[0].exit_date == "2024-03-11"

    def test_repeated_ingest_is_identical_and_fresh(self, sample_csv_text):
        rows = parse_csv(sample_csv_text)
        first = ingest_rows(rows)
        second = ingest_rows(rows)
        assert first == second
        assert first is not second

    def test_stats_are_counted(self, sample_csv_text):
        stats = IngestionStats()
        ingest_rows(parse_csv(sample_csv_text), stats=stats)
        assert stats.rows_fetched == 7
        assert stats.events_kept == 4
        assert stats.rows_rejected == 3
        assert stats.as_dict()["events_kept"] == 4

    def test_row_without_location_is_dropped(self):
        rows = [{"Date": "2024-03-11T08:00:00+07:00", "parkingLocation": ""}]
        assert ingest_rows(rows) == []


class TestSheetIngestor:
    def test_ingest_fetches_and_normalizes(self, sample_csv_text):
        session = FakeSession(FakeResponse(sample_csv_text))
        ingestor = SheetIngestor(url="https://sheet.example/export.csv", session=session)

        result = ingestor.ingest()

        assert session.calls[0][0] == "https://sheet.example/export.csv"
        assert len(result.events) == 4
        assert result.stats.rows_fetched == 7

    def test_http_error_propagates(self):
        session = FakeSession(FakeResponse(status_code=503))
        ingestor = SheetIngestor(url="https://sheet.example/export.csv", session=session)

        with pytest.raises(requests.HTTPError):
            ingestor.ingest()

    def test_snapshot_is_written(self, sample_csv_text, tmp_path):
        session = FakeSession(FakeResponse(sample_csv_text))
        snapshot = tmp_path / "out" / "events.ndjson"

        SheetIngestor(session=session).ingest(snapshot_path=str(snapshot))

        lines = snapshot.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 4
        assert json.loads(lines[0])["location"] == "คอนโด"


def test_run_ingestion_from_local_file(sample_csv_path):
    result = run_ingestion(input_path=str(sample_csv_path))
    assert len(result.events) == 4


def test_write_snapshot_counts_events(make_event, tmp_path):
    path = tmp_path / "events.ndjson"
    assert write_snapshot([make_event(), make_event()], path) == 2
