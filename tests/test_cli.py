import json

import pytest

from carpark_tracker.cli import main, parse_args


def test_summary_from_local_csv(sample_csv_path, capsys):
    assert main(["summary", "--input", str(sample_csv_path), "--location", "คอนโด"]) == 0

    output = json.loads(capsys.readouterr().out)
    assert output["total_records"] == 4
    assert output["filtered_total"] == 2
    assert output["locations"] == ["all", "คอนโด", "ที่ทำงาน"]
    assert output["top_floor"] == "5"
    assert [point["date"] for point in output["arrival_trend"]] == ["2024-03-11", "2024-03-13"]


def test_ingest_writes_snapshot(sample_csv_path, tmp_path, capsys):
    snapshot = tmp_path / "events.ndjson"

    assert main(["ingest", "--input", str(sample_csv_path), "--snapshot", str(snapshot)]) == 0

    stats = json.loads(capsys.readouterr().out)
    assert stats["events_kept"] == 4
    assert len(snapshot.read_text(encoding="utf-8").splitlines()) == 4


def test_rejects_unknown_period():
    with pytest.raises(SystemExit):
        parse_args(["summary", "--period", "year"])
