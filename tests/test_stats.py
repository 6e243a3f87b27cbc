import json

import pytest

import unwrapped_stats.__main__ as entry_point
from unwrapped_stats.config import Settings
from unwrapped_stats.stats import NoUsableDataError, StatsGenerator, build_report


def test_build_report_from_raw_records(record) -> None:
    report = build_report([
        record("A", "Song1", 10000, "2021-03-01 12:00"),
        {"ts": "2021-03-01T12:00:20Z", "artistName": "A", "trackName": "Song1", "msPlayed": 40000},
        record("B", "Song2", 5000, "2021-03-01 13:00"),
        record("", "Broken", 40000),
    ])

    assert report.total_restart_songs == 1
    assert report.total_skipped_songs == 1
    assert report.total_songs == 1
    assert report.skip_rate == 33.33
    assert report.restart_rate == 33.33


def test_build_report_accepts_empty_input() -> None:
    report = build_report([])

    assert report.total_songs == 0
    assert report.skip_rate == 0


def test_generator_reads_input_directory(tmp_path, record) -> None:
    (tmp_path / "StreamingHistory_music_0.json").write_text(json.dumps([
        record("A", "Song1", 120000, "2021-03-01 12:00"),
        record("A", "Song1", 3000, "2021-03-01 13:00"),
    ]))

    report = StatsGenerator(Settings(INPUT_DIR=str(tmp_path))).generate()

    assert report.total_minutes == 2
    assert report.total_skipped_songs == 1


def test_generator_rejects_export_without_usable_plays(tmp_path, record) -> None:
    (tmp_path / "StreamingHistory_music_0.json").write_text(json.dumps([record("A", "Song1", 0)]))

    with pytest.raises(NoUsableDataError):
        StatsGenerator(Settings(INPUT_DIR=str(tmp_path))).generate()


def test_settings_reject_unknown_timezone() -> None:
    with pytest.raises(ValueError):
        Settings(TIMEZONE="Not/AZone")


def test_entry_point_writes_report(tmp_path, monkeypatch, record) -> None:
    input_dir = tmp_path / "input"
    input_dir.mkdir()
    (input_dir / "StreamingHistory_music_0.json").write_text(json.dumps([record("A", "Song1", 90000)]))
    monkeypatch.setattr(entry_point.settings, "INPUT_DIR", str(input_dir))
    monkeypatch.setattr(entry_point.settings, "OUTPUT_DIR", str(tmp_path / "output"))

    entry_point.run()

    data = json.loads((tmp_path / "output" / "results.json").read_text(encoding="utf-8"))
    assert data["totalMinutes"] == 1
    assert data["topSongs"] == [{"trackName": "Song1", "artistName": "A", "count": 1}]


def test_entry_point_exits_on_missing_data(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(entry_point.settings, "INPUT_DIR", str(tmp_path / "missing"))
    monkeypatch.setattr(entry_point.settings, "OUTPUT_DIR", str(tmp_path / "output"))

    with pytest.raises(SystemExit) as exc_info:
        entry_point.run()

    assert exc_info.value.code == 1
