"""Tests for reading fixes from CSV and exporting run summaries."""

from __future__ import annotations

import json
from pathlib import Path

import pandas as pd
import pytest

from territory_tracker.errors import TrackFormatError
from territory_tracker.session import RunSession
from territory_tracker.track_io import (
    fixes_from_records,
    load_fixes_csv,
    polygon_to_pairs,
    summary_to_dict,
)


def _write_csv(path: Path, rows) -> Path:
    pd.DataFrame(rows).to_csv(path, index=False)
    return path


def _tracks_rows(track):
    return [
        {
            "latitude": fix.latitude,
            "longitude": fix.longitude,
            "timestamp_ms": fix.timestamp_ms,
            "horizontal_accuracy_m": fix.horizontal_accuracy_m,
            "speed_mps": None,
            "altitude_m": None,
        }
        for fix in track
    ]


def test_load_round_trips_track(tmp_path: Path, square_track) -> None:
    path = _write_csv(tmp_path / "track.csv", _tracks_rows(square_track))
    fixes = load_fixes_csv(path)
    assert len(fixes) == len(square_track)
    assert fixes[0].latlon == pytest.approx(square_track[0].latlon)
    assert fixes[5].timestamp_ms == square_track[5].timestamp_ms
    assert fixes[0].speed_mps is None
    assert fixes[0].altitude_m is None


def test_short_column_names_are_accepted(tmp_path: Path) -> None:
    path = _write_csv(
        tmp_path / "short.csv",
        [
            {"lat": 51.5, "lng": -0.1, "timestamp": 1000, "accuracy": 4.0, "speed": -1.0, "altitude": 12.5},
            {"lat": 51.5001, "lng": -0.1, "timestamp": 3000, "accuracy": 4.0, "speed": 2.5, "altitude": None},
        ],
    )
    first, second = load_fixes_csv(path)
    assert first.speed_mps is None
    assert first.altitude_m == 12.5
    assert second.speed_mps == 2.5
    assert second.altitude_m is None


def test_missing_required_column(tmp_path: Path) -> None:
    path = _write_csv(tmp_path / "bad.csv", [{"latitude": 51.5, "longitude": -0.1, "timestamp_ms": 0}])
    with pytest.raises(TrackFormatError, match="horizontal_accuracy_m"):
        load_fixes_csv(path)


def test_blank_required_value(tmp_path: Path) -> None:
    path = _write_csv(
        tmp_path / "blank.csv",
        [
            {"latitude": 51.5, "longitude": -0.1, "timestamp_ms": 0, "horizontal_accuracy_m": 5},
            {"latitude": None, "longitude": -0.1, "timestamp_ms": 2000, "horizontal_accuracy_m": 5},
        ],
    )
    with pytest.raises(TrackFormatError, match="row 2"):
        load_fixes_csv(path)


def test_empty_file(tmp_path: Path) -> None:
    path = tmp_path / "empty.csv"
    path.write_text("", encoding="utf-8")
    with pytest.raises(TrackFormatError):
        load_fixes_csv(path)


def test_non_utf8_file(tmp_path: Path) -> None:
    path = tmp_path / "latin.csv"
    path.write_bytes(b"\xff\xfelatitude,longitude\n\xff,\xfe\n")
    with pytest.raises(TrackFormatError):
        load_fixes_csv(path)


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_fixes_csv(tmp_path / "nope.csv")


@pytest.mark.parametrize(
    "record",
    [
        {"latitude": "abc", "longitude": 0.0, "timestamp_ms": 0, "horizontal_accuracy_m": 5},
        {"latitude": float("inf"), "longitude": 0.0, "timestamp_ms": 0, "horizontal_accuracy_m": 5},
        {"latitude": 95.0, "longitude": 0.0, "timestamp_ms": 0, "horizontal_accuracy_m": 5},
    ],
)
def test_malformed_records_rejected(record) -> None:
    with pytest.raises(TrackFormatError):
        fixes_from_records([record])


def test_polygon_to_pairs_keeps_closing_vertex() -> None:
    polygon = [(1.0, 2.0), (1.5, 2.0), (1.5, 2.5), (1.0, 2.0)]
    assert polygon_to_pairs(polygon) == [[1.0, 2.0], [1.5, 2.0], [1.5, 2.5], [1.0, 2.0]]


def test_summary_is_json_serialisable(square_track) -> None:
    session = RunSession()
    for fix in square_track:
        session.add_fix(fix)
    payload = summary_to_dict(session.finish(), include_route=True)
    decoded = json.loads(json.dumps(payload))
    assert decoded["can_claim_territory"] is True
    assert len(decoded["loops"]) == 1
    loop = decoded["loops"][0]
    assert loop["polygon"][0] == loop["polygon"][-1]
    assert len(decoded["route"]) == len(square_track)
    assert set(decoded["region"]) == {"center_lat", "center_lng", "lat_delta", "lng_delta"}
