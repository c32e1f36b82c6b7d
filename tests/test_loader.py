"""Tests for observation files, unit conversion and demo data."""
import json

import numpy as np
import pandas as pd
import pytest

from windfield.data.loader import (
    generate_demo_observations,
    load_observations,
    parse_observations,
    save_observations,
)
from windfield.data.processor import (
    convert_wind_speed,
    dataframe_to_observations,
    get_unit_label,
    observations_to_dataframe,
)
from windfield.data.projection import lat_lng_to_screen
from windfield.exceptions import ObservationLoadError

RECORDS = [
    {"pos": {"lat": 35.1, "lng": -75.2}, "spd": 14.0, "dir": 90.0, "gust": 20.0},
    {"latitude": 35.3, "longitude": -75.4, "speed": 8.0, "direction": 200.0},
]


def test_load_json_list(tmp_path):
    path = tmp_path / "winds.json"
    path.write_text(json.dumps(RECORDS))

    observations = load_observations(path)
    assert len(observations) == 2
    assert observations[0].speed_knots == 14.0
    assert observations[1].position.latitude == 35.3


def test_load_json_wrapped_with_unit_conversion(tmp_path):
    path = tmp_path / "winds.json"
    path.write_text(json.dumps({"observations": RECORDS}))

    observations = load_observations(path, units="m/s")
    assert observations[0].speed_knots == pytest.approx(14.0 / 0.514444)
    assert observations[0].gust_knots == pytest.approx(20.0 / 0.514444)
    assert observations[1].gust_knots is None


def test_load_csv_with_comments_and_optional_gust(tmp_path):
    path = tmp_path / "winds.csv"
    path.write_text(
        "# buoy export\n"
        "latitude,longitude,speed,direction,gust\n"
        "35.1,-75.2,10,45,\n"
        "35.2,-75.3,20,370,25\n"
    )

    observations = load_observations(path, units="knots")
    assert [o.speed_knots for o in observations] == [10.0, 20.0]
    assert observations[0].gust_knots is None
    assert observations[1].direction_degrees == pytest.approx(10.0)


def test_save_and_reload(tmp_path):
    observations = parse_observations(RECORDS)
    path = save_observations(observations, tmp_path / "out" / "winds.json")

    assert load_observations(path) == observations


@pytest.mark.parametrize("name,content", [
    ("winds.json", "{not json"),
    ("winds.json", json.dumps({"stations": []})),
    ("winds.json", json.dumps([{"spd": 4, "dir": 10}])),
    ("winds.json", json.dumps([1, 2])),
    ("winds.csv", "latitude,longitude\n1,2\n"),
    ("winds.txt", "hello"),
])
def test_bad_files_raise_load_error(tmp_path, name, content):
    path = tmp_path / name
    path.write_text(content)

    with pytest.raises(ObservationLoadError):
        load_observations(path)


def test_missing_file_raises_load_error(tmp_path):
    with pytest.raises(ObservationLoadError) as excinfo:
        load_observations(tmp_path / "nope.json")
    assert excinfo.value.source.endswith("nope.json")


def test_empty_list_is_valid():
    assert parse_observations([]) == []


def test_convert_wind_speed():
    assert convert_wind_speed(10.0, "knots", "kt") == 10.0
    assert convert_wind_speed(1.0, "m/s", "knots") == pytest.approx(1.943846, rel=1e-5)
    assert convert_wind_speed(10.0, "mph", "km/h") == pytest.approx(16.0934, rel=1e-4)
    assert get_unit_label("KTS") == "knots"
    with pytest.raises(ValueError):
        convert_wind_speed(1.0, "furlongs", "knots")


def test_dataframe_round_trip():
    observations = parse_observations(RECORDS)

    df = observations_to_dataframe(observations)
    assert list(df["speed"]) == [14.0, 8.0]
    assert df.attrs["units"] == "knots"
    assert list(df["cardinal_direction"]) == ["E", "SSW"]
    assert dataframe_to_observations(df) == observations


def test_empty_dataframe_has_columns():
    df = observations_to_dataframe([])
    assert df.empty
    assert "speed" in df.columns


def test_dataframe_requires_columns():
    with pytest.raises(KeyError):
        dataframe_to_observations(pd.DataFrame({"latitude": [1.0]}))


def test_demo_observations_cover_viewport(viewport):
    observations = generate_demo_observations(viewport, count=36, seed=5)

    assert len(observations) == 36
    for obs in observations:
        x, y = lat_lng_to_screen(obs.position, viewport)
        assert 0 <= x <= viewport.width
        assert 0 <= y <= viewport.height
        assert obs.speed_knots >= 0
        assert obs.gust_knots == pytest.approx(obs.speed_knots * 1.3)


def test_demo_observations_are_seeded(viewport):
    first = generate_demo_observations(viewport, seed=11)
    second = generate_demo_observations(viewport, seed=11)

    assert first == second
    assert np.std([o.direction_degrees for o in first]) > 0


def test_undecodable_json_raises_load_error(tmp_path):
    path = tmp_path / "winds.json"
    path.write_bytes(b'[{"pos": {"lat": 1, "lng": 2}, "spd": 3, "dir": "\xff"}]')

    with pytest.raises(ObservationLoadError):
        load_observations(path)
