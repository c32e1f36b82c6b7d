"""Shared fixtures for the wind field tests."""
import matplotlib

matplotlib.use("Agg")

import pytest

from config.settings import Settings
from windfield.data.models import LatLng, ScreenPoint, Viewport, WindObservation


@pytest.fixture
def viewport():
    return Viewport(center=LatLng(latitude=35.0, longitude=-75.0), zoom=8, width=120, height=90)


@pytest.fixture
def small_settings(tmp_path):
    return Settings(particle_count=50, default_seed=1, output_dir=tmp_path)


@pytest.fixture
def observations():
    return [
        WindObservation(
            position=LatLng(latitude=35.05, longitude=-75.05),
            speed_knots=12.0,
            direction_degrees=270.0,
            gust_knots=18.0,
        ),
        WindObservation(
            position=LatLng(latitude=34.95, longitude=-74.95),
            speed_knots=22.0,
            direction_degrees=315.0,
        ),
    ]


def point(x, y, speed, direction=0.0):
    return ScreenPoint(x=x, y=y, speed=speed, direction=direction)
