"""Tests for render styles and settings."""
import numpy as np
import pytest
from pydantic import ValidationError

from config.settings import PRESET_VIEWPORTS, Settings, get_settings, reload_settings
from windfield.exceptions import UnknownThemeError
from windfield.visualization.styles import (
    HOLOGRAPHIC_STYLE,
    STANDARD_STYLE,
    format_wind_speed,
    get_style,
)


def test_get_style_by_name():
    assert get_style("standard") is STANDARD_STYLE
    assert get_style("Holographic") is HOLOGRAPHIC_STYLE


def test_unknown_style_raises():
    with pytest.raises(UnknownThemeError):
        get_style("sepia")


def test_dot_radii():
    radii = STANDARD_STYLE.dot_radii(np.array([0.0, 10.0]))
    assert radii == pytest.approx(np.array([1.5, 1.8]))


def test_styles_differ_in_ramps():
    assert HOLOGRAPHIC_STYLE.heatmap_ramp is not STANDARD_STYLE.heatmap_ramp
    assert STANDARD_STYLE.trail_alpha_factor == 0.4


def test_format_wind_speed():
    assert format_wind_speed(12.345) == "12.3 kt"
    assert format_wind_speed(5, unit="mph", decimals=0) == "5 mph"
    assert format_wind_speed(None) == "N/A"


def test_settings_defaults(tmp_path):
    settings = Settings(output_dir=tmp_path)

    assert settings.particle_count == 400
    assert settings.grid_step == 3
    assert settings.heatmap_alpha == 0.55
    assert settings.trail_max_distance == 20.0
    assert settings.particle_lifetime_frames == 200


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("PARTICLE_COUNT", "123")
    monkeypatch.setenv("DEFAULT_THEME", "HOLOGRAPHIC")

    settings = Settings()
    assert settings.particle_count == 123
    assert settings.default_theme == "holographic"


def test_settings_validation():
    with pytest.raises(ValidationError):
        Settings(default_theme="sepia")
    with pytest.raises(ValidationError):
        Settings(particle_count=0)
    with pytest.raises(ValidationError):
        Settings(heatmap_alpha=1.5)


def test_relative_output_dir_is_resolved():
    settings = Settings(output_dir="renders")
    assert settings.output_dir.is_absolute()
    assert settings.output_dir.name == "renders"


def test_get_settings_is_cached():
    assert get_settings() is get_settings()
    assert reload_settings() is get_settings()


def test_presets_are_valid_centers():
    for preset in PRESET_VIEWPORTS.values():
        assert -90 <= preset["latitude"] <= 90
        assert 0 <= preset["zoom"] <= 24
