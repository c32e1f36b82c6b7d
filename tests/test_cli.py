"""Tests for the command-line interface and exports."""
import json

import pytest

from config.settings import get_settings
from windfield.cli import create_parser, main
from windfield.data.loader import save_observations
from windfield.visualization.animation import WindAnimation, render_still

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"

SMALL = ["--width", "48", "--height", "36", "--frames", "2", "--seed", "4"]


def test_parser_defaults():
    args = create_parser().parse_args(["--demo"])

    assert args.format == "png"
    assert args.preset == "outer_banks"
    assert args.rotation == 0.0


def test_requires_input(tmp_path):
    assert main(["--output-dir", str(tmp_path)]) == 1


def test_missing_observation_file_fails(tmp_path):
    assert main(["--observations", str(tmp_path / "missing.json"), "--output-dir", str(tmp_path)]) == 1


def test_demo_png(tmp_path):
    assert main(["--demo", "--output-dir", str(tmp_path)] + SMALL) == 0

    assert (tmp_path / "wind_field.png").read_bytes().startswith(PNG_SIGNATURE)


def test_observation_file_texture(tmp_path, observations):
    path = save_observations(observations, tmp_path / "winds.json")
    argv = [
        "--observations", str(path), "--lat", "35.0", "--lon", "-75.0", "--zoom", "8",
        "--format", "texture", "--texture-resolution", "8", "--output-dir", str(tmp_path),
    ] + SMALL

    assert main(argv) == 0
    assert (tmp_path / "wind_texture.png").read_bytes().startswith(PNG_SIGNATURE)
    meta = json.loads((tmp_path / "wind_texture.json").read_text())
    assert meta["width"] == 8
    assert meta["south"] < meta["north"]
    assert meta["west"] < meta["east"]


def test_legend_and_theme(tmp_path):
    argv = ["--demo", "--legend", "--theme", "holographic", "--rotation", "15",
            "--output-dir", str(tmp_path)] + SMALL

    assert main(argv) == 0
    assert (tmp_path / "wind_field.png").exists()


def test_render_still_with_no_observations(tmp_path, viewport, small_settings):
    path, stats = render_still([], viewport, tmp_path / "empty.png", warmup_frames=1, settings=small_settings)

    assert path.exists()
    assert not stats.drew_anything


def test_animation_ticks_and_saves_gif(tmp_path, viewport, observations, small_settings):
    with WindAnimation(observations, viewport, frames=3, settings=small_settings, seed=2) as animation:
        animation.tick()
        assert animation.last_stats.particles_drawn > 0
        path = animation.save_gif(tmp_path / "wind.gif", fps=5)
        renderer = animation.renderer

    assert path.read_bytes()[:3] == b"GIF"
    assert renderer.closed


def test_animation_rejects_zero_frames(viewport, observations, small_settings):
    with pytest.raises(ValueError):
        WindAnimation(observations, viewport, frames=0, settings=small_settings)


def test_texture_across_antimeridian(tmp_path):
    argv = [
        "--demo", "--lat", "0", "--lon", "179.9", "--zoom", "8", "--width", "200", "--height", "200",
        "--format", "texture", "--texture-resolution", "8", "--output-dir", str(tmp_path),
    ]

    assert main(argv) == 0
    meta = json.loads((tmp_path / "wind_texture.json").read_text())
    assert meta["west"] < 180.0 < meta["east"]
    assert meta["east"] - meta["west"] < 2.0


def test_default_output_dir_comes_from_settings(tmp_path, monkeypatch):
    output_dir = tmp_path / "renders"
    monkeypatch.setenv("OUTPUT_DIR", str(output_dir))
    get_settings.cache_clear()
    try:
        assert main(["--demo"] + SMALL) == 0
    finally:
        get_settings.cache_clear()

    assert (output_dir / "wind_field.png").exists()


def test_banner_reports_file_units(tmp_path, observations, capsys):
    path = save_observations(observations, tmp_path / "winds.json")

    assert main(["--observations", str(path), "--units", "kph", "--output-dir", str(tmp_path)] + SMALL) == 0
    assert "(km/h)" in capsys.readouterr().out
