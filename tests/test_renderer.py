"""Tests for the wind field renderer."""
import numpy as np
import pytest

from windfield.exceptions import RendererClosedError
from windfield.render.canvas import RasterCanvas, RecordingCanvas
from windfield.render.renderer import WindFieldRenderer
from windfield.visualization.styles import HOLOGRAPHIC_STYLE


def make_renderer(settings, viewport, **kwargs):
    return WindFieldRenderer(viewport.width, viewport.height, settings=settings, **kwargs)


def test_empty_observations_draw_nothing(small_settings, viewport):
    canvas = RecordingCanvas(viewport.width, viewport.height)

    with make_renderer(small_settings, viewport) as renderer:
        stats = renderer.render_frame([], viewport, canvas)

    assert canvas.calls == []
    assert stats.frame == 1
    assert not stats.drew_anything


def test_heatmap_is_drawn_below_particles(small_settings, viewport, observations):
    canvas = RecordingCanvas(viewport.width, viewport.height)

    with make_renderer(small_settings, viewport) as renderer:
        stats = renderer.render_frame(observations, viewport, canvas)

    kinds = [call.kind for call in canvas.calls]
    assert kinds[0] == "cells"
    assert kinds[-1] == "points"
    assert stats.observations == 2
    assert stats.heatmap_cells == 30 * 40
    assert stats.particles_drawn + stats.respawned == 50


def test_layers_can_be_disabled(small_settings, viewport, observations):
    canvas = RecordingCanvas(viewport.width, viewport.height)

    with make_renderer(small_settings, viewport, show_heatmap=False) as renderer:
        renderer.render_frame(observations, viewport, canvas)

    assert canvas.calls_of("cells") == []
    assert canvas.calls_of("points")


def test_render_after_close_raises(small_settings, viewport, observations):
    renderer = make_renderer(small_settings, viewport)
    renderer.close()
    renderer.close()

    assert renderer.closed
    with pytest.raises(RendererClosedError):
        renderer.render_frame(observations, viewport, RecordingCanvas(10, 10))


def test_inputs_are_not_mutated(small_settings, viewport, observations):
    snapshot = [obs.model_copy() for obs in observations]
    viewport_before = viewport.model_copy()

    with make_renderer(small_settings, viewport) as renderer:
        for _ in range(3):
            renderer.render_frame(observations, viewport, RecordingCanvas(viewport.width, viewport.height))

    assert observations == snapshot
    assert viewport == viewport_before


def test_frame_counter_advances(small_settings, viewport, observations):
    with make_renderer(small_settings, viewport) as renderer:
        for _ in range(4):
            stats = renderer.render_frame(observations, viewport, RecordingCanvas(120, 90))
        assert renderer.frame_count == 4
        assert stats.frame == 4


def test_seeded_renderers_draw_identically(small_settings, viewport, observations):
    first_canvas = RecordingCanvas(viewport.width, viewport.height)
    second_canvas = RecordingCanvas(viewport.width, viewport.height)

    with make_renderer(small_settings, viewport, seed=3) as first, \
            make_renderer(small_settings, viewport, seed=3) as second:
        first.render_frame(observations, viewport, first_canvas)
        second.render_frame(observations, viewport, second_canvas)

    first_points = first_canvas.calls_of("points")[0].args
    second_points = second_canvas.calls_of("points")[0].args
    assert np.array_equal(first_points["x"], second_points["x"])
    assert np.array_equal(first_points["y"], second_points["y"])


def test_style_selects_ramp(small_settings, viewport):
    with make_renderer(small_settings, viewport, style=HOLOGRAPHIC_STYLE) as renderer:
        assert renderer.heatmap.ramp is HOLOGRAPHIC_STYLE.heatmap_ramp
        assert renderer.advector.style is HOLOGRAPHIC_STYLE


def test_raster_frame_changes_pixels(small_settings, viewport, observations):
    canvas = RasterCanvas(viewport.width, viewport.height)

    with make_renderer(small_settings, viewport) as renderer:
        renderer.render_frame(observations, viewport, canvas)

    assert canvas.pixels[..., 3].min() == pytest.approx(0.55, abs=1.0 / 255.0)
