"""Tests for particle advection."""
import math

import numpy as np
import pytest

from tests.conftest import point
from windfield.render.canvas import RecordingCanvas
from windfield.render.particles import ParticleAdvector, wrap_coordinates
from windfield.render.sampler import FieldSampler
from windfield.visualization.styles import STANDARD_STYLE


def make_advector(count=40, width=200, height=150, seed=7):
    return ParticleAdvector(width, height, count=count, seed=seed)


def uniform_field(speed, heading=0.0):
    return FieldSampler([point(50, 50, speed, heading)])


def test_wrap_coordinates_stays_within_extent():
    values = np.array([-1.0, 0.0, 799.9, 800.0, 1601.5, -1e-18])
    wrap_coordinates(values, 800.0)

    assert values[:5] == pytest.approx(np.array([799.0, 0.0, 799.9, 0.0, 1.5]))
    assert np.all((values >= 0.0) & (values < 800.0))


def test_velocity_grows_with_speed():
    advector = make_advector()

    assert advector.velocity(0.0) == pytest.approx(0.5)
    assert advector.velocity(10.0) == pytest.approx(1.3)


def test_particles_move_along_heading():
    advector = make_advector(count=3)
    advector.pool.x[:] = 100.0
    advector.pool.y[:] = 60.0
    advector.pool.age[:] = 0.0

    advector.advance(uniform_field(10.0, heading=0.0), RecordingCanvas(200, 150))
    assert advector.pool.x == pytest.approx(np.full(3, 101.3))
    assert advector.pool.y == pytest.approx(np.full(3, 60.0))

    advector.advance(uniform_field(10.0, heading=math.pi / 2), RecordingCanvas(200, 150))
    assert advector.pool.y == pytest.approx(np.full(3, 61.3))


def test_age_increases_by_constant_step():
    advector = make_advector()
    advector.pool.age[:] = np.linspace(0.0, 0.9, len(advector.pool))
    before = advector.pool.age.copy()

    advector.advance(uniform_field(5.0), RecordingCanvas(200, 150))
    assert advector.pool.age == pytest.approx(before + 0.005)


def test_expired_particles_respawn_in_bounds_with_age_zero():
    advector = make_advector(count=30)
    advector.pool.age[:] = 0.999
    canvas = RecordingCanvas(200, 150)

    stats = advector.advance(uniform_field(5.0), canvas)
    assert stats.respawned == 30
    assert stats.particles_drawn == 0
    assert canvas.calls == []
    assert np.all(advector.pool.age == 0.0)
    assert np.all((advector.pool.x >= 0) & (advector.pool.x < 200))
    assert np.all((advector.pool.y >= 0) & (advector.pool.y < 150))


def test_respawned_particles_are_not_drawn_that_frame():
    advector = make_advector(count=20)
    advector.pool.age[:10] = 0.999
    advector.pool.age[10:] = 0.0
    canvas = RecordingCanvas(200, 150)

    stats = advector.advance(uniform_field(5.0), canvas)
    (points_call,) = canvas.calls_of("points")
    assert stats.respawned == 10
    assert stats.particles_drawn == 10
    assert len(points_call.args["x"]) == 10


def test_positions_stay_on_canvas_after_many_frames():
    advector = make_advector(count=100)
    canvas = RecordingCanvas(200, 150)
    sampler = uniform_field(35.0, heading=2.5)

    for _ in range(50):
        canvas.clear()
        advector.advance(sampler, canvas)
        assert np.all((advector.pool.x >= 0) & (advector.pool.x < 200))
        assert np.all((advector.pool.y >= 0) & (advector.pool.y < 150))
        assert np.all((advector.pool.age >= 0) & (advector.pool.age <= 1))


def test_particle_alpha_fades_with_age():
    advector = make_advector(count=5)
    advector.pool.age[:] = np.array([0.0, 0.2, 0.4, 0.6, 0.8])
    canvas = RecordingCanvas(200, 150)

    advector.advance(uniform_field(10.0), canvas)
    (points_call,) = canvas.calls_of("points")
    expected = 0.85 * (1.0 - advector.pool.age)
    assert points_call.args["colors"][:, 3] == pytest.approx(expected)


def test_dot_radius_and_color_follow_speed():
    advector = make_advector(count=4)
    advector.pool.age[:] = 0.0
    canvas = RecordingCanvas(200, 150)

    advector.advance(uniform_field(20.0), canvas)
    (points_call,) = canvas.calls_of("points")
    assert points_call.args["radii"] == pytest.approx(np.full(4, 1.5 + 0.03 * 20.0))
    expected_rgb = STANDARD_STYLE.particle_ramp.color_at(20.0)[:3]
    assert points_call.args["colors"][0, :3] == pytest.approx(np.array(expected_rgb))


def test_trails_are_short_and_fainter_than_dots():
    advector = make_advector(count=60)
    advector.pool.age[:] = 0.0
    canvas = RecordingCanvas(200, 150)

    stats = advector.advance(uniform_field(10.0, heading=0.7), canvas)
    (segments,) = canvas.calls_of("segments")
    args = segments.args
    lengths = np.hypot(args["x1"] - args["x0"], args["y1"] - args["y0"])
    assert stats.trails_drawn == len(lengths)
    assert np.all(lengths < 20.0)
    assert args["colors"][:, 3] == pytest.approx(np.full(len(lengths), 0.85 * 0.995 * 0.4))
    assert args["width"] == STANDARD_STYLE.trail_width


def test_fast_steps_draw_no_trails():
    advector = make_advector(count=10)
    advector.pool.age[:] = 0.0
    canvas = RecordingCanvas(200, 150)

    # 0.5 + 300 * 0.08 = 24.5 px per frame
    stats = advector.advance(uniform_field(300.0), canvas)
    assert stats.trails_drawn == 0
    assert canvas.calls_of("segments") == []
    assert len(canvas.calls_of("points")) == 1


def test_wraparound_jump_draws_no_trail():
    advector = make_advector(count=1)
    advector.pool.x[:] = 199.5
    advector.pool.y[:] = 50.0
    advector.pool.age[:] = 0.0
    canvas = RecordingCanvas(200, 150)

    stats = advector.advance(uniform_field(10.0, heading=0.0), canvas)
    assert advector.pool.x[0] == pytest.approx(0.8)
    assert stats.trails_drawn == 0


def test_empty_field_leaves_pool_untouched():
    advector = make_advector()
    before = (advector.pool.x.copy(), advector.pool.y.copy(), advector.pool.age.copy())
    canvas = RecordingCanvas(200, 150)

    stats = advector.advance(FieldSampler([]), canvas)
    assert (stats.particles_drawn, stats.trails_drawn, stats.respawned) == (0, 0, 0)
    assert canvas.calls == []
    assert np.array_equal(advector.pool.x, before[0])
    assert np.array_equal(advector.pool.y, before[1])
    assert np.array_equal(advector.pool.age, before[2])


def test_seeded_advectors_are_deterministic():
    first, second = make_advector(seed=42), make_advector(seed=42)
    sampler = FieldSampler([point(0, 0, 8.0, 1.0), point(150, 100, 25.0, 4.0)])

    for _ in range(5):
        first.advance(sampler, RecordingCanvas(200, 150))
        second.advance(sampler, RecordingCanvas(200, 150))

    assert np.array_equal(first.pool.x, second.pool.x)
    assert np.array_equal(first.pool.y, second.pool.y)


def test_pool_size_is_fixed():
    advector = make_advector(count=25)
    for _ in range(300):
        advector.advance(uniform_field(5.0), RecordingCanvas(200, 150))
    assert len(advector.pool) == 25
    assert advector.pool.x.shape == (25,)


def test_close_releases_pool():
    advector = make_advector()
    advector.close()
    assert advector.pool.released
