"""
Particle advection through the sampled wind field.

A fixed pool of tracer particles is stepped once per repaint:

1. Sample speed and heading at each particle.
2. Move it base_velocity + speed * velocity_scale pixels along the heading.
3. Age it by a constant step, so lifetime is counted in frames.
4. Wrap it toroidally into the surface.
5. Recycle particles whose age exceeds 1: random position, age 0,
   not drawn this frame.
6. Draw the rest with alpha fading linearly over their lifetime, plus a
   short trail from the previous position unless the step was long enough
   to be a wrap-around jump.

Particles are never allocated or freed individually; the pool arrays are
created once and rewritten in place.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from windfield.render.canvas import Canvas
from windfield.render.sampler import FieldSampler
from windfield.visualization.styles import STANDARD_STYLE, RenderStyle

logger = logging.getLogger(__name__)

DEFAULT_PARTICLE_COUNT = 400
DEFAULT_BASE_VELOCITY = 0.5
DEFAULT_VELOCITY_SCALE = 0.08
DEFAULT_AGE_STEP = 0.005
DEFAULT_PARTICLE_ALPHA = 0.85
DEFAULT_TRAIL_MAX_DISTANCE = 20.0


def wrap_coordinates(values: np.ndarray, extent: float) -> None:
    """Wrap values in place into [0, extent)."""
    np.mod(values, extent, out=values)
    # Tiny negatives can round up to exactly extent
    values[values >= extent] = 0.0


class ParticlePool:
    """
    Fixed-size particle storage.

    Attributes:
        x: Screen x positions
        y: Screen y positions
        age: Normalized ages in [0, 1]
    """

    def __init__(self, count: int, width: float, height: float, rng: np.random.Generator):
        if count < 1:
            raise ValueError(f"Particle count must be positive: {count}")
        self.x = rng.random(count) * width
        self.y = rng.random(count) * height
        # Staggered ages so the first generation doesn't expire in lockstep
        self.age = rng.random(count)
        self._count = count

    def __len__(self) -> int:
        return self._count

    @property
    def released(self) -> bool:
        return self.x is None

    def respawn(self, mask: np.ndarray, width: float, height: float, rng: np.random.Generator) -> int:
        """
        Reposition the masked particles uniformly in the surface with age 0.

        Returns:
            Number of particles respawned
        """
        count = int(np.count_nonzero(mask))
        if count:
            self.x[mask] = rng.random(count) * width
            self.y[mask] = rng.random(count) * height
            self.age[mask] = 0.0
        return count

    def release(self) -> None:
        """Drop the particle buffers."""
        self.x = None
        self.y = None
        self.age = None


@dataclass(frozen=True)
class AdvectionStats:
    """What one advection step drew."""
    particles_drawn: int
    trails_drawn: int
    respawned: int


class ParticleAdvector:
    """
    Owns a particle pool and advances it one frame at a time.

    Randomness comes from a numpy Generator. Pass ``rng`` (or ``seed``) to
    make trajectories reproducible.
    """

    def __init__(
        self,
        width: float,
        height: float,
        count: int = DEFAULT_PARTICLE_COUNT,
        base_velocity: float = DEFAULT_BASE_VELOCITY,
        velocity_scale: float = DEFAULT_VELOCITY_SCALE,
        age_step: float = DEFAULT_AGE_STEP,
        particle_alpha: float = DEFAULT_PARTICLE_ALPHA,
        trail_max_distance: float = DEFAULT_TRAIL_MAX_DISTANCE,
        style: RenderStyle = STANDARD_STYLE,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
    ):
        """
        Initialize advector.

        Args:
            width: Surface width used for the initial spawn
            height: Surface height used for the initial spawn
            count: Pool size, fixed for the advector's lifetime
            base_velocity: Pixels per frame in calm air
            velocity_scale: Extra pixels per frame per knot
            age_step: Normalized age added per frame
            particle_alpha: Alpha at age 0
            trail_max_distance: Longest trail segment drawn, in pixels
            style: Colors and stroke sizes
            rng: Random source; created from seed when omitted
            seed: Seed for the created random source
        """
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.base_velocity = base_velocity
        self.velocity_scale = velocity_scale
        self.age_step = age_step
        self.particle_alpha = particle_alpha
        self.trail_max_distance = trail_max_distance
        self.style = style
        self.pool = ParticlePool(count, width, height, self.rng)

    def velocity(self, speed):
        """Pixels per frame for a sampled wind speed in knots."""
        return self.base_velocity + speed * self.velocity_scale

    def advance(self, sampler: FieldSampler, canvas: Canvas) -> AdvectionStats:
        """
        Advance every particle one frame and draw the survivors.

        With no observations the pool is left untouched and nothing is drawn.

        Args:
            sampler: Field sampler for the current frame
            canvas: Surface to draw on; its size bounds the wrap-around

        Returns:
            Counts of what was drawn and recycled
        """
        if sampler.is_empty:
            return AdvectionStats(0, 0, 0)

        pool = self.pool
        width, height = canvas.width, canvas.height

        speed, direction = sampler.sample(pool.x, pool.y)
        velocity = self.velocity(speed)

        prev_x = pool.x.copy()
        prev_y = pool.y.copy()

        pool.x += np.cos(direction) * velocity
        pool.y += np.sin(direction) * velocity
        pool.age += self.age_step

        wrap_coordinates(pool.x, width)
        wrap_coordinates(pool.y, height)

        expired = pool.age > 1.0
        respawned = pool.respawn(expired, width, height, self.rng)

        live = ~expired
        if not live.any():
            return AdvectionStats(0, 0, respawned)

        x, y = pool.x[live], pool.y[live]
        px, py = prev_x[live], prev_y[live]
        live_speed = speed[live]

        alpha = self.particle_alpha * (1.0 - pool.age[live])
        colors = self.style.particle_ramp.color_at(live_speed)
        colors[:, 3] = alpha

        step_length = np.hypot(x - px, y - py)
        trail = step_length < self.trail_max_distance
        trails_drawn = int(np.count_nonzero(trail))
        if trails_drawn:
            trail_colors = colors[trail].copy()
            trail_colors[:, 3] *= self.style.trail_alpha_factor
            canvas.draw_segments(
                px[trail], py[trail], x[trail], y[trail],
                trail_colors, self.style.trail_width,
            )

        canvas.draw_points(x, y, self.style.dot_radii(live_speed), colors)

        return AdvectionStats(
            particles_drawn=int(np.count_nonzero(live)),
            trails_drawn=trails_drawn,
            respawned=respawned,
        )

    def close(self) -> None:
        """Release the particle pool."""
        self.pool.release()
