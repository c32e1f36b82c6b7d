"""
Wind field renderer: heatmap plus animated particles.

One WindFieldRenderer lives as long as the view that shows it. It owns
the particle pool, acquired on construction and released by close(), and
draws one frame each time render_frame() is called by the external
ticker. Observations and the viewport are read-only snapshots for the
duration of that frame.

Usage:
    with WindFieldRenderer(800, 600, seed=7) as renderer:
        canvas = RasterCanvas(800, 600)
        renderer.render_frame(observations, viewport, canvas)
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from config.settings import Settings, get_settings
from windfield.data.models import Viewport, WindObservation
from windfield.data.projection import project_observations
from windfield.exceptions import RendererClosedError
from windfield.render.canvas import Canvas
from windfield.render.heatmap import HeatmapRasterizer
from windfield.render.particles import ParticleAdvector
from windfield.render.sampler import FieldSampler
from windfield.visualization.styles import RenderStyle, get_style

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FrameStats:
    """Summary of one rendered frame."""
    frame: int
    observations: int
    heatmap_cells: int
    particles_drawn: int
    trails_drawn: int
    respawned: int

    @property
    def drew_anything(self) -> bool:
        return self.heatmap_cells > 0 or self.particles_drawn > 0


class WindFieldRenderer:
    """
    Renders the heatmap and particle layers for a wind field.

    Attributes:
        style: Active render style
        heatmap: Heatmap rasterizer
        advector: Particle advector (owns the particle pool)
        frame_count: Frames rendered so far
    """

    def __init__(
        self,
        width: int,
        height: int,
        settings: Optional[Settings] = None,
        style: Optional[RenderStyle] = None,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
        show_heatmap: bool = True,
        show_particles: bool = True,
    ):
        """
        Initialize renderer.

        Args:
            width: Surface width in pixels
            height: Surface height in pixels
            settings: Tuning values (uses default settings if not provided)
            style: Render style (uses settings.default_theme if not provided)
            rng: Random source for particle placement
            seed: Seed used when rng is not given (falls back to settings.default_seed)
            show_heatmap: Whether to draw the heatmap layer
            show_particles: Whether to draw the particle layer
        """
        self.settings = settings or get_settings()
        self.style = style or get_style(self.settings.default_theme)
        self.show_heatmap = show_heatmap
        self.show_particles = show_particles

        if rng is None and seed is None:
            seed = self.settings.default_seed

        self.heatmap = HeatmapRasterizer(
            ramp=self.style.heatmap_ramp,
            step=self.settings.grid_step,
            alpha=self.settings.heatmap_alpha,
        )
        self.advector = ParticleAdvector(
            width,
            height,
            count=self.settings.particle_count,
            base_velocity=self.settings.base_velocity,
            velocity_scale=self.settings.velocity_scale,
            age_step=self.settings.age_step,
            particle_alpha=self.settings.particle_alpha,
            trail_max_distance=self.settings.trail_max_distance,
            style=self.style,
            rng=rng,
            seed=seed,
        )
        self.frame_count = 0
        self._closed = False

        logger.info(
            f"WindFieldRenderer initialized: {width}x{height}, "
            f"{self.settings.particle_count} particles, style={self.style.name}"
        )

    @property
    def closed(self) -> bool:
        return self._closed

    def render_frame(
        self,
        observations: Sequence[WindObservation],
        viewport: Viewport,
        canvas: Canvas,
    ) -> FrameStats:
        """
        Draw one frame.

        Args:
            observations: Wind observations for this refresh cycle
            viewport: Current map viewport
            canvas: Surface to draw on

        Returns:
            FrameStats for the frame (all zero when there are no observations)

        Raises:
            RendererClosedError: If close() has been called
        """
        if self._closed:
            raise RendererClosedError("Cannot render a frame after close()")

        self.frame_count += 1
        sampler = FieldSampler(project_observations(observations, viewport))

        if sampler.is_empty:
            logger.debug(f"Frame {self.frame_count}: no observations, nothing drawn")
            return FrameStats(self.frame_count, 0, 0, 0, 0, 0)

        cells = 0
        if self.show_heatmap:
            speeds = self.heatmap.render(sampler, canvas)
            cells = speeds.size

        particles = trails = respawned = 0
        if self.show_particles:
            stats = self.advector.advance(sampler, canvas)
            particles = stats.particles_drawn
            trails = stats.trails_drawn
            respawned = stats.respawned

        return FrameStats(
            frame=self.frame_count,
            observations=len(sampler),
            heatmap_cells=cells,
            particles_drawn=particles,
            trails_drawn=trails,
            respawned=respawned,
        )

    def close(self) -> None:
        """Release the particle pool. Safe to call more than once."""
        if self._closed:
            return
        self.advector.close()
        self._closed = True
        logger.debug(f"WindFieldRenderer closed after {self.frame_count} frames")

    def __enter__(self) -> "WindFieldRenderer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
