"""
Frame-driven animation and still export of the wind field.

matplotlib's FuncAnimation is the periodic ticker: every tick clears the
raster surface, asks the renderer for one frame and pushes the pixels
into an imshow artist. Nothing runs between ticks, and closing the
animation stops the timer, closes the figure and releases the renderer's
particle pool.

Usage:
    with WindAnimation(observations, viewport, frames=120, seed=3) as anim:
        anim.save_gif("output/wind.gif")
"""

import logging
from pathlib import Path
from typing import Optional, Sequence, Tuple

import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation, PillowWriter
from matplotlib.cm import ScalarMappable

from config.settings import Settings, get_settings
from windfield.data.models import Viewport, WindObservation
from windfield.render.canvas import RasterCanvas
from windfield.render.renderer import FrameStats, WindFieldRenderer
from windfield.visualization.styles import RenderStyle, format_wind_speed, style_context

logger = logging.getLogger(__name__)

# Opaque dark background behind the translucent wind layers
DEFAULT_BACKGROUND = (0.02, 0.05, 0.1, 1.0)


class WindAnimation:
    """
    Animated wind field driven by a matplotlib FuncAnimation.

    Attributes:
        renderer: Renderer producing each frame
        canvas: Raster surface reused across frames
        figure: Matplotlib figure showing the surface
        animation: The FuncAnimation ticker
        last_stats: FrameStats of the most recent tick
    """

    def __init__(
        self,
        observations: Sequence[WindObservation],
        viewport: Viewport,
        frames: int = 120,
        settings: Optional[Settings] = None,
        style: Optional[RenderStyle] = None,
        seed: Optional[int] = None,
        renderer: Optional[WindFieldRenderer] = None,
        background: Tuple[float, float, float, float] = DEFAULT_BACKGROUND,
    ):
        """
        Initialize animation.

        Args:
            observations: Wind observations (held as an immutable snapshot)
            viewport: Map viewport; its size is the surface size
            frames: Number of ticks in one pass of the animation
            settings: Settings (uses default settings if not provided)
            style: Render style for a renderer created here
            seed: Particle seed for a renderer created here
            renderer: Existing renderer to drive instead of creating one
            background: Surface color under the wind layers
        """
        if frames < 1:
            raise ValueError(f"Animation needs at least one frame: {frames}")

        self.settings = settings or get_settings()
        self.observations = tuple(observations)
        self.viewport = viewport
        self.frames = frames
        self.renderer = renderer or WindFieldRenderer(
            viewport.width,
            viewport.height,
            settings=self.settings,
            style=style,
            seed=seed,
        )
        self.canvas = RasterCanvas(viewport.width, viewport.height, background=background)
        self.last_stats: Optional[FrameStats] = None
        self._closed = False

        dpi = self.settings.image_dpi
        with style_context():
            self.figure = plt.figure(figsize=(viewport.width / dpi, viewport.height / dpi), dpi=dpi)
            axes = self.figure.add_axes((0, 0, 1, 1))
            axes.set_axis_off()
            self.image = axes.imshow(self.canvas.to_rgba8(), interpolation="nearest")

        interval = 1000.0 / self.settings.animation_fps
        self.animation = FuncAnimation(
            self.figure,
            self.tick,
            frames=frames,
            interval=interval,
            blit=False,
            repeat=False,
        )

    def tick(self, frame_index: int = 0):
        """Render one frame into the figure."""
        self.canvas.clear()
        self.last_stats = self.renderer.render_frame(self.observations, self.viewport, self.canvas)
        self.image.set_data(self.canvas.to_rgba8())
        return (self.image,)

    def save_gif(self, path, fps: Optional[int] = None) -> Path:
        """
        Run the animation to completion and write it as a GIF.

        Args:
            path: Output file path
            fps: Frames per second (settings.animation_fps if not provided)

        Returns:
            Path to the saved file
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        fps = fps or self.settings.animation_fps
        self.animation.save(str(path), writer=PillowWriter(fps=fps), dpi=self.settings.image_dpi)
        logger.info(f"Saved {self.frames}-frame animation to {path}")
        return path

    def close(self) -> None:
        """Stop the ticker, close the figure and release the renderer."""
        if self._closed:
            return
        event_source = getattr(self.animation, "event_source", None)
        if event_source is not None:
            event_source.stop()
        plt.close(self.figure)
        self.renderer.close()
        self._closed = True

    def __enter__(self) -> "WindAnimation":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def render_still(
    observations: Sequence[WindObservation],
    viewport: Viewport,
    output_path,
    warmup_frames: int = 60,
    settings: Optional[Settings] = None,
    style: Optional[RenderStyle] = None,
    seed: Optional[int] = None,
    show_legend: bool = False,
    title: Optional[str] = None,
    background: Tuple[float, float, float, float] = DEFAULT_BACKGROUND,
) -> Tuple[Path, FrameStats]:
    """
    Advance the particles for a while and save the last frame as PNG.

    Args:
        observations: Wind observations
        viewport: Map viewport; its size is the image size
        output_path: Output PNG path
        warmup_frames: Frames rendered before the one that is saved
        settings: Settings (uses default settings if not provided)
        style: Render style
        seed: Particle seed
        show_legend: Add a speed colorbar and title around the frame
        title: Title used with the legend
        background: Surface color under the wind layers

    Returns:
        Tuple of (saved path, FrameStats of the saved frame)
    """
    settings = settings or get_settings()
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    canvas = RasterCanvas(viewport.width, viewport.height, background=background)

    with WindFieldRenderer(
        viewport.width, viewport.height, settings=settings, style=style, seed=seed
    ) as renderer:
        stats = None
        for _ in range(max(1, warmup_frames + 1)):
            canvas.clear()
            stats = renderer.render_frame(observations, viewport, canvas)
        ramp = renderer.style.heatmap_ramp

    if not show_legend:
        canvas.save_png(output_path)
        return output_path, stats

    dpi = settings.image_dpi
    with style_context():
        fig, ax = plt.subplots(figsize=(viewport.width / dpi + 1.5, viewport.height / dpi + 0.8), dpi=dpi)
        try:
            ax.imshow(canvas.to_rgba8(), interpolation="nearest")
            ax.set_axis_off()
            if title:
                ax.set_title(title)
            mappable = ScalarMappable(norm=ramp.to_norm(), cmap=ramp.to_colormap())
            cbar = fig.colorbar(mappable, ax=ax, fraction=0.04, pad=0.02)
            cbar.set_label("Wind speed (kt)")
            cbar.set_ticks(list(ramp.thresholds))
            cbar.set_ticklabels([format_wind_speed(t, decimals=0) for t in ramp.thresholds])
            fig.savefig(output_path, dpi=dpi, bbox_inches="tight")
        finally:
            plt.close(fig)

    logger.info(f"Saved still frame with legend to {output_path}")
    return output_path, stats
