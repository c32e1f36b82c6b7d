"""
Coarse-grid wind speed heatmap.

The surface is divided into step x step cells. Each cell takes the ramp
color of the interpolated speed at its top-left corner and is drawn at
one layer-wide opacity, independent of the speed underneath.
"""

import logging
from typing import Optional, Tuple

import numpy as np

from windfield.render.canvas import Canvas
from windfield.render.sampler import FieldSampler
from windfield.visualization.styles import WIND_RAMP, ColorRamp

logger = logging.getLogger(__name__)

DEFAULT_GRID_STEP = 3
DEFAULT_HEATMAP_ALPHA = 0.55


class HeatmapRasterizer:
    """
    Rasterizes interpolated speed onto a canvas.

    Attributes:
        ramp: Color ramp keyed on speed in knots
        step: Cell size in pixels
        alpha: Opacity applied uniformly to every cell
    """

    def __init__(
        self,
        ramp: ColorRamp = WIND_RAMP,
        step: int = DEFAULT_GRID_STEP,
        alpha: float = DEFAULT_HEATMAP_ALPHA,
    ):
        if step < 1:
            raise ValueError(f"Grid step must be at least 1 pixel: {step}")
        if not 0.0 <= alpha <= 1.0:
            raise ValueError(f"Heatmap alpha must be within [0, 1]: {alpha}")
        self.ramp = ramp
        self.step = int(step)
        self.alpha = float(alpha)

    def grid_shape(self, width: int, height: int) -> Tuple[int, int]:
        """(rows, cols) of cells covering a width x height surface."""
        rows = -(-int(height) // self.step)
        cols = -(-int(width) // self.step)
        return rows, cols

    def sample_speeds(self, sampler: FieldSampler, width: int, height: int) -> np.ndarray:
        """
        Interpolated speed at the top-left corner of every cell.

        Returns:
            Array of shape (rows, cols)
        """
        xs = np.arange(0, int(width), self.step, dtype=float)
        ys = np.arange(0, int(height), self.step, dtype=float)
        grid_x, grid_y = np.meshgrid(xs, ys)
        return sampler.speed_at(grid_x, grid_y)

    def cell_colors(self, speeds: np.ndarray) -> np.ndarray:
        """Ramp colors for a speed grid, with the layer opacity applied."""
        colors = self.ramp.color_at(speeds)
        colors[..., 3] = self.alpha
        return colors

    def render(self, sampler: FieldSampler, canvas: Canvas) -> Optional[np.ndarray]:
        """
        Draw the heatmap layer.

        Args:
            sampler: Field sampler for the current frame
            canvas: Surface to draw on

        Returns:
            The sampled speed grid, or None when there was nothing to draw
        """
        if sampler.is_empty:
            return None

        speeds = self.sample_speeds(sampler, canvas.width, canvas.height)
        canvas.draw_cells(self.cell_colors(speeds), self.step)

        logger.debug(
            f"Heatmap {speeds.shape[1]}x{speeds.shape[0]} cells, "
            f"speed {speeds.min():.1f}-{speeds.max():.1f} kt"
        )
        return speeds
