"""
Wind texture generation for GPU particle layers.

Converts sparse wind observations into a packed RGBA PNG: the u component
(m/s) in the red channel and v in the green channel, each normalized to
0-255 over its own range. A shader samples the texture and decodes the
vector with the ranges carried alongside it.

Interpolation is IDW (power 2) in plain lat/lng degrees on a regular grid
whose rows run top-down from the northern edge.
"""

import base64
import logging
import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np

from windfield.data.models import WindObservation
from windfield.render.canvas import encode_png
from windfield.render.sampler import idw_weights

logger = logging.getLogger(__name__)

# Default texture resolution (pixels per axis)
DEFAULT_RESOLUTION = 64

KNOTS_TO_MS = 0.514444

# Squared degree distance treated as coincident with an observation
GEO_SNAP_DISTANCE_SQ = 1e-10


def wind_u(speed_knots: float, direction_degrees: float) -> float:
    """
    Eastward wind component in m/s.

    Direction is meteorological (where the wind comes FROM), so the
    flow vector is negated.
    """
    return -speed_knots * KNOTS_TO_MS * math.sin(math.radians(direction_degrees))


def wind_v(speed_knots: float, direction_degrees: float) -> float:
    """Northward wind component in m/s."""
    return -speed_knots * KNOTS_TO_MS * math.cos(math.radians(direction_degrees))


@dataclass(frozen=True)
class WindTexture:
    """
    Encoded wind texture and the metadata needed to decode it.

    Attributes:
        base64_png: Base64-encoded PNG (R=u, G=v, B=0, A=255)
        u_min, u_max: u range (m/s) mapped to pixel values 0 and 255
        v_min, v_max: v range (m/s) mapped to pixel values 0 and 255
        width, height: Texture size in pixels
        south, north, west, east: Geographic bounds
    """
    base64_png: str
    u_min: float
    u_max: float
    v_min: float
    v_max: float
    width: int
    height: int
    south: float
    north: float
    west: float
    east: float

    @property
    def png_bytes(self) -> bytes:
        return base64.b64decode(self.base64_png)

    def decode_uv(self, pixels: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """
        Recover u/v (m/s) from texture pixels.

        Args:
            pixels: uint8 array of shape (height, width, 4)

        Returns:
            Tuple of (u, v) arrays of shape (height, width)
        """
        r = pixels[..., 0].astype(float) / 255.0
        g = pixels[..., 1].astype(float) / 255.0
        u = self.u_min + r * (self.u_max - self.u_min)
        v = self.v_min + g * (self.v_max - self.v_min)
        return u, v


def interpolate_uv_grid(
    observations: Sequence[WindObservation],
    south: float,
    north: float,
    west: float,
    east: float,
    resolution: int = DEFAULT_RESOLUTION,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    IDW-interpolate u/v (m/s) onto a resolution x resolution grid.

    Row 0 is the northern edge; column 0 is the western edge. Bounds may
    extend past +/-180 for views across the antimeridian; observation
    longitudes are shifted by whole turns to the side nearest the grid.

    Returns:
        Tuple of (u_grid, v_grid), each shape (resolution, resolution)
    """
    lats = np.array([o.position.latitude for o in observations], dtype=float)
    lngs = np.array([o.position.longitude for o in observations], dtype=float)
    mid_lng = (west + east) / 2.0
    lngs = mid_lng + np.mod(lngs - mid_lng + 180.0, 360.0) - 180.0
    uv = np.array(
        [[wind_u(o.speed_knots, o.direction_degrees), wind_v(o.speed_knots, o.direction_degrees)]
         for o in observations],
        dtype=float,
    )

    lat_step = (north - south) / resolution
    lng_step = (east - west) / resolution
    grid_lng = west + np.arange(resolution) * lng_step

    u_grid = np.empty((resolution, resolution))
    v_grid = np.empty((resolution, resolution))
    for row in range(resolution):
        grid_lat = np.full(resolution, north - row * lat_step)
        weights, _ = idw_weights(grid_lat, grid_lng, lats, lngs, GEO_SNAP_DISTANCE_SQ)
        values = weights @ uv
        u_grid[row] = values[:, 0]
        v_grid[row] = values[:, 1]

    return u_grid, v_grid


def _normalize(grid: np.ndarray) -> Tuple[np.ndarray, float, float]:
    low = float(grid.min())
    high = float(grid.max())
    if high == low:
        # Keep a non-zero range so decoding stays well defined
        high = low + 1.0
    scaled = np.clip(np.round((grid - low) / (high - low) * 255.0), 0, 255)
    return scaled.astype(np.uint8), low, high


def generate_wind_texture(
    observations: Sequence[WindObservation],
    south: float,
    north: float,
    west: float,
    east: float,
    resolution: int = DEFAULT_RESOLUTION,
) -> Optional[WindTexture]:
    """
    Generate a wind texture from sparse observations.

    Args:
        observations: Wind observations
        south, north, west, east: Geographic bounds of the texture
        resolution: Pixels per axis

    Returns:
        WindTexture, or None if there are no observations
    """
    if not observations:
        return None
    if resolution < 1:
        raise ValueError(f"Resolution must be positive: {resolution}")
    if north <= south or east <= west:
        raise ValueError(f"Invalid bounds: S={south} N={north} W={west} E={east}")

    u_grid, v_grid = interpolate_uv_grid(observations, south, north, west, east, resolution)
    u_pixels, u_min, u_max = _normalize(u_grid)
    v_pixels, v_min, v_max = _normalize(v_grid)

    rgba = np.zeros((resolution, resolution, 4), dtype=np.uint8)
    rgba[..., 0] = u_pixels
    rgba[..., 1] = v_pixels
    rgba[..., 3] = 255

    encoded = base64.b64encode(encode_png(rgba)).decode("ascii")
    logger.info(
        f"Generated {resolution}x{resolution} wind texture from {len(observations)} observations "
        f"(u {u_min:.2f}..{u_max:.2f}, v {v_min:.2f}..{v_max:.2f} m/s)"
    )

    return WindTexture(
        base64_png=encoded,
        u_min=u_min,
        u_max=u_max,
        v_min=v_min,
        v_max=v_max,
        width=resolution,
        height=resolution,
        south=south,
        north=north,
        west=west,
        east=east,
    )
