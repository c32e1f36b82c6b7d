"""
Inverse distance weighted sampling of a projected wind field.

The sampler answers "what is the wind here?" for any screen coordinate,
given the observations projected for the current repaint. Weights are
1/d^2 (IDW power 2) on squared screen-space distance. A query within one
pixel of an observation (d^2 < 1) returns that observation's value
directly, which also keeps the weights finite.

Directions are averaged as unit vectors and recombined with atan2, so
headings either side of 0/2*pi average to ~0 rather than ~pi. Blended
headings are returned in [0, 2*pi).

All queries accept scalars or numpy arrays of matching shape.
"""

import logging
from typing import Sequence, Tuple, Union

import numpy as np

from windfield.data.models import ScreenPoint

logger = logging.getLogger(__name__)

# Squared pixel distance below which a query snaps to an observation
SNAP_DISTANCE_SQ = 1.0

# Queries are evaluated in blocks to bound the (queries x observations) matrix
BLOCK_SIZE = 4096

TWO_PI = 2.0 * np.pi

ArrayLike = Union[float, np.ndarray]


def idw_weights(
    qx: np.ndarray,
    qy: np.ndarray,
    px: np.ndarray,
    py: np.ndarray,
    snap_distance_sq: float = SNAP_DISTANCE_SQ,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Normalized inverse-square-distance weights.

    Args:
        qx, qy: Query coordinates, shape (M,)
        px, py: Sample coordinates, shape (N,), N >= 1
        snap_distance_sq: Squared distance below which a query takes the
            sample's value outright

    Returns:
        Tuple of (weights, nearest). weights has shape (M, N) and each row
        sums to 1; a snapped row is one-hot on the first coincident sample
        in input order. nearest holds that sample's index, or -1 for rows
        that did not snap.
    """
    dx = qx[:, None] - px[None, :]
    dy = qy[:, None] - py[None, :]
    d2 = dx * dx + dy * dy

    snapped = d2 < snap_distance_sq
    has_snap = snapped.any(axis=1)
    nearest = np.where(has_snap, snapped.argmax(axis=1), -1)

    # Snapped entries get a placeholder distance; their rows are rewritten below
    weights = 1.0 / np.where(snapped, 1.0, d2)
    snap_rows = np.flatnonzero(has_snap)
    weights[snap_rows] = 0.0
    weights[snap_rows, nearest[snap_rows]] = 1.0

    weights /= weights.sum(axis=1, keepdims=True)
    return weights, nearest


class FieldSampler:
    """
    IDW sampler over one frame's screen points.

    Attributes:
        x: Observation x positions
        y: Observation y positions
        speed: Observation speeds (knots)
        direction: Observation headings (radians)
    """

    def __init__(self, points: Sequence[ScreenPoint]):
        """
        Initialize sampler.

        Args:
            points: Projected observations. Copied; the caller's sequence
                is never modified.
        """
        self.x = np.array([p.x for p in points], dtype=float)
        self.y = np.array([p.y for p in points], dtype=float)
        self.speed = np.array([p.speed for p in points], dtype=float)
        self.direction = np.array([p.direction for p in points], dtype=float)
        self._unit = np.column_stack([np.cos(self.direction), np.sin(self.direction)])

    def __len__(self) -> int:
        return len(self.x)

    @property
    def is_empty(self) -> bool:
        """True when there is no data to interpolate."""
        return len(self.x) == 0

    def speed_at(self, x: ArrayLike, y: ArrayLike) -> ArrayLike:
        """Interpolated speed in knots (0 when empty)."""
        return self.sample(x, y)[0]

    def direction_at(self, x: ArrayLike, y: ArrayLike) -> ArrayLike:
        """Interpolated heading in radians (0 when empty)."""
        return self.sample(x, y)[1]

    def sample(self, x: ArrayLike, y: ArrayLike) -> Tuple[ArrayLike, ArrayLike]:
        """
        Interpolate speed and heading at one or many points.

        Args:
            x: Query x coordinate(s)
            y: Query y coordinate(s), broadcastable against x

        Returns:
            Tuple of (speed, direction). Floats for scalar queries,
            arrays shaped like the query otherwise.
        """
        qx = np.asarray(x, dtype=float)
        qy = np.asarray(y, dtype=float)
        scalar = qx.ndim == 0 and qy.ndim == 0
        qx, qy = np.broadcast_arrays(qx, qy)
        shape = qx.shape

        flat_x = qx.ravel()
        flat_y = qy.ravel()
        speeds = np.zeros(flat_x.shape, dtype=float)
        directions = np.zeros(flat_x.shape, dtype=float)

        if len(self) == 1:
            # A single observation carries no spatial variation
            speeds.fill(self.speed[0])
            directions.fill(self.direction[0])
        elif not self.is_empty:
            for start in range(0, flat_x.size, BLOCK_SIZE):
                stop = start + BLOCK_SIZE
                s, d = self._sample_block(flat_x[start:stop], flat_y[start:stop])
                speeds[start:stop] = s
                directions[start:stop] = d

        if scalar:
            return float(speeds[0]), float(directions[0])
        return speeds.reshape(shape), directions.reshape(shape)

    def _sample_block(self, qx: np.ndarray, qy: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        weights, nearest = idw_weights(qx, qy, self.x, self.y)

        speed = weights @ self.speed
        mean_unit = weights @ self._unit
        direction = np.mod(np.arctan2(mean_unit[:, 1], mean_unit[:, 0]), TWO_PI)
        # Tiny negative angles round up to exactly 2*pi
        direction[direction >= TWO_PI] = 0.0

        snapped = nearest >= 0
        direction[snapped] = self.direction[nearest[snapped]]
        return speed, direction


def idw_speed(x: float, y: float, points: Sequence[ScreenPoint]) -> float:
    """Interpolated speed at (x, y) for a list of screen points."""
    return FieldSampler(points).speed_at(x, y)


def idw_direction(x: float, y: float, points: Sequence[ScreenPoint]) -> float:
    """Interpolated heading (radians) at (x, y) for a list of screen points."""
    return FieldSampler(points).direction_at(x, y)
