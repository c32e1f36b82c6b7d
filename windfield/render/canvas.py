"""
Drawing surfaces for the wind layers.

The renderer only talks to the Canvas protocol, which exposes three
batched draw calls: coarse color cells (heatmap), line segments (particle
trails) and filled dots (particle heads). Two surfaces implement it:

- RasterCanvas: a Pillow RGBA image. Every draw call is rendered onto a
  transparent layer and alpha-composited over the image.
- RecordingCanvas: keeps every call it receives, for tests and golden
  output comparisons.
"""

import io
import logging
from pathlib import Path
from typing import List, NamedTuple, Protocol, Tuple, Union

import numpy as np
from PIL import Image, ImageDraw

logger = logging.getLogger(__name__)


class Canvas(Protocol):
    """Surface the wind layers draw onto."""

    width: int
    height: int

    def draw_cells(self, colors: np.ndarray, step: int) -> None:
        """Fill a grid of step x step cells; colors has shape (rows, cols, 4)."""
        ...

    def draw_segments(
        self,
        x0: np.ndarray,
        y0: np.ndarray,
        x1: np.ndarray,
        y1: np.ndarray,
        colors: np.ndarray,
        width: float,
    ) -> None:
        """Stroke one line segment per row; colors has shape (n, 4)."""
        ...

    def draw_points(
        self,
        x: np.ndarray,
        y: np.ndarray,
        radii: np.ndarray,
        colors: np.ndarray,
    ) -> None:
        """Fill one dot per row; colors has shape (n, 4)."""
        ...


def encode_png(rgba: np.ndarray) -> bytes:
    """
    Encode an RGBA image to PNG bytes.

    Args:
        rgba: uint8 array of shape (height, width, 4)

    Returns:
        PNG file contents
    """
    buffer = io.BytesIO()
    Image.fromarray(np.ascontiguousarray(rgba, dtype=np.uint8)).save(buffer, format="PNG")
    return buffer.getvalue()


def _to_rgba8(colors: np.ndarray) -> np.ndarray:
    return np.clip(np.round(np.asarray(colors, dtype=float) * 255.0), 0, 255).astype(np.uint8)


class RasterCanvas:
    """
    In-memory RGBA raster backed by a Pillow image.

    Colors come in as straight-alpha floats in [0, 1] and are stored as
    8-bit RGBA. Primitives within one draw call are painted onto a shared
    transparent layer, so overlapping dots of the same call do not stack.
    """

    def __init__(
        self,
        width: int,
        height: int,
        background: Tuple[float, float, float, float] = (0.0, 0.0, 0.0, 0.0),
    ):
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas size must be positive: {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self.background = tuple(background)
        self.clear()

    def clear(self) -> None:
        """Reset every pixel to the background color."""
        fill = tuple(int(c) for c in _to_rgba8(self.background))
        self.image = Image.new("RGBA", (self.width, self.height), fill)

    @property
    def pixels(self) -> np.ndarray:
        """Pixels as floats in [0, 1], shape (height, width, 4)."""
        return np.asarray(self.image, dtype=float) / 255.0

    def _new_layer(self) -> Image.Image:
        return Image.new("RGBA", (self.width, self.height), (0, 0, 0, 0))

    def _composite(self, layer: Image.Image) -> None:
        self.image = Image.alpha_composite(self.image, layer)

    # -------------------------------------------------------------------------
    # Draw calls
    # -------------------------------------------------------------------------
    def draw_cells(self, colors: np.ndarray, step: int) -> None:
        cells = _to_rgba8(colors)
        expanded = np.repeat(np.repeat(cells, step, axis=0), step, axis=1)
        expanded = np.ascontiguousarray(expanded[:self.height, :self.width])
        layer = self._new_layer()
        layer.paste(Image.fromarray(expanded), (0, 0))
        self._composite(layer)

    def draw_segments(self, x0, y0, x1, y1, colors, width: float) -> None:
        rgba = _to_rgba8(colors)
        line_width = max(1, int(round(width)))
        layer = self._new_layer()
        draw = ImageDraw.Draw(layer)
        for i in range(len(rgba)):
            draw.line(
                [(float(x0[i]), float(y0[i])), (float(x1[i]), float(y1[i]))],
                fill=tuple(int(c) for c in rgba[i]),
                width=line_width,
            )
        self._composite(layer)

    def draw_points(self, x, y, radii, colors) -> None:
        rgba = _to_rgba8(colors)
        layer = self._new_layer()
        draw = ImageDraw.Draw(layer)
        for i in range(len(rgba)):
            cx, cy, r = float(x[i]), float(y[i]), float(radii[i])
            fill = tuple(int(c) for c in rgba[i])
            if r < 0.5:
                # Sub-pixel dots still cover the pixel they sit in
                draw.point((cx, cy), fill=fill)
            else:
                draw.ellipse([cx - r, cy - r, cx + r, cy + r], fill=fill)
        self._composite(layer)

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------
    def to_rgba8(self) -> np.ndarray:
        """Pixels as a uint8 RGBA image."""
        return np.array(self.image, dtype=np.uint8)

    def to_png_bytes(self) -> bytes:
        buffer = io.BytesIO()
        self.image.save(buffer, format="PNG")
        return buffer.getvalue()

    def save_png(self, path: Union[str, Path]) -> Path:
        """Write the surface to a PNG file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.image.save(path, format="PNG")
        logger.info(f"Saved frame to {path}")
        return path


class DrawCall(NamedTuple):
    """One recorded draw call: its kind and the arrays it received."""
    kind: str
    args: dict


class RecordingCanvas:
    """Canvas that records draw calls instead of rasterizing them."""

    def __init__(self, width: int, height: int):
        self.width = int(width)
        self.height = int(height)
        self.calls: List[DrawCall] = []

    def clear(self) -> None:
        self.calls.clear()

    def calls_of(self, kind: str) -> List[DrawCall]:
        return [call for call in self.calls if call.kind == kind]

    def draw_cells(self, colors, step: int) -> None:
        self.calls.append(DrawCall("cells", {"colors": np.array(colors), "step": step}))

    def draw_segments(self, x0, y0, x1, y1, colors, width: float) -> None:
        self.calls.append(DrawCall("segments", {
            "x0": np.array(x0), "y0": np.array(y0),
            "x1": np.array(x1), "y1": np.array(y1),
            "colors": np.array(colors), "width": width,
        }))

    def draw_points(self, x, y, radii, colors) -> None:
        self.calls.append(DrawCall("points", {
            "x": np.array(x), "y": np.array(y),
            "radii": np.array(radii), "colors": np.array(colors),
        }))
