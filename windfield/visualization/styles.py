"""
Visualization styles and constants.

This module defines the color ramps and render styles used by the wind
heatmap and particle layers, plus matplotlib configuration for exported
frames and legends.

Theme variants are expressed as RenderStyle objects handed to the
renderer, so drawing code never branches on a theme flag.
"""

from dataclasses import dataclass
from typing import Dict, Sequence, Tuple, Union

import matplotlib.colors as mcolors
import matplotlib.pyplot as plt
import numpy as np

from windfield.exceptions import UnknownThemeError

ColorSpec = Union[str, Tuple[float, ...]]

# =============================================================================
# Figure Sizes
# =============================================================================

# Default DPI for exports
DEFAULT_DPI = 100

FONT_SIZES = {
    "title": 12,
    "axis_label": 10,
    "tick_label": 9,
    "legend": 9,
}

FONT_FAMILY = "sans-serif"


# =============================================================================
# Color Ramps
# =============================================================================

class ColorRamp:
    """
    Piecewise-linear color ramp keyed on wind speed.

    Speeds below the first threshold take the first color, speeds above
    the last threshold take the last color, and speeds in between blend
    the RGBA components of the two surrounding stops linearly. A speed
    equal to a threshold yields that stop's color exactly.
    """

    def __init__(self, stops: Sequence[Tuple[float, ColorSpec]], name: str = "wind_speed"):
        """
        Initialize color ramp.

        Args:
            stops: (threshold, color) pairs with strictly ascending thresholds.
                Colors are anything matplotlib.colors.to_rgba accepts.
            name: Name used for the derived matplotlib colormap

        Raises:
            ValueError: If stops are empty or thresholds are not ascending
        """
        if not stops:
            raise ValueError("ColorRamp needs at least one stop")

        thresholds = np.array([float(t) for t, _ in stops])
        if np.any(np.diff(thresholds) <= 0):
            raise ValueError(f"Ramp thresholds must be strictly ascending: {thresholds.tolist()}")

        self.name = name
        self.thresholds = thresholds
        self.colors = np.array([mcolors.to_rgba(c) for _, c in stops])

    def __len__(self) -> int:
        return len(self.thresholds)

    @property
    def vmin(self) -> float:
        return float(self.thresholds[0])

    @property
    def vmax(self) -> float:
        return float(self.thresholds[-1])

    def color_at(self, speed):
        """
        Get the ramp color for one speed or an array of speeds.

        Args:
            speed: Wind speed in knots (scalar or array)

        Returns:
            RGBA tuple of floats in [0, 1] for a scalar, otherwise an
            array with a trailing axis of length 4
        """
        values = np.asarray(speed, dtype=float)
        rgba = np.stack(
            [np.interp(values, self.thresholds, self.colors[:, i]) for i in range(4)],
            axis=-1,
        )
        if values.ndim == 0:
            return tuple(float(c) for c in rgba)
        return rgba

    def to_colormap(self) -> mcolors.LinearSegmentedColormap:
        """Matplotlib colormap spanning vmin..vmax, for legends."""
        if len(self) == 1:
            return mcolors.ListedColormap([self.colors[0]], name=self.name)
        span = self.vmax - self.vmin
        positions = (self.thresholds - self.vmin) / span
        return mcolors.LinearSegmentedColormap.from_list(
            self.name,
            list(zip(positions, self.colors)),
        )

    def to_norm(self) -> mcolors.Normalize:
        """Normalization matching to_colormap()."""
        return mcolors.Normalize(vmin=self.vmin, vmax=self.vmax, clip=True)


# Wind speed color stops (knots -> color), green -> yellow -> orange -> red -> purple
WIND_SPEED_STOPS = [
    (0, "#00E676"),
    (5, "#76FF03"),
    (10, "#FFEB3B"),
    (15, "#FFC107"),
    (20, "#FF9800"),
    (25, "#F44336"),
    (30, "#9C27B0"),
    (40, "#4A148C"),
]

WIND_RAMP = ColorRamp(WIND_SPEED_STOPS, name="wind_speed")

# Holographic variant: deep blue through cyan to neon magenta
HOLOGRAPHIC_STOPS = [
    (0, "#0A1A3F"),
    (10, "#00D9FF"),
    (20, "#7B2FFF"),
    (30, "#FF00FF"),
    (40, "#FF4DA6"),
]

HOLOGRAPHIC_RAMP = ColorRamp(HOLOGRAPHIC_STOPS, name="wind_speed_holographic")

HOLOGRAPHIC_PARTICLE_RAMP = ColorRamp(
    [
        (0, "#00FFFF"),
        (12, "#00D9FF"),
        (25, "#FF00FF"),
    ],
    name="particle_holographic",
)


# =============================================================================
# Render Styles
# =============================================================================

@dataclass(frozen=True)
class RenderStyle:
    """
    Strategy object describing how the wind layers are colored and stroked.

    Attributes:
        name: Style identifier
        heatmap_ramp: Ramp for heatmap cells
        particle_ramp: Ramp for particle dots and trails
        trail_width: Trail stroke width in pixels
        trail_alpha_factor: Trail alpha relative to the particle's alpha
        dot_radius: Dot radius for calm air, in pixels
        dot_radius_per_knot: Extra dot radius per knot of wind
    """
    name: str
    heatmap_ramp: ColorRamp
    particle_ramp: ColorRamp
    trail_width: float = 1.5
    trail_alpha_factor: float = 0.4
    dot_radius: float = 1.5
    dot_radius_per_knot: float = 0.03

    def dot_radii(self, speeds: np.ndarray) -> np.ndarray:
        """Dot radius for each particle's local wind speed."""
        return self.dot_radius + np.asarray(speeds, dtype=float) * self.dot_radius_per_knot


STANDARD_STYLE = RenderStyle(
    name="standard",
    heatmap_ramp=WIND_RAMP,
    particle_ramp=WIND_RAMP,
)

HOLOGRAPHIC_STYLE = RenderStyle(
    name="holographic",
    heatmap_ramp=HOLOGRAPHIC_RAMP,
    particle_ramp=HOLOGRAPHIC_PARTICLE_RAMP,
    trail_width=1.0,
    trail_alpha_factor=0.6,
    dot_radius=1.2,
)

THEME_STYLES: Dict[str, RenderStyle] = {
    "standard": STANDARD_STYLE,
    "holographic": HOLOGRAPHIC_STYLE,
}


def get_style(name: str) -> RenderStyle:
    """
    Look up a registered render style.

    Raises:
        UnknownThemeError: If no style is registered under name
    """
    try:
        return THEME_STYLES[name.lower()]
    except KeyError:
        raise UnknownThemeError(
            f"Unknown theme '{name}'. Available: {sorted(THEME_STYLES)}",
            source=name,
        )


# =============================================================================
# Plot Style Configuration
# =============================================================================

def get_plot_style() -> Dict:
    """
    Get matplotlib rcParams for exported frames.

    Returns:
        Dictionary of rcParams settings
    """
    return {
        # Figure
        "figure.facecolor": "black",
        "figure.edgecolor": "black",
        "figure.dpi": DEFAULT_DPI,
        "savefig.facecolor": "black",

        # Axes
        "axes.facecolor": "black",
        "axes.edgecolor": "#888888",
        "axes.labelcolor": "#dddddd",
        "axes.titlesize": FONT_SIZES["title"],
        "axes.labelsize": FONT_SIZES["axis_label"],

        # Ticks
        "xtick.color": "#dddddd",
        "ytick.color": "#dddddd",
        "xtick.labelsize": FONT_SIZES["tick_label"],
        "ytick.labelsize": FONT_SIZES["tick_label"],

        # Text
        "text.color": "#dddddd",
        "font.family": FONT_FAMILY,
        "font.size": FONT_SIZES["tick_label"],
    }


def style_context():
    """
    Context manager for applying style temporarily.

    Usage:
        with style_context():
            fig, ax = plt.subplots()
            # ... plotting code
    """
    return plt.rc_context(get_plot_style())


# =============================================================================
# Annotation Helpers
# =============================================================================

def format_wind_speed(speed: float, unit: str = "kt", decimals: int = 1) -> str:
    """Format wind speed with unit."""
    if speed is None:
        return "N/A"
    return f"{speed:.{decimals}f} {unit}"
