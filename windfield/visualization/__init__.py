"""
Visualization module for wind field styles, textures and animation.

Exports:
    - ColorRamp / RenderStyle: color ramps and theme strategy objects
    - get_style: look up a registered theme
    - generate_wind_texture: packed u/v texture for GPU layers

Animation lives in windfield.visualization.animation and is imported
from there directly.
"""

from windfield.visualization.styles import (
    DEFAULT_DPI,
    HOLOGRAPHIC_STYLE,
    STANDARD_STYLE,
    THEME_STYLES,
    WIND_RAMP,
    ColorRamp,
    RenderStyle,
    get_style,
    style_context,
)
from windfield.visualization.texture import (
    WindTexture,
    generate_wind_texture,
    wind_u,
    wind_v,
)

__all__ = [
    # Styles
    "ColorRamp",
    "RenderStyle",
    "WIND_RAMP",
    "STANDARD_STYLE",
    "HOLOGRAPHIC_STYLE",
    "THEME_STYLES",
    "DEFAULT_DPI",
    "get_style",
    "style_context",
    # Textures
    "WindTexture",
    "generate_wind_texture",
    "wind_u",
    "wind_v",
]
