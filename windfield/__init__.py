"""
Wind Field Renderer

Renders sparse wind observations as an interpolated speed heatmap with
animated tracer particles on top, for map overlays, still frames,
animated GIFs and packed wind textures.
"""

__version__ = "1.0.0"
__author__ = "Wind Field Renderer Project"
