"""
Rendering module: field sampling, heatmap, particles and drawing surfaces.
"""

from windfield.render.canvas import Canvas, RasterCanvas, RecordingCanvas
from windfield.render.heatmap import HeatmapRasterizer
from windfield.render.particles import ParticleAdvector, ParticlePool
from windfield.render.renderer import FrameStats, WindFieldRenderer
from windfield.render.sampler import FieldSampler, idw_direction, idw_speed

__all__ = [
    # Sampling
    "FieldSampler",
    "idw_speed",
    "idw_direction",
    # Layers
    "HeatmapRasterizer",
    "ParticleAdvector",
    "ParticlePool",
    # Renderer
    "WindFieldRenderer",
    "FrameStats",
    # Surfaces
    "Canvas",
    "RasterCanvas",
    "RecordingCanvas",
]
