"""
Data module for wind observation models, projection and loading.
"""

from windfield.data.models import LatLng, ScreenPoint, Viewport, WindObservation
from windfield.data.projection import (
    lat_lng_to_screen,
    lat_lng_to_world,
    project_observations,
    screen_heading,
    screen_to_lat_lng,
    viewport_bounds,
    world_to_lat_lng,
)
from windfield.data.processor import (
    convert_wind_speed,
    dataframe_to_observations,
    observations_to_dataframe,
)
from windfield.data.loader import (
    generate_demo_observations,
    load_observations,
    parse_observations,
    save_observations,
)

__all__ = [
    # Models
    "LatLng",
    "ScreenPoint",
    "Viewport",
    "WindObservation",
    # Projection
    "lat_lng_to_world",
    "world_to_lat_lng",
    "lat_lng_to_screen",
    "screen_to_lat_lng",
    "screen_heading",
    "project_observations",
    "viewport_bounds",
    # Processing
    "convert_wind_speed",
    "observations_to_dataframe",
    "dataframe_to_observations",
    # Loading
    "load_observations",
    "parse_observations",
    "save_observations",
    "generate_demo_observations",
]
