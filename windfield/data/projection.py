"""
Coordinate projection between geographic and screen space.

Implements Web Mercator (EPSG:4326 -> EPSG:3857 world pixels at a zoom
level) and the viewport transform that every overlay uses to place
geographic features on the drawing surface.

Screen coordinates have their origin at the top-left corner, x growing
right and y growing down.
"""

import logging
import math
from typing import Iterable, List, Tuple

from windfield.data.models import LatLng, ScreenPoint, Viewport, WindObservation

logger = logging.getLogger(__name__)

# Maximum latitude representable in Web Mercator
MAX_LATITUDE = 85.05112878

# Tile size in pixels
TILE_SIZE = 256.0

# Meteorological FROM bearing (clockwise from north) -> screen heading
# (from +x toward +y). Wind from the north flows down the screen.
HEADING_OFFSET = math.pi / 2

TWO_PI = 2.0 * math.pi


def _scale(zoom: float) -> float:
    return TILE_SIZE * math.pow(2.0, zoom)


def lat_lng_to_world(position: LatLng, zoom: float) -> Tuple[float, float]:
    """
    Convert a position to world pixel coordinates at a zoom level.

    Args:
        position: Geographic position
        zoom: Zoom level

    Returns:
        (x, y) world pixels
    """
    lat = max(-MAX_LATITUDE, min(MAX_LATITUDE, position.latitude))
    scale = _scale(zoom)
    x = (position.longitude + 180.0) / 360.0 * scale
    lat_rad = math.radians(lat)
    y = (1 - math.log(math.tan(lat_rad) + 1 / math.cos(lat_rad)) / math.pi) / 2 * scale
    return x, y


def world_to_lat_lng(x: float, y: float, zoom: float) -> LatLng:
    """
    Convert world pixel coordinates back to a position.

    Longitudes outside [-180, 180] are wrapped back into range.
    """
    scale = _scale(zoom)
    lng = x / scale * 360.0 - 180.0
    lng = (lng + 180.0) % 360.0 - 180.0
    n = math.pi - 2.0 * math.pi * y / scale
    lat = math.degrees(math.atan(math.sinh(n)))
    return LatLng(latitude=lat, longitude=lng)


def _rotate(dx: float, dy: float, angle: float) -> Tuple[float, float]:
    if angle == 0:
        return dx, dy
    cos_t = math.cos(angle)
    sin_t = math.sin(angle)
    return dx * cos_t - dy * sin_t, dx * sin_t + dy * cos_t


def lat_lng_to_screen(position: LatLng, viewport: Viewport) -> Tuple[float, float]:
    """
    Convert a position to screen coordinates for a viewport.

    Args:
        position: Geographic position
        viewport: Current map viewport

    Returns:
        (x, y) screen pixels; may lie outside the surface
    """
    world_x, world_y = lat_lng_to_world(position, viewport.zoom)
    center_x, center_y = lat_lng_to_world(viewport.center, viewport.zoom)
    dx, dy = _rotate(world_x - center_x, world_y - center_y, viewport.rotation)
    return viewport.width / 2 + dx, viewport.height / 2 + dy


def screen_to_lat_lng(x: float, y: float, viewport: Viewport) -> LatLng:
    """Convert screen coordinates to a position for a viewport."""
    dx, dy = _rotate(x - viewport.width / 2, y - viewport.height / 2, -viewport.rotation)
    center_x, center_y = lat_lng_to_world(viewport.center, viewport.zoom)
    return world_to_lat_lng(center_x + dx, center_y + dy, viewport.zoom)


def screen_heading(direction_degrees: float, rotation: float = 0.0) -> float:
    """
    Screen-space flow heading for a meteorological wind direction.

    Args:
        direction_degrees: Bearing the wind blows from (any value; taken mod 360)
        rotation: Viewport rotation in radians (clockwise)

    Returns:
        Heading in radians within [0, 2*pi), measured from +x toward +y
    """
    heading = (math.radians(direction_degrees % 360.0) + HEADING_OFFSET + rotation) % TWO_PI
    # Tiny negative headings round up to exactly 2*pi
    if heading >= TWO_PI:
        return 0.0
    return heading


def viewport_bounds(viewport: Viewport) -> Tuple[float, float, float, float]:
    """
    Geographic bounding box of the visible surface, rotation included.

    Longitudes are left unwrapped so a view across the antimeridian keeps
    west < east: a view centred on 179.9E may span 179.35 to 180.45.

    Returns:
        (south, north, west, east) in degrees
    """
    center_x, center_y = lat_lng_to_world(viewport.center, viewport.zoom)
    scale = _scale(viewport.zoom)
    corners = ((0, 0), (viewport.width, 0), (0, viewport.height), (viewport.width, viewport.height))

    lats, lngs = [], []
    for x, y in corners:
        dx, dy = _rotate(x - viewport.width / 2, y - viewport.height / 2, -viewport.rotation)
        world_x, world_y = center_x + dx, center_y + dy
        lngs.append(world_x / scale * 360.0 - 180.0)
        lats.append(world_to_lat_lng(world_x, world_y, viewport.zoom).latitude)
    return min(lats), max(lats), min(lngs), max(lngs)


def project_observations(
    observations: Iterable[WindObservation],
    viewport: Viewport,
) -> List[ScreenPoint]:
    """
    Project observations into screen space for one repaint.

    Args:
        observations: Wind observations (order is irrelevant)
        viewport: Current map viewport

    Returns:
        One ScreenPoint per observation, in input order
    """
    points = []
    for obs in observations:
        x, y = lat_lng_to_screen(obs.position, viewport)
        points.append(ScreenPoint(
            x=x,
            y=y,
            speed=obs.speed_knots,
            direction=screen_heading(obs.direction_degrees, viewport.rotation),
        ))
    logger.debug(f"Projected {len(points)} observations at zoom {viewport.zoom}")
    return points
