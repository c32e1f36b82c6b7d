"""
Data models for the wind field renderer.

This module defines Pydantic models for the externally supplied inputs
(positions, wind observations, viewports) and a lightweight dataclass for
the per-repaint screen-space projection of an observation.

Observations and viewports are immutable snapshots: the renderer reads
them for the duration of one frame and never mutates them.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


CARDINAL_DIRECTIONS = [
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW"
]


class LatLng(BaseModel):
    """
    Geographic position in WGS84 decimal degrees.

    Attributes:
        latitude: Latitude (-90 to 90)
        longitude: Longitude (-180 to 180)
    """

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90, le=90, description="Latitude in decimal degrees")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude in decimal degrees")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LatLng":
        """Create from a dict using either lat/lng or latitude/longitude keys."""
        lat = data.get("latitude", data.get("lat"))
        lng = data.get("longitude", data.get("lng", data.get("lon")))
        return cls(latitude=lat, longitude=lng)

    def to_dict(self) -> Dict[str, float]:
        return {"lat": self.latitude, "lng": self.longitude}

    def __str__(self) -> str:
        return f"({self.latitude:.4f}, {self.longitude:.4f})"


class WindObservation(BaseModel):
    """
    Single wind observation at a geographic position.

    Direction follows the meteorological convention: the bearing the wind
    blows FROM, in degrees clockwise from true north.

    Attributes:
        position: Where the observation applies
        speed_knots: Wind speed in knots
        direction_degrees: Wind direction, normalized to [0, 360)
        gust_knots: Optional gust speed in knots
    """

    model_config = ConfigDict(frozen=True)

    position: LatLng = Field(..., description="Observation position")
    speed_knots: float = Field(..., ge=0, description="Wind speed in knots")
    direction_degrees: float = Field(..., description="Direction wind blows from (0=North)")
    gust_knots: Optional[float] = Field(default=None, ge=0, description="Wind gust in knots")

    @field_validator("speed_knots", mode="before")
    @classmethod
    def handle_null_wind_speed(cls, v):
        """Handle null/NaN wind speed values."""
        if v is None:
            return 0.0
        if isinstance(v, float) and math.isnan(v):
            return 0.0
        return v

    @field_validator("gust_knots", mode="before")
    @classmethod
    def handle_null_wind_gust(cls, v):
        """Handle null/NaN wind gust values."""
        if v is None:
            return None
        if isinstance(v, float) and math.isnan(v):
            return None
        return v

    @field_validator("direction_degrees", mode="before")
    @classmethod
    def normalize_direction(cls, v):
        """Normalize wind direction to the 0-360 range."""
        v = float(v)
        if not math.isfinite(v):
            raise ValueError(f"direction must be finite: {v}")
        return v % 360.0

    @property
    def u(self) -> float:
        """Zonal component in knots (positive = blowing toward east)."""
        return -self.speed_knots * math.sin(math.radians(self.direction_degrees))

    @property
    def v(self) -> float:
        """Meridional component in knots (positive = blowing toward north)."""
        return -self.speed_knots * math.cos(math.radians(self.direction_degrees))

    @property
    def has_gust(self) -> bool:
        """Check if gust data is available."""
        return self.gust_knots is not None

    @property
    def cardinal_direction(self) -> str:
        """16-point compass direction (N, NNE, NE, etc.)."""
        index = round(self.direction_degrees / 22.5) % 16
        return CARDINAL_DIRECTIONS[index]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the compact JSON shape used by wind feeds."""
        data = {
            "pos": self.position.to_dict(),
            "spd": self.speed_knots,
            "dir": self.direction_degrees,
        }
        if self.gust_knots is not None:
            data["gust"] = self.gust_knots
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WindObservation":
        """
        Create from a dictionary.

        Accepts the compact feed shape ``{"pos": {"lat", "lng"}, "spd",
        "dir", "gust"}`` as well as flat records with ``latitude``,
        ``longitude``, ``speed`` (or ``speed_knots``), ``direction`` (or
        ``direction_degrees``) and optional ``gust``.
        """
        if "pos" in data:
            position = LatLng.from_dict(data["pos"])
        elif "position" in data:
            position = LatLng.from_dict(data["position"])
        else:
            position = LatLng.from_dict(data)

        speed = _first_present(data, ("spd", "speed_knots", "speed"))
        direction = _first_present(data, ("dir", "direction_degrees", "direction"))
        gust = _first_present(data, ("gust", "gust_knots"))

        return cls(
            position=position,
            speed_knots=speed,
            direction_degrees=direction,
            gust_knots=gust,
        )


def _first_present(data: Dict[str, Any], keys: Tuple[str, ...]) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


class Viewport(BaseModel):
    """
    Visible map window: geographic center, zoom, pixel size and rotation.

    Attributes:
        center: Geographic center of the view
        zoom: Web Mercator zoom level
        width: Surface width in pixels
        height: Surface height in pixels
        rotation: Map rotation in radians (clockwise)
    """

    model_config = ConfigDict(frozen=True)

    center: LatLng = Field(..., description="Map center")
    zoom: float = Field(..., ge=0, le=24, description="Zoom level")
    width: int = Field(..., gt=0, description="Surface width in pixels")
    height: int = Field(..., gt=0, description="Surface height in pixels")
    rotation: float = Field(default=0.0, description="Rotation in radians (clockwise)")

    @property
    def size(self) -> Tuple[int, int]:
        """(width, height) in pixels."""
        return (self.width, self.height)

    def copy_with(self, **changes: Any) -> "Viewport":
        """Return a copy with updated fields."""
        return self.model_copy(update=changes)


@dataclass(frozen=True)
class ScreenPoint:
    """
    An observation projected into screen space for one repaint.

    Attributes:
        x: Horizontal pixel position (grows right)
        y: Vertical pixel position (grows down)
        speed: Wind speed in knots
        direction: Screen heading the flow travels toward, in radians,
            measured from +x toward +y
    """
    x: float
    y: float
    speed: float
    direction: float
