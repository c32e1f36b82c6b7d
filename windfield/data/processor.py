"""
Data processing module for wind observations.

This module provides unit conversion and conversion between observation
lists and pandas DataFrames.

Usage:
    from windfield.data.processor import observations_to_dataframe, convert_wind_speed

    df = observations_to_dataframe(observations)
"""

import logging
import math
from typing import List, Sequence

import pandas as pd

from windfield.data.models import LatLng, WindObservation

logger = logging.getLogger(__name__)


# =============================================================================
# Unit Conversion Constants
# =============================================================================

# Conversion factors to meters per second (base unit)
WIND_SPEED_TO_MS = {
    "mph": 0.44704,        # miles per hour
    "m/s": 1.0,            # meters per second (base)
    "km/h": 0.277778,      # kilometers per hour
    "kph": 0.277778,       # alias for km/h
    "knots": 0.514444,     # nautical miles per hour
    "kts": 0.514444,       # alias for knots
    "kt": 0.514444,        # alias for knots
}

# Human-readable unit labels
UNIT_LABELS = {
    "mph": "mph",
    "m/s": "m/s",
    "km/h": "km/h",
    "kph": "km/h",
    "knots": "knots",
    "kts": "knots",
    "kt": "knots",
}

DATAFRAME_COLUMNS = [
    "latitude", "longitude", "speed", "direction", "gust", "cardinal_direction"
]


# =============================================================================
# Unit Conversion
# =============================================================================

def convert_wind_speed(
    value: float,
    from_unit: str,
    to_unit: str
) -> float:
    """
    Convert wind speed between units.

    Supported units: mph, m/s, km/h (kph), knots (kts, kt)

    Args:
        value: Wind speed value to convert
        from_unit: Source unit
        to_unit: Target unit

    Returns:
        Converted wind speed value

    Raises:
        ValueError: If unit not supported
    """
    from_unit = from_unit.lower()
    to_unit = to_unit.lower()

    if from_unit not in WIND_SPEED_TO_MS:
        raise ValueError(f"Unknown source unit: {from_unit}. Supported: {list(WIND_SPEED_TO_MS.keys())}")
    if to_unit not in WIND_SPEED_TO_MS:
        raise ValueError(f"Unknown target unit: {to_unit}. Supported: {list(WIND_SPEED_TO_MS.keys())}")

    if from_unit == to_unit or WIND_SPEED_TO_MS[from_unit] == WIND_SPEED_TO_MS[to_unit]:
        return value

    if math.isnan(value):
        return value

    # Convert to m/s first, then to target
    value_ms = value * WIND_SPEED_TO_MS[from_unit]
    return value_ms / WIND_SPEED_TO_MS[to_unit]


def get_unit_label(unit: str) -> str:
    """Get display label for unit."""
    return UNIT_LABELS.get(unit.lower(), unit)


# =============================================================================
# DataFrame Conversion
# =============================================================================

def observations_to_dataframe(observations: Sequence[WindObservation]) -> pd.DataFrame:
    """
    Convert observations to a pandas DataFrame.

    Args:
        observations: Wind observations

    Returns:
        DataFrame with columns: latitude, longitude, speed, direction,
        gust, cardinal_direction (speeds in knots)
    """
    if not observations:
        logger.warning("No observations - returning empty DataFrame")
        return pd.DataFrame(columns=DATAFRAME_COLUMNS)

    data = []
    for obs in observations:
        data.append({
            "latitude": obs.position.latitude,
            "longitude": obs.position.longitude,
            "speed": obs.speed_knots,
            "direction": obs.direction_degrees,
            "gust": obs.gust_knots,
            "cardinal_direction": obs.cardinal_direction,
        })

    df = pd.DataFrame(data, columns=DATAFRAME_COLUMNS)
    df.attrs["units"] = "knots"

    logger.debug(f"Created DataFrame with {len(df)} rows")
    return df


def dataframe_to_observations(df: pd.DataFrame, units: str = "knots") -> List[WindObservation]:
    """
    Build observations from a DataFrame.

    Required columns: latitude, longitude, speed, direction. An optional
    gust column is read when present. Speeds are converted from units
    to knots.

    Raises:
        KeyError: If a required column is missing
    """
    missing = [c for c in ("latitude", "longitude", "speed", "direction") if c not in df.columns]
    if missing:
        raise KeyError(f"Missing required columns: {missing}")

    has_gust = "gust" in df.columns
    observations = []
    for row in df.itertuples(index=False):
        gust = getattr(row, "gust") if has_gust else None
        if gust is not None and pd.isna(gust):
            gust = None
        observations.append(WindObservation(
            position=LatLng(latitude=row.latitude, longitude=row.longitude),
            speed_knots=convert_wind_speed(float(row.speed), units, "knots"),
            direction_degrees=row.direction,
            gust_knots=convert_wind_speed(float(gust), units, "knots") if gust is not None else None,
        ))
    return observations
