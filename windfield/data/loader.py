"""
Observation loading and demo data.

Observations come from JSON (a list of records, or an object with an
"observations" list) or CSV files. Records may use the compact feed shape
``{"pos": {"lat": .., "lng": ..}, "spd": .., "dir": .., "gust": ..}`` or
flat latitude/longitude/speed/direction fields.

Usage:
    from windfield.data.loader import load_observations

    observations = load_observations("winds.json", units="mph")
"""

import json
import logging
import math
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import numpy as np
import pandas as pd
from pydantic import ValidationError

from windfield.data.models import Viewport, WindObservation
from windfield.data.processor import convert_wind_speed, dataframe_to_observations
from windfield.data.projection import screen_to_lat_lng
from windfield.exceptions import ObservationLoadError

logger = logging.getLogger(__name__)


def _convert_record(record: Dict[str, Any], units: str) -> WindObservation:
    obs = WindObservation.from_dict(record)
    if convert_wind_speed(1.0, units, "knots") == 1.0:
        return obs
    return obs.model_copy(update={
        "speed_knots": convert_wind_speed(obs.speed_knots, units, "knots"),
        "gust_knots": (
            convert_wind_speed(obs.gust_knots, units, "knots") if obs.has_gust else None
        ),
    })


def parse_observations(data: Any, units: str = "knots") -> List[WindObservation]:
    """
    Build observations from decoded JSON.

    Args:
        data: A list of records or a dict with an "observations" list
        units: Speed units used by the records

    Returns:
        List of observations with speeds in knots

    Raises:
        ObservationLoadError: If the structure or a record is invalid
    """
    if isinstance(data, dict):
        data = data.get("observations")
    if not isinstance(data, list):
        raise ObservationLoadError("Expected a list of observations or {'observations': [...]}")

    observations = []
    for index, record in enumerate(data):
        if not isinstance(record, dict):
            raise ObservationLoadError(f"Observation {index} is not an object")
        try:
            observations.append(_convert_record(record, units))
        except (ValidationError, ValueError, TypeError) as e:
            raise ObservationLoadError(f"Invalid observation {index}: {e}")
    return observations


def load_observations(path: Union[str, Path], units: str = "knots") -> List[WindObservation]:
    """
    Load observations from a JSON or CSV file.

    Args:
        path: File path (.json or .csv)
        units: Speed units used in the file (converted to knots)

    Returns:
        List of observations

    Raises:
        ObservationLoadError: If the file is missing, unsupported or malformed
    """
    path = Path(path)
    if not path.exists():
        raise ObservationLoadError(f"Observation file not found: {path}", source=str(path))

    suffix = path.suffix.lower()
    if suffix == ".json":
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ObservationLoadError(f"Invalid JSON in {path}: {e}", source=str(path))
        observations = parse_observations(data, units)
    elif suffix == ".csv":
        try:
            df = pd.read_csv(path, comment="#")
            observations = dataframe_to_observations(df, units)
        except (pd.errors.ParserError, pd.errors.EmptyDataError, KeyError, ValidationError, ValueError) as e:
            raise ObservationLoadError(f"Invalid CSV in {path}: {e}", source=str(path))
    else:
        raise ObservationLoadError(
            f"Unsupported observation file type '{suffix}' (use .json or .csv)",
            source=str(path),
        )

    logger.info(f"Loaded {len(observations)} observations from {path}")
    return observations


def save_observations(observations: List[WindObservation], path: Union[str, Path]) -> Path:
    """Write observations as a JSON list in the compact feed shape."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump([obs.to_dict() for obs in observations], f, indent=2)
    logger.info(f"Saved {len(observations)} observations to {path}")
    return path


def generate_demo_observations(
    viewport: Viewport,
    count: int = 36,
    seed: Optional[int] = None,
) -> List[WindObservation]:
    """
    Synthesize a spatially coherent wind field over a viewport.

    Observations sit on a jittered grid across the visible area and
    circulate counter-clockwise around a low slightly off center, with
    winds strongest on a ring around it.

    Args:
        viewport: Viewport to cover
        count: Approximate number of observations
        seed: Seed for the jitter

    Returns:
        List of observations
    """
    rng = np.random.default_rng(seed)
    side = max(1, int(round(math.sqrt(count))))
    cell_w = viewport.width / side
    cell_h = viewport.height / side

    low_x = viewport.width * 0.45
    low_y = viewport.height * 0.55
    ring = 0.35 * min(viewport.width, viewport.height)

    observations = []
    for row in range(side):
        for col in range(side):
            x = (col + 0.5 + rng.uniform(-0.3, 0.3)) * cell_w
            y = (row + 0.5 + rng.uniform(-0.3, 0.3)) * cell_h

            dx, dy = low_x - x, low_y - y
            distance = math.hypot(dx, dy)
            # Screen bearing toward the low, clockwise from up (north)
            bearing = math.degrees(math.atan2(dx, -dy)) % 360
            # Low on the left of the flow, 20 degrees of inflow
            direction = (bearing + 250.0) % 360
            speed = 6.0 + 24.0 * math.exp(-((distance - ring) / ring) ** 2)
            speed += rng.normal(0.0, 1.0)

            position = screen_to_lat_lng(x, y, viewport)
            observations.append(WindObservation(
                position=position,
                speed_knots=max(0.0, speed),
                direction_degrees=direction,
                gust_knots=max(0.0, speed) * 1.3,
            ))

    logger.info(f"Generated {len(observations)} demo observations")
    return observations
