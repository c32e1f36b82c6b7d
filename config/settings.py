"""
Configuration settings for the wind field renderer.

This module provides type-safe configuration management using Pydantic.
Settings are loaded from environment variables and .env file.

Every particle and heatmap value here is a presentation tuning default,
not a physical constant.

Usage:
    from config.settings import get_settings

    settings = get_settings()
    print(settings.particle_count)
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Get the project root directory (parent of config/)
PROJECT_ROOT = Path(__file__).parent.parent

VALID_THEMES = {"standard", "holographic"}


class Settings(BaseSettings):
    """
    Renderer settings with validation.

    Settings are loaded from environment variables, with fallback to .env file.
    All paths are relative to the project root unless absolute.
    """

    model_config = SettingsConfigDict(
        env_file=str(PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Particle Advection
    # ==========================================================================
    particle_count: int = Field(
        default=400,
        ge=1,
        le=20000,
        description="Number of tracer particles (fixed for a renderer's lifetime)"
    )

    base_velocity: float = Field(
        default=0.5,
        ge=0.0,
        description="Screen pixels per frame a particle moves in calm air"
    )

    velocity_scale: float = Field(
        default=0.08,
        ge=0.0,
        description="Additional pixels per frame per knot of wind"
    )

    age_step: float = Field(
        default=0.005,
        gt=0.0,
        le=1.0,
        description="Normalized age added per frame (0.005 = 200 frame lifetime)"
    )

    particle_alpha: float = Field(
        default=0.85,
        ge=0.0,
        le=1.0,
        description="Alpha of a newborn particle, fading linearly to 0"
    )

    trail_max_distance: float = Field(
        default=20.0,
        gt=0.0,
        description="Longest trail segment drawn, in pixels"
    )

    # ==========================================================================
    # Heatmap
    # ==========================================================================
    grid_step: int = Field(
        default=3,
        ge=1,
        le=64,
        description="Heatmap cell size in device pixels"
    )

    heatmap_alpha: float = Field(
        default=0.55,
        ge=0.0,
        le=1.0,
        description="Opacity of the whole heatmap layer"
    )

    # ==========================================================================
    # Output Settings
    # ==========================================================================
    default_theme: str = Field(
        default="standard",
        description="Render style: 'standard' or 'holographic'"
    )

    output_dir: Path = Field(
        default=PROJECT_ROOT / "output",
        description="Directory for generated images and animations"
    )

    image_dpi: int = Field(
        default=100,
        ge=72,
        le=600,
        description="DPI for exported images"
    )

    animation_fps: int = Field(
        default=30,
        ge=1,
        le=120,
        description="Frames per second for exported animations"
    )

    default_seed: Optional[int] = Field(
        default=None,
        description="Seed for particle placement; random when unset"
    )

    # ==========================================================================
    # Validators
    # ==========================================================================
    @field_validator("default_theme")
    @classmethod
    def validate_theme(cls, v: str) -> str:
        """Validate theme name."""
        v_lower = v.lower()
        if v_lower not in VALID_THEMES:
            raise ValueError(f"Theme must be one of: {VALID_THEMES}")
        return v_lower

    @field_validator("output_dir", mode="before")
    @classmethod
    def resolve_path(cls, v) -> Path:
        """Convert string paths to Path objects and resolve relative paths."""
        if isinstance(v, str):
            v = Path(v)
        if not v.is_absolute():
            v = PROJECT_ROOT / v
        return v

    # ==========================================================================
    # Properties
    # ==========================================================================
    @property
    def particle_lifetime_frames(self) -> int:
        """Frames a particle lives before it is recycled."""
        return int(round(1.0 / self.age_step))

    # ==========================================================================
    # Methods
    # ==========================================================================
    def ensure_directories(self) -> None:
        """Create the output directory if it doesn't exist."""
        self.output_dir.mkdir(parents=True, exist_ok=True)


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings instance (cached for performance)

    Note:
        Uses lru_cache to avoid re-reading .env file on every call.
        Call get_settings.cache_clear() to reload settings if needed.
    """
    return Settings()


def reload_settings() -> Settings:
    """
    Force reload settings from environment.

    Returns:
        Fresh Settings instance
    """
    get_settings.cache_clear()
    return get_settings()


# =============================================================================
# Preset Viewports (commonly used map views)
# =============================================================================
PRESET_VIEWPORTS = {
    "outer_banks": {"latitude": 35.2585, "longitude": -75.5277, "zoom": 8.0},
    "chesapeake_bay": {"latitude": 38.0, "longitude": -76.2, "zoom": 7.0},
    "solent": {"latitude": 50.78, "longitude": -1.25, "zoom": 10.0},
    "san_francisco_bay": {"latitude": 37.8, "longitude": -122.4, "zoom": 9.0},
    "gulf_of_maine": {"latitude": 43.0, "longitude": -69.0, "zoom": 6.0},
}
