"""
Configuration module for the wind field renderer.
"""

from config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
