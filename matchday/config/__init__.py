"""Configuration module for the Matchday API."""

from matchday.config.logging import configure_logging
from matchday.config.settings import Settings, get_settings

__all__ = ["Settings", "configure_logging", "get_settings"]
