"""Configuration module for the working paper agent."""

from working_paper_agent.config.logging import configure_logging
from working_paper_agent.config.settings import (
    DEFAULT_OUTPUT_DIR,
    FlatSettings,
    get_settings,
)

__all__ = [
    "DEFAULT_OUTPUT_DIR",
    "FlatSettings",
    "get_settings",
    "configure_logging",
]
