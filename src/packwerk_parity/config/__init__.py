"""Run configuration."""

from .settings import ConfigurationError, Settings

__all__ = ["ConfigurationError", "Settings"]
