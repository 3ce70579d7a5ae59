"""Exceptions raised while reading or writing configuration."""

from deskclean.errors import DeskCleanError


class ConfigError(DeskCleanError):
    """Raised when the configuration file or an override is invalid."""
