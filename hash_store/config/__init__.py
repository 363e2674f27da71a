"""Configuration module for Hash Store."""

from .settings import RedisOptions, Settings, settings

__all__ = ["RedisOptions", "Settings", "settings"]
