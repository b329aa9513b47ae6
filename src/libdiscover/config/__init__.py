"""Configuration models."""

from libdiscover.config.settings import Settings

__all__ = ["Settings"]
