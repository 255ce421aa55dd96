"""Configuration management for the sync client."""

from .api import APIConfig
from .client import ClientConfig
from .settings import Settings

__all__ = ["Settings", "APIConfig", "ClientConfig"]
