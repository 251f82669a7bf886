"""Core app configuration."""

from admin_sync.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
