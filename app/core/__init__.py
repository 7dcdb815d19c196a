"""Core app configuration, database, cache and errors."""

from app.core.cache import get_cache
from app.core.config import get_settings, settings
from app.core.database import get_db

__all__ = ["get_cache", "get_settings", "settings", "get_db"]
