"""Core app configuration and database."""

from movie_catalog.core.config import get_settings, settings
from movie_catalog.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
