"""Database module for the DevClimate service.

This module provides:
- The `Database` connection owner (async SQLAlchemy engine + sessions)
- User and WeatherSearch models
"""

from devclimate.database.connection import Database
from devclimate.database.models import Base, User, WeatherSearch

__all__ = [
    # Connection
    "Database",
    # Models
    "Base",
    "User",
    "WeatherSearch",
]
