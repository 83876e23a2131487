"""
Repository layer for database operations.

Provides a clean API for CRUD operations on database models.
"""

from plugin_catalog.db.repositories.base import BaseRepository
from plugin_catalog.db.repositories.plugin import PluginRepository

__all__ = [
    "BaseRepository",
    "PluginRepository",
]
