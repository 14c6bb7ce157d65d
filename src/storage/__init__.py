"""
Storage adapter.

Count events are persisted to SQLite by storage.database.Database.
"""

from .database import Database, EXPECTED_SCHEMA_VERSION

__all__ = ["Database", "EXPECTED_SCHEMA_VERSION"]
