"""Persistence: the dual-dialect Database and the stores built on it."""

from secretlane.db.engine import Database, PostgresDatabase, SqliteDatabase, open_database

__all__ = ["Database", "PostgresDatabase", "SqliteDatabase", "open_database"]
