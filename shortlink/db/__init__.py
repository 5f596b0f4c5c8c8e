"""
Database module with abstraction layer.

This module provides:
- DatabaseAdapter / RecordStore / AccountDirectory interfaces
- SQLiteAdapter: SQLite-specific engine configuration (default)
- SQLRecordStore / SQLAccountDirectory: SQLAlchemy implementations
- Session management: Database session creation and management
"""

from shortlink.db.interface import AccountDirectory, DatabaseAdapter, RecordStore
from shortlink.db.record_store import SQLRecordStore
from shortlink.db.account_directory import SQLAccountDirectory
from shortlink.db.session import get_session, async_session_maker, engine

__all__ = [
    "AccountDirectory",
    "DatabaseAdapter",
    "RecordStore",
    "SQLAccountDirectory",
    "SQLRecordStore",
    "get_session",
    "async_session_maker",
    "engine",
]
