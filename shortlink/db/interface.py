"""
Database Abstraction Interfaces

This module defines the contracts the rest of the codebase relies on:
- DatabaseAdapter: engine configuration per database backend
- RecordStore: persistence of short links
- AccountDirectory: lookup and management of owner accounts

Services only depend on these interfaces, so the SQL implementations can be
replaced (or faked in tests) without touching business logic.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.pool import Pool

from shortlink.db.models import Account, ShortLink


class DatabaseAdapter(ABC):
    """
    Abstract base class for database adapters.

    To add a new database backend:
    1. Create a new class inheriting from DatabaseAdapter
    2. Implement all abstract methods
    3. Update the factory function to return the new adapter
    """

    @abstractmethod
    def create_engine(self, database_url: str, **kwargs) -> AsyncEngine:
        """
        Create and configure the async database engine.

        Args:
            database_url: Connection string for the database
            **kwargs: Additional engine configuration options

        Returns:
            Configured AsyncEngine instance
        """
        pass

    @abstractmethod
    def get_pool_class(self) -> Optional[type[Pool]]:
        """
        Get the connection pool class for this database type.

        Returns:
            Pool class (e.g., NullPool for SQLite) or None to use default
        """
        pass

    @abstractmethod
    def get_connect_args(self) -> dict[str, Any]:
        """Get connection arguments specific to this database type."""
        pass

    @abstractmethod
    def get_engine_kwargs(self) -> dict[str, Any]:
        """Get additional engine configuration specific to this database type."""
        pass

    @abstractmethod
    def get_dialect_name(self) -> str:
        """
        Get the SQLAlchemy dialect name for this database.

        Returns:
            Dialect name (e.g., 'sqlite', 'postgresql')
        """
        pass


class RecordStore(ABC):
    """
    Persistence contract for short links.

    The store's unique index on short_code is the only serialization point
    for concurrent creations; implementations must report violations of it
    as UniqueConstraintViolation so callers can retry with a new code.
    """

    @abstractmethod
    async def find_by_code(
        self,
        short_code: str,
        include_deleted: bool = False
    ) -> Optional[ShortLink]:
        """
        Look up a link by short code.

        Args:
            short_code: The code to look up
            include_deleted: Also match soft-deleted links (codes stay reserved)
        """
        pass

    @abstractmethod
    async def insert(self, link: ShortLink) -> ShortLink:
        """
        Persist a new link.

        Raises:
            UniqueConstraintViolation: If the short code is already taken
            DatabaseError: For any other storage failure
        """
        pass

    @abstractmethod
    async def increment_clicks(self, link_id: str) -> None:
        """
        Atomically add one to a link's click count.

        Raises:
            ClickAccountingError: If the increment fails
        """
        pass

    @abstractmethod
    async def find_by_id_and_owner(self, link_id: str, owner_id: str) -> Optional[ShortLink]:
        """Look up a live link that belongs to owner_id."""
        pass

    @abstractmethod
    async def list_by_owner(self, owner_id: str) -> list[ShortLink]:
        """List an owner's live links, newest first."""
        pass

    @abstractmethod
    async def save(self, link: ShortLink) -> ShortLink:
        """Persist changes to an existing link."""
        pass

    @abstractmethod
    async def soft_delete(self, link_id: str) -> int:
        """
        Mark a link as deleted.

        Returns:
            Number of rows affected (0 if the link was missing or already deleted)
        """
        pass


class AccountDirectory(ABC):
    """Lookup and management of owner accounts."""

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[Account]:
        pass

    @abstractmethod
    async def find_by_id(self, account_id: str) -> Optional[Account]:
        pass

    @abstractmethod
    async def create(self, email: str) -> Account:
        """
        Raises:
            DatabaseError: If the email is already registered
        """
        pass

    @abstractmethod
    async def update(self, account_id: str, email: Optional[str] = None) -> Optional[Account]:
        pass

    @abstractmethod
    async def delete(self, account_id: str) -> int:
        pass
