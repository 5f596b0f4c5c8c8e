"""
SQL Record Store

SQLAlchemy implementation of the RecordStore interface.

Design Decisions:
- Live lookups filter on deleted_at IS NULL; reservation checks do not
- Inserts flush immediately so the unique index is checked inside insert().
  Only a violation of the short_code index becomes UniqueConstraintViolation;
  foreign key, NOT NULL and other integrity failures are DatabaseError
- Click increments use a database-level UPDATE (no read-modify-write)
- Soft delete is an UPDATE guarded by deleted_at IS NULL, so repeated
  deletes affect zero rows
"""

import logging
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shortlink.core.exceptions import (
    ClickAccountingError,
    DatabaseError,
    UniqueConstraintViolation,
)
from shortlink.db.interface import RecordStore
from shortlink.db.models import ShortLink, utcnow

logger = logging.getLogger(__name__)

SHORT_CODE_INDEX = "ix_short_links_short_code"


def is_short_code_violation(error: IntegrityError) -> bool:
    """
    Tell a short code uniqueness violation apart from other integrity errors.

    SQLite reports "UNIQUE constraint failed: short_links.short_code";
    PostgreSQL reports the violated index by name.
    """
    message = str(error.orig).lower()
    if "unique" not in message and "duplicate" not in message:
        return False
    return "short_links.short_code" in message or SHORT_CODE_INDEX in message


class SQLRecordStore(RecordStore):
    """Record store backed by an async SQLAlchemy session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_code(
        self,
        short_code: str,
        include_deleted: bool = False
    ) -> Optional[ShortLink]:
        statement = select(ShortLink).where(ShortLink.short_code == short_code)
        if not include_deleted:
            statement = statement.where(ShortLink.deleted_at.is_(None))
        try:
            result = await self.session.execute(statement.limit(1))
        except SQLAlchemyError as e:
            raise DatabaseError(f"lookup of short code '{short_code}' failed", original_error=e)
        return result.scalars().first()

    async def insert(self, link: ShortLink) -> ShortLink:
        self.session.add(link)
        try:
            await self.session.flush()
        except IntegrityError as e:
            await self.session.rollback()
            if is_short_code_violation(e):
                raise UniqueConstraintViolation(link.short_code, original_error=e)
            logger.error(f"Integrity error inserting short code {link.short_code}: {e.orig}")
            raise DatabaseError(f"insert of short code '{link.short_code}' failed", original_error=e)
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise DatabaseError(f"insert of short code '{link.short_code}' failed", original_error=e)
        return link

    async def increment_clicks(self, link_id: str) -> None:
        statement = (
            update(ShortLink)
            .where(ShortLink.id == link_id)
            .values(click_count=ShortLink.click_count + 1)
        )
        try:
            await self.session.execute(statement)
        except SQLAlchemyError as e:
            raise ClickAccountingError(link_id, original_error=e)

    async def find_by_id_and_owner(self, link_id: str, owner_id: str) -> Optional[ShortLink]:
        statement = select(ShortLink).where(
            ShortLink.id == link_id,
            ShortLink.owner_id == owner_id,
            ShortLink.deleted_at.is_(None),
        )
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def list_by_owner(self, owner_id: str) -> list[ShortLink]:
        statement = (
            select(ShortLink)
            .where(ShortLink.owner_id == owner_id, ShortLink.deleted_at.is_(None))
            .order_by(ShortLink.created_at.desc())
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def save(self, link: ShortLink) -> ShortLink:
        link.updated_at = utcnow()
        self.session.add(link)
        try:
            await self.session.flush()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise DatabaseError(f"update of link '{link.id}' failed", original_error=e)
        return link

    async def soft_delete(self, link_id: str) -> int:
        now = utcnow()
        statement = (
            update(ShortLink)
            .where(ShortLink.id == link_id, ShortLink.deleted_at.is_(None))
            .values(deleted_at=now, updated_at=now)
        )
        result = await self.session.execute(statement)
        logger.debug(f"Soft-deleted link {link_id}: {result.rowcount} row(s)")
        return result.rowcount
