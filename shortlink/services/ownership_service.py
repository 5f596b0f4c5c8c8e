"""
Ownership Service

Owner-scoped management of short links: list, update destination, soft delete.

Every mutation validates its input and checks ownership before writing.
A link owned by someone else is reported exactly like a missing link.
"""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shortlink.core.exceptions import DatabaseError, LinkNotFoundError
from shortlink.core.setting import ShortenerConfig
from shortlink.core.validators import validate_original_url
from shortlink.db.interface import RecordStore
from shortlink.db.models import ShortLink

logger = logging.getLogger(__name__)


class OwnershipService:

    def __init__(
        self,
        store: RecordStore,
        config: ShortenerConfig,
        session: Optional[AsyncSession] = None
    ):
        self.store = store
        self.config = config
        self.session = session

    async def _commit(self, link_id: str) -> None:
        if self.session is None:
            return
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise DatabaseError(f"commit of changes to link '{link_id}' failed", original_error=e)

    async def list_links(self, owner_id: str) -> list[ShortLink]:
        return await self.store.list_by_owner(owner_id)

    async def _get_owned(self, link_id: str, owner_id: str) -> ShortLink:
        link = await self.store.find_by_id_and_owner(link_id, owner_id)
        if link is None:
            logger.warning(f"Link {link_id} not found or not owned by {owner_id}")
            raise LinkNotFoundError(link_id)
        return link

    async def update_link(self, link_id: str, owner_id: str, original_url: str) -> ShortLink:
        """
        Point an owned link at a new destination.

        Raises:
            InvalidURLError: If the new URL is invalid (checked first)
            LinkNotFoundError: If the link is missing or owned by someone else
        """
        url = validate_original_url(
            original_url,
            max_length=self.config.max_url_length,
            default_protocol=self.config.default_protocol,
        )
        link = await self._get_owned(link_id, owner_id)
        link.original_url = url
        saved = await self.store.save(link)
        await self._commit(link_id)
        logger.info(f"Link {link_id} updated by {owner_id}")
        return saved

    async def delete_link(self, link_id: str, owner_id: str) -> None:
        """
        Soft-delete an owned link.

        Raises:
            LinkNotFoundError: If the link is missing or owned by someone else
        """
        await self._get_owned(link_id, owner_id)
        affected = await self.store.soft_delete(link_id)
        if affected == 0:
            # Deleted concurrently between the lookup and the update
            raise LinkNotFoundError(link_id)
        await self._commit(link_id)
        logger.info(f"Link {link_id} deleted by {owner_id}")
