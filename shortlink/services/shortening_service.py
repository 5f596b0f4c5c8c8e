"""
Shortening Service

Creates new short links:
- Validates the original URL before touching storage or the code space
- Obtains a unique code and inserts the link via the UniquenessResolver
- Composes the public short URL from the configured base URL

The composed short URL is a derived view returned alongside the link; it is
not stored.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shortlink.core.exceptions import DatabaseError
from shortlink.core.setting import ShortenerConfig
from shortlink.core.validators import validate_original_url
from shortlink.db.interface import RecordStore
from shortlink.db.models import ShortLink
from shortlink.services.uniqueness_resolver import UniquenessResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShortenResult:
    link: ShortLink
    short_url: str


class ShorteningService:
    """
    Core business logic for URL shortening.

    Separated from API layer for testability: storage and code generation are
    injected, so the service runs unchanged against the SQL store or a fake.
    """

    def __init__(
        self,
        store: RecordStore,
        resolver: UniquenessResolver,
        config: ShortenerConfig,
        session: Optional[AsyncSession] = None
    ):
        """
        Args:
            store: Record store the new link is written to
            resolver: Allocates collision-free codes
            config: Frozen service configuration
            session: When given, committed after a successful insert
        """
        self.store = store
        self.resolver = resolver
        self.config = config
        self.session = session

    async def shorten(self, original_url: str, owner_id: Optional[str] = None) -> ShortenResult:
        """
        Create a new short link.

        Args:
            original_url: The long URL to shorten
            owner_id: Owning account id, None for anonymous links

        Returns:
            ShortenResult with the persisted link and its public short URL

        Raises:
            InvalidURLError: If URL format is invalid (nothing is written)
            CollisionExhaustedError: If no unique code could be allocated
            DatabaseError: If the database operation fails
        """
        url = validate_original_url(
            original_url,
            max_length=self.config.max_url_length,
            default_protocol=self.config.default_protocol,
        )

        def build(short_code: str) -> ShortLink:
            return ShortLink(
                original_url=url,
                short_code=short_code,
                click_count=0,
                owner_id=owner_id,
            )

        link = await self.resolver.allocate_and_insert(build)

        if self.session is not None:
            try:
                await self.session.commit()
            except SQLAlchemyError as e:
                await self.session.rollback()
                raise DatabaseError(f"commit of short code '{link.short_code}' failed", original_error=e)

        logger.info(
            f"Created short link {link.short_code} "
            f"({'owner ' + owner_id if owner_id else 'anonymous'})"
        )
        return ShortenResult(link=link, short_url=self.config.short_url_for(link.short_code))
