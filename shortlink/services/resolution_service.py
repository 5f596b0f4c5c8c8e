"""
Resolution Service

This service handles the redirect read path:
- Looks up the live link for a short code
- Hands click accounting to a fire-and-forget dispatcher
- Returns the stored URL with an explicit protocol

Design Decisions:
- Click accounting never runs inline: the dispatcher only schedules it
  (FastAPI BackgroundTasks in the HTTP layer), so the redirect does not wait
  for the increment and cannot fail because of it
- Counts are approximate under concurrent redirects; that is accepted
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from shortlink.core.exceptions import ShortCodeNotFoundError
from shortlink.core.setting import ShortenerConfig
from shortlink.core.validators import ensure_protocol, sanitize_short_code
from shortlink.db.interface import RecordStore

logger = logging.getLogger(__name__)

ClickDispatcher = Callable[[str], None]


@dataclass(frozen=True)
class ResolvedLink:
    link_id: str
    short_code: str
    original_url: str


class ResolutionService:
    """Resolves short codes to destination URLs."""

    def __init__(self, store: RecordStore, config: ShortenerConfig, dispatch_click: ClickDispatcher):
        """
        Args:
            store: Record store used for the lookup
            config: Frozen service configuration
            dispatch_click: Schedules a click increment for a link id
        """
        self.store = store
        self.config = config
        self.dispatch_click = dispatch_click

    async def resolve(self, short_code: str) -> Optional[ResolvedLink]:
        """
        Resolve a short code.

        Returns:
            ResolvedLink if a live link holds the code, None otherwise
        """
        link = await self.store.find_by_code(short_code)
        if link is None:
            return None

        try:
            self.dispatch_click(link.id)
        except Exception as e:
            logger.error(
                f"Failed to schedule click accounting for {short_code}: {str(e)}",
                exc_info=True
            )

        return ResolvedLink(
            link_id=link.id,
            short_code=link.short_code,
            original_url=ensure_protocol(link.original_url, self.config.default_protocol),
        )

    async def get_redirect_url(self, short_code: str) -> str:
        """
        Return the redirect target for a short code taken from a request path.

        Codes with characters outside the code alphabet are not looked up.

        Raises:
            ShortCodeNotFoundError: If the code is malformed or no live link holds it
        """
        sanitized = sanitize_short_code(short_code, self.config.alphabet)
        resolved = await self.resolve(sanitized) if sanitized else None
        if resolved is None:
            raise ShortCodeNotFoundError(short_code)
        return resolved.original_url
