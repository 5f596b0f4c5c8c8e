"""
Background Task Helpers

Provides click accounting that runs outside the request/response cycle.
Background tasks cannot use the endpoint's session as it's closed after the
endpoint returns, so each task creates its own session.
"""

import logging

from fastapi import BackgroundTasks
from sqlalchemy.ext.asyncio import async_sessionmaker

from shortlink.db.record_store import SQLRecordStore
from shortlink.db.session import async_session_maker
from shortlink.services.resolution_service import ClickDispatcher

logger = logging.getLogger(__name__)


async def increment_click_count_background(
    link_id: str,
    session_maker: async_sessionmaker = async_session_maker
) -> None:
    """
    Background task to increment a link's click count.

    Uses database-level increment for atomicity. Failures are logged and
    dropped; they never reach the redirect that triggered them.

    Args:
        link_id: Id of the link that was resolved
        session_maker: Session factory (overridable for tests)
    """
    try:
        async with session_maker() as session:
            store = SQLRecordStore(session)
            await store.increment_clicks(link_id)
            await session.commit()
    except Exception as e:
        logger.error(
            f"Failed to increment click count for link {link_id}: {str(e)}",
            exc_info=True
        )


def background_click_dispatcher(background_tasks: BackgroundTasks) -> ClickDispatcher:
    """Build a dispatcher that queues click increments on FastAPI BackgroundTasks."""

    def dispatch(link_id: str) -> None:
        background_tasks.add_task(increment_click_count_background, link_id)

    return dispatch
