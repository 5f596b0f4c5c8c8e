"""
Service Wiring for FastAPI

Builds per-request service instances from the request's database session
and the ShortenerConfig frozen on app.state at startup.
"""

from fastapi import BackgroundTasks, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from shortlink.core.setting import ShortenerConfig
from shortlink.db.record_store import SQLRecordStore
from shortlink.db.session import get_session
from shortlink.services.background_tasks import background_click_dispatcher
from shortlink.services.code_generator import ShortCodeGenerator
from shortlink.services.ownership_service import OwnershipService
from shortlink.services.resolution_service import ResolutionService
from shortlink.services.shortening_service import ShorteningService
from shortlink.services.uniqueness_resolver import UniquenessResolver


def get_shortener_config(request: Request) -> ShortenerConfig:
    return request.app.state.shortener_config


def get_shortening_service(
    session: AsyncSession = Depends(get_session),
    config: ShortenerConfig = Depends(get_shortener_config)
) -> ShorteningService:
    store = SQLRecordStore(session)
    resolver = UniquenessResolver(
        store,
        ShortCodeGenerator(length=config.code_length, alphabet=config.alphabet),
        max_attempts=config.max_attempts,
    )
    return ShorteningService(store, resolver, config, session=session)


def get_resolution_service(
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_session),
    config: ShortenerConfig = Depends(get_shortener_config)
) -> ResolutionService:
    return ResolutionService(
        SQLRecordStore(session),
        config,
        background_click_dispatcher(background_tasks),
    )


def get_ownership_service(
    session: AsyncSession = Depends(get_session),
    config: ShortenerConfig = Depends(get_shortener_config)
) -> OwnershipService:
    return OwnershipService(SQLRecordStore(session), config, session=session)
