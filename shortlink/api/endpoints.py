"""
FastAPI Endpoints for the Short-Link Service

This module defines all REST API endpoints with minimal logic.
Endpoints only handle:
- Request validation (Pydantic models)
- Rate limiting
- Error handling and HTTP responses
- Delegating to service layer

Design Principles:
- Thin endpoints: Only validation and rate limiting
- Service layer: All business logic
- Error handling: Typed service exceptions become proper HTTP status codes
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.responses import RedirectResponse

from shortlink.api.dependencies import (
    get_ownership_service,
    get_resolution_service,
    get_shortener_config,
    get_shortening_service,
)
from shortlink.api.schemas import (
    OwnedLinkResponse,
    OwnedLinksResponse,
    ShortenRequest,
    ShortLinkResponse,
    UpdateLinkRequest,
)
from shortlink.core.exceptions import (
    CollisionExhaustedError,
    DatabaseError,
    InvalidURLError,
    LinkNotFoundError,
    ShortCodeNotFoundError,
)
from shortlink.core.rate_limit import limiter, RATE_LIMITS
from shortlink.core.security import get_current_owner, get_optional_owner
from shortlink.core.setting import ShortenerConfig
from shortlink.services.ownership_service import OwnershipService
from shortlink.services.resolution_service import ResolutionService
from shortlink.services.shortening_service import ShorteningService

logger = logging.getLogger(__name__)

router = APIRouter()
my_links_router = APIRouter(prefix="/my-links")


@router.post(
    "/",
    response_model=ShortLinkResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a short URL",
    description="Takes a long URL and returns a shortened version with a unique code"
)
@limiter.limit(RATE_LIMITS["shorten"])
async def create_short_url(
    request: Request,  # Required for rate limiting (slowapi expects parameter named 'request')
    body: ShortenRequest,
    owner_id: Optional[str] = Depends(get_optional_owner),
    service: ShorteningService = Depends(get_shortening_service)
) -> ShortLinkResponse:
    """
    Create a new short link, owned by the caller when a valid token is sent.

    Raises:
        HTTPException 400: If the URL is invalid
        HTTPException 500: If no unique code could be allocated or storage fails
    """
    try:
        result = await service.shorten(body.original_url, owner_id=owner_id)
    except InvalidURLError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except CollisionExhaustedError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )
    except DatabaseError as e:
        logger.error(f"Failed to create short URL: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )

    link = result.link
    return ShortLinkResponse(
        id=link.id,
        original_url=link.original_url,
        short_code=link.short_code,
        short_url=result.short_url,
        click_count=link.click_count,
        owner_id=link.owner_id,
        created_at=link.created_at,
        updated_at=link.updated_at,
    )


@my_links_router.get(
    "/links",
    response_model=OwnedLinksResponse,
    summary="List my links",
    description="Returns the caller's live links, newest first"
)
@limiter.limit(RATE_LIMITS["my_links"])
async def list_my_links(
    request: Request,
    owner_id: str = Depends(get_current_owner),
    service: OwnershipService = Depends(get_ownership_service),
    config: ShortenerConfig = Depends(get_shortener_config)
) -> OwnedLinksResponse:
    links = await service.list_links(owner_id)
    return OwnedLinksResponse(
        links=[OwnedLinkResponse.from_link(link, config.short_url_for(link.short_code)) for link in links]
    )


@my_links_router.put(
    "/{link_id}",
    response_model=OwnedLinkResponse,
    summary="Update one of my links",
    description="Points an owned link at a new destination URL"
)
@limiter.limit(RATE_LIMITS["my_links"])
async def update_my_link(
    link_id: str,
    request: Request,
    body: UpdateLinkRequest,
    owner_id: str = Depends(get_current_owner),
    service: OwnershipService = Depends(get_ownership_service),
    config: ShortenerConfig = Depends(get_shortener_config)
) -> OwnedLinkResponse:
    """
    Raises:
        HTTPException 400: If the new URL is invalid
        HTTPException 404: If the link is missing or not owned by the caller
        HTTPException 500: If the change could not be stored
    """
    try:
        link = await service.update_link(link_id, owner_id, body.original_url)
    except InvalidURLError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except LinkNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Link not found or access denied"
        )
    except DatabaseError as e:
        logger.error(f"Failed to update link {link_id}: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )
    return OwnedLinkResponse.from_link(link, config.short_url_for(link.short_code))


@my_links_router.delete(
    "/{link_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete one of my links",
    description="Soft-deletes an owned link; its short code stays reserved"
)
@limiter.limit(RATE_LIMITS["my_links"])
async def delete_my_link(
    link_id: str,
    request: Request,
    owner_id: str = Depends(get_current_owner),
    service: OwnershipService = Depends(get_ownership_service)
) -> Response:
    try:
        await service.delete_link(link_id, owner_id)
    except LinkNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Link not found or access denied"
        )
    except DatabaseError as e:
        logger.error(f"Failed to delete link {link_id}: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{short_code}",
    status_code=status.HTTP_302_FOUND,
    summary="Redirect to original URL",
    description="Takes a short code and redirects to the original long URL"
)
@limiter.limit(RATE_LIMITS["redirect"])
async def redirect_to_url(
    short_code: str,
    request: Request,
    service: ResolutionService = Depends(get_resolution_service)
) -> RedirectResponse:
    """
    Redirect to the original URL for a given short code.

    The click is counted in a background task after the response is sent.

    Raises:
        HTTPException 404: If the short code is malformed or not found
        HTTPException 429: If rate limit exceeded
    """
    try:
        original_url = await service.get_redirect_url(short_code)
    except ShortCodeNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )

    return RedirectResponse(
        url=original_url,
        status_code=status.HTTP_302_FOUND
    )
