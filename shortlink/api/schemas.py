"""
API Request and Response Schemas

This module defines all Pydantic models for API requests and responses.
Each operation has its own response model, built explicitly from service
results rather than by filtering entity fields.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from shortlink.db.models import ShortLink


class ShortenRequest(BaseModel):
    """Request model for link creation."""
    original_url: str = Field(..., min_length=1, description="The long URL to shorten")


class UpdateLinkRequest(BaseModel):
    """Request model for changing an owned link's destination."""
    original_url: str = Field(..., min_length=1, description="The new destination URL")


class ShortLinkResponse(BaseModel):
    """Response model for link creation."""
    id: str = Field(..., description="Link identifier")
    original_url: str = Field(..., description="The original long URL")
    short_code: str = Field(..., description="The generated short code")
    short_url: str = Field(..., description="The complete short URL")
    click_count: int
    owner_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class OwnedLinkResponse(BaseModel):
    """A link as shown to its owner."""
    id: str
    original_url: str
    short_code: str
    short_url: str
    click_count: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_link(cls, link: ShortLink, short_url: str) -> "OwnedLinkResponse":
        return cls(
            id=link.id,
            original_url=link.original_url,
            short_code=link.short_code,
            short_url=short_url,
            click_count=link.click_count,
            created_at=link.created_at,
            updated_at=link.updated_at,
        )


class OwnedLinksResponse(BaseModel):
    """Response model for listing an owner's links."""
    links: list[OwnedLinkResponse]
