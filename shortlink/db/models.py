"""
Database Models for the Short-Link Service

This module defines the SQLModel database schemas for:
- ShortLink: Stores the mapping between short codes and original URLs
- Account: Owner identities referenced by links (Account Directory)

Design Decisions:
- UUID string primary keys, assigned at creation
- Unique index on short_code covers soft-deleted rows as well, so codes of
  deleted links stay reserved
- click_count denormalized on the link row and incremented in place
- owner_id is a nullable reference; anonymous links carry no owner
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlmodel import Column, Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


class Account(SQLModel, table=True):
    """
    Owner identity.

    Credentials are not stored here: bearer tokens are issued by an external
    identity provider and carry the account id as their subject.
    """
    __tablename__ = "accounts"

    id: str = Field(
        default_factory=new_id,
        sa_column=Column(String(36), primary_key=True)
    )
    email: str = Field(
        sa_column=Column(String(320), nullable=False, unique=True, index=True)
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    deleted_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True)
    )


class ShortLink(SQLModel, table=True):
    """
    Main table storing short code mappings.

    Fields:
    - id: Opaque identifier (uuid4)
    - original_url: Destination as supplied by the caller
    - short_code: Random code, unique across all rows, never reassigned
    - click_count: Incremented by redirects, never decremented
    - owner_id: Owning account, None for anonymous links
    - deleted_at: Non-null once the owner soft-deletes the link

    Indexes:
    - short_code: Unique index for fast lookups (most critical path)
    - owner_id: For listing an owner's links
    """
    __tablename__ = "short_links"

    id: str = Field(
        default_factory=new_id,
        sa_column=Column(String(36), primary_key=True)
    )
    original_url: str = Field(sa_column=Column(Text, nullable=False))
    short_code: str = Field(
        sa_column=Column(String(32), nullable=False, unique=True, index=True),
        max_length=32
    )
    click_count: int = Field(default=0, sa_column=Column(Integer, nullable=False, default=0))
    owner_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(36), ForeignKey("accounts.id"), nullable=True, index=True)
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True)
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    deleted_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True, index=True)
    )
