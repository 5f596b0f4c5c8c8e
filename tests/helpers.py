"""
Test doubles shared across the test suite.

InMemoryRecordStore implements the RecordStore contract on a dict so the
services can be exercised without a database, and exposes counters for the
side effects tests assert on.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

from sqlalchemy.exc import OperationalError

from shortlink.core.exceptions import (
    ClickAccountingError,
    DatabaseError,
    UniqueConstraintViolation,
)
from shortlink.core.setting import ShortenerConfig
from shortlink.db.interface import RecordStore
from shortlink.db.models import ShortLink, utcnow

BASE_URL = "https://sho.rt"


def make_config(**overrides) -> ShortenerConfig:
    values = {"base_url": BASE_URL}
    values.update(overrides)
    return ShortenerConfig(**values)


class SequenceGenerator:
    """Code source returning the given codes in order, repeating the last one."""

    def __init__(self, *codes: str):
        self.codes = list(codes)
        self.calls = 0

    def __call__(self) -> str:
        code = self.codes[min(self.calls, len(self.codes) - 1)]
        self.calls += 1
        return code


class InMemoryRecordStore(RecordStore):

    def __init__(self, yield_on_lookup: bool = False):
        self.links: dict[str, ShortLink] = {}
        self.lookups: list[str] = []
        self.insert_calls = 0
        self.save_calls = 0
        self.increment_calls: list[str] = []
        # Codes whose insert fails as if a concurrent writer got there first
        self.racing_codes: set[str] = set()
        self.insert_error: Optional[Exception] = None
        self.fail_increments = False
        self.yield_on_lookup = yield_on_lookup

    def seed(
        self,
        short_code: str,
        original_url: str = "https://example.com",
        owner_id: Optional[str] = None,
        deleted: bool = False,
        age_seconds: int = 0,
    ) -> ShortLink:
        created = utcnow() - timedelta(seconds=age_seconds)
        link = ShortLink(
            original_url=original_url,
            short_code=short_code,
            owner_id=owner_id,
            created_at=created,
            updated_at=created,
            deleted_at=utcnow() if deleted else None,
        )
        self.links[link.id] = link
        return link

    def live_codes(self) -> list[str]:
        return [link.short_code for link in self.links.values() if link.deleted_at is None]

    async def find_by_code(self, short_code: str, include_deleted: bool = False) -> Optional[ShortLink]:
        self.lookups.append(short_code)
        if self.yield_on_lookup:
            await asyncio.sleep(0)
        for link in self.links.values():
            if link.short_code == short_code and (include_deleted or link.deleted_at is None):
                return link
        return None

    async def insert(self, link: ShortLink) -> ShortLink:
        self.insert_calls += 1
        if self.insert_error is not None:
            raise self.insert_error
        taken = any(existing.short_code == link.short_code for existing in self.links.values())
        if taken or link.short_code in self.racing_codes:
            raise UniqueConstraintViolation(link.short_code)
        self.links[link.id] = link
        return link

    async def increment_clicks(self, link_id: str) -> None:
        self.increment_calls.append(link_id)
        if self.fail_increments:
            raise ClickAccountingError(link_id)
        link = self.links.get(link_id)
        if link is not None:
            link.click_count += 1

    async def find_by_id_and_owner(self, link_id: str, owner_id: str) -> Optional[ShortLink]:
        link = self.links.get(link_id)
        if link is None or link.owner_id != owner_id or link.deleted_at is not None:
            return None
        return link

    async def list_by_owner(self, owner_id: str) -> list[ShortLink]:
        owned = [
            link for link in self.links.values()
            if link.owner_id == owner_id and link.deleted_at is None
        ]
        return sorted(owned, key=lambda link: link.created_at, reverse=True)

    async def save(self, link: ShortLink) -> ShortLink:
        self.save_calls += 1
        if link.id not in self.links:
            raise DatabaseError(f"link {link.id} does not exist")
        link.updated_at = utcnow()
        return link

    async def soft_delete(self, link_id: str) -> int:
        link = self.links.get(link_id)
        if link is None or link.deleted_at is not None:
            return 0
        link.deleted_at = datetime.now(timezone.utc)
        return 1


class RecordingDispatcher:
    """Click dispatcher that only records link ids."""

    def __init__(self, error: Optional[Exception] = None):
        self.dispatched: list[str] = []
        self.error = error

    def __call__(self, link_id: str) -> None:
        if self.error is not None:
            raise self.error
        self.dispatched.append(link_id)


def codes_of(links: Iterable[ShortLink]) -> list[str]:
    return [link.short_code for link in links]


class FailingCommitSession:
    """Session stand-in whose commit fails the way a lost database would."""

    def __init__(self):
        self.rolled_back = False

    async def commit(self) -> None:
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    async def rollback(self) -> None:
        self.rolled_back = True
