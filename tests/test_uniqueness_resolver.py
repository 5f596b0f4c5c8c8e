"""Tests for bounded-retry short code allocation."""

import logging

import pytest

from shortlink.core.exceptions import CollisionExhaustedError, DatabaseError
from shortlink.db.models import ShortLink
from shortlink.services.uniqueness_resolver import UniquenessResolver

from helpers import SequenceGenerator


def build(short_code: str) -> ShortLink:
    return ShortLink(original_url="https://example.com", short_code=short_code)


class TestAllocate:

    @pytest.mark.asyncio
    async def test_first_candidate_free(self, store):
        generator = SequenceGenerator("abc123")
        resolver = UniquenessResolver(store, generator)

        assert await resolver.allocate() == "abc123"
        assert generator.calls == 1

    @pytest.mark.asyncio
    async def test_retries_once_on_collision(self, store, caplog):
        store.seed("dup1")
        generator = SequenceGenerator("dup1", "dup2")
        resolver = UniquenessResolver(store, generator)

        with caplog.at_level(logging.WARNING, logger="shortlink.services.uniqueness_resolver"):
            assert await resolver.allocate() == "dup2"

        assert generator.calls == 2
        assert "dup1" in caplog.text

    @pytest.mark.asyncio
    async def test_exhaustion(self, store):
        store.seed("fixed1")
        generator = SequenceGenerator("fixed1")
        resolver = UniquenessResolver(store, generator, max_attempts=5)

        with pytest.raises(CollisionExhaustedError) as exc_info:
            await resolver.allocate()

        assert exc_info.value.attempts == 5
        assert generator.calls == 5

    @pytest.mark.asyncio
    async def test_soft_deleted_codes_stay_reserved(self, store):
        store.seed("gone01", deleted=True)
        resolver = UniquenessResolver(store, SequenceGenerator("gone01", "new001"))

        assert await resolver.allocate() == "new001"

    def test_rejects_non_positive_attempts(self, store):
        with pytest.raises(ValueError):
            UniquenessResolver(store, SequenceGenerator("a"), max_attempts=0)


class TestAllocateAndInsert:

    @pytest.mark.asyncio
    async def test_inserts_built_link(self, store):
        resolver = UniquenessResolver(store, SequenceGenerator("abc123"))

        link = await resolver.allocate_and_insert(build)

        assert link.short_code == "abc123"
        assert store.live_codes() == ["abc123"]

    @pytest.mark.asyncio
    async def test_insert_race_reenters_loop(self, store):
        # race01 passes the existence check but loses the insert to a concurrent writer
        store.racing_codes.add("race01")
        generator = SequenceGenerator("race01", "ok0001")
        resolver = UniquenessResolver(store, generator)

        link = await resolver.allocate_and_insert(build)

        assert link.short_code == "ok0001"
        assert store.insert_calls == 2
        assert store.live_codes() == ["ok0001"]

    @pytest.mark.asyncio
    async def test_insert_races_count_towards_bound(self, store):
        store.racing_codes.add("race01")
        generator = SequenceGenerator("race01")
        resolver = UniquenessResolver(store, generator, max_attempts=3)

        with pytest.raises(CollisionExhaustedError):
            await resolver.allocate_and_insert(build)

        assert store.insert_calls == 3
        assert store.links == {}

    @pytest.mark.asyncio
    async def test_mixed_collisions(self, store):
        store.seed("seen01")
        store.racing_codes.add("race01")
        generator = SequenceGenerator("seen01", "race01", "free01")
        resolver = UniquenessResolver(store, generator, max_attempts=3)

        link = await resolver.allocate_and_insert(build)

        assert link.short_code == "free01"
        assert store.insert_calls == 2

    @pytest.mark.asyncio
    async def test_other_storage_faults_propagate(self, store):
        store.insert_error = DatabaseError("disk full")
        generator = SequenceGenerator("abc123", "def456")
        resolver = UniquenessResolver(store, generator)

        with pytest.raises(DatabaseError) as exc_info:
            await resolver.allocate_and_insert(build)

        assert not isinstance(exc_info.value, CollisionExhaustedError)
        assert "disk full" in str(exc_info.value)
        assert generator.calls == 1


class TestReservedCodes:

    @pytest.mark.asyncio
    async def test_route_names_are_skipped(self, store):
        generator = SequenceGenerator("health", "docs", "abc123")
        resolver = UniquenessResolver(store, generator)

        link = await resolver.allocate_and_insert(build)

        assert link.short_code == "abc123"
        assert generator.calls == 3
        assert store.lookups == ["abc123"]

    @pytest.mark.asyncio
    async def test_only_reserved_candidates_exhaust(self, store):
        resolver = UniquenessResolver(store, SequenceGenerator("redoc"), max_attempts=3)

        with pytest.raises(CollisionExhaustedError):
            await resolver.allocate()
        assert store.insert_calls == 0

    @pytest.mark.asyncio
    async def test_custom_reserved_set(self, store):
        resolver = UniquenessResolver(store, SequenceGenerator("admin1", "abc123"), reserved={"admin1"})

        assert await resolver.allocate() == "abc123"
