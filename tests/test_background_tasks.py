"""Tests for best-effort click accounting."""

import logging

import pytest
from fastapi import BackgroundTasks

from shortlink.db.models import ShortLink
from shortlink.db.record_store import SQLRecordStore
from shortlink.services.background_tasks import (
    background_click_dispatcher,
    increment_click_count_background,
)


async def seed_link(session_maker, short_code="abc123"):
    async with session_maker() as session:
        link = await SQLRecordStore(session).insert(
            ShortLink(original_url="https://example.com", short_code=short_code)
        )
        await session.commit()
        return link


async def click_count(session_maker, short_code="abc123"):
    async with session_maker() as session:
        link = await SQLRecordStore(session).find_by_code(short_code)
        return link.click_count


@pytest.mark.asyncio
async def test_increment_commits(session_maker):
    link = await seed_link(session_maker)

    await increment_click_count_background(link.id, session_maker=session_maker)
    await increment_click_count_background(link.id, session_maker=session_maker)

    assert await click_count(session_maker) == 2


@pytest.mark.asyncio
async def test_unknown_link_is_a_no_op(session_maker):
    await seed_link(session_maker)

    await increment_click_count_background("missing-id", session_maker=session_maker)

    assert await click_count(session_maker) == 0


@pytest.mark.asyncio
async def test_failure_is_logged_not_raised(caplog):
    def broken_session_maker():
        raise RuntimeError("database unavailable")

    with caplog.at_level(logging.ERROR, logger="shortlink.services.background_tasks"):
        await increment_click_count_background("some-id", session_maker=broken_session_maker)

    assert "Failed to increment click count for link some-id" in caplog.text
    assert "database unavailable" in caplog.text


def test_dispatcher_queues_background_task():
    tasks = BackgroundTasks()
    dispatch = background_click_dispatcher(tasks)

    dispatch("link-1")

    assert len(tasks.tasks) == 1
    assert tasks.tasks[0].func is increment_click_count_background
    assert tasks.tasks[0].args == ("link-1",)
