# -*- coding: utf-8 -*-
import asyncio
from unittest.mock import Mock

import pytest

from mybot.task_manager import get_active_tasks_count, non_blocking_handler, wait_for_all_tasks


def make_update(chat_id=-100, message_id=7):
    update = Mock()
    update.effective_chat.id = chat_id
    update.effective_message.message_id = message_id
    return update


class TestNonBlockingHandler:
    @pytest.mark.asyncio
    async def test_handler_runs_in_background(self):
        release = asyncio.Event()
        handled = []

        @non_blocking_handler("handle_message")
        async def handler(update, context):
            await release.wait()
            handled.append(update)

        update = make_update()
        task = await handler(update, Mock())

        assert task.get_name() == "handle_message:-100:7"
        assert get_active_tasks_count() == 1
        assert handled == []

        release.set()
        await task

        assert handled == [update]
        assert get_active_tasks_count() == 0

    @pytest.mark.asyncio
    async def test_exceptions_do_not_escape(self):
        @non_blocking_handler("handle_message")
        async def handler(update, context):
            raise RuntimeError("boom")

        task = await handler(make_update(), Mock())
        await task

        assert task.exception() is None

    @pytest.mark.asyncio
    async def test_wait_cancels_stragglers(self):
        @non_blocking_handler("handle_message")
        async def handler(update, context):
            await asyncio.sleep(60)

        task = await handler(make_update(), Mock())

        assert await wait_for_all_tasks(timeout=0.01) is False
        assert task.cancelled()
        assert await wait_for_all_tasks() is True
