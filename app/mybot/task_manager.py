# -*- coding: utf-8 -*-
"""
Task registry so every inbound message is handled in its own background task
"""
import asyncio
import functools
from typing import Set, Callable

from loguru import logger

# Tasks are referenced here until done, the event loop only keeps weak references
_active_tasks: Set[asyncio.Task] = set()


def get_active_tasks_count() -> int:
    return len(_active_tasks)


def _task_name(handler_name: str, update) -> str:
    chat = getattr(update, "effective_chat", None)
    message = getattr(update, "effective_message", None)
    chat_id = chat.id if chat else "-"
    message_id = message.message_id if message else "-"
    return f"{handler_name}:{chat_id}:{message_id}"


def non_blocking_handler(handler_name: str = "unknown"):
    """
    Decorator to run a bot handler as a background task.

    The update is acknowledged immediately, so a slow translation provider only
    stalls the message it is working on.

    Usage:
        @non_blocking_handler("handle_message")
        async def handle_message(update, context):
            pass
    """

    def decorator(handler_func: Callable):
        @functools.wraps(handler_func)
        async def wrapper(update, context):
            name = _task_name(handler_name, update)
            task = asyncio.create_task(_run_handler(handler_func, update, context, name), name=name)
            _active_tasks.add(task)
            task.add_done_callback(_active_tasks.discard)

            logger.debug(f"Started {name} (active tasks: {len(_active_tasks)})")
            return task

        return wrapper

    return decorator


async def _run_handler(handler_func: Callable, update, context, name: str):
    try:
        await handler_func(update, context)
        logger.debug(f"Completed {name}")
    except asyncio.CancelledError:
        logger.warning(f"Cancelled {name}")
        raise
    except Exception as e:
        logger.exception(f"Error in {name}: {e}")


async def wait_for_all_tasks(timeout: float = 30.0) -> bool:
    """
    Wait for in-flight messages to finish, cancelling whatever is left after `timeout`.

    Returns:
        True if all tasks completed, False if some had to be cancelled
    """
    if not _active_tasks:
        return True

    pending = set(_active_tasks)
    logger.info(f"Waiting for {len(pending)} active tasks to complete...")

    _, still_running = await asyncio.wait(pending, timeout=timeout)
    if not still_running:
        logger.info("All tasks completed")
        return True

    logger.warning(f"Cancelling {len(still_running)} tasks still running after {timeout}s")
    for task in still_running:
        task.cancel()
    await asyncio.gather(*still_running, return_exceptions=True)
    return False
