# -*- coding: utf-8 -*-
"""
@Time    : 2025/7/12 10:00
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : Routes every chat message through the auto-translation router.
"""
from loguru import logger
from telegram import Update
from telegram.ext import ContextTypes

from mybot.common import get_router, to_inbound_message
from mybot.task_manager import non_blocking_handler


async def route_message(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    inbound = to_inbound_message(update)
    if inbound is None:
        return

    logger.debug(
        f"Message received: channel={inbound.channel_id} sender={inbound.sender_id} "
        f"subtype={inbound.subtype} bot_id={inbound.bot_id}"
    )
    await get_router(context).handle_message(inbound)


@non_blocking_handler("handle_message")
async def handle_message(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await route_message(update, context)
