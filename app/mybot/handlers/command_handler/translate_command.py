# -*- coding: utf-8 -*-
"""
@Time    : 2025/7/14 00:11
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : /translate 直接翻译命令
"""

from loguru import logger
from telegram import Update
from telegram.ext import ContextTypes

from mybot.common import get_router, reply_privately
from triggers.auto_translation.node import translate_text


async def translate_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """`/translate <text>` posts the translation under the alternate bot identity"""
    message = update.effective_message
    if not message:
        return

    # Keep the original line breaks, context.args is whitespace-split
    parts = (message.text or "").split(maxsplit=1)
    text = parts[1] if len(parts) > 1 else ""
    channel_id = str(update.effective_chat.id)
    logger.debug(f"Translate command received in {channel_id}: {text[:50]}")

    result = await translate_text(get_router(context), channel_id, text)
    if result.message:
        await reply_privately(update, context, result.message)
