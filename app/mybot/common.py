# -*- coding: utf-8 -*-
"""
@Time    : 2025/7/9 00:47
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : Helpers shared by the Telegram handlers
"""
from loguru import logger
from telegram import Message, Update
from telegram.constants import ChatType
from telegram.error import Forbidden
from telegram.ext import ContextTypes

from models import InboundMessage
from triggers.auto_translation.router import TranslationRouter

ROUTER_KEY = "translation_router"

FILE_SHARE_SUBTYPE = "file_share"
EDITED_SUBTYPE = "message_changed"
SERVICE_SUBTYPE = "service"


def get_router(context: ContextTypes.DEFAULT_TYPE) -> TranslationRouter:
    return context.bot_data[ROUTER_KEY]


def _message_subtype(update: Update, message: Message) -> str | None:
    if update.edited_message or update.edited_channel_post:
        return EDITED_SUBTYPE
    if message.text:
        return None
    if message.caption and message.effective_attachment:
        return FILE_SHARE_SUBTYPE
    # Joins, pins, topic changes and other service messages carry no text
    return SERVICE_SUBTYPE


def to_inbound_message(update: Update) -> InboundMessage | None:
    """Translate a Telegram update into the platform-neutral message model"""
    message = update.effective_message
    chat = update.effective_chat
    if not message or not chat:
        return None

    sender = message.from_user
    sender_chat = message.sender_chat
    if sender:
        sender_id = str(sender.id)
        sender_name = sender.full_name or sender.username
        bot_id = str(sender.id) if sender.is_bot else None
    elif sender_chat:
        # Anonymous admins and linked channels post as a chat
        sender_id = str(sender_chat.id)
        sender_name = sender_chat.title or sender_chat.username
        bot_id = None
    else:
        return None

    if message.via_bot:
        bot_id = str(message.via_bot.id)

    return InboundMessage(
        text=message.text or message.caption,
        channel_id=str(chat.id),
        sender_id=sender_id,
        thread_timestamp=str(message.message_id),
        subtype=_message_subtype(update, message),
        bot_id=bot_id,
        sender_name=sender_name,
    )


async def reply_privately(
    update: Update, context: ContextTypes.DEFAULT_TYPE, text: str
) -> None:
    """Answer the invoking user only, falling back to a reply when a DM is impossible"""
    chat = update.effective_chat
    user = update.effective_user
    message = update.effective_message

    if chat and user and chat.type != ChatType.PRIVATE:
        try:
            await context.bot.send_message(chat_id=user.id, text=text)
            return
        except Forbidden as e:
            logger.debug(f"Cannot DM user {user.id}, replying in chat instead: {e}")

    if message:
        await message.reply_text(text)
    elif chat:
        await context.bot.send_message(chat_id=chat.id, text=text)
