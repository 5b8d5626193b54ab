# -*- coding: utf-8 -*-
"""
@Time    : 2025/7/14 00:11
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : 自动翻译功能命令处理器（指令转发层）
"""

from telegram import Update
from telegram.ext import ContextTypes

from mybot.common import get_router, reply_privately
from settings import settings
from triggers.auto_translation.node import (
    AUTOTRANSLATE_ME_USAGE,
    AUTOTRANSLATE_USAGE,
    disable_channel_translation,
    disable_user_translation,
    enable_channel_translation,
    enable_user_translation,
    get_channel_translation_status,
    get_user_translation_status,
    set_user_channel_override,
)


async def auto_translation_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """`/autotranslate on [languages...]`, `/autotranslate off`, `/autotranslate status`"""
    chat_id = update.effective_chat.id
    user = update.effective_user
    args = context.args or []

    # 检查白名单权限
    if settings.whitelist and chat_id not in settings.whitelist:
        await reply_privately(
            update,
            context,
            "⚠️ You are not allowed to configure auto-translation here.\n"
            "This feature is limited to authorized chats.",
        )
        return

    router = get_router(context)
    channel_id = str(chat_id)
    username = user.username or user.first_name or "anonymous"
    user_id = str(user.id)

    command = args[0].lower() if args else ""

    if command == "on":
        result = await enable_channel_translation(router, channel_id, user_id, username, args[1:])
    elif command == "off":
        result = await disable_channel_translation(router, channel_id, user_id, username)
    elif command == "status":
        result = await get_channel_translation_status(router, channel_id)
    else:
        await reply_privately(update, context, AUTOTRANSLATE_USAGE)
        return

    await reply_privately(update, context, result.message)


async def auto_translation_me_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """`/autotranslate_me on [language]`, `here [language]`, `off`, `status`"""
    user = update.effective_user
    args = context.args or []
    store = get_router(context).store
    user_id = str(user.id)

    command = args[0].lower() if args else ""
    language = args[1] if len(args) > 1 else None

    if command == "on":
        result = enable_user_translation(store, user_id, language)
    elif command == "here":
        channel_id = str(update.effective_chat.id)
        result = set_user_channel_override(store, user_id, channel_id, language)
    elif command == "off":
        result = disable_user_translation(store, user_id)
    elif command == "status":
        result = get_user_translation_status(store, user_id)
    else:
        await reply_privately(update, context, AUTOTRANSLATE_ME_USAGE)
        return

    await reply_privately(update, context, result.message)
