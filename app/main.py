# -*- coding: utf-8 -*-
"""
@Time    : 2025/7/7 05:40
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    :
"""
import json

from loguru import logger
from telegram import Update, BotCommand
from telegram.ext import Application, CommandHandler, MessageHandler, filters

from mybot.common import ROUTER_KEY
from mybot.handlers import (
    auto_translation_command,
    auto_translation_me_command,
    translate_command,
    handle_message,
)
from mybot.services.delivery_service import TelegramDeliveryService
from mybot.task_manager import wait_for_all_tasks
from settings import settings, LOG_DIR
from translator import create_translation_provider
from triggers.auto_translation import DetectionCache, PreferenceStore, TranslationRouter
from triggers.auto_translation.storage import create_storage
from utils import init_log

init_log(LOG_DIR, level=settings.LOG_LEVEL, timezone=settings.LOG_TIMEZONE)


def build_router(application: Application) -> TranslationRouter:
    store = PreferenceStore(create_storage())
    channel_prefs, _ = store.load()

    for channel_id, pref in channel_prefs.items():
        languages = pref.active_languages or settings.DEFAULT_ACTIVE_LANGUAGES
        logger.info(
            f"  - Channel {channel_id}: {'ON' if pref.enabled else 'OFF'}, "
            f"languages: {', '.join(languages)}"
        )

    sink = TelegramDeliveryService(application.bot, settings.get_alternate_bot())
    cache = DetectionCache(
        ttl=settings.DETECTION_CACHE_TTL, capacity=settings.DETECTION_CACHE_CAPACITY
    )
    return TranslationRouter(
        provider=create_translation_provider(),
        store=store,
        sink=sink,
        cache=cache,
        default_languages=settings.DEFAULT_ACTIVE_LANGUAGES,
    )


async def setup_bot_commands(application: Application):
    """设置机器人的命令菜单"""
    commands = [
        BotCommand("autotranslate", "Auto-translate this channel: on [languages] | off | status"),
        BotCommand("autotranslate_me", "Private translations: on [language] | here | off | status"),
        BotCommand("translate", "Translate a message into the channel's other language"),
    ]

    try:
        await application.bot.set_my_commands(commands)
        logger.success(f"Bot commands registered: {[f'/{cmd.command}' for cmd in commands]}")
    except Exception as e:
        logger.error(f"Failed to register bot commands: {e}")


async def shutdown_services(application: Application):
    await wait_for_all_tasks()

    router: TranslationRouter = application.bot_data[ROUTER_KEY]
    await router.sink.shutdown()
    await router.provider.aclose()


def main() -> None:
    """Start the bot."""
    sp = settings.model_dump(mode="json")
    s = json.dumps(sp, indent=2, ensure_ascii=False)
    logger.success(f"Loading settings: {s}")

    application = settings.get_default_application()
    application.bot_data[ROUTER_KEY] = build_router(application)

    application.post_init = setup_bot_commands
    application.post_shutdown = shutdown_services

    application.add_handler(CommandHandler("autotranslate", auto_translation_command))
    application.add_handler(CommandHandler("autotranslate_me", auto_translation_me_command))
    application.add_handler(CommandHandler("translate", translate_command))

    # Every non-command message goes through the translation router
    application.add_handler(
        MessageHandler((filters.TEXT | filters.CAPTION) & ~filters.COMMAND, handle_message)
    )

    logger.success("⚡️ Translation bot is running!")
    application.run_polling(allowed_updates=Update.ALL_TYPES)


if __name__ == "__main__":
    main()
