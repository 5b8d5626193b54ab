# -*- coding: utf-8 -*-
"""
@Time    : 2025/7/14 00:45
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : 自动翻译命令的核心业务逻辑
"""

from typing import Optional, Dict, Any, Sequence

from loguru import logger

from models import ChannelOverride, ChannelPreference, UserPreference
from settings import settings
from triggers.auto_translation.languages import (
    GLOBE,
    format_language_list,
    resolve,
    resolve_many,
)
from triggers.auto_translation.preference_store import PreferenceStore
from triggers.auto_translation.router import (
    DirectTranslationStatus,
    TranslationRouter,
)

AUTOTRANSLATE_USAGE = (
    "Usage: `/autotranslate on [languages...]`, `/autotranslate off` or `/autotranslate status`\n"
    "Examples:\n"
    "• `/autotranslate on` (defaults to English + Turkish)\n"
    "• `/autotranslate on english spanish`\n"
    "• `/autotranslate on turkish french german`"
)

AUTOTRANSLATE_ME_USAGE = (
    "Usage:\n"
    "• `/autotranslate_me on [language]` - translate every channel for you privately\n"
    "• `/autotranslate_me here [language]` - use a different language in this channel\n"
    "• `/autotranslate_me off` - stop private translations\n"
    "• `/autotranslate_me status` - show your settings"
)

TRANSLATE_USAGE = "Usage: `/translate <message>`\nExample: `/translate Hello everyone!`"

NOT_A_MEMBER_MESSAGE = (
    "⚠️ The bot needs to be added to this channel first. "
    "Please invite the bot to the channel before enabling auto-translation."
)


class AutoTranslationResult:
    """自动翻译命令结果"""

    def __init__(self, success: bool, message: str, data: Optional[Dict[str, Any]] = None):
        self.success = success
        self.message = message
        self.data = data or {}


async def enable_channel_translation(
    router: TranslationRouter,
    channel_id: str,
    user_id: str,
    username: str,
    languages: Sequence[str] = (),
) -> AutoTranslationResult:
    """开启频道自动翻译"""
    try:
        is_member = await router.sink.is_channel_member(channel_id)
    except Exception as e:
        logger.warning(f"Membership check for {channel_id} failed: {e}")
        is_member = False

    if not is_member:
        logger.info(f"Bot is not a member of {channel_id}, refusing to enable auto-translation")
        return AutoTranslationResult(success=False, message=NOT_A_MEMBER_MESSAGE)

    active_languages = resolve_many(languages) or list(router.default_languages)
    router.store.set_channel(
        channel_id, ChannelPreference(enabled=True, active_languages=active_languages)
    )

    logger.info(
        f"User {username}({user_id}) enabled auto-translation in {channel_id}: {active_languages}"
    )
    if len(active_languages) < 2:
        logger.warning(f"Channel {channel_id} has a single active language {active_languages}")

    message = (
        f"✅ Auto-translation enabled for this channel. "
        f"Active languages: {', '.join(active_languages)}"
    )
    return AutoTranslationResult(
        success=True, message=message, data={"active_languages": active_languages}
    )


async def disable_channel_translation(
    router: TranslationRouter, channel_id: str, user_id: str, username: str
) -> AutoTranslationResult:
    """关闭频道自动翻译"""
    router.store.delete_channel(channel_id)
    logger.info(f"User {username}({user_id}) disabled auto-translation in {channel_id}")
    return AutoTranslationResult(
        success=True, message="❌ Auto-translation disabled for this channel"
    )


async def get_channel_translation_status(
    router: TranslationRouter, channel_id: str
) -> AutoTranslationResult:
    enabled = router.store.is_channel_enabled(channel_id)
    active_languages = router.active_languages_for(channel_id)
    subscribers = router.store.subscribers_for(channel_id)

    status = "✅ on" if enabled else "🔕 off"
    message = (
        f"🤖 Auto-translation: {status}\n"
        f"• Languages: {format_language_list(active_languages)}\n"
        f"• Private subscribers: {len(subscribers)}"
    )
    return AutoTranslationResult(
        success=True,
        message=message,
        data={"enabled": enabled, "active_languages": active_languages},
    )


async def translate_text(
    router: TranslationRouter, channel_id: str, text: str
) -> AutoTranslationResult:
    """`/translate` 的直接翻译，返回需要私下回复调用者的消息"""
    result = await router.direct_translate(text, channel_id)
    data = {"status": result.status, "target_language": result.target_language}

    if result.status == DirectTranslationStatus.POSTED:
        return AutoTranslationResult(success=True, message="", data=data)
    elif result.status == DirectTranslationStatus.FALLBACK:
        message = f"⚠️ Could not post to channel. Translation: {GLOBE} {result.translated_text}"
        return AutoTranslationResult(success=True, message=message, data=data)
    elif result.status == DirectTranslationStatus.ALREADY_IN_TARGET:
        message = (
            f"✅ Text is already in the target language(s): {', '.join(result.active_languages)}"
        )
        return AutoTranslationResult(success=True, message=message, data=data)
    elif result.status == DirectTranslationStatus.EMPTY:
        return AutoTranslationResult(success=False, message=TRANSLATE_USAGE, data=data)
    elif result.status == DirectTranslationStatus.EMOJI_ONLY:
        return AutoTranslationResult(
            success=False, message="⏭️ Cannot translate emoji-only messages", data=data
        )

    return AutoTranslationResult(
        success=False, message="⚠️ Translation failed. Please try again later.", data=data
    )


def enable_user_translation(
    store: PreferenceStore, user_id: str, language: Optional[str] = None
) -> AutoTranslationResult:
    """开启个人自动翻译"""
    existing = store.get_user(user_id)
    if language:
        target = resolve(language)
    elif existing:
        target = existing.target_language
    else:
        target = resolve(settings.DEFAULT_USER_LANGUAGE)

    channels = None
    if existing and existing.channels:
        channels = {
            channel_id: override.model_copy(update={"enabled": True})
            for channel_id, override in existing.channels.items()
        }

    store.set_user(
        user_id, UserPreference(enabled=True, target_language=target, channels=channels)
    )
    logger.info(f"User {user_id} enabled private auto-translation into {target}")

    message = (
        f"✅ Private auto-translation enabled. "
        f"Messages will be translated into {format_language_list([target])} for you."
    )
    return AutoTranslationResult(success=True, message=message, data={"target_language": target})


def set_user_channel_override(
    store: PreferenceStore, user_id: str, channel_id: str, language: Optional[str] = None
) -> AutoTranslationResult:
    """为单个频道设置个人翻译语言"""
    existing = store.get_user(user_id)
    target = resolve(language) if language else None
    if target is None:
        target = existing.target_language if existing else resolve(settings.DEFAULT_USER_LANGUAGE)

    channels = dict(existing.channels or {}) if existing else {}
    channels[channel_id] = ChannelOverride(enabled=True, target_language=target)

    if existing:
        pref = existing.model_copy(update={"channels": channels})
    else:
        # Only this channel, the global switch stays off
        pref = UserPreference(enabled=False, target_language=target, channels=channels)
    store.set_user(user_id, pref)

    logger.info(f"User {user_id} set private auto-translation in {channel_id} to {target}")
    message = (
        f"✅ In this channel messages will be translated into "
        f"{format_language_list([target])} for you."
    )
    return AutoTranslationResult(
        success=True, message=message, data={"target_language": target, "channel_id": channel_id}
    )


def disable_user_translation(store: PreferenceStore, user_id: str) -> AutoTranslationResult:
    """关闭个人自动翻译，保留记录"""
    existing = store.get_user(user_id)
    if existing is None:
        return AutoTranslationResult(
            success=True, message="ℹ️ Private auto-translation is not enabled."
        )

    channels = None
    if existing.channels:
        channels = {
            channel_id: override.model_copy(update={"enabled": False})
            for channel_id, override in existing.channels.items()
        }
    store.set_user(user_id, existing.model_copy(update={"enabled": False, "channels": channels}))

    logger.info(f"User {user_id} disabled private auto-translation")
    return AutoTranslationResult(success=True, message="🔕 Private auto-translation disabled.")


def get_user_translation_status(store: PreferenceStore, user_id: str) -> AutoTranslationResult:
    pref = store.get_user(user_id)
    if pref is None:
        return AutoTranslationResult(
            success=True,
            message=f"🔕 Private auto-translation is off.\n\n{AUTOTRANSLATE_ME_USAGE}",
            data={"enabled": False},
        )

    status = "✅ on" if pref.enabled else "🔕 off"
    lines = [
        f"🤖 Private auto-translation: {status}",
        f"• Language: {format_language_list([pref.target_language])}",
    ]
    for channel_id, override in (pref.channels or {}).items():
        state = "off" if override.enabled is False else "on"
        lines.append(f"• Channel {channel_id}: {override.target_language} ({state})")

    return AutoTranslationResult(
        success=True,
        message="\n".join(lines),
        data={"enabled": pref.enabled, "target_language": pref.target_language},
    )
