# -*- coding: utf-8 -*-
"""
@Time    : 2025/7/14 00:45
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : 自动翻译功能模块
"""

from .detection_cache import DetectionCache
from .message_filter import is_eligible, is_emoji_only, normalize_text
from .node import (
    AutoTranslationResult,
    enable_channel_translation,
    disable_channel_translation,
    get_channel_translation_status,
    translate_text,
    enable_user_translation,
    set_user_channel_override,
    disable_user_translation,
    get_user_translation_status,
)
from .preference_store import PreferenceStore
from .router import (
    DeliveryError,
    DeliverySink,
    RecipientUnavailableError,
    RoutingOutcome,
    TranslationRouter,
)
from .storage import JsonFileStorage, create_storage

__all__ = [
    "DetectionCache",
    "is_eligible",
    "is_emoji_only",
    "normalize_text",
    "AutoTranslationResult",
    "enable_channel_translation",
    "disable_channel_translation",
    "get_channel_translation_status",
    "translate_text",
    "enable_user_translation",
    "set_user_channel_override",
    "disable_user_translation",
    "get_user_translation_status",
    "PreferenceStore",
    "DeliveryError",
    "DeliverySink",
    "RecipientUnavailableError",
    "RoutingOutcome",
    "TranslationRouter",
    "JsonFileStorage",
    "create_storage",
]
