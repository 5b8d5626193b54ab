# -*- coding: utf-8 -*-
"""
@Time    : 2025/7/14 00:15
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : 本地语言检测模块
"""

import asyncio
import re

from langdetect import DetectorFactory, detect_langs
from langdetect.lang_detect_exception import LangDetectException
from loguru import logger

from translator.exceptions import TranslationProviderError

# 设置随机种子以确保检测结果的一致性
DetectorFactory.seed = 0

# langdetect reports a few codes differently from the translation API
_CODE_ALIASES = {"zh-cn": "zh", "zh-tw": "zh"}


def clean_text_for_detection(text: str) -> str:
    """清理文本以便进行语言检测"""
    if not text:
        return ""

    # 移除 URL
    text = re.sub(r'https?://[^\s]+', '', text)

    # 移除邮箱地址
    text = re.sub(r'\S+@\S+', '', text)

    # 移除用户名提及（@username）和 hashtag
    text = re.sub(r'[@#]\w+', '', text)

    # 移除 :shortcode: 表情
    text = re.sub(r':[a-zA-Z0-9_+-]+:', '', text)

    return re.sub(r'\s+', ' ', text).strip()


def detect_language_locally(text: str, min_confidence: float = 0.6) -> str | None:
    """检测文本的主要语言

    Returns:
        语言代码（如 'tr', 'en'），无法可靠判断时返回 None
    """
    cleaned_text = clean_text_for_detection(text)
    if len(cleaned_text) < 3:
        return None

    try:
        lang_probs = detect_langs(cleaned_text)
    except LangDetectException as e:
        logger.debug(f"langdetect failed: {e}")
        return None

    if not lang_probs or lang_probs[0].prob < min_confidence:
        return None

    top = lang_probs[0]
    language = _CODE_ALIASES.get(top.lang, top.lang)
    logger.debug(f"langdetect: {language} (confidence: {top.prob:.3f}) (text: {text[:30]}...)")
    return language


class LangdetectTranslationProvider:
    """Detects locally with langdetect, translates with the wrapped remote provider.

    Text that is too short or ambiguous for langdetect falls back to the remote
    provider's own detection.
    """

    def __init__(self, remote, min_confidence: float = 0.6):
        self._remote = remote
        self._min_confidence = min_confidence

    async def detect(self, text: str) -> str:
        try:
            language = await asyncio.to_thread(
                detect_language_locally, text, self._min_confidence
            )
        except Exception as err:
            raise TranslationProviderError(f"Local language detection failed: {err}") from err

        if language:
            return language

        logger.debug("Local detection inconclusive, asking the remote provider")
        return await self._remote.detect(text)

    async def translate(
        self, text: str, target_language: str, source_language: str | None = None
    ) -> str:
        return await self._remote.translate(text, target_language, source_language)

    async def aclose(self) -> None:
        await self._remote.aclose()
