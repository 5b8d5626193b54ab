# -*- coding: utf-8 -*-
"""
@Time    : 2025/7/7 05:40
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    :
"""
from typing import Protocol, runtime_checkable

from settings import settings
from translator.exceptions import TranslationProviderError
from translator.google_client import GoogleTranslateClient
from translator.language_detector import LangdetectTranslationProvider


@runtime_checkable
class TranslationProvider(Protocol):
    """Black-box remote translation service."""

    async def detect(self, text: str) -> str: ...

    async def translate(
        self, text: str, target_language: str, source_language: str | None = None
    ) -> str: ...


def create_translation_provider() -> TranslationProvider:
    client = GoogleTranslateClient()
    if settings.DETECTION_BACKEND == "langdetect":
        return LangdetectTranslationProvider(client)
    return client


__all__ = [
    "TranslationProvider",
    "TranslationProviderError",
    "GoogleTranslateClient",
    "LangdetectTranslationProvider",
    "create_translation_provider",
]
