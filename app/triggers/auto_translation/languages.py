# -*- coding: utf-8 -*-
"""
@Time    : 2025/7/14 00:15
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : 语言代码解析
"""

from typing import Iterable

GLOBE = "🌐"

# 人类可读的语言名称 -> 语言代码
LANGUAGE_CODES = {
    "english": "en",
    "spanish": "es",
    "french": "fr",
    "german": "de",
    "italian": "it",
    "portuguese": "pt",
    "russian": "ru",
    "japanese": "ja",
    "korean": "ko",
    "chinese": "zh",
    "arabic": "ar",
    "turkish": "tr",
}

LANGUAGE_NAMES = {code: name.capitalize() for name, code in LANGUAGE_CODES.items()}

LANGUAGE_FLAGS = {
    "en": "🇺🇸",
    "tr": "🇹🇷",
    "es": "🇪🇸",
    "fr": "🇫🇷",
    "de": "🇩🇪",
    "it": "🇮🇹",
    "pt": "🇵🇹",
    "ru": "🇷🇺",
    "ja": "🇯🇵",
    "ko": "🇰🇷",
    "zh": "🇨🇳",
    "ar": "🇸🇦",
}


def resolve(language: str) -> str:
    """Map a language name to its code.

    Unknown input is passed through, trimmed and lowercased, so callers may hand
    in codes directly and `EN` compares equal to a detected `en`. Nothing is
    rejected here; an invalid code only fails once the translation provider
    sees it.
    """
    key = language.strip().lower()
    return LANGUAGE_CODES.get(key, key)


def resolve_many(languages: Iterable[str]) -> list[str]:
    """Resolve and de-duplicate, keeping the first occurrence's position"""
    resolved = []
    for language in languages:
        if not language.strip():
            continue
        code = resolve(language)
        if code not in resolved:
            resolved.append(code)
    return resolved


def flag_for(code: str) -> str:
    return LANGUAGE_FLAGS.get(code, GLOBE)


def display_name(code: str) -> str:
    return LANGUAGE_NAMES.get(code, code)


def format_language_list(codes: Iterable[str]) -> str:
    return ", ".join(f"{display_name(code)} ({code})" for code in codes)
