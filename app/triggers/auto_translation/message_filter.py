# -*- coding: utf-8 -*-
"""
@Time    : 2025/7/14 00:15
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : 判断消息是否需要自动翻译
"""

import re

from loguru import logger

from models import InboundMessage
from triggers.auto_translation.languages import GLOBE

LOOP_MARKERS = (GLOBE, ":globe_with_meridians:")

ALLOWED_SUBTYPES = frozenset({"file_share"})

_SHORTCODE_PATTERN = re.compile(r":[a-zA-Z0-9_+-]+:")

_EMOJI_PATTERN = re.compile(
    "["
    "\U0001F600-\U0001F64F"  # Emoticons
    "\U0001F300-\U0001F5FF"  # Misc Symbols and Pictographs
    "\U0001F680-\U0001F6FF"  # Transport
    "\U0001F700-\U0001F77F"  # Alchemical Symbols
    "\U0001F780-\U0001F7FF"  # Geometric Shapes Extended
    "\U0001F800-\U0001F8FF"  # Supplemental Arrows-C
    "\U0001F900-\U0001F9FF"  # Supplemental Symbols and Pictographs
    "\U0001FA00-\U0001FA6F"  # Chess Symbols
    "\U0001FA70-\U0001FAFF"  # Symbols and Pictographs Extended-A
    "\u2600-\u26FF"  # Misc symbols
    "\u2700-\u27BF"  # Dingbats
    "\uFE00-\uFE0F"  # Variation Selectors
    "\U0001F100-\U0001F1FF"  # Enclosed alphanumerics, regional indicators (flags)
    "\u2190-\u21FF"  # Arrows
    "\u2300-\u23FF"  # Misc technical
    "\u2B00-\u2BFF"  # Misc symbols and arrows
    "\u00A9\u00AE\u2122"  # Copyright, registered, trade mark
    "\u200D\u20E3"  # Joiners and keycaps inside emoji sequences
    "]"
)

_FILLER_PATTERN = re.compile(r"[\s.,!?;:]")

_WHITESPACE_PATTERN = re.compile(r"\s+")


def is_emoji_only(text: str | None) -> bool:
    """True when nothing but emoji, shortcodes, whitespace and punctuation is left"""
    if not text or not text.strip():
        return True

    stripped = _SHORTCODE_PATTERN.sub("", text)
    stripped = _EMOJI_PATTERN.sub("", stripped)
    stripped = _FILLER_PATTERN.sub("", stripped)
    return not stripped


def has_loop_marker(text: str | None) -> bool:
    return bool(text) and text.startswith(LOOP_MARKERS)


def normalize_text(text: str) -> str:
    """Lowercase, trim and collapse whitespace for no-op comparisons"""
    return _WHITESPACE_PATTERN.sub(" ", text.lower().strip())


def is_eligible(message: InboundMessage) -> bool:
    if message.bot_id:
        logger.debug(f"[filter] skip: bot message from {message.bot_id}")
        return False

    if message.subtype and message.subtype not in ALLOWED_SUBTYPES:
        logger.debug(f"[filter] skip: subtype {message.subtype}")
        return False

    if has_loop_marker(message.text):
        logger.debug("[filter] skip: already a translation")
        return False

    if is_emoji_only(message.text):
        logger.debug("[filter] skip: emoji-only or empty text")
        return False

    return True
