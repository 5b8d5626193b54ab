# -*- coding: utf-8 -*-

from .command_handler import (
    auto_translation_command,
    auto_translation_me_command,
    translate_command,
)
from .message_handler import handle_message

__all__ = [
    "auto_translation_command",
    "auto_translation_me_command",
    "translate_command",
    "handle_message",
]
