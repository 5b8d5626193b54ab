# -*- coding: utf-8 -*-
"""
@Time    : 2025/7/13 13:58
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    :
"""
from .auto_translation import auto_translation_command, auto_translation_me_command
from .translate_command import translate_command

__all__ = ["auto_translation_command", "auto_translation_me_command", "translate_command"]
