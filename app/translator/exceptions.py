# -*- coding: utf-8 -*-
"""
Errors raised by translation providers
"""


class TranslationProviderError(Exception):
    """A detect or translate call against the provider failed"""

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
