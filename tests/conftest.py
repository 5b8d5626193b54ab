# -*- coding: utf-8 -*-
"""
Shared fixtures for the auto-translation test suites
"""
from typing import Optional
from unittest.mock import AsyncMock

import pytest

from models import InboundMessage, PreferencesDocument, SenderProfile
from triggers.auto_translation.detection_cache import DetectionCache
from triggers.auto_translation.preference_store import PreferenceStore
from triggers.auto_translation.router import TranslationRouter


class MemoryStorage:
    """Keeps the last written document, like a file that never fails"""

    def __init__(self, document: Optional[PreferencesDocument] = None):
        self.document = document
        self.writes = 0

    def read(self) -> Optional[PreferencesDocument]:
        return self.document

    def write(self, document: PreferencesDocument) -> None:
        self.writes += 1
        self.document = document.model_copy(deep=True)


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(storage):
    store = PreferenceStore(storage)
    store.load()
    return store


@pytest.fixture
def provider():
    provider = AsyncMock()
    provider.detect.return_value = "tr"
    provider.translate.return_value = "Hello world"
    return provider


@pytest.fixture
def sink():
    sink = AsyncMock()
    sink.get_sender_profile.return_value = SenderProfile(display_name="Umut")
    sink.is_channel_member.return_value = True
    sink.can_deliver_privately.return_value = True
    return sink


@pytest.fixture
def router(provider, store, sink):
    return TranslationRouter(provider=provider, store=store, sink=sink, cache=DetectionCache())


@pytest.fixture
def make_message():
    def _make(text: str = "Merhaba dünya", **kwargs) -> InboundMessage:
        fields = {"channel_id": "C", "sender_id": "U", "thread_timestamp": "100"}
        fields.update(kwargs)
        return InboundMessage(text=text, **fields)

    return _make
