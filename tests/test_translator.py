# -*- coding: utf-8 -*-
"""
Tests for the translation providers
"""
import json
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from translator import GoogleTranslateClient, LangdetectTranslationProvider
from translator.exceptions import TranslationProviderError
from translator.language_detector import clean_text_for_detection


def make_client(handler) -> GoogleTranslateClient:
    return GoogleTranslateClient(
        api_key="test-key",
        base_url="https://translation.example.com/language/translate",
        transport=httpx.MockTransport(handler),
    )


class TestGoogleTranslateClient:
    @pytest.mark.asyncio
    async def test_detect(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(
                200,
                json={"data": {"detections": [[{"language": "tr", "confidence": 0.98}]]}},
            )

        client = make_client(handler)
        try:
            assert await client.detect("Merhaba dünya") == "tr"
        finally:
            await client.aclose()

        request = requests[0]
        assert request.url.path == "/language/translate/v2/detect"
        assert request.url.params["key"] == "test-key"
        assert json.loads(request.content) == {"q": "Merhaba dünya"}

    @pytest.mark.asyncio
    async def test_translate(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(
                200, json={"data": {"translations": [{"translatedText": "Hello world"}]}}
            )

        client = make_client(handler)
        try:
            assert await client.translate("Merhaba dünya", "en") == "Hello world"
        finally:
            await client.aclose()

        assert requests[0].url.path == "/language/translate/v2"
        assert json.loads(requests[0].content) == {
            "q": "Merhaba dünya",
            "target": "en",
            "format": "text",
        }

    @pytest.mark.asyncio
    async def test_source_language_is_sent_when_known(self):
        payloads = []

        def handler(request: httpx.Request) -> httpx.Response:
            payloads.append(json.loads(request.content))
            return httpx.Response(
                200, json={"data": {"translations": [{"translatedText": "Hola"}]}}
            )

        client = make_client(handler)
        try:
            await client.translate("Hello", "es", source_language="en")
        finally:
            await client.aclose()

        assert payloads[0]["source"] == "en"

    @pytest.mark.asyncio
    async def test_http_error(self):
        client = make_client(lambda request: httpx.Response(403, text="API key not valid"))
        try:
            with pytest.raises(TranslationProviderError) as exc_info:
                await client.translate("Merhaba", "en")
        finally:
            await client.aclose()

        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    async def test_unexpected_payload(self):
        client = make_client(lambda request: httpx.Response(200, json={"data": {}}))
        try:
            with pytest.raises(TranslationProviderError):
                await client.detect("Merhaba")
        finally:
            await client.aclose()

    @pytest.mark.asyncio
    async def test_network_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(handler)
        try:
            with pytest.raises(TranslationProviderError):
                await client.detect("Merhaba")
        finally:
            await client.aclose()


class TestLangdetectTranslationProvider:
    @pytest.fixture
    def remote(self):
        remote = AsyncMock()
        remote.detect.return_value = "tr"
        remote.translate.return_value = "Hello world"
        return remote

    @pytest.mark.asyncio
    async def test_local_detection(self, remote):
        provider = LangdetectTranslationProvider(remote)

        with patch("translator.language_detector.detect_language_locally", return_value="de"):
            assert await provider.detect("Guten Morgen zusammen") == "de"

        remote.detect.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_inconclusive_detection_falls_back_to_remote(self, remote):
        provider = LangdetectTranslationProvider(remote)

        with patch("translator.language_detector.detect_language_locally", return_value=None):
            assert await provider.detect("ok") == "tr"

        remote.detect.assert_awaited_once_with("ok")

    @pytest.mark.asyncio
    async def test_translate_is_delegated(self, remote):
        provider = LangdetectTranslationProvider(remote)

        assert await provider.translate("Merhaba", "en") == "Hello world"
        remote.translate.assert_awaited_once_with("Merhaba", "en", None)


def test_clean_text_for_detection():
    text = "Check https://example.com @alice #news :tada:  mail me at a@b.co  please"

    assert clean_text_for_detection(text) == "Check mail me at please"
