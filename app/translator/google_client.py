# -*- coding: utf-8 -*-
"""
@Time    : 2025/7/7 05:40
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : Google Cloud Translation (v2 REST) client
"""
from typing import Any, Dict

import httpx
from httpx import AsyncClient
from loguru import logger

from settings import settings
from translator.exceptions import TranslationProviderError


class GoogleTranslateClient:
    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        api_key = api_key if api_key is not None else settings.TRANSLATE_API_KEY.get_secret_value()
        base_url = base_url or settings.TRANSLATE_API_BASE_URL
        self._client = AsyncClient(
            base_url=base_url,
            params={"key": api_key},
            timeout=timeout or settings.HTTP_REQUEST_TIMEOUT,
            transport=transport,
        )

    async def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = await self._client.post(path, json=payload)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as err:
            status_code = err.response.status_code
            logger.error(f"Translation API returned {status_code}: {err.response.text[:200]}")
            raise TranslationProviderError(
                f"Translation API error {status_code}", status_code=status_code
            ) from err
        except (httpx.HTTPError, ValueError) as err:
            logger.error(f"Translation API request failed: {err}")
            raise TranslationProviderError(f"Translation API request failed: {err}") from err

    async def detect(self, text: str) -> str:
        """
        检测语言

        Returns:
            The most confident language code, e.g. `tr`
        """
        result = await self._post("/v2/detect", {"q": text})
        try:
            detection = result["data"]["detections"][0][0]
            language = detection["language"]
        except (KeyError, IndexError, TypeError) as err:
            raise TranslationProviderError(f"Unexpected detect response: {result}") from err

        logger.debug(f"Detected language: {language} (text: {text[:30]}...)")
        return language

    async def translate(
        self, text: str, target_language: str, source_language: str | None = None
    ) -> str:
        """
        翻译文本

        Args:
            text: Source text
            target_language: Language code to translate into
            source_language: Only sent when known, otherwise the API auto-detects

        Returns:
            The translated text
        """
        payload = {"q": text, "target": target_language, "format": "text"}
        if source_language:
            payload["source"] = source_language

        logger.debug(
            f"Translation request: text={text[:50]!r} "
            f"target={target_language} source={source_language}"
        )
        result = await self._post("/v2", payload)
        try:
            return result["data"]["translations"][0]["translatedText"]
        except (KeyError, IndexError, TypeError) as err:
            raise TranslationProviderError(f"Unexpected translate response: {result}") from err

    async def aclose(self) -> None:
        await self._client.aclose()
