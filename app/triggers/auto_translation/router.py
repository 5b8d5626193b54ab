# -*- coding: utf-8 -*-
"""
@Time    : 2025/7/14 00:45
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : 消息翻译路由：决定每条消息需要翻译成哪些语言并分发结果
"""

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, List, Optional, Protocol, Sequence

from loguru import logger

from models import (
    InboundMessage,
    RecipientScope,
    SenderProfile,
    TranslationRecipient,
    TranslationRequest,
)
from translator import TranslationProvider
from triggers.auto_translation.detection_cache import DetectionCache
from triggers.auto_translation.languages import GLOBE, flag_for
from triggers.auto_translation.message_filter import is_eligible, is_emoji_only, normalize_text
from triggers.auto_translation.preference_store import PreferenceStore

DEFAULT_ACTIVE_LANGUAGES = ("en", "tr")

FAILURE_NOTICE = "⚠️ Translation failed. Please try again later."


class DeliveryError(Exception):
    """Posting to the chat platform failed"""


class RecipientUnavailableError(DeliveryError):
    """The recipient cannot be reached privately, e.g. not a member of the channel"""


class DeliverySink(Protocol):
    async def post_channel_message(
        self, channel_id: str, content: str, thread_timestamp: str | None = None
    ) -> None: ...

    async def post_ephemeral_message(self, channel_id: str, user_id: str, content: str) -> None: ...

    async def can_deliver_privately(self, channel_id: str, user_id: str) -> bool: ...

    async def post_as_alternate_identity(self, channel_id: str, content: str) -> None: ...

    async def get_sender_profile(self, channel_id: str, user_id: str) -> SenderProfile: ...

    async def is_channel_member(self, channel_id: str) -> bool: ...


class DeliveryStatus(str, Enum):
    DELIVERED = "delivered"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class RoutingOutcome:
    detected_language: Optional[str] = None
    abandoned: bool = False
    statuses: List[DeliveryStatus] = field(default_factory=list)

    @property
    def delivered(self) -> int:
        return self.statuses.count(DeliveryStatus.DELIVERED)

    @property
    def skipped(self) -> int:
        return self.statuses.count(DeliveryStatus.SKIPPED)

    @property
    def failed(self) -> int:
        return self.statuses.count(DeliveryStatus.FAILED)


class DirectTranslationStatus(str, Enum):
    POSTED = "posted"
    FALLBACK = "fallback"
    ALREADY_IN_TARGET = "already_in_target"
    EMPTY = "empty"
    EMOJI_ONLY = "emoji_only"
    FAILED = "failed"


@dataclass
class DirectTranslation:
    status: DirectTranslationStatus
    active_languages: List[str] = field(default_factory=list)
    target_language: Optional[str] = None
    translated_text: Optional[str] = None


def channel_target(active_languages: Sequence[str], detected_language: str) -> Optional[str]:
    """First active language that differs from the detected one"""
    for language in active_languages:
        if language != detected_language:
            return language
    return None


def is_noop_translation(source_text: str, translated_text: str) -> bool:
    return normalize_text(translated_text) == normalize_text(source_text)


class TranslationRouter:
    def __init__(
        self,
        provider: TranslationProvider,
        store: PreferenceStore,
        sink: DeliverySink,
        cache: Optional[DetectionCache] = None,
        default_languages: Sequence[str] = DEFAULT_ACTIVE_LANGUAGES,
    ):
        self.provider = provider
        self.store = store
        self.sink = sink
        self.cache = cache if cache is not None else DetectionCache()
        self.default_languages = list(default_languages)

    def active_languages_for(self, channel_id: str) -> List[str]:
        pref = self.store.get_channel(channel_id)
        if pref and pref.active_languages:
            return list(pref.active_languages)
        return list(self.default_languages)

    async def detect_language(self, text: str) -> str:
        if cached := self.cache.get(text):
            logger.debug(f"Detection cache hit: {cached}")
            return cached

        language = await self.provider.detect(text)
        self.cache.put(text, language)
        return language

    def plan(self, message: InboundMessage, detected_language: str) -> TranslationRequest:
        """Compute every translation the message needs, without calling the provider"""
        recipients = []

        if self.store.is_channel_enabled(message.channel_id):
            active_languages = self.active_languages_for(message.channel_id)
            target = channel_target(active_languages, detected_language)
            if target:
                recipients.append(
                    TranslationRecipient(
                        scope=RecipientScope.CHANNEL,
                        target_language=target,
                        delivery_target=message.channel_id,
                    )
                )
            else:
                logger.debug(
                    f"Message already in all active languages {active_languages}, "
                    f"no channel translation"
                )

        for user_id, target in self.store.subscribers_for(
            message.channel_id, exclude=message.sender_id
        ):
            if target == detected_language:
                continue
            recipients.append(
                TranslationRecipient(
                    scope=RecipientScope.USER, target_language=target, delivery_target=user_id
                )
            )

        return TranslationRequest(
            source_text=message.text or "",
            channel_id=message.channel_id,
            sender_id=message.sender_id,
            detected_language=detected_language,
            recipients=recipients,
        )

    async def handle_message(self, message: InboundMessage) -> RoutingOutcome:
        outcome = RoutingOutcome()
        if not is_eligible(message):
            return outcome

        channel_active = self.store.is_channel_enabled(message.channel_id)
        has_subscribers = bool(
            self.store.subscribers_for(message.channel_id, exclude=message.sender_id)
        )
        if not channel_active and not has_subscribers:
            logger.debug(f"Translation not enabled for channel {message.channel_id}")
            return outcome

        try:
            detected_language = await self.detect_language(message.text)
        except Exception as e:
            logger.error(f"Language detection failed, abandoning message: {e}")
            outcome.abandoned = True
            if channel_active:
                await self._post_failure_notice(message)
            return outcome

        outcome.detected_language = detected_language
        logger.debug(f"Detected language: {detected_language}")

        request = self.plan(message, detected_language)
        if not request.recipients:
            return outcome

        get_profile = self._profile_loader(message)
        jobs: List[Awaitable[DeliveryStatus]] = []
        if channel_recipient := request.channel_recipient:
            jobs.append(self._deliver_to_channel(message, channel_recipient, get_profile))
        for recipient in request.user_recipients:
            jobs.append(self._deliver_to_user(message, recipient, get_profile))

        # Siblings keep running whatever happens to one of them
        results = await asyncio.gather(*jobs, return_exceptions=True)
        for result in results:
            if isinstance(result, BaseException):
                logger.error(f"Translation dispatch failed: {result}")
                outcome.statuses.append(DeliveryStatus.FAILED)
            else:
                outcome.statuses.append(result)

        logger.info(
            f"Handled message in {message.channel_id}: detected={detected_language} "
            f"delivered={outcome.delivered} skipped={outcome.skipped} failed={outcome.failed}"
        )
        return outcome

    def _profile_loader(self, message: InboundMessage) -> Callable[[], Awaitable[SenderProfile]]:
        """Fetch the sender profile at most once per message, shared by all deliveries"""
        task: Optional[asyncio.Task] = None

        async def fetch() -> SenderProfile:
            try:
                return await self.sink.get_sender_profile(message.channel_id, message.sender_id)
            except Exception as e:
                logger.warning(f"Failed to fetch profile of {message.sender_id}: {e}")
                return SenderProfile(display_name=message.sender_name or message.sender_id)

        async def get_profile() -> SenderProfile:
            nonlocal task
            if task is None:
                task = asyncio.create_task(fetch())
            return await task

        return get_profile

    async def _deliver_to_channel(
        self,
        message: InboundMessage,
        recipient: TranslationRecipient,
        get_profile: Callable[[], Awaitable[SenderProfile]],
    ) -> DeliveryStatus:
        try:
            translated = await self.provider.translate(message.text, recipient.target_language)
            if is_noop_translation(message.text, translated):
                logger.debug("Skipping identical channel translation")
                return DeliveryStatus.SKIPPED

            profile = await get_profile()
            await self.sink.post_channel_message(
                message.channel_id,
                f"{profile.display_name} {GLOBE} {translated}",
                thread_timestamp=message.thread_timestamp,
            )
            return DeliveryStatus.DELIVERED
        except Exception as e:
            logger.error(f"Channel translation to {recipient.target_language} failed: {e}")
            await self._post_failure_notice(message)
            return DeliveryStatus.FAILED

    async def _deliver_to_user(
        self,
        message: InboundMessage,
        recipient: TranslationRecipient,
        get_profile: Callable[[], Awaitable[SenderProfile]],
    ) -> DeliveryStatus:
        user_id = recipient.delivery_target
        try:
            # Checked before translating, an unreachable subscriber costs no provider call
            if not await self.sink.can_deliver_privately(message.channel_id, user_id):
                logger.debug(f"User {user_id} is not reachable in {message.channel_id}")
                return DeliveryStatus.SKIPPED

            translated = await self.provider.translate(message.text, recipient.target_language)
            if is_noop_translation(message.text, translated):
                logger.debug(f"Skipping identical translation for user {user_id}")
                return DeliveryStatus.SKIPPED

            profile = await get_profile()
            flag = flag_for(recipient.target_language)
            await self.sink.post_ephemeral_message(
                message.channel_id, user_id, f"{flag} {profile.display_name}: {translated}"
            )
            return DeliveryStatus.DELIVERED
        except RecipientUnavailableError as e:
            logger.debug(f"User {user_id} is not reachable in {message.channel_id}: {e}")
            return DeliveryStatus.SKIPPED
        except Exception as e:
            logger.error(f"Translation for user {user_id} failed: {e}")
            return DeliveryStatus.FAILED

    async def _post_failure_notice(self, message: InboundMessage) -> None:
        try:
            await self.sink.post_channel_message(
                message.channel_id, FAILURE_NOTICE, thread_timestamp=message.thread_timestamp
            )
        except Exception as e:
            logger.error(f"Failed to post failure notice to {message.channel_id}: {e}")

    async def direct_translate(self, text: str, channel_id: str) -> DirectTranslation:
        """Single-shot translation posted under the alternate identity"""
        active_languages = self.active_languages_for(channel_id)
        result = DirectTranslation(
            status=DirectTranslationStatus.FAILED, active_languages=active_languages
        )

        if not text or not text.strip():
            result.status = DirectTranslationStatus.EMPTY
            return result

        if is_emoji_only(text):
            result.status = DirectTranslationStatus.EMOJI_ONLY
            return result

        try:
            detected_language = await self.detect_language(text)
            target = channel_target(active_languages, detected_language)
            if not target:
                result.status = DirectTranslationStatus.ALREADY_IN_TARGET
                return result

            result.target_language = target
            result.translated_text = await self.provider.translate(text, target)
        except Exception as e:
            logger.error(f"Direct translation failed: {e}")
            return result

        try:
            await self.sink.post_as_alternate_identity(
                channel_id, f"{GLOBE} {result.translated_text}"
            )
            result.status = DirectTranslationStatus.POSTED
        except Exception as e:
            logger.error(f"Failed to post translation to {channel_id}: {e}")
            result.status = DirectTranslationStatus.FALLBACK

        return result
