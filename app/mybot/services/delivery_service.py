# -*- coding: utf-8 -*-
"""
@Time    : 2025/7/12 10:00
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : Telegram implementation of the delivery sink.
"""
from telegram import Bot
from telegram.error import BadRequest, Forbidden, TelegramError
from loguru import logger

from models import SenderProfile
from triggers.auto_translation.router import DeliveryError, RecipientUnavailableError

ACTIVE_MEMBER_STATUSES = frozenset({"member", "administrator", "creator", "restricted"})


class TelegramDeliveryService:
    """Delivers translations through the Bot API.

    Telegram has no ephemeral messages, so a private delivery is a direct
    message to the user. The router asks `can_deliver_privately` first so a
    user who left the channel gets nothing.
    """

    def __init__(self, bot: Bot, alternate_bot: Bot | None = None):
        self._bot = bot
        self._alternate_bot = alternate_bot
        self._alternate_ready = False

    async def post_channel_message(
        self, channel_id: str, content: str, thread_timestamp: str | None = None
    ) -> None:
        try:
            await self._bot.send_message(
                chat_id=int(channel_id),
                text=content,
                reply_to_message_id=int(thread_timestamp) if thread_timestamp else None,
                allow_sending_without_reply=True,
            )
        except TelegramError as e:
            raise DeliveryError(f"Failed to post to {channel_id}: {e}") from e

    async def can_deliver_privately(self, channel_id: str, user_id: str) -> bool:
        try:
            member = await self._bot.get_chat_member(chat_id=int(channel_id), user_id=int(user_id))
        except BadRequest as e:
            logger.debug(f"User {user_id} not found in {channel_id}: {e}")
            return False
        except TelegramError as e:
            raise DeliveryError(f"Membership lookup for {user_id} failed: {e}") from e

        return member.status in ACTIVE_MEMBER_STATUSES

    async def post_ephemeral_message(self, channel_id: str, user_id: str, content: str) -> None:
        try:
            await self._bot.send_message(chat_id=int(user_id), text=content)
        except Forbidden as e:
            # The user never started a private chat with the bot
            raise RecipientUnavailableError(f"Cannot message user {user_id}: {e}") from e
        except TelegramError as e:
            raise DeliveryError(f"Failed to message user {user_id}: {e}") from e

    async def post_as_alternate_identity(self, channel_id: str, content: str) -> None:
        if self._alternate_bot is None:
            raise DeliveryError("No alternate posting identity configured")

        try:
            if not self._alternate_ready:
                await self._alternate_bot.initialize()
                self._alternate_ready = True
            await self._alternate_bot.send_message(chat_id=int(channel_id), text=content)
        except TelegramError as e:
            raise DeliveryError(f"Alternate identity failed to post to {channel_id}: {e}") from e

    async def get_sender_profile(self, channel_id: str, user_id: str) -> SenderProfile:
        member = await self._bot.get_chat_member(chat_id=int(channel_id), user_id=int(user_id))
        user = member.user
        display_name = user.full_name or user.username or str(user.id)
        return SenderProfile(display_name=display_name)

    async def is_channel_member(self, channel_id: str) -> bool:
        try:
            member = await self._bot.get_chat_member(chat_id=int(channel_id), user_id=self._bot.id)
        except TelegramError as e:
            logger.debug(f"Bot membership lookup in {channel_id} failed: {e}")
            return False
        return member.status in ACTIVE_MEMBER_STATUSES

    async def shutdown(self) -> None:
        if self._alternate_bot is not None and self._alternate_ready:
            await self._alternate_bot.shutdown()
            self._alternate_ready = False
