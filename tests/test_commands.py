# -*- coding: utf-8 -*-
"""
@Time    : 2025/7/14 02:10
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : Tests for the auto-translation commands and the Telegram message adapter
"""

from unittest.mock import AsyncMock, Mock, patch

import pytest
import pytest_asyncio
from telegram import Chat, Message, Update, User
from telegram.constants import ChatType
from telegram.error import Forbidden

from models import ChannelOverride, ChannelPreference, UserPreference
from mybot.common import ROUTER_KEY, to_inbound_message
from mybot.handlers import (
    auto_translation_command,
    auto_translation_me_command,
    translate_command,
)
from mybot.handlers.message_handler import route_message
from settings import settings
from triggers.auto_translation.node import (
    AUTOTRANSLATE_USAGE,
    NOT_A_MEMBER_MESSAGE,
    TRANSLATE_USAGE,
)

CHAT_ID = -987654
USER_ID = 456789


def make_update(text: str, *, caption: str | None = None) -> Mock:
    update = Mock(spec=Update)

    message = AsyncMock(spec=Message)
    message.message_id = 123
    message.text = text
    message.caption = caption
    message.effective_attachment = None
    message.via_bot = None
    message.sender_chat = None

    user = Mock(spec=User)
    user.id = USER_ID
    user.is_bot = False
    user.username = "umut"
    user.first_name = "Umut"
    user.full_name = "Umut Yilmaz"
    message.from_user = user

    chat = Mock(spec=Chat)
    chat.id = CHAT_ID
    chat.type = ChatType.SUPERGROUP
    message.chat = chat

    update.message = message
    update.effective_message = message
    update.effective_chat = chat
    update.effective_user = user
    update.edited_message = None
    update.edited_channel_post = None
    return update


def private_replies(context) -> list[str]:
    return [
        call.kwargs["text"]
        for call in context.bot.send_message.await_args_list
        if call.kwargs.get("chat_id") == USER_ID
    ]


@pytest_asyncio.fixture
async def mock_context(router):
    context = Mock()
    context.bot = AsyncMock()
    context.args = []
    context.bot_data = {ROUTER_KEY: router}
    return context


class TestAutoTranslationCommand:
    @pytest.mark.asyncio
    async def test_enable_with_language_names(self, mock_context, store, sink):
        mock_context.args = ["on", "english", "Spanish"]

        update = make_update("/autotranslate on english Spanish")

        await auto_translation_command(update, mock_context)

        sink.is_channel_member.assert_awaited_once_with(str(CHAT_ID))
        assert store.get_channel(str(CHAT_ID)).active_languages == ["en", "es"]
        assert private_replies(mock_context) == [
            "✅ Auto-translation enabled for this channel. Active languages: en, es"
        ]

    @pytest.mark.asyncio
    async def test_enable_defaults_to_english_and_turkish(self, mock_context, store):
        mock_context.args = ["on"]

        await auto_translation_command(make_update("/autotranslate on"), mock_context)

        assert store.get_channel(str(CHAT_ID)) == ChannelPreference(
            enabled=True, active_languages=["en", "tr"]
        )

    @pytest.mark.asyncio
    async def test_refuses_when_bot_is_not_a_member(self, mock_context, store, sink):
        sink.is_channel_member.return_value = False
        mock_context.args = ["on", "english"]

        await auto_translation_command(make_update("/autotranslate on english"), mock_context)

        assert store.get_channel(str(CHAT_ID)) is None
        assert private_replies(mock_context) == [NOT_A_MEMBER_MESSAGE]

    @pytest.mark.asyncio
    async def test_disable(self, mock_context, store):
        store.set_channel(str(CHAT_ID), ChannelPreference(active_languages=["en", "tr"]))
        mock_context.args = ["off"]

        await auto_translation_command(make_update("/autotranslate off"), mock_context)

        assert store.get_channel(str(CHAT_ID)) is None
        assert private_replies(mock_context) == ["❌ Auto-translation disabled for this channel"]

    @pytest.mark.asyncio
    async def test_status(self, mock_context, store):
        store.set_channel(str(CHAT_ID), ChannelPreference(active_languages=["en", "es"]))
        mock_context.args = ["status"]

        await auto_translation_command(make_update("/autotranslate status"), mock_context)

        reply = private_replies(mock_context)[0]
        assert "✅ on" in reply
        assert "English (en), Spanish (es)" in reply

    @pytest.mark.asyncio
    async def test_usage(self, mock_context):
        await auto_translation_command(make_update("/autotranslate"), mock_context)

        assert private_replies(mock_context) == [AUTOTRANSLATE_USAGE]

    @pytest.mark.asyncio
    async def test_whitelist(self, mock_context, store):
        mock_context.args = ["on"]

        with patch.object(settings, "whitelist", {12345}):
            await auto_translation_command(make_update("/autotranslate on"), mock_context)

        assert store.get_channel(str(CHAT_ID)) is None
        assert "not allowed" in private_replies(mock_context)[0]

    @pytest.mark.asyncio
    async def test_replies_in_chat_when_dm_is_blocked(self, mock_context):
        mock_context.bot.send_message.side_effect = Forbidden("bot was blocked by the user")
        update = make_update("/autotranslate")

        await auto_translation_command(update, mock_context)

        update.effective_message.reply_text.assert_awaited_once_with(AUTOTRANSLATE_USAGE)


class TestAutoTranslationMeCommand:
    @pytest.mark.asyncio
    async def test_enable(self, mock_context, store):
        mock_context.args = ["on", "spanish"]

        await auto_translation_me_command(make_update("/autotranslate_me on spanish"), mock_context)

        pref = store.get_user(str(USER_ID))
        assert pref.enabled is True
        assert pref.target_language == "es"

    @pytest.mark.asyncio
    async def test_enable_keeps_previous_language(self, mock_context, store):
        store.set_user(str(USER_ID), UserPreference(enabled=False, target_language="ja"))
        mock_context.args = ["on"]

        await auto_translation_me_command(make_update("/autotranslate_me on"), mock_context)

        assert store.get_user(str(USER_ID)).target_language == "ja"

    @pytest.mark.asyncio
    async def test_here_creates_channel_override(self, mock_context, store):
        mock_context.args = ["here", "german"]

        await auto_translation_me_command(
            make_update("/autotranslate_me here german"), mock_context
        )

        pref = store.get_user(str(USER_ID))
        assert pref.enabled is False
        assert pref.channels[str(CHAT_ID)] == ChannelOverride(enabled=True, target_language="de")
        assert store.subscribers_for(str(CHAT_ID)) == [(str(USER_ID), "de")]

    @pytest.mark.asyncio
    async def test_disable_turns_off_overrides(self, mock_context, store):
        store.set_user(
            str(USER_ID),
            UserPreference(
                enabled=True,
                target_language="en",
                channels={str(CHAT_ID): ChannelOverride(target_language="de")},
            ),
        )
        mock_context.args = ["off"]

        await auto_translation_me_command(make_update("/autotranslate_me off"), mock_context)

        assert store.subscribers_for(str(CHAT_ID)) == []
        assert store.get_user(str(USER_ID)).target_language == "en"

    @pytest.mark.asyncio
    async def test_status(self, mock_context, store):
        store.set_user(str(USER_ID), UserPreference(enabled=True, target_language="fr"))
        mock_context.args = ["status"]

        await auto_translation_me_command(make_update("/autotranslate_me status"), mock_context)

        reply = private_replies(mock_context)[0]
        assert "✅ on" in reply
        assert "French (fr)" in reply


class TestTranslateCommand:
    @pytest.mark.asyncio
    async def test_posts_translation_silently(self, mock_context, provider, sink):
        await translate_command(make_update("/translate Merhaba dünya"), mock_context)

        provider.translate.assert_awaited_once_with("Merhaba dünya", "en")
        sink.post_as_alternate_identity.assert_awaited_once_with(str(CHAT_ID), "🌐 Hello world")
        mock_context.bot.send_message.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_keeps_line_breaks(self, mock_context, provider):
        await translate_command(make_update("/translate Merhaba\ndünya"), mock_context)

        provider.translate.assert_awaited_once_with("Merhaba\ndünya", "en")

    @pytest.mark.asyncio
    async def test_missing_text(self, mock_context, provider):
        await translate_command(make_update("/translate"), mock_context)

        provider.detect.assert_not_awaited()
        assert private_replies(mock_context) == [TRANSLATE_USAGE]

    @pytest.mark.asyncio
    async def test_fallback_when_alternate_identity_fails(self, mock_context, sink):
        sink.post_as_alternate_identity.side_effect = RuntimeError("not configured")

        await translate_command(make_update("/translate Merhaba dünya"), mock_context)

        assert private_replies(mock_context) == [
            "⚠️ Could not post to channel. Translation: 🌐 Hello world"
        ]

    @pytest.mark.asyncio
    async def test_already_in_target(self, mock_context, store, provider):
        store.set_channel(str(CHAT_ID), ChannelPreference(active_languages=["tr"]))

        await translate_command(make_update("/translate Merhaba"), mock_context)

        assert private_replies(mock_context) == [
            "✅ Text is already in the target language(s): tr"
        ]


class TestInboundMessage:
    def test_text_message(self):
        inbound = to_inbound_message(make_update("Merhaba dünya"))

        assert inbound.text == "Merhaba dünya"
        assert inbound.channel_id == str(CHAT_ID)
        assert inbound.sender_id == str(USER_ID)
        assert inbound.thread_timestamp == "123"
        assert inbound.sender_name == "Umut Yilmaz"
        assert inbound.subtype is None
        assert inbound.bot_id is None

    def test_bot_sender(self):
        update = make_update("Hello")
        update.effective_message.from_user.is_bot = True

        assert to_inbound_message(update).bot_id == str(USER_ID)

    def test_captioned_attachment_is_a_file_share(self):
        update = make_update(None, caption="Bu fotoğrafa bakın")
        update.effective_message.effective_attachment = Mock()

        inbound = to_inbound_message(update)

        assert inbound.text == "Bu fotoğrafa bakın"
        assert inbound.subtype == "file_share"

    def test_edited_message(self):
        update = make_update("Merhaba")
        update.edited_message = update.effective_message

        assert to_inbound_message(update).subtype == "message_changed"

    def test_message_without_text(self):
        assert to_inbound_message(make_update(None)).subtype == "service"

    def test_anonymous_admin(self):
        update = make_update("Merhaba")
        update.effective_message.from_user = None
        sender_chat = Mock(spec=Chat)
        sender_chat.id = CHAT_ID
        sender_chat.title = "Ekip"
        update.effective_message.sender_chat = sender_chat

        inbound = to_inbound_message(update)

        assert inbound.sender_id == str(CHAT_ID)
        assert inbound.sender_name == "Ekip"

    @pytest.mark.asyncio
    async def test_route_message(self, mock_context, store, sink):
        store.set_channel(str(CHAT_ID), ChannelPreference(active_languages=["en", "tr"]))

        await route_message(make_update("Merhaba dünya"), mock_context)

        sink.post_channel_message.assert_awaited_once_with(
            str(CHAT_ID), "Umut 🌐 Hello world", thread_timestamp="123"
        )
