# -*- coding: utf-8 -*-
"""
@Time    : 2025/7/8 12:34
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : Data models shared by the auto-translation core and the Telegram adapter
"""

from enum import Enum
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ChannelPreference(_CamelModel):
    enabled: bool = Field(default=True)
    active_languages: List[str] = Field(
        default_factory=list,
        alias="activeLanguages",
        description="Ordered language codes, the order defines the detection -> target pairing",
        examples=[["en", "tr"]],
    )


class ChannelOverride(_CamelModel):
    enabled: bool | None = Field(
        default=True, description="Only an explicit `False` makes the global settings win"
    )
    target_language: str = Field(..., alias="targetLanguage")


class UserPreference(_CamelModel):
    enabled: bool = Field(default=False)
    target_language: str = Field(..., alias="targetLanguage", examples=["en"])
    channels: Dict[str, ChannelOverride] | None = Field(
        default=None, description="Per-channel overrides keyed by channel id"
    )


class PreferencesDocument(_CamelModel):
    """Durable shape of the preference store."""

    channel_settings: Dict[str, ChannelPreference] = Field(
        default_factory=dict, alias="channelSettings"
    )
    user_settings: Dict[str, UserPreference] = Field(default_factory=dict, alias="userSettings")


class RecipientScope(str, Enum):
    CHANNEL = "channel"
    """
    Threaded reply visible to everyone in the channel
    """

    USER = "user"
    """
    Private delivery visible only to one subscriber
    """


class TranslationRecipient(BaseModel):
    scope: RecipientScope
    target_language: str
    delivery_target: str = Field(
        ..., description="Channel id for the channel scope, user id for the user scope"
    )


class TranslationRequest(BaseModel):
    source_text: str
    channel_id: str
    sender_id: str
    detected_language: str
    recipients: List[TranslationRecipient] = Field(default_factory=list)

    @property
    def channel_recipient(self) -> TranslationRecipient | None:
        for recipient in self.recipients:
            if recipient.scope == RecipientScope.CHANNEL:
                return recipient
        return None

    @property
    def user_recipients(self) -> List[TranslationRecipient]:
        return [r for r in self.recipients if r.scope == RecipientScope.USER]


class InboundMessage(BaseModel):
    """Platform-neutral view of a chat message event."""

    text: str | None = None
    channel_id: str
    sender_id: str
    thread_timestamp: str | None = Field(
        default=None, description="Identifier the threaded reply is anchored to"
    )
    subtype: str | None = None
    bot_id: str | None = None
    sender_name: str | None = Field(
        default=None, description="Display name carried by the event, used as a fallback"
    )


class SenderProfile(BaseModel):
    display_name: str
