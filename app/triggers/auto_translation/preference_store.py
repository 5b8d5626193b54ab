# -*- coding: utf-8 -*-
"""
@Time    : 2025/7/14 00:45
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : 频道与用户的自动翻译偏好
"""

from typing import Dict, List, Optional, Tuple

from loguru import logger

from models import (
    ChannelOverride,
    ChannelPreference,
    PreferencesDocument,
    UserPreference,
)
from triggers.auto_translation.storage import PreferenceStorage


class PreferenceStore:
    """Owns channel and user preferences and is the only writer of their storage.

    Every mutation is saved immediately. Storage failures are logged and the
    in-memory maps stay authoritative for the running process.
    """

    def __init__(self, storage: PreferenceStorage):
        self._storage = storage
        self._channels: Dict[str, ChannelPreference] = {}
        self._users: Dict[str, UserPreference] = {}

    @property
    def channel_prefs(self) -> Dict[str, ChannelPreference]:
        return self._channels

    @property
    def user_prefs(self) -> Dict[str, UserPreference]:
        return self._users

    def load(self) -> Tuple[Dict[str, ChannelPreference], Dict[str, UserPreference]]:
        try:
            document = self._storage.read()
        except Exception as e:
            logger.error(f"Failed to load preferences, starting empty: {e}")
            document = None

        document = document or PreferencesDocument()
        self._channels = dict(document.channel_settings)
        self._users = dict(document.user_settings)

        logger.info(
            f"Loaded {len(self._channels)} channel and {len(self._users)} user preferences"
        )
        return self._channels, self._users

    def save(self) -> bool:
        document = PreferencesDocument(channel_settings=self._channels, user_settings=self._users)
        try:
            self._storage.write(document)
        except Exception as e:
            logger.error(f"Failed to save preferences: {e}")
            return False

        logger.debug("Preferences saved")
        return True

    def get_channel(self, channel_id: str) -> Optional[ChannelPreference]:
        return self._channels.get(channel_id)

    def set_channel(self, channel_id: str, pref: ChannelPreference) -> None:
        self._channels[channel_id] = pref
        self.save()

    def delete_channel(self, channel_id: str) -> bool:
        removed = self._channels.pop(channel_id, None) is not None
        self.save()
        return removed

    def get_user(self, user_id: str) -> Optional[UserPreference]:
        return self._users.get(user_id)

    def set_user(self, user_id: str, pref: UserPreference) -> None:
        self._users[user_id] = pref
        self.save()

    def is_channel_enabled(self, channel_id: str) -> bool:
        pref = self._channels.get(channel_id)
        return bool(pref and pref.enabled)

    def effective_user_settings(
        self, user_id: str, channel_id: str
    ) -> Optional[UserPreference | ChannelOverride]:
        """The channel override unless it is explicitly disabled, else the global settings"""
        pref = self._users.get(user_id)
        if pref is None:
            return None

        override = (pref.channels or {}).get(channel_id)
        if override is not None and override.enabled is not False:
            return override
        return pref

    def subscribers_for(
        self, channel_id: str, exclude: Optional[str] = None
    ) -> List[Tuple[str, str]]:
        """(user id, target language) of every user with translation on in `channel_id`"""
        subscribers = []
        for user_id in self._users:
            if user_id == exclude:
                continue
            effective = self.effective_user_settings(user_id, channel_id)
            # An override without an explicit flag counts as enabled
            if effective is not None and effective.enabled is not False:
                subscribers.append((user_id, effective.target_language))
        return subscribers
