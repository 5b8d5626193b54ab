# -*- coding: utf-8 -*-
"""
@Time    : 2025/7/14 00:45
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : 自动翻译功能的数据库模型
"""

from datetime import datetime, UTC

from sqlalchemy import Column, String, DateTime, Boolean, JSON
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ChannelSettingsRecord(Base):
    __tablename__ = "auto_translation_channels"

    channel_id = Column(String, primary_key=True, index=True)
    enabled = Column(Boolean, default=True, nullable=False)
    active_languages = Column(String, default="en,tr", nullable=False)  # 逗号分隔的语言代码
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    def __repr__(self):
        return (
            f"<ChannelSettingsRecord(channel_id={self.channel_id}, enabled={self.enabled}, "
            f"active_languages='{self.active_languages}')>"
        )


class UserSettingsRecord(Base):
    __tablename__ = "auto_translation_users"

    user_id = Column(String, primary_key=True, index=True)
    enabled = Column(Boolean, default=False, nullable=False)
    target_language = Column(String, nullable=False)
    channels = Column(JSON, nullable=True)  # channel id -> {enabled, targetLanguage}
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    def __repr__(self):
        return (
            f"<UserSettingsRecord(user_id={self.user_id}, enabled={self.enabled}, "
            f"target_language='{self.target_language}')>"
        )
