# -*- coding: utf-8 -*-
"""
@Time    : 2025/7/14 00:45
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : 自动翻译偏好的数据库存储
"""

from typing import Optional

from loguru import logger
from sqlalchemy import create_engine, delete
from sqlalchemy.orm import sessionmaker, Session

from models import ChannelPreference, ChannelOverride, PreferencesDocument, UserPreference
from .models import Base, ChannelSettingsRecord, UserSettingsRecord


class DatabaseStorage:
    """Stores the preference document in two tables, rewritten in one transaction"""

    def __init__(self, database_url: str):
        self._engine = create_engine(database_url, pool_pre_ping=True)
        self._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self._engine)
        self._initialized = False

    def init_database(self):
        """初始化数据库表"""
        try:
            Base.metadata.create_all(bind=self._engine)
            self._initialized = True
            logger.success("Auto-translation tables initialized")
        except Exception as e:
            logger.error(f"Failed to initialize auto-translation tables: {e}")
            raise

    def get_db_session(self) -> Session:
        if not self._initialized:
            self.init_database()
        return self._session_factory()

    def read(self) -> Optional[PreferencesDocument]:
        session = self.get_db_session()
        try:
            channel_rows = session.query(ChannelSettingsRecord).all()
            user_rows = session.query(UserSettingsRecord).all()
        finally:
            session.close()

        if not channel_rows and not user_rows:
            return None

        channel_settings = {
            row.channel_id: ChannelPreference(
                enabled=row.enabled,
                active_languages=[c for c in row.active_languages.split(",") if c],
            )
            for row in channel_rows
        }
        user_settings = {
            row.user_id: UserPreference(
                enabled=row.enabled,
                target_language=row.target_language,
                channels=(
                    {k: ChannelOverride.model_validate(v) for k, v in row.channels.items()}
                    if row.channels
                    else None
                ),
            )
            for row in user_rows
        }
        return PreferencesDocument(channel_settings=channel_settings, user_settings=user_settings)

    def write(self, document: PreferencesDocument) -> None:
        session = self.get_db_session()
        try:
            session.execute(delete(ChannelSettingsRecord))
            session.execute(delete(UserSettingsRecord))

            for channel_id, pref in document.channel_settings.items():
                session.add(
                    ChannelSettingsRecord(
                        channel_id=channel_id,
                        enabled=pref.enabled,
                        active_languages=",".join(pref.active_languages),
                    )
                )

            for user_id, pref in document.user_settings.items():
                channels = None
                if pref.channels:
                    channels = {
                        k: v.model_dump(mode="json", by_alias=True)
                        for k, v in pref.channels.items()
                    }
                session.add(
                    UserSettingsRecord(
                        user_id=user_id,
                        enabled=pref.enabled,
                        target_language=pref.target_language,
                        channels=channels,
                    )
                )

            session.commit()
            logger.debug(
                f"Saved {len(document.channel_settings)} channel and "
                f"{len(document.user_settings)} user preferences to the database"
            )
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
