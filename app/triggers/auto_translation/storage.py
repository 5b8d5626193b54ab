# -*- coding: utf-8 -*-
"""
Durable storage backends for the preference store
"""
import json
import os
import tempfile
from pathlib import Path
from typing import Optional, Protocol

from loguru import logger

from models import PreferencesDocument
from settings import settings


class PreferenceStorage(Protocol):
    def read(self) -> Optional[PreferencesDocument]:
        """Return the stored document, None when nothing was stored yet"""

    def write(self, document: PreferencesDocument) -> None:
        """Replace the stored document with `document` in one operation"""


class JsonFileStorage:
    """`{"channelSettings": ..., "userSettings": ...}` rewritten wholesale on every save"""

    def __init__(self, path: Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> Optional[PreferencesDocument]:
        if not self._path.exists():
            logger.warning(f"Preferences file not found at {self._path}, starting empty")
            return None

        with open(self._path, "r", encoding="utf-8") as f:
            data = json.load(f)

        return PreferencesDocument.model_validate(data or {})

    def write(self, document: PreferencesDocument) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = document.model_dump(mode="json", by_alias=True, exclude_none=True)

        # Write next to the target and swap, readers never see a half-written file
        fd, tmp_path = tempfile.mkstemp(
            dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self._path)
        except Exception:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise


def create_storage() -> PreferenceStorage:
    if settings.PREFERENCES_BACKEND == "database":
        from triggers.auto_translation.crud import DatabaseStorage

        return DatabaseStorage(settings.DATABASE_URL)
    return JsonFileStorage(settings.PREFERENCES_JSON_PATH)
