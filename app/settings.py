import json
from pathlib import Path
from typing import Annotated, Set, Any, Literal, List
from urllib.request import getproxies

import dotenv
from loguru import logger
from pydantic import SecretStr, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from telegram import Bot
from telegram.ext import Application

dotenv.load_dotenv()


PROJECT_DIR = Path(__file__).parent
LOG_DIR = PROJECT_DIR.joinpath("logs")
DATA_DIR = PROJECT_DIR.joinpath("data")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_ignore_empty=True, extra="ignore")

    TELEGRAM_BOT_API_TOKEN: SecretStr = Field(
        default="", description="Bot token issued by https://t.me/BotFather"
    )

    TELEGRAM_ALT_BOT_API_TOKEN: SecretStr = Field(
        default="",
        description="Token of a second bot used by /translate to post on behalf of the caller. "
        "When empty, /translate answers privately instead.",
    )

    TRANSLATE_API_KEY: SecretStr = Field(
        default="", description="Google Cloud Translation API key"
    )

    TRANSLATE_API_BASE_URL: str = Field(
        default="https://translation.googleapis.com/language/translate",
        description="Base URL of the Translation REST API, `/v2` endpoints are appended",
    )

    HTTP_REQUEST_TIMEOUT: float = Field(
        default=30.0,
        description="HTTP timeout (seconds) for Telegram and translation API calls.",
    )

    DETECTION_BACKEND: Literal["google", "langdetect"] = Field(
        default="google",
        description="`google` asks the translation API to detect the language, "
        "`langdetect` detects locally and only uses the API for translation.",
    )

    PREFERENCES_BACKEND: Literal["json", "database"] = Field(
        default="json", description="Where channel and user preferences are persisted."
    )

    PREFERENCES_JSON_PATH: Path = Field(
        default=DATA_DIR.joinpath("config.json"),
        description="JSON file holding `channelSettings` and `userSettings`.",
    )

    DATABASE_URL: str = Field(
        default=f"sqlite:///{DATA_DIR.joinpath('auto_translation.db')}",
        description="SQLAlchemy URL, used when PREFERENCES_BACKEND is `database`.",
    )

    DEFAULT_ACTIVE_LANGUAGES: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: ["en", "tr"],
        description="Language pair used when a channel has no configured languages. "
        "Comma separated (`en,tr`) or a JSON list.",
    )

    DEFAULT_USER_LANGUAGE: str = Field(
        default="en", description="Target language for `/autotranslate_me on` without argument."
    )

    DETECTION_CACHE_TTL: float = Field(
        default=60.0, description="Seconds a detected language stays cached."
    )

    DETECTION_CACHE_CAPACITY: int = Field(
        default=500, description="Maximum number of cached detections."
    )

    LOG_LEVEL: str = Field(
        default="DEBUG", description="Level of the stdout and runtime log sinks."
    )

    LOG_TIMEZONE: str = Field(default="UTC", description="Timezone of log timestamps.")

    TELEGRAM_CHAT_WHITELIST: str = Field(
        default="", description="Comma separated chat ids allowed to configure auto-translation."
    )

    whitelist: Set[int] = Field(
        default_factory=set,
        description="Parsed from TELEGRAM_CHAT_WHITELIST",
    )

    @field_validator("DEFAULT_ACTIVE_LANGUAGES", mode="before")
    @classmethod
    def parse_language_list(cls, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        value = value.strip()
        items = json.loads(value) if value.startswith("[") else value.split(",")
        return [str(code).strip().lower() for code in items if str(code).strip()]

    def model_post_init(self, context: Any, /) -> None:
        try:
            if not self.whitelist and self.TELEGRAM_CHAT_WHITELIST:
                self.whitelist = {
                    int(i.strip()) for i in filter(None, self.TELEGRAM_CHAT_WHITELIST.split(","))
                }
        except Exception as err:
            logger.warning(f"Failed to parse TELEGRAM_CHAT_WHITELIST - {err}")

        # An empty pair would leave the channel branch with no target at all
        if not self.DEFAULT_ACTIVE_LANGUAGES:
            logger.warning("DEFAULT_ACTIVE_LANGUAGES is empty, falling back to en,tr")
            self.DEFAULT_ACTIVE_LANGUAGES = ["en", "tr"]

    def get_default_application(self) -> Application:
        _base_builder = (
            Application.builder()
            .token(self.TELEGRAM_BOT_API_TOKEN.get_secret_value())
            .connect_timeout(self.HTTP_REQUEST_TIMEOUT)
            .write_timeout(self.HTTP_REQUEST_TIMEOUT)
            .read_timeout(self.HTTP_REQUEST_TIMEOUT)
        )
        if proxy_url := getproxies().get("http"):
            logger.success(f"Using proxy: {proxy_url}")
            application = _base_builder.proxy(proxy_url).get_updates_proxy(proxy_url).build()
        else:
            application = _base_builder.build()

        return application

    def get_alternate_bot(self) -> Bot | None:
        """Second bot identity for `/translate`, None when not configured."""
        token = self.TELEGRAM_ALT_BOT_API_TOKEN.get_secret_value()
        if not token:
            return None
        return Bot(token=token)


settings = Settings()  # type: ignore
