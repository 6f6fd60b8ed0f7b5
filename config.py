import logging
import os
from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Constants
SCOPES = ['https://www.googleapis.com/auth/spreadsheets']
DEFAULT_SHEET_TITLE = 'Message Registrations'


class Settings(BaseSettings):
    """Runtime configuration, read from the environment (and .env when present)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    GOOGLE_SPREADSHEET_ID: str = Field(default="")
    GOOGLE_SERVICE_ACCOUNT_EMAIL: str = Field(default="")
    GOOGLE_PRIVATE_KEY: str = Field(default="")
    # Full service account JSON; takes precedence over email + key
    GOOGLE_CREDENTIALS: Optional[str] = Field(default=None)

    STORAGE_BACKEND: Literal["sheets", "sql"] = Field(default="sheets")
    DATABASE_URL: str = Field(default="sqlite:///./submissions.db")
    SHEET_TITLE: str = Field(default=DEFAULT_SHEET_TITLE)

    PORT: int = Field(default=5000)
    LOG_LEVEL: str = Field(default="INFO")

    @field_validator("GOOGLE_PRIVATE_KEY")
    @classmethod
    def unescape_private_key(cls, value: str) -> str:
        # Keys pasted into env vars usually carry literal "\n" sequences
        return value.replace("\\n", "\n")


@lru_cache
def get_settings() -> Settings:
    return Settings()


def reset_settings() -> None:
    get_settings.cache_clear()


def configure_logging(level_name: Optional[str] = None) -> None:
    """Configure root logging once; later calls only adjust the level."""
    name = level_name or os.getenv("LOG_LEVEL", "INFO")
    level = getattr(logging, name.upper(), logging.INFO)
    root_logger = logging.getLogger()

    if root_logger.handlers:
        root_logger.setLevel(level)
        for handler in root_logger.handlers:
            handler.setLevel(level)
        return

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
