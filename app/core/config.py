# app/core/config.py
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    ENV: str = "dev"
    DATABASE_URL: str = "sqlite:///./booking.db"
    LOG_LEVEL: str = "INFO"

    # fallbacks for specialists that never saved a schedule config
    DEFAULT_TIMEZONE: str = "UTC"
    DEFAULT_SLOT_DURATION: int = 30

    PREVIEW_SAMPLE_SIZE: int = 10

    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
