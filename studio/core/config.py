from functools import lru_cache
from pathlib import Path
from typing import Annotated, Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parent.parent.parent
ENV_FILE = BASE_DIR / ".env"


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    PROJECT_NAME: str = "Tattoo Studio Dashboard"
    API_V1_PREFIX: str = "/api/v1"

    DATABASE_URL: str
    REDIS_URL: Optional[str] = None

    JWT_SECRET_KEY: str
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=720, ge=1)
    SESSION_IDLE_TIMEOUT_MINUTES: int = Field(default=30, ge=1)

    LOG_LEVEL: str = "INFO"
    LOG_FILE_PATH: Optional[str] = None
    ENVIRONMENT: str = "development"

    CORS_ORIGINS: Annotated[list[str], NoDecode] = Field(default_factory=list)

    DEFAULT_ADMIN_NAME: str = "Studio Admin"
    DEFAULT_ADMIN_USERNAME: str = "admin"
    DEFAULT_ADMIN_PASSWORD: Optional[str] = None

    STUDIO_NAME: str = "Krampus Tattoo Studio"
    RESERVATION_NUMBER_SEED: int = Field(default=1290, ge=1)

    TELEGRAM_API_BASE_URL: str = "https://api.telegram.org"
    TELEGRAM_BOT_TOKEN: Optional[str] = None
    TELEGRAM_CHAT_ID: Optional[str] = None
    TELEGRAM_DAILY_BOT_TOKEN: Optional[str] = None
    TELEGRAM_DAILY_CHAT_ID: Optional[str] = None

    DOCUMENT_WEBHOOK_URL: Optional[str] = None

    DAILY_DIGEST_HOUR_UTC: int = Field(default=0, ge=0, le=23)
    DAILY_DIGEST_MINUTE_UTC: int = Field(default=0, ge=0, le=59)
    SCHEDULER_SECRET: Optional[str] = None

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: str | list[str]) -> list[str]:
        if isinstance(v, str):
            v = v.strip().strip('"\'')
            if v == "*":
                return ["*"]
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v


load_dotenv(ENV_FILE)


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()
