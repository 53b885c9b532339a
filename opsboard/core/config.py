# opsboard/core/config.py
import logging
from enum import Enum
from typing import Optional

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)


class StorageBackend(str, Enum):
    """Enum for storage backend"""
    SQL = "sql"
    MEMORY = "memory"


class Settings(BaseSettings):
    """Server settings"""
    # Storage
    DATABASE_URL: Optional[str] = None
    STORAGE_BACKEND: Optional[StorageBackend] = None
    AUTO_CREATE_TABLES: bool = False

    # Engine tuning (ignored for SQLite)
    SQL_ECHO: bool = False
    DB_POOL_SIZE: int = 20
    DB_MAX_OVERFLOW: int = 10

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @field_validator("DATABASE_URL", "LOG_FILE", mode="before")
    @classmethod
    def blank_as_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("STORAGE_BACKEND", mode="before")
    @classmethod
    def normalize_backend(cls, v):
        if isinstance(v, str):
            v = v.strip().lower()
            return v or None
        return v


def get_settings() -> Settings:
    settings = Settings()
    config_dict = settings.model_dump(exclude={"DATABASE_URL"})
    config_dict["DATABASE_URL"] = "set" if settings.DATABASE_URL else "unset"
    logger.debug(f"Settings loaded: {config_dict}")
    return settings
