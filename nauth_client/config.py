"""Конфигурация клиента."""

from functools import lru_cache
from pathlib import Path
from typing import Dict, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    DEFAULT_API_TIMEOUT_MS,
    DEFAULT_LANGUAGE,
    DEFAULT_STORAGE_FILENAME,
    DEFAULT_TOKEN_STORAGE_KEY,
    STORAGE_TYPE_LOCAL,
)


def _default_storage_path() -> Path:
    return Path.home() / ".nauth" / DEFAULT_STORAGE_FILENAME


class ClientConfig(BaseSettings):
    """
    Настройки API клиента с валидацией через Pydantic.

    Значения можно передать явно или через переменные окружения
    с префиксом ``NAUTH_`` (например, ``NAUTH_API_URL``).
    """

    model_config = SettingsConfigDict(
        env_prefix="NAUTH_",
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
    )

    # API настройки
    api_url: str
    timeout: int = Field(default=DEFAULT_API_TIMEOUT_MS, gt=0, description="Таймаут в миллисекундах")
    enable_fingerprinting: bool = True

    # Хранилище токена
    storage_type: Literal["local", "session"] = STORAGE_TYPE_LOCAL
    storage_path: Path = Field(default_factory=_default_storage_path)
    token_storage_key: str = DEFAULT_TOKEN_STORAGE_KEY

    # Используется только UI слоем
    redirect_on_unauthorized: Optional[str] = None
    language: str = DEFAULT_LANGUAGE
    translations: Dict[str, Dict[str, str]] = Field(default_factory=dict)

    # Логирование
    log_level: str = "INFO"

    @field_validator("api_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Базовый URL хранится без завершающего слэша"""
        v = v.strip()
        if not v:
            raise ValueError("api_url is required")
        return v.rstrip("/")

    @property
    def timeout_seconds(self) -> float:
        """Таймаут в секундах (для httpx)"""
        return self.timeout / 1000


@lru_cache()
def get_config() -> ClientConfig:
    """Возвращает конфигурацию из окружения (кешируется)"""
    return ClientConfig()
