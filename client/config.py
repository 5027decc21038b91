"""
Focusboard - Client Configuration
Настройки клиента синхронизации
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from utils.validators import BREAK_MINUTES_RANGE, FOCUS_MINUTES_RANGE, is_valid_minutes

class ClientSettings(BaseSettings):
    """Настройки клиента дашборда"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    DASHBOARD_URL: str = Field(
        default="http://localhost:8000",
        description="Базовый URL API дашборда"
    )

    SESSION_TOKEN: Optional[str] = Field(
        default=None,
        description="Токен сессии, выданный провайдером"
    )

    CACHE_DIR: Path = Field(
        default=Path(".cache"),
        description="Директория локального кэша настроек"
    )

    CLIENT_RETRIES: int = Field(
        default=2,
        ge=0,
        description="Повторы при временных ошибках (сеть, 5xx)"
    )

    CLIENT_BACKOFF_BASE: float = Field(
        default=0.5,
        ge=0,
        description="Базовая задержка экспоненциального backoff, секунды"
    )

    REQUEST_TIMEOUT: float = Field(
        default=10.0,
        gt=0,
        description="Таймаут HTTP запроса, секунды"
    )

    FOCUS_MINUTES: int = Field(default=25, description="Длительность фокуса")
    BREAK_MINUTES: int = Field(default=5, description="Длительность перерыва")

    @field_validator('FOCUS_MINUTES')
    @classmethod
    def validate_focus(cls, v):
        if not is_valid_minutes(v, FOCUS_MINUTES_RANGE):
            raise ValueError("FOCUS_MINUTES must be 15-60 in steps of 5")
        return v

    @field_validator('BREAK_MINUTES')
    @classmethod
    def validate_break(cls, v):
        if not is_valid_minutes(v, BREAK_MINUTES_RANGE):
            raise ValueError("BREAK_MINUTES must be 5-30 in steps of 5")
        return v
