#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Focusboard - Dashboard Configuration
Конфигурация сервиса с настройками для разных сред

Автор: AI Assistant
Версия: 1.0.0
Дата: 2025-06-10
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import List, Union

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from utils.logger import setup_logger

class DashboardSettings(BaseSettings):
    """Настройки сервиса дашборда"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    # ===== ОСНОВНЫЕ НАСТРОЙКИ =====

    APP_NAME: str = Field(
        default="Focusboard",
        description="Название приложения"
    )

    VERSION: str = Field(
        default="1.0.0",
        description="Версия сервиса"
    )

    ENVIRONMENT: str = Field(
        default="development",
        description="Среда выполнения (development/production/testing/staging)"
    )

    DEBUG: bool = Field(
        default=False,
        description="Режим отладки: документация API и SQL echo"
    )

    # ===== ХРАНИЛИЩЕ (обязательные) =====

    STORE_URL: str = Field(
        description="SQLAlchemy async URL хранилища, например sqlite+aiosqlite:///data/focus.db"
    )

    STORE_AUTH_TOKEN: str = Field(
        description="Токен доступа к хранилищу"
    )

    # ===== СЕТЕВЫЕ НАСТРОЙКИ =====

    DASHBOARD_HOST: str = Field(
        default="0.0.0.0",
        description="Хост для запуска сервиса"
    )

    DASHBOARD_PORT: int = Field(
        default=8000,
        description="Порт для запуска сервиса"
    )

    ALLOWED_ORIGINS: Union[List[str], str] = Field(
        default=["*"],
        description="Разрешенные источники для CORS"
    )

    # ===== СЕССИИ =====

    SESSION_COOKIE_NAME: str = Field(
        default="session_token",
        description="Cookie с токеном сессии (если нет заголовка Authorization)"
    )

    # ===== ЛОГИРОВАНИЕ =====

    LOG_LEVEL: str = Field(
        default="INFO",
        description="Уровень логирования (DEBUG/INFO/WARNING/ERROR/CRITICAL)"
    )

    LOG_FORMAT: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Формат логов"
    )

    LOG_DATE_FORMAT: str = Field(
        default="%Y-%m-%d %H:%M:%S",
        description="Формат даты в логах"
    )

    LOGS_DIR: Path = Field(
        default=Path("logs"),
        description="Директория логов"
    )

    # ===== ВАЛИДАТОРЫ =====

    @field_validator('ENVIRONMENT')
    @classmethod
    def validate_environment(cls, v):
        """Валидация среды выполнения"""
        allowed_envs = ['development', 'production', 'testing', 'staging']
        if v.lower() not in allowed_envs:
            raise ValueError(f"ENVIRONMENT must be one of {allowed_envs}")
        return v.lower()

    @field_validator('LOG_LEVEL')
    @classmethod
    def validate_log_level(cls, v):
        """Валидация уровня логирования"""
        allowed_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in allowed_levels:
            raise ValueError(f"LOG_LEVEL must be one of {allowed_levels}")
        return v.upper()

    @field_validator('DASHBOARD_PORT')
    @classmethod
    def validate_port(cls, v):
        if not 1 <= v <= 65535:
            raise ValueError("DASHBOARD_PORT must be between 1 and 65535")
        return v

    @field_validator('STORE_URL', 'STORE_AUTH_TOKEN')
    @classmethod
    def validate_required(cls, v, info):
        if not v or not v.strip():
            raise ValueError(f"{info.field_name} must not be empty")
        return v.strip()

    @field_validator('ALLOWED_ORIGINS')
    @classmethod
    def validate_origins(cls, v):
        """Валидация CORS origins"""
        if isinstance(v, str):
            # Если передана строка, разделяем по запятой
            return [origin.strip() for origin in v.split(',') if origin.strip()]
        return v

    @model_validator(mode='after')
    def validate_production_settings(self):
        """В продакшене отладка всегда выключена"""
        if self.ENVIRONMENT == 'production':
            self.DEBUG = False
        return self

    # ===== МЕТОДЫ КОНФИГУРАЦИИ =====

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    def setup_logging(self) -> None:
        """Настройка логирования: консоль и ротируемый файл"""
        setup_logger(
            str(self.LOGS_DIR / "dashboard.log"),
            level=self.LOG_LEVEL,
            fmt=self.LOG_FORMAT,
            datefmt=self.LOG_DATE_FORMAT
        )

        # Настройка логгеров внешних библиотек
        if not self.DEBUG:
            logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
            logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

@lru_cache()
def get_settings() -> DashboardSettings:
    """Настройки из окружения; без STORE_URL/STORE_AUTH_TOKEN процесс не стартует"""
    return DashboardSettings()
