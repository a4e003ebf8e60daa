#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Habit Dashboard - Dashboard Configuration
Настройки веб-дашборда с валидацией

Версия: 1.0.0
Дата: 2026-10-19
"""

from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

class DashboardSettings(BaseSettings):
    """Настройки веб-дашборда"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    # ===== ОСНОВНЫЕ НАСТРОЙКИ =====

    APP_NAME: str = Field(
        default="Habit Dashboard",
        description="Название приложения"
    )

    VERSION: str = Field(
        default="1.0.0",
        description="Версия дашборда"
    )

    ENVIRONMENT: str = Field(
        default="development",
        description="Среда выполнения (development/production/testing/staging)"
    )

    DEBUG: bool = Field(
        default=False,
        description="Режим отладки (включает /api/docs)"
    )

    # ===== СЕТЕВЫЕ НАСТРОЙКИ =====

    DASHBOARD_HOST: str = Field(
        default="0.0.0.0",
        description="Хост для запуска дашборда"
    )

    DASHBOARD_PORT: int = Field(
        default=8000,
        description="Порт для запуска дашборда"
    )

    # ===== CORS НАСТРОЙКИ =====

    ALLOWED_ORIGINS: str = Field(
        default="*",
        description="Разрешенные источники для CORS через запятую"
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

    @field_validator('DASHBOARD_PORT')
    @classmethod
    def validate_port(cls, v):
        """Валидация порта"""
        if not 1 <= v <= 65535:
            raise ValueError("DASHBOARD_PORT must be between 1 and 65535")
        return v

    # ===== МЕТОДЫ КОНФИГУРАЦИИ =====

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def docs_enabled(self) -> bool:
        return self.DEBUG and not self.is_production

    @property
    def allowed_origins(self) -> List[str]:
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(',') if origin.strip()]

@lru_cache()
def get_settings() -> DashboardSettings:
    return DashboardSettings()
