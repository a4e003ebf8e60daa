#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Habit Dashboard v1.0 - Configuration
Централизованная конфигурация из переменных окружения

Версия: 1.0.0
Дата: 2026-10-19
"""

import os
import sys
import logging
from pathlib import Path
from typing import Optional, Dict, Any
from dataclasses import dataclass
from enum import Enum

class Environment(Enum):
    """Среды выполнения"""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"

class LogLevel(Enum):
    """Уровни логирования"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

DEFAULT_STORAGE_KEY = "master-mausam-data"

@dataclass
class StorageConfig:
    """Конфигурация локального хранилища"""
    data_dir: Path
    backup_dir: Path
    storage_key: str = DEFAULT_STORAGE_KEY
    backup_interval_hours: int = 6
    max_backups: int = 10
    auto_backup: bool = True

@dataclass
class AuthConfig:
    """Конфигурация провайдера аутентификации"""
    supabase_url: Optional[str] = None
    supabase_anon_key: Optional[str] = None
    redirect_url: Optional[str] = None
    dev_login_enabled: bool = False
    session_ttl_hours: int = 168

    @property
    def provider_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)

@dataclass
class ServerConfig:
    """Конфигурация сервера"""
    host: str = "0.0.0.0"
    port: int = 8080
    debug_mode: bool = False

def _env_flag(key: str, default: str = 'false') -> bool:
    return os.getenv(key, default).lower() == 'true'

class AppConfig:
    """Главный класс конфигурации"""

    def __init__(self):
        self.environment = Environment(os.getenv('ENVIRONMENT', 'development'))
        self._load_config()
        self._validate_config()

    def _load_config(self):
        """Загрузка конфигурации из переменных окружения"""

        # Директории
        self.data_dir = Path(os.getenv('DATA_DIR', 'data'))
        self.backup_dir = Path(os.getenv('BACKUP_DIR', 'backups'))
        self.log_dir = Path(os.getenv('LOG_DIR', 'logs'))

        # Хранилище
        self.storage = StorageConfig(
            data_dir=self.data_dir,
            backup_dir=self.backup_dir,
            storage_key=os.getenv('STORAGE_KEY', DEFAULT_STORAGE_KEY),
            backup_interval_hours=int(os.getenv('BACKUP_INTERVAL_HOURS', 6)),
            max_backups=int(os.getenv('MAX_BACKUPS', 10)),
            auto_backup=_env_flag('AUTO_BACKUP', 'true')
        )

        # Аутентификация
        self.auth = AuthConfig(
            supabase_url=os.getenv('SUPABASE_URL'),
            supabase_anon_key=os.getenv('SUPABASE_ANON_KEY'),
            redirect_url=os.getenv('AUTH_REDIRECT_URL'),
            dev_login_enabled=_env_flag('DEV_LOGIN_ENABLED'),
            session_ttl_hours=int(os.getenv('SESSION_TTL_HOURS', 168))
        )

        # Сервер
        self.server = ServerConfig(
            host=os.getenv('HOST', '0.0.0.0'),
            port=int(os.getenv('PORT', 8080)),
            debug_mode=_env_flag('DEBUG_MODE')
        )

        # Логирование
        self.log_level = LogLevel(os.getenv('LOG_LEVEL', 'INFO').upper())
        self.log_to_file = _env_flag('LOG_TO_FILE', 'true')
        self.log_format = os.getenv(
            'LOG_FORMAT',
            '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
        )

        self.timezone = os.getenv('TIMEZONE', 'UTC')

    def _validate_config(self):
        """Валидация конфигурации"""
        errors = []

        if not 1024 <= self.server.port <= 65535:
            errors.append(f"Порт {self.server.port} вне допустимого диапазона (1024-65535)")

        if self.storage.max_backups < 1:
            errors.append("MAX_BACKUPS должен быть положительным числом")

        if self.storage.backup_interval_hours < 1:
            errors.append("BACKUP_INTERVAL_HOURS должен быть положительным числом")

        if self.auth.session_ttl_hours < 1:
            errors.append("SESSION_TTL_HOURS должен быть положительным числом")

        if not self.storage.storage_key.strip():
            errors.append("STORAGE_KEY не может быть пустым")

        if self.auth.supabase_url and not self.auth.supabase_anon_key:
            logging.warning("⚠️ SUPABASE_URL задан без SUPABASE_ANON_KEY - вход по email отключен")

        if errors:
            raise ValueError("Ошибки конфигурации:\n" + "\n".join(f"• {error}" for error in errors))

    def ensure_directories(self):
        """Создание необходимых директорий"""
        directories = [
            self.data_dir,
            self.backup_dir,
            self.log_dir
        ]

        for directory in directories:
            directory.mkdir(parents=True, exist_ok=True)

    def get_logging_config(self) -> Dict[str, Any]:
        """Получение конфигурации логирования"""
        handlers = ['console']
        if self.log_to_file:
            handlers.append('file')

        return {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'default': {
                    'format': self.log_format,
                    'datefmt': '%Y-%m-%d %H:%M:%S'
                }
            },
            'handlers': {
                'console': {
                    'class': 'logging.StreamHandler',
                    'level': self.log_level.value,
                    'formatter': 'default',
                    'stream': sys.stdout
                },
                'file': {
                    'class': 'logging.handlers.RotatingFileHandler',
                    'level': self.log_level.value,
                    'formatter': 'default',
                    'filename': str(self.log_dir / f"dashboard_{self.environment.value}.log"),
                    'maxBytes': 10485760,  # 10MB
                    'backupCount': 5,
                    'encoding': 'utf-8'
                }
            },
            'loggers': {
                '': {
                    'level': self.log_level.value,
                    'handlers': handlers,
                    'propagate': False
                },
                'aiohttp': {
                    'level': 'WARNING',
                    'handlers': handlers,
                    'propagate': False
                },
                'apscheduler': {
                    'level': 'WARNING',
                    'handlers': handlers,
                    'propagate': False
                },
                'uvicorn.access': {
                    'level': 'WARNING',
                    'handlers': handlers,
                    'propagate': False
                }
            }
        }

    def is_development(self) -> bool:
        """Проверка режима разработки"""
        return self.environment == Environment.DEVELOPMENT

    def is_production(self) -> bool:
        """Проверка продакшн режима"""
        return self.environment == Environment.PRODUCTION

    def get_storage_path(self) -> Path:
        """Путь к файлу с данными хранилища"""
        return self.data_dir / f"{self.storage.storage_key}.json"

    def to_dict(self) -> Dict[str, Any]:
        """Сериализация конфигурации в словарь"""
        return {
            'environment': self.environment.value,
            'server': {
                'host': self.server.host,
                'port': self.server.port,
                'debug_mode': self.server.debug_mode
            },
            'auth': {
                'provider_configured': self.auth.provider_configured,
                'dev_login_enabled': self.auth.dev_login_enabled
            },
            'storage_path': str(self.get_storage_path()),
            'log_level': self.log_level.value,
            'timezone': self.timezone
        }

# Глобальный экземпляр конфигурации
config = AppConfig()

__all__ = [
    'config',
    'AppConfig',
    'Environment',
    'LogLevel',
    'StorageConfig',
    'AuthConfig',
    'ServerConfig',
    'DEFAULT_STORAGE_KEY'
]
