# services/__init__.py

"""
Модуль сервисов Habit Dashboard

Собирает локальное хранилище, сервис аутентификации и планировщик
резервных копий из конфигурации приложения.
"""

import logging
from typing import Optional

from config import AppConfig
from database.backup import BackupManager
from database.manager import LocalStore
from database.storage import FileStorage

from .auth_service import AuthService, AuthProvider, OfflineAuthProvider, DEV_USER
from .scheduler import BackupScheduler
from .session_store import SessionStore
from .supabase_auth import SupabaseAuthProvider

logger = logging.getLogger(__name__)

def build_store(app_config: AppConfig) -> LocalStore:
    """Хранилище на диске в DATA_DIR"""
    storage = FileStorage(app_config.data_dir)
    return LocalStore(storage, storage_key=app_config.storage.storage_key)

def build_auth_provider(app_config: AppConfig) -> AuthProvider:
    if app_config.auth.provider_configured:
        return SupabaseAuthProvider(app_config.auth.supabase_url, app_config.auth.supabase_anon_key)
    logger.info("Auth provider is not configured, using offline mode")
    return OfflineAuthProvider()

class ServiceManager:
    """
    Менеджер сервисов приложения

    Обеспечивает:
    - Инициализацию сервисов в нужном порядке
    - Корректное закрытие всех сервисов
    """

    def __init__(self, app_config: AppConfig, store: Optional[LocalStore] = None,
                 auth: Optional[AuthService] = None):
        self.config = app_config
        self.store = store or build_store(app_config)
        self.auth = auth or AuthService(
            build_auth_provider(app_config),
            redirect_url=app_config.auth.redirect_url
        )
        self.sessions = SessionStore(app_config.auth.session_ttl_hours)
        self.backup_scheduler = self._build_backup_scheduler()
        self.initialized = False

    def _build_backup_scheduler(self) -> Optional[BackupScheduler]:
        storage = self.store.storage
        if not self.config.storage.auto_backup or not isinstance(storage, FileStorage):
            return None

        backup_manager = BackupManager(self.config.backup_dir, self.config.storage.max_backups)
        return BackupScheduler(
            backup_manager,
            storage.path_for(self.store.storage_key),
            interval_hours=self.config.storage.backup_interval_hours
        )

    async def initialize(self) -> None:
        """Инициализация всех сервисов"""
        logger.info("🔧 Инициализация сервисов...")

        await self.auth.initialize()

        if self.backup_scheduler:
            self.backup_scheduler.start()

        self.initialized = True
        logger.info("✅ Все сервисы инициализированы")

    def health_check(self) -> dict:
        """Проверка состояния всех сервисов"""
        return {
            "status": "healthy" if self.initialized else "starting",
            "services": {
                "store": {"status": "healthy", **self.store.stats()},
                "auth": {
                    "status": "healthy",
                    "loading": self.auth.is_loading,
                    "active_sessions": len(self.sessions)
                },
                "backup_scheduler": {
                    "status": "running" if self.backup_scheduler and self.backup_scheduler.running
                    else "disabled"
                }
            }
        }

    async def close(self) -> None:
        """Закрытие всех сервисов в обратном порядке"""
        logger.info("🛑 Закрытие сервисов...")

        if self.backup_scheduler:
            self.backup_scheduler.shutdown()

        await self.auth.close()
        self.sessions.clear()

        self.initialized = False
        logger.info("✅ Все сервисы закрыты")

__all__ = [
    'AuthService',
    'AuthProvider',
    'OfflineAuthProvider',
    'SupabaseAuthProvider',
    'BackupScheduler',
    'SessionStore',
    'ServiceManager',
    'DEV_USER',
    'build_store',
    'build_auth_provider'
]
