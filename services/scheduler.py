# services/scheduler.py

import logging
from pathlib import Path
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from database.backup import BackupManager

logger = logging.getLogger(__name__)

BACKUP_JOB_ID = 'periodic_backup'

class BackupScheduler:
    """Периодическое резервное копирование файла хранилища"""

    def __init__(self, backup_manager: BackupManager, source_file: Path,
                 interval_hours: int = 6):
        self.backup_manager = backup_manager
        self.source_file = Path(source_file)
        self.interval_hours = interval_hours
        self.scheduler: Optional[AsyncIOScheduler] = None

    @property
    def running(self) -> bool:
        return self.scheduler is not None and self.scheduler.running

    def run_backup(self) -> Optional[Path]:
        backup_path = self.backup_manager.create_backup(self.source_file)
        if backup_path:
            logger.info("Periodic backup completed")
        return backup_path

    def start(self) -> None:
        """Запуск планировщика; вызывать внутри работающего event loop"""
        if self.running:
            return

        self.scheduler = AsyncIOScheduler()
        self.scheduler.add_job(
            self.run_backup,
            IntervalTrigger(hours=self.interval_hours),
            id=BACKUP_JOB_ID,
            replace_existing=True
        )
        self.scheduler.start()
        logger.info(f"Backup scheduler started (every {self.interval_hours}h)")

    def shutdown(self) -> None:
        if self.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Backup scheduler stopped")
        self.scheduler = None
