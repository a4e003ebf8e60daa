#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Habit Dashboard v1.0
Дашборд для отслеживания ежедневных привычек

Использование:
    python main.py serve          # запуск веб-API
    python main.py stats          # статистика хранилища
    python main.py backup         # резервная копия хранилища
    python main.py reset-data     # очистка хранилища

Версия: 1.0.0
Дата: 2026-10-19
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

import uvicorn

from config import config
from database.backup import BackupManager
from services import build_store
from utils.logger import setup_logger

logger = logging.getLogger(__name__)

def cmd_serve(args) -> int:
    logger.info(f"🌐 Dashboard: http://{config.server.host}:{config.server.port}")
    uvicorn.run(
        "dashboard.app:create_app",
        factory=True,
        host=config.server.host,
        port=config.server.port,
        reload=config.server.debug_mode,
        log_config=None
    )
    return 0

def cmd_stats(args) -> int:
    store = build_store(config)
    print(json.dumps(store.stats(), indent=2))
    return 0

def cmd_backup(args) -> int:
    store = build_store(config)
    backup_manager = BackupManager(config.backup_dir, config.storage.max_backups)
    backup_path = backup_manager.create_backup(store.storage.path_for(store.storage_key))
    if backup_path is None:
        logger.error("❌ Резервная копия не создана")
        return 1
    print(backup_path)
    return 0

def cmd_reset_data(args) -> int:
    if not args.yes:
        logger.error("Добавьте --yes для подтверждения очистки хранилища")
        return 1
    build_store(config).clear()
    return 0

def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description='Habit Dashboard')
    subparsers = parser.add_subparsers(dest='command')

    subparsers.add_parser('serve', help='Запуск веб-API')
    subparsers.add_parser('stats', help='Статистика хранилища')
    subparsers.add_parser('backup', help='Создать резервную копию')
    reset_parser = subparsers.add_parser('reset-data', help='Очистить хранилище')
    reset_parser.add_argument('--yes', action='store_true', help='Подтвердить очистку')

    args = parser.parse_args(argv)

    config.ensure_directories()
    setup_logger(config)

    commands = {
        'serve': cmd_serve,
        'stats': cmd_stats,
        'backup': cmd_backup,
        'reset-data': cmd_reset_data,
    }
    return commands[args.command or 'serve'](args)

if __name__ == "__main__":
    sys.exit(main())
