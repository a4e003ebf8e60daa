#!/usr/bin/env python3
"""
Запуск SQL миграций на удаленной базе через RPC exec_sql
Использование: python scripts/migrate.py [migration-file] [--dir DIR]

Пример: python scripts/migrate.py 002_simplified_schema.sql

Скрипт используется только при развертывании, приложение его не вызывает.
"""

import sys
import asyncio
import argparse
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, Iterable, List, Optional

import aiohttp

# Добавляем корневую папку в Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from config import config  # noqa: E402

logger = logging.getLogger(__name__)

DEFAULT_MIGRATION = "002_simplified_schema.sql"
DEFAULT_MIGRATIONS_DIR = project_root / "supabase" / "migrations"
CRITICAL_MARKER = "drop database"

class MigrationError(Exception):
    """Ошибка выполнения SQL выражения"""
    pass

def _strip_leading_comments(statement: str) -> str:
    lines = statement.strip().splitlines()
    while lines and (not lines[0].strip() or lines[0].strip().startswith('--')):
        lines.pop(0)
    return "\n".join(lines).strip()

def split_sql_statements(sql: str) -> List[str]:
    """Разбить SQL на выражения по ';' вне строковых литералов"""
    statements = []
    current = []
    in_quote = False

    for ch in sql:
        if ch == "'":
            # Экранированная кавычка '' переключает состояние дважды
            in_quote = not in_quote
        if ch == ';' and not in_quote:
            statements.append(''.join(current))
            current = []
        else:
            current.append(ch)
    statements.append(''.join(current))

    result = []
    for statement in statements:
        statement = _strip_leading_comments(statement)
        if statement:
            result.append(statement)
    return result

@dataclass
class MigrationReport:
    total: int
    success_count: int = 0
    error_count: int = 0
    stopped: bool = False

    @property
    def ok(self) -> bool:
        return self.error_count == 0

Executor = Callable[[str], Awaitable[None]]

class MigrationRunner:
    """Последовательное выполнение выражений с подсчетом ошибок"""

    def __init__(self, execute: Executor):
        self.execute = execute

    async def run(self, statements: Iterable[str]) -> MigrationReport:
        statements = list(statements)
        report = MigrationReport(total=len(statements))

        for i, statement in enumerate(statements, start=1):
            short_stmt = " ".join(statement[:50].split())
            try:
                await self.execute(statement)
            except MigrationError as e:
                logger.error(f"[{i}/{report.total}] {short_stmt}... ❌ {e}")
                report.error_count += 1

                # Продолжаем, если выражение не критичное
                if CRITICAL_MARKER in statement.lower():
                    logger.error("Critical error, stopping migration")
                    report.stopped = True
                    break
                continue

            logger.info(f"[{i}/{report.total}] {short_stmt}... ✅")
            report.success_count += 1

        return report

class RpcExecutor:
    """Выполнение SQL через функцию exec_sql в PostgREST"""

    def __init__(self, url: str, api_key: str, timeout: int = 30):
        self.endpoint = url.rstrip('/') + '/rest/v1/rpc/exec_sql'
        self.api_key = api_key
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._http: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        self._http = aiohttp.ClientSession(
            timeout=self.timeout,
            headers={
                'apikey': self.api_key,
                'Authorization': f"Bearer {self.api_key}",
            }
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self._http.close()

    async def __call__(self, statement: str) -> None:
        try:
            async with self._http.post(self.endpoint, json={'query': statement + ';'}) as response:
                if response.status >= 400:
                    raise MigrationError(f"HTTP {response.status}: {await response.text()}")
        except aiohttp.ClientError as e:
            raise MigrationError(str(e)) from e

def list_migrations(migrations_dir: Path) -> List[str]:
    if not migrations_dir.exists():
        return []
    return sorted(f.name for f in migrations_dir.glob("*.sql"))

async def run_migration_file(migration_path: Path, url: str, api_key: str) -> MigrationReport:
    sql = migration_path.read_text(encoding='utf-8')
    statements = split_sql_statements(sql)

    logger.info(f"🚀 Running migration: {migration_path.name}")
    logger.info(f"Found {len(statements)} SQL statements")

    async with RpcExecutor(url, api_key) as executor:
        return await MigrationRunner(executor).run(statements)

def main(argv: Optional[List[str]] = None) -> int:
    """Точка входа"""
    parser = argparse.ArgumentParser(description='Запуск SQL миграции на удаленной базе')
    parser.add_argument('migration', nargs='?', default=DEFAULT_MIGRATION, help='Имя файла миграции')
    parser.add_argument('--dir', type=Path, default=DEFAULT_MIGRATIONS_DIR, help='Папка с миграциями')
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format='%(message)s')

    url = config.auth.supabase_url
    api_key = config.auth.supabase_anon_key
    if not url or not api_key:
        logger.error("❌ Missing SUPABASE_URL / SUPABASE_ANON_KEY")
        return 1

    migration_path = args.dir / args.migration
    if not migration_path.exists():
        logger.error(f"❌ Migration file not found: {migration_path}")
        logger.info("Available migrations:")
        for name in list_migrations(args.dir):
            logger.info(f"  - {name}")
        return 1

    report = asyncio.run(run_migration_file(migration_path, url, api_key))

    logger.info("📊 Migration Complete:")
    logger.info(f"   ✅ Success: {report.success_count}")
    logger.info(f"   ❌ Errors: {report.error_count}")

    if not report.ok:
        logger.warning("⚠️  Some statements failed. Check errors above.")
        return 1

    logger.info("🎉 All migrations completed successfully!")
    return 0

if __name__ == "__main__":
    sys.exit(main())
