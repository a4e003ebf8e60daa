# database/migrations.py

import logging
from dataclasses import dataclass, field
from types import SimpleNamespace
from typing import List

logger = logging.getLogger(__name__)

CURRENT_SCHEMA_VERSION = 1

@dataclass
class MigrationResult:
    success: bool
    applied: int
    errors: List[str] = field(default_factory=list)

async def run_migrations() -> MigrationResult:
    """
    Миграции локального хранилища отключены: формат блоба не версионируется.
    Всегда сообщает об успехе без примененных миграций.
    """
    logger.debug("Local store migrations are disabled, nothing to apply")
    return MigrationResult(success=True, applied=0, errors=[])

def get_current_schema_version() -> int:
    return CURRENT_SCHEMA_VERSION

migration_utils = SimpleNamespace(
    get_current_schema_version=get_current_schema_version,
)
