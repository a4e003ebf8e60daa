# services/sync_service.py

# Хранилище работает только на одном устройстве. Функции ниже оставлены
# для совместимости интерфейса и ничего не синхронизируют.

from dataclasses import dataclass, field
from typing import Any, List, Optional

@dataclass
class SyncResult:
    success: bool
    errors: List[str] = field(default_factory=list)

@dataclass
class PullResult:
    success: bool
    error: Optional[str] = None

async def perform_sync() -> SyncResult:
    return SyncResult(success=True, errors=[])

async def pull_from_server(user_id: str) -> PullResult:
    return PullResult(success=True)

async def full_sync(user_id: str) -> SyncResult:
    return SyncResult(success=True, errors=[])

def trigger_background_sync() -> None:
    pass

async def get_settings(user_id: str) -> None:
    return None

async def save_settings(user_id: str, settings: Any) -> None:
    return None
