# database/storage.py

import logging
import os
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)

class StorageError(Exception):
    """Ошибка записи в хранилище"""
    pass

class StorageBackend(ABC):
    """Хранилище ключ -> текст (аналог localStorage браузера)"""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Получить значение по ключу или None"""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Записать значение по ключу"""

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Удалить ключ, если он существует"""

class MemoryStorage(StorageBackend):
    """Хранилище в памяти процесса"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

class FileStorage(StorageBackend):
    """Хранилище на диске: один JSON файл на ключ"""

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.file_lock = threading.RLock()

    def path_for(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        try:
            with self.file_lock:
                with open(path, 'r', encoding='utf-8') as f:
                    return f.read()
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Failed to read storage file {path}: {e}")
            return None

    def set_item(self, key: str, value: str) -> None:
        path = self.path_for(key)
        with self.file_lock:
            # Атомарное сохранение через временный файл
            temp_file = path.with_suffix('.tmp')
            try:
                with open(temp_file, 'w', encoding='utf-8') as f:
                    f.write(value)
                os.replace(temp_file, path)
            except OSError as e:
                if temp_file.exists():
                    temp_file.unlink()
                raise StorageError(f"Failed to write {path}: {e}") from e

    def remove_item(self, key: str) -> None:
        path = self.path_for(key)
        with self.file_lock:
            if path.exists():
                path.unlink()
