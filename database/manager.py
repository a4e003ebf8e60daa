#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Habit Dashboard v1.0 - Local Store
Локальное хранилище привычек и отметок в одном JSON блобе

Каждая операция читает блоб целиком, изменяет списки в памяти и
записывает блоб обратно. Цикл чтение-изменение-запись защищен блокировкой.

Версия: 1.0.0
Дата: 2026-10-19
"""

import json
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, NamedTuple, Optional

from config import DEFAULT_STORAGE_KEY
from database.storage import StorageBackend
from models.habit import (
    Habit,
    HabitEntry,
    DEFAULT_HABIT_NAME,
    DEFAULT_HABIT_ICON,
    DEFAULT_HABIT_COLOR,
    DEFAULT_SCHEMA_VERSION,
    HABIT_MUTABLE_FIELDS,
)
from utils.datetime_utils import now_iso

logger = logging.getLogger(__name__)

ENTRY_ID_SEPARATOR = ":"

class EntryKey(NamedTuple):
    user_id: str
    habit_id: str
    date: str

def generate_entry_id(user_id: str, habit_id: str, date: str) -> str:
    """Детерминированный ID отметки: user_id:habit_id:date"""
    return ENTRY_ID_SEPARATOR.join((user_id, habit_id, date))

def parse_entry_id(entry_id: str) -> EntryKey:
    """Разбор ID отметки обратно на составляющие"""
    parts = entry_id.split(ENTRY_ID_SEPARATOR)
    parts += [""] * (3 - len(parts))
    return EntryKey(user_id=parts[0], habit_id=parts[1], date=parts[2])

def _matches_key(entry: HabitEntry, user_id: str, habit_id: str, date: str) -> bool:
    # Ключ отметки - тройка полей, а не строка id: части id могут содержать ':'
    return entry.user_id == user_id and entry.habit_id == habit_id and entry.date == date

@dataclass
class StoreData:
    """Содержимое блоба: два упорядоченных списка"""
    habits: List[Habit] = field(default_factory=list)
    entries: List[HabitEntry] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'habits': [habit.to_dict() for habit in self.habits],
            'entries': [entry.to_dict() for entry in self.entries],
        }

def _load_records(raw: Any, record_cls, kind: str) -> List[Any]:
    if not isinstance(raw, list):
        if raw is not None:
            logger.warning(f"Stored {kind} is not a list, ignoring it")
        return []

    records = []
    for item in raw:
        try:
            records.append(record_cls.from_dict(item))
        except (TypeError, KeyError, AttributeError) as e:
            logger.warning(f"Skipping malformed {kind} record: {e}")
    return records

def parse_store_data(text: Optional[str]) -> StoreData:
    """Разбор блоба с откатом на пустое хранилище (parse-or-default).

    Отсутствующий, нечитаемый или неверной формы блоб трактуется как пустое
    хранилище. Ошибка только логируется, вызывающему коду она не видна.
    """
    if not text:
        return StoreData()

    try:
        raw = json.loads(text)
    except (ValueError, TypeError) as e:
        logger.warning(f"Stored data is corrupted, starting with empty store: {e}")
        return StoreData()

    if not isinstance(raw, dict):
        logger.warning("Stored data has unexpected shape, starting with empty store")
        return StoreData()

    return StoreData(
        habits=_load_records(raw.get('habits'), Habit, 'habit'),
        entries=_load_records(raw.get('entries'), HabitEntry, 'entry'),
    )

class LocalStore:
    """CRUD над привычками и отметками в одном блобе хранилища"""

    def __init__(self, storage: StorageBackend, storage_key: str = DEFAULT_STORAGE_KEY,
                 clock: Optional[Callable[[], str]] = None):
        self.storage = storage
        self.storage_key = storage_key
        self._clock = clock or now_iso
        self._lock = threading.RLock()

    # ===== RAW ACCESS =====

    def _read(self) -> StoreData:
        return parse_store_data(self.storage.get_item(self.storage_key))

    def _write(self, data: StoreData) -> None:
        self.storage.set_item(
            self.storage_key,
            json.dumps(data.to_dict(), ensure_ascii=False)
        )

    # ===== HABITS =====

    def get_habits(self, user_id: str) -> List[Habit]:
        """Привычки пользователя по возрастанию order_index"""
        with self._lock:
            data = self._read()
        habits = [h for h in data.habits if h.user_id == user_id]
        return sorted(habits, key=lambda h: h.order_index)

    def get_habit(self, user_id: str, habit_id: str) -> Optional[Habit]:
        with self._lock:
            data = self._read()
        for habit in data.habits:
            if habit.id == habit_id and habit.user_id == user_id:
                return habit
        return None

    def save_habit(self, user_id: str, habit: Mapping[str, Any]) -> Habit:
        """Создать или обновить привычку.

        Переданные поля перекрывают сохраненные, остальные сохраняются.
        Значения по умолчанию применяются только при создании. updated_at
        обновляется всегда.

        Привычка ищется по id во всем хранилище: если она принадлежит другому
        пользователю, владельцем становится вызывающий, а отметки прежнего
        владельца остаются без привычки.
        """
        habit_id = habit['id']
        supplied = {
            key: habit[key]
            for key in HABIT_MUTABLE_FIELDS
            if habit.get(key) is not None
        }

        with self._lock:
            data = self._read()
            now = self._clock()

            idx = next((i for i, h in enumerate(data.habits) if h.id == habit_id), None)

            if idx is not None:
                existing = data.habits[idx]
                base = existing.to_dict()
                if existing.user_id != user_id:
                    logger.warning(
                        f"Habit {habit_id} moves from user {existing.user_id} to user {user_id}"
                    )
            else:
                base = {
                    'name': DEFAULT_HABIT_NAME,
                    'icon': DEFAULT_HABIT_ICON,
                    'color': DEFAULT_HABIT_COLOR,
                    'order_index': len(data.habits),
                    'is_two_step': False,
                    'created_at': now,
                    'schema_version': DEFAULT_SCHEMA_VERSION,
                }

            base.update(supplied)
            base.update({'id': habit_id, 'user_id': user_id, 'updated_at': now})
            full_habit = Habit.from_dict(base)

            if idx is not None:
                data.habits[idx] = full_habit
            else:
                data.habits.append(full_habit)
                logger.info(f"Created habit {habit_id} for user {user_id}")

            self._write(data)
        return full_habit

    def delete_habit(self, user_id: str, habit_id: str) -> None:
        """Удалить привычку и все ее отметки этого пользователя"""
        with self._lock:
            data = self._read()
            data.habits = [
                h for h in data.habits
                if not (h.id == habit_id and h.user_id == user_id)
            ]
            data.entries = [
                e for e in data.entries
                if not (e.habit_id == habit_id and e.user_id == user_id)
            ]
            self._write(data)
        logger.info(f"Deleted habit {habit_id} for user {user_id}")

    def reorder_habits(self, user_id: str, habit_ids: Iterable[str]) -> None:
        """order_index = позиция в списке; чужие и неизвестные ID пропускаются"""
        with self._lock:
            data = self._read()
            now = self._clock()

            for index, habit_id in enumerate(habit_ids):
                for habit in data.habits:
                    if habit.id == habit_id and habit.user_id == user_id:
                        habit.order_index = index
                        habit.updated_at = now
                        break

            self._write(data)

    # ===== ENTRIES =====

    def get_habit_entries(self, user_id: str, habit_id: Optional[str] = None,
                          date: Optional[str] = None) -> List[HabitEntry]:
        """Отметки пользователя с необязательными фильтрами, в порядке хранения"""
        with self._lock:
            data = self._read()

        entries = [e for e in data.entries if e.user_id == user_id]
        if habit_id:
            entries = [e for e in entries if e.habit_id == habit_id]
        if date:
            entries = [e for e in entries if e.date == date]
        return entries

    def get_habit_entry(self, user_id: str, habit_id: str, date: str) -> Optional[HabitEntry]:
        with self._lock:
            data = self._read()
        for entry in data.entries:
            if _matches_key(entry, user_id, habit_id, date):
                return entry
        return None

    def save_habit_entry(self, user_id: str, habit_id: str, date: str, value: float,
                         fasting_hours: Optional[float] = None,
                         note: Optional[str] = None) -> HabitEntry:
        """Создать или полностью заменить отметку за день"""
        entry_id = generate_entry_id(user_id, habit_id, date)

        with self._lock:
            data = self._read()
            entry = HabitEntry(
                id=entry_id,
                user_id=user_id,
                habit_id=habit_id,
                date=date,
                value=value,
                fasting_hours=fasting_hours,
                note=note,
                updated_at=self._clock(),
            )

            idx = next(
                (i for i, e in enumerate(data.entries) if _matches_key(e, user_id, habit_id, date)),
                None
            )
            if idx is not None:
                data.entries[idx] = entry
            else:
                data.entries.append(entry)

            self._write(data)
        return entry

    def delete_habit_entry(self, user_id: str, habit_id: str, date: str) -> None:
        with self._lock:
            data = self._read()
            data.entries = [
                e for e in data.entries
                if not _matches_key(e, user_id, habit_id, date)
            ]
            self._write(data)

    # ===== MAINTENANCE =====

    def clear(self) -> None:
        """Сбросить хранилище в пустое состояние"""
        with self._lock:
            self._write(StoreData())
        logger.info("Local store cleared")

    def stats(self) -> Dict[str, int]:
        """Количество записей во всем хранилище"""
        with self._lock:
            data = self._read()
        return {
            'habits': len(data.habits),
            'entries': len(data.entries),
            'users': len({h.user_id for h in data.habits} | {e.user_id for e in data.entries}),
        }
