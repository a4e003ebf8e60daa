# models/habit.py

from dataclasses import dataclass, asdict, fields
from typing import Optional, Dict, Any

DEFAULT_HABIT_NAME = "New Habit"
DEFAULT_HABIT_ICON = "⭐"
DEFAULT_HABIT_COLOR = "#3b82f6"
DEFAULT_SCHEMA_VERSION = 1

# Поля, которые вызывающий код может передать в save_habit
HABIT_MUTABLE_FIELDS = (
    "name",
    "icon",
    "color",
    "order_index",
    "is_two_step",
    "schema_version",
)

def _known_fields(cls, data: Dict[str, Any]) -> Dict[str, Any]:
    names = {f.name for f in fields(cls)}
    return {key: value for key, value in data.items() if key in names}

def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)

def _check_types(cls, values: Dict[str, Any], strings=(), numbers=(), flags=(),
                 optional_numbers=(), optional_strings=()) -> None:
    """TypeError при несовпадении типа, чтобы загрузка пропустила запись"""
    for name in strings:
        if name in values and not isinstance(values[name], str):
            raise TypeError(f"{cls.__name__}.{name} must be a string, got {values[name]!r}")
    for name in numbers:
        if name in values and not _is_number(values[name]):
            raise TypeError(f"{cls.__name__}.{name} must be a number, got {values[name]!r}")
    for name in flags:
        if name in values and not isinstance(values[name], bool):
            raise TypeError(f"{cls.__name__}.{name} must be a boolean, got {values[name]!r}")
    for name in optional_numbers:
        if values.get(name) is not None and not _is_number(values[name]):
            raise TypeError(f"{cls.__name__}.{name} must be a number, got {values[name]!r}")
    for name in optional_strings:
        if values.get(name) is not None and not isinstance(values[name], str):
            raise TypeError(f"{cls.__name__}.{name} must be a string, got {values[name]!r}")

@dataclass
class Habit:
    """Привычка пользователя с метаданными отображения"""
    id: str
    user_id: str
    name: str
    icon: str
    color: str
    order_index: int
    is_two_step: bool
    created_at: str  # ISO 8601
    updated_at: str  # ISO 8601
    schema_version: int = DEFAULT_SCHEMA_VERSION

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Habit":
        values = _known_fields(cls, data)
        _check_types(
            cls, values,
            strings=("id", "user_id", "name", "icon", "color", "created_at", "updated_at"),
            numbers=("order_index", "schema_version"),
            flags=("is_two_step",),
        )
        return cls(**values)

@dataclass
class HabitEntry:
    """Отметка привычки за один день.

    Идентификатор всегда выводится из (user_id, habit_id, date), см.
    database.manager.generate_entry_id.
    """
    id: str
    user_id: str
    habit_id: str
    date: str  # YYYY-MM-DD, хранится как есть
    value: float
    updated_at: str
    fasting_hours: Optional[float] = None
    note: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        # Необязательные поля не пишем в хранилище, если они не заданы
        for key in ("fasting_hours", "note"):
            if data[key] is None:
                del data[key]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HabitEntry":
        values = _known_fields(cls, data)
        _check_types(
            cls, values,
            strings=("id", "user_id", "habit_id", "date", "updated_at"),
            numbers=("value",),
            optional_numbers=("fasting_hours",),
            optional_strings=("note",),
        )
        return cls(**values)
