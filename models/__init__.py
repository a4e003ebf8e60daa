#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Habit Dashboard v1.0 - Models Package
Data models for habits, entries and authentication

Version: 1.0.0
Date: 2026-10-19
"""

from .habit import (
    Habit,
    HabitEntry,
    DEFAULT_HABIT_NAME,
    DEFAULT_HABIT_ICON,
    DEFAULT_HABIT_COLOR,
    DEFAULT_SCHEMA_VERSION,
    HABIT_MUTABLE_FIELDS
)

from .auth import (
    AuthEvent,
    AuthError,
    AuthUser,
    AuthSession
)

__all__ = [
    # Habits
    'Habit',
    'HabitEntry',
    'DEFAULT_HABIT_NAME',
    'DEFAULT_HABIT_ICON',
    'DEFAULT_HABIT_COLOR',
    'DEFAULT_SCHEMA_VERSION',
    'HABIT_MUTABLE_FIELDS',

    # Auth
    'AuthEvent',
    'AuthError',
    'AuthUser',
    'AuthSession'
]
