#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Habit Dashboard v1.0 - Session Store
Сессии веб-API: bearer-токен -> пользователь

Каждый клиент дашборда получает свой токен при входе (dev-login или
подтверждение OTP) и передает его в заголовке Authorization. Выход одного
клиента не затрагивает остальных.

Версия: 1.0.0
Дата: 2026-10-19
"""

import logging
import secrets
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from models.auth import AuthUser

logger = logging.getLogger(__name__)

@dataclass
class ApiSession:
    token: str
    user: AuthUser
    expires_at: float

class SessionStore:
    """Сессии в памяти процесса с ограниченным сроком жизни"""

    def __init__(self, ttl_hours: int = 168, clock: Optional[Callable[[], float]] = None):
        self.ttl_seconds = ttl_hours * 3600
        self._clock = clock or time.time
        self._sessions: Dict[str, ApiSession] = {}
        self._lock = threading.Lock()

    def create(self, user: AuthUser) -> ApiSession:
        session = ApiSession(
            token=secrets.token_urlsafe(32),
            user=user,
            expires_at=self._clock() + self.ttl_seconds
        )
        with self._lock:
            self._sessions[session.token] = session
        logger.info(f"[Sessions] Opened session for user {user.id}")
        return session

    def resolve(self, token: Optional[str]) -> Optional[AuthUser]:
        """Пользователь по токену или None для неизвестного и просроченного"""
        if not token:
            return None

        with self._lock:
            session = self._sessions.get(token)
            if session is None:
                return None
            if session.expires_at <= self._clock():
                del self._sessions[token]
                logger.info(f"[Sessions] Session for user {session.user.id} expired")
                return None
            return session.user

    def revoke(self, token: Optional[str]) -> bool:
        with self._lock:
            session = self._sessions.pop(token, None) if token else None
        if session is not None:
            logger.info(f"[Sessions] Closed session for user {session.user.id}")
        return session is not None

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
