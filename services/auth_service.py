#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Habit Dashboard v1.0 - Auth Service
Состояние аутентификации поверх внешнего провайдера сессий

Сервис хранит текущего пользователя, подписывается на события провайдера
(вход/выход) и освобождает подписку при закрытии. Идентификатор пользователя
используется как user_id в локальном хранилище.

Версия: 1.0.0
Дата: 2026-10-19
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from models.auth import AuthError, AuthEvent, AuthSession, AuthUser

logger = logging.getLogger(__name__)

AuthListener = Callable[[AuthEvent, Optional[AuthSession]], None]

# Фиксированный пользователь для локальной работы без провайдера
DEV_USER = AuthUser(
    id="895cd28a-37ea-443c-b7bb-eca88c857d05",
    email="dev@localhost",
    app_metadata={},
    user_metadata={},
    aud="authenticated",
)

class Subscription:
    """Подписка на события провайдера"""

    def __init__(self, release: Callable[[], None]):
        self._release = release
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self.active = False
            self._release()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.unsubscribe()

class AuthProvider(ABC):
    """Внешний провайдер сессий (OTP по email)"""

    def __init__(self):
        self._listeners: List[AuthListener] = []

    @abstractmethod
    async def get_session(self) -> Optional[AuthSession]:
        """Текущая сессия или None. Ошибки провайдера - AuthError"""

    @abstractmethod
    async def sign_in_with_otp(self, email: str, redirect_to: Optional[str] = None) -> None:
        """Отправить одноразовый код/ссылку на email"""

    @abstractmethod
    async def verify_otp(self, email: str, token: str) -> AuthSession:
        """Подтвердить одноразовый код и открыть сессию"""

    @abstractmethod
    async def sign_out(self) -> None:
        """Завершить сессию"""

    def on_auth_state_change(self, callback: AuthListener) -> Subscription:
        """Подписаться на события входа/выхода"""
        self._listeners.append(callback)

        def release():
            if callback in self._listeners:
                self._listeners.remove(callback)

        return Subscription(release)

    def _emit(self, event: AuthEvent, session: Optional[AuthSession]) -> None:
        for listener in list(self._listeners):
            try:
                listener(event, session)
            except Exception as e:
                logger.warning(f"[Auth] Listener failed on {event.value}: {e}")

    async def close(self) -> None:
        pass

class OfflineAuthProvider(AuthProvider):
    """Провайдер без сервера: сессий нет, доступен только dev-вход"""

    async def get_session(self) -> Optional[AuthSession]:
        return None

    async def sign_in_with_otp(self, email: str, redirect_to: Optional[str] = None) -> None:
        raise AuthError("Email sign-in is not configured")

    async def verify_otp(self, email: str, token: str) -> AuthSession:
        raise AuthError("Email sign-in is not configured")

    async def sign_out(self) -> None:
        self._emit(AuthEvent.SIGNED_OUT, None)

class AuthService:
    """Контекст аутентификации приложения"""

    def __init__(self, provider: AuthProvider, redirect_url: Optional[str] = None,
                 dev_user: AuthUser = DEV_USER):
        self.provider = provider
        self.redirect_url = redirect_url
        self.dev_user = dev_user
        self.user: Optional[AuthUser] = None
        self.is_loading = True
        self._subscription: Optional[Subscription] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def user_id(self) -> Optional[str]:
        return self.user.id if self.user else None

    async def initialize(self) -> None:
        """Подписка на события и проверка существующей сессии"""
        if self._subscription is None:
            self._subscription = self.provider.on_auth_state_change(self._handle_auth_change)

        try:
            session = await self.provider.get_session()
            if session is not None:
                logger.info("[Auth] Found provider session")
                self.user = session.user
            else:
                logger.info("[Auth] No session, login required")
                self.user = None
        except AuthError as e:
            logger.error(f"[Auth] Session error: {e}")
            self.user = None
        except Exception as e:
            logger.error(f"[Auth] Unexpected error: {e}")
            self.user = None
        finally:
            self.is_loading = False

    def _handle_auth_change(self, event: AuthEvent, session: Optional[AuthSession]) -> None:
        logger.info(f"[Auth] State change: {event.value}")

        if event == AuthEvent.SIGNED_IN and session is not None:
            self.user = session.user
        elif event == AuthEvent.SIGNED_OUT:
            self.user = None

    async def close(self) -> None:
        """Освободить подписку на события провайдера"""
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
        await self.provider.close()

    async def __aenter__(self):
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def dev_login(self) -> AuthUser:
        logger.info("[Auth] Dev login")
        self.user = self.dev_user
        return self.user

    async def sign_in_with_otp(self, email: str) -> Optional[AuthError]:
        try:
            await self.provider.sign_in_with_otp(email, redirect_to=self.redirect_url)
        except AuthError as e:
            logger.error(f"[Auth] OTP sign-in failed: {e}")
            return e
        return None

    async def verify_otp(self, email: str, token: str) -> Optional[AuthError]:
        try:
            session = await self.exchange_otp(email, token)
        except AuthError as e:
            return e
        self.user = session.user
        return None

    async def exchange_otp(self, email: str, token: str) -> AuthSession:
        """Обменять код на сессию провайдера. Ошибка пробрасывается как AuthError.

        Используется веб-API, где пользователь определяется токеном запроса,
        а не общим состоянием сервиса.
        """
        try:
            return await self.provider.verify_otp(email, token)
        except AuthError as e:
            logger.error(f"[Auth] OTP verification failed: {e}")
            raise

    async def sign_out(self) -> Optional[AuthError]:
        logger.info("[Auth] Signing out...")
        self.user = None
        try:
            await self.provider.sign_out()
        except AuthError as e:
            logger.error(f"[Auth] Sign-out failed: {e}")
            return e
        return None

    async def refresh_session(self) -> None:
        try:
            session = await self.provider.get_session()
        except AuthError as e:
            logger.error(f"[Auth] Session refresh failed: {e}")
            return
        if session is not None:
            self.user = session.user
