#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Habit Dashboard - Dashboard Dependencies
Провайдеры зависимостей для FastAPI приложения

Сервисы создаются в create_app() и хранятся в app.state, глобальных
синглтонов нет. Пользователь определяется для каждого запроса по
bearer-токену, выданному при входе.

Версия: 1.0.0
Дата: 2026-10-19
"""

from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from dashboard.config import DashboardSettings
from database.manager import LocalStore
from models.auth import AuthUser
from services import ServiceManager
from services.auth_service import AuthService
from services.session_store import SessionStore

security = HTTPBearer(auto_error=False)

def get_services(request: Request) -> ServiceManager:
    """Получить менеджер сервисов приложения"""
    return request.app.state.services

def get_dashboard_settings(request: Request) -> DashboardSettings:
    return request.app.state.settings

def get_store(services: ServiceManager = Depends(get_services)) -> LocalStore:
    """Получить локальное хранилище"""
    return services.store

def get_auth(services: ServiceManager = Depends(get_services)) -> AuthService:
    """Получить сервис аутентификации"""
    return services.auth

def get_sessions(services: ServiceManager = Depends(get_services)) -> SessionStore:
    return services.sessions

def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[str]:
    return credentials.credentials if credentials else None

def get_current_user(
    token: Optional[str] = Depends(get_bearer_token),
    auth: AuthService = Depends(get_auth),
    sessions: SessionStore = Depends(get_sessions)
) -> AuthUser:
    """Пользователь текущего запроса или 401"""
    if auth.is_loading:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Проверка сессии еще не завершена"
        )

    user = sessions.resolve(token)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Требуется вход",
            headers={"WWW-Authenticate": "Bearer"}
        )
    return user

def get_current_user_id(user: AuthUser = Depends(get_current_user)) -> str:
    return user.id
