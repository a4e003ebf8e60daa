#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Habit Dashboard - FastAPI Application
Веб-API дашборда привычек поверх локального хранилища

Версия: 1.0.0
Дата: 2026-10-19
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from config import AppConfig, config as default_config
from dashboard.api import auth, entries, habits
from dashboard.config import DashboardSettings, get_settings
from database.manager import LocalStore
from services import ServiceManager
from services.auth_service import AuthService
from shared.models import HealthCheck

logger = logging.getLogger(__name__)

def create_app(store: Optional[LocalStore] = None, auth_service: Optional[AuthService] = None,
               settings: Optional[DashboardSettings] = None,
               app_config: Optional[AppConfig] = None) -> FastAPI:
    """Создание FastAPI приложения с собственным набором сервисов"""
    settings = settings or get_settings()
    app_config = app_config or default_config
    services = ServiceManager(app_config, store=store, auth=auth_service)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Управление жизненным циклом приложения"""
        logger.info("🚀 Запуск Habit Dashboard...")
        app.state.start_time = time.time()
        await services.initialize()

        stats = services.store.stats()
        logger.info(f"📊 Привычек в хранилище: {stats['habits']}, отметок: {stats['entries']}")
        logger.info("✅ Dashboard готов к работе")

        yield

        logger.info("🛑 Остановка Dashboard...")
        await services.close()

    app = FastAPI(
        title=settings.APP_NAME,
        description="API дашборда привычек: привычки, ежедневные отметки, вход по email",
        version=settings.VERSION,
        docs_url="/api/docs" if settings.docs_enabled else None,
        redoc_url="/api/redoc" if settings.docs_enabled else None,
        openapi_url="/api/openapi.json" if settings.docs_enabled else None,
        lifespan=lifespan
    )
    app.state.services = services
    app.state.settings = settings
    app.state.start_time = time.time()

    # ===== MIDDLEWARE =====

    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    # ===== ROUTERS =====

    app.include_router(auth.router)
    app.include_router(habits.router)
    app.include_router(entries.router)

    @app.get("/health", response_model=HealthCheck, tags=["system"])
    async def health_check():
        """Проверка состояния сервиса"""
        health = services.health_check()
        return HealthCheck(
            status=health["status"],
            service=settings.APP_NAME,
            version=settings.VERSION,
            timestamp=time.time(),
            services=health["services"]
        )

    return app
