#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Focusboard - Dashboard Dependencies
Зависимости и провайдеры для FastAPI приложения

Автор: AI Assistant
Версия: 1.0.0
Дата: 2025-06-10
"""

import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from dashboard.errors import Unauthenticated
from models import Identity
from services import EventService, ServiceManager, SettingsService, TaskService

logger = logging.getLogger(__name__)

# ===== ПРОВАЙДЕРЫ СЕРВИСОВ =====

def get_services(request: Request) -> ServiceManager:
    """Менеджер сервисов текущего приложения"""
    return request.app.state.services

def get_task_service(services: ServiceManager = Depends(get_services)) -> TaskService:
    return services.tasks

def get_event_service(services: ServiceManager = Depends(get_services)) -> EventService:
    return services.events

def get_settings_service(services: ServiceManager = Depends(get_services)) -> SettingsService:
    return services.settings

# ===== АВТОРИЗАЦИЯ =====

security = HTTPBearer(auto_error=False)

def get_credentials(
    request: Request,
    bearer: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[str]:
    """Токен сессии: сначала Authorization: Bearer, затем cookie"""
    if bearer and bearer.credentials:
        return bearer.credentials
    return read_credentials(request)

def read_credentials(request: Request) -> Optional[str]:
    """Тот же порядок, но без FastAPI-зависимостей (для обработчиков ошибок)"""
    scheme, _, token = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() == "bearer" and token.strip():
        return token.strip()
    cookie_name = request.app.state.settings.SESSION_COOKIE_NAME
    return request.cookies.get(cookie_name)

async def get_current_user(
    credentials: Optional[str] = Depends(get_credentials),
    services: ServiceManager = Depends(get_services)
) -> Optional[Identity]:
    """Текущий пользователь или None"""
    return await services.session_gate.resolve(credentials)

async def require_auth(
    current_user: Optional[Identity] = Depends(get_current_user)
) -> Identity:
    """Требовать авторизации до любого обращения к хранилищу"""
    if current_user is None:
        raise Unauthenticated()
    return current_user

# ===== УТИЛИТЫ =====

def get_client_ip(request: Request) -> str:
    """Получить IP адрес клиента"""
    # Проверяем заголовки прокси
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    return request.client.host if request.client else "unknown"
