#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Focusboard - FastAPI Application
API задач, событий и настроек для клиента дашборда

Автор: AI Assistant
Версия: 1.0.0
Дата: 2025-06-10
"""

import logging
import time
import uuid
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from dashboard.api import events, session, settings as settings_api, tasks
from dashboard.config import DashboardSettings, get_settings
from dashboard.dependencies import get_client_ip, read_credentials
from dashboard.errors import DashboardError, Unauthenticated
from database.manager import RecordStore
from services import ServiceManager
from shared.models import HealthCheck

logger = logging.getLogger(__name__)

def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})

def create_app(settings: Optional[DashboardSettings] = None,
               store: Optional[RecordStore] = None) -> FastAPI:
    """Фабрика приложения.

    Без аргументов настройки читаются из окружения; отсутствие STORE_URL или
    STORE_AUTH_TOKEN прерывает запуск.
    """
    settings = settings or get_settings()
    store = store or RecordStore.from_url(
        settings.STORE_URL,
        settings.STORE_AUTH_TOKEN,
        echo=settings.DEBUG
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Управление жизненным циклом приложения"""
        logger.info(f"🚀 Запуск {settings.APP_NAME} ({settings.ENVIRONMENT})...")
        app.state.started_at = time.time()
        await app.state.services.initialize()
        logger.info(f"🌐 API доступен на: http://{settings.DASHBOARD_HOST}:{settings.DASHBOARD_PORT}")
        logger.info("✅ Сервис готов к работе")

        yield

        logger.info("🛑 Остановка сервиса...")
        await app.state.services.close()
        logger.info("✅ Ресурсы очищены")

    app = FastAPI(
        title=settings.APP_NAME,
        description="API задач, событий и настроек персонального дашборда",
        version=settings.VERSION,
        docs_url="/api/docs" if settings.DEBUG else None,
        redoc_url="/api/redoc" if settings.DEBUG else None,
        openapi_url="/api/openapi.json" if settings.DEBUG else None,
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.services = ServiceManager(store)
    app.state.started_at = time.time()

    # ===== MIDDLEWARE =====

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    app.add_middleware(GZipMiddleware, minimum_size=1000)

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        """Логирование запросов и время обработки"""
        start_time = time.time()
        client_ip = get_client_ip(request)
        request_id = uuid.uuid4().hex

        try:
            response = await call_next(request)
        except Exception as e:
            process_time = time.time() - start_time
            logger.exception(f"❌ Ошибка обработки запроса {request_id}: {e} ({process_time:.3f}s)")
            return _error(500, "internal server error")

        process_time = time.time() - start_time
        logger.info(
            f"{request.method} {request.url.path} "
            f"- {response.status_code} "
            f"- {process_time:.3f}s "
            f"- {client_ip}"
        )

        response.headers["X-Process-Time"] = f"{process_time:.4f}"
        response.headers["X-Request-ID"] = request_id
        return response

    # ===== ОБРАБОТЧИКИ ОШИБОК =====

    @app.exception_handler(DashboardError)
    async def dashboard_error_handler(request: Request, exc: DashboardError):
        if exc.status_code >= 500:
            logger.error(f"❌ {request.method} {request.url.path}: {exc.message}")
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        # тело разбирается раньше зависимостей, поэтому сессию проверяем здесь
        if request.url.path.startswith("/api/"):
            try:
                identity = await app.state.services.session_gate.resolve(read_credentials(request))
            except DashboardError as e:
                return _error(e.status_code, e.message)
            if identity is None:
                denied = Unauthenticated()
                return _error(denied.status_code, denied.message)

        errors = exc.errors()
        if errors:
            first = errors[0]
            location = ".".join(
                part for part in first.get("loc", ()) if isinstance(part, str) and part != "body"
            )
            message = f"{location}: {first.get('msg')}" if location else first.get("msg", "invalid request")
        else:
            message = "invalid request"
        return _error(400, message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Обработчик HTTP исключений"""
        return _error(exc.status_code, str(exc.detail))

    # ===== РОУТЫ =====

    app.include_router(tasks.router)
    app.include_router(events.router)
    app.include_router(settings_api.router)
    app.include_router(session.router)

    @app.get("/health", response_model=HealthCheck)
    async def health_check():
        """Проверка состояния сервиса"""
        return HealthCheck(
            status="healthy" if app.state.services.initialized else "starting",
            service=settings.APP_NAME,
            version=settings.VERSION,
            timestamp=time.time()
        )

    return app

# ===== ЗАПУСК ПРИЛОЖЕНИЯ =====

def run_dashboard(
    host: str = None,
    port: int = None,
    reload: bool = False
):
    """Запуск сервиса"""
    settings = get_settings()
    settings.setup_logging()

    host = host or settings.DASHBOARD_HOST
    port = port or settings.DASHBOARD_PORT

    logger.info(f"🌐 Запуск {settings.APP_NAME} на http://{host}:{port}")
    logger.info(f"🔧 Режим отладки: {settings.DEBUG}")

    try:
        uvicorn.run(
            "dashboard.app:create_app",
            factory=True,
            host=host,
            port=port,
            reload=reload,
            log_level="debug" if settings.DEBUG else "info",
            access_log=settings.DEBUG,
            server_header=False
        )
    except KeyboardInterrupt:
        logger.info("👋 Сервис остановлен")

if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description='Запуск Focusboard API')
    parser.add_argument('--host', default=None, help='Host для запуска')
    parser.add_argument('--port', type=int, default=None, help='Port для запуска')
    parser.add_argument('--reload', action='store_true', help='Автоперезагрузка')

    args = parser.parse_args()

    run_dashboard(host=args.host, port=args.port, reload=args.reload)
