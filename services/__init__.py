# services/__init__.py

"""
Модуль сервисов Focusboard

Сервисы записей (задачи, события, настройки) поверх общего хранилища,
проверка сессий, таймер и расчёт метрик.
"""

import logging

from database.manager import RecordStore
from .session_gate import SessionGate
from .task_service import TaskService
from .event_service import EventService
from .settings_service import SettingsService

logger = logging.getLogger(__name__)

class ServiceManager:
    """
    Менеджер сервисов дашборда

    Обеспечивает:
    - Общее хранилище для всех фасадов
    - Инициализацию схемы при старте
    - Корректное закрытие соединений
    """

    def __init__(self, store: RecordStore):
        self.store = store
        self.session_gate = SessionGate(store)
        self.tasks = TaskService(store)
        self.events = EventService(store)
        self.settings = SettingsService(store)
        self.initialized = False

    async def initialize(self) -> None:
        logger.info("🔧 Инициализация сервисов...")
        await self.store.initialize()
        self.initialized = True
        logger.info("✅ Все сервисы инициализированы")

    async def close(self) -> None:
        logger.info("🔄 Закрытие сервисов...")
        await self.store.dispose()
        self.initialized = False
        logger.info("✅ Сервисы закрыты")

__all__ = [
    'ServiceManager',
    'SessionGate',
    'TaskService',
    'EventService',
    'SettingsService'
]
