# services/task_service.py

import logging
from typing import List, Optional

from dashboard.errors import ValidationError
from database.manager import RecordStore
from models import Identity, Task
from services.session_gate import require_identity
from utils.validators import is_valid_title, normalize_title

logger = logging.getLogger(__name__)

class TaskService:
    """Задачи пользователя: список, создание, частичное обновление, удаление"""

    def __init__(self, store: RecordStore):
        self.store = store

    async def list(self, identity: Optional[Identity]) -> List[Task]:
        """Задачи владельца, новые первыми"""
        identity = require_identity(identity)
        return await self.store.list_tasks(identity.user_id)

    async def create(self, identity: Optional[Identity], title: Optional[str]) -> Task:
        identity = require_identity(identity)
        if not is_valid_title(title):
            raise ValidationError("title required")

        task = await self.store.insert_task(identity.user_id, normalize_title(title))
        logger.info(f"📝 Задача {task.id} создана пользователем {identity.user_id}")
        return task

    async def update(self, identity: Optional[Identity], task_id: int,
                     title: Optional[str] = None, done: Optional[bool] = None) -> bool:
        """Частичное обновление: отсутствующие поля не меняются.

        Чужая или несуществующая задача - успешный no-op.
        """
        identity = require_identity(identity)
        if title is not None:
            if not is_valid_title(title):
                raise ValidationError("title must not be empty")
            title = normalize_title(title)

        affected = await self.store.update_task(identity.user_id, task_id, title=title, done=done)
        if not affected:
            logger.debug(f"Задача {task_id} не изменена для {identity.user_id}")
        return True

    async def delete(self, identity: Optional[Identity], task_id: int) -> bool:
        identity = require_identity(identity)
        affected = await self.store.delete_task(identity.user_id, task_id)
        if affected:
            logger.info(f"🗑 Задача {task_id} удалена пользователем {identity.user_id}")
        return True
