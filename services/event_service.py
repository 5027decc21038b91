# services/event_service.py

import logging
from typing import List, Optional

from dashboard.errors import ValidationError
from database.manager import RecordStore
from models import Event, Identity
from services.session_gate import require_identity
from utils.validators import (
    is_valid_epoch_ms, is_valid_event_range, is_valid_title, normalize_title
)

logger = logging.getLogger(__name__)

class EventService:
    """События календаря пользователя"""

    def __init__(self, store: RecordStore):
        self.store = store

    async def list(self, identity: Optional[Identity]) -> List[Event]:
        """События владельца по возрастанию начала"""
        identity = require_identity(identity)
        return await self.store.list_events(identity.user_id)

    async def create(self, identity: Optional[Identity], title: Optional[str],
                     start: Optional[int], end: Optional[int]) -> Event:
        identity = require_identity(identity)
        if not is_valid_title(title):
            raise ValidationError("title required")
        if not is_valid_epoch_ms(start) or not is_valid_epoch_ms(end):
            raise ValidationError("start and end required")
        if not is_valid_event_range(start, end):
            raise ValidationError("start must be before end")

        event = await self.store.insert_event(identity.user_id, normalize_title(title), start, end)
        logger.info(f"📅 Событие {event.id} создано пользователем {identity.user_id}")
        return event

    async def update(self, identity: Optional[Identity], event_id: int,
                     title: Optional[str] = None, start: Optional[int] = None,
                     end: Optional[int] = None) -> bool:
        identity = require_identity(identity)
        if title is not None:
            if not is_valid_title(title):
                raise ValidationError("title must not be empty")
            title = normalize_title(title)

        for value in (start, end):
            if value is not None and not is_valid_epoch_ms(value):
                raise ValidationError("start and end must be integers")
        if start is not None and end is not None and not is_valid_event_range(start, end):
            raise ValidationError("start must be before end")

        affected = await self.store.update_event(identity.user_id, event_id, title=title, start=start, end=end)
        if not affected and (start is not None or end is not None):
            # UPDATE не сработал: либо записи нет у владельца, либо слитый интервал пуст
            if await self.store.get_event(identity.user_id, event_id) is not None:
                raise ValidationError("start must be before end")
        return True

    async def delete(self, identity: Optional[Identity], event_id: int) -> bool:
        identity = require_identity(identity)
        affected = await self.store.delete_event(identity.user_id, event_id)
        if affected:
            logger.info(f"🗑 Событие {event_id} удалено пользователем {identity.user_id}")
        return True
