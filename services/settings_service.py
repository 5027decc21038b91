# services/settings_service.py

import logging
from typing import Optional

from dashboard.errors import ValidationError
from database.manager import RecordStore
from models import Identity, UserSettings
from services.session_gate import require_identity
from utils.validators import is_valid_accent

logger = logging.getLogger(__name__)

class SettingsService:
    """Настройки отображения: одна запись на владельца, только upsert"""

    def __init__(self, store: RecordStore):
        self.store = store

    async def get(self, identity: Optional[Identity]) -> UserSettings:
        """Сохранённые настройки или значения по умолчанию (не сохраняются)"""
        identity = require_identity(identity)
        stored = await self.store.get_settings(identity.user_id)
        return stored or UserSettings(user_id=identity.user_id)

    async def upsert(self, identity: Optional[Identity], accent: Optional[str],
                     dark: Optional[bool] = False) -> bool:
        identity = require_identity(identity)
        if not is_valid_accent(accent):
            raise ValidationError("accent must be a #rrggbb colour")

        await self.store.upsert_settings(identity.user_id, accent.lower(), bool(dark))
        logger.info(f"🎨 Настройки сохранены для {identity.user_id}")
        return True
