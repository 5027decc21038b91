# services/session_gate.py

import logging
from typing import Optional, Protocol

from dashboard.errors import Unauthenticated
from models import Identity

logger = logging.getLogger(__name__)

class IdentityProvider(Protocol):
    """Внешний провайдер сессий: знает, кому принадлежит токен"""

    async def find_session_owner(self, token: str) -> Optional[str]:
        ...

    async def revoke_session(self, token: str) -> None:
        ...

def require_identity(identity: Optional[Identity]) -> Identity:
    """Первая проверка любой операции над записями"""
    if identity is None or not identity.user_id:
        raise Unauthenticated()
    return identity

class SessionGate:
    """Проверка учётных данных запроса.

    Остальные компоненты доверяют результату и повторно токен не проверяют.
    """

    def __init__(self, provider: IdentityProvider):
        self.provider = provider

    async def resolve(self, credentials: Optional[str]) -> Optional[Identity]:
        if not credentials:
            return None
        user_id = await self.provider.find_session_owner(credentials)
        if not user_id:
            logger.debug("🔒 Сессия не найдена или истекла")
            return None
        return Identity(user_id=user_id)

    async def require(self, credentials: Optional[str]) -> Identity:
        return require_identity(await self.resolve(credentials))

    async def revoke(self, credentials: Optional[str]) -> None:
        if credentials:
            await self.provider.revoke_session(credentials)
            logger.info("👋 Сессия отозвана")
