#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Focusboard - Record Store
Хранилище задач, событий, настроек и сессий поверх SQLAlchemy (async)

Каждая мутация ограничена строками владельца: условие user_id входит в
WHERE любого UPDATE/DELETE, поэтому чужие записи невидимы и неизменяемы.

Автор: AI Assistant
Версия: 1.0.0
Дата: 2025-06-12
"""

import logging
import secrets
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from dashboard.errors import StorageUnavailable
from database.migrations import (
    ensure_schema, events_table, sessions_table, settings_table, tasks_table
)
from models import Event, Task, UserSettings
from utils.datetime_utils import now_ms

logger = logging.getLogger(__name__)

_UPSERT_DIALECTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}

def build_store_url(url: str, auth_token: Optional[str]) -> URL:
    """URL хранилища с подставленным токеном доступа.

    Для сетевых драйверов токен идёт в поле пароля, если его там ещё нет;
    локальный SQLite токен не использует.
    """
    parsed = make_url(url)
    if auth_token and parsed.get_backend_name() != "sqlite" and parsed.password is None:
        parsed = parsed.set(password=auth_token)
    return parsed

class RecordStore:
    """Долговременное хранилище записей, разделённых по владельцу"""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    @classmethod
    def from_url(cls, url: str, auth_token: Optional[str] = None, echo: bool = False) -> "RecordStore":
        engine = create_async_engine(
            build_store_url(url, auth_token),
            pool_pre_ping=True,
            echo=echo
        )
        return cls(engine)

    async def initialize(self) -> None:
        try:
            await ensure_schema(self.engine)
        except SQLAlchemyError as e:
            logger.error(f"❌ Не удалось подготовить схему: {e}")
            raise StorageUnavailable() from e
        logger.info("✅ Схема хранилища готова")

    async def dispose(self) -> None:
        await self.engine.dispose()

    @asynccontextmanager
    async def _begin(self) -> AsyncIterator[AsyncConnection]:
        try:
            async with self.engine.begin() as conn:
                yield conn
        except SQLAlchemyError as e:
            logger.error(f"❌ Ошибка хранилища: {e}")
            raise StorageUnavailable() from e

    # ===== ЗАДАЧИ =====

    async def list_tasks(self, owner: str) -> List[Task]:
        stmt = (
            select(tasks_table)
            .where(tasks_table.c.user_id == owner)
            .order_by(tasks_table.c.id.desc())
        )
        async with self._begin() as conn:
            result = await conn.execute(stmt)
            return [Task.from_dict(row) for row in result.mappings()]

    async def insert_task(self, owner: str, title: str) -> Task:
        created_at = now_ms()
        stmt = tasks_table.insert().values(
            user_id=owner, title=title, done=False, created_at=created_at
        )
        async with self._begin() as conn:
            result = await conn.execute(stmt)
            task_id = result.inserted_primary_key[0]
        return Task(id=task_id, user_id=owner, title=title, done=False, created_at=created_at)

    async def update_task(self, owner: str, task_id: int, title: Optional[str] = None,
                          done: Optional[bool] = None) -> int:
        values = {}
        if title is not None:
            values["title"] = title
        if done is not None:
            values["done"] = done
        return await self._update_owned(tasks_table, owner, task_id, values)

    async def delete_task(self, owner: str, task_id: int) -> int:
        return await self._delete_owned(tasks_table, owner, task_id)

    # ===== СОБЫТИЯ =====

    async def list_events(self, owner: str) -> List[Event]:
        stmt = (
            select(events_table)
            .where(events_table.c.user_id == owner)
            .order_by(events_table.c.start.asc(), events_table.c.id.asc())
        )
        async with self._begin() as conn:
            result = await conn.execute(stmt)
            return [Event.from_dict(row) for row in result.mappings()]

    async def get_event(self, owner: str, event_id: int) -> Optional[Event]:
        stmt = select(events_table).where(
            events_table.c.id == event_id,
            events_table.c.user_id == owner
        )
        async with self._begin() as conn:
            row = (await conn.execute(stmt)).mappings().first()
        return Event.from_dict(row) if row else None

    async def insert_event(self, owner: str, title: str, start: int, end: int) -> Event:
        stmt = events_table.insert().values(user_id=owner, title=title, start=start, end=end)
        async with self._begin() as conn:
            result = await conn.execute(stmt)
            event_id = result.inserted_primary_key[0]
        return Event(id=event_id, user_id=owner, title=title, start=start, end=end)

    async def update_event(self, owner: str, event_id: int, title: Optional[str] = None,
                           start: Optional[int] = None, end: Optional[int] = None) -> int:
        """Частичное обновление; 0 строк - нет записи или слитый интервал пуст.

        Условие start < end проверяется в том же UPDATE по сохранённым
        значениям, поэтому два параллельных патча не оставят start >= end.
        """
        values = {}
        guards = []
        if title is not None:
            values["title"] = title
        if start is not None:
            values["start"] = start
            if end is None:
                guards.append(events_table.c.end > start)
        if end is not None:
            values["end"] = end
            if start is None:
                guards.append(events_table.c.start < end)
        return await self._update_owned(events_table, owner, event_id, values, *guards)

    async def delete_event(self, owner: str, event_id: int) -> int:
        return await self._delete_owned(events_table, owner, event_id)

    # ===== НАСТРОЙКИ =====

    async def get_settings(self, owner: str) -> Optional[UserSettings]:
        stmt = select(settings_table).where(settings_table.c.user_id == owner)
        async with self._begin() as conn:
            row = (await conn.execute(stmt)).mappings().first()
        return UserSettings.from_dict(row) if row else None

    async def upsert_settings(self, owner: str, accent: str, dark: bool) -> None:
        insert = _UPSERT_DIALECTS.get(self.engine.dialect.name)
        if insert is None:
            raise StorageUnavailable(f"upsert is not supported by {self.engine.dialect.name}")

        stmt = insert(settings_table).values(user_id=owner, accent=accent, dark=dark)
        stmt = stmt.on_conflict_do_update(
            index_elements=[settings_table.c.user_id],
            set_={"accent": stmt.excluded.accent, "dark": stmt.excluded.dark}
        )
        async with self._begin() as conn:
            await conn.execute(stmt)

    # ===== СЕССИИ =====

    async def find_session_owner(self, token: str) -> Optional[str]:
        stmt = select(sessions_table.c.user_id).where(
            sessions_table.c.token == token,
            sessions_table.c.expires_at > now_ms()
        )
        async with self._begin() as conn:
            return (await conn.execute(stmt)).scalar_one_or_none()

    async def create_session(self, user_id: str, ttl_seconds: int = 3600,
                             token: Optional[str] = None) -> str:
        token = token or secrets.token_urlsafe(32)
        stmt = sessions_table.insert().values(
            token=token, user_id=user_id, expires_at=now_ms() + ttl_seconds * 1000
        )
        async with self._begin() as conn:
            await conn.execute(stmt)
        return token

    async def revoke_session(self, token: str) -> None:
        async with self._begin() as conn:
            await conn.execute(delete(sessions_table).where(sessions_table.c.token == token))

    # ===== ОБЩЕЕ =====

    async def _update_owned(self, table, owner: str, record_id: int, values: dict, *guards) -> int:
        if not values:
            return 0
        stmt = (
            update(table)
            .where(table.c.id == record_id, table.c.user_id == owner, *guards)
            .values(**values)
        )
        async with self._begin() as conn:
            result = await conn.execute(stmt)
            return result.rowcount

    async def _delete_owned(self, table, owner: str, record_id: int) -> int:
        stmt = delete(table).where(table.c.id == record_id, table.c.user_id == owner)
        async with self._begin() as conn:
            result = await conn.execute(stmt)
            return result.rowcount
