# database/migrations.py

from sqlalchemy import (
    BigInteger, Boolean, Column, Integer, MetaData, String, Table, Text
)
from sqlalchemy.ext.asyncio import AsyncEngine

from models.settings import DEFAULT_ACCENT

metadata = MetaData()

# sqlite_autoincrement: идентификаторы не переиспользуются после удаления
tasks_table = Table(
    'tasks', metadata,
    Column('id', Integer, primary_key=True, autoincrement=True),
    Column('user_id', String(255), nullable=False, index=True),
    Column('title', Text, nullable=False),
    Column('done', Boolean, nullable=False, default=False),
    Column('created_at', BigInteger, nullable=False),
    sqlite_autoincrement=True
)

events_table = Table(
    'events', metadata,
    Column('id', Integer, primary_key=True, autoincrement=True),
    Column('user_id', String(255), nullable=False, index=True),
    Column('title', Text, nullable=False),
    Column('start', BigInteger, nullable=False),
    Column('end', BigInteger, nullable=False),
    sqlite_autoincrement=True
)

settings_table = Table(
    'settings', metadata,
    Column('user_id', String(255), primary_key=True),
    Column('accent', String(7), nullable=False, default=DEFAULT_ACCENT),
    Column('dark', Boolean, nullable=False, default=False)
)

# Пишет внешний провайдер сессий, читает только Session Gate
sessions_table = Table(
    'sessions', metadata,
    Column('token', String(255), primary_key=True),
    Column('user_id', String(255), nullable=False, index=True),
    Column('expires_at', BigInteger, nullable=False)
)

async def ensure_schema(engine: AsyncEngine) -> None:
    """Создаёт отсутствующие таблицы (CREATE TABLE IF NOT EXISTS)"""
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
