#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Focusboard - API Client
HTTP клиент к API дашборда на aiohttp

Автор: AI Assistant
Версия: 1.0.0
Дата: 2025-06-12
"""

import asyncio
import json
import logging
from typing import Any, Dict, List, Optional

import aiohttp

from models import Event, Task, UserSettings

logger = logging.getLogger(__name__)

class ApiError(Exception):
    """Ошибка вызова API; status 0 - сервер недоступен"""

    def __init__(self, status: int, message: str):
        super().__init__(f"{status}: {message}")
        self.status = status
        self.message = message

    @property
    def transient(self) -> bool:
        """Имеет ли смысл повторить запрос"""
        return self.status == 0 or self.status >= 500

    @property
    def unauthenticated(self) -> bool:
        return self.status == 401

class DashboardApiClient:
    """Клиент CRUD API: задачи, события, настройки"""

    def __init__(self, base_url: str, token: Optional[str] = None, timeout: float = 10.0,
                 session: Optional[aiohttp.ClientSession] = None):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "DashboardApiClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def _request(self, method: str, path: str, *, payload: Any = None,
                       params: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            async with self._get_session().request(
                method, url, json=payload, params=params, headers=self._headers()
            ) as response:
                text = await response.text()
                status = response.status
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning(f"⚠️ {method} {path}: сервер недоступен ({e})")
            raise ApiError(0, str(e) or "connection failed") from e

        try:
            data = json.loads(text) if text else None
        except ValueError:
            raise ApiError(status, "invalid JSON response")

        if status >= 400:
            message = data.get("error") if isinstance(data, dict) else None
            raise ApiError(status, message or f"HTTP {status}")
        return data

    # ===== ЗАДАЧИ =====

    async def list_tasks(self) -> List[Task]:
        rows = await self._request("GET", "/api/tasks")
        return [Task.from_dict(row) for row in rows or []]

    async def create_task(self, title: str) -> Task:
        return Task.from_dict(await self._request("POST", "/api/tasks", payload={"title": title}))

    async def update_task(self, task_id: int, title: Optional[str] = None,
                          done: Optional[bool] = None) -> None:
        payload = {"id": task_id}
        if title is not None:
            payload["title"] = title
        if done is not None:
            payload["done"] = done
        await self._request("PUT", "/api/tasks", payload=payload)

    async def delete_task(self, task_id: int) -> None:
        await self._request("DELETE", "/api/tasks", params={"id": str(task_id)})

    # ===== СОБЫТИЯ =====

    async def list_events(self) -> List[Event]:
        rows = await self._request("GET", "/api/events")
        return [Event.from_dict(row) for row in rows or []]

    async def create_event(self, title: str, start: int, end: int) -> Event:
        data = await self._request(
            "POST", "/api/events", payload={"title": title, "start": start, "end": end}
        )
        return Event.from_dict(data)

    async def update_event(self, event_id: int, title: Optional[str] = None,
                           start: Optional[int] = None, end: Optional[int] = None) -> None:
        payload = {"id": event_id}
        if title is not None:
            payload["title"] = title
        if start is not None:
            payload["start"] = start
        if end is not None:
            payload["end"] = end
        await self._request("PUT", "/api/events", payload=payload)

    async def delete_event(self, event_id: int) -> None:
        await self._request("DELETE", "/api/events", params={"id": str(event_id)})

    # ===== НАСТРОЙКИ И СЕССИЯ =====

    async def get_settings(self) -> UserSettings:
        return UserSettings.from_dict(await self._request("GET", "/api/settings"))

    async def save_settings(self, accent: str, dark: bool) -> None:
        await self._request("POST", "/api/settings", payload={"accent": accent, "dark": dark})

    async def sign_out(self) -> None:
        await self._request("POST", "/api/sign-out")
