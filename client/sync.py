#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Focusboard - Client Sync Layer
Локальный снимок задач/событий/настроек с оптимистичными изменениями

Каждое изменение сначала применяется к снимку, затем уходит в API.
Изменение помечается correlation id и порядковым номером сущности:
временные ошибки повторяются с экспоненциальной задержкой, окончательная
ошибка откатывает локальное изменение (если его не перекрыло более новое)
и поднимается как SyncError.

Автор: AI Assistant
Версия: 1.0.0
Дата: 2025-06-12
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass, field, replace
from datetime import date, tzinfo
from typing import Any, Awaitable, Callable, Dict, List, Optional, Set, Tuple, Union

from client.api import ApiError, DashboardApiClient
from client.cache import SettingsCache
from client.config import ClientSettings
from models import DEFAULT_ACCENT, Event, Task, TimerState
from services.metrics import DashboardMetrics, compute_metrics
from services.timer_service import TimerRunner
from utils.datetime_utils import now_ms, same_day
from utils.validators import (
    is_valid_accent, is_valid_event_range, is_valid_title, normalize_title
)

logger = logging.getLogger(__name__)

TASK = "task"
EVENT = "event"
SETTINGS = "settings"

Record = Union[Task, Event]
EntityKey = Tuple[str, int]

@dataclass
class SyncFailure:
    """Окончательно неудавшееся изменение"""
    correlation_id: str
    action: str
    status: int
    message: str

class SyncError(Exception):
    """Изменение не принято сервером и откатано локально"""

    def __init__(self, failure: SyncFailure):
        super().__init__(f"{failure.action} [{failure.correlation_id}] failed: {failure.message}")
        self.failure = failure

    @property
    def correlation_id(self) -> str:
        return self.failure.correlation_id

@dataclass
class DashboardState:
    """Снимок данных вошедшего пользователя"""
    tasks: List[Task] = field(default_factory=list)
    events: List[Event] = field(default_factory=list)
    accent: str = DEFAULT_ACCENT
    dark: bool = False
    selected_day: Optional[date] = field(default_factory=date.today)
    loaded: bool = False
    errors: List[SyncFailure] = field(default_factory=list)

    def records(self, kind: str) -> list:
        return self.tasks if kind == TASK else self.events

    def index_of(self, kind: str, record_id: int) -> Optional[int]:
        for index, record in enumerate(self.records(kind)):
            if record.id == record_id:
                return index
        return None

    def clear(self) -> None:
        self.tasks = []
        self.events = []
        self.accent = DEFAULT_ACCENT
        self.dark = False
        self.loaded = False
        self.errors = []

def events_on_day(events: List[Event], day: Optional[date], tz: Optional[tzinfo] = None) -> List[Event]:
    """События, начинающиеся в указанный календарный день (локальная зона)"""
    if day is None:
        return []
    return [event for event in events if same_day(event.start, day, tz)]

class SyncClient:
    """Владелец снимка и таймера одного клиента"""

    def __init__(self, api: DashboardApiClient, cache: Optional[SettingsCache] = None,
                 timer: Optional[TimerRunner] = None, retries: int = 2,
                 backoff_base: float = 0.5,
                 sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
                 tz: Optional[tzinfo] = None):
        self.api = api
        self.cache = cache
        self.timer = timer or TimerRunner()
        self.retries = retries
        self.backoff_base = backoff_base
        self.tz = tz
        self._sleep = sleep

        self.state = DashboardState()
        self._sequence: Dict[EntityKey, int] = {}
        self._deferred: Dict[EntityKey, Dict[str, Any]] = {}
        self._cancelled: Set[EntityKey] = set()
        self._next_temp_id = -1

        self._apply_cached_settings()

    @classmethod
    def from_settings(cls, settings: ClientSettings) -> "SyncClient":
        api = DashboardApiClient(
            settings.DASHBOARD_URL,
            token=settings.SESSION_TOKEN,
            timeout=settings.REQUEST_TIMEOUT
        )
        timer = TimerRunner(TimerState.initial(settings.FOCUS_MINUTES, settings.BREAK_MINUTES))
        return cls(
            api,
            cache=SettingsCache(settings.CACHE_DIR),
            timer=timer,
            retries=settings.CLIENT_RETRIES,
            backoff_base=settings.CLIENT_BACKOFF_BASE
        )

    # ===== ЗАГРУЗКА =====

    async def load(self) -> DashboardState:
        """Параллельная загрузка задач, событий и настроек"""
        tasks, events, settings = await asyncio.gather(
            self.api.list_tasks(),
            self.api.list_events(),
            self.api.get_settings(),
            return_exceptions=True
        )
        results = (tasks, events, settings)

        for result in results:
            if isinstance(result, ApiError) and result.unauthenticated:
                raise result
        for result in results:
            if isinstance(result, BaseException) and not isinstance(result, ApiError):
                raise result

        if isinstance(tasks, ApiError):
            self._record_failure("load_tasks", tasks)
        else:
            self.state.tasks = list(tasks)

        if isinstance(events, ApiError):
            self._record_failure("load_events", events)
        else:
            self.state.events = list(events)

        if isinstance(settings, ApiError):
            self._record_failure("load_settings", settings)
        else:
            self.state.accent = settings.accent
            self.state.dark = settings.dark
            self._mirror_settings()

        self.state.loaded = True
        logger.info(f"📊 Загружено задач: {len(self.state.tasks)}, событий: {len(self.state.events)}")
        return self.state

    # ===== ЗАДАЧИ =====

    async def add_task(self, title: str) -> Optional[Task]:
        if not is_valid_title(title):
            return None
        title = normalize_title(title)
        placeholder = Task(id=self._allocate_temp_id(), user_id="", title=title,
                           done=False, created_at=now_ms())
        return await self._create(TASK, placeholder, lambda: self.api.create_task(title))

    async def update_task(self, task_id: int, title: Optional[str] = None,
                          done: Optional[bool] = None) -> Task:
        if title is not None:
            if not is_valid_title(title):
                raise ValueError("title must not be empty")
            title = normalize_title(title)
        return await self._update(TASK, task_id, {"title": title, "done": done})

    async def toggle_task(self, task_id: int) -> Task:
        index = self._require_index(TASK, task_id)
        return await self.update_task(task_id, done=not self.state.tasks[index].done)

    async def remove_task(self, task_id: int) -> None:
        await self._delete(TASK, task_id)

    # ===== СОБЫТИЯ =====

    async def add_event(self, title: str, start: int, end: int) -> Optional[Event]:
        if not is_valid_title(title):
            raise ValueError("title required")
        if not is_valid_event_range(start, end):
            raise ValueError("start must be before end")
        title = normalize_title(title)
        placeholder = Event(id=self._allocate_temp_id(), user_id="", title=title, start=start, end=end)
        return await self._create(EVENT, placeholder, lambda: self.api.create_event(title, start, end))

    async def update_event(self, event_id: int, title: Optional[str] = None,
                           start: Optional[int] = None, end: Optional[int] = None) -> Event:
        index = self._require_index(EVENT, event_id)
        current = self.state.events[index]
        if title is not None:
            if not is_valid_title(title):
                raise ValueError("title must not be empty")
            title = normalize_title(title)
        merged_start = start if start is not None else current.start
        merged_end = end if end is not None else current.end
        if not is_valid_event_range(merged_start, merged_end):
            raise ValueError("start must be before end")
        return await self._update(EVENT, event_id, {"title": title, "start": start, "end": end})

    async def remove_event(self, event_id: int) -> None:
        await self._delete(EVENT, event_id)

    def select_day(self, day: Optional[date]) -> List[Event]:
        self.state.selected_day = day
        return self.selected_day_events

    @property
    def selected_day_events(self) -> List[Event]:
        return events_on_day(self.state.events, self.state.selected_day, self.tz)

    # ===== НАСТРОЙКИ =====

    async def save_settings(self, accent: Optional[str] = None, dark: Optional[bool] = None) -> None:
        next_accent = accent if accent is not None else self.state.accent
        next_dark = dark if dark is not None else self.state.dark
        if not is_valid_accent(next_accent):
            raise ValueError("accent must be a #rrggbb colour")

        before = (self.state.accent, self.state.dark)
        self.state.accent, self.state.dark = next_accent, next_dark
        self._mirror_settings()

        key = (SETTINGS, 0)
        seq = self._bump(key)

        def revert() -> None:
            self.state.accent, self.state.dark = before
            self._mirror_settings()

        await self._commit(
            "save_settings", key, seq,
            lambda: self.api.save_settings(next_accent, next_dark),
            revert
        )

    # ===== МЕТРИКИ И СЕССИЯ =====

    def metrics(self, now: Optional[int] = None) -> DashboardMetrics:
        return compute_metrics(self.state.tasks, self.state.events, self.timer.state, now)

    async def sign_out(self) -> None:
        """Отзыв сессии; снимок и таймер сбрасываются в любом случае"""
        try:
            await self.api.sign_out()
        finally:
            await self.timer.stop_ticking()
            self.timer.reinitialize()
            self.state.clear()
            self._sequence.clear()
            self._deferred.clear()
            self._cancelled.clear()
            logger.info("👋 Выход выполнен, локальные данные очищены")

    async def close(self) -> None:
        await self.timer.stop_ticking()
        await self.api.close()

    # ===== ВНУТРЕННЕЕ: СНИМОК =====

    def _apply_cached_settings(self) -> None:
        if self.cache is None:
            return
        cached = self.cache.load()
        if not cached:
            return
        if is_valid_accent(cached.get("accent")):
            self.state.accent = cached["accent"]
        if "dark" in cached:
            self.state.dark = bool(cached["dark"])

    def _mirror_settings(self) -> None:
        if self.cache is not None:
            self.cache.save(self.state.accent, self.state.dark)

    def _allocate_temp_id(self) -> int:
        temp_id = self._next_temp_id
        self._next_temp_id -= 1
        return temp_id

    def _bump(self, key: EntityKey) -> int:
        seq = self._sequence.get(key, 0) + 1
        self._sequence[key] = seq
        return seq

    def _is_latest(self, key: EntityKey, seq: int) -> bool:
        return self._sequence.get(key) == seq

    def _require_index(self, kind: str, record_id: int) -> int:
        index = self.state.index_of(kind, record_id)
        if index is None:
            raise KeyError(f"{kind} {record_id} is not in the snapshot")
        return index

    def _insert(self, kind: str, record: Record, position: int = 0) -> None:
        records = self.state.records(kind)
        if kind == EVENT:
            # порядок событий - по началу, как при загрузке
            position = len(records)
            for index, current in enumerate(records):
                if (current.start, current.id) > (record.start, record.id):
                    position = index
                    break
        records.insert(min(position, len(records)), record)

    def _put(self, kind: str, record_id: int, record: Record) -> None:
        """Заменить запись record_id на record (id может смениться)"""
        index = self.state.index_of(kind, record_id)
        if index is None:
            return
        records = self.state.records(kind)
        if kind == EVENT:
            records.pop(index)
            self._insert(kind, record)
        else:
            records[index] = record

    def _remove(self, kind: str, record_id: int) -> None:
        index = self.state.index_of(kind, record_id)
        if index is not None:
            self.state.records(kind).pop(index)

    # ===== ВНУТРЕННЕЕ: ОТПРАВКА =====

    def _record_failure(self, action: str, error: ApiError,
                        correlation_id: Optional[str] = None) -> SyncFailure:
        failure = SyncFailure(
            correlation_id=correlation_id or uuid.uuid4().hex,
            action=action,
            status=error.status,
            message=error.message
        )
        self.state.errors.append(failure)
        logger.error(f"❌ {action} [{failure.correlation_id}]: {error.status} {error.message}")
        return failure

    async def _send(self, action: str, correlation_id: str, call: Callable[[], Awaitable[Any]]) -> Any:
        attempt = 0
        while True:
            try:
                return await call()
            except ApiError as e:
                if not e.transient or attempt >= self.retries:
                    raise
                delay = self.backoff_base * (2 ** attempt)
                attempt += 1
                logger.warning(
                    f"🔁 {action} [{correlation_id}]: повтор {attempt}/{self.retries} "
                    f"через {delay:.2f}s ({e.message})"
                )
                await self._sleep(delay)

    async def _commit(self, action: str, key: EntityKey, seq: int,
                      call: Callable[[], Awaitable[Any]], revert: Callable[[], None],
                      always_revert: bool = False) -> Any:
        correlation_id = uuid.uuid4().hex
        logger.debug(f"➡️ {action} [{correlation_id}] seq={seq}")
        try:
            return await self._send(action, correlation_id, call)
        except ApiError as e:
            # откат только если изменение не перекрыто более новым
            if always_revert or self._is_latest(key, seq):
                revert()
            raise SyncError(self._record_failure(action, e, correlation_id)) from e

    def _api_update(self, kind: str) -> Callable[..., Awaitable[None]]:
        return self.api.update_task if kind == TASK else self.api.update_event

    def _api_delete(self, kind: str) -> Callable[[int], Awaitable[None]]:
        return self.api.delete_task if kind == TASK else self.api.delete_event

    async def _create(self, kind: str, placeholder: Record,
                      call: Callable[[], Awaitable[Record]]) -> Optional[Record]:
        key = (kind, placeholder.id)
        seq = self._bump(key)
        self._insert(kind, placeholder)

        try:
            created = await self._commit(
                f"create_{kind}", key, seq, call,
                lambda: self._remove(kind, placeholder.id),
                always_revert=True
            )
        except SyncError:
            self._deferred.pop(key, None)
            if key in self._cancelled:
                # запись уже удалена пользователем: сообщать не о чем
                self._cancelled.discard(key)
                return None
            raise

        if key in self._cancelled:
            # удалена локально, пока создание было в пути
            self._cancelled.discard(key)
            self._deferred.pop(key, None)
            await self._delete_created(kind, created)
            return None

        deferred = self._deferred.pop(key, None)
        local = replace(created, **deferred) if deferred else created
        self._put(kind, placeholder.id, local)
        if deferred:
            await self._send_update(kind, local.id, deferred, previous=created)
        return local

    async def _delete_created(self, kind: str, created: Record) -> None:
        key = (kind, created.id)
        seq = self._bump(key)
        await self._commit(
            f"delete_{kind}", key, seq,
            lambda: self._api_delete(kind)(created.id),
            lambda: self._insert(kind, created)
        )

    async def _update(self, kind: str, record_id: int, changes: Dict[str, Any]) -> Record:
        changes = {name: value for name, value in changes.items() if value is not None}
        index = self._require_index(kind, record_id)
        before = self.state.records(kind)[index]
        if not changes:
            return before

        after = replace(before, **changes)
        self._put(kind, record_id, after)

        if record_id < 0:
            # запись ещё создаётся: изменения уйдут после получения id
            self._bump((kind, record_id))
            self._deferred.setdefault((kind, record_id), {}).update(changes)
            return after

        await self._send_update(kind, record_id, changes, previous=before)
        return after

    async def _send_update(self, kind: str, record_id: int, changes: Dict[str, Any],
                           previous: Record) -> None:
        key = (kind, record_id)
        seq = self._bump(key)

        def revert() -> None:
            index = self.state.index_of(kind, record_id)
            if index is None:
                return
            current = self.state.records(kind)[index]
            restored = replace(current, **{name: getattr(previous, name) for name in changes})
            self._put(kind, record_id, restored)

        await self._commit(
            f"update_{kind}", key, seq,
            lambda: self._api_update(kind)(record_id, **changes),
            revert
        )

    async def _delete(self, kind: str, record_id: int) -> None:
        index = self.state.index_of(kind, record_id)
        if index is None:
            return
        removed = self.state.records(kind).pop(index)
        key = (kind, record_id)
        seq = self._bump(key)

        if record_id < 0:
            self._cancelled.add(key)
            return

        def revert() -> None:
            if self.state.index_of(kind, record_id) is None:
                self._insert(kind, removed, position=index)

        await self._commit(
            f"delete_{kind}", key, seq,
            lambda: self._api_delete(kind)(record_id),
            revert
        )
