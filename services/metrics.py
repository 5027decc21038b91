# services/metrics.py

import math
from dataclasses import dataclass, asdict
from typing import Iterable, Optional, Sequence

from models import Event, Task, TimerState
from utils.datetime_utils import now_ms

@dataclass
class DashboardMetrics:
    total_tasks: int
    completed_tasks: int
    completion_rate: int
    upcoming_count: int
    focus_minutes_today: int

    def to_dict(self) -> dict:
        return asdict(self)

def completed_tasks(tasks: Iterable[Task]) -> int:
    return sum(1 for task in tasks if task.done)

def completion_rate(tasks: Sequence[Task]) -> int:
    """Процент выполненных задач, половина округляется вверх"""
    if not tasks:
        return 0
    return int(math.floor(completed_tasks(tasks) / len(tasks) * 100 + 0.5))

def upcoming_count(events: Iterable[Event], now: Optional[int] = None) -> int:
    now = now_ms() if now is None else now
    return sum(1 for event in events if event.start > now)

def focus_minutes_today(timer: TimerState) -> int:
    # приближение: сессии текущего клиента на длительность фокуса
    return timer.completed_sessions * timer.focus_minutes

def compute_metrics(tasks: Sequence[Task], events: Sequence[Event], timer: TimerState,
                    now: Optional[int] = None) -> DashboardMetrics:
    return DashboardMetrics(
        total_tasks=len(tasks),
        completed_tasks=completed_tasks(tasks),
        completion_rate=completion_rate(tasks),
        upcoming_count=upcoming_count(events, now),
        focus_minutes_today=focus_minutes_today(timer),
    )
