"""
Таймер фокус/перерыв

transition() - чистая функция (state, command) -> state без сети и времени;
TimerRunner подаёт ей тики из явного источника.
"""

import asyncio
import logging
from typing import AsyncIterable, AsyncIterator, Callable, Optional

from models import TimerCommand, TimerPhase, TimerState
from utils.validators import (
    BREAK_MINUTES_RANGE, FOCUS_MINUTES_RANGE, is_valid_minutes
)

logger = logging.getLogger(__name__)

def _to_idle(state: TimerState) -> TimerState:
    return state.evolve(phase=TimerPhase.IDLE, seconds_left=state.focus_minutes * 60)

def _tick(state: TimerState) -> TimerState:
    if state.phase not in (TimerPhase.RUNNING, TimerPhase.BREAK):
        return state

    seconds_left = state.seconds_left - 1
    if seconds_left > 0:
        return state.evolve(seconds_left=seconds_left)

    if state.phase == TimerPhase.RUNNING:
        return state.evolve(
            phase=TimerPhase.BREAK,
            seconds_left=state.break_minutes * 60,
            completed_sessions=state.completed_sessions + 1
        )
    return _to_idle(state)

def transition(state: TimerState, command: TimerCommand) -> TimerState:
    """Один шаг автомата; недопустимая в текущей фазе команда ничего не меняет"""
    phase = state.phase

    if command == TimerCommand.TICK:
        return _tick(state)

    if command == TimerCommand.START and phase == TimerPhase.IDLE:
        return state.evolve(phase=TimerPhase.RUNNING, seconds_left=state.focus_minutes * 60)

    if command == TimerCommand.PAUSE and phase == TimerPhase.RUNNING:
        return state.evolve(phase=TimerPhase.PAUSED)

    if command == TimerCommand.RESUME and phase == TimerPhase.PAUSED:
        return state.evolve(phase=TimerPhase.RUNNING)

    if command == TimerCommand.RESET and phase in (TimerPhase.RUNNING, TimerPhase.PAUSED, TimerPhase.BREAK):
        return _to_idle(state)

    if command == TimerCommand.FINISH and phase == TimerPhase.BREAK:
        return _to_idle(state)

    return state

def configure(state: TimerState, focus_minutes: Optional[int] = None,
              break_minutes: Optional[int] = None) -> TimerState:
    """Смена длительностей.

    В idle новая длительность фокуса сразу становится остатком; в остальных
    фазах текущий отсчёт не трогаем.
    """
    if focus_minutes is not None and not is_valid_minutes(focus_minutes, FOCUS_MINUTES_RANGE):
        raise ValueError(f"focus_minutes must be 15-60 in steps of 5, got {focus_minutes!r}")
    if break_minutes is not None and not is_valid_minutes(break_minutes, BREAK_MINUTES_RANGE):
        raise ValueError(f"break_minutes must be 5-30 in steps of 5, got {break_minutes!r}")

    if break_minutes is not None:
        state = state.evolve(break_minutes=break_minutes)
    if focus_minutes is not None:
        state = state.evolve(focus_minutes=focus_minutes)
        if state.phase == TimerPhase.IDLE:
            state = state.evolve(seconds_left=focus_minutes * 60)
    return state

async def every_second(interval: float = 1.0) -> AsyncIterator[None]:
    """Источник тиков реального времени"""
    while True:
        await asyncio.sleep(interval)
        yield None

class TimerRunner:
    """Владелец состояния таймера одного клиента"""

    def __init__(self, state: Optional[TimerState] = None,
                 listener: Optional[Callable[[TimerState], None]] = None):
        self._state = state or TimerState.initial()
        self.listener = listener
        self._ticker: Optional[asyncio.Task] = None

    @property
    def state(self) -> TimerState:
        return self._state

    def dispatch(self, command: TimerCommand) -> TimerState:
        previous = self._state
        self._state = transition(previous, command)
        if self._state.phase != previous.phase:
            logger.info(f"⏰ Таймер: {previous.phase.value} -> {self._state.phase.value}")
        if self.listener and self._state != previous:
            self.listener(self._state)
        return self._state

    def configure(self, focus_minutes: Optional[int] = None,
                  break_minutes: Optional[int] = None) -> TimerState:
        self._state = configure(self._state, focus_minutes, break_minutes)
        if self.listener:
            self.listener(self._state)
        return self._state

    def start(self) -> TimerState:
        return self.dispatch(TimerCommand.START)

    def pause(self) -> TimerState:
        return self.dispatch(TimerCommand.PAUSE)

    def resume(self) -> TimerState:
        return self.dispatch(TimerCommand.RESUME)

    def reset(self) -> TimerState:
        return self.dispatch(TimerCommand.RESET)

    def finish(self) -> TimerState:
        return self.dispatch(TimerCommand.FINISH)

    def reinitialize(self) -> TimerState:
        """Новое состояние для нового владельца (выход из аккаунта)"""
        self._state = TimerState.initial(self._state.focus_minutes, self._state.break_minutes)
        if self.listener:
            self.listener(self._state)
        return self._state

    async def run(self, ticks: AsyncIterable) -> None:
        async for _ in ticks:
            self.dispatch(TimerCommand.TICK)

    def start_ticking(self, ticks: Optional[AsyncIterable] = None) -> asyncio.Task:
        if self.is_ticking():
            return self._ticker
        self._ticker = asyncio.create_task(self.run(ticks if ticks is not None else every_second()))
        return self._ticker

    def is_ticking(self) -> bool:
        return self._ticker is not None and not self._ticker.done()

    async def stop_ticking(self) -> None:
        if self._ticker is None:
            return
        ticker, self._ticker = self._ticker, None
        ticker.cancel()
        try:
            await ticker
        except asyncio.CancelledError:
            logger.debug("⏹️ Источник тиков остановлен")
