import asyncio

import pytest

from models import TimerCommand, TimerPhase, TimerState
from services.timer_service import TimerRunner, configure, transition


def _advance(state, ticks):
    for _ in range(ticks):
        state = transition(state, TimerCommand.TICK)
    return state


async def _ticks(count):
    for _ in range(count):
        yield None


def test_focus_session_rolls_into_break():
    state = transition(TimerState.initial(), TimerCommand.START)
    assert (state.phase, state.seconds_left) == (TimerPhase.RUNNING, 1500)

    almost = _advance(state, 1499)
    assert (almost.phase, almost.seconds_left) == (TimerPhase.RUNNING, 1)

    done = _advance(state, 1500)
    assert done.phase == TimerPhase.BREAK
    assert done.seconds_left == 300
    assert done.completed_sessions == 1


def test_break_returns_to_idle():
    state = TimerState.initial().evolve(phase=TimerPhase.BREAK, seconds_left=2, completed_sessions=3)
    state = _advance(state, 2)
    assert (state.phase, state.seconds_left, state.completed_sessions) == (TimerPhase.IDLE, 1500, 3)

    in_break = TimerState.initial().evolve(phase=TimerPhase.BREAK, seconds_left=120)
    assert transition(in_break, TimerCommand.FINISH).phase == TimerPhase.IDLE


def test_pause_freezes_countdown():
    state = _advance(transition(TimerState.initial(), TimerCommand.START), 10)
    paused = transition(state, TimerCommand.PAUSE)
    assert _advance(paused, 50) == paused

    resumed = transition(paused, TimerCommand.RESUME)
    assert (resumed.phase, resumed.seconds_left) == (TimerPhase.RUNNING, 1490)


@pytest.mark.parametrize("phase", [TimerPhase.RUNNING, TimerPhase.PAUSED, TimerPhase.BREAK])
def test_reset_keeps_completed_sessions(phase):
    state = TimerState.initial().evolve(phase=phase, seconds_left=42, completed_sessions=2)
    reset = transition(state, TimerCommand.RESET)
    assert (reset.phase, reset.seconds_left, reset.completed_sessions) == (TimerPhase.IDLE, 1500, 2)


@pytest.mark.parametrize("command", [
    TimerCommand.PAUSE, TimerCommand.RESUME, TimerCommand.RESET, TimerCommand.FINISH, TimerCommand.TICK
])
def test_commands_invalid_in_idle_are_ignored(command):
    state = TimerState.initial()
    assert transition(state, command) == state


def test_configure():
    idle = configure(TimerState.initial(), focus_minutes=30, break_minutes=10)
    assert (idle.seconds_left, idle.focus_minutes, idle.break_minutes) == (1800, 30, 10)

    running = _advance(transition(TimerState.initial(), TimerCommand.START), 5)
    changed = configure(running, focus_minutes=45)
    assert changed.seconds_left == 1495
    assert changed.focus_minutes == 45

    for focus in (10, 17, 65, True):
        with pytest.raises(ValueError):
            configure(idle, focus_minutes=focus)
    with pytest.raises(ValueError):
        configure(idle, break_minutes=35)


def test_runner_consumes_explicit_ticks():
    seen = []
    runner = TimerRunner(listener=seen.append)
    runner.start()
    asyncio.run(runner.run(_ticks(3)))

    assert runner.state.seconds_left == 1497
    assert [state.seconds_left for state in seen] == [1500, 1499, 1498, 1497]


def test_runner_ticking_task_can_be_stopped():
    async def endless():
        while True:
            await asyncio.sleep(0)
            yield None

    async def scenario():
        runner = TimerRunner()
        runner.start()
        runner.start_ticking(endless())
        assert runner.is_ticking()
        await asyncio.sleep(0.01)
        await runner.stop_ticking()
        return runner

    runner = asyncio.run(scenario())
    assert not runner.is_ticking()
    assert runner.state.seconds_left < 1500


def test_reinitialize_keeps_durations():
    runner = TimerRunner(TimerState.initial(30, 10).evolve(completed_sessions=4))
    runner.start()
    state = runner.reinitialize()
    assert state == TimerState.initial(30, 10)
