# models/focus.py

from dataclasses import dataclass, replace
from models.enums import TimerPhase

DEFAULT_FOCUS_MINUTES = 25
DEFAULT_BREAK_MINUTES = 5

@dataclass(frozen=True)
class TimerState:
    phase: TimerPhase = TimerPhase.IDLE
    seconds_left: int = DEFAULT_FOCUS_MINUTES * 60
    focus_minutes: int = DEFAULT_FOCUS_MINUTES
    break_minutes: int = DEFAULT_BREAK_MINUTES
    completed_sessions: int = 0

    @classmethod
    def initial(cls, focus_minutes: int = DEFAULT_FOCUS_MINUTES,
                break_minutes: int = DEFAULT_BREAK_MINUTES) -> "TimerState":
        return cls(
            phase=TimerPhase.IDLE,
            seconds_left=focus_minutes * 60,
            focus_minutes=focus_minutes,
            break_minutes=break_minutes,
        )

    def evolve(self, **changes) -> "TimerState":
        return replace(self, **changes)
