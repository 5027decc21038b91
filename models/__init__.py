#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Focusboard - Models Package
Доменные модели и перечисления

Author: AI Assistant
Version: 1.0.0
Date: 2025-06-13
"""

from .enums import (
    TimerPhase,
    TimerCommand
)

from .task import Task
from .event import Event

from .settings import (
    DEFAULT_ACCENT,
    UserSettings
)

from .user import Identity

from .focus import (
    DEFAULT_FOCUS_MINUTES,
    DEFAULT_BREAK_MINUTES,
    TimerState
)

__all__ = [
    # Enums
    'TimerPhase',
    'TimerCommand',

    # Records
    'Task',
    'Event',
    'UserSettings',
    'Identity',

    # Timer
    'DEFAULT_FOCUS_MINUTES',
    'DEFAULT_BREAK_MINUTES',
    'TimerState'
]
