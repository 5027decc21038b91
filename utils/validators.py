import re
from typing import Any, Optional

ACCENT_RE = re.compile(r"^#[0-9a-fA-F]{6}$")

FOCUS_MINUTES_RANGE = (15, 60, 5)
BREAK_MINUTES_RANGE = (5, 30, 5)

# идентификаторы и метки времени хранятся в BIGINT
INT64_MIN = -2 ** 63
INT64_MAX = 2 ** 63 - 1

def is_int64(value: Any) -> bool:
    # bool is an int subclass; "true" is not a number
    return isinstance(value, int) and not isinstance(value, bool) and INT64_MIN <= value <= INT64_MAX

def is_valid_title(title: Any) -> bool:
    return isinstance(title, str) and bool(title.strip())

def normalize_title(title: str) -> str:
    return title.strip()

def is_valid_accent(accent: Any) -> bool:
    return isinstance(accent, str) and bool(ACCENT_RE.match(accent))

def is_valid_epoch_ms(value: Any) -> bool:
    return is_int64(value)

def is_valid_event_range(start: Optional[int], end: Optional[int]) -> bool:
    if start is None or end is None:
        return False
    return start < end

def is_valid_minutes(value: Any, bounds: tuple) -> bool:
    low, high, step = bounds
    if not isinstance(value, int) or isinstance(value, bool):
        return False
    return low <= value <= high and (value - low) % step == 0
