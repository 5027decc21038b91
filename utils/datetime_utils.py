import time
from datetime import date, datetime, tzinfo
from typing import Optional

def now_ms() -> int:
    return int(time.time() * 1000)

def from_epoch_ms(value: int, tz: Optional[tzinfo] = None) -> datetime:
    """Epoch ms -> aware datetime; без tz берётся локальная зона процесса"""
    dt = datetime.fromtimestamp(value / 1000, tz=tz)
    return dt if tz is not None else dt.astimezone()

def same_day(value: int, day: date, tz: Optional[tzinfo] = None) -> bool:
    local = from_epoch_ms(value, tz)
    return (local.year, local.month, local.day) == (day.year, day.month, day.day)
