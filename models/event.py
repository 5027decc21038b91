# models/event.py

from dataclasses import dataclass
from typing import Any, Mapping

@dataclass
class Event:
    """Событие календаря; start/end в epoch ms"""
    id: int
    user_id: str
    title: str
    start: int
    end: int

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Event":
        return cls(
            id=int(data["id"]),
            user_id=str(data.get("user_id", "")),
            title=data.get("title", ""),
            start=int(data["start"]),
            end=int(data["end"]),
        )
