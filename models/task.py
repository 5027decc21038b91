# models/task.py

from dataclasses import dataclass
from typing import Any, Mapping

@dataclass
class Task:
    """Задача пользователя"""
    id: int
    user_id: str
    title: str
    done: bool = False
    created_at: int = 0  # epoch ms, ставится сервером при вставке

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Task":
        return cls(
            id=int(data["id"]),
            user_id=str(data.get("user_id", "")),
            title=data.get("title", ""),
            done=bool(data.get("done", False)),
            created_at=int(data.get("created_at") or 0),
        )
