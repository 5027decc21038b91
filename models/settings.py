# models/settings.py

from dataclasses import dataclass
from typing import Any, Mapping

DEFAULT_ACCENT = "#7c3aed"

@dataclass
class UserSettings:
    """Настройки отображения; одна запись на пользователя"""
    user_id: str
    accent: str = DEFAULT_ACCENT
    dark: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UserSettings":
        return cls(
            user_id=str(data.get("user_id", "")),
            accent=data.get("accent") or DEFAULT_ACCENT,
            dark=bool(data.get("dark", False)),
        )
