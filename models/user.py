# models/user.py

from dataclasses import dataclass

@dataclass(frozen=True)
class Identity:
    """Личность вызывающего, как её подтвердил провайдер сессий"""
    user_id: str
