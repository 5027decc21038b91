"""
API роутеры дашборда: задачи, события, настройки
"""

from typing import Any

from dashboard.errors import ValidationError
from utils.validators import is_int64

def require_record_id(raw: Any) -> int:
    """Идентификатор записи из тела или query-строки; без него 400"""
    if raw is None or raw == "":
        raise ValidationError("id required")
    if isinstance(raw, bool):
        raise ValidationError("id must be an integer")
    try:
        record_id = int(raw)
    except (TypeError, ValueError):
        raise ValidationError("id must be an integer")
    if not is_int64(record_id):
        raise ValidationError("id out of range")
    return record_id
