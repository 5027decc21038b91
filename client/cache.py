# client/cache.py

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

SETTINGS_CACHE_KEY = "theme_settings_v1"

class SettingsCache:
    """Локальная копия accent/dark, доступная до ответа сервера"""

    def __init__(self, cache_dir: Path):
        self.cache_dir = Path(cache_dir)
        self.path = self.cache_dir / f"{SETTINGS_CACHE_KEY}.json"

    def load(self) -> Optional[Dict[str, Any]]:
        if not self.path.exists():
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"⚠️ Кэш настроек не прочитан: {e}")
            return None
        return data if isinstance(data, dict) else None

    def save(self, accent: str, dark: bool) -> None:
        try:
            self.cache_dir.mkdir(exist_ok=True, parents=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump({"accent": accent, "dark": bool(dark)}, f, ensure_ascii=False)
        except OSError as e:
            # кэш вторичен: настройки уже применены в памяти
            logger.warning(f"⚠️ Кэш настроек не записан: {e}")
