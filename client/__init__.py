"""
Клиент дашборда Focusboard

HTTP клиент API, локальный кэш настроек и слой синхронизации
с оптимистичными изменениями.
"""

from .api import ApiError, DashboardApiClient
from .cache import SETTINGS_CACHE_KEY, SettingsCache
from .config import ClientSettings
from .sync import (
    DashboardState,
    SyncClient,
    SyncError,
    SyncFailure,
    events_on_day
)

__all__ = [
    'ApiError',
    'DashboardApiClient',
    'SETTINGS_CACHE_KEY',
    'SettingsCache',
    'ClientSettings',
    'DashboardState',
    'SyncClient',
    'SyncError',
    'SyncFailure',
    'events_on_day'
]
