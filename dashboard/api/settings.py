from fastapi import APIRouter, Depends

from ..dependencies import get_settings_service, require_auth
from models import Identity
from services.settings_service import SettingsService
from shared.models import OkResponse, SettingsOut, SettingsWrite

router = APIRouter(prefix="/api/settings", tags=["settings"])

@router.get("", response_model=SettingsOut)
async def get_settings(
    identity: Identity = Depends(require_auth),
    service: SettingsService = Depends(get_settings_service)
):
    """
    Настройки пользователя; если записи нет - значения по умолчанию
    """
    settings = await service.get(identity)
    return SettingsOut.from_settings(settings)

@router.post("", response_model=OkResponse)
async def save_settings(
    payload: SettingsWrite,
    identity: Identity = Depends(require_auth),
    service: SettingsService = Depends(get_settings_service)
):
    await service.upsert(identity, payload.accent, payload.dark)
    return OkResponse()
