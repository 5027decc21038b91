from fastapi import APIRouter, Depends
from typing import Optional

from ..dependencies import get_credentials, get_services, require_auth
from models import Identity
from services import ServiceManager
from shared.models import OkResponse

router = APIRouter(prefix="/api", tags=["session"])

@router.post("/sign-out", response_model=OkResponse)
async def sign_out(
    identity: Identity = Depends(require_auth),
    credentials: Optional[str] = Depends(get_credentials),
    services: ServiceManager = Depends(get_services)
):
    """
    Отозвать предъявленную сессию
    """
    await services.session_gate.revoke(credentials)
    return OkResponse()
