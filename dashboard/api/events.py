from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from . import require_record_id
from ..dependencies import get_event_service, require_auth
from models import Identity
from services.event_service import EventService
from shared.models import EventCreate, EventOut, EventPatch, OkResponse

router = APIRouter(prefix="/api/events", tags=["events"])

@router.get("", response_model=List[EventOut])
async def list_events(
    identity: Identity = Depends(require_auth),
    service: EventService = Depends(get_event_service)
):
    """
    События текущего пользователя по возрастанию начала
    """
    events = await service.list(identity)
    return [EventOut.from_event(event) for event in events]

@router.post("", response_model=EventOut)
async def create_event(
    payload: EventCreate,
    identity: Identity = Depends(require_auth),
    service: EventService = Depends(get_event_service)
):
    event = await service.create(identity, payload.title, payload.start, payload.end)
    return EventOut.from_event(event)

@router.put("", response_model=OkResponse)
async def update_event(
    payload: EventPatch,
    identity: Identity = Depends(require_auth),
    service: EventService = Depends(get_event_service)
):
    event_id = require_record_id(payload.id)
    await service.update(identity, event_id, title=payload.title, start=payload.start, end=payload.end)
    return OkResponse()

@router.delete("", response_model=OkResponse)
async def delete_event(
    id: Optional[str] = Query(None),
    identity: Identity = Depends(require_auth),
    service: EventService = Depends(get_event_service)
):
    await service.delete(identity, require_record_id(id))
    return OkResponse()
