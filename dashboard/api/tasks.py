from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from . import require_record_id
from ..dependencies import get_task_service, require_auth
from models import Identity
from services.task_service import TaskService
from shared.models import OkResponse, TaskCreate, TaskOut, TaskPatch

router = APIRouter(prefix="/api/tasks", tags=["tasks"])

@router.get("", response_model=List[TaskOut])
async def list_tasks(
    identity: Identity = Depends(require_auth),
    service: TaskService = Depends(get_task_service)
):
    """
    Задачи текущего пользователя, новые первыми
    """
    tasks = await service.list(identity)
    return [TaskOut.from_task(task) for task in tasks]

@router.post("", response_model=TaskOut)
async def create_task(
    payload: TaskCreate,
    identity: Identity = Depends(require_auth),
    service: TaskService = Depends(get_task_service)
):
    """
    Создать задачу; done всегда false
    """
    task = await service.create(identity, payload.title)
    return TaskOut.from_task(task)

@router.put("", response_model=OkResponse)
async def update_task(
    payload: TaskPatch,
    identity: Identity = Depends(require_auth),
    service: TaskService = Depends(get_task_service)
):
    """
    Частичное обновление title/done; отсутствующие поля не меняются
    """
    task_id = require_record_id(payload.id)
    await service.update(identity, task_id, title=payload.title, done=payload.done)
    return OkResponse()

@router.delete("", response_model=OkResponse)
async def delete_task(
    id: Optional[str] = Query(None),
    identity: Identity = Depends(require_auth),
    service: TaskService = Depends(get_task_service)
):
    await service.delete(identity, require_record_id(id))
    return OkResponse()
