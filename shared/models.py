from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr
from typing import Annotated, Optional

from models import Event, Task, UserSettings
from utils.validators import INT64_MAX, INT64_MIN

# Столбцы BIGINT: значения вне диапазона отсекаются ещё на входе
Int64 = Annotated[StrictInt, Field(ge=INT64_MIN, le=INT64_MAX)]

# Запросы. Обязательность полей проверяют сервисы, чтобы ответы 400
# имели единый вид {"error": ...}

class TaskCreate(BaseModel):
    title: Optional[StrictStr] = None

class TaskPatch(BaseModel):
    id: Optional[Int64] = None
    title: Optional[StrictStr] = None
    done: Optional[StrictBool] = None

class EventCreate(BaseModel):
    title: Optional[StrictStr] = None
    start: Optional[Int64] = None
    end: Optional[Int64] = None

class EventPatch(BaseModel):
    id: Optional[Int64] = None
    title: Optional[StrictStr] = None
    start: Optional[Int64] = None
    end: Optional[Int64] = None

class SettingsWrite(BaseModel):
    accent: Optional[StrictStr] = None
    dark: Optional[StrictBool] = False

# Ответы

class TaskOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    title: str
    done: bool
    created_at: int

    @classmethod
    def from_task(cls, task: Task) -> "TaskOut":
        return cls.model_validate(task)

class EventOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    title: str
    start: int
    end: int

    @classmethod
    def from_event(cls, event: Event) -> "EventOut":
        return cls.model_validate(event)

class SettingsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    accent: str
    dark: bool

    @classmethod
    def from_settings(cls, settings: UserSettings) -> "SettingsOut":
        return cls.model_validate(settings)

class OkResponse(BaseModel):
    ok: bool = True

class HealthCheck(BaseModel):
    status: str
    service: str
    version: str
    timestamp: float
