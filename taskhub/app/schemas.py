from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None


class TaskUpdate(BaseModel):
    """Partial update; a missing key and an explicit null both keep the stored value."""

    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    completed: Optional[bool] = None

    def changes(self) -> dict[str, Any]:
        return {key: value for key, value in self.model_dump().items() if value is not None}


class TaskRead(BaseModel):
    # Field order is the wire order of the task_updates message
    id: int
    title: str
    description: Optional[str] = None
    completed: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at", "updated_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        """SQLite hands back naive datetimes; every stored timestamp is UTC."""

        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)


class ErrorDetail(BaseModel):
    code: str
    message: str


def serialize_task(task: Any) -> bytes:
    """Canonical JSON bytes for a task, shared by the HTTP body and the bus message."""

    return TaskRead.model_validate(task).model_dump_json().encode("utf-8")
