# File: app/schemas/task.py

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, List, Optional

from pydantic import BaseModel, field_serializer
from pydantic.alias_generators import to_camel


# -----------------------------
# Request bodies (allow-lists)
# -----------------------------

class _CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True


class TaskCreate(_CamelModel):
    title: Optional[str] = None
    text: Optional[str] = None
    tags: Optional[str] = None
    due_date: Optional[datetime] = None


class TaskUpdate(_CamelModel):
    title: Optional[str] = None
    text: Optional[str] = None
    tags: Optional[str] = None
    # Left untyped: clients send either a JSON boolean or the string "true"
    completed: Any = None
    due_date: Optional[datetime] = None


# -----------------------------
# Responses
# -----------------------------

class TaskRead(_CamelModel):
    id: str
    title: str
    text: Optional[str] = None
    tags: Optional[str] = None
    completed: bool
    due_date: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    owner_id: str
    created_at: datetime
    updated_at: datetime

    @field_serializer("due_date", "completed_at", "created_at", "updated_at")
    def _as_utc(self, value: Optional[datetime]) -> Optional[datetime]:
        # SQLite hands timestamps back without tzinfo; everything is stored as UTC
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class TaskEnvelope(BaseModel):
    task: TaskRead


class TaskListResponse(BaseModel):
    tasks: List[TaskRead]
