# File: app/models/base.py

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    Concrete models: User, UserToken, Task.
    """
    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return uuid.uuid4().hex


def parse_id(value: object) -> Optional[str]:
    """
    Normalize a client-supplied identifier to its stored form.

    Returns None when the value is not a structurally valid id, so callers
    can short-circuit to "not found" without touching storage.
    """
    if not isinstance(value, str):
        return None
    try:
        return uuid.UUID(value).hex
    except ValueError:
        return None
