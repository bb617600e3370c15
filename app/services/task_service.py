# File: app/services/task_service.py

"""
Task store.

Every id-scoped function filters on ``(id, owner_id)``. A malformed id, a
missing task and a task owned by someone else all come back as ``None``,
so callers cannot tell them apart.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import and_, delete, select, update
from sqlalchemy.orm import Session

from app.db.session import storage_errors
from app.models.base import parse_id, utcnow
from app.models.task import Task
from app.services.validation import validate_task_create, validate_task_patch

logger = logging.getLogger(__name__)


def _is_true(value: Any) -> bool:
    # JSON true, or the string "true" some clients send from form fields
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip() == "true"
    return False


def _owned(task_id: str, owner_id: str):
    return and_(Task.id == task_id, Task.owner_id == owner_id)


def create_task(db: Session, owner_id: str, fields: Dict[str, Any]) -> Task:
    result = validate_task_create(fields)
    result.raise_for_errors()

    task = Task(owner_id=owner_id, completed=False, completed_at=None, **result.data)
    with storage_errors(db, "task create"):
        db.add(task)
        db.commit()
    logger.debug("Created task %s for user %s", task.id, owner_id)
    return task


def list_tasks_by_owner(db: Session, owner_id: str) -> List[Task]:
    stmt = select(Task).where(Task.owner_id == owner_id).order_by(Task.created_at, Task.seq)
    with storage_errors(db, "task list"):
        return list(db.execute(stmt).scalars().all())


def get_task_by_id_and_owner(db: Session, task_id: str, owner_id: str) -> Optional[Task]:
    task_id = parse_id(task_id)
    if task_id is None:
        return None
    with storage_errors(db, "task get"):
        return db.execute(select(Task).where(_owned(task_id, owner_id))).scalar_one_or_none()


def update_task_by_id_and_owner(
    db: Session,
    task_id: str,
    owner_id: str,
    patch: Dict[str, Any],
) -> Optional[Task]:
    """
    Apply an allow-listed patch in a single conditional UPDATE.

    ``completed`` is reset to false (and ``completed_at`` cleared) unless the
    patch explicitly carries a true value, even when the patch leaves
    ``completed`` out. Every true value stamps ``completed_at`` with the current time.
    """
    task_id = parse_id(task_id)
    if task_id is None:
        return None

    result = validate_task_patch(patch)
    result.raise_for_errors()
    values = dict(result.data)

    now = utcnow()
    if _is_true(values.pop("completed", None)):
        values["completed"] = True
        values["completed_at"] = now
    else:
        values["completed"] = False
        values["completed_at"] = None
    values["updated_at"] = now

    stmt = (
        update(Task)
        .where(_owned(task_id, owner_id))
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    with storage_errors(db, "task update"):
        if db.execute(stmt).rowcount == 0:
            db.rollback()
            return None
        db.commit()
        return db.execute(
            select(Task).where(Task.id == task_id).execution_options(populate_existing=True)
        ).scalar_one_or_none()


def delete_task_by_id_and_owner(db: Session, task_id: str, owner_id: str) -> Optional[Task]:
    task_id = parse_id(task_id)
    if task_id is None:
        return None

    with storage_errors(db, "task delete"):
        task = db.execute(select(Task).where(_owned(task_id, owner_id))).scalar_one_or_none()
        if task is None:
            return None
        stmt = delete(Task).where(_owned(task_id, owner_id)).execution_options(synchronize_session=False)
        if db.execute(stmt).rowcount == 0:
            # Deleted concurrently between the read and the delete
            db.rollback()
            return None
        db.commit()
    return task
