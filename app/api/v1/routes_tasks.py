# File: app/api/v1/routes_tasks.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import AuthContext, get_current_user, get_db
from app.core.errors import NotFound
from app.schemas.task import TaskCreate, TaskEnvelope, TaskListResponse, TaskRead, TaskUpdate
from app.services.task_service import (
    create_task,
    delete_task_by_id_and_owner,
    get_task_by_id_and_owner,
    list_tasks_by_owner,
    update_task_by_id_and_owner,
)

router = APIRouter()


@router.post("", response_model=TaskRead, summary="Create a task")
def create(
    payload: TaskCreate,
    ctx: AuthContext = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return create_task(db, ctx.user.id, payload.model_dump())


@router.get("", response_model=TaskListResponse, summary="List the caller's tasks")
def list_tasks(
    ctx: AuthContext = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return {"tasks": list_tasks_by_owner(db, ctx.user.id)}


@router.get("/{task_id}", response_model=TaskEnvelope, summary="Get a task")
def read_task(
    task_id: str,
    ctx: AuthContext = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    task = get_task_by_id_and_owner(db, task_id, ctx.user.id)
    if task is None:
        raise NotFound()
    return {"task": task}


@router.patch("/{task_id}", response_model=TaskEnvelope, summary="Update a task")
def update_task(
    task_id: str,
    payload: TaskUpdate,
    ctx: AuthContext = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Partial update of title, text, tags, completed, dueDate.

    Note: ``completed`` is cleared unless the body sets it to true, even when
    the body leaves it out.
    """
    task = update_task_by_id_and_owner(
        db, task_id, ctx.user.id, payload.model_dump(exclude_unset=True)
    )
    if task is None:
        raise NotFound()
    return {"task": task}


@router.delete("/{task_id}", response_model=TaskEnvelope, summary="Delete a task")
def delete_task(
    task_id: str,
    ctx: AuthContext = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    task = delete_task_by_id_and_owner(db, task_id, ctx.user.id)
    if task is None:
        raise NotFound()
    return {"task": task}
