"""Task API router."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Path
from fastapi.responses import Response

from taskhub.app.config import get_settings
from taskhub.app.core.errors import StoreError, TaskhubError, TaskNotFound
from taskhub.app.deps import get_publisher, get_task_repository
from taskhub.app.schemas import ErrorDetail, TaskCreate, TaskRead, TaskUpdate, serialize_task
from taskhub.app.services.update_pipeline import run_update
from taskhub.ports.publisher import IPublisher
from taskhub.ports.task_repository import ITaskRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks", tags=["tasks"])

# ids are 32-bit integer columns; anything outside is rejected before the store
TASK_ID_MAX = 2**31 - 1


def _server_error(action: str, exc: TaskhubError) -> HTTPException:
    logger.error("Failed to %s: %s", action, exc.message, exc_info=exc.cause)
    detail = ErrorDetail(code=exc.code, message=exc.message)
    return HTTPException(status_code=500, detail=detail.model_dump())


@router.get("", response_model=list[TaskRead])
def list_tasks(repo: ITaskRepository = Depends(get_task_repository)):
    """List every task, newest first."""

    try:
        return repo.list_tasks()
    except StoreError as exc:
        raise _server_error("list tasks", exc) from exc


@router.post("", response_model=TaskRead, status_code=201)
def create_task(payload: TaskCreate, repo: ITaskRepository = Depends(get_task_repository)):
    try:
        task = repo.create_task(payload.title, payload.description)
    except StoreError as exc:
        raise _server_error("create task", exc) from exc
    logger.info("task created", extra={"task": task.id})
    return task


@router.get("/{task_id}", response_model=TaskRead)
def get_task(
    task_id: int = Path(..., ge=1, le=TASK_ID_MAX),
    repo: ITaskRepository = Depends(get_task_repository),
):
    """Retrieve a single task by id."""

    try:
        task = repo.get_task(task_id)
    except StoreError as exc:
        raise _server_error("get task", exc) from exc
    if task is None:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


@router.put("/{task_id}", response_model=TaskRead)
def update_task(
    payload: TaskUpdate,
    task_id: int = Path(..., ge=1, le=TASK_ID_MAX),
    repo: ITaskRepository = Depends(get_task_repository),
    publisher: IPublisher = Depends(get_publisher),
):
    """
    Apply a partial update, then announce the new state on the task_updates topic.

    A failed announcement still answers 500 even though the row was written;
    the detail code ``task_persisted_not_published`` tells the two apart.
    """

    topic = get_settings().task_updates_topic
    try:
        task = run_update(repo, publisher, task_id, payload, topic=topic)
    except TaskNotFound as exc:
        logger.info("update for missing task", extra={"task": task_id})
        raise HTTPException(status_code=404, detail="Task not found") from exc
    except TaskhubError as exc:
        raise _server_error("update task", exc) from exc

    # Same bytes as the bus message
    return Response(content=serialize_task(task), media_type="application/json")


__all__ = ["router"]
