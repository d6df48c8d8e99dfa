"""Persist-then-notify pipeline for task updates.

The store write and the publish are two independent side effects: a
failed publish does not roll back the write, and nothing is retried.
Callers learn about a failed publish through ``TaskPersistedNotPublished``,
which still carries the stored task.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Optional

from taskhub.app.core.errors import PublishError, TaskPersistedNotPublished
from taskhub.app.core.logging_config import log_context
from taskhub.app.schemas import TaskUpdate, serialize_task
from taskhub.ports.publisher import IPublisher
from taskhub.ports.task_repository import ITaskRepository

logger = logging.getLogger(__name__)

TASK_UPDATES_TOPIC = "task_updates"


def run_update(
    repo: ITaskRepository,
    publisher: IPublisher,
    task_id: int,
    patch: Optional[TaskUpdate] = None,
    topic: str = TASK_UPDATES_TOPIC,
) -> Any:
    patch = patch or TaskUpdate()
    started = time.perf_counter()

    # TaskNotFound / StoreError propagate before anything is published
    task = repo.update_task(task_id, **patch.changes())
    logger.info(
        "task persisted fields=%s",
        sorted(patch.changes()) or "-",
        extra=log_context(task_id, step="update", phase="persist"),
    )

    payload = serialize_task(task)
    try:
        publisher.publish(topic, payload)
    except PublishError as exc:
        logger.error(
            "change notification failed after persist: %s",
            exc.message,
            extra=log_context(task_id, step="update", phase="publish", topic=topic),
        )
        raise TaskPersistedNotPublished(task, cause=exc) from exc

    logger.info(
        "task update announced bytes=%d elapsed_ms=%d",
        len(payload),
        int((time.perf_counter() - started) * 1000),
        extra=log_context(task_id, step="update", phase="publish", topic=topic),
    )
    return task
