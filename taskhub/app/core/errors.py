from typing import Any, Optional


class TaskhubError(Exception):
    """Base class for failures the request surface knows how to map."""

    code = "taskhub_error"

    def __init__(self, message: str, *, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class StoreError(TaskhubError):
    """Raised when the relational store rejects or cannot run a statement."""

    code = "store_error"


class TaskNotFound(StoreError):
    code = "task_not_found"

    def __init__(self, task_id: int):
        super().__init__(f"Task not found: {task_id}")
        self.task_id = task_id


class PublishError(TaskhubError):
    """Raised when a message cannot be delivered to the bus (bad topic or transport)."""

    code = "publish_error"


class TaskPersistedNotPublished(PublishError):
    code = "task_persisted_not_published"

    def __init__(self, task: Any, *, cause: Optional[BaseException] = None):
        super().__init__(
            f"Task {getattr(task, 'id', '?')} was updated but the change notification failed",
            cause=cause,
        )
        self.task = task
