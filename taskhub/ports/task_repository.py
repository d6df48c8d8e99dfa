"""Port interface for task persistence (repository boundary)."""

from __future__ import annotations

from typing import Any, Optional, Protocol, runtime_checkable


@runtime_checkable
class ITaskRepository(Protocol):
    """Task store abstraction for list/create/get/update operations."""

    def list_tasks(self) -> list[Any]:
        """Return every task, newest ``created_at`` first."""

    def create_task(self, title: str, description: Optional[str] = None) -> Any:
        """Insert a task and return it with the store-assigned id and timestamps."""

    def get_task(self, task_id: int) -> Optional[Any]:
        """Return a task by id or None when missing."""

    def update_task(
        self,
        task_id: int,
        title: Optional[str] = None,
        description: Optional[str] = None,
        completed: Optional[bool] = None,
    ) -> Any:
        """Overwrite the supplied fields, bump ``updated_at`` and return the stored task.

        Raises ``TaskNotFound`` when no row has ``task_id``.
        """
