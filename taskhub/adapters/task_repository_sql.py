"""SQLAlchemy-backed task repository."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from taskhub.app.core.errors import StoreError, TaskNotFound
from taskhub.app.models import Task, utcnow
from taskhub.ports.task_repository import ITaskRepository

logger = logging.getLogger(__name__)


class SqlTaskRepository(ITaskRepository):
    def __init__(self, session: Session):
        self.session = session

    def _fail(self, action: str, exc: SQLAlchemyError) -> StoreError:
        self.session.rollback()
        logger.warning("%s failed: %s", action, exc.__class__.__name__)
        return StoreError(f"Failed to {action}", cause=exc)

    def list_tasks(self) -> List[Task]:
        try:
            return (
                self.session.query(Task)
                .order_by(Task.created_at.desc(), Task.id.desc())
                .all()
            )
        except SQLAlchemyError as exc:
            raise self._fail("list tasks", exc) from exc

    def create_task(self, title: str, description: Optional[str] = None) -> Task:
        now = utcnow()
        task = Task(
            title=title,
            description=description,
            completed=False,
            created_at=now,
            updated_at=now,
        )
        try:
            self.session.add(task)
            self.session.commit()
            self.session.refresh(task)
        except SQLAlchemyError as exc:
            raise self._fail("create task", exc) from exc
        return task

    def get_task(self, task_id: int) -> Optional[Task]:
        try:
            return self.session.query(Task).filter(Task.id == task_id).first()
        except SQLAlchemyError as exc:
            raise self._fail("get task", exc) from exc

    def update_task(
        self,
        task_id: int,
        title: Optional[str] = None,
        description: Optional[str] = None,
        completed: Optional[bool] = None,
    ) -> Task:
        # Absent fields are left out of the SET clause, i.e. COALESCE(new, current)
        updates: Dict[str, Any] = {
            key: value
            for key, value in (
                ("title", title),
                ("description", description),
                ("completed", completed),
            )
            if value is not None
        }
        updates["updated_at"] = utcnow()

        try:
            matched = (
                self.session.query(Task)
                .filter(Task.id == task_id)
                .update(updates, synchronize_session=False)
            )
            if not matched:
                self.session.rollback()
                raise TaskNotFound(task_id)
            # Read back before commit, in the transaction that wrote the row
            task = self.session.get(Task, task_id, populate_existing=True)
            self.session.commit()
        except SQLAlchemyError as exc:
            raise self._fail("update task", exc) from exc
        return task
