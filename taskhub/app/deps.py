"""Dependency providers for the task repository and the change publisher."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from taskhub.adapters.task_repository_sql import SqlTaskRepository
from taskhub.app.config import Settings
from taskhub.app.db import get_db
from taskhub.ports.publisher import IPublisher
from taskhub.ports.task_repository import ITaskRepository

logger = logging.getLogger(__name__)

_publisher: Optional[IPublisher] = None


def create_publisher(settings: Settings) -> IPublisher:
    """Build the publisher selected by ``PUBLISHER_BACKEND``."""
    backend = (settings.publisher_backend or "nsq").lower()
    logger.info("Publisher backend=%s", backend)
    if backend == "memory":
        from taskhub.adapters.publisher_memory import InMemoryPublisher

        return InMemoryPublisher()

    from taskhub.adapters.publisher_nsq import NsqPublisher

    return NsqPublisher(settings.nsqd_url, timeout=settings.publish_timeout_sec)


def set_publisher(publisher: Optional[IPublisher]) -> None:
    global _publisher
    _publisher = publisher


def get_publisher() -> IPublisher:
    if _publisher is None:
        raise RuntimeError("Publisher is not configured")
    return _publisher


def get_task_repository(db: Session = Depends(get_db)) -> ITaskRepository:
    return SqlTaskRepository(db)
