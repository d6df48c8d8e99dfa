import logging
import os
from typing import Any, Optional

_CONFIGURED = False
_CONTEXT_KEYS = ("task", "step", "phase", "topic")

LOG_FORMAT = (
    "%(asctime)s %(levelname)s %(name)s "
    "task=%(task)s step=%(step)s phase=%(phase)s topic=%(topic)s "
    "%(message)s"
)


class ContextFormatter(logging.Formatter):
    """Formatter that tolerates records logged without the pipeline context keys."""

    def format(self, record: logging.LogRecord) -> str:
        for key in _CONTEXT_KEYS:
            if key not in record.__dict__:
                record.__dict__[key] = "-"
        return super().format(record)


def log_context(task_id: Any = None, step: str | None = None, phase: str | None = None, topic: str | None = None) -> dict[str, Any]:
    """Build the ``extra`` mapping for a pipeline log line."""

    values = {"task": task_id, "step": step, "phase": phase, "topic": topic}
    return {key: value for key, value in values.items() if value is not None}


def _resolve_level(level: Optional[str]) -> int:
    level_name = (
        level
        or os.getenv("APP_LOG_LEVEL")
        or os.getenv("UVICORN_LOG_LEVEL")
        or os.getenv("LOG_LEVEL")
        or "INFO"
    ).upper()
    return getattr(logging, level_name, logging.INFO)


def configure_logging(level: Optional[str] = None) -> None:
    global _CONFIGURED
    if _CONFIGURED:
        return

    resolved_level = _resolve_level(level)

    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(ContextFormatter(LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(resolved_level)

    # httpx logs every request at INFO; one line per publish is enough
    logging.getLogger("httpx").setLevel(max(resolved_level, logging.WARNING))
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).setLevel(resolved_level)

    _CONFIGURED = True
