from __future__ import annotations

import logging

from taskhub.adapters.publisher_memory import InMemoryPublisher
from taskhub.adapters.publisher_nsq import NsqPublisher
from taskhub.app.config import Settings
from taskhub.app.core.logging_config import ContextFormatter, log_context
from taskhub.app.deps import create_publisher


def test_settings_read_environment(monkeypatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "postgresql://tasks@db/tasks")
    monkeypatch.setenv("NSQD_URL", "http://nsqd:4151")
    monkeypatch.setenv("PUBLISHER_BACKEND", "memory")

    settings = Settings()

    assert settings.database_url == "postgresql://tasks@db/tasks"
    assert settings.nsqd_url == "http://nsqd:4151"
    assert settings.publisher_backend == "memory"
    assert settings.task_updates_topic == "task_updates"


def test_cors_origins_from_comma_separated_env(monkeypatch) -> None:
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "https://ui.example.com, https://admin.example.com")
    assert Settings().cors_allow_origins == ["https://ui.example.com", "https://admin.example.com"]

    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "https://ui.example.com")
    assert Settings().cors_allow_origins == ["https://ui.example.com"]

    monkeypatch.delenv("CORS_ALLOW_ORIGINS")
    assert Settings().cors_allow_origins == ["*"]


def test_create_publisher_selects_backend() -> None:
    memory = create_publisher(Settings(publisher_backend="memory"))
    assert isinstance(memory, InMemoryPublisher)

    nsq = create_publisher(Settings(publisher_backend="nsq", nsqd_url="http://nsqd:4151/"))
    try:
        assert isinstance(nsq, NsqPublisher)
        assert nsq.nsqd_url == "http://nsqd:4151"
    finally:
        nsq.close()


def test_formatter_fills_missing_context() -> None:
    formatter = ContextFormatter("%(task)s|%(step)s|%(phase)s|%(topic)s %(message)s")
    record = logging.LogRecord("taskhub", logging.INFO, __file__, 1, "hello", None, None)
    record.__dict__.update(log_context(7, step="update"))

    assert formatter.format(record) == "7|update|-|- hello"
