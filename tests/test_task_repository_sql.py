from __future__ import annotations

import pytest
from sqlalchemy.exc import OperationalError

from taskhub.app.core.errors import StoreError, TaskNotFound
from taskhub.app.schemas import TaskRead


def _visible(task) -> dict:
    data = TaskRead.model_validate(task).model_dump()
    data.pop("updated_at")
    return data


def test_create_assigns_id_and_equal_timestamps(repo) -> None:
    task = repo.create_task("A")

    assert task.id is not None
    assert task.title == "A"
    assert task.description is None
    assert task.completed is False
    assert task.created_at == task.updated_at


def test_list_returns_newest_first(repo) -> None:
    first = repo.create_task("first")
    second = repo.create_task("second", "later")

    ids = [t.id for t in repo.list_tasks()]
    assert ids == [second.id, first.id]


def test_get_missing_returns_none(repo) -> None:
    assert repo.get_task(999999) is None


def test_update_missing_raises_not_found(repo) -> None:
    with pytest.raises(TaskNotFound) as excinfo:
        repo.update_task(424242, completed=True)
    assert excinfo.value.task_id == 424242
    assert isinstance(excinfo.value, StoreError)


def test_update_overwrites_only_supplied_fields(repo) -> None:
    task = repo.create_task("A", "keep me")

    updated = repo.update_task(task.id, completed=True)

    assert updated.title == "A"
    assert updated.description == "keep me"
    assert updated.completed is True


def test_update_with_no_fields_only_advances_updated_at(repo) -> None:
    task = repo.create_task("A", "desc")
    before = TaskRead.model_validate(task)

    updated = repo.update_task(task.id)
    after = TaskRead.model_validate(updated)

    assert _visible(updated) == before.model_dump(exclude={"updated_at"})
    assert after.updated_at > before.updated_at
    assert after.updated_at >= after.created_at


def test_same_full_update_twice_is_idempotent(repo) -> None:
    task = repo.create_task("A")

    once = _visible(repo.update_task(task.id, title="B", description="d", completed=True))
    twice = _visible(repo.update_task(task.id, title="B", description="d", completed=True))

    assert once == twice
    assert once["title"] == "B"


def test_update_is_visible_to_reads(repo) -> None:
    task = repo.create_task("A")
    repo.update_task(task.id, title="renamed")

    assert repo.get_task(task.id).title == "renamed"


def test_rejected_insert_raises_store_error(repo) -> None:
    with pytest.raises(StoreError):
        repo.create_task(None)
    # the session is usable again after the rollback
    assert repo.create_task("ok").title == "ok"


def test_query_failure_raises_store_error(repo, session, monkeypatch) -> None:
    def broken_query(*_args, **_kwargs):
        raise OperationalError("SELECT 1", {}, Exception("database is gone"))

    monkeypatch.setattr(session, "query", broken_query)

    with pytest.raises(StoreError) as excinfo:
        repo.list_tasks()
    assert not isinstance(excinfo.value, TaskNotFound)
    assert isinstance(excinfo.value.cause, OperationalError)

    with pytest.raises(StoreError):
        repo.get_task(1)
