"""Tests for jobgraph.cloud.store."""

import asyncio

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from conftest import make_request
from jobgraph.errors import PersistenceError
from jobgraph.model import Job, JobKind, Task
from jobgraph.validator import validate_job_request


async def test_save_and_get(store):
    job = validate_job_request(make_request(("A", "B,C"), ("B", ""), ("C", ""), name="etl"))
    job_id = await store.save(job)

    assert job.id == job_id
    assert all(t.job_id == job_id for t in job.tasks)

    stored = await store.get(job_id)
    assert stored.name == "etl"
    assert stored.kind == JobKind.CRON
    assert stored.task_names == ["A", "B", "C"]
    assert stored.tasks[0].next_tasks == ["B", "C"]
    assert await store.count() == (1, 3)


async def test_get_missing(store):
    assert await store.get(404) is None


async def test_failing_task_insert_rolls_back_everything(store):
    job = Job(
        name="broken",
        kind=JobKind.MANUAL,
        route_path="/hooks/broken",
        tasks=[
            Task(name="A", command="echo a"),
            Task(name="B", command="echo b"),
            Task(name="C", command=None),  # NOT NULL violation on the third insert
        ],
    )
    with pytest.raises(PersistenceError) as exc_info:
        await store.save(job)

    assert exc_info.value.kind == "PersistenceError"
    assert exc_info.value.details["cause"] == "IntegrityError"
    assert job.id is None
    assert await store.count() == (0, 0)


async def test_duplicate_slug(store):
    first = validate_job_request(make_request(("A", ""), slug="nightly"))
    second = validate_job_request(make_request(("A", ""), slug="nightly"))

    await store.save(first)
    with pytest.raises(PersistenceError):
        await store.save(second)

    assert await store.count() == (1, 1)


async def test_jobs_without_slug_do_not_collide(store):
    await store.save(validate_job_request(make_request(("A", ""))))
    await store.save(validate_job_request(make_request(("A", ""))))
    assert await store.count() == (2, 2)


async def test_cancel_mid_transaction_rolls_back(store, monkeypatch):
    real_flush = AsyncSession.flush
    calls = []

    async def flush(self, *args, **kwargs):
        calls.append(1)
        if len(calls) == 2:
            raise asyncio.CancelledError()
        return await real_flush(self, *args, **kwargs)

    monkeypatch.setattr(AsyncSession, "flush", flush)

    job = validate_job_request(make_request(("A", ""), ("B", "")))
    with pytest.raises(asyncio.CancelledError):
        await store.save(job)

    monkeypatch.undo()
    assert await store.count() == (0, 0)


async def test_job_bound_to_node(store):
    node = await store.add_node("worker-1")
    job_id = await store.save(validate_job_request(make_request(("A", ""), node_id=node.id)))

    stored = await store.get(job_id)
    assert stored.node_id == node.id


async def test_concurrent_same_slug_one_wins(store):
    first = validate_job_request(make_request(("A", ""), slug="hourly"))
    second = validate_job_request(make_request(("A", ""), ("B", ""), slug="hourly"))

    results = await asyncio.gather(store.save(first), store.save(second), return_exceptions=True)

    assert sum(isinstance(r, int) for r in results) == 1
    assert sum(isinstance(r, PersistenceError) for r in results) == 1
    jobs, _ = await store.count()
    assert jobs == 1
