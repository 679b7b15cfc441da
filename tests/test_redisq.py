"""Tests for jobgraph.cloud.redisq."""

from unittest.mock import AsyncMock

from jobgraph.cloud.redisq import JobQueue


async def test_enqueue_pushes_right():
    client = AsyncMock()
    queue = JobQueue(client, name="q")
    await queue.enqueue_job(7)
    client.rpush.assert_awaited_once_with("q", "7")


async def test_dequeue_pops_left():
    client = AsyncMock()
    client.blpop.return_value = ("q", "7")
    queue = JobQueue(client, name="q")
    assert await queue.dequeue_job(timeout_s=1) == 7
    client.blpop.assert_awaited_once_with("q", timeout=1)


async def test_dequeue_timeout():
    client = AsyncMock()
    client.blpop.return_value = None
    assert await JobQueue(client).dequeue_job() is None
