from __future__ import annotations

import redis.asyncio as redis

from .settings import QUEUE_NAME


class JobQueue:
    """Hands committed job ids to the scheduler tier through a Redis list."""

    def __init__(self, client: redis.Redis, name: str = QUEUE_NAME):
        self.r = client
        self.name = name

    @classmethod
    def from_url(cls, url: str, name: str = QUEUE_NAME) -> JobQueue:
        return cls(redis.from_url(url, decode_responses=True), name)

    async def enqueue_job(self, job_id: int) -> None:
        await self.r.rpush(self.name, str(job_id))  # FIFO: push right

    async def dequeue_job(self, timeout_s: int = 5) -> int | None:
        item = await self.r.blpop(self.name, timeout=timeout_s)  # FIFO: pop left
        if not item:
            return None
        _q, job_id = item
        return int(job_id)

    async def close(self) -> None:
        await self.r.aclose()
