from __future__ import annotations

from typing import Optional

import sqlalchemy as sa
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from ..errors import PersistenceError
from ..model import Job, Node, Task
from ..validator import split_next_tasks
from .models import JobRow, NodeRow, TaskRow


class JobStore:
    """
    Writes validated jobs to the database.

    The session factory is passed in; every save runs in its own session
    and its own transaction.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def save(self, job: Job) -> int:
        """
        Insert the job row and one row per task, atomically.

        Either everything is committed or nothing is: a failing insert (or a
        cancellation) rolls back the job row and any task rows already
        flushed.

        Returns:
            The new job id.

        Raises:
            PersistenceError: if any statement or the commit fails
        """
        try:
            async with self.session_factory() as s:
                async with s.begin():
                    row = JobRow(
                        name=job.name,
                        kind=job.kind,
                        schedule=job.schedule,
                        route_path=job.route_path,
                        slug=job.slug,
                        is_online=job.is_online,
                        node_id=job.node_id,
                    )
                    s.add(row)
                    await s.flush()

                    for task in job.tasks:
                        s.add(TaskRow(
                            job_id=row.id,
                            name=task.name,
                            command=task.command,
                            next_tasks=",".join(task.next_tasks),
                        ))
                        await s.flush()

                    job_id = row.id
        except SQLAlchemyError as e:
            raise PersistenceError(
                f"failed to save job: {getattr(e, 'orig', None) or e}",
                {"job": job.name, "cause": type(e).__name__},
            ) from e

        job.id = job_id
        for task in job.tasks:
            task.job_id = job_id
        return job_id

    async def add_node(self, name: str) -> Node:
        """Register a node so jobs can reference it. Node lifecycle lives elsewhere."""
        try:
            async with self.session_factory() as s:
                async with s.begin():
                    row = NodeRow(name=name)
                    s.add(row)
                    await s.flush()
                    return Node(id=row.id, name=row.name)
        except SQLAlchemyError as e:
            raise PersistenceError(f"failed to save node: {e}", {"node": name}) from e

    async def get(self, job_id: int) -> Optional[Job]:
        async with self.session_factory() as s:
            q = sa.select(JobRow).where(JobRow.id == job_id).options(selectinload(JobRow.tasks))
            row = (await s.execute(q)).scalar_one_or_none()
            if row is None:
                return None
            return _to_job(row)

    async def count(self) -> tuple[int, int]:
        """Number of (job, task) rows currently stored."""
        async with self.session_factory() as s:
            jobs = (await s.execute(sa.select(sa.func.count()).select_from(JobRow))).scalar_one()
            tasks = (await s.execute(sa.select(sa.func.count()).select_from(TaskRow))).scalar_one()
            return jobs, tasks


def _to_job(row: JobRow) -> Job:
    return Job(
        id=row.id,
        name=row.name,
        kind=row.kind,
        schedule=row.schedule,
        route_path=row.route_path,
        slug=row.slug,
        is_online=row.is_online,
        node_id=row.node_id,
        tasks=[
            Task(name=t.name, command=t.command, next_tasks=split_next_tasks(t.next_tasks), job_id=t.job_id)
            for t in row.tasks
        ],
    )
