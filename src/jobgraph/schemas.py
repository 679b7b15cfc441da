from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from .model import Job


# -------------------- Requests --------------------

class TaskRequest(BaseModel):
    name: str
    command: str
    next_tasks: Optional[str] = None  # "task1,task2,task3"


class JobRequest(BaseModel):
    name: str
    schedule: Optional[str] = None
    route_path: Optional[str] = None
    slug: Optional[str] = None
    node_id: Optional[int] = None
    is_online: bool = False
    tasks: list[TaskRequest] = Field(default_factory=list)


# -------------------- Responses --------------------

class OkResponse(BaseModel):
    msg: str = "ok"


class ErrorResponse(BaseModel):
    error: str


class TaskResponse(BaseModel):
    name: str
    command: str
    next_tasks: list[str]


class JobResponse(BaseModel):
    id: int
    name: str
    kind: str
    schedule: Optional[str]
    route_path: Optional[str]
    slug: Optional[str]
    is_online: bool
    node_id: Optional[int]
    tasks: list[TaskResponse]

    @classmethod
    def from_job(cls, job: Job) -> JobResponse:
        return cls(
            id=job.id,
            name=job.name,
            kind=job.kind.value,
            schedule=job.schedule,
            route_path=job.route_path,
            slug=job.slug,
            is_online=job.is_online,
            node_id=job.node_id,
            tasks=[TaskResponse(name=t.name, command=t.command, next_tasks=t.next_tasks) for t in job.tasks],
        )
