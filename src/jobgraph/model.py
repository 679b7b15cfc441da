# model.py
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import List, Optional


class JobKind(str, enum.Enum):
    """How a job gets triggered."""
    CRON = "cron"      # time-based, has a schedule
    MANUAL = "manual"  # triggered externally, e.g. through its route path


@dataclass(frozen=True)
class Node:
    """A worker/runner a job is bound to. Owned by node management."""
    id: int
    name: str


@dataclass
class Task:
    """One unit of work inside a job's dependency graph."""
    name: str
    command: str
    # Successor edges: tasks that become runnable once this one completes.
    next_tasks: List[str] = field(default_factory=list)
    job_id: Optional[int] = None


@dataclass
class Job:
    """
    A unit of scheduled work: a trigger plus a graph of tasks.

    Built together with its tasks from one submission and stored in one
    transaction; there are no partial jobs.
    """
    name: str
    kind: JobKind
    tasks: List[Task]

    schedule: Optional[str] = None
    route_path: Optional[str] = None
    slug: Optional[str] = None          # globally unique when set
    is_online: bool = False
    node_id: Optional[int] = None

    id: Optional[int] = None            # set once stored

    @property
    def task_names(self) -> List[str]:
        return [t.name for t in self.tasks]
