# validator.py
from __future__ import annotations

from typing import List, Set, Tuple

from . import errors
from .dag import DAG, DAGError, format_path
from .errors import GraphConstructionError, JobValidationError
from .model import Job, JobKind, Task
from .schemas import JobRequest


def split_next_tasks(raw: str | None) -> List[str]:
    """
    Parse a comma-separated successor list: "b, c,,b" -> ["b", "c"].

    Blank and whitespace-only entries are dropped (they are not references
    to an empty-named task); repeats keep their first position.
    """
    names: List[str] = []
    for part in (raw or "").split(","):
        name = part.strip()
        if name and name not in names:
            names.append(name)
    return names


def validate_job_request(req: JobRequest) -> Job:
    """
    Validate a job submission and build the domain Job.

    Checks run in a fixed order and stop at the first failure:
      1. a trigger (schedule or route_path) is set
      2. there is at least one task
      3. every next_tasks name refers to a task of this job
      4. the task graph can be built (no duplicate task names)
      5. the task graph has no cycle

    Only "at least one trigger" is enforced: a request with both a schedule
    and a route_path is accepted.

    Raises:
        JobValidationError: for any rejected submission
    """
    if not req.schedule and not req.route_path:
        raise JobValidationError(errors.MISSING_TRIGGER, "schedule or route_path must be set")

    if not req.tasks:
        raise JobValidationError(errors.EMPTY_TASK_SET, "job must have at least one task")

    edges = _resolve_edges(req)
    _check_cycles(edges)

    return Job(
        name=req.name,
        kind=JobKind.CRON if req.schedule else JobKind.MANUAL,
        schedule=req.schedule or None,
        route_path=req.route_path or None,
        slug=req.slug or None,
        is_online=req.is_online,
        node_id=req.node_id,
        tasks=[
            Task(name=t.name, command=t.command, next_tasks=succ)
            for t, (_, succ) in zip(req.tasks, edges)
        ],
    )


def _resolve_edges(req: JobRequest) -> List[Tuple[str, List[str]]]:
    # Kept as a list, not a dict: duplicate task names must reach the graph.
    edges = [(t.name, split_next_tasks(t.next_tasks)) for t in req.tasks]
    known: Set[str] = {name for name, _ in edges}

    for name, succ in edges:
        for s in succ:
            if s not in known:
                raise JobValidationError(
                    errors.UNKNOWN_TASK_REFERENCE,
                    f"failed to find {s} in {name}",
                    {"reference": s, "task": name},
                )
    return edges


def _check_cycles(edges: List[Tuple[str, List[str]]]) -> None:
    try:
        dag: DAG[str] = DAG(len(edges))
        for name, succ in edges:
            dag.add_vertex(name, succ)
    except DAGError as e:
        raise GraphConstructionError(e.kind, str(e)) from e

    path = dag.cycle_path()
    if path:
        raise JobValidationError(
            errors.CYCLIC_DEPENDENCY,
            f"found cycle in this job, cycle path: {format_path(path)}",
            {"path": path},
        )
