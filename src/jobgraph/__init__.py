from .dag import DAG, format_path
from .errors import GraphConstructionError, JobError, JobValidationError, PersistenceError
from .model import Job, JobKind, Node, Task
from .schemas import JobRequest, TaskRequest
from .validator import split_next_tasks, validate_job_request

__all__ = [
    "DAG", "format_path",
    "JobError", "JobValidationError", "GraphConstructionError", "PersistenceError",
    "Job", "JobKind", "Node", "Task",
    "JobRequest", "TaskRequest",
    "split_next_tasks", "validate_job_request",
]
