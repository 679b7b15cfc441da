# errors.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

MISSING_TRIGGER = "MissingTrigger"
EMPTY_TASK_SET = "EmptyTaskSet"
UNKNOWN_TASK_REFERENCE = "UnknownTaskReference"
DUPLICATE_VERTEX = "DuplicateVertex"
CYCLIC_DEPENDENCY = "CyclicDependency"
CAPACITY_EXCEEDED = "CapacityExceeded"
INVALID_CAPACITY = "InvalidCapacity"
PERSISTENCE_ERROR = "PersistenceError"

# Graph-engine misuse; the validator sizes the graph itself, so these mean a bug.
INTERNAL_KINDS = frozenset({CAPACITY_EXCEEDED, INVALID_CAPACITY})


@dataclass
class JobError(Exception):
    """
    Structured job error.

    `message` is what callers see (the HTTP `{"error": ...}` body);
    `kind` and `details` are kept for CLI output and tests.
    """
    kind: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return self.message

    def describe(self) -> str:
        lines = [f"{self.kind}: {self.message}"]
        for k, v in self.details.items():
            lines.append(f"{k}={v}")
        return "\n".join(lines)


class JobValidationError(JobError):
    """Submission rejected before any I/O."""


class GraphConstructionError(JobValidationError):
    """The graph engine refused a vertex or the graph size."""

    @property
    def internal(self) -> bool:
        return self.kind in INTERNAL_KINDS


class PersistenceError(JobError):
    """The store transaction failed and was rolled back."""

    def __init__(self, message: str, details: Dict[str, Any] | None = None):
        super().__init__(PERSISTENCE_ERROR, message, details or {})
