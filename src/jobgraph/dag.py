# dag.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Generic, Hashable, Iterable, Iterator, List, Optional, Tuple, TypeVar

K = TypeVar("K", bound=Hashable)

# DFS colors
WHITE, GRAY, BLACK = 0, 1, 2


class DAGError(ValueError):
    """Base class for graph construction errors."""
    kind = "DAGError"


class InvalidCapacity(DAGError):
    kind = "InvalidCapacity"


class DuplicateVertex(DAGError):
    kind = "DuplicateVertex"


class CapacityExceeded(DAGError):
    kind = "CapacityExceeded"


@dataclass(frozen=True)
class Vertex(Generic[K]):
    """A vertex id plus its outgoing (successor) edges."""
    id: K
    successors: Tuple[K, ...] = field(default_factory=tuple)


class DAG(Generic[K]):
    """
    Fixed-capacity directed graph with cycle detection.

    Vertices sit in a list of slots indexed by insertion order, with a dict
    from vertex id to slot index alongside. Edge targets are NOT validated
    when a vertex is added: resolving references is the caller's job, and
    edges that point at unknown ids are ignored by the traversal.
    """

    def __init__(self, capacity: int):
        if capacity <= 0:
            raise InvalidCapacity(f"capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._slots: List[Vertex[K]] = []
        self._index: Dict[K, int] = {}
        self._cycle: Optional[List[K]] = None  # cached result, reset on add_vertex

    def __len__(self) -> int:
        return len(self._slots)

    def __contains__(self, vid: object) -> bool:
        return vid in self._index

    def __iter__(self) -> Iterator[K]:
        return (v.id for v in self._slots)

    def add_vertex(self, vid: K, successors: Iterable[K] = ()) -> None:
        if vid in self._index:
            raise DuplicateVertex(f"vertex {vid!r} already exists")
        if len(self._slots) >= self.capacity:
            raise CapacityExceeded(
                f"cannot add vertex {vid!r}: graph is full (capacity {self.capacity})"
            )
        self._index[vid] = len(self._slots)
        self._slots.append(Vertex(vid, tuple(successors)))
        self._cycle = None

    def successors(self, vid: K) -> List[K]:
        return list(self._slots[self._index[vid]].successors)

    def has_cycle(self) -> bool:
        return bool(self.cycle_path())

    def cycle_path(self) -> List[K]:
        """
        Return one concrete cycle as a list of vertex ids, or [] if acyclic.

        The path runs from the first gray vertex that gets re-encountered,
        along the DFS stack, and ends with that vertex again:
        A -> B -> C -> A gives [A, B, C, A]; a self-loop gives [A, A].
        Roots are tried in insertion order and successors in listed order,
        so the same graph always yields the same path.
        """
        if self._cycle is None:
            self._cycle = self._find_cycle()
        return list(self._cycle)

    def _successor_slots(self, slot: int) -> List[int]:
        return [self._index[s] for s in self._slots[slot].successors if s in self._index]

    def _find_cycle(self) -> List[K]:
        color = [WHITE] * len(self._slots)

        for root in range(len(self._slots)):
            if color[root] != WHITE:
                continue

            color[root] = GRAY
            path = [root]
            pending = [iter(self._successor_slots(root))]

            while pending:
                nxt = next(pending[-1], None)
                if nxt is None:
                    color[path.pop()] = BLACK
                    pending.pop()
                    continue

                if color[nxt] == GRAY:
                    start = path.index(nxt)
                    return [self._slots[i].id for i in path[start:]] + [self._slots[nxt].id]

                if color[nxt] == WHITE:
                    color[nxt] = GRAY
                    path.append(nxt)
                    pending.append(iter(self._successor_slots(nxt)))

        return []


def format_path(path: Iterable[Hashable], sep: str = " -> ") -> str:
    """Render a cycle path for error messages: "A -> B -> C -> A"."""
    return sep.join(str(p) for p in path)
