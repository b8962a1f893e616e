from __future__ import annotations

import sys
from dataclasses import dataclass, field
from enum import Enum

from .errors import RoutingError

NO_PATH_TOTAL = sys.maxsize


class Criterion(Enum):
    """Edge weight dimension used as traversal cost.

    Each member carries its ordinal index (used to address per-criterion state
    arrays), its single-letter code and the label used in text output.
    """

    DISTANCE = (0, "D", "DISTANCE")
    TIME = (1, "T", "TIME")
    COST = (2, "C", "COST")

    def __init__(self, index: int, code: str, label: str) -> None:
        self.index = index
        self.code = code
        self.label = label

    @classmethod
    def from_code(cls, code: str) -> Criterion:
        key = str(code or "").strip().upper()
        criterion = _CRITERION_CODES.get(key)
        if criterion is None:
            raise RoutingError(
                reason_code="unknown_criterion",
                message=f"unknown criterion code: {code!r}",
                details={"code": code},
            )
        return criterion


# Cyrillic aliases used by Russian-language input files.
_CRITERION_CODES: dict[str, Criterion] = {
    "D": Criterion.DISTANCE,
    "T": Criterion.TIME,
    "C": Criterion.COST,
    "Д": Criterion.DISTANCE,
    "В": Criterion.TIME,
    "С": Criterion.COST,
}

CRITERIA: tuple[Criterion, ...] = (Criterion.DISTANCE, Criterion.TIME, Criterion.COST)


@dataclass(frozen=True)
class Node:
    id: int
    name: str = field(compare=False)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Edge:
    source: Node
    target: Node
    distance: int
    time: int
    cost: int

    def __post_init__(self) -> None:
        for label, value in (("distance", self.distance), ("time", self.time), ("cost", self.cost)):
            if value < 0:
                raise ValueError(f"edge {label} must be >= 0, got {value}")

    def weight(self, criterion: Criterion) -> int:
        if criterion is Criterion.DISTANCE:
            return self.distance
        if criterion is Criterion.TIME:
            return self.time
        if criterion is Criterion.COST:
            return self.cost
        raise RoutingError(
            reason_code="unknown_criterion",
            message=f"unknown criterion: {criterion!r}",
        )

    @property
    def weights(self) -> tuple[int, int, int]:
        """Weights indexed by ``Criterion.index``."""
        return (self.distance, self.time, self.cost)

    def reversed(self) -> Edge:
        return Edge(self.target, self.source, self.distance, self.time, self.cost)

    def __str__(self) -> str:
        return (
            f"{self.source.name} - {self.target.name}: "
            f"distance={self.distance}, time={self.time}, cost={self.cost}"
        )


@dataclass(frozen=True, eq=False)
class Route:
    """Ordered node sequence with summed distance, time and cost.

    Routes compare and hash by node sequence only. An empty sequence is the
    "no path" sentinel; its totals are ``NO_PATH_TOTAL``.
    """

    nodes: tuple[Node, ...]
    distance: int
    time: int
    cost: int

    @classmethod
    def empty(cls) -> Route:
        return cls((), NO_PATH_TOTAL, NO_PATH_TOTAL, NO_PATH_TOTAL)

    @classmethod
    def single(cls, node: Node) -> Route:
        return cls((node,), 0, 0, 0)

    def exists(self) -> bool:
        return bool(self.nodes)

    @property
    def node_ids(self) -> tuple[int, ...]:
        return tuple(node.id for node in self.nodes)

    def value(self, criterion: Criterion) -> int:
        if criterion is Criterion.DISTANCE:
            return self.distance
        if criterion is Criterion.TIME:
            return self.time
        if criterion is Criterion.COST:
            return self.cost
        raise RoutingError(
            reason_code="unknown_criterion",
            message=f"unknown criterion: {criterion!r}",
        )

    def totals(self) -> tuple[int, int, int]:
        return (self.distance, self.time, self.cost)

    def path_string(self) -> str:
        return " -> ".join(node.name for node in self.nodes)

    def params_string(self) -> str:
        return f"distance={self.distance}, time={self.time}, cost={self.cost}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Route):
            return NotImplemented
        return self.node_ids == other.node_ids

    def __hash__(self) -> int:
        return hash(self.node_ids)

    def __str__(self) -> str:
        if not self.exists():
            return "<no route>"
        return f"{self.path_string()} | {self.params_string()}"
