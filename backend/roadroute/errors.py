from __future__ import annotations

from dataclasses import dataclass
from typing import Any

FROZEN_REASON_CODES: frozenset[str] = frozenset(
    {
        "node_not_found",
        "graph_frozen",
        "invalid_request",
        "unknown_criterion",
        "unknown_city",
        "input_format_invalid",
    }
)


@dataclass
class RoutingError(ValueError):
    reason_code: str
    message: str
    details: dict[str, Any] | None = None

    def __str__(self) -> str:
        return self.message


class NodeNotFoundError(RoutingError):
    def __init__(self, node_id: int) -> None:
        super().__init__(
            reason_code="node_not_found",
            message=f"node with id {node_id} not found",
            details={"node_id": node_id},
        )


class GraphFrozenError(RoutingError):
    def __init__(self, operation: str) -> None:
        super().__init__(
            reason_code="graph_frozen",
            message=f"graph is frozen; {operation} is not allowed",
            details={"operation": operation},
        )


class InputFormatError(RoutingError):
    def __init__(self, line_number: int, line: str, reason: str) -> None:
        super().__init__(
            reason_code="input_format_invalid",
            message=f"parse error at line {line_number}: {line}\n{reason}",
            details={"line_number": line_number, "line": line, "reason": reason},
        )

    @property
    def line_number(self) -> int:
        return int((self.details or {}).get("line_number", 0))


def normalize_reason_code(reason_code: str, *, default: str = "invalid_request") -> str:
    code = str(reason_code or "").strip()
    if code in FROZEN_REASON_CODES:
        return code
    return default
