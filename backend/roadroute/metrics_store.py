from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from threading import Lock


@dataclass
class OperationStats:
    call_count: int = 0
    error_count: int = 0
    total_duration_ms: float = 0.0
    max_duration_ms: float = 0.0
    settled_nodes: int = 0


class MetricsStore:
    def __init__(self) -> None:
        self._lock = Lock()
        self._created_at = datetime.now(UTC).isoformat()
        self._operations: dict[str, OperationStats] = {}

    def record(
        self,
        operation: str,
        *,
        duration_ms: float,
        settled_nodes: int = 0,
        error: bool = False,
    ) -> None:
        name = operation.strip() or "unknown"
        d_ms = max(float(duration_ms), 0.0)

        with self._lock:
            stats = self._operations.setdefault(name, OperationStats())
            stats.call_count += 1
            if error:
                stats.error_count += 1
            stats.total_duration_ms += d_ms
            stats.settled_nodes += max(0, int(settled_nodes))
            if d_ms > stats.max_duration_ms:
                stats.max_duration_ms = d_ms

    def snapshot(self) -> dict[str, object]:
        with self._lock:
            operations: dict[str, dict[str, float | int]] = {}
            total_calls = 0
            total_errors = 0

            for name in sorted(self._operations):
                stats = self._operations[name]
                total_calls += stats.call_count
                total_errors += stats.error_count
                avg_duration_ms = (
                    stats.total_duration_ms / stats.call_count if stats.call_count else 0.0
                )
                operations[name] = {
                    "call_count": stats.call_count,
                    "error_count": stats.error_count,
                    "settled_nodes": stats.settled_nodes,
                    "total_duration_ms": round(stats.total_duration_ms, 3),
                    "avg_duration_ms": round(avg_duration_ms, 3),
                    "max_duration_ms": round(stats.max_duration_ms, 3),
                }

            return {
                "created_at": self._created_at,
                "total_calls": total_calls,
                "total_errors": total_errors,
                "operation_count": len(operations),
                "operations": operations,
            }

    def reset(self) -> None:
        with self._lock:
            self._created_at = datetime.now(UTC).isoformat()
            self._operations.clear()


METRICS = MetricsStore()


def record_request(
    operation: str, *, duration_ms: float, settled_nodes: int = 0, error: bool = False
) -> None:
    METRICS.record(operation, duration_ms=duration_ms, settled_nodes=settled_nodes, error=error)


def metrics_snapshot() -> dict[str, object]:
    return METRICS.snapshot()


def reset_metrics() -> None:
    METRICS.reset()
