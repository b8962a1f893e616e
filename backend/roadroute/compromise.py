from __future__ import annotations

from collections.abc import Mapping, Sequence

from .entities import CRITERIA, Criterion, Route
from .errors import RoutingError


def validate_priorities(priorities: Sequence[Criterion]) -> tuple[Criterion, Criterion, Criterion]:
    """Return ``priorities`` as a tuple, requiring a permutation of all three criteria."""
    ordered = tuple(priorities)
    if len(ordered) != len(CRITERIA) or set(ordered) != set(CRITERIA):
        raise RoutingError(
            reason_code="invalid_request",
            message="priorities must be a permutation of DISTANCE, TIME and COST",
            details={"priorities": [getattr(c, "name", str(c)) for c in ordered]},
        )
    return ordered  # type: ignore[return-value]


def unique_routes(optimal_routes: Mapping[Criterion, Route]) -> list[Route]:
    """Distinct routes by node sequence, first occurrence kept in DISTANCE, TIME, COST order."""
    seen: set[Route] = set()
    unique: list[Route] = []
    for criterion in CRITERIA:
        route = optimal_routes[criterion]
        if route in seen:
            continue
        seen.add(route)
        unique.append(route)
    return unique


def priority_key(route: Route, priorities: Sequence[Criterion]) -> tuple[int, ...]:
    return tuple(route.value(criterion) for criterion in priorities)


def select_compromise(
    optimal_routes: Mapping[Criterion, Route], priorities: Sequence[Criterion]
) -> Route:
    """Pick the lexicographically best route under ``priorities`` (smaller is better).

    A full tie between distinct routes resolves to the one found first in the
    DISTANCE, TIME, COST scan.
    """
    ordered = validate_priorities(priorities)
    candidates = unique_routes(optimal_routes)
    if len(candidates) == 1:
        return candidates[0]
    # min() keeps the first of equal keys, which gives the scan-order tie-break.
    return min(candidates, key=lambda route: priority_key(route, ordered))
