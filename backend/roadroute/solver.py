from __future__ import annotations

import time
from collections.abc import Iterable
from dataclasses import dataclass

from .compromise import select_compromise
from .dijkstra import DijkstraPathFinder, SearchStats
from .entities import CRITERIA, Criterion, Node, Route
from .errors import RoutingError
from .graph import RoadGraph
from .logging_utils import log_event
from .metrics_store import record_request
from .models import RouteRequest
from .multi_criteria import InterleavedPathFinder
from .route_cache import RouteCacheStore, build_route_cache
from .settings import settings

PathEngine = DijkstraPathFinder | InterleavedPathFinder

ENGINES: dict[str, type[DijkstraPathFinder] | type[InterleavedPathFinder]] = {
    "sequential": DijkstraPathFinder,
    "interleaved": InterleavedPathFinder,
}


def make_engine(graph: RoadGraph, name: str | None = None) -> PathEngine:
    key = str(name or settings.path_engine).strip().lower()
    try:
        return ENGINES[key](graph)
    except KeyError:
        raise RoutingError(
            reason_code="invalid_request",
            message=f"unknown path engine {name!r}",
            details={"engine": name},
        ) from None


@dataclass(frozen=True)
class SolutionResult:
    request: RouteRequest
    optimal_routes: dict[Criterion, Route]
    compromise: Route
    stats: dict[Criterion, SearchStats]
    engine: str
    cached: bool = False

    def route_for(self, criterion: Criterion) -> Route:
        return self.optimal_routes[criterion]


class RouteSolver:
    """Resolves requests by name, runs the multi-criterion engine and picks the compromise."""

    def __init__(
        self,
        graph: RoadGraph,
        *,
        engine: str | PathEngine | None = None,
        cache: RouteCacheStore | None = None,
    ) -> None:
        self.graph = graph
        if engine is None or isinstance(engine, str):
            self.engine = make_engine(graph, engine)
        else:
            self.engine = engine
        self.cache = cache if cache is not None else build_route_cache()

    def _resolve(self, name: str) -> Node:
        node = self.graph.node_by_name(name)
        if node is None:
            raise RoutingError(
                reason_code="unknown_city",
                message=f"city not found: {name}",
                details={"name": name},
            )
        return node

    def optimal_routes(
        self, source: Node, destination: Node
    ) -> tuple[dict[Criterion, Route], dict[Criterion, SearchStats], bool]:
        key = (source.id, destination.id)
        if self.cache is not None:
            cached = self.cache.get(key)
            if cached is not None:
                log_event("route_cache_hit", source_id=source.id, destination_id=destination.id)
                empty = {criterion: SearchStats(0, 0, 0) for criterion in CRITERIA}
                return cached, empty, True

        routes, stats = self.engine.find_all_optimal_paths_with_stats(source, destination)
        if self.cache is not None:
            self.cache.set(key, routes)
        return routes, stats, False

    def solve(self, request: RouteRequest) -> SolutionResult:
        t0 = time.perf_counter()
        try:
            source = self._resolve(request.source)
            destination = self._resolve(request.destination)
            routes, stats, cached = self.optimal_routes(source, destination)
            compromise = select_compromise(routes, request.priorities)
        except RoutingError:
            record_request(
                f"solve:{self.engine.name}",
                duration_ms=(time.perf_counter() - t0) * 1000.0,
                error=True,
            )
            raise

        duration_ms = (time.perf_counter() - t0) * 1000.0
        settled = sum(s.settled for s in stats.values())
        record_request(f"solve:{self.engine.name}", duration_ms=duration_ms, settled_nodes=settled)
        log_event(
            "request_solved",
            source=request.source,
            destination=request.destination,
            priorities=[c.name for c in request.priorities],
            engine=self.engine.name,
            cached=cached,
            settled_nodes={c.name: stats[c].settled for c in CRITERIA},
            compromise_exists=compromise.exists(),
            duration_ms=round(duration_ms, 3),
        )
        return SolutionResult(
            request=request,
            optimal_routes=routes,
            compromise=compromise,
            stats=stats,
            engine=self.engine.name,
            cached=cached,
        )

    def solve_all(self, requests: Iterable[RouteRequest]) -> list[SolutionResult]:
        return [self.solve(request) for request in requests]
