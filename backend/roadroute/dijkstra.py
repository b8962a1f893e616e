from __future__ import annotations

import heapq
from dataclasses import dataclass
from math import inf

from .entities import CRITERIA, Criterion, Edge, Node, Route
from .graph import RoadGraph

SearchKey = tuple[float, float, float]

UNREACHED: SearchKey = (inf, inf, inf)

# Equal costs under the searched criterion are broken by the other two, in
# cyclic DISTANCE -> TIME -> COST order.
SEARCH_ORDER: dict[Criterion, tuple[Criterion, Criterion, Criterion]] = {
    Criterion.DISTANCE: (Criterion.DISTANCE, Criterion.TIME, Criterion.COST),
    Criterion.TIME: (Criterion.TIME, Criterion.COST, Criterion.DISTANCE),
    Criterion.COST: (Criterion.COST, Criterion.DISTANCE, Criterion.TIME),
}


@dataclass(frozen=True)
class SearchStats:
    settled: int
    pushed: int
    stale_pops: int


class SearchState:
    """Call-local Dijkstra state for one criterion.

    Holds tentative keys, predecessors and the edge used to reach each node,
    the settled set and a lazy-deletion heap. Keys are cost tuples ordered by
    ``SEARCH_ORDER[criterion]``, so the first component is the searched
    criterion and the others only decide between equally cheap routes.
    ``settle_next`` settles exactly one node per call, so several states can be
    advanced from one scheduling loop without affecting each other's results.
    """

    __slots__ = (
        "graph",
        "criterion",
        "target",
        "order",
        "keys",
        "predecessors",
        "used_edges",
        "settled",
        "heap",
        "target_settled",
        "settled_count",
        "pushed",
        "stale_pops",
    )

    def __init__(self, graph: RoadGraph, criterion: Criterion, source: int, target: int) -> None:
        n_nodes = len(graph)
        self.graph = graph
        self.criterion = criterion
        self.target = target
        self.order = tuple(c.index for c in SEARCH_ORDER[criterion])
        self.keys: list[SearchKey] = [UNREACHED] * n_nodes
        self.predecessors: list[int] = [-1] * n_nodes
        self.used_edges: list[Edge | None] = [None] * n_nodes
        self.settled = bytearray(n_nodes)
        self.heap: list[tuple[SearchKey, int]] = [((0, 0, 0), source)]
        self.keys[source] = (0, 0, 0)
        self.target_settled = False
        self.settled_count = 0
        self.pushed = 1
        self.stale_pops = 0

    @property
    def active(self) -> bool:
        return bool(self.heap) and not self.target_settled

    @property
    def distances(self) -> list[float]:
        """Tentative cost of every node under the searched criterion."""
        return [key[0] for key in self.keys]

    def settle_next(self) -> int | None:
        """Pop and settle one node, relaxing its edges. Returns its index."""
        heap = self.heap
        settled = self.settled
        while heap:
            key, node = heapq.heappop(heap)
            if settled[node]:
                self.stale_pops += 1
                continue
            settled[node] = 1
            self.settled_count += 1
            if node == self.target:
                self.target_settled = True
                return node

            first, second, third = self.order
            keys = self.keys
            for nxt, edge in self.graph.neighbours(node):
                if settled[nxt]:
                    continue
                weights = edge.weights
                candidate = (
                    key[0] + weights[first],
                    key[1] + weights[second],
                    key[2] + weights[third],
                )
                if candidate < keys[nxt]:
                    keys[nxt] = candidate
                    self.predecessors[nxt] = node
                    self.used_edges[nxt] = edge
                    heapq.heappush(heap, (candidate, nxt))
                    self.pushed += 1
            return node
        return None

    def run(self) -> None:
        while self.active:
            self.settle_next()

    def reconstruct(self) -> Route:
        """Walk predecessors back from the target, summing all three weights."""
        if not self.target_settled:
            return Route.empty()

        nodes: list[Node] = []
        total_distance = 0
        total_time = 0
        total_cost = 0
        current = self.target
        while current != -1:
            nodes.append(self.graph.node_at(current))
            edge = self.used_edges[current]
            if edge is not None:
                total_distance += edge.distance
                total_time += edge.time
                total_cost += edge.cost
            current = self.predecessors[current]
        nodes.reverse()
        return Route(tuple(nodes), total_distance, total_time, total_cost)

    def stats(self) -> SearchStats:
        return SearchStats(settled=self.settled_count, pushed=self.pushed, stale_pops=self.stale_pops)


class DijkstraPathFinder:
    """Classic single-criterion Dijkstra, O((V + E) log V) per call."""

    name = "sequential"

    def __init__(self, graph: RoadGraph) -> None:
        self.graph = graph

    def find_path_with_stats(
        self, source: Node, destination: Node, criterion: Criterion
    ) -> tuple[Route, SearchStats]:
        source_index = self.graph.index_of(source)
        target_index = self.graph.index_of(destination)
        if source_index == target_index:
            return Route.single(self.graph.node_at(source_index)), SearchStats(0, 0, 0)

        state = SearchState(self.graph, criterion, source_index, target_index)
        state.run()
        return state.reconstruct(), state.stats()

    def find_path(self, source: Node, destination: Node, criterion: Criterion) -> Route:
        route, _stats = self.find_path_with_stats(source, destination, criterion)
        return route

    def find_all_optimal_paths_with_stats(
        self, source: Node, destination: Node
    ) -> tuple[dict[Criterion, Route], dict[Criterion, SearchStats]]:
        routes: dict[Criterion, Route] = {}
        stats: dict[Criterion, SearchStats] = {}
        for criterion in CRITERIA:
            routes[criterion], stats[criterion] = self.find_path_with_stats(
                source, destination, criterion
            )
        return routes, stats

    def find_all_optimal_paths(self, source: Node, destination: Node) -> dict[Criterion, Route]:
        routes, _stats = self.find_all_optimal_paths_with_stats(source, destination)
        return routes
