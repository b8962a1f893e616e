from __future__ import annotations

from .dijkstra import SearchState, SearchStats
from .entities import CRITERIA, Criterion, Node, Route
from .graph import RoadGraph


class InterleavedPathFinder:
    """Optimal routes for all criteria from one scheduling loop.

    One independent ``SearchState`` per criterion, addressed by the
    criterion's ordinal index. Each round settles one node in every state that
    is still active; a state drops out once it has settled the destination or
    emptied its heap. States share nothing but the read-only graph, so each
    per-criterion result equals a standalone ``DijkstraPathFinder`` run.
    """

    name = "interleaved"

    def __init__(self, graph: RoadGraph) -> None:
        self.graph = graph

    def find_all_optimal_paths_with_stats(
        self, source: Node, destination: Node
    ) -> tuple[dict[Criterion, Route], dict[Criterion, SearchStats]]:
        source_index = self.graph.index_of(source)
        target_index = self.graph.index_of(destination)
        if source_index == target_index:
            node = self.graph.node_at(source_index)
            return (
                {criterion: Route.single(node) for criterion in CRITERIA},
                {criterion: SearchStats(0, 0, 0) for criterion in CRITERIA},
            )

        # CRITERIA is in ordinal order, so states[criterion.index] is that criterion's state.
        states: list[SearchState] = [
            SearchState(self.graph, criterion, source_index, target_index) for criterion in CRITERIA
        ]

        any_active = True
        while any_active:
            any_active = False
            for state in states:
                if not state.active:
                    continue
                any_active = True
                state.settle_next()

        routes = {criterion: states[criterion.index].reconstruct() for criterion in CRITERIA}
        stats = {criterion: states[criterion.index].stats() for criterion in CRITERIA}
        return routes, stats

    def find_all_optimal_paths(self, source: Node, destination: Node) -> dict[Criterion, Route]:
        routes, _stats = self.find_all_optimal_paths_with_stats(source, destination)
        return routes

    def find_path(self, source: Node, destination: Node, criterion: Criterion) -> Route:
        return self.find_all_optimal_paths(source, destination)[criterion]
