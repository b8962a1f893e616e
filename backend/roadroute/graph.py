from __future__ import annotations

from collections.abc import Iterable

from .entities import Edge, Node
from .errors import GraphFrozenError, NodeNotFoundError
from .logging_utils import log_event


class RoadGraph:
    """Undirected road network over dense integer node indices.

    Nodes and edges live in flat lists; each node index owns a list of
    ``(target index, edge)`` pairs. Every edge is stored once per direction
    with identical weights. After ``freeze()`` the graph is read-only and may
    be shared between path engines and threads.
    """

    def __init__(self) -> None:
        self._nodes: list[Node] = []
        self._edges: list[Edge] = []
        self._adjacency: list[list[tuple[int, Edge]]] = []
        self._index_by_id: dict[int, int] = {}
        self._index_by_name: dict[str, int] = {}
        self._frozen = False

    # ---- construction

    def register_node(self, node: Node) -> Node:
        """Add ``node``; registering an id twice returns the first node unchanged."""
        if self._frozen:
            raise GraphFrozenError("register_node")
        existing = self._index_by_id.get(node.id)
        if existing is not None:
            return self._nodes[existing]
        index = len(self._nodes)
        self._nodes.append(node)
        self._adjacency.append([])
        self._index_by_id[node.id] = index
        self._index_by_name[node.name] = index
        return node

    def add_edge(self, edge: Edge) -> Edge:
        """Add ``edge`` and its mirror. Both endpoints must already be registered."""
        if self._frozen:
            raise GraphFrozenError("add_edge")
        source_index = self._index_by_id.get(edge.source.id)
        if source_index is None:
            raise NodeNotFoundError(edge.source.id)
        target_index = self._index_by_id.get(edge.target.id)
        if target_index is None:
            raise NodeNotFoundError(edge.target.id)

        forward = Edge(
            self._nodes[source_index],
            self._nodes[target_index],
            edge.distance,
            edge.time,
            edge.cost,
        )
        backward = forward.reversed()
        self._edges.append(forward)
        self._edges.append(backward)
        self._adjacency[source_index].append((target_index, forward))
        self._adjacency[target_index].append((source_index, backward))
        return forward

    def connect(self, source_id: int, target_id: int, distance: int, time: int, cost: int) -> Edge:
        source = self.node_by_id(source_id)
        if source is None:
            raise NodeNotFoundError(source_id)
        target = self.node_by_id(target_id)
        if target is None:
            raise NodeNotFoundError(target_id)
        return self.add_edge(Edge(source, target, distance, time, cost))

    def freeze(self) -> RoadGraph:
        if not self._frozen:
            self._frozen = True
            log_event("graph_built", node_count=self.node_count, edge_count=self.edge_count)
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    @classmethod
    def from_records(
        cls,
        nodes: Iterable[tuple[int, str]],
        edges: Iterable[tuple[int, int, int, int, int]],
    ) -> RoadGraph:
        graph = cls()
        for node_id, name in nodes:
            graph.register_node(Node(int(node_id), str(name)))
        for source_id, target_id, distance, time, cost in edges:
            graph.connect(int(source_id), int(target_id), int(distance), int(time), int(cost))
        return graph.freeze()

    # ---- lookup

    def edges_from(self, node: Node) -> tuple[Edge, ...]:
        index = self._index_by_id.get(node.id)
        if index is None:
            return ()
        return tuple(edge for _target, edge in self._adjacency[index])

    def node_by_id(self, node_id: int) -> Node | None:
        index = self._index_by_id.get(node_id)
        return None if index is None else self._nodes[index]

    def node_by_name(self, name: str) -> Node | None:
        index = self._index_by_name.get(name)
        return None if index is None else self._nodes[index]

    def contains_name(self, name: str) -> bool:
        return name in self._index_by_name

    def nodes(self) -> tuple[Node, ...]:
        return tuple(self._nodes)

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def edge_count(self) -> int:
        """Number of undirected edges (each stored once per direction)."""
        return len(self._edges) // 2

    # ---- dense-index access used by the path engines

    def index_of(self, node: Node) -> int:
        index = self._index_by_id.get(node.id)
        if index is None:
            raise NodeNotFoundError(node.id)
        return index

    def node_at(self, index: int) -> Node:
        return self._nodes[index]

    def neighbours(self, index: int) -> list[tuple[int, Edge]]:
        return self._adjacency[index]

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node: object) -> bool:
        return isinstance(node, Node) and node.id in self._index_by_id
