from __future__ import annotations

import random

from .entities import Node
from .graph import RoadGraph

SHAPES: tuple[str, ...] = ("random", "linear", "star", "dense")


def _weights(rng: random.Random) -> tuple[int, int, int]:
    return rng.randint(1, 100), rng.randint(1, 60), rng.randint(1, 200)


def _empty_graph(node_count: int) -> RoadGraph:
    graph = RoadGraph()
    for node_id in range(1, node_count + 1):
        graph.register_node(Node(node_id, f"City{node_id}"))
    return graph


def random_graph(node_count: int, extra_edges: int, *, seed: int = 42) -> RoadGraph:
    """Connected graph: a random spanning tree plus ``extra_edges`` random chords."""
    node_count = max(1, node_count)
    rng = random.Random(seed)
    graph = _empty_graph(node_count)
    for node_id in range(2, node_count + 1):
        graph.connect(rng.randint(1, node_id - 1), node_id, *_weights(rng))
    for _ in range(max(0, extra_edges)):
        a = rng.randint(1, node_count)
        b = rng.randint(1, node_count)
        if a != b:
            graph.connect(a, b, *_weights(rng))
    return graph.freeze()


def linear_graph(node_count: int, *, seed: int = 42) -> RoadGraph:
    rng = random.Random(seed)
    graph = _empty_graph(max(1, node_count))
    for node_id in range(1, node_count):
        graph.connect(node_id, node_id + 1, *_weights(rng))
    return graph.freeze()


def star_graph(leaf_count: int, *, seed: int = 42) -> RoadGraph:
    rng = random.Random(seed)
    graph = _empty_graph(max(1, leaf_count + 1))
    for node_id in range(2, leaf_count + 2):
        graph.connect(1, node_id, *_weights(rng))
    return graph.freeze()


def dense_graph(node_count: int, *, density: float = 0.5, seed: int = 42) -> RoadGraph:
    rng = random.Random(seed)
    graph = _empty_graph(max(1, node_count))
    for a in range(1, node_count + 1):
        for b in range(a + 1, node_count + 1):
            if rng.random() < density:
                graph.connect(a, b, *_weights(rng))
    return graph.freeze()


def build_graph(shape: str, node_count: int, *, seed: int = 42) -> RoadGraph:
    if shape == "random":
        return random_graph(node_count, node_count * 2, seed=seed)
    if shape == "linear":
        return linear_graph(node_count, seed=seed)
    if shape == "star":
        return star_graph(max(1, node_count - 1), seed=seed)
    if shape == "dense":
        return dense_graph(node_count, seed=seed)
    raise ValueError(f"unknown graph shape {shape!r}; expected one of {', '.join(SHAPES)}")
