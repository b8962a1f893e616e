from __future__ import annotations

import pytest

from roadroute.compromise import select_compromise, unique_routes, validate_priorities
from roadroute.entities import CRITERIA, Criterion, Node, Route
from roadroute.errors import RoutingError
from roadroute.graph import RoadGraph
from roadroute.multi_criteria import InterleavedPathFinder

D, T, C = Criterion.DISTANCE, Criterion.TIME, Criterion.COST


def _routes_between(graph: RoadGraph, source: str, destination: str) -> dict[Criterion, Route]:
    a = graph.node_by_name(source)
    b = graph.node_by_name(destination)
    assert a is not None and b is not None
    return InterleavedPathFinder(graph).find_all_optimal_paths(a, b)


def _detour_graph() -> RoadGraph:
    return RoadGraph.from_records(
        [(1, "A"), (2, "B"), (3, "C")],
        [(1, 2, 100, 60, 500), (1, 3, 150, 30, 100), (3, 2, 150, 30, 100)],
    )


def _three_corridors() -> RoadGraph:
    return RoadGraph.from_records(
        [(1, "Start"), (2, "Short"), (3, "Fast"), (4, "Cheap"), (5, "Finish")],
        [
            (1, 2, 50, 100, 250),
            (2, 5, 50, 100, 250),
            (1, 3, 150, 30, 200),
            (3, 5, 150, 30, 200),
            (1, 4, 200, 150, 50),
            (4, 5, 200, 150, 50),
        ],
    )


def test_compromise_follows_priority_order_on_detour_graph() -> None:
    routes = _routes_between(_detour_graph(), "A", "B")

    assert routes[D].node_ids == (1, 2)
    assert routes[D].totals() == (100, 60, 500)
    assert routes[T].node_ids == (1, 3, 2)
    assert routes[T].totals() == (300, 60, 200)
    assert routes[C].node_ids == (1, 3, 2)

    assert select_compromise(routes, (D, T, C)).node_ids == (1, 2)
    assert select_compromise(routes, (C, T, D)).node_ids == (1, 3, 2)


@pytest.mark.parametrize(
    ("priorities", "via", "totals"),
    [
        ((D, T, C), "Short", (100, 200, 500)),
        ((T, D, C), "Fast", (300, 60, 400)),
        ((C, D, T), "Cheap", (400, 300, 100)),
    ],
)
def test_compromise_picks_primary_criterion_winner(
    priorities: tuple[Criterion, Criterion, Criterion], via: str, totals: tuple[int, int, int]
) -> None:
    routes = _routes_between(_three_corridors(), "Start", "Finish")

    best = select_compromise(routes, priorities)

    assert [n.name for n in best.nodes] == ["Start", via, "Finish"]
    assert best.totals() == totals


def test_compromise_secondary_criterion_breaks_primary_tie() -> None:
    a, b, c, x = Node(1, "A"), Node(2, "B"), Node(3, "C"), Node(4, "X")
    slow = Route((a, b), 10, 50, 5)
    fast = Route((a, c, b), 10, 20, 9)
    cheap = Route((a, x, b), 30, 60, 1)
    routes = {D: slow, T: fast, C: cheap}

    assert select_compromise(routes, (D, T, C)) == fast
    assert select_compromise(routes, (D, C, T)) == slow


def test_full_tie_resolves_to_first_route_in_scan_order() -> None:
    a, b, c = Node(1, "A"), Node(2, "B"), Node(3, "C")
    direct = Route((a, b), 10, 10, 10)
    detour = Route((a, c, b), 10, 10, 10)

    assert select_compromise({D: direct, T: detour, C: detour}, (C, T, D)) == direct
    assert select_compromise({D: detour, T: direct, C: direct}, (T, C, D)) == detour


def test_single_unique_route_is_returned_as_is() -> None:
    a, b = Node(1, "A"), Node(2, "B")
    route = Route((a, b), 1, 2, 3)

    assert select_compromise({c: route for c in CRITERIA}, (T, D, C)) is route


def test_all_no_path_gives_no_path_compromise() -> None:
    routes = {c: Route.empty() for c in CRITERIA}

    assert not select_compromise(routes, (D, T, C)).exists()


def test_unique_routes_keeps_first_occurrence_order() -> None:
    a, b, c = Node(1, "A"), Node(2, "B"), Node(3, "C")
    direct = Route((a, b), 1, 1, 1)
    detour = Route((a, c, b), 2, 2, 2)

    assert unique_routes({D: detour, T: direct, C: detour}) == [detour, direct]


@pytest.mark.parametrize(
    "priorities",
    [(D, D, T), (D, T), (D, T, C, D), ()],
)
def test_priorities_must_be_a_permutation(priorities: tuple[Criterion, ...]) -> None:
    with pytest.raises(RoutingError) as exc:
        validate_priorities(priorities)
    assert exc.value.reason_code == "invalid_request"


def test_validate_priorities_returns_tuple() -> None:
    assert validate_priorities([C, D, T]) == (C, D, T)
