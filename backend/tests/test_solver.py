from __future__ import annotations

import pytest

from roadroute import route_cache, solver as solver_module
from roadroute.entities import CRITERIA, Criterion
from roadroute.errors import RoutingError
from roadroute.graph import RoadGraph
from roadroute.metrics_store import metrics_snapshot, reset_metrics
from roadroute.models import RouteRequest
from roadroute.route_cache import RouteCacheStore, build_route_cache
from roadroute.settings import settings
from roadroute.solver import RouteSolver, make_engine


def _network() -> RoadGraph:
    return RoadGraph.from_records(
        [(1, "Moscow"), (2, "Saint Petersburg"), (3, "Nizhny Novgorod"), (4, "Kazan"), (5, "Sochi")],
        [
            (1, 2, 700, 480, 800),
            (1, 3, 400, 250, 300),
            (2, 3, 1100, 700, 1200),
            (3, 4, 350, 300, 500),
            (1, 4, 800, 600, 1000),
        ],
    )


def _request(source: str, destination: str, priorities: str = "(D,T,C)") -> RouteRequest:
    return RouteRequest(source=source, destination=destination, priorities=priorities)


@pytest.fixture(autouse=True)
def _clean_metrics():
    reset_metrics()
    yield
    reset_metrics()


def test_solve_returns_optimal_routes_and_compromise() -> None:
    result = RouteSolver(_network(), engine="interleaved").solve(_request("Moscow", "Saint Petersburg"))

    for criterion in CRITERIA:
        assert result.route_for(criterion).node_ids == (1, 2)
        assert result.route_for(criterion).totals() == (700, 480, 800)
    assert result.compromise.node_ids == (1, 2)
    assert result.engine == "interleaved"
    assert not result.cached


def test_engines_agree_on_results() -> None:
    graph = _network()
    request = _request("Saint Petersburg", "Kazan", "(C,T,D)")

    left = RouteSolver(graph, engine="sequential").solve(request)
    right = RouteSolver(graph, engine="interleaved").solve(request)

    assert left.engine == "sequential"
    assert left.optimal_routes == right.optimal_routes
    assert left.compromise == right.compromise
    assert left.route_for(Criterion.DISTANCE).node_ids == (2, 3, 4)
    assert left.compromise.node_ids == (2, 1, 3, 4)
    assert left.compromise.totals() == (1450, 1030, 1600)


def test_unreachable_city_yields_no_route_everywhere() -> None:
    result = RouteSolver(_network()).solve(_request("Moscow", "Sochi"))

    assert not any(result.route_for(c).exists() for c in CRITERIA)
    assert not result.compromise.exists()


def test_unknown_city_raises_and_records_error_metric() -> None:
    solver = RouteSolver(_network(), engine="sequential")

    with pytest.raises(RoutingError) as exc:
        solver.solve(_request("Moscow", "Atlantis"))

    assert exc.value.reason_code == "unknown_city"
    snapshot = metrics_snapshot()
    assert snapshot["total_errors"] == 1
    assert snapshot["operations"]["solve:sequential"]["error_count"] == 1


def test_successful_solve_records_settled_nodes() -> None:
    RouteSolver(_network(), engine="interleaved").solve(_request("Kazan", "Saint Petersburg"))

    operation = metrics_snapshot()["operations"]["solve:interleaved"]
    assert operation["call_count"] == 1
    assert operation["error_count"] == 0
    assert operation["settled_nodes"] > 0


def test_solve_all_preserves_request_order() -> None:
    solver = RouteSolver(_network())
    requests = [
        _request("Nizhny Novgorod", "Kazan", "(C,D,T)"),
        _request("Moscow", "Moscow"),
        _request("Kazan", "Moscow", "(T,C,D)"),
    ]

    results = solver.solve_all(requests)

    assert [r.request for r in results] == requests
    assert results[0].compromise.totals() == (350, 300, 500)
    assert results[1].compromise.totals() == (0, 0, 0)
    assert results[2].route_for(Criterion.TIME).totals() == (750, 550, 800)


def test_cache_serves_repeat_requests() -> None:
    cache = RouteCacheStore(ttl_s=60, max_entries=8)
    solver = RouteSolver(_network(), cache=cache)

    first = solver.solve(_request("Moscow", "Kazan", "(D,T,C)"))
    second = solver.solve(_request("Moscow", "Kazan", "(T,D,C)"))

    assert not first.cached
    assert second.cached
    assert second.optimal_routes == first.optimal_routes
    assert all(stats.settled == 0 for stats in second.stats.values())
    assert cache.snapshot()["hits"] == 1
    assert cache.snapshot()["size"] == 1


def test_cache_follows_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "route_cache_enabled", False)
    assert build_route_cache() is None
    assert RouteSolver(_network()).cache is None

    monkeypatch.setattr(settings, "route_cache_enabled", True)
    monkeypatch.setattr(settings, "route_cache_max_entries", 3)
    cache = build_route_cache()
    assert isinstance(cache, route_cache.RouteCacheStore)
    assert cache.snapshot()["max_entries"] == 3


def test_default_engine_comes_from_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "path_engine", "sequential")

    assert RouteSolver(_network()).engine.name == "sequential"


def test_unknown_engine_is_rejected() -> None:
    with pytest.raises(RoutingError) as exc:
        make_engine(_network(), "quantum")
    assert exc.value.reason_code == "invalid_request"
    assert set(solver_module.ENGINES) == {"sequential", "interleaved"}
