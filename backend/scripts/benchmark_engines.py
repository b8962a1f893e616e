from __future__ import annotations

import argparse
import json
import random
import tracemalloc
from datetime import UTC, datetime
from pathlib import Path
from time import perf_counter
from typing import Any, Sequence

from roadroute.dijkstra import DijkstraPathFinder
from roadroute.entities import CRITERIA
from roadroute.graph import RoadGraph
from roadroute.multi_criteria import InterleavedPathFinder
from roadroute.synthetic import SHAPES, build_graph


def _utc_now_compact() -> str:
    return datetime.now(UTC).strftime("%Y%m%dT%H%M%SZ")


def _utc_now_iso() -> str:
    return datetime.now(UTC).isoformat()


def generate_pairs(graph: RoadGraph, pair_count: int, seed: int) -> list[tuple[int, int]]:
    rng = random.Random(seed)
    n = graph.node_count
    return [(rng.randint(1, n), rng.randint(1, n)) for _ in range(max(1, pair_count))]


def _default_output_path(out_dir: Path) -> Path:
    benchmark_dir = out_dir / "benchmarks"
    benchmark_dir.mkdir(parents=True, exist_ok=True)
    return benchmark_dir / f"engine_benchmark_{_utc_now_compact()}.json"


def _write_record(record: dict[str, Any], out_dir: Path, output: str | None) -> Path:
    path = Path(output) if output else _default_output_path(out_dir)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(record, indent=2), encoding="utf-8")
    return path


def _time_engine(
    engine: DijkstraPathFinder | InterleavedPathFinder,
    graph: RoadGraph,
    pairs: list[tuple[int, int]],
    iterations: int,
) -> tuple[float, int, list[dict[Any, Any]]]:
    tracemalloc.start()
    t0 = perf_counter()
    results: list[dict[Any, Any]] = []
    try:
        for _ in range(max(1, iterations)):
            results = []
            for source_id, target_id in pairs:
                source = graph.node_by_id(source_id)
                target = graph.node_by_id(target_id)
                results.append(engine.find_all_optimal_paths(source, target))
        duration_ms = (perf_counter() - t0) * 1000.0
        _current, peak_bytes = tracemalloc.get_traced_memory()
    finally:
        tracemalloc.stop()
    return duration_ms, int(peak_bytes), results


def count_mismatches(left: list[dict[Any, Any]], right: list[dict[Any, Any]]) -> int:
    mismatches = 0
    for a, b in zip(left, right, strict=True):
        for criterion in CRITERIA:
            ra, rb = a[criterion], b[criterion]
            if ra != rb or ra.totals() != rb.totals():
                mismatches += 1
    return mismatches


def run_benchmark(args: argparse.Namespace) -> dict[str, Any]:
    out_dir = Path(args.out_dir).resolve()
    out_dir.mkdir(parents=True, exist_ok=True)

    graph = build_graph(args.shape, args.node_count, seed=args.seed)
    pairs = generate_pairs(graph, args.pair_count, args.seed)

    seq_ms, seq_peak, seq_results = _time_engine(
        DijkstraPathFinder(graph), graph, pairs, args.iterations
    )
    int_ms, int_peak, int_results = _time_engine(
        InterleavedPathFinder(graph), graph, pairs, args.iterations
    )
    mismatches = count_mismatches(seq_results, int_results)

    record: dict[str, Any] = {
        "timestamp": _utc_now_iso(),
        "shape": args.shape,
        "node_count": graph.node_count,
        "edge_count": graph.edge_count,
        "pair_count": len(pairs),
        "iterations": args.iterations,
        "seed": args.seed,
        "sequential": {"duration_ms": round(seq_ms, 3), "peak_memory_bytes": seq_peak},
        "interleaved": {"duration_ms": round(int_ms, 3), "peak_memory_bytes": int_peak},
        "speedup": round(seq_ms / int_ms, 3) if int_ms > 0 else None,
        "mismatch_count": mismatches,
    }
    path = _write_record(record, out_dir=out_dir, output=args.output)
    record["log_path"] = str(path)
    return record


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compare sequential and interleaved multi-criterion engines on synthetic graphs."
    )
    parser.add_argument("--shape", choices=SHAPES, default="random")
    parser.add_argument("--node-count", type=int, default=1000)
    parser.add_argument("--pair-count", type=int, default=20)
    parser.add_argument("--iterations", type=int, default=3)
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--out-dir", default="out")
    parser.add_argument("--output", default=None)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    record = run_benchmark(args)
    print(json.dumps(record, indent=2))
    return 0 if record["mismatch_count"] == 0 else 1


if __name__ == "__main__":
    raise SystemExit(main())
