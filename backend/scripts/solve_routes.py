from __future__ import annotations

import argparse
import json
import sys
import uuid
from pathlib import Path
from time import perf_counter
from typing import Any, Sequence

from roadroute.errors import RoutingError
from roadroute.input_parser import parse_input
from roadroute.logging_utils import log_event
from roadroute.output_writer import write_output
from roadroute.run_store import write_manifest, write_run_artifacts
from roadroute.settings import settings
from roadroute.solver import RouteSolver


def run_solve(args: argparse.Namespace) -> dict[str, Any]:
    input_path = Path(args.input).resolve()
    output_path = Path(args.output).resolve()
    if not input_path.exists():
        raise OSError(f"input file not found: {input_path}")

    t0 = perf_counter()
    parsed = parse_input(input_path)
    solver = RouteSolver(parsed.graph, engine=args.engine)
    results = solver.solve_all(parsed.requests)
    write_output(results, output_path)
    duration_ms = (perf_counter() - t0) * 1000.0

    summary: dict[str, Any] = {
        "input": str(input_path),
        "output": str(output_path),
        "engine": solver.engine.name,
        "node_count": parsed.graph.node_count,
        "edge_count": parsed.graph.edge_count,
        "request_count": len(parsed.requests),
        "no_route_count": sum(1 for r in results if not r.compromise.exists()),
        "duration_ms": round(duration_ms, 3),
    }

    if args.artifacts:
        run_id = str(args.run_id or uuid.uuid4())
        artifacts = write_run_artifacts(run_id, results)
        manifest_path = write_manifest(run_id, {**summary, "artifacts": sorted(artifacts)})
        summary["run_id"] = run_id
        summary["manifest"] = str(manifest_path)
        summary["artifacts"] = {name: str(path) for name, path in artifacts.items()}

    log_event("run_completed", **summary)
    return summary


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Find distance/time/cost optimal and compromise routes for each request."
    )
    parser.add_argument("--input", default="input.txt")
    parser.add_argument("--output", default="output.txt")
    parser.add_argument(
        "--engine",
        choices=("interleaved", "sequential"),
        default=None,
        help=f"path engine (default from PATH_ENGINE, currently {settings.path_engine})",
    )
    parser.add_argument(
        "--artifacts",
        action="store_true",
        help="also write results.json/results.csv and a manifest under OUT_DIR",
    )
    parser.add_argument("--run-id", default=None)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(list(argv) if argv is not None else None)
    try:
        summary = run_solve(args)
    except RoutingError as e:
        print(f"invalid input data: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"I/O error: {e}", file=sys.stderr)
        return 1
    print(json.dumps(summary, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
