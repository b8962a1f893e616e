from __future__ import annotations

import csv
import json
from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from .entities import CRITERIA
from .models import RouteSummary, SolutionSummary
from .output_writer import COMPROMISE_LABEL
from .settings import settings
from .solver import SolutionResult


def write_manifest(run_id: str, manifest: dict[str, Any]) -> Path:
    out_dir = Path(settings.out_dir) / "manifests"
    out_dir.mkdir(parents=True, exist_ok=True)

    enriched = {
        "run_id": run_id,
        "created_at": datetime.now(UTC).isoformat(),
        **manifest,
    }

    path = out_dir / f"{run_id}.json"
    path.write_text(json.dumps(enriched, indent=2), encoding="utf-8")
    return path


ARTIFACT_FILES: tuple[str, ...] = (
    "results.json",
    "results.csv",
)

CSV_COLUMNS: tuple[str, ...] = (
    "request_index",
    "source",
    "destination",
    "priorities",
    "label",
    "exists",
    "path",
    "distance",
    "time",
    "cost",
)


def artifact_dir_for_run(run_id: str) -> Path:
    p = Path(settings.out_dir) / "artifacts" / run_id
    p.mkdir(parents=True, exist_ok=True)
    return p


def artifact_paths_for_run(run_id: str) -> dict[str, Path]:
    base = Path(settings.out_dir) / "artifacts" / run_id
    return {name: base / name for name in ARTIFACT_FILES}


def summarize_result(index: int, result: SolutionResult) -> SolutionSummary:
    return SolutionSummary(
        index=index,
        source=result.request.source,
        destination=result.request.destination,
        priorities=[c.name for c in result.request.priorities],
        engine=result.engine,
        routes=[RouteSummary.from_route(c.label, result.optimal_routes[c]) for c in CRITERIA],
        compromise=RouteSummary.from_route(COMPROMISE_LABEL, result.compromise),
    )


def _csv_rows(summaries: Sequence[SolutionSummary]) -> list[dict[str, Any]]:
    rows: list[dict[str, Any]] = []
    for summary in summaries:
        for route in (*summary.routes, summary.compromise):
            rows.append(
                {
                    "request_index": summary.index,
                    "source": summary.source,
                    "destination": summary.destination,
                    "priorities": ",".join(summary.priorities),
                    "label": route.label,
                    "exists": route.exists,
                    "path": " -> ".join(route.nodes),
                    "distance": "" if route.distance is None else route.distance,
                    "time": "" if route.time is None else route.time,
                    "cost": "" if route.cost is None else route.cost,
                }
            )
    return rows


def _write_json(path: Path, payload: dict[str, Any]) -> None:
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")


def _write_csv(path: Path, rows: list[dict[str, Any]]) -> None:
    with path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=list(CSV_COLUMNS))
        writer.writeheader()
        for row in rows:
            writer.writerow({k: row.get(k, "") for k in CSV_COLUMNS})


def write_run_artifacts(run_id: str, results: Sequence[SolutionResult]) -> dict[str, Path]:
    out_dir = artifact_dir_for_run(run_id)
    summaries = [summarize_result(idx, result) for idx, result in enumerate(results)]

    results_path = out_dir / "results.json"
    csv_path = out_dir / "results.csv"

    _write_json(
        results_path,
        {
            "run_id": run_id,
            "result_count": len(summaries),
            "results": [s.model_dump() for s in summaries],
        },
    )
    _write_csv(csv_path, _csv_rows(summaries))

    return {
        "results.json": results_path,
        "results.csv": csv_path,
    }
