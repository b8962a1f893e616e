from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from .entities import CRITERIA, Route
from .logging_utils import log_event
from .settings import settings
from .solver import SolutionResult

COMPROMISE_LABEL = "COMPROMISE"


def format_route_line(label: str, route: Route, *, no_route_marker: str | None = None) -> str:
    marker = settings.no_route_marker if no_route_marker is None else no_route_marker
    if not route.exists():
        return f"{label}: {marker}"
    return f"{label}: {route.path_string()} | {route.params_string()}"


def format_result(result: SolutionResult, *, no_route_marker: str | None = None) -> list[str]:
    lines = [
        format_route_line(c.label, result.optimal_routes[c], no_route_marker=no_route_marker)
        for c in CRITERIA
    ]
    lines.append(
        format_route_line(COMPROMISE_LABEL, result.compromise, no_route_marker=no_route_marker)
    )
    return lines


def format_results(
    results: Sequence[SolutionResult], *, no_route_marker: str | None = None
) -> str:
    """Four lines per request, a blank line between requests, newline-terminated."""
    blocks = [
        "\n".join(format_result(result, no_route_marker=no_route_marker)) for result in results
    ]
    text = "\n\n".join(blocks)
    return f"{text}\n" if text else ""


def write_output(results: Sequence[SolutionResult], path: str | Path) -> Path:
    out_path = Path(path)
    if out_path.parent and not out_path.parent.exists():
        out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(format_results(results), encoding=settings.output_encoding)
    log_event("output_written", path=str(out_path), result_count=len(results))
    return out_path
