from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from .entities import Criterion, Node
from .errors import InputFormatError, RoutingError
from .graph import RoadGraph
from .logging_utils import log_event
from .models import RouteRequest
from .settings import settings

CITY_RE = re.compile(r"^(\d+)\s*:\s*(.+)$")
ROAD_RE = re.compile(r"^(\d+)\s*-\s*(\d+)\s*:\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)$")
REQUEST_RE = re.compile(
    r"^(.+?)\s*->\s*(.+?)\s*\|\s*\(\s*([DTCДВС])\s*,\s*([DTCДВС])\s*,\s*([DTCДВС])\s*\)$",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class ParsedInput:
    graph: RoadGraph
    requests: list[RouteRequest]


def _parse_city(graph: RoadGraph, line: str) -> None:
    m = CITY_RE.match(line)
    if m is None:
        raise ValueError(f"invalid city line: {line}")
    graph.register_node(Node(int(m.group(1)), m.group(2).strip()))


def _parse_road(graph: RoadGraph, line: str) -> None:
    m = ROAD_RE.match(line)
    if m is None:
        raise ValueError(f"invalid road line: {line}")
    source_id, target_id, distance, time_, cost = (int(g) for g in m.groups())
    graph.connect(source_id, target_id, distance, time_, cost)


def _parse_request(graph: RoadGraph, line: str) -> RouteRequest:
    m = REQUEST_RE.match(line)
    if m is None:
        raise ValueError(f"invalid request line: {line}")
    source = m.group(1).strip()
    destination = m.group(2).strip()
    for role, name in (("source", source), ("destination", destination)):
        if not graph.contains_name(name):
            raise RoutingError(
                reason_code="unknown_city",
                message=f"{role} city not found: {name}",
                details={"name": name},
            )
    priorities = tuple(Criterion.from_code(code) for code in m.group(3, 4, 5))
    return RouteRequest(source=source, destination=destination, priorities=priorities)


def parse_text(text: str) -> ParsedInput:
    """Build the graph and request list from the sectioned text format.

    Blank lines are skipped and unknown sections are ignored. Cities must
    precede the roads that use them. Any malformed line raises
    ``InputFormatError`` with its 1-based line number.
    """
    graph = RoadGraph()
    requests: list[RouteRequest] = []
    section: str | None = None

    for line_number, raw in enumerate(text.splitlines(), start=1):
        line = raw.lstrip("\ufeff").strip()
        if not line:
            continue
        if line.startswith("[") and line.endswith("]"):
            section = line[1:-1].strip().upper()
            continue

        try:
            if section == "CITIES":
                _parse_city(graph, line)
            elif section == "ROADS":
                _parse_road(graph, line)
            elif section == "REQUESTS":
                requests.append(_parse_request(graph, line))
        except ValueError as e:
            raise InputFormatError(line_number, line, str(e)) from e

    graph.freeze()
    log_event(
        "input_parsed",
        node_count=graph.node_count,
        edge_count=graph.edge_count,
        request_count=len(requests),
    )
    return ParsedInput(graph=graph, requests=requests)


def parse_input(path: str | Path) -> ParsedInput:
    try:
        text = Path(path).read_text(encoding=settings.input_encoding)
    except UnicodeDecodeError as e:
        raise RoutingError(
            reason_code="input_format_invalid",
            message=f"input is not valid {settings.input_encoding} text: {path}",
            details={"path": str(path), "encoding": settings.input_encoding, "position": e.start},
        ) from e
    return parse_text(text)
