from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .entities import CRITERIA, Criterion, Route


class RouteRequest(BaseModel):
    """One routing query: endpoints by name plus the descending priority order."""

    model_config = ConfigDict(frozen=True)

    source: str = Field(..., min_length=1)
    destination: str = Field(..., min_length=1)
    priorities: tuple[Criterion, Criterion, Criterion]

    @field_validator("source", "destination")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("city name must not be blank")
        return v

    @field_validator("priorities", mode="before")
    @classmethod
    def accept_codes(cls, value: object) -> object:
        if isinstance(value, str):
            value = value.replace("(", "").replace(")", "").split(",")
        if isinstance(value, (list, tuple)):
            return tuple(
                item if isinstance(item, Criterion) else _criterion_from_text(str(item))
                for item in value
            )
        return value

    @field_validator("priorities")
    @classmethod
    def permutation(
        cls, v: tuple[Criterion, Criterion, Criterion]
    ) -> tuple[Criterion, Criterion, Criterion]:
        if set(v) != set(CRITERIA):
            raise ValueError("priorities must name each of DISTANCE, TIME, COST exactly once")
        return v

    def __str__(self) -> str:
        codes = ",".join(c.code for c in self.priorities)
        return f"{self.source} -> {self.destination} | ({codes})"


def _criterion_from_text(text: str) -> Criterion:
    key = text.strip().upper()
    if key in Criterion.__members__:
        return Criterion[key]
    return Criterion.from_code(key)


class RouteSummary(BaseModel):
    label: str
    exists: bool
    nodes: list[str] = Field(default_factory=list)
    node_ids: list[int] = Field(default_factory=list)
    distance: int | None = None
    time: int | None = None
    cost: int | None = None

    @classmethod
    def from_route(cls, label: str, route: Route) -> RouteSummary:
        if not route.exists():
            return cls(label=label, exists=False)
        return cls(
            label=label,
            exists=True,
            nodes=[node.name for node in route.nodes],
            node_ids=list(route.node_ids),
            distance=route.distance,
            time=route.time,
            cost=route.cost,
        )


class SolutionSummary(BaseModel):
    index: int = Field(..., ge=0)
    source: str
    destination: str
    priorities: list[str]
    engine: str
    routes: list[RouteSummary]
    compromise: RouteSummary
