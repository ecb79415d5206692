from dataclasses import dataclass, field

from routecost.domain.entities.graph import Point


@dataclass(frozen=True)
class PathEdge:
    """A candidate edge for a snapped location."""

    edge_id: int
    percent_along: float = 0.0  # 0 at begin_node, 1 at end_node
    distance: float = 0.0  # meters from the input point to the edge

    def __post_init__(self):
        if not 0.0 <= self.percent_along <= 1.0:
            raise ValueError(f"percent_along must be in [0, 1], got {self.percent_along}")


@dataclass(frozen=True)
class PathLocation:
    point: Point
    edges: tuple[PathEdge, ...] = field(default_factory=tuple)

    @classmethod
    def on_edge(cls, point: Point, edge_id: int, percent_along: float = 0.0) -> "PathLocation":
        return cls(point, (PathEdge(edge_id, percent_along),))

    def edge_ids(self) -> set[int]:
        return {pe.edge_id for pe in self.edges}
