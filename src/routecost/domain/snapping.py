import math
from collections.abc import Iterable

from routecost.app.protocols import EdgeFilter
from routecost.domain.entities.graph import DirectedEdge, MemoryGraph, Point
from routecost.domain.entities.location import PathEdge, PathLocation

DEFAULT_RADIUS_M = 50.0


def project(p: Point, a: Point, b: Point) -> tuple[float, float]:
    """Return (fraction along a->b, distance) of the closest point to p on segment ab."""
    dx, dy = b.x - a.x, b.y - a.y
    seg2 = dx * dx + dy * dy
    if seg2 == 0.0:
        return 0.0, math.hypot(p.x - a.x, p.y - a.y)
    t = ((p.x - a.x) * dx + (p.y - a.y) * dy) / seg2
    t = min(1.0, max(0.0, t))
    qx, qy = a.x + t * dx, a.y + t * dy
    return t, math.hypot(p.x - qx, p.y - qy)


def candidates(
    graph: MemoryGraph,
    p: Point,
    edge_filter: EdgeFilter,
    *,
    radius: float = DEFAULT_RADIUS_M,
    edges: Iterable[DirectedEdge] | None = None,
) -> list[PathEdge]:
    out = []
    for edge in edges if edges is not None else graph.iter_edges():
        if edge_filter(edge):
            continue
        a = graph.get_node(edge.begin_node).point
        b = graph.get_node(edge.end_node).point
        t, d = project(p, a, b)
        if d <= radius:
            out.append(PathEdge(edge.edge_id, t, d))
    out.sort(key=lambda pe: (pe.distance, pe.edge_id))
    return out


def snap_point(
    graph: MemoryGraph,
    p: Point,
    edge_filter: EdgeFilter,
    *,
    radius: float = DEFAULT_RADIUS_M,
    tolerance: float = 1.0,
) -> PathLocation:
    """
    Correlate a free point with the graph: every edge the filter keeps whose
    closest point lies within ``tolerance`` meters of the best match.
    Returns an empty location when nothing is within ``radius``.
    """
    found = candidates(graph, p, edge_filter, radius=radius)
    if not found:
        return PathLocation(p)
    best = found[0].distance
    return PathLocation(p, tuple(pe for pe in found if pe.distance <= best + tolerance))
