# io/synthetic.py
import numpy as np

from routecost.domain.entities.graph import Access, MemoryGraph, NodeInfo, Point, Use

_USES = np.array([Use.ROAD, Use.FOOTWAY, Use.CYCLEWAY, Use.PATH, Use.SERVICE_ROAD, Use.TRACK])


def grid_graph(
    rows: int,
    cols: int,
    *,
    spacing_m: float = 100.0,
    seed: int = 0,
    detour: tuple[float, float] = (1.0, 1.4),
    speeds_kph: tuple[float, float] = (20.0, 90.0),
    p_no_car: float = 0.15,
) -> MemoryGraph:
    """
    Two-way grid of ``rows x cols`` nodes for tests and benchmarks.

    Edge lengths are the straight spacing times a detour factor >= 1, so the
    straight-line heuristic never overestimates. Uses, speeds and car access
    are drawn from a seeded numpy Generator; the same seed yields the same
    graph.
    """
    if rows < 1 or cols < 1:
        raise ValueError("rows and cols must be >= 1")
    if detour[0] < 1.0:
        raise ValueError("detour factors must be >= 1")
    rng = np.random.default_rng(seed)
    g = MemoryGraph()
    for r in range(rows):
        for c in range(cols):
            g.add_node(NodeInfo(r * cols + c, Point(c * spacing_m, r * spacing_m)))

    pairs = []
    for r in range(rows):
        for c in range(cols):
            n = r * cols + c
            if c + 1 < cols:
                pairs.append((n, n + 1))
            if r + 1 < rows:
                pairs.append((n, n + cols))

    k = len(pairs)
    lengths = spacing_m * rng.uniform(detour[0], detour[1], size=k)
    uses = rng.choice(_USES, size=k)
    speeds = rng.uniform(speeds_kph[0], speeds_kph[1], size=k)
    no_car = rng.random(size=k) < p_no_car

    edge_id = 0
    for (a, b), length, use, speed, blocked in zip(pairs, lengths, uses, speeds, no_car):
        access = Access.ALL & ~(Access.AUTO | Access.TRUCK) if blocked else Access.ALL
        g.add_way(
            edge_id,
            a,
            b,
            float(length),
            use=Use(int(use)),
            speed=float(speed),
            forward_access=access,
            reverse_access=access,
        )
        edge_id += 2
    return g
