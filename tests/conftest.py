# tests/conftest.py
import pytest

from routecost.domain.entities.graph import (
    Access,
    Barrier,
    DirectedEdge,
    MemoryGraph,
    NodeInfo,
    Point,
    Use,
)


def _nodes(g: MemoryGraph, coords: dict[int, tuple[float, float]], overrides=None):
    overrides = overrides or {}
    for nid, (x, y) in coords.items():
        g.add_node(NodeInfo(nid, Point(x, y), **overrides.get(nid, {})))


@pytest.fixture
def parallel_graph() -> MemoryGraph:
    """S -> A, then two parallel A -> B edges (road id 1, footway id 2), then B -> T."""
    g = MemoryGraph()
    _nodes(g, {0: (0.0, 0.0), 1: (10.0, 0.0), 2: (110.0, 0.0), 3: (120.0, 0.0)})
    g.add_edge(DirectedEdge(0, 0, 1, 10.0))
    g.add_edge(DirectedEdge(1, 1, 2, 100.0, use=Use.ROAD))
    g.add_edge(DirectedEdge(2, 1, 2, 100.0, use=Use.FOOTWAY))
    g.add_edge(DirectedEdge(3, 2, 3, 10.0))
    return g


@pytest.fixture
def spur_graph() -> MemoryGraph:
    """X <-> A <-> B with B a dead end. Edges: 0 X->A, 1 A->X, 2 A->B, 3 B->A."""
    g = MemoryGraph()
    _nodes(g, {0: (0.0, 0.0), 1: (100.0, 0.0), 2: (200.0, 0.0)})
    g.add_way(0, 0, 1, 100.0)
    g.add_way(2, 1, 2, 100.0)
    return g


@pytest.fixture
def restricted_graph() -> MemoryGraph:
    """
    A -> B -> C -> E with a detour B -> D -> C. Edge 0 (A->B) forbids the
    turn onto B->C (local index 0 at B).
    """
    g = MemoryGraph()
    _nodes(g, {0: (0.0, 0.0), 1: (100.0, 0.0), 2: (200.0, 0.0), 3: (100.0, 100.0), 4: (300.0, 0.0)})
    g.add_edge(DirectedEdge(0, 0, 1, 100.0, restrictions=0b01))
    g.add_edge(DirectedEdge(1, 1, 2, 100.0))
    g.add_edge(DirectedEdge(2, 1, 3, 100.0))
    g.add_edge(DirectedEdge(3, 3, 2, 142.0))
    g.add_edge(DirectedEdge(4, 2, 4, 100.0))
    return g


@pytest.fixture
def bollard_graph() -> MemoryGraph:
    """A -> B -> C where B is a bollard only walkers and cyclists pass."""
    g = MemoryGraph()
    _nodes(
        g,
        {0: (0.0, 0.0), 1: (100.0, 0.0), 2: (200.0, 0.0)},
        {1: {"access": Access.PEDESTRIAN | Access.BICYCLE, "barrier": Barrier.BOLLARD}},
    )
    g.add_edge(DirectedEdge(0, 0, 1, 100.0))
    g.add_edge(DirectedEdge(1, 1, 2, 100.0))
    return g
