import threading

import pytest

from routecost.config.models import PedestrianCostingModel
from routecost.domain.costing.costing_auto import AutoCost
from routecost.domain.costing.costing_bicycle import BicycleCost
from routecost.domain.costing.costing_pedestrian import PedestrianCost
from routecost.domain.entities.graph import Access, DirectedEdge, MemoryGraph, NodeInfo, Point
from routecost.domain.entities.location import PathEdge, PathLocation
from routecost.domain.errors import InvalidGraphReference, NoPathFound, ResourceExceeded
from routecost.io.synthetic import grid_graph
from routecost.search.astar import AStarSearch, SearchStatus
from routecost.search.hooks import NoopHooks


class _Recorder(NoopHooks):
    def __init__(self):
        self.starts, self.ends, self.errors, self.expanded = [], [], [], []

    def search_start(self, **kw):
        self.starts.append(kw)

    def search_end(self, **kw):
        self.ends.append(kw)

    def expand(self, label, *, expansions, qsize):
        self.expanded.append(label.edge_id)

    def error(self, *, reason, exc, **kw):
        self.errors.append((reason, exc))


def _at(g: MemoryGraph, edge_id: int, pct: float) -> PathLocation:
    e = g.get_edge(edge_id)
    a, b = g.get_node(e.begin_node).point, g.get_node(e.end_node).point
    p = Point(a.x + pct * (b.x - a.x), a.y + pct * (b.y - a.y))
    return PathLocation.on_edge(p, edge_id, pct)


@pytest.fixture
def grid():
    return grid_graph(8, 8, seed=7)


def _corner_to_corner(g: MemoryGraph):
    last = max(g.nodes)
    into_last = min(e.edge_id for e in g.iter_edges() if e.end_node == last)
    return _at(g, 0, 0.0), _at(g, into_last, 1.0)


# ------------------------- basic paths -------------------------


def test_full_single_edge_costs_exactly_one_edge():
    g = MemoryGraph()
    g.add_node(NodeInfo(0, Point(0.0, 0.0)))
    g.add_node(NodeInfo(1, Point(250.0, 0.0)))
    e = g.add_edge(DirectedEdge(0, 0, 1, 250.0))
    for costing in (PedestrianCost(), AutoCost(), BicycleCost()):
        res = AStarSearch(g, costing).route(_at(g, 0, 0.0), _at(g, 0, 1.0))
        assert res.status is SearchStatus.FOUND
        assert res.edges == (0,)
        assert res.cost == costing.edge_cost(e)
        assert res.seconds == costing.edge_seconds(e)


def test_origin_and_destination_on_same_edge(parallel_graph):
    res = AStarSearch(parallel_graph, PedestrianCost()).route(
        _at(parallel_graph, 1, 0.2), _at(parallel_graph, 1, 0.7)
    )
    assert res.found
    assert res.edges == (1,)
    assert res.cost == pytest.approx(50.0)
    assert res.expansions == 0


def test_prefers_footway_over_parallel_road(parallel_graph):
    res = AStarSearch(parallel_graph, PedestrianCost()).route(
        _at(parallel_graph, 0, 0.0), _at(parallel_graph, 3, 1.0)
    )
    assert res.found
    assert res.edges == (0, 2, 3)
    assert res.cost == pytest.approx(10.0 + 90.0 + 10.0)
    assert res.seconds == pytest.approx(120.0 * 3.6 / 5.1)


def test_neutral_preference_picks_either_parallel_edge(parallel_graph):
    walker = PedestrianCost(PedestrianCostingModel(path_preference_factor=1.0))
    res = AStarSearch(parallel_graph, walker).route(_at(parallel_graph, 0, 0.0), _at(parallel_graph, 3, 1.0))
    assert res.edges[1] in (1, 2)
    assert res.cost == pytest.approx(120.0)


def test_partial_origin_and_destination_edges(parallel_graph):
    res = AStarSearch(parallel_graph, PedestrianCost()).route(
        _at(parallel_graph, 0, 0.5), _at(parallel_graph, 3, 0.5)
    )
    assert res.edges == (0, 2, 3)
    assert res.cost == pytest.approx(5.0 + 90.0 + 5.0)


def test_search_is_repeatable(grid):
    search = AStarSearch(grid, PedestrianCost())
    a, b = _corner_to_corner(grid)
    first = search.route(a, b)
    second = search.route(a, b)
    assert first.found
    assert first == second
    assert AStarSearch(grid, PedestrianCost()).route(a, b) == first


@pytest.mark.parametrize("costing", [PedestrianCost(), BicycleCost()], ids=lambda c: c.mode)
def test_heuristic_agrees_with_plain_dijkstra(grid, costing):
    a, b = _corner_to_corner(grid)
    astar = AStarSearch(grid, costing).route(a, b)
    dijkstra = AStarSearch(grid, costing, use_heuristic=False).route(a, b)
    assert astar.found and dijkstra.found
    assert astar.edges[0] == 0 and astar.edges[-1] == b.edges[0].edge_id
    # both orders are approximate within a bucket
    tol = 0.02 * dijkstra.cost + costing.sort_unit_size()
    assert abs(astar.cost - dijkstra.cost) <= tol


def test_path_edges_are_connected(grid):
    a, b = _corner_to_corner(grid)
    res = AStarSearch(grid, PedestrianCost()).route(a, b)
    edges = [grid.get_edge(i) for i in res.edges]
    for prev, nxt in zip(edges, edges[1:]):
        assert prev.end_node == nxt.begin_node
        assert nxt.end_node != prev.begin_node  # no u-turns on an open grid


# ------------------------- no path -------------------------


def test_disconnected_destination_is_exhausted():
    g = MemoryGraph()
    for i, x in enumerate((0.0, 100.0, 500.0, 600.0)):
        g.add_node(NodeInfo(i, Point(x, 0.0)))
    g.add_way(0, 0, 1, 100.0)
    g.add_way(2, 2, 3, 100.0)
    res = AStarSearch(g, PedestrianCost()).route(_at(g, 0, 0.0), _at(g, 2, 1.0))
    assert res.status is SearchStatus.EXHAUSTED
    assert res.edges == ()
    with pytest.raises(NoPathFound):
        res.raise_for_status()


def test_filtered_origin_edges_are_not_seeded():
    g = MemoryGraph()
    g.add_node(NodeInfo(0, Point(0.0, 0.0)))
    g.add_node(NodeInfo(1, Point(100.0, 0.0)))
    g.add_edge(DirectedEdge(0, 0, 1, 100.0, forward_access=Access.AUTO))
    res = AStarSearch(g, PedestrianCost()).route(_at(g, 0, 0.0), _at(g, 0, 1.0))
    assert res.status is SearchStatus.EXHAUSTED
    assert res.expansions == 0


def test_empty_origin_is_exhausted(parallel_graph):
    res = AStarSearch(parallel_graph, PedestrianCost()).route(
        PathLocation(Point(0.0, 0.0)), _at(parallel_graph, 3, 1.0)
    )
    assert res.status is SearchStatus.EXHAUSTED


# ------------------------- u-turns -------------------------


def test_dead_end_allows_turning_around():
    g = MemoryGraph()
    g.add_node(NodeInfo(0, Point(0.0, 0.0)))
    g.add_node(NodeInfo(1, Point(100.0, 0.0)))
    g.add_way(0, 0, 1, 100.0)
    res = AStarSearch(g, PedestrianCost()).route(_at(g, 0, 0.0), _at(g, 1, 1.0))
    assert res.found
    assert res.edges == (0, 1)
    assert res.cost == pytest.approx(200.0)


def test_no_uturn_midroute_when_alternative_exists(spur_graph):
    # X->A then back A->X is forbidden at A (A->B exists); the only way is
    # around the spur, turning at its dead end B.
    res = AStarSearch(spur_graph, PedestrianCost()).route(_at(spur_graph, 0, 0.0), _at(spur_graph, 1, 1.0))
    assert res.found
    assert res.edges == (0, 2, 3, 1)
    assert res.cost == pytest.approx(400.0)
    assert res.seconds == pytest.approx(400.0 * 3.6 / 5.1)


def test_destination_behind_origin_on_one_way_loop():
    # one-way triangle 0 -> 1 -> 2 -> 0; the way back to the start of edge 0
    # is around the loop
    g = MemoryGraph()
    for i, (x, y) in enumerate([(0.0, 0.0), (100.0, 0.0), (50.0, 80.0)]):
        g.add_node(NodeInfo(i, Point(x, y)))
    g.add_edge(DirectedEdge(0, 0, 1, 100.0))
    g.add_edge(DirectedEdge(1, 1, 2, 100.0))
    g.add_edge(DirectedEdge(2, 2, 0, 100.0))
    res = AStarSearch(g, PedestrianCost()).route(_at(g, 0, 0.8), _at(g, 0, 0.2))
    assert res.found
    assert res.edges == (0, 1, 2, 0)
    assert res.cost == pytest.approx(20.0 + 100.0 + 100.0 + 20.0)
    assert res.expansions == 3


# ------------------------- access and restrictions -------------------------


def test_auto_respects_turn_restriction(restricted_graph):
    a, b = _at(restricted_graph, 0, 0.0), _at(restricted_graph, 4, 1.0)
    assert AStarSearch(restricted_graph, AutoCost()).route(a, b).edges == (0, 2, 3, 4)


def test_pedestrian_ignores_turn_restriction(restricted_graph):
    a, b = _at(restricted_graph, 0, 0.0), _at(restricted_graph, 4, 1.0)
    assert AStarSearch(restricted_graph, PedestrianCost()).route(a, b).edges == (0, 1, 4)


def test_bollard_stops_cars_only(bollard_graph):
    a, b = _at(bollard_graph, 0, 0.0), _at(bollard_graph, 1, 1.0)
    assert AStarSearch(bollard_graph, AutoCost()).route(a, b).status is SearchStatus.EXHAUSTED
    assert AStarSearch(bollard_graph, PedestrianCost()).route(a, b).edges == (0, 1)
    assert AStarSearch(bollard_graph, BicycleCost()).route(a, b).edges == (0, 1)


def _not_thru_graph() -> MemoryGraph:
    g = MemoryGraph()
    for i, x in enumerate((-100.0, 0.0, 100.0, 200.0)):
        g.add_node(NodeInfo(i, Point(x, 0.0)))
    g.add_edge(DirectedEdge(0, 0, 1, 100.0))
    g.add_edge(DirectedEdge(1, 1, 2, 100.0, not_thru=True))
    g.add_edge(DirectedEdge(2, 2, 3, 100.0))
    return g


@pytest.mark.parametrize("tolerance, status", [(50.0, SearchStatus.EXHAUSTED), (150.0, SearchStatus.FOUND)])
def test_not_thru_edges_need_destination_nearby(tolerance, status):
    g = _not_thru_graph()
    walker = PedestrianCost(PedestrianCostingModel(not_thru_distance=tolerance))
    assert AStarSearch(g, walker).route(_at(g, 0, 0.0), _at(g, 2, 1.0)).status is status


def test_transition_edges_are_not_followed():
    g = MemoryGraph()
    for i in range(3):
        g.add_node(NodeInfo(i, Point(100.0 * i, 0.0)))
    g.add_edge(DirectedEdge(0, 0, 1, 100.0))
    g.add_edge(DirectedEdge(1, 1, 2, 100.0, trans_up=True))
    res = AStarSearch(g, PedestrianCost()).route(_at(g, 0, 0.0), _at(g, 1, 1.0))
    assert res.status is SearchStatus.EXHAUSTED


# ------------------------- budgets -------------------------


def test_max_expansions_prunes(grid):
    a, b = _corner_to_corner(grid)
    res = AStarSearch(grid, PedestrianCost(), max_expansions=3).route(a, b)
    assert res.status is SearchStatus.PRUNED
    assert res.reason == "max_expansions"
    assert res.expansions == 3
    with pytest.raises(ResourceExceeded):
        res.raise_for_status()


def test_budget_that_covers_the_route_still_finds_it(parallel_graph):
    a, b = _at(parallel_graph, 0, 0.0), _at(parallel_graph, 3, 1.0)
    unbounded = AStarSearch(parallel_graph, PedestrianCost()).route(a, b)
    assert unbounded.found
    bounded = AStarSearch(parallel_graph, PedestrianCost(), max_expansions=unbounded.expansions).route(a, b)
    assert bounded == unbounded


def test_max_cost_prunes(grid):
    a, b = _corner_to_corner(grid)
    res = AStarSearch(grid, PedestrianCost(), max_cost=1.0).route(a, b)
    assert res.status is SearchStatus.PRUNED
    assert res.reason == "max_cost"


def test_cancelled_search_stops_before_expanding(grid):
    flag = threading.Event()
    flag.set()
    a, b = _corner_to_corner(grid)
    res = AStarSearch(grid, PedestrianCost(), cancel=flag).route(a, b)
    assert res.status is SearchStatus.PRUNED
    assert res.reason == "cancelled"
    assert res.expansions == 0


def test_found_result_raise_for_status_returns_itself(parallel_graph):
    res = AStarSearch(parallel_graph, PedestrianCost()).route(_at(parallel_graph, 0, 0.0), _at(parallel_graph, 3, 1.0))
    assert res.raise_for_status() is res


# ------------------------- hooks and graph errors -------------------------


def test_hooks_see_the_search_lifecycle(parallel_graph):
    rec = _Recorder()
    search = AStarSearch(parallel_graph, PedestrianCost(), hooks=rec)
    res = search.route(_at(parallel_graph, 0, 0.0), _at(parallel_graph, 3, 1.0))
    assert rec.starts == [{"mode": "pedestrian", "origin_edges": 1, "destination_edges": 1}]
    assert len(rec.ends) == 1
    assert rec.ends[0]["status"] == "found"
    assert rec.ends[0]["edges"] == 3
    assert len(rec.expanded) == res.expansions
    assert rec.expanded[0] == 0
    assert search.status is SearchStatus.FOUND


class _DanglingGraph:
    """Lists an outgoing edge the graph does not have."""

    def __init__(self, g: MemoryGraph):
        self.g = g

    def get_edge(self, edge_id):
        return self.g.get_edge(edge_id)

    def get_node(self, node_id):
        return self.g.get_node(node_id)

    def outgoing_edges(self, node_id):
        return (*self.g.outgoing_edges(node_id), 999)


def test_invalid_graph_reference_propagates(parallel_graph):
    rec = _Recorder()
    search = AStarSearch(_DanglingGraph(parallel_graph), PedestrianCost(), hooks=rec)
    with pytest.raises(InvalidGraphReference) as ei:
        search.route(_at(parallel_graph, 0, 0.0), _at(parallel_graph, 3, 1.0))
    assert ei.value.kind == "edge" and ei.value.ref == 999
    assert [reason for reason, _ in rec.errors] == ["invalid_graph_reference"]
    assert rec.ends == []


def test_unknown_origin_edge_raises(parallel_graph):
    origin = PathLocation(Point(0.0, 0.0), (PathEdge(12345, 0.0),))
    with pytest.raises(InvalidGraphReference):
        AStarSearch(parallel_graph, PedestrianCost()).route(origin, _at(parallel_graph, 3, 1.0))
