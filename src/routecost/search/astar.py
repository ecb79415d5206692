# search/astar.py
import math
import time
from dataclasses import dataclass
from enum import Enum

from routecost.app.protocols import CancelFlag, CostModel, GraphReader
from routecost.domain.entities.graph import DirectedEdge, Point
from routecost.domain.entities.location import PathLocation
from routecost.domain.errors import InvalidGraphReference, NoPathFound, ResourceExceeded
from routecost.search.bucket_queue import BucketQueue
from routecost.search.edge_status import EdgeLabel, EdgeState, EdgeStatusTable
from routecost.search.hooks import NoopHooks, SearchHooks


class SearchStatus(Enum):
    RUNNING = "running"
    FOUND = "found"
    EXHAUSTED = "exhausted"
    PRUNED = "pruned"


@dataclass(frozen=True)
class SearchResult:
    status: SearchStatus
    edges: tuple[int, ...] = ()
    cost: float = 0.0
    seconds: float = 0.0
    expansions: int = 0
    reason: str | None = None  # why a search was pruned

    @property
    def found(self) -> bool:
        return self.status is SearchStatus.FOUND

    def raise_for_status(self) -> "SearchResult":
        if self.status is SearchStatus.EXHAUSTED:
            raise NoPathFound(f"no path after {self.expansions} expansions")
        if self.status is SearchStatus.PRUNED:
            raise ResourceExceeded(f"search pruned ({self.reason}) after {self.expansions} expansions")
        return self


def _distance(a: Point, b: Point) -> float:
    return math.hypot(b.x - a.x, b.y - a.y)


class AStarSearch:
    """
    Single-mode A* over directed edges.

    One instance owns one search at a time: its queue, edge status table and
    labels are rebuilt on every ``route`` call and never shared. The graph
    and the cost model are only read.
    """

    def __init__(
        self,
        graph: GraphReader,
        costing: CostModel,
        *,
        hooks: SearchHooks | None = None,
        max_expansions: int | None = None,
        max_cost: float | None = None,
        cancel: CancelFlag | None = None,
        use_heuristic: bool = True,
    ):
        self.graph = graph
        self.costing = costing
        self.max_expansions = max_expansions
        self.max_cost = max_cost
        self.cancel = cancel
        self.use_heuristic = use_heuristic
        self._hooks = hooks or NoopHooks()
        self.status = SearchStatus.RUNNING
        self._reset()

    def _reset(self) -> None:
        self._labels: list[EdgeLabel] = []
        self._queue = BucketQueue(self._sortcost_of, self.costing.sort_unit_size())
        self._edge_status = EdgeStatusTable()
        self._expansions = 0
        self.status = SearchStatus.RUNNING

    def _sortcost_of(self, label_index: int) -> float:
        return self._labels[label_index].sortcost

    # ---------------------------------------------------------------

    def route(self, origin: PathLocation, destination: PathLocation) -> SearchResult:
        self._reset()
        t0 = time.perf_counter()
        self._hooks.search_start(
            mode=getattr(self.costing, "mode", None),
            origin_edges=len(origin.edges),
            destination_edges=len(destination.edges),
        )
        try:
            result = self._run(origin, destination)
        except InvalidGraphReference as exc:
            self._hooks.error(reason="invalid_graph_reference", exc=exc, expansions=self._expansions)
            raise
        self._hooks.search_end(
            status=result.status.value,
            cost=result.cost,
            seconds=result.seconds,
            edges=len(result.edges),
            expansions=result.expansions,
            wall_ms=(time.perf_counter() - t0) * 1000,
            reason=result.reason,
        )
        return result

    def _run(self, origin: PathLocation, destination: PathLocation) -> SearchResult:
        self._dest_point = destination.point
        self._dest_pct: dict[int, float] = {}
        # destination labels live outside the edge status table: an origin
        # edge can be settled and still be reached again as a destination
        self._dest_labels: dict[int, int] = {}
        for pe in destination.edges:
            self._dest_pct.setdefault(pe.edge_id, pe.percent_along)
        self._factor = self.costing.heuristic_factor() if self.use_heuristic else 0.0

        self._seed(origin)

        while True:
            if self.cancel is not None and self.cancel.is_set():
                return self._finish(SearchStatus.PRUNED, reason="cancelled")
            if self._queue.empty():
                return self._finish(SearchStatus.EXHAUSTED)

            idx = self._queue.pop_min()
            label = self._labels[idx]
            if self.max_cost is not None and label.cost > self.max_cost:
                return self._finish(SearchStatus.PRUNED, reason="max_cost")
            if label.is_destination:
                return self._finish(SearchStatus.FOUND, idx)
            # popping a destination is not an expansion
            if self.max_expansions is not None and self._expansions >= self.max_expansions:
                return self._finish(SearchStatus.PRUNED, reason="max_expansions")

            self._edge_status.update(label.edge_id, EdgeState.SETTLED)
            self._expansions += 1
            self._hooks.expand(label, expansions=self._expansions, qsize=len(self._queue))
            self._expand(idx)

    def _seed(self, origin: PathLocation) -> None:
        edge_filter = self.costing.edge_filter()
        for pe in origin.edges:
            edge = self.graph.get_edge(pe.edge_id)
            if edge_filter(edge):
                continue
            cost = self.costing.edge_cost(edge)
            secs = self.costing.edge_seconds(edge)

            dest_pct = self._dest_pct.get(edge.edge_id)
            if dest_pct is not None and dest_pct >= pe.percent_along:
                # origin and destination on the same edge, destination ahead
                frac = dest_pct - pe.percent_along
                self._offer_destination(
                    EdgeLabel(
                        edge.edge_id, -1, cost * frac, cost * frac, secs * frac,
                        edge.begin_node, edge.end_node, edge.restrictions, is_destination=True,
                    )
                )

            remaining = 1.0 - pe.percent_along
            end = self.graph.get_node(edge.end_node)
            label = EdgeLabel(
                edge.edge_id,
                -1,
                cost * remaining,
                cost * remaining + self._heuristic(end.point),
                secs * remaining,
                edge.begin_node,
                edge.end_node,
                edge.restrictions,
            )
            self._offer(label)

    def _heuristic(self, point: Point) -> float:
        return self._factor * _distance(point, self._dest_point)

    def _expand(self, pred_idx: int) -> None:
        pred = self._labels[pred_idx]
        node = self.graph.get_node(pred.end_node)
        if not self.costing.allowed_node(node):
            return

        edges: list[DirectedEdge] = []
        for edge_id in self.graph.outgoing_edges(node.node_id):
            edge = self.graph.get_edge(edge_id)
            if not edge.is_transition():
                edges.append(edge)
        uturns = [e.end_node == pred.begin_node for e in edges]
        # dead end: turning around is the only way on
        dead_end = not any(not u for u in uturns)

        for edge, is_uturn in zip(edges, uturns):
            dest_pct = self._dest_pct.get(edge.edge_id)
            if dest_pct is None and self._edge_status.get(edge.edge_id).state is EdgeState.SETTLED:
                continue
            end = self.graph.get_node(edge.end_node)
            dist = _distance(end.point, self._dest_point)
            if not self.costing.allowed_edge(edge, pred.restrictions, is_uturn and not dead_end, dist):
                continue

            edge_cost = self.costing.edge_cost(edge)
            edge_secs = self.costing.edge_seconds(edge)
            if dest_pct is not None:
                cost = pred.cost + edge_cost * dest_pct
                self._offer_destination(
                    EdgeLabel(
                        edge.edge_id, pred_idx, cost, cost, pred.seconds + edge_secs * dest_pct,
                        edge.begin_node, edge.end_node, edge.restrictions, is_destination=True,
                    )
                )
            else:
                cost = pred.cost + edge_cost
                self._offer(
                    EdgeLabel(
                        edge.edge_id, pred_idx, cost, cost + self._factor * dist, pred.seconds + edge_secs,
                        edge.begin_node, edge.end_node, edge.restrictions,
                    )
                )

    def _offer(self, label: EdgeLabel) -> None:
        """Insert a new label or improve a queued one; settled edges never come back."""
        status = self._edge_status.get(label.edge_id)
        if status.state is EdgeState.SETTLED:
            return
        if status.state is EdgeState.QUEUED:
            current = self._labels[status.label_index]
            if label.cost < current.cost:
                self._queue.decrease_cost(status.label_index, label.sortcost)
                self._labels[status.label_index] = label
            return
        self._push(label, track=True)

    def _offer_destination(self, label: EdgeLabel) -> None:
        # a queued destination label pops straight into FOUND, so it is never settled
        idx = self._dest_labels.get(label.edge_id)
        if idx is None:
            self._dest_labels[label.edge_id] = self._push(label, track=False)
        elif label.cost < self._labels[idx].cost:
            self._queue.decrease_cost(idx, label.sortcost)
            self._labels[idx] = label

    def _push(self, label: EdgeLabel, *, track: bool) -> int:
        idx = len(self._labels)
        self._labels.append(label)
        self._queue.push(idx)
        if track:
            self._edge_status.set(label.edge_id, EdgeState.QUEUED, idx)
        return idx

    def _finish(self, status: SearchStatus, idx: int | None = None, *, reason: str | None = None) -> SearchResult:
        self.status = status
        if idx is None:
            return SearchResult(status, expansions=self._expansions, reason=reason)
        dest = self._labels[idx]
        edges = []
        i = idx
        while i != -1:
            label = self._labels[i]
            edges.append(label.edge_id)
            i = label.pred_index
        edges.reverse()
        return SearchResult(
            status,
            edges=tuple(edges),
            cost=dest.cost,
            seconds=dest.seconds,
            expansions=self._expansions,
        )
