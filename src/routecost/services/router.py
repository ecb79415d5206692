# routecost/services/router.py
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from routecost.app.protocols import CancelFlag, CostModel, EdgeFilter, GraphReader
from routecost.config.models import SearchModel
from routecost.domain.entities.graph import Point
from routecost.domain.entities.location import PathLocation
from routecost.domain.snapping import DEFAULT_RADIUS_M, snap_point
from routecost.search.astar import AStarSearch, SearchResult, SearchStatus
from routecost.search.hooks import NoopHooks, SearchHooks


@dataclass
class Router:
    """
    Convenience façade bundling graph, cost model and search limits.
    Every route call runs its own AStarSearch, so one Router can serve
    concurrent requests.
    """

    graph: GraphReader
    costing: CostModel
    search: SearchModel = field(default_factory=SearchModel)
    hooks: SearchHooks = field(default_factory=NoopHooks)

    @property
    def mode(self) -> str:
        return self.costing.mode

    def edge_filter(self) -> EdgeFilter:
        return self.costing.edge_filter()

    def new_search(self, cancel: CancelFlag | None = None) -> AStarSearch:
        return AStarSearch(
            self.graph,
            self.costing,
            hooks=self.hooks,
            max_expansions=self.search.max_expansions,
            max_cost=self.search.max_cost,
            cancel=cancel,
            use_heuristic=self.search.use_heuristic,
        )

    def route(self, a: PathLocation, b: PathLocation, *, cancel: CancelFlag | None = None) -> SearchResult:
        return self.new_search(cancel).route(a, b)

    def snap(self, p: Point, *, radius: float = DEFAULT_RADIUS_M) -> PathLocation:
        return snap_point(self.graph, p, self.edge_filter(), radius=radius)

    def route_points(self, a: Point, b: Point, *, radius: float = DEFAULT_RADIUS_M) -> SearchResult:
        origin, destination = self.snap(a, radius=radius), self.snap(b, radius=radius)
        if not origin.edges or not destination.edges:
            return SearchResult(SearchStatus.EXHAUSTED, reason="unsnapped")
        return self.route(origin, destination)

    def route_many(
        self, pairs: Iterable[tuple[PathLocation, PathLocation]], *, max_workers: int = 4
    ) -> list[SearchResult]:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            return list(pool.map(lambda ab: self.route(*ab), pairs))
