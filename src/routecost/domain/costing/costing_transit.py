from dataclasses import dataclass

from routecost.config.models import TransitCostingModel
from routecost.domain.costing.costing_base import (
    DynamicCost,
    SEC_PER_METER_AT_1KPH,
    capped_speed,
    seconds_at,
)
from routecost.domain.entities.graph import Access, DirectedEdge, NodeInfo, Use

TRANSIT_USES = frozenset({Use.RAIL, Use.BUS})


@dataclass(frozen=True)
class TransitEdgeFilter:
    """Keep walkable edges and transit lines; drop everything else."""

    def __call__(self, edge: DirectedEdge) -> bool:
        if edge.is_transition():
            return True
        return edge.use not in TRANSIT_USES and not (edge.forward_access & Access.PEDESTRIAN)


class TransitCost(DynamicCost):
    """
    Walk + ride costing without schedules: transit lines are timed at their
    (capped) edge speed and weighted by the rider's bus/rail preference;
    every other edge is walked. Like pedestrians, transit riders are not
    bound by vehicular turn restrictions.
    """

    mode = "transit"
    access = Access.PEDESTRIAN
    honors_turn_restrictions = False

    def __init__(self, options: TransitCostingModel | None = None):
        options = options or TransitCostingModel()
        super().__init__(options)
        self.walking_speed = options.walking_speed
        self.max_transit_speed = options.max_transit_speed
        self.walk_factor = options.walk_factor
        self._mode_factor = {
            Use.BUS: 1.5 - options.use_bus,
            Use.RAIL: 1.5 - options.use_rail,
        }

    def has_access(self, edge: DirectedEdge) -> bool:
        return edge.use in TRANSIT_USES or super().has_access(edge)

    def allowed_node(self, node: NodeInfo) -> bool:
        return bool(node.access & (Access.PEDESTRIAN | Access.BUS))

    def edge_filter(self):
        return TransitEdgeFilter()

    def edge_seconds(self, edge: DirectedEdge) -> float:
        if edge.use in TRANSIT_USES:
            return seconds_at(edge.length, capped_speed(edge, self.max_transit_speed))
        return seconds_at(edge.length, self.walking_speed)

    def edge_cost(self, edge: DirectedEdge) -> float:
        factor = self._mode_factor.get(edge.use, self.walk_factor)
        return self.edge_seconds(edge) * factor

    def heuristic_factor(self) -> float:
        cheapest = min(self.walk_factor, *self._mode_factor.values())
        return min(1.0, SEC_PER_METER_AT_1KPH / self.max_transit_speed * cheapest)
