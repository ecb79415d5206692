# routecost/domain/costing/costing_base.py
from dataclasses import dataclass

from routecost.app.protocols import CostModel, EdgeFilter
from routecost.config.models import _CostingBase
from routecost.domain.entities.graph import Access, DirectedEdge, NodeInfo

MIN_SPEED_KPH = 1.0

# meters * 3600 sec/hr / 1000 m/km
SEC_PER_METER_AT_1KPH = 3.6


def seconds_at(length_m: float, speed_kph: float) -> float:
    return (length_m * SEC_PER_METER_AT_1KPH) / speed_kph


def capped_speed(edge: DirectedEdge, top_speed: float) -> float:
    return max(MIN_SPEED_KPH, min(edge.speed, top_speed))


@dataclass(frozen=True)
class AccessEdgeFilter:
    """
    Location-search filter for one mode. Captures only the access bit, so it
    can outlive the cost model (and any search) that handed it out.
    """

    access: Access

    def __call__(self, edge: DirectedEdge) -> bool:
        return edge.is_transition() or not (edge.forward_access & self.access)


class DynamicCost(CostModel):
    """
    Shared access/restriction evaluation for all travel modes.

    Subclasses set ``mode``, ``access`` and, for modes exempt from
    vehicular turn regulation, ``honors_turn_restrictions = False``; they
    implement edge_cost, edge_seconds, heuristic_factor and sort_unit_size.
    """

    mode: str = ""
    access: Access = Access.NONE
    honors_turn_restrictions: bool = True

    def __init__(self, options: _CostingBase):
        self.options = options
        self.not_thru_distance = options.not_thru_distance

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.options!r})"

    # ---------------- access evaluator ----------------

    def has_access(self, edge: DirectedEdge) -> bool:
        return bool(edge.forward_access & self.access)

    def not_thru_pruned(self, edge: DirectedEdge, distance_to_destination: float) -> bool:
        # not-thru edges only count once the destination is close enough
        return edge.not_thru and distance_to_destination > self.not_thru_distance

    def turn_restricted(self, edge: DirectedEdge, restriction_mask: int) -> bool:
        if not self.honors_turn_restrictions:
            return False
        return bool(restriction_mask & (1 << edge.local_index))

    def allowed_edge(
        self,
        edge: DirectedEdge,
        restriction_mask: int,
        is_uturn: bool,
        distance_to_destination: float,
    ) -> bool:
        return (
            self.has_access(edge)
            and not is_uturn
            and not self.not_thru_pruned(edge, distance_to_destination)
            and not self.turn_restricted(edge, restriction_mask)
        )

    def allowed_node(self, node: NodeInfo) -> bool:
        return bool(node.access & self.access)

    def edge_filter(self) -> EdgeFilter:
        return AccessEdgeFilter(self.access)

    # ---------------- costing ----------------

    def edge_cost(self, edge: DirectedEdge) -> float:
        raise NotImplementedError

    def edge_seconds(self, edge: DirectedEdge) -> float:
        raise NotImplementedError

    def heuristic_factor(self) -> float:
        raise NotImplementedError

    def sort_unit_size(self) -> float:
        return 1.0
