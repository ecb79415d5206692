from routecost.config.models import AutoCostingModel, TruckCostingModel
from routecost.domain.costing.costing_base import (
    DynamicCost,
    SEC_PER_METER_AT_1KPH,
    capped_speed,
    seconds_at,
)
from routecost.domain.entities.graph import Access, DirectedEdge, RoadClass, Use


class AutoCost(DynamicCost):
    """
    Time-based costing for cars. Edge speeds are capped at ``top_speed`` so
    the heuristic (seconds per meter at top speed) stays admissible. Use
    factors only ever raise the cost.
    """

    mode = "auto"
    access = Access.AUTO

    def __init__(self, options: AutoCostingModel | None = None):
        options = options or AutoCostingModel()
        super().__init__(options)
        self.top_speed = self._speed_cap(options)
        self._use_factor = {
            Use.ALLEY: options.alley_factor,
            Use.DRIVEWAY: options.driveway_factor,
            Use.SERVICE_ROAD: options.service_factor,
            Use.PARKING_AISLE: options.service_factor,
        }

    def _speed_cap(self, options: AutoCostingModel) -> float:
        return options.top_speed

    def factor(self, edge: DirectedEdge) -> float:
        return self._use_factor.get(edge.use, 1.0)

    def edge_seconds(self, edge: DirectedEdge) -> float:
        return seconds_at(edge.length, capped_speed(edge, self.top_speed))

    def edge_cost(self, edge: DirectedEdge) -> float:
        return self.edge_seconds(edge) * self.factor(edge)

    def heuristic_factor(self) -> float:
        return SEC_PER_METER_AT_1KPH / self.top_speed


class TruckCost(AutoCost):
    """Auto costing with truck access, a lower speed cap and a low-class road penalty."""

    mode = "truck"
    access = Access.TRUCK

    LOW_CLASS = frozenset({RoadClass.RESIDENTIAL, RoadClass.SERVICE_OTHER})

    def __init__(self, options: TruckCostingModel | None = None):
        options = options or TruckCostingModel()
        super().__init__(options)
        self.low_class_penalty = options.low_class_penalty_factor

    def _speed_cap(self, options: TruckCostingModel) -> float:
        return min(options.truck_speed, options.top_speed)

    def factor(self, edge: DirectedEdge) -> float:
        f = super().factor(edge)
        if edge.classification in self.LOW_CLASS:
            f *= self.low_class_penalty
        return f
