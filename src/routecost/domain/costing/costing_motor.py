import math

from routecost.config.models import MotorcycleCostingModel, MotorScooterCostingModel
from routecost.domain.costing.costing_base import (
    DynamicCost,
    SEC_PER_METER_AT_1KPH,
    capped_speed,
    seconds_at,
)
from routecost.domain.entities.graph import Access, DirectedEdge, RoadClass, Use


class _PoweredTwoWheelerCost(DynamicCost):
    """Seconds at capped speed, weighted by road-class and use factors."""

    def __init__(self, options, class_factor: dict[RoadClass, float], use_factor: dict[Use, float]):
        super().__init__(options)
        self.top_speed = options.top_speed
        self._class_factor = class_factor
        self._use_factor = use_factor

    def factor(self, edge: DirectedEdge) -> float:
        return self._class_factor.get(edge.classification, 1.0) * self._use_factor.get(edge.use, 1.0)

    def edge_seconds(self, edge: DirectedEdge) -> float:
        return seconds_at(edge.length, capped_speed(edge, self.top_speed))

    def edge_cost(self, edge: DirectedEdge) -> float:
        return self.edge_seconds(edge) * self.factor(edge)

    def heuristic_factor(self) -> float:
        # unlisted classes/uses weigh 1.0, so neither factor can exceed that
        cheapest = min(1.0, *self._class_factor.values()) * min(1.0, *self._use_factor.values())
        return min(1.0, SEC_PER_METER_AT_1KPH / self.top_speed * cheapest)


class MotorScooterCost(_PoweredTwoWheelerCost):
    mode = "motor_scooter"
    access = Access.MOPED

    def __init__(self, options: MotorScooterCostingModel | None = None):
        options = options or MotorScooterCostingModel()
        avoid = 1.0 - options.use_primary
        super().__init__(
            options,
            class_factor={
                RoadClass.TRUNK: 1.0 + avoid,
                RoadClass.PRIMARY: 1.0 + 0.5 * avoid,
            },
            use_factor={Use.TRACK: 1.5, Use.LIVING_STREET: 0.9},
        )


class MotorcycleCost(_PoweredTwoWheelerCost):
    mode = "motorcycle"
    access = Access.MOTORCYCLE

    def __init__(self, options: MotorcycleCostingModel | None = None):
        options = options or MotorcycleCostingModel()
        highway = 1.0 + (1.0 - options.use_highways)
        # trails go from 2x penalty (use_trails=0) to a mild preference
        track = 2.0 - 1.5 * options.use_trails
        super().__init__(
            options,
            class_factor={RoadClass.MOTORWAY: highway, RoadClass.TRUNK: math.sqrt(highway)},
            use_factor={Use.TRACK: track},
        )
