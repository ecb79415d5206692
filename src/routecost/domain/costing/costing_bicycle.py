from routecost.config.models import BicycleCostingModel
from routecost.domain.costing.costing_base import DynamicCost, SEC_PER_METER_AT_1KPH, seconds_at
from routecost.domain.entities.graph import Access, DirectedEdge, Use

# km/h while pushing the bike up/down steps
DISMOUNT_SPEED = 5.1

PATH_USES = frozenset({Use.PATH, Use.FOOTWAY, Use.SIDEWALK, Use.BRIDLEWAY, Use.MOUNTAIN_BIKE})


class BicycleCost(DynamicCost):
    """Time-based costing for cycling; use factors weight the seconds."""

    mode = "bicycle"
    access = Access.BICYCLE

    def __init__(self, options: BicycleCostingModel | None = None):
        options = options or BicycleCostingModel()
        super().__init__(options)
        self.cycling_speed = options.cycling_speed
        self._use_factor = {
            Use.CYCLEWAY: options.cycleway_factor,
            Use.STEPS: options.steps_factor,
            **{u: options.path_factor for u in PATH_USES},
        }
        self._road_factor = options.road_factor

    def _factor(self, edge: DirectedEdge) -> float:
        return self._use_factor.get(edge.use, self._road_factor)

    def edge_seconds(self, edge: DirectedEdge) -> float:
        if edge.use == Use.STEPS:
            return seconds_at(edge.length, DISMOUNT_SPEED)
        return seconds_at(edge.length, self.cycling_speed)

    def edge_cost(self, edge: DirectedEdge) -> float:
        return self.edge_seconds(edge) * self._factor(edge)

    def heuristic_factor(self) -> float:
        # fastest seconds/meter times the most favorable use factor; steps are
        # walked at DISMOUNT_SPEED, which can beat a very slow cycling speed
        fastest = max(self.cycling_speed, DISMOUNT_SPEED)
        cheapest = min(self._road_factor, *self._use_factor.values())
        return min(1.0, SEC_PER_METER_AT_1KPH / fastest * cheapest)
