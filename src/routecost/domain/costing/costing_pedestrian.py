from routecost.config.models import PedestrianCostingModel
from routecost.domain.costing.costing_base import DynamicCost, seconds_at
from routecost.domain.entities.graph import Access, DirectedEdge, Use

FAVORED_USES = frozenset({Use.FOOTWAY})


class PedestrianCost(DynamicCost):
    """
    Distance-based costing for walking. Cost is meters, scaled by the path
    preference factor on footways; sidewalks and paths cost their length.
    Pedestrians ignore vehicular turn restrictions and never take u-turns.
    """

    mode = "pedestrian"
    access = Access.PEDESTRIAN
    honors_turn_restrictions = False

    def __init__(self, options: PedestrianCostingModel | None = None):
        options = options or PedestrianCostingModel()
        super().__init__(options)
        self.walking_speed = options.walking_speed
        self.favor_walkways = options.path_preference_factor

    def edge_cost(self, edge: DirectedEdge) -> float:
        if edge.use in FAVORED_USES:
            return edge.length * self.favor_walkways
        return edge.length

    def edge_seconds(self, edge: DirectedEdge) -> float:
        return seconds_at(edge.length, self.walking_speed)

    def heuristic_factor(self) -> float:
        # Use the factor to favor walkways/paths if < 1
        return min(self.favor_walkways, 1.0)

    def sort_unit_size(self) -> float:
        # anything within 2 m counts as the same cost
        return 2.0
