# routecost/domain/entities/graph.py
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field, replace
from enum import IntEnum, IntFlag

from routecost.domain.errors import InvalidGraphReference


# Core geometry types used by costing and search
@dataclass(frozen=True)
class Point:
    x: float  # meters in projected CRS
    y: float


class Access(IntFlag):
    """Packed access mask, one bit per travel mode."""

    NONE = 0
    AUTO = 1
    PEDESTRIAN = 2
    BICYCLE = 4
    TRUCK = 8
    EMERGENCY = 16
    TAXI = 32
    BUS = 64
    HOV = 128
    WHEELCHAIR = 256
    MOPED = 512
    MOTORCYCLE = 1024
    ALL = 2047


class Use(IntEnum):
    ROAD = 0
    RAMP = 1
    TURN_CHANNEL = 2
    TRACK = 3
    DRIVEWAY = 4
    ALLEY = 5
    PARKING_AISLE = 6
    EMERGENCY_ACCESS = 7
    DRIVE_THRU = 8
    CULDESAC = 9
    LIVING_STREET = 10
    SERVICE_ROAD = 11
    CYCLEWAY = 20
    MOUNTAIN_BIKE = 21
    SIDEWALK = 24
    FOOTWAY = 25
    STEPS = 26
    PATH = 27
    PEDESTRIAN = 28
    BRIDLEWAY = 29
    FERRY = 41
    RAIL = 50
    BUS = 51
    TRANSIT_CONNECTION = 52


class RoadClass(IntEnum):
    MOTORWAY = 0
    TRUNK = 1
    PRIMARY = 2
    SECONDARY = 3
    TERTIARY = 4
    UNCLASSIFIED = 5
    RESIDENTIAL = 6
    SERVICE_OTHER = 7


class Barrier(IntEnum):
    NONE = 0
    BOLLARD = 1
    GATE = 2
    TOLL_BOOTH = 3
    BORDER_CONTROL = 4


@dataclass(frozen=True)
class DirectedEdge:
    edge_id: int
    begin_node: int
    end_node: int
    length: float  # meters
    use: Use = Use.ROAD
    classification: RoadClass = RoadClass.RESIDENTIAL
    speed: float = 40.0  # km/h, posted or estimated
    forward_access: Access = Access.ALL
    reverse_access: Access = Access.ALL
    not_thru: bool = False
    trans_up: bool = False
    trans_down: bool = False
    local_index: int = 0  # position among begin_node's outgoing edges
    restrictions: int = 0  # bit i set => no turn onto end_node's edge with local_index i

    def is_transition(self) -> bool:
        return self.trans_up or self.trans_down


@dataclass(frozen=True)
class NodeInfo:
    node_id: int
    point: Point
    access: Access = Access.ALL
    barrier: Barrier = Barrier.NONE


@dataclass
class MemoryGraph:
    """
    In-memory Graph Access Facade.

    Read-only once handed to a search; safe to share between concurrent
    searches. Edges get their ``local_index`` assigned in insertion order
    per begin node.
    """

    nodes: dict[int, NodeInfo] = field(default_factory=dict)
    edges: dict[int, DirectedEdge] = field(default_factory=dict)
    _out: dict[int, list[int]] = field(default_factory=dict, repr=False)

    # ---------------- building ----------------

    def add_node(self, node: NodeInfo) -> NodeInfo:
        if node.node_id in self.nodes:
            raise ValueError(f"duplicate node id {node.node_id}")
        self.nodes[node.node_id] = node
        self._out.setdefault(node.node_id, [])
        return node

    def add_edge(self, edge: DirectedEdge) -> DirectedEdge:
        if edge.edge_id in self.edges:
            raise ValueError(f"duplicate edge id {edge.edge_id}")
        if not edge.length > 0.0:
            raise ValueError(f"edge {edge.edge_id} must have positive length, got {edge.length}")
        for n in (edge.begin_node, edge.end_node):
            if n not in self.nodes:
                raise InvalidGraphReference("node", n)
        out = self._out[edge.begin_node]
        edge = replace(edge, local_index=len(out))
        out.append(edge.edge_id)
        self.edges[edge.edge_id] = edge
        return edge

    def add_way(self, edge_id: int, a: int, b: int, length: float, **attrs) -> tuple[DirectedEdge, DirectedEdge]:
        """Add a two-way segment as edges ``edge_id`` (a->b) and ``edge_id + 1`` (b->a)."""
        fwd = self.add_edge(DirectedEdge(edge_id, a, b, length, **attrs))
        rev_attrs = dict(attrs)
        if "forward_access" in attrs or "reverse_access" in attrs:
            rev_attrs["forward_access"] = attrs.get("reverse_access", Access.ALL)
            rev_attrs["reverse_access"] = attrs.get("forward_access", Access.ALL)
        rev = self.add_edge(DirectedEdge(edge_id + 1, b, a, length, **rev_attrs))
        return fwd, rev

    @classmethod
    def from_parts(cls, nodes: Iterable[NodeInfo], edges: Iterable[DirectedEdge]) -> "MemoryGraph":
        g = cls()
        for n in nodes:
            g.add_node(n)
        for e in edges:
            g.add_edge(e)
        return g

    # ---------------- facade ----------------

    def get_edge(self, edge_id: int) -> DirectedEdge:
        try:
            return self.edges[edge_id]
        except KeyError:
            raise InvalidGraphReference("edge", edge_id) from None

    def get_node(self, node_id: int) -> NodeInfo:
        try:
            return self.nodes[node_id]
        except KeyError:
            raise InvalidGraphReference("node", node_id) from None

    def outgoing_edges(self, node_id: int) -> tuple[int, ...]:
        try:
            return tuple(self._out[node_id])
        except KeyError:
            raise InvalidGraphReference("node", node_id) from None

    def iter_edges(self) -> Iterator[DirectedEdge]:
        yield from self.edges.values()
