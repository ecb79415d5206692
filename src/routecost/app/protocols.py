from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from routecost.domain.entities.graph import DirectedEdge, NodeInfo


# ------------- Graph --------------------
@runtime_checkable
class GraphReader(Protocol):
    """
    Responsibilities:
    • Hand out directed edges and nodes by identifier.
    • Enumerate the outgoing edges of a node.
    Must be deterministic and side-effect free; missing ids raise
    InvalidGraphReference rather than returning None.
    """

    def get_edge(self, edge_id: int) -> DirectedEdge: ...
    def get_node(self, node_id: int) -> NodeInfo: ...
    def outgoing_edges(self, node_id: int) -> Sequence[int]: ...


# ------------- Costing --------------------
@runtime_checkable
class EdgeFilter(Protocol):
    """Return True when the edge must be excluded from location candidates."""

    def __call__(self, edge: DirectedEdge) -> bool: ...


@runtime_checkable
class CostModel(Protocol):
    """
    Responsibilities:
      • Decide edge/node admissibility for one travel mode.
      • Rank edges (cost) and time them (seconds).
      • Supply the A* heuristic factor and the queue bucket width.
    Units: meters for lengths/distances; seconds for times.
    """

    mode: str

    def allowed_edge(
        self,
        edge: DirectedEdge,
        restriction_mask: int,
        is_uturn: bool,
        distance_to_destination: float,
    ) -> bool: ...
    def allowed_node(self, node: NodeInfo) -> bool: ...
    def edge_cost(self, edge: DirectedEdge) -> float: ...
    def edge_seconds(self, edge: DirectedEdge) -> float: ...
    def heuristic_factor(self) -> float: ...
    def sort_unit_size(self) -> float: ...
    def edge_filter(self) -> EdgeFilter: ...


# ------------- Search --------------------
@runtime_checkable
class CancelFlag(Protocol):
    def is_set(self) -> bool: ...
