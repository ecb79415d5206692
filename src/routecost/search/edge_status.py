# search/edge_status.py
from dataclasses import dataclass
from enum import Enum


class EdgeState(Enum):
    UNREACHED = "unreached"
    QUEUED = "queued"
    SETTLED = "settled"


@dataclass(slots=True)
class EdgeLabel:
    edge_id: int
    pred_index: int  # -1 at an origin
    cost: float
    sortcost: float  # cost + heuristic
    seconds: float
    begin_node: int
    end_node: int
    restrictions: int = 0
    is_destination: bool = False


@dataclass(frozen=True, slots=True)
class EdgeStatusInfo:
    state: EdgeState
    label_index: int = -1


_UNREACHED = EdgeStatusInfo(EdgeState.UNREACHED)


class EdgeStatusTable:
    """Lifecycle of every directed edge a search has touched."""

    def __init__(self):
        self._status: dict[int, EdgeStatusInfo] = {}

    def __len__(self) -> int:
        return len(self._status)

    def get(self, edge_id: int) -> EdgeStatusInfo:
        return self._status.get(edge_id, _UNREACHED)

    def set(self, edge_id: int, state: EdgeState, label_index: int) -> None:
        prev = self._status.get(edge_id, _UNREACHED)
        if prev.state is EdgeState.SETTLED:
            raise ValueError(f"edge {edge_id} is already settled")
        self._status[edge_id] = EdgeStatusInfo(state, label_index)

    def update(self, edge_id: int, state: EdgeState) -> None:
        try:
            prev = self._status[edge_id]
        except KeyError:
            raise ValueError(f"edge {edge_id} has no label") from None
        if prev.state is EdgeState.SETTLED and state is not EdgeState.SETTLED:
            raise ValueError(f"edge {edge_id} is already settled")
        self._status[edge_id] = EdgeStatusInfo(state, prev.label_index)

    def clear(self) -> None:
        self._status.clear()
