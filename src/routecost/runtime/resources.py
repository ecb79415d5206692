# routecost/runtime/resources.py
import json
import pickle
from functools import lru_cache
from pathlib import Path

from routecost.domain.entities.graph import (
    Access,
    Barrier,
    DirectedEdge,
    MemoryGraph,
    NodeInfo,
    Point,
    RoadClass,
    Use,
)


def graph_from_dict(data: dict) -> MemoryGraph:
    """
    Build a MemoryGraph from the JSON layout::

        {"nodes": [{"id", "x", "y", "access"?, "barrier"?}, ...],
         "edges": [{"id", "from", "to", "length", "use"?, ...}, ...]}

    Enum-valued fields accept either names ("footway") or integer codes.
    """
    g = MemoryGraph()
    for n in data.get("nodes", ()):
        g.add_node(
            NodeInfo(
                node_id=int(n["id"]),
                point=Point(float(n["x"]), float(n["y"])),
                access=Access(int(n.get("access", Access.ALL))),
                barrier=_enum(Barrier, n.get("barrier", Barrier.NONE)),
            )
        )
    for e in data.get("edges", ()):
        g.add_edge(
            DirectedEdge(
                edge_id=int(e["id"]),
                begin_node=int(e["from"]),
                end_node=int(e["to"]),
                length=float(e["length"]),
                use=_enum(Use, e.get("use", Use.ROAD)),
                classification=_enum(RoadClass, e.get("classification", RoadClass.RESIDENTIAL)),
                speed=float(e.get("speed", 40.0)),
                forward_access=Access(int(e.get("forward_access", Access.ALL))),
                reverse_access=Access(int(e.get("reverse_access", Access.ALL))),
                not_thru=bool(e.get("not_thru", False)),
                trans_up=bool(e.get("trans_up", False)),
                trans_down=bool(e.get("trans_down", False)),
                restrictions=int(e.get("restrictions", 0)),
            )
        )
    return g


def _enum(kind, v):
    if isinstance(v, str):
        return kind[v.upper()]
    return kind(int(v))


@lru_cache(maxsize=8)
def load_graph_from_path(file: str, fmt: str) -> MemoryGraph:
    path = Path(file)
    if not path.exists():
        raise FileNotFoundError(file)
    if fmt == "pickle":
        with open(path, "rb") as f:
            g = pickle.load(f)
        if not isinstance(g, MemoryGraph):
            raise ValueError(f"{file} does not hold a MemoryGraph (got {type(g).__name__})")
        return g
    if fmt == "json":
        with open(path, encoding="utf-8") as f:
            return graph_from_dict(json.load(f))
    raise ValueError(f"Unsupported graph fmt {fmt!r}")
