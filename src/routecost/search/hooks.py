# search/hooks.py
from typing import Protocol

from routecost.search.edge_status import EdgeLabel


class SearchHooks(Protocol):
    def search_start(self, *, mode, origin_edges, destination_edges): ...
    def search_end(self, *, status, cost, seconds, edges, expansions, wall_ms, reason=None): ...
    def expand(self, label: EdgeLabel, *, expansions, qsize): ...
    def error(self, *, reason: str, exc: BaseException, **kw): ...


class NoopHooks:
    def search_start(self, **_):
        pass

    def search_end(self, **_):
        pass

    def expand(self, *_, **__):
        pass

    def error(self, *_, **__):
        pass
