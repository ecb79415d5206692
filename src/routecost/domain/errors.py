# routecost/domain/errors.py
from typing import Any


class RoutingError(Exception):
    """Base exception for route calculation failures."""


class ConfigurationError(RoutingError, ValueError):
    """Unknown travel mode or an out-of-range cost model option."""

    def __init__(self, message: str, *, mode: str | None = None, fields: dict[str, Any] | None = None):
        super().__init__(message)
        self.mode = mode
        self.fields = fields or {}


class NoPathFound(RoutingError):
    """The search exhausted its queue without reaching the destination."""


class ResourceExceeded(RoutingError):
    """The search was pruned by an expansion/cost budget or cancellation."""


class InvalidGraphReference(RoutingError, KeyError):
    """The graph facade was asked for an edge or node it does not have."""

    def __init__(self, kind: str, ref: int):
        super().__init__(kind, ref)
        self.kind = kind
        self.ref = ref

    def __str__(self) -> str:
        return f"missing {self.kind} {self.ref!r} in graph"
