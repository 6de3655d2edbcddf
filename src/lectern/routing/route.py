"""Route and RouteMatch frozen dataclasses."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    Created while the site freezes, one per route-table path.
    ``methods=None`` accepts every request method, extension methods
    included.
    """

    path: str
    handler: Callable[..., Any]
    methods: frozenset[str] | None = None
    template: str | None = None
    source: str | None = None

    def allows(self, method: str) -> bool:
        return self.methods is None or method in self.methods


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route
    path: str
