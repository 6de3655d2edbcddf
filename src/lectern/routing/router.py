"""Compiled router with exact-path matching.

Routes are registered while the site freezes and compiled into an
immutable lookup table. Paths are normalized so ``/blog`` and ``/blog/``
resolve to the same entry.
"""

from types import MappingProxyType

from lectern.errors import MethodNotAllowed, NotFound
from lectern.routing.route import Route, RouteMatch


def normalize_path(path: str) -> str:
    """Collapse duplicate and trailing slashes; the root stays ``/``.

    Examples::

        "/"            -> "/"
        "/blog/"       -> "/blog"
        "//blog//post" -> "/blog/post"
    """
    parts = [p for p in path.split("/") if p]
    return "/" + "/".join(parts)


class Router:
    """Compiled router with exact-path matching.

    Usage::

        router = Router()
        router.add(Route("/about", handler))
        router.compile()
        match = router.match("GET", "/about/")
    """

    __slots__ = ("_compiled", "_routes")

    def __init__(self) -> None:
        self._routes: dict[str, Route] | MappingProxyType[str, Route] = {}
        self._compiled = False

    def add(self, route: Route) -> None:
        """Add a route to the router. Must be called before compile().

        A second route on the same normalized path replaces the first.
        """
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)
        self._routes[normalize_path(route.path)] = route  # type: ignore[index]

    @property
    def routes(self) -> list[Route]:
        """Return all registered routes, sorted by path."""
        return [self._routes[path] for path in sorted(self._routes)]

    def __len__(self) -> int:
        return len(self._routes)

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._routes = MappingProxyType(dict(self._routes))
        self._compiled = True

    def match(self, method: str, path: str) -> RouteMatch:
        """Match a request path and method against compiled routes.

        Returns a ``RouteMatch`` on success.
        Raises ``NotFound`` if no route matches the path.
        Raises ``MethodNotAllowed`` if the path matches but the method doesn't.
        """
        normalized = normalize_path(path)
        route = self._routes.get(normalized)
        if route is None:
            raise NotFound(f"No route matches {method} {path!r}")
        if not route.allows(method):
            raise MethodNotAllowed(route.methods or frozenset())
        return RouteMatch(route=route, path=normalized)
