"""Lectern exception hierarchy.

Shared across the content loader, module registry, renderer, and the
ASGI handler so every layer raises and catches the same types.
"""

from dataclasses import dataclass
from pathlib import Path


class LecternError(Exception):
    """Base for all lectern-specific errors."""


class ConfigurationError(LecternError):
    """Raised when site configuration or setup is invalid.

    Typically raised during ``Site._freeze()`` at startup.
    """


class ContentError(LecternError):
    """A content file is missing or cannot be parsed.

    Raised while the route table or shared content is built, so it
    aborts startup before any request is served.
    """

    def __init__(self, path: str | Path, detail: str) -> None:
        self.path = Path(path)
        self.detail = detail
        super().__init__(f"{self.path}: {detail}")


class RouteCollisionError(ContentError):
    """Two content files normalize to the same URL path (strict mode only)."""


class ModuleLoadError(LecternError):
    """A controller file could not be imported."""


class ControllerError(LecternError):
    """A module controller failed while transforming its data."""

    def __init__(self, module: str, detail: str) -> None:
        self.module = module
        super().__init__(f"Controller for module {module!r} failed: {detail}")


class TemplateRecursionError(LecternError):
    """Nested ``include`` calls went deeper than the configured limit."""

    def __init__(self, module: str, depth: int) -> None:
        self.module = module
        self.depth = depth
        super().__init__(
            f"Template recursion too deep: including {module!r} at depth {depth}"
        )


class AssetError(LecternError):
    """An asset pre-flight step (copy, SASS, script bundle) failed."""

    def __init__(self, step: str, detail: str) -> None:
        self.step = step
        super().__init__(f"{step}: {detail}")


@dataclass(frozen=True, slots=True)
class HTTPError(LecternError):
    """An error that maps directly to an HTTP status code.

    Raised by the router or middleware. The ASGI handler catches these
    and dispatches to the matching ``@site.error()`` handler.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404: no route matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818
    """405: route exists but not for this HTTP method."""

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Allow", allow_value),),
        )
