"""Render-scoped context via ContextVar.

Provides:
- ``RenderContext``: request handle, mutable response state, include depth.
- ``ResponseState``: status and headers a controller may adjust.
- ``get_render_context()``: the context of the render currently in progress.

The renderer sets the context around each template evaluation so the
``include`` global can find its parent without threading it through
template code. Nothing here is shared across requests.

Thread safety:
    Renders run in worker threads; ``ContextVar`` values are thread-local
    there, so concurrent requests never see each other's context.
"""

from __future__ import annotations

from contextvars import ContextVar
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lectern.http.request import Request


@dataclass(slots=True)
class ResponseState:
    """Status and headers for the response being rendered.

    Controllers receive this as their ``response`` argument::

        class MissingModule(Controller):
            def transform(self):
                self.response.status = 404
                self.response.set_header("Cache-Control", "no-store")
                return self.data
    """

    status: int = 200
    headers: list[tuple[str, str]] = field(default_factory=list)

    def add_header(self, name: str, value: str) -> None:
        self.headers.append((name, value))

    def set_header(self, name: str, value: str) -> None:
        """Replace every header called *name* (case-insensitive)."""
        lowered = name.lower()
        self.headers = [(k, v) for k, v in self.headers if k.lower() != lowered]
        self.headers.append((name, value))


@dataclass(frozen=True, slots=True)
class RenderContext:
    """Per-render state handed to controllers and nested includes."""

    request: Request | None = None
    response: ResponseState = field(default_factory=ResponseState)
    depth: int = 0

    def nested(self) -> RenderContext:
        """The context for an ``include`` one level down."""
        return replace(self, depth=self.depth + 1)


render_context_var: ContextVar[RenderContext | None] = ContextVar(
    "lectern_render_context", default=None
)
"""The render in progress. Set by the renderer around template evaluation."""


def get_render_context() -> RenderContext | None:
    """Return the active render context, or None outside a render."""
    return render_context_var.get()
