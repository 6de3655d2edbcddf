"""Controller base class and dispatch.

A controller is any class constructed as ``Controller(request, response, data)``.
If the instance has a callable ``transform``, its return value becomes the
render payload. ``transform`` may be ``def`` or ``async def``; coroutines are
run on the event loop from the render worker thread.

Usage::

    @site.controller("teaser")
    class TeaserModule(Controller):
        def transform(self):
            self.data["summary"] = self.data.get("text", "")[:80]
            return self.data
"""

from __future__ import annotations

import inspect
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from anyio import from_thread

from lectern.errors import ControllerError

if TYPE_CHECKING:
    from lectern.context import RenderContext, ResponseState
    from lectern.http.request import Request
    from lectern.modules.registry import ModuleRegistry


class Controller:
    """Optional base class for module controllers.

    Stores the constructor arguments; the default ``transform`` returns
    the payload untouched.
    """

    def __init__(
        self,
        request: Request | None,
        response: ResponseState | None,
        data: dict[str, Any],
    ) -> None:
        self.request = request
        self.response = response
        self.data = data

    def transform(self) -> Mapping[str, Any] | None:
        return self.data


def dispatch(
    registry: ModuleRegistry,
    name: str,
    data: dict[str, Any],
    context: RenderContext,
) -> dict[str, Any]:
    """Run the controller registered under *name* against *data*.

    Returns *data* unchanged when no controller is registered. A
    ``None`` result from ``transform`` keeps the (possibly mutated)
    input payload.

    Raises:
        ControllerError: If construction or ``transform`` fails, or the
            result is not a mapping.
    """
    factory = registry.controllers.get(name)
    if factory is None:
        return data

    try:
        instance = factory(context.request, context.response, data)
        transform = getattr(instance, "transform", None)
        result = transform() if callable(transform) else None
        if inspect.isawaitable(result):
            result = _resolve_awaitable(name, result)
    except ControllerError:
        raise
    except Exception as exc:
        raise ControllerError(name, f"{type(exc).__name__}: {exc}") from exc

    if result is None:
        return data
    if not isinstance(result, Mapping):
        raise ControllerError(
            name, f"transform() must return a mapping or None, got {type(result).__name__}"
        )
    return dict(result)


def _resolve_awaitable(name: str, awaitable: Any) -> Any:
    """Wait for *awaitable* on the event loop that owns this worker thread."""

    async def _await() -> Any:
        try:
            return await awaitable
        except Exception as exc:
            raise ControllerError(name, f"{type(exc).__name__}: {exc}") from exc

    try:
        return from_thread.run(_await)
    except RuntimeError as exc:
        if inspect.iscoroutine(awaitable):
            awaitable.close()
        raise ControllerError(
            name, "async transform() requires rendering inside a request worker thread"
        ) from exc
