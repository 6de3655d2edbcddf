"""Partial rendering with controller dispatch and nested includes.

``TemplateRenderer.render()`` is the single entry point for turning a
module name plus a payload into HTML:

1. Copy the payload and merge a fresh deep copy of the shared content
   under ``global_key``.
2. If a partial is registered under the name, dispatch its controller
   and evaluate the partial against the controller's result.
3. Otherwise evaluate the fallback partial with ``missing_module`` set
   to the requested name. No controller runs.

Partials can call back into the renderer through the ``include``
global::

    <main>{{ include(settings.template, page) }}</main>

Nesting depth is tracked on the render context; going past
``max_include_depth`` raises ``TemplateRecursionError``.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from kida.template import Markup

from lectern.context import RenderContext, get_render_context, render_context_var
from lectern.errors import LecternError, TemplateRecursionError
from lectern.modules.controller import dispatch
from lectern.templating.integration import MISSING_MODULE_TEMPLATE

if TYPE_CHECKING:
    from kida import Environment

    from lectern.modules.registry import ModuleRegistry


class TemplateRenderer:
    """Renders module partials against controller-shaped payloads.

    Binds ``include``, ``module`` (an alias) and ``site_routes`` as
    globals on the given environment.
    """

    __slots__ = ("_env", "_global_key", "_max_depth", "_registry", "_route_summary", "_shared")

    def __init__(
        self,
        env: Environment,
        registry: ModuleRegistry,
        shared: Mapping[str, Any] | None = None,
        *,
        routes: Mapping[str, Mapping[str, Any]] | None = None,
        global_key: str = "global",
        max_include_depth: int = 32,
    ) -> None:
        self._env = env
        self._registry = registry
        self._shared = dict(shared or {})
        self._global_key = global_key
        self._max_depth = max_include_depth
        self._route_summary = _summarize_routes(routes or {})

        env.add_global("include", self.include)
        env.add_global("module", self.include)
        env.add_global("site_routes", self.site_routes)

    @property
    def registry(self) -> ModuleRegistry:
        return self._registry

    def render(
        self,
        name: str,
        data: Mapping[str, Any] | None = None,
        context: RenderContext | None = None,
    ) -> Markup:
        """Render module *name* and return pre-escaped HTML.

        Raises:
            ControllerError: If the module's controller fails.
            TemplateRecursionError: If *context* is nested too deeply.
        """
        if context is None:
            context = RenderContext()
        if context.depth > self._max_depth:
            raise TemplateRecursionError(name, context.depth)

        payload = dict(data or {})
        payload[self._global_key] = copy.deepcopy(self._shared)

        if not self._registry.has_partial(name):
            payload["missing_module"] = name
            template = self._env.get_template(MISSING_MODULE_TEMPLATE)
            return self._evaluate(template, payload, context)

        template = self._env.get_template(name)
        payload = dispatch(self._registry, name, payload, context)
        if self._global_key not in payload:
            payload[self._global_key] = copy.deepcopy(self._shared)
        return self._evaluate(template, payload, context)

    def include(self, name: str, data: Mapping[str, Any] | None = None) -> Markup:
        """Template global: render a nested module one level down."""
        parent = get_render_context()
        context = parent.nested() if parent is not None else RenderContext()
        return self.render(name, data, context)

    def site_routes(self) -> dict[str, dict[str, Any]]:
        """Template global: ``{path: {"settings": {...}}}`` for every route."""
        return copy.deepcopy(self._route_summary)

    def _evaluate(self, template: Any, payload: dict[str, Any], context: RenderContext) -> Markup:
        token = render_context_var.set(context)
        try:
            html = template.render(payload)
        except LecternError:
            raise
        except Exception as exc:
            # Surface controller and recursion failures from nested includes
            # even when the template engine wraps them.
            original = _find_lectern_error(exc)
            if original is None:
                raise
            raise original from original.__cause__
        finally:
            render_context_var.reset(token)
        return Markup(html)


def _summarize_routes(routes: Mapping[str, Mapping[str, Any]]) -> dict[str, dict[str, Any]]:
    summary: dict[str, dict[str, Any]] = {}
    for path in sorted(routes):
        settings = routes[path].get("settings")
        summary[path] = {"settings": dict(settings) if isinstance(settings, Mapping) else {}}
    return summary


def _find_lectern_error(exc: BaseException) -> LecternError | None:
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        if isinstance(current, LecternError):
            return current
        seen.add(id(current))
        current = current.__cause__ or current.__context__
    return None
