"""Lectern site class.

Mutable during setup (controllers, partials, pipes, filters, middleware).
Frozen on the first ASGI call, ``site.run()``, ``site.check()`` or
``TestClient`` entry; everything loaded from disk is then immutable and
shared by reference with the request handler.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from types import MappingProxyType
from typing import Any

from anyio import to_thread
from kida import Environment
from kida.template import Markup

from lectern._internal.asgi import Receive, Scope, Send
from lectern._internal.invoke import invoke
from lectern.config import SiteConfig
from lectern.content.pipes import DEFAULT_PIPES, Pipe
from lectern.content.routes import RouteTable, build_route_table
from lectern.content.shared import load_shared_content
from lectern.context import RenderContext
from lectern.errors import ConfigurationError
from lectern.http.request import Request
from lectern.http.response import Response
from lectern.middleware.protocol import Middleware
from lectern.middleware.static import StaticFiles
from lectern.modules.builtin import BUILTIN_CONTROLLERS
from lectern.modules.registry import ControllerFactory, ModuleRegistry, load_modules
from lectern.routing.route import Route
from lectern.routing.router import Router
from lectern.server.handler import handle_request
from lectern.templating.integration import create_environment
from lectern.templating.renderer import TemplateRenderer

logger = logging.getLogger("lectern.site")


@dataclass(frozen=True, slots=True)
class SiteState:
    """Everything the site loaded at startup. Read-only while serving."""

    config: SiteConfig
    shared: Mapping[str, Any]
    registry: ModuleRegistry
    routes: RouteTable
    env: Environment
    renderer: TemplateRenderer
    router: Router
    middleware: tuple[Middleware, ...]
    error_handlers: Mapping[int | type, Callable[..., Any]]


def register_routes(
    routes: RouteTable,
    router: Router,
    renderer: TemplateRenderer,
    root_module: str,
) -> None:
    """Add one route per content path, accepting any request method.

    Templated entries render *root_module* with a deep copy of the
    entry in a worker thread. Untemplated entries answer ``204 No
    Content`` with an empty body.
    """
    for path in routes:
        template = routes.template(path)
        router.add(
            Route(
                path=path,
                handler=_content_handler(path, routes, renderer, root_module),
                template=template,
                source=str(routes.source(path)),
            )
        )


def _content_handler(
    path: str,
    routes: RouteTable,
    renderer: TemplateRenderer,
    root_module: str,
) -> Callable[[Request], Any]:
    templated = routes.template(path) is not None

    async def content_handler(request: Request) -> Response:
        if not templated:
            return Response(body="", status=204)

        entry = routes.clone(path)
        context = RenderContext(request=request)
        html = await to_thread.run_sync(renderer.render, root_module, entry, context)

        response = Response(body=str(html), status=context.response.status)
        for name, value in context.response.headers:
            if name.lower() == "content-type":
                response = response.with_content_type(value)
            else:
                response = response.with_header(name, value)
        return response

    content_handler.__name__ = f"content_handler[{path}]"
    return content_handler


class Site:
    """A lectern site.

    Mutable during setup. Frozen at runtime when ``site.run()`` or
    ``__call__()`` is first invoked.

    Usage::

        site = Site(SiteConfig(root_dir="mysite"))

        @site.controller("teaser")
        class TeaserModule(Controller):
            def transform(self):
                ...

    Thread safety:
        Setup is single-threaded (decorators at import time). The
        freeze transition uses a Lock + double-check so exactly one
        thread loads the site even when several workers receive their
        first request at once.
    """

    __slots__ = (
        "_controllers",
        "_error_handlers",
        "_freeze_lock",
        "_frozen",
        "_middleware_list",
        "_partials",
        "_pipes",
        "_shutdown_hooks",
        "_startup_hooks",
        "_state",
        "_template_filters",
        "_template_globals",
        "config",
    )

    def __init__(self, config: SiteConfig | None = None) -> None:
        self.config: SiteConfig = config or SiteConfig()
        self._controllers: dict[str, ControllerFactory] = {}
        self._partials: dict[str, str] = {}
        self._pipes: dict[str, Pipe] = {}
        self._middleware_list: list[Middleware] = []
        self._error_handlers: dict[int | type, Callable[..., Any]] = {}
        self._template_filters: dict[str, Callable[..., Any]] = {}
        self._template_globals: dict[str, Any] = {}
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()
        self._state: SiteState | None = None

    # -- Setup --

    def configure(self, **changes: Any) -> None:
        """Replace configuration fields before the site starts.

        Used by the CLI to apply ``--host``/``--port``/``--debug``.
        """
        self._check_not_frozen()
        self.config = replace(self.config, **changes)

    def controller(self, name: str) -> Callable[[ControllerFactory], ControllerFactory]:
        """Register a controller for module *name* via decorator.

        Explicit controllers replace discovered and built-in ones::

            @site.controller("article")
            class ArticleModule(Controller):
                def transform(self):
                    self.data["words"] = len(self.data.get("text", "").split())
                    return self.data
        """

        def decorator(factory: ControllerFactory) -> ControllerFactory:
            self._check_not_frozen()
            self._controllers[name] = factory
            return factory

        return decorator

    def partial(self, name: str, source: str) -> None:
        """Register partial template *source* for module *name*."""
        self._check_not_frozen()
        self._partials[name] = source

    def pipe(self, name: str | None = None) -> Callable[[Pipe], Pipe]:
        """Register a delimited-text field pipe via decorator.

        ``key|name: value`` fields in ``.txt`` content store ``pipe(value)``.
        """

        def decorator(func: Pipe) -> Pipe:
            self._check_not_frozen()
            self._pipes[name or func.__name__] = func
            return func

        return decorator

    def error(
        self,
        code_or_exception: int | type[Exception],
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Register an error handler for a status code or exception type."""

        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self._check_not_frozen()
            self._error_handlers[code_or_exception] = func
            return func

        return decorator

    def add_middleware(self, middleware: Middleware) -> None:
        """Add a middleware to the pipeline."""
        self._check_not_frozen()
        self._middleware_list.append(middleware)

    def template_filter(
        self,
        name: str | None = None,
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Register a kida template filter via decorator."""

        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self._check_not_frozen()
            self._template_filters[name or func.__name__] = func
            return func

        return decorator

    def template_global(
        self,
        name: str | None = None,
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Register a kida template global via decorator."""

        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self._check_not_frozen()
            self._template_globals[name or func.__name__] = func
            return func

        return decorator

    # -- Lifecycle hooks --

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync startup hook via decorator.

        Hooks run in registration order during ASGI lifespan startup,
        after the site has loaded its content.
        """
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync shutdown hook via decorator."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    # -- Runtime --

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def state(self) -> SiteState:
        """The loaded site. Freezes on first access."""
        self._ensure_frozen()
        assert self._state is not None
        return self._state

    def render(
        self,
        name: str,
        data: Mapping[str, Any] | None = None,
        context: RenderContext | None = None,
    ) -> Markup:
        """Render module *name* outside of a request (tests, scripts)."""
        return self.state.renderer.render(name, data, context)

    def run(
        self,
        host: str | None = None,
        port: int | None = None,
        *,
        app_path: str | None = None,
    ) -> None:
        """Start the pounce server.

        Loads the site first so content errors abort before the server
        binds. ``debug=True`` enables reload on content and partial changes.
        """
        from lectern.server.runner import run_server

        self._ensure_frozen()
        run_server(
            self,
            host or self.config.host,
            port or self.config.port,
            reload=self.config.debug,
            workers=self.config.workers,
            reload_include=self.config.reload_include,
            reload_dirs=tuple(
                str(self.config.path(name))
                for name in ("content_dir", "modules_dir")
                if self.config.path(name).is_dir()
            ),
            app_path=app_path,
        )

    def check(self) -> None:
        """Validate the site and print results.

        Raises ``SystemExit(1)`` if errors are found.
        """
        from lectern.checks import check_site

        result = check_site(self.state)
        print(result.summary())
        if not result.ok:
            raise SystemExit(1)

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        state = self.state
        await handle_request(
            scope,
            receive,
            send,
            router=state.router,
            middleware=state.middleware,
            error_handlers=dict(state.error_handlers),
            debug=state.config.debug,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol.

        Loads the site at startup so content errors fail the startup
        instead of the first request.
        """
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    self._ensure_frozen()
                    for hook in self._startup_hooks:
                        await invoke(hook)
                except Exception as exc:
                    logger.error("Site startup failed: %s", exc)
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                for hook in self._shutdown_hooks:
                    await invoke(hook)
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Load the site into its frozen runtime state.

        MUST only be called while holding _freeze_lock.
        """
        config = self.config
        logger.info("Loading site from %s", Path(config.root_dir).resolve())

        # 1. Asset pre-flight; a failure aborts startup
        if config.build_assets:
            from lectern.assets import AssetPipeline

            AssetPipeline(config).build()

        # 2. Shared content
        shared = load_shared_content(config.global_dir)
        logger.info("Loaded shared content (%d keys)", len(shared))

        # 3. Modules: built-ins < discovered < explicit
        discovered = load_modules(config.path("modules_dir"))
        controllers: dict[str, ControllerFactory] = {}
        if config.builtin_modules:
            controllers.update(BUILTIN_CONTROLLERS)
        controllers.update(discovered.controllers)
        controllers.update(self._controllers)
        registry = ModuleRegistry({**discovered.partials, **self._partials}, controllers)
        logger.info(
            "Registered %d partials and %d controllers",
            len(registry.partials),
            len(registry.controllers),
        )

        # 4. Route table
        routes = build_route_table(
            config.path("content_dir"),
            reserved=config.global_dir_name,
            pipes={**DEFAULT_PIPES, **self._pipes},
            strict=config.strict_routes,
        )
        logger.info("Built route table with %d routes", len(routes))

        # 5. Kida environment and renderer
        env = create_environment(
            config,
            registry,
            self._template_filters,
            self._template_globals,
        )
        renderer = TemplateRenderer(
            env,
            registry,
            shared,
            routes=routes,
            global_key=config.global_key,
            max_include_depth=config.max_include_depth,
        )

        # 6. Router
        router = Router()
        register_routes(routes, router, renderer, config.root_module)
        router.compile()

        # 7. Middleware; compiled assets are served before content routes
        middleware: list[Middleware] = []
        compiled_dir = config.path("compiled_dir")
        if compiled_dir.is_dir():
            middleware.append(
                StaticFiles(
                    compiled_dir,
                    prefix=config.static_url,
                    cache_control=config.cache_control,
                )
            )
        middleware.extend(self._middleware_list)

        self._state = SiteState(
            config=config,
            shared=MappingProxyType(shared),
            registry=registry,
            routes=routes,
            env=env,
            renderer=renderer,
            router=router,
            middleware=tuple(middleware),
            error_handlers=MappingProxyType(dict(self._error_handlers)),
        )
        self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the site after it has started serving requests. "
                "Register controllers, partials, and middleware before calling site.run()."
            )
            raise ConfigurationError(msg)
