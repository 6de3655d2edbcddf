"""ASGI handler: translates ASGI scope/messages to lectern types.

The only component that touches raw ASGI directly. Converts scope dicts
to typed Request objects, dispatches through middleware and routing,
and sends the Response back through ASGI send().
"""

from collections.abc import Callable
from typing import Any

from lectern._internal.asgi import Receive, Scope, Send
from lectern._internal.invoke import invoke
from lectern.errors import HTTPError
from lectern.http.request import Request
from lectern.http.response import Response
from lectern.middleware.protocol import Next
from lectern.routing.router import Router
from lectern.server.errors import handle_http_error, handle_internal_error
from lectern.server.sender import send_response


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    middleware: tuple[Callable[..., Any], ...],
    error_handlers: dict[int | type, Callable[..., Any]],
    debug: bool,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)

    try:

        async def dispatch(req: Request) -> Response:
            match = router.match(req.method, req.path)
            return await invoke(match.route.handler, req)

        # Wrap middleware around the dispatch
        handler: Next = dispatch
        for mw in reversed(middleware):
            outer = handler

            async def make_next(req: Request, _mw: Any = mw, _next: Next = outer) -> Response:
                return await _mw(req, _next)

            handler = make_next

        response = await handler(request)

    except HTTPError as exc:
        response = await handle_http_error(exc, request, error_handlers, debug)
    except Exception as exc:
        response = await handle_internal_error(exc, request, error_handlers, debug)

    await send_response(response, send, head=request.method == "HEAD")
