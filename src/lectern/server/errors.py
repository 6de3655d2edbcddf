"""Error handling pipeline for lectern requests.

Maps HTTPError exceptions and unexpected failures to deterministic
Response objects, using registered error handlers when present.
"""

import html
import inspect
import logging
from collections.abc import Callable
from typing import Any

from lectern.errors import HTTPError
from lectern.http.request import Request
from lectern.http.response import Response
from lectern.server.terminal_errors import format_compact_traceback, log_error

logger = logging.getLogger("lectern.server")

INTERNAL_ERROR_BODY = "Internal Server Error"


def _to_response(result: Any) -> Response:
    if isinstance(result, Response):
        return result
    if result is None:
        return Response(body="")
    if isinstance(result, tuple) and len(result) == 2:
        body, status = result
        return Response(body=str(body), status=int(status))
    return Response(body=str(result))


async def call_error_handler(
    handler: Callable[..., Any],
    request: Request,
    exc: Exception,
) -> Response:
    """Invoke a user-registered error handler with introspected arguments.

    Error handlers may accept zero, one (request), or two (request, exc) args.
    Supports both sync and async error handlers. A ``str`` result becomes
    the body; a ``(body, status)`` tuple sets both.
    """
    params = list(inspect.signature(handler).parameters.values())

    if len(params) >= 2:
        result = handler(request, exc)
    elif len(params) == 1:
        result = handler(request)
    else:
        result = handler()

    if inspect.isawaitable(result):
        result = await result

    return _to_response(result)


def _find_handler(
    error_handlers: dict[int | type, Callable[..., Any]],
    exc: Exception,
) -> Callable[..., Any] | None:
    for cls in type(exc).__mro__:
        handler = error_handlers.get(cls)
        if handler is not None:
            return handler
    return None


async def handle_http_error(
    exc: HTTPError,
    request: Request,
    error_handlers: dict[int | type, Callable[..., Any]],
    debug: bool,
) -> Response:
    """Map an HTTPError to a Response using registered error handlers."""
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)

    handler = _find_handler(error_handlers, exc) or error_handlers.get(exc.status)
    if handler is not None:
        response = await call_error_handler(handler, request, exc)
        # Keep the error status unless the handler chose its own
        if response.status == 200:
            response = response.with_status(exc.status)
        return response

    detail = exc.detail or f"Error {exc.status}"
    if debug and exc.detail:
        detail = f"{exc.status}: {exc.detail}"

    response = Response(body=detail, content_type="text/plain; charset=utf-8").with_status(
        exc.status
    )
    for name, value in exc.headers:
        response = response.with_header(name, value)
    return response


async def handle_internal_error(
    exc: Exception,
    request: Request,
    error_handlers: dict[int | type, Callable[..., Any]],
    debug: bool,
) -> Response:
    """Handle unexpected exceptions as 500 errors."""
    log_error(exc, request)

    handler = error_handlers.get(500) or _find_handler(error_handlers, exc)
    if handler is not None:
        response = await call_error_handler(handler, request, exc)
        if response.status == 200:
            response = response.with_status(500)
        return response

    if debug:
        body = f"<pre>{html.escape(format_compact_traceback(exc))}</pre>"
        return Response(body=body, status=500)

    return Response(body=INTERNAL_ERROR_BODY, status=500, content_type="text/plain; charset=utf-8")
