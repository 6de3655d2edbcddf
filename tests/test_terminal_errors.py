"""Tests for lectern.server.terminal_errors and the internal-error pipeline."""

import logging
from typing import Any

import pytest

from lectern.errors import ControllerError, NotFound
from lectern.http.headers import Headers
from lectern.http.query import QueryParams
from lectern.http.request import Request
from lectern.http.response import Response
from lectern.server.errors import call_error_handler, handle_http_error, handle_internal_error
from lectern.server.terminal_errors import (
    TRACEBACK_ENV,
    format_compact_traceback,
    format_minimal_error,
    log_error,
    traceback_style,
)


def _raise_chain() -> ControllerError:
    try:
        try:
            raise KeyError("title")
        except KeyError as exc:
            raise ControllerError("article", "KeyError: 'title'") from exc
    except ControllerError as err:
        return err


def _request(path: str = "/about") -> Request:
    async def receive() -> dict[str, Any]:
        return {"type": "http.request", "body": b""}

    return Request("GET", path, Headers(), QueryParams(), "1.1", None, None, receive)


class TestFormatting:
    def test_compact_includes_cause(self) -> None:
        text = format_compact_traceback(_raise_chain())
        assert text.startswith("ControllerError: Controller for module 'article' failed")
        assert "Caused by KeyError: 'title'" in text
        assert "in _raise_chain" in text

    def test_minimal_is_one_line(self) -> None:
        text = format_minimal_error(_raise_chain())
        assert "\n" not in text
        assert text.startswith("ControllerError at ")

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(None, "compact"), ("FULL", "full"), ("minimal", "minimal"), ("bogus", "compact")],
    )
    def test_traceback_style(
        self, monkeypatch: pytest.MonkeyPatch, value: str | None, expected: str
    ) -> None:
        if value is None:
            monkeypatch.delenv(TRACEBACK_ENV, raising=False)
        else:
            monkeypatch.setenv(TRACEBACK_ENV, value)
        assert traceback_style() == expected

    def test_log_error_prefix(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.ERROR, logger="lectern.server"):
            log_error(_raise_chain(), _request())
        assert "500 GET /about" in caplog.text


class TestErrorPipeline:
    async def test_http_error_default_body(self) -> None:
        response = await handle_http_error(NotFound(), _request(), {}, debug=False)
        assert response.status == 404
        assert response.text == "Not Found"

    async def test_internal_error_hides_detail(self) -> None:
        response = await handle_internal_error(_raise_chain(), _request(), {}, debug=False)
        assert response.status == 500
        assert response.text == "Internal Server Error"

    async def test_internal_error_debug_escapes(self) -> None:
        exc = ControllerError("x", "<script>")
        response = await handle_internal_error(exc, _request(), {}, debug=True)
        assert "&lt;script&gt;" in response.text
        assert "<script>" not in response.text

    async def test_handler_by_exception_type(self) -> None:
        handlers = {ControllerError: lambda: "controller broke"}
        response = await handle_internal_error(_raise_chain(), _request(), handlers, debug=False)
        assert response.status == 500
        assert response.text == "controller broke"

    async def test_handler_tuple_result(self) -> None:
        def handler(request: Request, exc: Exception) -> tuple[str, int]:
            return f"gone: {request.path}", 410

        response = await call_error_handler(handler, _request("/x"), NotFound())
        assert (response.status, response.text) == (410, "gone: /x")

    async def test_handler_response_passthrough(self) -> None:
        async def handler(request: Request) -> Response:
            return Response("custom", status=418)

        response = await call_error_handler(handler, _request(), NotFound())
        assert response.status == 418
