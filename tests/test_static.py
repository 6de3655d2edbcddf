"""Tests for lectern.middleware.static: serving the compiled-assets directory."""

from pathlib import Path
from typing import Any

import pytest

from lectern.http.headers import Headers
from lectern.http.query import QueryParams
from lectern.http.request import Request
from lectern.http.response import Response
from lectern.middleware.static import StaticFiles


def _request(path: str, method: str = "GET") -> Request:
    async def receive() -> dict[str, Any]:
        return {"type": "http.request", "body": b"", "more_body": False}

    return Request(
        method=method,
        path=path,
        headers=Headers(),
        query=QueryParams(),
        http_version="1.1",
        server=None,
        client=None,
        _receive=receive,
    )


async def _fallthrough(request: Request) -> Response:
    return Response("content route", status=200)


@pytest.fixture
def compiled(tmp_path: Path) -> Path:
    (tmp_path / "css").mkdir()
    (tmp_path / "css" / "main.css").write_text("body{}")
    (tmp_path / "media").mkdir()
    (tmp_path / "media" / "blob").write_bytes(b"\x00\x01")
    return tmp_path


class TestStaticFiles:
    async def test_serves_file_at_root_prefix(self, compiled: Path) -> None:
        static = StaticFiles(compiled, prefix="/", cache_control="no-cache")
        response = await static(_request("/css/main.css"), _fallthrough)
        assert response.body == b"body{}"
        assert response.content_type.startswith("text/css")
        assert response.header("cache-control") == "no-cache"

    async def test_unknown_type(self, compiled: Path) -> None:
        static = StaticFiles(compiled)
        response = await static(_request("/media/blob"), _fallthrough)
        assert response.content_type == "application/octet-stream"

    async def test_missing_file_falls_through(self, compiled: Path) -> None:
        static = StaticFiles(compiled)
        response = await static(_request("/about"), _fallthrough)
        assert response.text == "content route"

    async def test_directory_falls_through(self, compiled: Path) -> None:
        static = StaticFiles(compiled)
        response = await static(_request("/css"), _fallthrough)
        assert response.text == "content route"

    async def test_non_get_falls_through(self, compiled: Path) -> None:
        static = StaticFiles(compiled)
        response = await static(_request("/css/main.css", method="POST"), _fallthrough)
        assert response.text == "content route"

    async def test_prefix(self, compiled: Path) -> None:
        static = StaticFiles(compiled, prefix="/static/")
        hit = await static(_request("/static/css/main.css"), _fallthrough)
        miss = await static(_request("/css/main.css"), _fallthrough)
        assert hit.body == b"body{}"
        assert miss.text == "content route"

    async def test_traversal_forbidden(self, compiled: Path) -> None:
        static = StaticFiles(compiled / "css")
        response = await static(_request("/../media/blob"), _fallthrough)
        assert response.status == 403
