"""The request a content route is rendered for.

Built once per ASGI call in the handler and exposed to controllers as
``self.request``. Metadata is frozen; the body is pulled from the ASGI
``receive`` callable on first use.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from lectern._internal.asgi import Receive
from lectern.http.headers import Headers
from lectern.http.query import QueryParams


@dataclass(frozen=True, slots=True)
class Request:
    """One HTTP request for a content route."""

    method: str
    path: str
    headers: Headers
    query: QueryParams
    http_version: str
    server: tuple[str, int] | None
    client: tuple[str, int] | None
    _receive: Receive
    # filled by body(); the ASGI receive channel can only be drained once
    _buffer: list[bytes] = field(default_factory=list, repr=False, compare=False)

    @classmethod
    def from_asgi(cls, scope: dict[str, Any], receive: Receive) -> Request:
        server, client = scope.get("server"), scope.get("client")
        return cls(
            scope["method"],
            scope["path"],
            Headers(tuple(scope.get("headers", ()))),
            QueryParams(scope.get("query_string", b"")),
            scope.get("http_version", "1.1"),
            tuple(server) if server else None,
            tuple(client) if client else None,
            receive,
        )

    @property
    def content_type(self) -> str | None:
        return self.headers.get("content-type")

    @property
    def url(self) -> str:
        """Path plus the query string, when there is one."""
        if not self.query.raw:
            return self.path
        return self.path + "?" + self.query.raw.decode("latin-1")

    async def body(self) -> bytes:
        """Drain ``http.request`` messages into bytes, once per request."""
        if not self._buffer:
            chunks: list[bytes] = []
            more = True
            while more:
                message = await self._receive()
                chunks.append(message.get("body", b""))
                more = message.get("more_body", False)
            self._buffer.append(b"".join(chunks))
        return self._buffer[0]

    async def text(self) -> str:
        return (await self.body()).decode("utf-8")

    async def json(self) -> Any:
        return json.loads(await self.body())
