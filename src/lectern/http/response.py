"""The rendered page handed to the ASGI sender.

Controllers write to a mutable ``ResponseState``; once rendering is done
the site folds that state into this frozen value.
"""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True, slots=True)
class Response:
    """A finished HTTP response.

    ``content_type`` is kept apart from ``headers`` so the sender can
    always emit exactly one ``Content-Type``.
    """

    body: str | bytes = ""
    status: int = 200
    content_type: str = "text/html; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()

    def with_status(self, status: int) -> Response:
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        """Copy with *name* appended; earlier values for *name* are kept."""
        return replace(self, headers=self.headers + ((name, value),))

    def with_content_type(self, content_type: str) -> Response:
        return replace(self, content_type=content_type)

    @property
    def body_bytes(self) -> bytes:
        body = self.body
        return body.encode("utf-8") if isinstance(body, str) else body

    @property
    def text(self) -> str:
        body = self.body
        return body.decode("utf-8") if isinstance(body, bytes) else body

    def header(self, name: str) -> str | None:
        """First value of header *name*, compared case-insensitively."""
        wanted = name.lower()
        return next((value for key, value in self.headers if key.lower() == wanted), None)
