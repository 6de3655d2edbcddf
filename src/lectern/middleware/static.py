"""Static file serving for the compiled-assets directory.

Serves files from a directory for matching URL prefixes, including
root-level serving (``prefix="/"``). Anything that is not an existing
regular file falls through to the content routes.
"""

import mimetypes
from pathlib import Path

from lectern.http.request import Request
from lectern.http.response import Response
from lectern.middleware.protocol import Next


class StaticFiles:
    """Middleware that serves static files from a directory.

    Security: resolves symlinks and verifies the final path
    is within the configured directory to prevent path traversal.

    Usage::

        site.add_middleware(StaticFiles(directory="_compiled", prefix="/"))
    """

    __slots__ = ("_cache_control", "_directory", "_prefix")

    def __init__(
        self,
        directory: str | Path,
        prefix: str = "/",
        *,
        cache_control: str = "public, max-age=3600",
    ) -> None:
        self._directory = Path(directory).resolve()
        self._cache_control = cache_control

        # Root prefix "/" normalizes to "" so every path is a candidate.
        stripped = "/" + prefix.strip("/")
        self._prefix = stripped if stripped != "/" else ""

    async def __call__(self, request: Request, next: Next) -> Response:
        """Serve a static file or fall through."""
        if request.method not in ("GET", "HEAD"):
            return await next(request)

        relative = self._relative_path(request.path)
        if not relative:
            return await next(request)

        file_path = (self._directory / relative).resolve()
        if not file_path.is_relative_to(self._directory):
            return Response(body="Forbidden", status=403)

        if not file_path.is_file():
            return await next(request)

        return self._serve_file(file_path)

    def _relative_path(self, path: str) -> str | None:
        """Return the file path below the mount, or None if the prefix doesn't match."""
        if not self._prefix:
            return path.lstrip("/")
        if path != self._prefix and not path.startswith(self._prefix + "/"):
            return None
        return path[len(self._prefix) :].lstrip("/")

    def _serve_file(self, file_path: Path) -> Response:
        content_type, _ = mimetypes.guess_type(str(file_path))
        if content_type is None:
            content_type = "application/octet-stream"

        return Response(
            body=file_path.read_bytes(),
            content_type=content_type,
        ).with_header("Cache-Control", self._cache_control)
