"""Development and production server startup.

Starts a pounce ASGI server with the live Site object. pounce is
imported on first use so ``import lectern`` stays light.
"""

from __future__ import annotations


def run_server(
    app: object,
    host: str,
    port: int,
    *,
    reload: bool = False,
    workers: int = 1,
    reload_include: tuple[str, ...] = (),
    reload_dirs: tuple[str, ...] = (),
    app_path: str | None = None,
) -> None:
    """Start a pounce server with the given Site.

    Pounce's ``run()`` takes an import string, but lectern has a live
    ``Site`` object, so ``pounce.Server`` is used directly with the
    ASGI callable.

    Args:
        app: ASGI callable (a lectern Site).
        host: Bind host address.
        port: Bind port number.
        reload: Restart on file changes (development; forces one worker).
        workers: Worker count when not reloading.
        reload_include: Extra file extensions to watch when reloading.
        reload_dirs: Extra directories to watch alongside cwd.
        app_path: Optional ``"module:attribute"`` import string so the
            site is re-imported on each reload cycle.
    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    config = ServerConfig(
        host=host,
        port=port,
        workers=1 if reload else workers,
        reload=reload,
        reload_include=reload_include,
        reload_dirs=reload_dirs,
    )
    server = Server(config, app, app_path=app_path)
    server.run()
