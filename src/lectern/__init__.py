"""Lectern: a filesystem-driven content server.

Content files become routes, module partials become HTML, and optional
controllers reshape the data in between.

Basic usage::

    from lectern import Site, SiteConfig

    site = Site(SiteConfig(root_dir="mysite"))
    site.run()

A site directory is laid out by convention::

    mysite/
        content/          index.yaml, about.txt, blog/post1.yaml, _global/
        modules/          core.html, article/article.html, article/article.py
        assets/           vendor/, media/, styles/main.scss, scripts/main.ts
"""

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "ContentError",
    "Controller",
    "ControllerError",
    "HTTPError",
    "LecternError",
    "Middleware",
    "Next",
    "NotFound",
    "RenderContext",
    "Request",
    "Response",
    "ResponseState",
    "Site",
    "SiteConfig",
    "TemplateRecursionError",
]

_EXPORTS: dict[str, str] = {
    "Site": "lectern.site",
    "SiteConfig": "lectern.config",
    "Controller": "lectern.modules.controller",
    "RenderContext": "lectern.context",
    "ResponseState": "lectern.context",
    "Request": "lectern.http.request",
    "Response": "lectern.http.response",
    "Middleware": "lectern.middleware.protocol",
    "Next": "lectern.middleware.protocol",
    "LecternError": "lectern.errors",
    "ConfigurationError": "lectern.errors",
    "ContentError": "lectern.errors",
    "ControllerError": "lectern.errors",
    "TemplateRecursionError": "lectern.errors",
    "HTTPError": "lectern.errors",
    "NotFound": "lectern.errors",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import lectern`` fast while providing a clean top-level API.
    """
    module_name = _EXPORTS.get(name)
    if module_name is None:
        msg = f"module 'lectern' has no attribute {name!r}"
        raise AttributeError(msg)

    import importlib

    return getattr(importlib.import_module(module_name), name)
