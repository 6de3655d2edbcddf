"""Site resolution: turns a CLI TARGET into a Site instance.

Shared by every ``lectern`` command.
"""

import importlib
import importlib.util
import sys
from pathlib import Path
from typing import Any

from lectern.config import SiteConfig
from lectern.errors import LecternError
from lectern.site import Site

APP_FILE = "app.py"


def resolve_site(target: str) -> Site:
    """Resolve a site directory or import string to a Site.

    A directory holding an ``app.py`` loads that file and uses its
    ``site`` attribute, so controllers and filters registered there are
    kept. Any other directory builds a plain ``Site`` rooted there.
    Anything else is read as ``"module:attribute"``; the attribute
    defaults to ``site``. Factory functions are called.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the resolved object is not a ``Site``.
    """
    directory = Path(target)
    if directory.is_dir():
        app_file = directory / APP_FILE
        if not app_file.is_file():
            return Site(SiteConfig(root_dir=target))
        return _as_site(getattr(_load_app(app_file), "site"), str(app_file))

    module_path, _, attr_name = target.partition(":")
    if not attr_name:
        attr_name = "site"

    if "" not in sys.path and "." not in sys.path:
        sys.path.insert(0, "")
    module = importlib.import_module(module_path)
    return _as_site(getattr(module, attr_name), target)


def _load_app(app_file: Path) -> Any:
    """Execute *app_file* as a fresh module; each call gets its own namespace."""
    module_name = f"_lectern_app_{app_file.parent.name}_{id(app_file)}"
    spec = importlib.util.spec_from_file_location(module_name, app_file)
    if spec is None or spec.loader is None:
        raise ModuleNotFoundError(f"Cannot load {app_file}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception:
        sys.modules.pop(module_name, None)
        raise
    return module


def _as_site(obj: Any, target: str) -> Site:
    if callable(obj) and not isinstance(obj, Site):
        try:
            obj = obj()
        except Exception as exc:
            msg = f"Factory function {target!r} raised an error: {exc}"
            raise TypeError(msg) from exc

    if not isinstance(obj, Site):
        msg = f"{target!r} resolved to {type(obj).__name__}, not a lectern.Site instance"
        raise TypeError(msg)

    return obj


def load_site_or_exit(target: str) -> Site:
    """Resolve *target* and load it, printing errors and exiting 1 on failure."""
    try:
        site = resolve_site(target)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
    return site


def freeze_or_exit(site: Site) -> None:
    """Load the site's content and modules, exiting 1 on a load error."""
    try:
        site.state  # noqa: B018
    except LecternError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
