"""Kida environment setup and site binding.

Creates a kida Environment from lectern's SiteConfig and the module
registry, then binds the built-in and user-registered filters and
globals. The environment is created once during Site._freeze().
"""

from collections.abc import Callable
from typing import Any

from kida import ChoiceLoader, DictLoader, Environment, FileSystemLoader

from lectern.config import SiteConfig
from lectern.markdown import markdown_filter
from lectern.modules.registry import ModuleRegistry

# Reserved name of the fallback partial; not a valid module file stem.
MISSING_MODULE_TEMPLATE = "__missing_module__"

BUILTIN_FILTERS: dict[str, Callable[..., Any]] = {
    "markdown": markdown_filter,
}


def create_environment(
    config: SiteConfig,
    registry: ModuleRegistry,
    filters: dict[str, Callable[..., Any]],
    globals_: dict[str, Any],
) -> Environment:
    """Create a kida Environment for the site's partials.

    Partials are served by name from memory. The modules directory is
    chained behind them so templates may also ``{% include %}`` or
    ``{% extends %}`` files by relative path.
    """
    templates = dict(registry.partials)
    templates[MISSING_MODULE_TEMPLATE] = config.missing_module_partial

    loaders: list[Any] = [DictLoader(templates)]
    modules_dir = config.path("modules_dir")
    if modules_dir.is_dir():
        loaders.append(FileSystemLoader(str(modules_dir)))

    env = Environment(
        loader=ChoiceLoader(loaders),
        autoescape=config.autoescape,
        auto_reload=config.debug,
    )

    env.update_filters(BUILTIN_FILTERS)

    # User filters may override built-ins
    if filters:
        env.update_filters(filters)

    for name, value in globals_.items():
        env.add_global(name, value)

    return env
