"""Module registry and filesystem discovery.

A module is a named pair of an optional partial (kida template source)
and an optional controller. The modules directory is scanned recursively:

- ``<name>.html`` registers a partial under ``name``
- ``<name>.py`` is imported by path and its ``<PascalCase(name)>Module``
  attribute is registered as the controller for ``name``

Partials and controllers are matched by name only; either may exist
without the other.
"""

from __future__ import annotations

import importlib.util
import logging
import re
import sys
from collections.abc import Callable, Iterator, Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

from lectern.errors import ModuleLoadError

logger = logging.getLogger("lectern.modules")

PARTIAL_SUFFIXES = frozenset({".html"})
CONTROLLER_SUFFIXES = frozenset({".py"})

_SKIPPED_DIRS = frozenset({"__pycache__"})
_WORD_RE = re.compile(r"[^0-9a-zA-Z]+")

type ControllerFactory = Callable[..., Any]


class ModuleRegistry:
    """Immutable table of partials and controllers keyed by module name."""

    __slots__ = ("_controllers", "_partials")

    def __init__(
        self,
        partials: Mapping[str, str] | None = None,
        controllers: Mapping[str, ControllerFactory] | None = None,
    ) -> None:
        self._partials = MappingProxyType(dict(partials or {}))
        self._controllers = MappingProxyType(dict(controllers or {}))

    @property
    def partials(self) -> Mapping[str, str]:
        return self._partials

    @property
    def controllers(self) -> Mapping[str, ControllerFactory]:
        return self._controllers

    def has_partial(self, name: str) -> bool:
        return name in self._partials

    def names(self) -> list[str]:
        """All module names with a partial, a controller, or both."""
        return sorted(set(self._partials) | set(self._controllers))

    def __contains__(self, name: object) -> bool:
        return name in self._partials or name in self._controllers

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __repr__(self) -> str:
        return (
            f"ModuleRegistry(partials={sorted(self._partials)!r}, "
            f"controllers={sorted(self._controllers)!r})"
        )


def pascal_case(name: str) -> str:
    """``"blog-list"`` -> ``"BlogList"``, ``"article"`` -> ``"Article"``."""
    return "".join(word[:1].upper() + word[1:] for word in _WORD_RE.split(name) if word)


def controller_attribute(name: str) -> str:
    """The attribute a controller file must export for module *name*."""
    return f"{pascal_case(name)}Module"


def load_modules(
    modules_root: str | Path,
    *,
    partials: Mapping[str, str] | None = None,
    controllers: Mapping[str, ControllerFactory] | None = None,
) -> ModuleRegistry:
    """Scan a modules directory and build the registry.

    Args:
        modules_root: Path to the modules directory. A missing
            directory yields only the explicit entries.
        partials: Explicit partials; they replace discovered ones.
        controllers: Explicit controllers; they replace discovered ones.

    Raises:
        ModuleLoadError: If a controller file fails to import.
    """
    found_partials: dict[str, str] = {}
    found_controllers: dict[str, ControllerFactory] = {}

    root = Path(modules_root)
    if root.is_dir():
        _walk_directory(root, found_partials, found_controllers)
    else:
        logger.debug("No modules directory at %s", root)

    found_partials.update(partials or {})
    found_controllers.update(controllers or {})

    registry = ModuleRegistry(found_partials, found_controllers)
    logger.debug(
        "Registered %d partials and %d controllers",
        len(found_partials),
        len(found_controllers),
    )
    return registry


def _walk_directory(
    directory: Path,
    partials: dict[str, str],
    controllers: dict[str, ControllerFactory],
) -> None:
    for item in sorted(directory.iterdir()):
        if item.name.startswith(".") or item.name in _SKIPPED_DIRS:
            continue

        if item.is_dir():
            _walk_directory(item, partials, controllers)
            continue

        suffix = item.suffix.lower()
        if suffix in PARTIAL_SUFFIXES:
            if item.stem in partials:
                logger.warning("Partial %r redefined by %s", item.stem, item)
            partials[item.stem] = item.read_text(encoding="utf-8")
        elif suffix in CONTROLLER_SUFFIXES and not item.name.startswith("_"):
            factory = _load_controller(item)
            if factory is not None:
                if item.stem in controllers:
                    logger.warning("Controller %r redefined by %s", item.stem, item)
                controllers[item.stem] = factory


def _load_controller(file: Path) -> ControllerFactory | None:
    """Import a controller file and return its ``<Name>Module`` export."""
    module_name = f"_lectern_module_{file.stem}_{id(file)}"
    spec = importlib.util.spec_from_file_location(module_name, file)
    if spec is None or spec.loader is None:
        raise ModuleLoadError(f"Cannot load controller file {file}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        sys.modules.pop(module_name, None)
        msg = f"Failed to import controller file {file}: {type(exc).__name__}: {exc}"
        raise ModuleLoadError(msg) from exc

    attribute = controller_attribute(file.stem)
    factory = getattr(module, attribute, None)
    if factory is None or not callable(factory):
        logger.debug("%s does not export %s; no controller registered", file, attribute)
        return None
    return factory
