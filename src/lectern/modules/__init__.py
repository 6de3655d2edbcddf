"""Module partials, controllers, and dispatch."""

from lectern.modules.builtin import BUILTIN_CONTROLLERS, ArticleModule, NavigationModule
from lectern.modules.controller import Controller, dispatch
from lectern.modules.registry import (
    ModuleRegistry,
    controller_attribute,
    load_modules,
    pascal_case,
)

__all__ = [
    "BUILTIN_CONTROLLERS",
    "ArticleModule",
    "Controller",
    "ModuleRegistry",
    "NavigationModule",
    "controller_attribute",
    "dispatch",
    "load_modules",
    "pascal_case",
]
