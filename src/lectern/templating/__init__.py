"""Kida template integration: environment setup and partial rendering."""

from lectern.templating.integration import MISSING_MODULE_TEMPLATE, create_environment
from lectern.templating.renderer import TemplateRenderer

__all__ = ["MISSING_MODULE_TEMPLATE", "TemplateRenderer", "create_environment"]
