"""Markdown rendering via patitas.

Backs the ``markdown`` content pipe, the ``markdown`` template filter,
and the built-in ``article`` controller.

Usage::

    from lectern.markdown import render_markdown

    html = render_markdown("# Hello")
"""

from __future__ import annotations

from functools import cache

from kida.template import Markup
from patitas import Markdown


class MarkdownRenderer:
    """Render Markdown source to HTML via patitas.

    Args:
        plugins: Patitas plugins to enable (default: all).
        highlight: Enable syntax highlighting for fenced code blocks.
    """

    __slots__ = ("_md",)

    def __init__(
        self,
        *,
        plugins: list[str] | None = None,
        highlight: bool = False,
    ) -> None:
        self._md = Markdown(plugins=plugins or ["all"], highlight=highlight)

    def render(self, source: str) -> str:
        """Render Markdown source to an HTML string."""
        if not source:
            return ""
        return self._md(source)


@cache
def _default_renderer() -> MarkdownRenderer:
    return MarkdownRenderer()


def render_markdown(source: object) -> str:
    """Render *source* with the shared default renderer.

    Non-string values are converted with ``str()``; ``None`` renders empty.
    """
    if source is None:
        return ""
    return _default_renderer().render(str(source))


def markdown_filter(source: object) -> Markup:
    """Kida filter: ``{{ text | markdown }}``."""
    return Markup(render_markdown(source))
