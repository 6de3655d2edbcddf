"""Controllers registered by default when ``builtin_modules`` is enabled.

Discovered or explicitly registered controllers with the same name
replace these.
"""

from collections.abc import Mapping
from typing import Any

from lectern.markdown import render_markdown
from lectern.modules.controller import Controller


class ArticleModule(Controller):
    """Render the ``text`` field from Markdown to HTML."""

    def transform(self) -> dict[str, Any]:
        text = self.data.get("text")
        if text:
            self.data["text"] = render_markdown(text)
        return self.data


class NavigationModule(Controller):
    """Build ``navigation`` from ``routes``.

    ``routes`` maps a URL path to a content entry (or anything with a
    ``settings`` mapping). Routes whose settings carry both ``title``
    and an integer ``index`` (a digit string counts, since text content
    yields strings) become ``{"title", "href"}`` items, ordered by index.
    """

    def transform(self) -> dict[str, Any]:
        routes = self.data.get("routes") or {}
        items: list[tuple[int, str, dict[str, str]]] = []
        for href, entry in routes.items():
            settings = entry.get("settings") if isinstance(entry, Mapping) else None
            if not isinstance(settings, Mapping):
                continue
            index = _nav_index(settings.get("index"))
            title = settings.get("title")
            if title is None or index is None:
                continue
            items.append((index, href, {"title": str(title), "href": href}))

        items.sort(key=lambda item: (item[0], item[1]))
        self.data["navigation"] = [item for _, _, item in items]
        return self.data


def _nav_index(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return None


BUILTIN_CONTROLLERS: dict[str, type[Controller]] = {
    "article": ArticleModule,
    "navigation": NavigationModule,
}
