"""Route table discovery for the content directory.

Walks the content tree and maps every content file to a URL path that
mirrors its location:

- ``index.yaml`` at the root maps to ``/``
- ``about.yaml`` maps to ``/about``
- ``blog/index.yaml`` maps to ``/blog``
- ``blog/post1.yaml`` maps to ``/blog/post1``

The reserved shared-content folder (``_global`` by default) is skipped at
every level. Entries are visited in lexical order, so when two files
normalize to the same path the lexically later one wins. Collisions are
recorded on the table and logged; ``strict=True`` rejects them instead.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType

from lectern.content.loader import ContentEntry, is_content_file, load_entry
from lectern.content.pipes import Pipe
from lectern.errors import ContentError, RouteCollisionError

logger = logging.getLogger("lectern.content")


@dataclass(frozen=True, slots=True)
class RouteCollision:
    """Two content files that normalize to the same URL path."""

    path: str
    replaced: Path
    winner: Path


class RouteTable(Mapping[str, ContentEntry]):
    """Immutable mapping from URL path to parsed content entry.

    Built once at startup. Handlers must not mutate stored entries;
    ``clone()`` returns a request-scoped deep copy.
    """

    __slots__ = ("_entries", "_sources", "collisions")

    def __init__(
        self,
        entries: Mapping[str, ContentEntry],
        sources: Mapping[str, Path],
        collisions: tuple[RouteCollision, ...] = (),
    ) -> None:
        self._entries = MappingProxyType(dict(entries))
        self._sources = MappingProxyType(dict(sources))
        self.collisions = collisions

    def __getitem__(self, path: str) -> ContentEntry:
        return self._entries[path]

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"RouteTable({sorted(self._entries)!r})"

    def source(self, path: str) -> Path:
        """The file a route was loaded from."""
        return self._sources[path]

    def clone(self, path: str) -> ContentEntry:
        """Deep copy of the entry at *path*, safe for one request to mutate."""
        return copy.deepcopy(self._entries[path])

    def template(self, path: str) -> str | None:
        """The ``settings.template`` declared by the entry, if any."""
        return declared_template(self._entries[path])


def declared_template(entry: Mapping[str, object]) -> str | None:
    """Return ``entry["settings"]["template"]`` when it is a non-empty string."""
    settings = entry.get("settings")
    if not isinstance(settings, Mapping):
        return None
    template = settings.get("template")
    if isinstance(template, str) and template:
        return template
    return None


def route_path(relative_file: str | Path) -> str:
    """Compute the URL path for a content file relative to the content root."""
    relative_file = Path(relative_file)
    parts = list(relative_file.parent.parts)
    if relative_file.stem != "index":
        parts.append(relative_file.stem)
    return "/" + "/".join(p for p in parts if p not in ("", "."))


def build_route_table(
    content_root: str | Path,
    *,
    reserved: str = "_global",
    pipes: Mapping[str, Pipe] | None = None,
    strict: bool = False,
) -> RouteTable:
    """Walk a content directory and build its route table.

    Args:
        content_root: Path to the content directory.
        reserved: Folder name owned by the shared-content merger.
        pipes: Pipe table used for delimited-text files.
        strict: Raise ``RouteCollisionError`` instead of last-wins.

    Raises:
        ContentError: If the root is missing or a content file is malformed.
    """
    root = Path(content_root)
    if not root.is_dir():
        raise ContentError(root, "content directory not found")

    entries: dict[str, ContentEntry] = {}
    sources: dict[str, Path] = {}
    collisions: list[RouteCollision] = []

    _walk_directory(
        root,
        root,
        reserved=reserved,
        pipes=pipes,
        strict=strict,
        entries=entries,
        sources=sources,
        collisions=collisions,
    )

    logger.debug("Discovered %d content routes under %s", len(entries), root)
    return RouteTable(entries, sources, tuple(collisions))


def _walk_directory(
    directory: Path,
    root: Path,
    *,
    reserved: str,
    pipes: Mapping[str, Pipe] | None,
    strict: bool,
    entries: dict[str, ContentEntry],
    sources: dict[str, Path],
    collisions: list[RouteCollision],
) -> None:
    """Recursively index one directory, files and folders interleaved."""
    for item in sorted(directory.iterdir()):
        if item.name == reserved or item.name.startswith("."):
            continue

        if item.is_dir():
            _walk_directory(
                item,
                root,
                reserved=reserved,
                pipes=pipes,
                strict=strict,
                entries=entries,
                sources=sources,
                collisions=collisions,
            )
            continue

        if not is_content_file(item):
            logger.debug("Skipping non-content file %s", item)
            continue

        path = route_path(item.relative_to(root))
        entry = load_entry(item, pipes=pipes)

        previous = sources.get(path)
        if previous is not None:
            if strict:
                raise RouteCollisionError(
                    item, f"route {path!r} is already provided by {previous}"
                )
            logger.warning(
                "Route %s: %s replaces %s",
                path,
                item.relative_to(root),
                previous.relative_to(root),
            )
            collisions.append(RouteCollision(path=path, replaced=previous, winner=item))

        entries[path] = entry
        sources[path] = item
