"""Content file parsing.

Two formats are understood:

- YAML (``.yaml``/``.yml``): one mapping per file, loaded with
  ``yaml.safe_load``.
- Delimited text (``.txt``): fields separated by lines of ``---`` or
  ``----``, each written as ``key: value`` or ``key|pipe: value``::

      settings.template: article
      ----
      title: Hello
      ----
      text|markdown: Some *emphasis* here.

  Dotted keys nest, so the file above declares ``settings.template``
  the same way a YAML ``settings:`` block does.

Any parse failure is a ``ContentError``; callers let it abort startup.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from lectern.content.pipes import DEFAULT_PIPES, Pipe
from lectern.errors import ContentError

logger = logging.getLogger("lectern.content")

type ContentEntry = dict[str, Any]

YAML_SUFFIXES = frozenset({".yaml", ".yml"})
TEXT_SUFFIXES = frozenset({".txt"})
CONTENT_SUFFIXES = YAML_SUFFIXES | TEXT_SUFFIXES

# A separator line is exactly three or four dashes.
_FIELD_SEPARATOR_RE = re.compile(r"^-{3,4}[ \t]*$", re.MULTILINE)


def is_content_file(path: Path) -> bool:
    """True for regular, non-hidden files with a known content suffix."""
    return (
        path.is_file()
        and not path.name.startswith(".")
        and path.suffix.lower() in CONTENT_SUFFIXES
    )


def load_entry(path: str | Path, *, pipes: Mapping[str, Pipe] | None = None) -> ContentEntry:
    """Read and parse one content file.

    Args:
        path: The content file.
        pipes: Pipe table for ``.txt`` fields (defaults to the built-in pipes).

    Raises:
        ContentError: If the file is missing, unreadable, or malformed.
    """
    path = Path(path)
    try:
        source = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ContentError(path, f"cannot read content file ({exc.strerror or exc})") from exc

    suffix = path.suffix.lower()
    if suffix in YAML_SUFFIXES:
        return parse_yaml(source, path)
    if suffix in TEXT_SUFFIXES:
        return parse_text(source, path, pipes=pipes)
    raise ContentError(path, f"unsupported content format {suffix!r}")


def parse_yaml(source: str, path: str | Path) -> ContentEntry:
    """Parse YAML source into a content entry.

    An empty document yields ``{}``; any other non-mapping is rejected.
    """
    try:
        data = yaml.safe_load(source)
    except yaml.YAMLError as exc:
        raise ContentError(path, f"invalid YAML: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ContentError(path, f"expected a mapping at top level, got {type(data).__name__}")
    return data


def parse_text(
    source: str,
    path: str | Path,
    *,
    pipes: Mapping[str, Pipe] | None = None,
) -> ContentEntry:
    """Parse delimited-text source into a content entry.

    Fields with an empty key or an empty value are skipped. A field
    without a ``:`` is skipped too. Dotted keys build nested mappings.

    Raises:
        ContentError: On an unknown pipe or a dotted key that collides
            with a plain field.
    """
    pipe_table = DEFAULT_PIPES if pipes is None else pipes
    entry: ContentEntry = {}

    for chunk in _FIELD_SEPARATOR_RE.split(source):
        raw_key, sep, raw_value = chunk.partition(":")
        if not sep:
            if chunk.strip():
                logger.debug("%s: skipping field without ':' separator", path)
            continue

        key, _, pipe_name = raw_key.strip().partition("|")
        key = key.strip()
        pipe_name = pipe_name.strip()
        value = raw_value.strip()
        if not key or not value:
            continue

        if pipe_name:
            pipe = pipe_table.get(pipe_name)
            if pipe is None:
                raise ContentError(path, f"unknown pipe {pipe_name!r} on field {key!r}")
            _assign(entry, key, pipe(value), path)
        else:
            _assign(entry, key, value, path)

    return entry


def _assign(entry: ContentEntry, key: str, value: Any, path: str | Path) -> None:
    """Store *value* under a dotted *key*: ``settings.template`` nests."""
    *parents, leaf = (part.strip() for part in key.split("."))
    if not leaf or not all(parents):
        raise ContentError(path, f"malformed field name {key!r}")

    target = entry
    for depth, part in enumerate(parents, start=1):
        child = target.setdefault(part, {})
        if not isinstance(child, dict):
            prefix = ".".join(parents[:depth])
            raise ContentError(path, f"field {key!r} conflicts with field {prefix!r}")
        target = child

    if isinstance(target.get(leaf), dict):
        raise ContentError(path, f"field {key!r} conflicts with nested fields below it")
    target[leaf] = value
