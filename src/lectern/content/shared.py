"""Shared content merger.

Every YAML file in the reserved folder is concatenated (lexical order)
and parsed as one document, so later files can extend the mapping
started by earlier ones. The result is exposed to every render.
"""

import logging
from pathlib import Path
from typing import Any

from lectern.content.loader import YAML_SUFFIXES, parse_yaml

logger = logging.getLogger("lectern.content")


def load_shared_content(folder: str | Path) -> dict[str, Any]:
    """Merge the shared-content folder into one mapping.

    A missing folder yields ``{}``.

    Raises:
        ContentError: If the combined YAML is malformed or not a mapping.
    """
    folder = Path(folder)
    if not folder.is_dir():
        logger.debug("No shared content folder at %s", folder)
        return {}

    files = [
        item
        for item in sorted(folder.iterdir())
        if item.is_file()
        and not item.name.startswith(".")
        and item.suffix.lower() in YAML_SUFFIXES
    ]

    combined = "".join(f.read_text(encoding="utf-8") + "\n" for f in files)
    shared = parse_yaml(combined, folder)
    logger.debug("Merged %d shared content files from %s", len(files), folder)
    return shared
