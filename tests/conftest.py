"""Shared fixtures: build site trees under ``tmp_path``."""

from collections.abc import Callable
from pathlib import Path

import pytest

from lectern.config import SiteConfig
from lectern.site import Site

CORE_PARTIAL = (
    '<main data-module="core">'
    '{% if settings and settings["template"] %}{{ include(settings["template"], body) }}{% end %}'
    "</main>"
)
ARTICLE_PARTIAL = '<article>{{ title }}|{{ text }}</article>'


def write_tree(root: Path, files: dict[str, str]) -> Path:
    """Write ``{relative_path: text}`` below *root* and return *root*."""
    for relative, text in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return root


@pytest.fixture
def tree(tmp_path: Path) -> Callable[[dict[str, str]], Path]:
    """Write files below a fresh ``site`` directory."""
    root = tmp_path / "site"
    root.mkdir()

    def _write(files: dict[str, str]) -> Path:
        return write_tree(root, files)

    return _write


@pytest.fixture
def make_site(tree: Callable[[dict[str, str]], Path]) -> Callable[..., Site]:
    """Build a Site over a written tree; keyword args go to SiteConfig."""

    def _make(files: dict[str, str], **config: object) -> Site:
        root = tree(files)
        return Site(SiteConfig(root_dir=root, **config))  # type: ignore[arg-type]

    return _make


@pytest.fixture
def blog_files() -> dict[str, str]:
    """A small site: templated and untemplated routes plus shared content."""
    return {
        "content/index.yaml": (
            "settings:\n  template: article\n  title: Home\n  index: 0\n"
            "body:\n  title: Welcome\n  text: Hello there\n"
        ),
        "content/about.yaml": (
            "settings:\n  template: article\n  title: About\n  index: 1\n"
            "body:\n  title: About us\n  text: We write things\n"
        ),
        "content/raw.yaml": "body:\n  title: No template here\n",
        "content/blog/post1.yaml": (
            "settings:\n  template: article\n"
            "body:\n  title: First post\n  text: Post one\n"
        ),
        "content/_global/site.yaml": "site_name: Lectern Test\n",
        "content/_global/social.yaml": "twitter: '@lectern'\n",
        "modules/core.html": CORE_PARTIAL,
        "modules/article/article.html": ARTICLE_PARTIAL,
    }
