"""Tests for lectern.templating: partial rendering, includes, and the fallback."""

from pathlib import Path
from typing import Any

import pytest

from lectern.config import SiteConfig
from lectern.context import RenderContext
from lectern.errors import ControllerError, TemplateRecursionError
from lectern.modules.controller import Controller
from lectern.site import Site


@pytest.fixture
def site(tmp_path: Path) -> Site:
    return Site(SiteConfig(root_dir=tmp_path, max_include_depth=4))


class TestRender:
    def test_plain_partial(self, site: Site) -> None:
        site.partial("hello", "<p>Hello {{ name }}</p>")
        assert site.render("hello", {"name": "World"}) == "<p>Hello World</p>"

    def test_controller_result_used(self, site: Site) -> None:
        site.partial("x", "{{ x }}")

        @site.controller("x")
        class XModule(Controller):
            def transform(self) -> dict[str, Any]:
                return {"x": 1}

        assert site.render("x", {"x": 0}) == "1"

    def test_missing_module_fallback(self, site: Site) -> None:
        html = site.render("nope", {"x": 1})
        assert 'Module "nope" cannot be found!' in html

    def test_missing_module_skips_controller(self, site: Site) -> None:
        calls: list[str] = []

        @site.controller("ghost")
        class GhostModule(Controller):
            def transform(self) -> dict[str, Any]:
                calls.append("ran")
                return self.data

        html = site.render("ghost")
        assert "ghost" in html
        assert calls == []

    def test_custom_fallback_partial(self, tmp_path: Path) -> None:
        site = Site(SiteConfig(root_dir=tmp_path, missing_module_partial="[{{ missing_module }}?]"))
        assert site.render("teaser") == "[teaser?]"

    def test_input_not_mutated(self, site: Site) -> None:
        site.partial("p", "{{ value }}")

        @site.controller("p")
        class PModule(Controller):
            def transform(self) -> dict[str, Any]:
                self.data["value"] = "changed"
                return self.data

        data = {"value": "original"}
        assert site.render("p", data) == "changed"
        assert data == {"value": "original"}

    def test_no_autoescape_by_default(self, site: Site) -> None:
        site.partial("raw", "{{ html }}")
        assert site.render("raw", {"html": "<b>bold</b>"}) == "<b>bold</b>"

    def test_autoescape_enabled(self, tmp_path: Path) -> None:
        site = Site(SiteConfig(root_dir=tmp_path, autoescape=True))
        site.partial("raw", "{{ html }}")
        assert site.render("raw", {"html": "<b>"}) == "&lt;b&gt;"


class TestGlobalContent:
    def _capture(self, site: Site, name: str, seen: list[dict[str, Any]]) -> None:
        @site.controller(name)
        class Capture(Controller):
            def transform(self) -> dict[str, Any]:
                seen.append(self.data["global"])
                self.data["global"]["site_name"] = "mutated"
                return self.data

    def test_shared_content_in_every_nested_render(self, tmp_path: Path) -> None:
        (tmp_path / "content" / "_global").mkdir(parents=True)
        (tmp_path / "content" / "_global" / "site.yaml").write_text("site_name: Lectern\n")
        site = Site(SiteConfig(root_dir=tmp_path))
        site.partial("outer", "{{ include('inner', body) }}")
        site.partial("inner", "{{ title }}")
        seen: list[dict[str, Any]] = []
        self._capture(site, "inner", seen)

        assert site.render("outer", {"body": {"title": "Hi"}}) == "Hi"
        assert site.render("outer", {"body": {"title": "Again"}}) == "Again"
        # Each render got a fresh copy; the mutation above never leaked.
        assert seen == [{"site_name": "mutated"}, {"site_name": "mutated"}]
        assert site.state.shared == {"site_name": "Lectern"}

    def test_global_restored_when_controller_drops_it(self, site: Site) -> None:
        site.partial("p", "{{ has_global }}")
        site.partial("q", "{{ include('p') }}")

        @site.controller("q")
        class QModule(Controller):
            def transform(self) -> dict[str, Any]:
                return {}

        @site.controller("p")
        class PModule(Controller):
            def transform(self) -> dict[str, Any]:
                return {"has_global": "global" in self.data}

        assert site.render("q") == "True"


class TestIncludes:
    def test_nested_include(self, site: Site) -> None:
        site.partial("page", "<main>{{ include('card', card) }}</main>")
        site.partial("card", "<div>{{ label }}</div>")
        html = site.render("page", {"card": {"label": "A"}})
        assert html == "<main><div>A</div></main>"

    def test_module_alias(self, site: Site) -> None:
        site.partial("page", "{{ module('card', card) }}")
        site.partial("card", "{{ label }}")
        assert site.render("page", {"card": {"label": "B"}}) == "B"

    def test_include_missing_module(self, site: Site) -> None:
        site.partial("page", "{{ include('absent') }}")
        assert 'Module "absent" cannot be found!' in site.render("page")

    def test_include_not_escaped(self, tmp_path: Path) -> None:
        site = Site(SiteConfig(root_dir=tmp_path, autoescape=True))
        site.partial("page", "{{ include('card') }}")
        site.partial("card", "<div>card</div>")
        assert site.render("page") == "<div>card</div>"

    def test_nested_controllers_share_response(self, site: Site) -> None:
        site.partial("page", "{{ include('card') }}")
        site.partial("card", "card")

        @site.controller("card")
        class CardModule(Controller):
            def transform(self) -> dict[str, Any]:
                self.response.status = 418
                return self.data

        context = RenderContext()
        site.render("page", context=context)
        assert context.response.status == 418

    def test_recursion_limit(self, site: Site) -> None:
        site.partial("loop", "{{ include('loop') }}")
        with pytest.raises(TemplateRecursionError) as exc_info:
            site.render("loop")
        assert exc_info.value.module == "loop"
        assert exc_info.value.depth == 5

    def test_nested_controller_error_surfaces(self, site: Site) -> None:
        site.partial("page", "{{ include('card') }}")
        site.partial("card", "card")

        @site.controller("card")
        class CardModule(Controller):
            def transform(self) -> dict[str, Any]:
                raise ValueError("no card")

        with pytest.raises(ControllerError, match="no card"):
            site.render("page")


class TestFiltersAndGlobals:
    def test_markdown_filter(self, site: Site) -> None:
        site.partial("md", "{{ text | markdown }}")
        assert "<strong>bold</strong>" in site.render("md", {"text": "**bold**"})

    def test_user_filter(self, site: Site) -> None:
        @site.template_filter()
        def shout(value: str) -> str:
            return value.upper() + "!"

        site.partial("p", "{{ word | shout }}")
        assert site.render("p", {"word": "hey"}) == "HEY!"

    def test_user_global(self, site: Site) -> None:
        @site.template_global("year")
        def current_year() -> int:
            return 2024

        site.partial("p", "{{ year() }}")
        assert site.render("p") == "2024"

    def test_site_routes_global(self, tmp_path: Path) -> None:
        content = tmp_path / "content"
        content.mkdir()
        (content / "index.yaml").write_text("settings:\n  title: Home\n  index: 0\n")
        (content / "about.yaml").write_text("settings:\n  title: About\n")
        site = Site(SiteConfig(root_dir=tmp_path))
        site.partial("paths", "{% for path in site_routes() %}[{{ path }}]{% end %}")
        assert site.render("paths") == "[/][/about]"

    def test_navigation_from_site_routes(self, tmp_path: Path) -> None:
        content = tmp_path / "content"
        content.mkdir()
        (content / "index.yaml").write_text("settings:\n  title: Home\n  index: 0\n")
        (content / "about.yaml").write_text("settings:\n  title: About\n  index: 1\n")
        site = Site(SiteConfig(root_dir=tmp_path))
        site.partial(
            "navigation",
            '{% for item in navigation %}{{ item["title"] }}={{ item["href"] }};{% end %}',
        )
        routes = site.state.renderer.site_routes()
        assert site.render("navigation", {"routes": routes}) == "Home=/;About=/about;"
