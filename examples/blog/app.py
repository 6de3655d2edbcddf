"""Blog: a small lectern site served from the files next to this script.

Demonstrates:
- YAML and delimited-text content (``colophon.txt``) mapped to routes by file path
- A root ``core`` layout whose controller reads the shared ``_global`` content
- A discovered controller (modules/blog-list/blog-list.py)
- The built-in ``article`` and ``navigation`` controllers
- The missing-module placeholder (``/newsletter`` names an absent module)

Run:
    lectern run examples/blog --debug
"""

from pathlib import Path

from lectern import Controller, Site, SiteConfig

site = Site(SiteConfig(root_dir=Path(__file__).parent))


@site.controller("core")
class CoreModule(Controller):
    """Page title, footer and navigation for the layout."""

    def transform(self):
        settings = self.data.get("settings") or {}
        shared = self.data["global"]
        site_name = shared.get("site_name", "")

        title = settings.get("title")
        self.data["page_title"] = f"{title} | {site_name}" if title else site_name
        self.data["footer"] = shared.get("tagline", "")
        self.data["nav"] = {"routes": site.state.renderer.site_routes()}
        return self.data


@site.template_filter()
def reading_time(text: str) -> str:
    minutes = max(1, len(str(text).split()) // 200)
    return f"{minutes} min read"


if __name__ == "__main__":
    site.run()
