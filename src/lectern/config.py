"""Site configuration.

SiteConfig is a frozen dataclass: immutable after creation, IDE-autocompletable,
no string-key dict lookups. The folder layout is fixed by convention and
resolved against ``root_dir``.
"""

from dataclasses import dataclass
from pathlib import Path

MISSING_MODULE_PARTIAL = (
    '<br><span style="color: red;">Module "{{ missing_module }}" cannot be found!</span>'
)


@dataclass(frozen=True, slots=True)
class SiteConfig:
    """Site configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = SiteConfig(root_dir="mysite", debug=True, port=3000)
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    workers: int = 1

    # Reload (development mode, requires debug=True)
    reload_include: tuple[str, ...] = (".yaml", ".yml", ".txt", ".html")

    # Layout (relative entries resolve against root_dir)
    root_dir: str | Path = "."
    content_dir: str | Path = "content"
    modules_dir: str | Path = "modules"
    global_dir_name: str = "_global"
    compiled_dir: str | Path = "_compiled"
    vendor_dir: str | Path = "assets/vendor"
    media_dir: str | Path = "assets/media"
    styles_dir: str | Path = "assets/styles"
    scripts_dir: str | Path = "assets/scripts"

    # Rendering
    root_module: str = "core"
    global_key: str = "global"
    missing_module_partial: str = MISSING_MODULE_PARTIAL
    autoescape: bool = False
    max_include_depth: int = 32
    builtin_modules: bool = True

    # Static files (compiled assets)
    static_url: str = "/"
    cache_control: str = "public, max-age=3600"

    # Asset pre-flight
    build_assets: bool = False
    sass_bin: str = "sass"
    esbuild_bin: str = "esbuild"

    # Routing
    strict_routes: bool = False

    def path(self, name: str) -> Path:
        """Resolve a layout field (e.g. ``"content_dir"``) against ``root_dir``."""
        value = Path(getattr(self, name))
        if value.is_absolute():
            return value
        return Path(self.root_dir) / value

    @property
    def global_dir(self) -> Path:
        """The reserved shared-content folder inside the content root."""
        return self.path("content_dir") / self.global_dir_name
