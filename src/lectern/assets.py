"""Asset pre-flight: copy static trees and compile styles and scripts.

Runs before the site loads (``SiteConfig(build_assets=True)``) or on its
own via ``lectern build``. Compilation is delegated to the ``sass`` and
``esbuild`` executables; a missing tool or a failing command raises
``AssetError`` and startup stops.

Output layout under ``compiled_dir``::

    vendor/...        copied from assets/vendor
    media/...         copied from assets/media
    css/main.css      compiled from assets/styles/main.scss
    scripts/main.js   bundled from assets/scripts/main.ts
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

from lectern.config import SiteConfig
from lectern.errors import AssetError

logger = logging.getLogger("lectern.assets")

STYLES_ENTRY = "main.scss"
SCRIPTS_ENTRY = "main.ts"


@dataclass(slots=True)
class AssetReport:
    """What a build produced."""

    copied: list[Path] = field(default_factory=list)
    compiled: list[Path] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


class AssetPipeline:
    """Build the compiled-assets directory for a site."""

    def __init__(self, config: SiteConfig) -> None:
        self._config = config

    @property
    def output_dir(self) -> Path:
        return self._config.path("compiled_dir")

    def build(self) -> AssetReport:
        """Run every step in order: vendor, media, styles, scripts."""
        report = AssetReport()
        self.output_dir.mkdir(parents=True, exist_ok=True)

        self._copy_tree("vendor", self._config.path("vendor_dir"), report)
        self._copy_tree("media", self._config.path("media_dir"), report)
        self._compile_styles(report)
        self._compile_scripts(report)

        logger.info(
            "Assets built in %s (%d copied, %d compiled)",
            self.output_dir,
            len(report.copied),
            len(report.compiled),
        )
        return report

    def _copy_tree(self, step: str, source: Path, report: AssetReport) -> None:
        if not source.is_dir():
            logger.debug("No %s directory at %s", step, source)
            report.skipped.append(step)
            return

        destination = self.output_dir / step
        try:
            shutil.copytree(source, destination, dirs_exist_ok=True)
        except (OSError, shutil.Error) as exc:
            raise AssetError(step, f"copying {source} failed: {exc}") from exc
        report.copied.append(destination)

    def _compile_styles(self, report: AssetReport) -> None:
        entry = self._config.path("styles_dir") / STYLES_ENTRY
        if not entry.is_file():
            report.skipped.append("styles")
            return

        output = self.output_dir / "css" / "main.css"
        output.parent.mkdir(parents=True, exist_ok=True)
        command = [
            self._resolve_tool("styles", self._config.sass_bin),
            "--style=compressed",
            "--no-source-map",
            str(entry),
            str(output),
        ]
        self._run_command("styles", command)
        report.compiled.append(output)

    def _compile_scripts(self, report: AssetReport) -> None:
        entry = self._config.path("scripts_dir") / SCRIPTS_ENTRY
        if not entry.is_file():
            report.skipped.append("scripts")
            return

        output = self.output_dir / "scripts" / "main.js"
        output.parent.mkdir(parents=True, exist_ok=True)
        command = [
            self._resolve_tool("scripts", self._config.esbuild_bin),
            str(entry),
            "--bundle",
            "--minify",
            "--sourcemap=inline",
            f"--outfile={output}",
        ]
        self._run_command("scripts", command)
        report.compiled.append(output)

    def _resolve_tool(self, step: str, binary: str) -> str:
        candidate = shutil.which(binary)
        if not candidate:
            raise AssetError(step, f"{binary!r} is not available on PATH")
        return candidate

    def _run_command(self, step: str, command: list[str]) -> None:
        logger.debug("Running %s", " ".join(command))
        try:
            subprocess.run(command, check=True, capture_output=True, text=True)
        except subprocess.CalledProcessError as exc:
            output = (exc.stderr or exc.stdout or "").strip()
            detail = f"{Path(command[0]).name} exited with status {exc.returncode}"
            if output:
                detail = f"{detail}: {output}"
            raise AssetError(step, detail) from exc
        except OSError as exc:
            raise AssetError(step, f"cannot run {command[0]}: {exc}") from exc
