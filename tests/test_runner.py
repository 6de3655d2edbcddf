"""Tests for lectern.server.runner and Site.run wiring."""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pounce.server
import pytest

from lectern.server import runner
from lectern.site import Site


class FakeServer:
    """Stands in for pounce.Server; records what it was given."""

    created: list["FakeServer"] = []

    def __init__(self, config: Any, app: Any, *, app_path: str | None = None) -> None:
        self.config = config
        self.app = app
        self.app_path = app_path
        self.ran = False
        FakeServer.created.append(self)

    def run(self) -> None:
        self.ran = True


@pytest.fixture
def fake_server(monkeypatch: pytest.MonkeyPatch) -> type[FakeServer]:
    FakeServer.created = []
    monkeypatch.setattr(pounce.server, "Server", FakeServer)
    return FakeServer


class TestRunServer:
    def test_reload_forces_single_worker(self, fake_server: type[FakeServer]) -> None:
        app = object()
        runner.run_server(app, "127.0.0.1", 8123, reload=True, workers=4, app_path="site:site")
        [server] = fake_server.created
        assert server.ran
        assert server.app is app
        assert server.app_path == "site:site"
        assert server.config.port == 8123
        assert server.config.workers == 1

    def test_workers_without_reload(self, fake_server: type[FakeServer]) -> None:
        runner.run_server(object(), "0.0.0.0", 8000, workers=3)
        assert fake_server.created[0].config.workers == 3


class TestSiteRun:
    def test_passes_config(
        self,
        make_site: Callable[..., Site],
        blog_files: dict[str, str],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        calls: list[dict[str, Any]] = []

        def fake_run_server(app: Any, host: str, port: int, **kwargs: Any) -> None:
            calls.append({"app": app, "host": host, "port": port, **kwargs})

        monkeypatch.setattr(runner, "run_server", fake_run_server)
        site = make_site(blog_files, debug=True, port=9100)
        site.run()

        [call] = calls
        assert call["app"] is site
        assert (call["host"], call["port"]) == ("127.0.0.1", 9100)
        assert call["reload"] is True
        assert [Path(d).name for d in call["reload_dirs"]] == ["content", "modules"]
        assert site.frozen
