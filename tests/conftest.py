"""Pytest configuration and shared fixtures for webstage tests."""

from pathlib import Path

import pytest

from webstage import output


@pytest.fixture(autouse=True)
def _reset_output():
    """Give every test a fresh output clock writing to the current sys.stdout."""
    output.init_timer()
    output.set_verbose(True)
    output.set_output_file(None)
    yield
    output.set_output_file(None)
    output.set_verbose(True)


@pytest.fixture(autouse=True)
def _no_target_override(monkeypatch):
    """Keep a developer's WEBSTAGE_TARGET_DIR from leaking into layout tests."""
    monkeypatch.delenv("WEBSTAGE_TARGET_DIR", raising=False)


@pytest.fixture
def web_project(tmp_path) -> Path:
    """Create a project with node_modules and a mixed assets source directory."""
    project = tmp_path / "project"

    node_modules = project / "node_modules" / "lodash"
    node_modules.mkdir(parents=True)
    (node_modules / "lodash.js").write_text("module.exports = {};")

    src = project / "src"
    (src / "app").mkdir(parents=True)
    (src / "app.js").write_text("console.log('app');")
    (src / "style.css").write_text("body { margin: 0; }")
    (src / "notes.txt").write_text("not an asset")
    (src / "main.ts").write_text("const x: number = 1;")
    (src / "sub").mkdir()
    (src / "sub" / "page.html").write_text("<html></html>")
    (src / "app" / "Server.scala").write_text("object Server")

    return project
