"""Tests for project layout configuration."""

from pathlib import Path

import pytest

from webstage.config import CONFIG_FILE_NAME, StageConfigError, StageLayout, load_settings
from webstage.stage import expose_node_modules


def _write_ini(project: Path, body: str) -> Path:
    project.mkdir(parents=True, exist_ok=True)
    ini = project / CONFIG_FILE_NAME
    ini.write_text(body)
    return ini


class TestDefaults:
    def test_default_layout(self, tmp_path):
        layout = StageLayout.from_project(tmp_path)
        root = tmp_path.resolve()

        assert layout.project_dir == root
        assert layout.source_dir == root / "src"
        assert layout.app_dir == root / "src" / "app"
        assert layout.assets_source_dirs == (root / "src",)
        assert layout.target_dir == root / "target"
        assert layout.web_base_dir == root / "target" / "web"
        assert layout.managed_assets_dir == root / "target" / "web" / "assets"
        assert layout.node_modules_dir == root / "node_modules"
        assert layout.exposed_node_modules_dir == root / "target" / "web" / "lib"
        assert layout.direct_asset_extensions == ("js", "html", "css")

    def test_layout_is_frozen(self, tmp_path):
        layout = StageLayout.from_project(tmp_path)
        with pytest.raises(AttributeError):
            layout.target_dir = tmp_path  # type: ignore[misc]


class TestOverrides:
    def test_ini_overrides_cascade(self, tmp_path):
        _write_ini(tmp_path, "[webstage]\ntarget_dir = build\nsource_dir = web-src\n")

        layout = StageLayout.from_project(tmp_path)
        root = tmp_path.resolve()

        assert layout.target_dir == root / "build"
        assert layout.managed_assets_dir == root / "build" / "web" / "assets"
        assert layout.exposed_node_modules_dir == root / "build" / "web" / "lib"
        assert layout.assets_source_dirs == (root / "web-src",)
        assert layout.app_dir == root / "web-src" / "app"

    def test_multiple_assets_source_dirs(self, tmp_path):
        _write_ini(tmp_path, "[webstage]\nassets_source_dirs =\n    src\n    vendor/assets\n")

        layout = StageLayout.from_project(tmp_path)
        root = tmp_path.resolve()

        assert layout.assets_source_dirs == (root / "src", root / "vendor" / "assets")

    def test_extensions_override_strips_dots(self, tmp_path):
        _write_ini(tmp_path, "[webstage]\ndirect_asset_extensions = js .map svg\n")

        layout = StageLayout.from_project(tmp_path)

        assert layout.direct_asset_extensions == ("js", "map", "svg")

    def test_env_var_overrides_target_dir(self, tmp_path, monkeypatch):
        _write_ini(tmp_path, "[webstage]\ntarget_dir = build\n")
        monkeypatch.setenv("WEBSTAGE_TARGET_DIR", "out")

        layout = StageLayout.from_project(tmp_path)

        assert layout.target_dir == tmp_path.resolve() / "out"

    def test_absolute_paths_are_kept(self, tmp_path):
        elsewhere = tmp_path / "elsewhere"
        _write_ini(tmp_path / "proj", f"[webstage]\nnode_modules_dir = {elsewhere}\n")

        layout = StageLayout.from_project(tmp_path / "proj")

        assert layout.node_modules_dir == elsewhere

    def test_override_naming_an_existing_link_is_not_followed(self, tmp_path):
        (tmp_path / "node_modules").mkdir()
        web = tmp_path / "target" / "web"
        web.mkdir(parents=True)
        (web / "lib").symlink_to(tmp_path / "node_modules", target_is_directory=True)
        _write_ini(tmp_path, "[webstage]\nexposed_node_modules_dir = target/web/lib\n")

        layout = StageLayout.from_project(tmp_path)

        assert layout.exposed_node_modules_dir == tmp_path.resolve() / "target" / "web" / "lib"
        assert layout.exposed_node_modules_dir.is_symlink()

    def test_override_naming_a_dangling_link_never_links_node_modules_to_itself(self, tmp_path):
        node_modules = tmp_path / "node_modules"
        node_modules.mkdir()
        _write_ini(tmp_path, "[webstage]\nexposed_node_modules_dir = target/web/lib\n")
        expose_node_modules(StageLayout.from_project(tmp_path))
        node_modules.rmdir()

        layout = StageLayout.from_project(tmp_path)
        # The dangling link reads as absent, so creating it again collides
        with pytest.raises(FileExistsError):
            expose_node_modules(layout)

        assert not node_modules.is_symlink()
        assert not node_modules.exists()

    def test_explicit_config_file(self, tmp_path):
        ini = tmp_path / "custom.ini"
        ini.write_text("[webstage]\ntarget_dir = dist\n")

        layout = StageLayout.from_project(tmp_path, ini)

        assert layout.target_dir == tmp_path.resolve() / "dist"

    def test_missing_explicit_config_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            StageLayout.from_project(tmp_path, tmp_path / "nope.ini")

    def test_file_without_section_uses_defaults(self, tmp_path):
        _write_ini(tmp_path, "[other]\ntarget_dir = build\n")

        layout = StageLayout.from_project(tmp_path)

        assert layout.target_dir == tmp_path.resolve() / "target"


class TestErrors:
    def test_unknown_key(self, tmp_path):
        ini = _write_ini(tmp_path, "[webstage]\ntarget = build\n")
        with pytest.raises(StageConfigError, match="target"):
            load_settings(ini)

    def test_empty_assets_source_dirs(self, tmp_path):
        _write_ini(tmp_path, "[webstage]\nassets_source_dirs =\n")
        with pytest.raises(StageConfigError, match="assets_source_dirs"):
            StageLayout.from_project(tmp_path)

    def test_empty_extensions(self, tmp_path):
        _write_ini(tmp_path, "[webstage]\ndirect_asset_extensions =\n")
        with pytest.raises(StageConfigError, match="direct_asset_extensions"):
            StageLayout.from_project(tmp_path)

    def test_unparseable_file(self, tmp_path):
        ini = _write_ini(tmp_path, "target_dir = build\n")
        with pytest.raises(StageConfigError, match="Failed to parse"):
            load_settings(ini)

    def test_config_error_is_value_error(self):
        assert issubclass(StageConfigError, ValueError)
