"""Project layout configuration.

Resolves every directory the staging step touches. Defaults follow the usual
layout of a project built alongside npm:

    <project>/
        node_modules/             real npm dependencies
        src/                      assets source directory
            app/                  application sources
        target/web/               web base directory
            assets/               managed assets (direct assets + compiler output)
            lib/                  exposed node modules (virtual directory)

Any of these can be overridden from a ``[webstage]`` section in
``<project>/webstage.ini``:

    [webstage]
    target_dir = build
    assets_source_dirs =
        src
        vendor/assets
    direct_asset_extensions = js html css map

The ``WEBSTAGE_TARGET_DIR`` environment variable overrides ``target_dir``.
"""

import configparser
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from webstage.assets.criteria import DIRECT_ASSET_EXTENSIONS

CONFIG_FILE_NAME = "webstage.ini"
CONFIG_SECTION = "webstage"
TARGET_DIR_ENV = "WEBSTAGE_TARGET_DIR"

KNOWN_KEYS = frozenset(
    {
        "source_dir",
        "app_dir",
        "assets_source_dirs",
        "target_dir",
        "web_base_dir",
        "managed_assets_dir",
        "node_modules_dir",
        "exposed_node_modules_dir",
        "direct_asset_extensions",
    }
)


class StageConfigError(ValueError):
    """Raised when webstage.ini holds an invalid setting."""

    pass


@dataclass(frozen=True)
class StageLayout:
    """Resolved directories and criteria for one project.

    Attributes:
        project_dir: Project root
        source_dir: Base source directory
        app_dir: Directory holding the application sources
        assets_source_dirs: Directories scanned for direct assets, in order
        target_dir: Build output root
        web_base_dir: Root of everything served to the browser
        managed_assets_dir: Receives the direct assets (and compiler output)
        node_modules_dir: The project's real npm dependency directory
        exposed_node_modules_dir: Virtual directory mirroring node_modules
        direct_asset_extensions: Extensions copied verbatim
    """

    project_dir: Path
    source_dir: Path
    app_dir: Path
    assets_source_dirs: tuple[Path, ...]
    target_dir: Path
    web_base_dir: Path
    managed_assets_dir: Path
    node_modules_dir: Path
    exposed_node_modules_dir: Path
    direct_asset_extensions: tuple[str, ...] = DIRECT_ASSET_EXTENSIONS

    @classmethod
    def from_project(cls, project_dir: Path, config_file: Optional[Path] = None) -> "StageLayout":
        """Build the layout for ``project_dir``.

        Args:
            project_dir: Project root
            config_file: Settings file (defaults to <project_dir>/webstage.ini,
                which is optional)

        Returns:
            Fully resolved layout

        Raises:
            FileNotFoundError: If an explicit config_file does not exist
            StageConfigError: If the settings file is invalid
        """
        project_dir = project_dir.resolve()
        if config_file is None:
            config_file = project_dir / CONFIG_FILE_NAME
            settings = load_settings(config_file) if config_file.is_file() else {}
        else:
            if not config_file.is_file():
                raise FileNotFoundError(f"{CONFIG_FILE_NAME} not found: {config_file}")
            settings = load_settings(config_file)

        env_target = os.environ.get(TARGET_DIR_ENV)
        if env_target:
            settings["target_dir"] = env_target

        def resolve(key: str, default: Path) -> Path:
            value = settings.get(key)
            if value is None:
                return default
            # Overrides may name links this tool creates; never follow them
            return Path(os.path.abspath(project_dir / value))

        # Each default depends on the (possibly overridden) directory above it
        source_dir = resolve("source_dir", project_dir / "src")
        app_dir = resolve("app_dir", source_dir / "app")
        target_dir = resolve("target_dir", project_dir / "target")
        web_base_dir = resolve("web_base_dir", target_dir / "web")
        managed_assets_dir = resolve("managed_assets_dir", web_base_dir / "assets")
        node_modules_dir = resolve("node_modules_dir", project_dir / "node_modules")
        exposed_node_modules_dir = resolve("exposed_node_modules_dir", web_base_dir / "lib")

        if "assets_source_dirs" in settings:
            names = settings["assets_source_dirs"].split()
            if not names:
                raise StageConfigError("assets_source_dirs must name at least one directory")
            assets_source_dirs = tuple(Path(os.path.abspath(project_dir / name)) for name in names)
        else:
            assets_source_dirs = (source_dir,)

        if "direct_asset_extensions" in settings:
            extensions = tuple(ext.lstrip(".") for ext in settings["direct_asset_extensions"].split())
            if not extensions:
                raise StageConfigError("direct_asset_extensions must list at least one extension")
        else:
            extensions = DIRECT_ASSET_EXTENSIONS

        return cls(
            project_dir=project_dir,
            source_dir=source_dir,
            app_dir=app_dir,
            assets_source_dirs=assets_source_dirs,
            target_dir=target_dir,
            web_base_dir=web_base_dir,
            managed_assets_dir=managed_assets_dir,
            node_modules_dir=node_modules_dir,
            exposed_node_modules_dir=exposed_node_modules_dir,
            direct_asset_extensions=extensions,
        )


def load_settings(config_file: Path) -> dict[str, str]:
    """Read the ``[webstage]`` section of a settings file.

    A file without the section yields no settings.

    Args:
        config_file: Path to webstage.ini

    Returns:
        Raw setting values keyed by name

    Raises:
        StageConfigError: If the file cannot be parsed or has unknown keys
    """
    parser = configparser.ConfigParser(interpolation=None)
    try:
        parser.read(config_file, encoding="utf-8")
    except configparser.Error as e:
        raise StageConfigError(f"Failed to parse {config_file}: {e}") from e

    if not parser.has_section(CONFIG_SECTION):
        return {}

    settings = dict(parser.items(CONFIG_SECTION))
    unknown = sorted(set(settings) - KNOWN_KEYS)
    if unknown:
        raise StageConfigError(f"Unknown setting(s) in {config_file}: {', '.join(unknown)}")
    return settings
