"""
Command-line interface for webstage.

This module provides the `webstage` CLI tool for staging web assets ahead of
a server build.
"""

import argparse
import logging
import sys
import traceback
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Sequence

from rich.console import Console
from rich.table import Table

from webstage import __version__
from webstage.assets.collector import CopyManifest
from webstage.config import StageConfigError, StageLayout
from webstage.output import init_timer, set_output_file, set_verbose
from webstage.stage import collect_assets, expose_node_modules, stage_web_assets


@dataclass
class StageArgs:
    """Arguments shared by every command."""

    project_dir: Path
    config_file: Optional[Path] = None
    log_file: Optional[Path] = None
    verbose: bool = False
    list_assets: bool = False


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _print_manifest(manifest: CopyManifest, layout: StageLayout) -> None:
    """Render the copied assets as a table."""
    console = Console()
    table = Table(title="Direct assets")
    table.add_column("Source", style="cyan")
    table.add_column("Destination", style="green")
    for entry in manifest:
        source = entry.source
        if source.is_relative_to(layout.project_dir):
            source = source.relative_to(layout.project_dir)
        table.add_row(str(source), str(entry.destination.relative_to(layout.managed_assets_dir)))
    console.print(table)


def _run(args: StageArgs, action: Callable[[StageLayout], None]) -> int:
    """Load the layout and run ``action``, mapping failures to exit codes."""
    log_file = None
    try:
        if args.log_file is not None:
            args.log_file.parent.mkdir(parents=True, exist_ok=True)
            log_file = open(args.log_file, "w", encoding="utf-8")
            set_output_file(log_file)

        layout = StageLayout.from_project(args.project_dir, args.config_file)
        action(layout)
        return 0

    except FileNotFoundError as e:
        print()
        print("\033[1;31m✗ Error: File not found\033[0m")
        print()
        print(str(e))
        return 1

    except PermissionError as e:
        print()
        print("\033[1;31m✗ Error: Permission denied\033[0m")
        print()
        print(str(e))
        print()
        print("On Windows, enable Developer Mode or run from an elevated prompt to allow symbolic links.")
        return 1

    except StageConfigError as e:
        print()
        print("\033[1;31m✗ Error: Invalid configuration\033[0m")
        print()
        print(str(e))
        return 1

    except KeyboardInterrupt:
        print()
        print("\033[1;33m✗ Staging interrupted\033[0m")
        return 130  # Standard exit code for SIGINT

    except Exception as e:
        print()
        print("\033[1;31m✗ Unexpected error\033[0m")
        print()
        print(f"{type(e).__name__}: {e}")

        if args.verbose:
            print()
            print("Traceback:")
            print(traceback.format_exc())

        return 1

    finally:
        if log_file is not None:
            set_output_file(None)
            log_file.close()


def stage_command(args: StageArgs) -> int:
    """Expose node modules and collect direct assets.

    Examples:
        webstage stage                 # Stage the current project
        webstage stage path/to/app     # Stage another project
        webstage stage --list          # Show every copied asset
    """

    def action(layout: StageLayout) -> None:
        result = stage_web_assets(layout, verbose=args.verbose)
        print()
        print(f"\033[1;32m✓ {result.message}\033[0m")
        print()
        if args.list_assets and len(result.manifest):
            _print_manifest(result.manifest, layout)
        print(f"Stage time: {result.stage_time:.2f}s")

    return _run(args, action)


def link_command(args: StageArgs) -> int:
    """Only mirror node_modules into the web base directory."""

    def action(layout: StageLayout) -> None:
        expose_node_modules(layout)

    return _run(args, action)


def collect_command(args: StageArgs) -> int:
    """Only copy direct assets into the managed assets directory."""

    def action(layout: StageLayout) -> None:
        manifest = collect_assets(layout)
        if args.list_assets and len(manifest):
            _print_manifest(manifest, layout)

    return _run(args, action)


COMMANDS: dict[str, Callable[[StageArgs], int]] = {
    "stage": stage_command,
    "link": link_command,
    "collect": collect_command,
}


def main(argv: Optional[Sequence[str]] = None) -> None:
    """webstage - stage web assets for a server build."""
    parser = argparse.ArgumentParser(
        prog="webstage",
        description="Stage node modules and direct web assets into the build output",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"webstage {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")
    helps = {
        "stage": "Expose node modules and collect direct assets",
        "link": "Expose node modules only",
        "collect": "Collect direct assets only",
    }
    for name, help_text in helps.items():
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument(
            "project_dir",
            nargs="?",
            type=Path,
            default=Path.cwd(),
            help="Project directory (default: current directory)",
        )
        sub.add_argument(
            "-c",
            "--config",
            type=Path,
            default=None,
            help="Settings file (default: <project_dir>/webstage.ini if present)",
        )
        sub.add_argument(
            "--log-file",
            type=Path,
            default=None,
            help="Also write the timestamped output to this file",
        )
        sub.add_argument(
            "-v",
            "--verbose",
            action="store_true",
            help="Show every copied asset and debug logging",
        )
        if name != "link":
            sub.add_argument(
                "-l",
                "--list",
                dest="list_assets",
                action="store_true",
                help="Print a table of the copied assets",
            )

    parsed_args = parser.parse_args(argv)

    # If no command specified, show help
    if not parsed_args.command:
        parser.print_help()
        sys.exit(0)

    _configure_logging(parsed_args.verbose)
    init_timer()
    set_verbose(parsed_args.verbose)

    args = StageArgs(
        project_dir=parsed_args.project_dir,
        config_file=parsed_args.config,
        log_file=parsed_args.log_file,
        verbose=parsed_args.verbose,
        list_assets=getattr(parsed_args, "list_assets", False),
    )
    sys.exit(COMMANDS[parsed_args.command](args))


if __name__ == "__main__":
    main()
