"""Web asset staging.

Runs the two staging phases for a project:

1. Expose node modules: mirror ``node_modules`` into the web base directory
   through a virtual directory.
2. Collect direct assets: copy the direct assets from every assets source
   directory into the managed assets directory.

Both phases must finish before an external compiler (tsc) writes into the
managed assets directory; that step is left to the caller.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from webstage.assets.collector import CopyManifest, collect_direct_assets
from webstage.assets.criteria import FilePredicate, extension_criteria
from webstage.config import StageLayout
from webstage.links.virtual_directory import ensure_virtual_directory
from webstage.output import TimedLogger, log_detail, set_verbose

logger = logging.getLogger(__name__)

TOTAL_PHASES = 2


@dataclass
class StageResult:
    """Result of a staging run.

    Attributes:
        exposed_node_modules: Virtual directory mirroring node_modules
        manifest: Copies made while collecting direct assets
        stage_time: Wall-clock duration in seconds
        message: Human-readable summary
    """

    exposed_node_modules: Path
    manifest: CopyManifest
    stage_time: float
    message: str


def expose_node_modules(layout: StageLayout, phase: Optional[tuple[int, int]] = None) -> Path:
    """Mirror the project's node_modules at the exposed location.

    Args:
        layout: Project layout
        phase: Optional (current, total) phase numbers for output

    Returns:
        The exposed node modules directory
    """
    with TimedLogger("Exposing node modules", phase=phase) as timed:
        layout.exposed_node_modules_dir.parent.mkdir(parents=True, exist_ok=True)
        exposed = ensure_virtual_directory(layout.node_modules_dir, layout.exposed_node_modules_dir)
        timed.detail(f"{exposed} -> {layout.node_modules_dir}")
    return exposed


def collect_assets(
    layout: StageLayout,
    criteria: Optional[FilePredicate] = None,
    phase: Optional[tuple[int, int]] = None,
) -> CopyManifest:
    """Copy the project's direct assets into the managed assets directory.

    Args:
        layout: Project layout
        criteria: Direct asset criteria (defaults to the layout's extensions)
        phase: Optional (current, total) phase numbers for output

    Returns:
        Manifest of the copies made
    """
    if criteria is None:
        criteria = extension_criteria(*layout.direct_asset_extensions)

    with TimedLogger("Collecting direct assets", phase=phase) as timed:
        manifest = collect_direct_assets(layout.assets_source_dirs, layout.managed_assets_dir, criteria)
        timed.detail(f"Copied {len(manifest)} asset(s) into {layout.managed_assets_dir}")
    return manifest


def stage_web_assets(
    layout: StageLayout,
    verbose: bool = False,
    criteria: Optional[FilePredicate] = None,
) -> StageResult:
    """Run every staging phase for a project.

    Errors from either phase propagate unchanged so the calling build aborts.

    Args:
        layout: Project layout
        verbose: Print one line per copied asset
        criteria: Direct asset criteria override

    Returns:
        StageResult describing what was staged
    """
    set_verbose(verbose)
    start_time = time.time()

    logger.debug(f"Staging web assets for {layout.project_dir}")
    exposed = expose_node_modules(layout, phase=(1, TOTAL_PHASES))
    manifest = collect_assets(layout, criteria, phase=(2, TOTAL_PHASES))

    stage_time = time.time() - start_time
    log_detail(f"Web base: {layout.web_base_dir}", verbose_only=True)

    return StageResult(
        exposed_node_modules=exposed,
        manifest=manifest,
        stage_time=stage_time,
        message=f"Staged {len(manifest)} direct asset(s)",
    )
