"""Subprocess wrappers for platform-safe process execution.

Every process webstage spawns goes through these helpers so that Windows
never flashes a console window and children never inherit the parent
console's input handle unless a caller explicitly asks for a stdin pipe.
"""

import subprocess
import sys
from typing import Any


def get_subprocess_creation_flags() -> int:
    """Get platform-specific subprocess creation flags.

    Returns:
        - Windows: subprocess.CREATE_NO_WINDOW
        - Other platforms: 0
    """
    if sys.platform == "win32":
        return subprocess.CREATE_NO_WINDOW
    return 0


def _apply_platform_defaults(kwargs: dict[str, Any]) -> dict[str, Any]:
    default_flags = get_subprocess_creation_flags()

    if "creationflags" in kwargs:
        kwargs["creationflags"] = kwargs["creationflags"] | default_flags
    elif default_flags:
        kwargs["creationflags"] = default_flags

    # Keep keystrokes in the parent terminal unless a stdin pipe was requested
    if "stdin" not in kwargs:
        kwargs["stdin"] = subprocess.DEVNULL

    return kwargs


def safe_popen(cmd: list[str], **kwargs: Any) -> subprocess.Popen:
    """Start a command and return its handle with platform defaults applied.

    Used where output has to be consumed while the process runs, such as
    scanning an interpreter's output line by line.

    Args:
        cmd: Command and arguments
        **kwargs: Passed through to subprocess.Popen (an explicit
            ``creationflags`` is OR'd with the platform defaults and an
            explicit ``stdin`` is used as-is)

    Returns:
        Popen process handle
    """
    return subprocess.Popen(cmd, **_apply_platform_defaults(kwargs))
