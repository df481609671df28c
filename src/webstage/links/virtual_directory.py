"""Virtual directory creation.

A virtual directory is a filesystem entry that shows the content of another,
real directory: a symbolic link on POSIX, a directory junction on Windows.
The staging step uses one to expose the project's ``node_modules`` inside the
web output tree without copying it.

Creating a directory symlink on Windows needs SeCreateSymbolicLinkPrivilege,
which regular accounts do not hold unless Developer Mode is on. ``mklink /J``
has no such requirement, so on Windows a failed symlink falls back to a
junction created through ``cmd``.
"""

import logging
import subprocess
from pathlib import Path
from typing import Callable, Optional

from webstage.host import HostPlatform, LinkFailure, classify_link_failure, detect_host_platform, exists, is_virtual_directory
from webstage.subprocess_utils import safe_popen

logger = logging.getLogger(__name__)

# First line cmd prints after a successful ``mklink /J``
JUNCTION_CREATED_MARKER = "Junction created"

RecoveryStrategy = Callable[[Path, Path, logging.Logger], None]


def ensure_virtual_directory(of: Path, at: Path, log: Optional[logging.Logger] = None) -> Path:
    """Make ``at`` show the content of directory ``of``.

    Nothing happens when ``at`` already exists. ``of`` is not checked: a
    missing ``of`` yields a link that resolves once the directory is created.

    Args:
        of: The real directory to mirror
        at: Where the virtual directory should appear
        log: Receives the junction confirmation line (module logger by default)

    Returns:
        ``at``, unchanged

    Raises:
        OSError: If the symlink cannot be created and no recovery applies
    """
    if log is None:
        log = logger

    if exists(at):
        kind = "Virtual directory" if is_virtual_directory(at) else "Entry"
        log.debug(f"{kind} already present: {at}")
        return at

    try:
        at.symlink_to(of, target_is_directory=True)
        log.debug(f"Symlinked {at} -> {of}")
    except Exception as e:
        recover = select_recovery(detect_host_platform(), classify_link_failure(e))
        if recover is None:
            raise
        log.debug(f"Symlink {at} -> {of} failed ({e}), creating a junction instead")
        recover(of, at, log)

    return at


def create_junction(of: Path, at: Path, log: logging.Logger) -> None:
    """Create a directory junction by feeding ``mklink /J`` to ``cmd``.

    The interpreter's output is scanned line by line for the confirmation
    marker, which is logged at info level when found.

    Args:
        of: Junction target
        at: Junction location
        log: Receives the confirmation line
    """
    command = f'mklink /J "{at}" "{of}"\n'

    proc = safe_popen(
        ["cmd"],
        stdin=subprocess.PIPE,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
        errors="replace",
    )
    assert proc.stdin is not None and proc.stdout is not None
    marker_line = None
    try:
        proc.stdin.write(command)
        proc.stdin.close()

        for line in proc.stdout:
            line = line.rstrip("\r\n")
            if line.startswith(JUNCTION_CREATED_MARKER):
                marker_line = line
                break
            log.debug(f"cmd: {line}")

        # Drain the rest so cmd can exit
        for _ in proc.stdout:
            pass
    finally:
        # Reap cmd even when writing or reading failed
        proc.stdout.close()
        try:
            proc.stdin.close()
        except BrokenPipeError:
            pass  # cmd already exited; the original error propagates
        proc.wait()

    if marker_line is not None:
        log.info(marker_line)
    # TODO: decide whether a missing marker should raise. cmd on a non-English
    # locale prints a translated confirmation, so absence alone does not prove
    # the junction is missing; callers needing certainty must check `at`.


# (platform, failure) -> strategy; combinations not listed propagate the error
RECOVERY_STRATEGIES: dict[tuple[HostPlatform, LinkFailure], RecoveryStrategy] = {
    (HostPlatform.WINDOWS, LinkFailure.PRIVILEGE): create_junction,
    (HostPlatform.WINDOWS, LinkFailure.IO): create_junction,
}


def select_recovery(platform: HostPlatform, failure: LinkFailure) -> Optional[RecoveryStrategy]:
    """Look up how to recover from a failed symlink.

    Returns:
        The recovery strategy, or None when the failure must propagate
    """
    return RECOVERY_STRATEGIES.get((platform, failure))
