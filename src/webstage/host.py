"""Host platform capabilities used by the linker.

Three questions are answered here and nowhere else:

- which platform family is running (``HostPlatform``),
- what category a link-creation failure falls into (``LinkFailure``),
- whether a path exists (``exists``).

``exists`` follows links. A symbolic link or junction whose target is missing
therefore reports False, and a later attempt to create an entry at the same
path fails with "already exists". That behaviour is kept as-is; changing it
here changes it for every caller.
"""

import os
import sys
from enum import Enum
from pathlib import Path

# Windows error code returned by CreateSymbolicLink when the caller lacks
# SeCreateSymbolicLinkPrivilege
ERROR_PRIVILEGE_NOT_HELD = 1314


class HostPlatform(Enum):
    """Platform families with different virtual directory mechanisms."""

    WINDOWS = "windows"
    POSIX = "posix"

    def __str__(self) -> str:
        return self.value


class LinkFailure(Enum):
    """Categories of failure when creating a symbolic link."""

    PRIVILEGE = "privilege"
    IO = "io"
    OTHER = "other"


def detect_host_platform() -> HostPlatform:
    """Identify the running platform family.

    Returns:
        HostPlatform.WINDOWS on win32, HostPlatform.POSIX elsewhere
    """
    if sys.platform == "win32":
        return HostPlatform.WINDOWS
    return HostPlatform.POSIX


def classify_link_failure(error: BaseException) -> LinkFailure:
    """Map an exception raised by symlink creation to a failure category.

    Args:
        error: Exception raised while creating the link

    Returns:
        PRIVILEGE for permission errors (including WinError 1314),
        IO for any other OSError, OTHER for everything else
    """
    if isinstance(error, PermissionError):
        return LinkFailure.PRIVILEGE
    if isinstance(error, OSError):
        if getattr(error, "winerror", None) == ERROR_PRIVILEGE_NOT_HELD:
            return LinkFailure.PRIVILEGE
        return LinkFailure.IO
    return LinkFailure.OTHER


def exists(path: Path) -> bool:
    """Report whether ``path`` exists, following links."""
    return os.path.exists(path)


def is_virtual_directory(path: Path) -> bool:
    """Report whether ``path`` is a symbolic link or a directory junction.

    Unlike ``exists`` this does not follow the link, so it is True for
    dangling links too.
    """
    if path.is_symlink():
        return True
    # Path.is_junction() only exists on 3.12+
    is_junction = getattr(os.path, "isjunction", None)
    return bool(is_junction and is_junction(path))
