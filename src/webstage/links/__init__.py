"""Virtual directory support for webstage.

Exposes a real directory somewhere else in the build tree without copying it.
"""

from .virtual_directory import (
    JUNCTION_CREATED_MARKER,
    RECOVERY_STRATEGIES,
    create_junction,
    ensure_virtual_directory,
    select_recovery,
)

__all__ = [
    "JUNCTION_CREATED_MARKER",
    "RECOVERY_STRATEGIES",
    "create_junction",
    "ensure_virtual_directory",
    "select_recovery",
]
