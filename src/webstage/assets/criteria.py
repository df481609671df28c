"""Direct asset criteria.

A direct asset is a source file that goes into the web output tree verbatim,
as opposed to files (like TypeScript) that feed a compiler. Criteria are plain
callables from a path to a bool, so any function or lambda can replace the
default.
"""

from pathlib import Path
from typing import Callable

FilePredicate = Callable[[Path], bool]

# Extensions copied verbatim by default; compared case-sensitively, no dot
DIRECT_ASSET_EXTENSIONS: tuple[str, ...] = ("js", "html", "css")


def file_extension(path: Path) -> str:
    """Return the text after the last dot of the file name.

    Unlike ``Path.suffix`` a leading dot counts, so ``.js`` has extension
    ``js``. Names without a dot have an empty extension.

    Args:
        path: File path

    Returns:
        Extension without the dot, or "" if there is none
    """
    _base, dot, ext = path.name.rpartition(".")
    return ext if dot else ""


def extension_criteria(*extensions: str) -> FilePredicate:
    """Build criteria accepting files whose extension is one of ``extensions``.

    Args:
        *extensions: Extensions without the leading dot, matched case-sensitively

    Returns:
        Predicate usable as direct asset criteria
    """
    accepted = frozenset(extensions)

    def criteria(path: Path) -> bool:
        return file_extension(path) in accepted

    return criteria


def default_direct_asset_criteria(path: Path) -> bool:
    """Only ``*.js``, ``*.html`` and ``*.css`` files are direct assets by default."""
    return file_extension(path) in DIRECT_ASSET_EXTENSIONS
