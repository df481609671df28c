"""Direct asset collection.

Copies the direct assets found under a list of source directories into the
managed assets directory, keeping each file's path relative to the source
directory it was found in. Source directories may also hold compiler inputs
(TypeScript and the like); the criteria decide what gets copied.

Later source directories win: when two of them contain the same relative
path, the copy from the later one overwrites the earlier one.
"""

import logging
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional, Sequence

from webstage.assets.criteria import FilePredicate, default_direct_asset_criteria
from webstage.output import log_asset

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssetCopy:
    """A single copied asset.

    Attributes:
        source: File that was read
        destination: File that was written
    """

    source: Path
    destination: Path


@dataclass
class CopyManifest:
    """Ordered record of the copies made by one collection run."""

    entries: list[AssetCopy] = field(default_factory=list)

    def add(self, source: Path, destination: Path) -> None:
        self.entries.append(AssetCopy(source, destination))

    @property
    def destinations(self) -> list[Path]:
        """Destination files in copy order."""
        return [entry.destination for entry in self.entries]

    def __iter__(self) -> Iterator[AssetCopy]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


def _raise(error: OSError) -> None:
    raise error


def _walk_entries(root: Path) -> Iterator[Path]:
    """Yield every file and directory below ``root``, depth first.

    Symbolic links to directories are followed and their entries are yielded
    under the link's path. A link back to an enclosing directory is yielded
    but not descended into, so cycles terminate.
    """
    # dirpath -> real paths of the directory and everything enclosing it
    enclosing = {os.fspath(root): (os.path.realpath(root),)}
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise, followlinks=True):
        chain = enclosing.pop(dirpath)
        dirnames.sort()
        base = Path(dirpath)
        for name in dirnames:
            yield base / name

        descend = []
        for name in dirnames:
            real = os.path.realpath(base / name)
            if real in chain:
                logger.debug(f"Not descending into {base / name}: links back to {real}")
                continue
            descend.append(name)
            enclosing[os.path.join(dirpath, name)] = chain + (real,)
        dirnames[:] = descend

        for name in sorted(filenames):
            yield base / name


def collect_direct_assets(
    sources: Sequence[Path],
    destination_root: Path,
    criteria: FilePredicate = default_direct_asset_criteria,
    preserve_last_modified: bool = False,
    manifest: Optional[CopyManifest] = None,
) -> CopyManifest:
    """Copy every file satisfying ``criteria`` from ``sources`` into ``destination_root``.

    A file at ``<source>/a/b/c.js`` lands at ``<destination_root>/a/b/c.js``.
    Existing destination files are overwritten. Directories are never copied
    even when the criteria accept them. A source directory that does not
    exist contributes nothing.

    Args:
        sources: Source directories, processed in order
        destination_root: Managed assets directory receiving the copies
        criteria: Decides which files are direct assets
        preserve_last_modified: Also copy modification times and permissions
        manifest: Manifest to append to; a fresh one is created when None.
            Pass one in to see what was copied before a failure.

    Returns:
        The manifest of copies, in the order they were made

    Raises:
        OSError: If a directory cannot be listed or a file cannot be copied.
            Files copied before the failure stay in place.
    """
    if manifest is None:
        manifest = CopyManifest()
    copy = shutil.copy2 if preserve_last_modified else shutil.copyfile

    for source_root in sources:
        if not source_root.is_dir():
            logger.debug(f"Skipping missing assets source directory: {source_root}")
            continue

        for entry in _walk_entries(source_root):
            if not criteria(entry) or entry.is_dir():
                continue

            target = destination_root / entry.relative_to(source_root)
            target.parent.mkdir(parents=True, exist_ok=True)
            copy(entry, target)
            manifest.add(entry, target)
            log_asset(entry, target)

    logger.debug(f"Collected {len(manifest)} direct asset(s) into {destination_root}")
    return manifest
