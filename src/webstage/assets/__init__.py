"""
Direct asset handling for webstage.

This module provides:
- Direct asset criteria (which files are copied verbatim)
- Path-preserving collection into the managed assets directory
"""

from .collector import AssetCopy, CopyManifest, collect_direct_assets
from .criteria import (
    DIRECT_ASSET_EXTENSIONS,
    FilePredicate,
    default_direct_asset_criteria,
    extension_criteria,
    file_extension,
)

__all__ = [
    "AssetCopy",
    "CopyManifest",
    "collect_direct_assets",
    "DIRECT_ASSET_EXTENSIONS",
    "FilePredicate",
    "default_direct_asset_criteria",
    "extension_criteria",
    "file_extension",
]
