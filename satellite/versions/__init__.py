"""Version management module."""

from .cache import ArtifactCache, CacheStatus
from .download_manager import AssetReport, DownloadManager
from .manager import VersionManager, filter_versions
from .models import LibraryRef, VersionDescriptor, VersionInfo, VersionKind, VersionManifest

__all__ = [
    "ArtifactCache",
    "AssetReport",
    "CacheStatus",
    "DownloadManager",
    "LibraryRef",
    "VersionDescriptor",
    "VersionInfo",
    "VersionKind",
    "VersionManager",
    "VersionManifest",
    "filter_versions",
]
