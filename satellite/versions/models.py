"""Data models for Minecraft versions."""

import platform
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..utils.maven import library_path


class VersionKind(str, Enum):
    RELEASE = "release"
    SNAPSHOT = "snapshot"
    OLD_BETA = "old_beta"
    OLD_ALPHA = "old_alpha"


class VersionInfo(BaseModel):
    """One entry of the version catalog."""
    model_config = ConfigDict(frozen=True)

    id: str
    type: VersionKind
    url: str


class VersionManifest(BaseModel):
    latest: Dict[str, str] = Field(default_factory=dict)
    versions: List[VersionInfo]


class LibraryRef(BaseModel):
    """A library resolved to what the launcher needs to fetch and load it.

    ``download_url`` is None for libraries that have nothing to download;
    those are skipped by the fetch stage.
    """
    model_config = ConfigDict(frozen=True)

    coordinate: str
    download_url: Optional[str] = None
    path: Optional[str] = None
    checksum: Optional[str] = None

    @property
    def relative_path(self) -> str:
        return self.path or library_path(self.coordinate)


class DownloadRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    path: Optional[str] = None
    checksum: Optional[str] = None


class AssetIndexRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    url: str
    checksum: Optional[str] = None


class VersionDescriptor(BaseModel):
    """Typed per-version metadata, parsed once per launch."""
    model_config = ConfigDict(frozen=True)

    id: str
    type: str
    main_class: str
    libraries: List[LibraryRef]
    client: DownloadRef
    asset_index: AssetIndexRef


# Raw version.json shapes

class VersionLibraryArtifact(BaseModel):
    path: Optional[str] = None
    sha1: Optional[str] = None
    size: Optional[int] = None
    url: Optional[str] = None


class VersionLibraryDownloads(BaseModel):
    artifact: Optional[VersionLibraryArtifact] = None


class VersionLibraryRulesOs(BaseModel):
    name: Optional[str] = None
    arch: Optional[str] = None


class VersionLibraryRules(BaseModel):
    action: str
    os: Optional[VersionLibraryRulesOs] = None

    def matches(self, os_name: str, arch: str) -> bool:
        if self.os is None:
            return True
        if self.os.name and self.os.name != os_name:
            return False
        if self.os.arch and self.os.arch != arch:
            return False
        return True


class VersionLibrary(BaseModel):
    name: str
    downloads: Optional[VersionLibraryDownloads] = None
    rules: Optional[List[VersionLibraryRules]] = None

    def is_allowed(self, os_name: str, arch: str) -> bool:
        """Apply rules in order; the last matching rule decides."""
        if not self.rules:
            return True
        allowed = False
        for rule in self.rules:
            if rule.matches(os_name, arch):
                allowed = rule.action == "allow"
        return allowed

    def to_ref(self) -> LibraryRef:
        artifact = self.downloads.artifact if self.downloads else None
        if artifact is None:
            return LibraryRef(coordinate=self.name)
        return LibraryRef(
            coordinate=self.name,
            download_url=artifact.url or None,
            path=artifact.path,
            checksum=artifact.sha1,
        )


class VersionDownload(BaseModel):
    url: str
    sha1: Optional[str] = None
    size: Optional[int] = None


class VersionDownloads(BaseModel):
    client: VersionDownload


class VersionAssetIndex(BaseModel):
    id: str
    url: str
    sha1: Optional[str] = None


class VersionMetadata(BaseModel):
    """Parsed version.json data"""
    id: str
    type: str = "release"
    mainClass: str
    libraries: List[VersionLibrary] = Field(default_factory=list)
    downloads: VersionDownloads
    assetIndex: VersionAssetIndex

    def to_descriptor(self, os_name: Optional[str] = None, arch: Optional[str] = None) -> VersionDescriptor:
        os_name = os_name or current_os_name()
        arch = arch or current_arch()
        client = self.downloads.client
        return VersionDescriptor(
            id=self.id,
            type=self.type,
            main_class=self.mainClass,
            libraries=[lib.to_ref() for lib in self.libraries if lib.is_allowed(os_name, arch)],
            client=DownloadRef(url=client.url, checksum=client.sha1),
            asset_index=AssetIndexRef(id=self.assetIndex.id, url=self.assetIndex.url,
                                      checksum=self.assetIndex.sha1),
        )


def current_os_name() -> str:
    """Name of the running OS as used by library rules."""
    system = platform.system().lower()
    if system == "darwin":
        return "osx"
    return system


def current_arch() -> str:
    machine = platform.machine().lower()
    if machine in ("i386", "i686", "x86"):
        return "x86"
    return machine


# Asset index

class AssetObject(BaseModel):
    model_config = ConfigDict(frozen=True)

    hash: str = Field(pattern=r"^[0-9a-fA-F]{40}$")
    size: int = 0

    @property
    def relative_path(self) -> str:
        return f"{self.hash[:2]}/{self.hash}"


class AssetIndex(BaseModel):
    """Logical asset name to content hash, in index order."""
    objects: Dict[str, AssetObject] = Field(default_factory=dict)
