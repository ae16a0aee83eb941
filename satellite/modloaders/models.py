"""Data models for Fabric loader metadata and installed profiles."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..utils.maven import library_url
from ..versions.models import LibraryRef

FABRIC_MAVEN_URL = "https://maven.fabricmc.net/"


class FabricLoaderVersion(BaseModel):
    version: str
    stable: Optional[bool] = None


class FabricLibrary(BaseModel):
    name: str
    url: str = FABRIC_MAVEN_URL
    sha1: Optional[str] = None
    size: Optional[int] = None

    def to_ref(self) -> LibraryRef:
        return LibraryRef(
            coordinate=self.name,
            download_url=library_url(self.url, self.name),
            checksum=self.sha1,
        )


class FabricArguments(BaseModel):
    game: List[str] = Field(default_factory=list)
    jvm: List[str] = Field(default_factory=list)


class FabricProfileJson(BaseModel):
    """The launcher profile document served by Fabric meta."""
    id: str
    inheritsFrom: str
    mainClass: str
    libraries: List[FabricLibrary] = Field(default_factory=list)
    arguments: FabricArguments = Field(default_factory=FabricArguments)


class LoaderProfile(BaseModel):
    """An installed (or installable) loader, parsed once from its profile."""
    model_config = ConfigDict(frozen=True)

    id: str
    loader_version: str
    minecraft_version: str
    main_class: str
    libraries: List[LibraryRef]
    jvm_args: List[str] = Field(default_factory=list)
    game_args: List[str] = Field(default_factory=list)

    @classmethod
    def from_profile_json(cls, profile: FabricProfileJson, loader_version: str) -> "LoaderProfile":
        """Raises MalformedCoordinate if a library name is not a maven coordinate."""
        return cls(
            id=profile.id,
            loader_version=loader_version,
            minecraft_version=profile.inheritsFrom,
            main_class=profile.mainClass,
            libraries=[lib.to_ref() for lib in profile.libraries],
            jvm_args=list(profile.arguments.jvm),
            game_args=list(profile.arguments.game),
        )
