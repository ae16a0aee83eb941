"""Fabric loader detection and installation."""

import json
import logging
from enum import Enum
from pathlib import Path
from typing import List, Optional

import aiofiles
import aiofiles.os
from pydantic import TypeAdapter, ValidationError

from ..errors import LauncherError, MalformedCoordinate, MalformedResponse, StorageError
from ..utils.async_http import AsyncHTTPClient
from ..utils.cancel import CancelToken
from ..utils.events import EventEmitter
from ..versions.cache import ArtifactCache, is_valid
from .models import FabricLoaderVersion, FabricProfileJson, LoaderProfile

logger = logging.getLogger(__name__)

_loader_versions = TypeAdapter(List[FabricLoaderVersion])


class LoaderState(str, Enum):
    ABSENT = "absent"
    METADATA_FETCHED = "metadata_fetched"
    PROFILE_WRITTEN = "profile_written"
    LIBRARIES_VERIFYING = "libraries_verifying"
    READY = "ready"


class FabricBootstrapper:
    META_URL = "https://meta.fabricmc.net/v2"
    PREFIX = "fabric-loader"

    def __init__(self, http: AsyncHTTPClient, cache: ArtifactCache, meta_url: Optional[str] = None,
                 events: Optional[EventEmitter] = None, cancel: Optional[CancelToken] = None):
        self.http = http
        self.cache = cache
        self.meta_url = (meta_url or self.META_URL).rstrip("/")
        self.events = events or EventEmitter()
        self.cancel = cancel or CancelToken()
        self.state = LoaderState.ABSENT

    def _set_state(self, state: LoaderState):
        logger.debug("Fabric loader: %s -> %s", self.state.value, state.value)
        self.state = state

    @classmethod
    def profile_name(cls, loader_version: str, mc_version: str) -> str:
        return f"{cls.PREFIX}-{loader_version}-{mc_version}"

    @staticmethod
    def profile_path(game_dir: Path, name: str) -> Path:
        return game_dir / "versions" / name / f"{name}.json"

    async def detect_existing(self, mc_version: str, game_dir: Path) -> Optional[LoaderProfile]:
        """Return an installed profile for ``mc_version`` whose libraries are all valid.

        A profile with any missing or corrupt library counts as not installed.
        """
        versions_dir = game_dir / "versions"
        if not await aiofiles.os.path.isdir(versions_dir):
            return None

        prefix = f"{self.PREFIX}-"
        suffix = f"-{mc_version}"
        for name in sorted(await aiofiles.os.listdir(versions_dir)):
            if not (name.startswith(prefix) and name.endswith(suffix)):
                continue
            if not await aiofiles.os.path.isdir(versions_dir / name):
                continue
            loader_version = name[len(prefix):-len(suffix)]
            if not loader_version:
                continue

            profile = await self._load_profile(self.profile_path(game_dir, name), loader_version)
            if profile is None or profile.minecraft_version != mc_version:
                continue

            if await self._libraries_valid(profile, game_dir):
                self.events.log(f"Found Fabric loader {loader_version} for {mc_version}")
                self._set_state(LoaderState.READY)
                return profile
            logger.info("Fabric profile %s is missing libraries", name)

        return None

    async def _load_profile(self, path: Path, loader_version: str) -> Optional[LoaderProfile]:
        try:
            async with aiofiles.open(path, 'r', encoding="utf-8") as f:
                data = json.loads(await f.read())
            return LoaderProfile.from_profile_json(FabricProfileJson.model_validate(data), loader_version)
        except FileNotFoundError:
            return None
        except (OSError, ValueError, MalformedCoordinate) as e:
            # pydantic's ValidationError is a ValueError
            logger.warning("Ignoring unreadable Fabric profile %s: %s", path, e)
            return None

    async def _libraries_valid(self, profile: LoaderProfile, game_dir: Path) -> bool:
        libraries_dir = game_dir / "libraries"
        for lib in profile.libraries:
            if not await is_valid(libraries_dir / lib.relative_path, lib.checksum):
                return False
        return True

    async def fetch_latest_loader_version(self) -> str:
        """First stable entry of the loader list; the API lists newest first."""
        url = f"{self.meta_url}/versions/loader"
        data = await self.http.get_json(url)
        try:
            versions = _loader_versions.validate_python(data)
        except ValidationError as e:
            raise MalformedResponse(url, str(e)) from e

        for version in versions:
            if version.stable is not False:
                return version.version
        raise MalformedResponse(url, "no stable loader version listed")

    async def fetch_profile(self, mc_version: str, loader_version: str) -> dict:
        url = f"{self.meta_url}/versions/loader/{mc_version}/{loader_version}/profile/json"
        data = await self.http.get_json(url)
        if not isinstance(data, dict):
            raise MalformedResponse(url, "expected a JSON object")
        return data

    async def install(self, mc_version: str, game_dir: Path) -> LoaderProfile:
        """Install the latest Fabric loader for ``mc_version``.

        The profile is written before the libraries are fetched; if a library
        then fails, the next detection sees it missing and reinstalls.
        """
        self._set_state(LoaderState.ABSENT)
        self.events.log(f"Installing Fabric loader for {mc_version}...")

        loader_version = await self.fetch_latest_loader_version()
        data = await self.fetch_profile(mc_version, loader_version)
        try:
            profile = LoaderProfile.from_profile_json(FabricProfileJson.model_validate(data), loader_version)
        except ValidationError as e:
            raise MalformedResponse(self.meta_url, f"invalid Fabric profile: {e}") from e
        self._set_state(LoaderState.METADATA_FETCHED)

        name = self.profile_name(loader_version, mc_version)
        await self._write_profile(self.profile_path(game_dir, name), data)
        self._set_state(LoaderState.PROFILE_WRITTEN)

        self._set_state(LoaderState.LIBRARIES_VERIFYING)
        libraries_dir = game_dir / "libraries"
        for done, lib in enumerate(profile.libraries, start=1):
            self.cancel.raise_if_cancelled()
            await self.cache.ensure(lib.download_url, libraries_dir / lib.relative_path, lib.checksum)
            self.events.progress(done, len(profile.libraries), "fabric libraries")

        self._set_state(LoaderState.READY)
        self.events.log(f"Fabric loader {loader_version} installed")
        return profile

    async def ensure_installed(self, mc_version: str, game_dir: Path) -> LoaderProfile:
        profile = await self.detect_existing(mc_version, game_dir)
        if profile is not None:
            return profile
        try:
            return await self.install(mc_version, game_dir)
        except LauncherError:
            self._set_state(LoaderState.ABSENT)
            raise

    @staticmethod
    async def _write_profile(path: Path, data: dict):
        part = path.with_name(path.name + ".part")
        try:
            await aiofiles.os.makedirs(path.parent, exist_ok=True)
            async with aiofiles.open(part, 'w', encoding="utf-8") as f:
                await f.write(json.dumps(data, indent=2))
            await aiofiles.os.replace(part, path)
        except OSError as e:
            raise StorageError(path, str(e)) from e
