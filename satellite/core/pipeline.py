"""End-to-end resolve, fetch, compose and launch."""

import logging
import subprocess
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..config import LauncherConfig
from ..errors import LauncherError
from ..modloaders.fabric import FabricBootstrapper
from ..modloaders.mods import has_mods
from ..utils.async_http import AsyncHTTPClient
from ..utils.cancel import CancelToken
from ..utils.events import EventEmitter
from ..versions.cache import ArtifactCache
from ..versions.download_manager import AssetReport, DownloadManager
from ..versions.manager import VersionManager
from ..versions.models import VersionDescriptor
from .game_launcher import GameLauncher, LaunchPlan, LaunchStrategy, Loader, Vanilla

logger = logging.getLogger(__name__)


@dataclass
class PreparedLaunch:
    descriptor: VersionDescriptor
    strategy: LaunchStrategy
    assets: AssetReport
    plan: LaunchPlan


class LaunchPipeline:
    """Runs the launch stages in order against one game directory.

    Nothing is carried between runs except files on disk: a retried run
    starts again from the manifest and the artifact cache skips what is
    already valid.
    """

    def __init__(self, http: AsyncHTTPClient, events: Optional[EventEmitter] = None,
                 cancel: Optional[CancelToken] = None, manifest_url: Optional[str] = None,
                 resources_url: Optional[str] = None, fabric_meta_url: Optional[str] = None,
                 launcher: Optional[GameLauncher] = None):
        self.http = http
        self.events = events or EventEmitter()
        self.cancel = cancel or CancelToken()
        self.cache = ArtifactCache(http)
        self.versions = VersionManager(http, manifest_url)
        self.resources_url = resources_url
        self.loader = FabricBootstrapper(http, self.cache, fabric_meta_url, self.events, self.cancel)
        self.launcher = launcher or GameLauncher()

    @contextmanager
    def _stage(self, name: str):
        self.cancel.raise_if_cancelled()
        try:
            yield
        except LauncherError as e:
            if e.stage is None:
                e.stage = name
            raise

    async def prepare(self, config: LauncherConfig, version_id: str) -> PreparedLaunch:
        """Resolve and fetch everything for ``version_id`` and compose the plan."""
        game_dir = config.game_dir
        downloads = DownloadManager(self.cache, config.concurrent_downloads,
                                    self.resources_url, self.events, self.cancel)

        with self._stage("manifest"):
            self.events.log(f"Resolving version {version_id}...")
            descriptor = await self.versions.resolve(
                version_id, save_to=game_dir / "versions" / version_id / f"{version_id}.json")

        with self._stage("client"):
            await downloads.download_version_jar(descriptor, game_dir)

        with self._stage("libraries"):
            self.events.log("Downloading libraries...")
            await downloads.download_libraries(descriptor.libraries, game_dir)

        with self._stage("assets"):
            self.events.log("Downloading assets...")
            assets = await downloads.download_assets(descriptor.asset_index, game_dir)

        strategy: LaunchStrategy = Vanilla()
        if await has_mods(game_dir):
            with self._stage("loader"):
                self.events.log("Mods detected, Fabric loader required")
                profile = await self.loader.ensure_installed(descriptor.id, game_dir)
                strategy = Loader(profile)

        with self._stage("compose"):
            plan = self.launcher.compose(config, descriptor, strategy, game_dir)

        return PreparedLaunch(descriptor, strategy, assets, plan)

    async def run(self, config: LauncherConfig, version_id: str) -> subprocess.Popen:
        """Prepare and launch; every failure is reported as an error event and re-raised."""
        try:
            config.validate_config()
            prepared = await self.prepare(config, version_id)
            self.events.log("All downloads complete! Launching Minecraft...")
            with self._stage("launch"):
                process = self.launcher.launch_game(prepared.plan)
        except LauncherError as e:
            self.events.error(f"Launch failed: {e}")
            raise

        self.events.log("Minecraft launched successfully!")
        return process


async def launch_version(config: LauncherConfig, version_id: str,
                         events: Optional[EventEmitter] = None,
                         cancel: Optional[CancelToken] = None) -> subprocess.Popen:
    """Launch ``version_id`` with a fresh HTTP session built from ``config``."""
    async with AsyncHTTPClient(timeout=config.download_timeout, max_retries=config.max_retries) as http:
        return await LaunchPipeline(http, events, cancel).run(config, version_id)
