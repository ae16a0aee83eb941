"""Download manager for the client jar, libraries and assets."""

import asyncio
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import aiofiles
import aiofiles.os
from pydantic import ValidationError

from ..errors import DownloadFailed, MalformedResponse, StorageError
from ..utils.cancel import CancelToken
from ..utils.events import EventEmitter
from .cache import ArtifactCache, CacheStatus
from .models import AssetIndex, AssetIndexRef, LibraryRef, VersionDescriptor


logger = logging.getLogger(__name__)


@dataclass
class AssetReport:
    total: int = 0
    fetched: int = 0
    skipped: int = 0
    failed: List[str] = field(default_factory=list)


class DownloadManager:
    RESOURCES_URL = "https://resources.download.minecraft.net/"

    def __init__(self, cache: ArtifactCache, concurrent_downloads: int = 8,
                 resources_url: Optional[str] = None, events: Optional[EventEmitter] = None,
                 cancel: Optional[CancelToken] = None):
        self.cache = cache
        self.concurrent_downloads = concurrent_downloads
        self.resources_url = resources_url or self.RESOURCES_URL
        if not self.resources_url.endswith("/"):
            self.resources_url += "/"
        self.events = events or EventEmitter()
        self.cancel = cancel or CancelToken()

    async def download_version_jar(self, descriptor: VersionDescriptor, game_dir: Path) -> Path:
        """Download the client jar to ``versions/<id>/<id>.jar``."""
        dest = client_jar_path(game_dir, descriptor.id)
        self.events.log(f"Downloading main JAR for {descriptor.id}...")
        await self.cache.ensure(descriptor.client.url, dest, descriptor.client.checksum)
        return dest

    async def download_libraries(self, libraries: List[LibraryRef], game_dir: Path) -> List[Path]:
        """Download libraries one at a time; the first failure aborts."""
        libraries_dir = game_dir / "libraries"
        fetchable = [lib for lib in libraries if lib.download_url]
        paths = []

        for done, lib in enumerate(fetchable, start=1):
            self.cancel.raise_if_cancelled()
            dest = libraries_dir / lib.relative_path
            status = await self.cache.ensure(lib.download_url, dest, lib.checksum)
            if status is CacheStatus.FETCHED:
                self.events.log(f"Downloaded library: {lib.coordinate}")
            self.events.progress(done, len(fetchable), "libraries")
            paths.append(dest)

        return paths

    async def download_asset_index(self, ref: AssetIndexRef, game_dir: Path) -> AssetIndex:
        dest = game_dir / "assets" / "indexes" / f"{ref.id}.json"
        await self.cache.ensure(ref.url, dest, ref.checksum)

        try:
            async with aiofiles.open(dest, 'r', encoding="utf-8") as f:
                data = json.loads(await f.read())
        except OSError as e:
            raise StorageError(dest, str(e)) from e
        except ValueError as e:
            raise MalformedResponse(ref.url, str(e)) from e

        try:
            return AssetIndex.model_validate(data)
        except ValidationError as e:
            raise MalformedResponse(ref.url, str(e)) from e

    async def download_assets(self, ref: AssetIndexRef, game_dir: Path) -> AssetReport:
        """Download every missing asset object concurrently.

        A failed asset is reported as an error event and does not stop the
        others.
        """
        index = await self.download_asset_index(ref, game_dir)
        objects_dir = game_dir / "assets" / "objects"

        # Several names may share one hash; fetch each object once.
        missing = []
        seen = set()
        for name, obj in index.objects.items():
            if obj.hash in seen:
                continue
            seen.add(obj.hash)
            if not await aiofiles.os.path.isfile(objects_dir / obj.relative_path):
                missing.append((name, obj))

        report = AssetReport(total=len(seen), skipped=len(seen) - len(missing))
        if not missing:
            self.events.log("All assets present")
            return report

        self.events.log(f"Downloading {len(missing)} of {report.total} assets...")
        semaphore = asyncio.Semaphore(self.concurrent_downloads)
        completed = 0

        async def fetch(name: str, obj) -> None:
            nonlocal completed
            async with semaphore:
                if self.cancel.cancelled:
                    return
                try:
                    await self.cache.ensure(
                        self.resources_url + obj.relative_path,
                        objects_dir / obj.relative_path,
                        obj.hash,
                    )
                except (DownloadFailed, StorageError) as e:
                    report.failed.append(name)
                    self.events.error(f"Failed to download asset {name}: {e}")
                else:
                    report.fetched += 1
                completed += 1
                self.events.progress(completed, len(missing), "assets")

        await asyncio.gather(*(fetch(name, obj) for name, obj in missing))
        self.cancel.raise_if_cancelled()

        if report.failed:
            logger.warning("%d assets could not be downloaded", len(report.failed))
        return report


def client_jar_path(game_dir: Path, version_id: str) -> Path:
    return game_dir / "versions" / version_id / f"{version_id}.jar"
