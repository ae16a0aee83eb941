"""Version manifest and metadata manager."""

import json
import logging
from pathlib import Path
from typing import Iterable, List, Optional

import aiofiles
import aiofiles.os
from pydantic import ValidationError

from ..errors import MalformedResponse, StorageError, VersionNotFound
from ..utils.async_http import AsyncHTTPClient
from .models import VersionDescriptor, VersionInfo, VersionKind, VersionManifest, VersionMetadata

logger = logging.getLogger(__name__)


class VersionManager:
    MANIFEST_URL = "https://launchermeta.mojang.com/mc/game/version_manifest.json"

    def __init__(self, http: AsyncHTTPClient, manifest_url: Optional[str] = None):
        self.http = http
        self.manifest_url = manifest_url or self.MANIFEST_URL

    async def fetch_manifest(self) -> VersionManifest:
        """Fetch the launcher version manifest."""
        data = await self.http.get_json(self.manifest_url)
        try:
            return VersionManifest.model_validate(data)
        except ValidationError as e:
            raise MalformedResponse(self.manifest_url, str(e)) from e

    async def list_versions(self) -> List[VersionInfo]:
        """All catalog entries, in server order (newest first)."""
        manifest = await self.fetch_manifest()
        return list(manifest.versions)

    async def get_version_info(self, version_id: str) -> VersionInfo:
        manifest = await self.fetch_manifest()
        for version in manifest.versions:
            if version.id == version_id:
                return version
        raise VersionNotFound(version_id)

    async def resolve(self, version_id: str, save_to: Optional[Path] = None) -> VersionDescriptor:
        """Resolve a version id to its descriptor.

        The catalog is always re-fetched. When ``save_to`` is given the raw
        version document is written there as well.
        """
        info = await self.get_version_info(version_id)
        logger.debug("Resolved %s to %s", version_id, info.url)

        data = await self.http.get_json(info.url)
        try:
            metadata = VersionMetadata.model_validate(data)
        except ValidationError as e:
            raise MalformedResponse(info.url, str(e)) from e

        if save_to is not None:
            try:
                await aiofiles.os.makedirs(save_to.parent, exist_ok=True)
                async with aiofiles.open(save_to, 'w', encoding="utf-8") as f:
                    await f.write(json.dumps(data, indent=2))
            except OSError as e:
                raise StorageError(save_to, str(e)) from e

        descriptor = metadata.to_descriptor()
        if descriptor.type != info.type.value:
            # The catalog is authoritative for the version type.
            descriptor = descriptor.model_copy(update={"type": info.type.value})
        return descriptor


def filter_versions(versions: Iterable[VersionInfo], show_snapshots: bool = False,
                    show_old: bool = False) -> List[VersionInfo]:
    """Drop snapshots and old beta/alpha entries unless asked for."""
    result = []
    for version in versions:
        if version.type == VersionKind.SNAPSHOT and not show_snapshots:
            continue
        if version.type in (VersionKind.OLD_BETA, VersionKind.OLD_ALPHA) and not show_old:
            continue
        result.append(version)
    return result
