"""Validity checks and fetch-on-miss for files in the game directory."""

import hashlib
import logging
from enum import Enum
from pathlib import Path
from typing import Optional

import aiofiles
import aiofiles.os

from ..errors import DownloadFailed, StorageError
from ..utils.async_http import AsyncHTTPClient

logger = logging.getLogger(__name__)


class CacheStatus(str, Enum):
    FETCHED = "fetched"
    ALREADY_VALID = "already_valid"


async def file_sha1(file_path: Path) -> str:
    """SHA-1 hex digest of a file."""
    hash_sha1 = hashlib.sha1()
    async with aiofiles.open(file_path, 'rb') as f:
        while chunk := await f.read(64 * 1024):
            hash_sha1.update(chunk)
    return hash_sha1.hexdigest()


async def is_valid(path: Path, checksum: Optional[str] = None) -> bool:
    """A file is valid when it exists and, if a checksum is declared, matches it.

    Without a checksum, existence alone is accepted.
    """
    if not await aiofiles.os.path.isfile(path):
        return False
    if not checksum:
        return True
    try:
        return await file_sha1(path) == checksum.lower()
    except OSError:
        logger.warning("Could not hash %s, treating as invalid", path, exc_info=True)
        return False


class ArtifactCache:
    def __init__(self, http: AsyncHTTPClient):
        self.http = http

    async def ensure(self, url: str, path: Path, checksum: Optional[str] = None) -> CacheStatus:
        """Make sure ``path`` holds a valid copy of ``url``.

        Downloads go to a ``.part`` sibling and are renamed into place only
        after the checksum (if any) matches.
        """
        try:
            await aiofiles.os.makedirs(path.parent, exist_ok=True)
        except OSError as e:
            raise StorageError(path.parent, str(e)) from e

        if await is_valid(path, checksum):
            logger.debug("File OK: %s", path)
            return CacheStatus.ALREADY_VALID

        if await aiofiles.os.path.exists(path):
            logger.info("Hash mismatch, re-downloading: %s", path)

        part = path.with_name(path.name + ".part")
        try:
            digest = await self.http.download(url, part)
            if checksum and digest != checksum.lower():
                raise DownloadFailed(url, f"checksum mismatch: expected {checksum.lower()}, got {digest}")
            await aiofiles.os.replace(part, path)
        except OSError as e:
            await _discard(part)
            raise StorageError(path, str(e)) from e
        except BaseException:
            await _discard(part)
            raise

        logger.debug("Downloaded: %s", path)
        return CacheStatus.FETCHED


async def _discard(path: Path):
    try:
        await aiofiles.os.remove(path)
    except FileNotFoundError:
        pass
    except OSError:
        logger.warning("Could not remove partial download %s", path, exc_info=True)
