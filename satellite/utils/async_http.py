"""Async HTTP client utilities."""

import asyncio
import hashlib
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import aiofiles
import aiohttp

from .. import __version__
from ..errors import DownloadFailed, MalformedResponse, NetworkError, StorageError

logger = logging.getLogger(__name__)

USER_AGENT = f"Satellite-Launcher/{__version__}"
CHUNK_SIZE = 64 * 1024


class _RetryableStatus(Exception):
    def __init__(self, status: int):
        super().__init__(f"HTTP {status}")
        self.status = status


class AsyncHTTPClient:
    """Reusable async HTTP client.

    Metadata requests (``get_json``) are never retried; artifact downloads
    retry transport errors and 5xx responses ``max_retries`` times.
    """

    def __init__(self, headers: Optional[Dict[str, str]] = None,
                 timeout: float = 30, max_retries: int = 0, retry_delay: float = 0.5):
        self.default_headers = {"User-Agent": USER_AGENT, **(headers or {})}
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        self.session = aiohttp.ClientSession(
            headers=self.default_headers,
            timeout=aiohttp.ClientTimeout(total=self.timeout),
        )
        return self

    async def __aexit__(self, exc_type, exc, tb):
        if self.session:
            await self.session.close()
            self.session = None

    def _require_session(self) -> aiohttp.ClientSession:
        if self.session is None:
            raise RuntimeError("AsyncHTTPClient must be used as an async context manager")
        return self.session

    async def get_json(self, url: str) -> Any:
        """GET a JSON document."""
        session = self._require_session()
        try:
            async with session.get(url) as resp:
                resp.raise_for_status()
                body = await resp.read()
        except aiohttp.ClientResponseError as e:
            raise NetworkError(url, f"HTTP {e.status}") from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise NetworkError(url, str(e) or type(e).__name__) from e

        try:
            return json.loads(body)
        except ValueError as e:
            raise MalformedResponse(url, str(e)) from e

    async def download(self, url: str, dest: Path) -> str:
        """Stream ``url`` into ``dest`` and return the SHA-1 hex digest of the body."""
        attempt = 0
        while True:
            try:
                return await self._download_once(url, dest)
            except (aiohttp.ClientError, asyncio.TimeoutError, _RetryableStatus) as e:
                if isinstance(e, aiohttp.ClientResponseError):
                    reason = f"HTTP {e.status}"
                else:
                    reason = str(e) or type(e).__name__
                if attempt >= self.max_retries:
                    raise DownloadFailed(url, reason) from e
                attempt += 1
                logger.warning("Retrying %s (%d/%d): %s", url, attempt, self.max_retries, reason)
                await asyncio.sleep(self.retry_delay * attempt)

    async def _download_once(self, url: str, dest: Path) -> str:
        session = self._require_session()
        hash_sha1 = hashlib.sha1()
        async with session.get(url) as resp:
            if resp.status >= 500:
                raise _RetryableStatus(resp.status)
            if not 200 <= resp.status < 300:
                raise DownloadFailed(url, f"HTTP {resp.status}")

            # Only file errors become StorageError; transport errors while
            # reading the body propagate to the retry loop.
            try:
                f = await aiofiles.open(dest, 'wb')
            except OSError as e:
                raise StorageError(dest, str(e)) from e
            async with f:
                async for chunk in resp.content.iter_chunked(CHUNK_SIZE):
                    hash_sha1.update(chunk)
                    try:
                        await f.write(chunk)
                    except OSError as e:
                        raise StorageError(dest, str(e)) from e

        return hash_sha1.hexdigest()
