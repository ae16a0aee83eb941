"""Launcher exception hierarchy."""

from pathlib import Path
from typing import Optional, Union


class LauncherError(Exception):
    """Base class for every failure raised by the launch pipeline."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason
        self.stage: Optional[str] = None

    def __str__(self) -> str:
        if self.stage:
            return f"[{self.stage}] {self.reason}"
        return self.reason


class NetworkError(LauncherError):
    def __init__(self, url: str, reason: str):
        super().__init__(f"Network error for {url}: {reason}")
        self.url = url


class MalformedResponse(LauncherError):
    def __init__(self, url: str, reason: str):
        super().__init__(f"Malformed response from {url}: {reason}")
        self.url = url


class VersionNotFound(LauncherError):
    def __init__(self, version: str):
        super().__init__(f"Version '{version}' not found")
        self.version = version


class DownloadFailed(LauncherError):
    def __init__(self, url: str, reason: str):
        super().__init__(f"Download failed for {url}: {reason}")
        self.url = url


class StorageError(LauncherError):
    def __init__(self, path: Union[str, Path], reason: str = ""):
        message = f"Storage error at {path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.path = Path(path)


class MalformedCoordinate(LauncherError):
    def __init__(self, coordinate: str):
        super().__init__(f"Malformed library coordinate: '{coordinate}'")
        self.coordinate = coordinate


class LaunchFailed(LauncherError):
    def __init__(self, reason: str):
        super().__init__(f"Failed to launch Minecraft: {reason}")


class ConfigValidationError(LauncherError):
    def __init__(self, field: str, message: str):
        super().__init__(f"Configuration validation error in field '{field}': {message}")
        self.field = field


class PipelineCancelled(LauncherError):
    def __init__(self):
        super().__init__("Launch cancelled")
