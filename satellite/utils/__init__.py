"""Common utilities."""

from .async_http import AsyncHTTPClient
from .cancel import CancelToken
from .events import EventEmitter, EventKind, LauncherEvent
from .logger import setup_logging
from .maven import library_path, library_url

__all__ = [
    "AsyncHTTPClient",
    "CancelToken",
    "EventEmitter",
    "EventKind",
    "LauncherEvent",
    "library_path",
    "library_url",
    "setup_logging",
]
