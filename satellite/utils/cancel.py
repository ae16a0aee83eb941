"""Cooperative cancellation for the launch pipeline."""

import asyncio

from ..errors import PipelineCancelled


class CancelToken:
    """Checked between artifact fetches; never interrupts a write in progress."""

    def __init__(self):
        self._event = asyncio.Event()

    def cancel(self):
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self):
        if self._event.is_set():
            raise PipelineCancelled()
