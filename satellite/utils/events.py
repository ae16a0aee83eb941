"""Progress and log notifications for launcher listeners."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class EventKind(str, Enum):
    LOG = "log"
    PROGRESS = "progress"
    ERROR = "error"


@dataclass(frozen=True)
class LauncherEvent:
    kind: EventKind
    message: str
    progress: Optional[float] = None


Listener = Callable[[LauncherEvent], None]


class EventEmitter:
    """Fire-and-forget event dispatch.

    Every event is mirrored to the module logger. A listener that raises is
    logged and otherwise ignored, so notifications can never fail a launch.
    """

    def __init__(self, listener: Optional[Listener] = None):
        self.listener = listener

    def _emit(self, event: LauncherEvent):
        if self.listener is None:
            return
        try:
            self.listener(event)
        except Exception:
            logger.debug("Event listener failed for %r", event, exc_info=True)

    def log(self, message: str):
        logger.info(message)
        self._emit(LauncherEvent(EventKind.LOG, message))

    def progress(self, done: int, total: int, label: str = ""):
        fraction = 1.0 if total <= 0 else done / total
        message = f"{label} {done}/{total}".strip()
        logger.debug(message)
        self._emit(LauncherEvent(EventKind.PROGRESS, message, fraction))

    def error(self, message: str):
        logger.error(message)
        self._emit(LauncherEvent(EventKind.ERROR, message))
