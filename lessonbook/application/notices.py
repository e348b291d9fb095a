import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable


logger = logging.getLogger(__name__)


class NoticeLevel(str, Enum):
    INFO = "INFO"
    SUCCESS = "SUCCESS"
    BLOCKING = "BLOCKING"
    ERROR = "ERROR"


@dataclass(frozen=True)
class Notice:
    level: NoticeLevel
    message: str


NoticeListener = Callable[[Notice], None]

_LOG_LEVELS = {
    NoticeLevel.INFO: logging.INFO,
    NoticeLevel.SUCCESS: logging.INFO,
    NoticeLevel.BLOCKING: logging.WARNING,
    NoticeLevel.ERROR: logging.ERROR,
}


class NoticeBoard:
    """Collects user-facing messages and forwards them to listeners."""

    def __init__(self) -> None:
        self.history: list[Notice] = []
        self._listeners: list[NoticeListener] = []

    def subscribe(self, listener: NoticeListener) -> None:
        self._listeners.append(listener)

    def publish(self, level: NoticeLevel, message: str) -> Notice:
        notice = Notice(level=level, message=message)
        self.history.append(notice)
        logger.log(_LOG_LEVELS[level], "%s notice: %s", level.value, message)

        for listener in self._listeners:
            listener(notice)

        return notice

    def latest(self) -> Notice | None:
        return self.history[-1] if self.history else None
