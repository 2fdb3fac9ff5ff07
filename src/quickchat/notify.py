"""
User-facing notifications.

Notices are fire-and-forget: the core hands them to a sink and moves on.
Coalescing repeated messages is left to whatever presents them.
"""

import logging
from enum import Enum
from typing import Callable, NamedTuple, Optional

logger = logging.getLogger(__name__)


class NoticeKind(str, Enum):
    ERROR = "error"
    INFO = "info"


class Notice(NamedTuple):
    kind: NoticeKind
    message: str


NotificationSink = Callable[[Notice], None]


def logging_sink(notice: Notice) -> None:
    level = logging.ERROR if notice.kind is NoticeKind.ERROR else logging.INFO
    logger.log(level, notice.message)


class Notifier:
    def __init__(self, sink: Optional[NotificationSink] = None):
        self._sink = sink or logging_sink

    def error(self, message: str) -> None:
        self._emit(Notice(NoticeKind.ERROR, message))

    def info(self, message: str) -> None:
        self._emit(Notice(NoticeKind.INFO, message))

    def _emit(self, notice: Notice) -> None:
        logger.debug("notice %s: %s", notice.kind.value, notice.message)
        self._sink(notice)
