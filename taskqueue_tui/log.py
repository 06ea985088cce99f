"""Log records routed to the TUI activity pane."""

from __future__ import annotations

import logging
import queue
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

_STANDARD_ATTRS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", (), None).__dict__
) | {"message", "asctime", "taskName"}


@dataclass(frozen=True)
class LogEntry:
    """One line of the activity pane."""

    time: datetime
    message: str


def _offer(log_queue: queue.Queue, entry: LogEntry) -> None:
    try:
        log_queue.put_nowait(entry)
    except queue.Full:
        pass


class LogHandler(logging.Handler):
    """Logging handler that puts records on a queue, dropping them when it is full."""

    def __init__(self, log_queue: queue.Queue, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.log_queue = log_queue

    def emit(self, record: logging.LogRecord) -> None:
        message = record.getMessage() + "".join(
            f" {name}={value}"
            for name, value in record.__dict__.items()
            if name not in _STANDARD_ATTRS
        )
        _offer(self.log_queue, LogEntry(datetime.fromtimestamp(record.created), message))


class LogWriter:
    """Text sink that puts each non-blank write on a queue."""

    def __init__(self, log_queue: queue.Queue) -> None:
        self.log_queue = log_queue

    def write(self, text: str) -> int:
        message = text.strip()
        if message:
            _offer(self.log_queue, LogEntry(datetime.now(), message))
        return len(text)


def wait_for_log(log_queue: queue.Queue) -> Callable[[], LogEntry | None]:
    """Command that blocks for the next entry; a None on the queue marks it closed."""

    def command() -> LogEntry | None:
        return log_queue.get()

    return command