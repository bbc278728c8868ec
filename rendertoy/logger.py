"""Console logger with a timestamp and a coloured level tag on every line."""

from __future__ import annotations

import enum
import sys
import threading
import time
from typing import Any, Optional, TextIO

import numpy as np

RESET = "\033[0m"
RED = "\033[31m"
YELLOW = "\033[33m"
CYAN = "\033[36m"


class LogLevel(enum.Enum):
    INFO = 0
    WARNING = 1
    CRITICAL = 2

    @property
    def tag(self) -> str:
        """The coloured four-letter tag printed for this level."""
        return _TAGS[self]


_TAGS = {
    LogLevel.INFO: f"{CYAN}INFO{RESET}",
    LogLevel.WARNING: f"{YELLOW}WARN{RESET}",
    LogLevel.CRITICAL: f"{RED}CRIT{RESET}",
}


def format_vector(vector: Any) -> str:
    """Render a vector as ``(a,b,c)`` with the shortest general float form."""
    return "(" + ",".join(f"{float(c):g}" for c in vector) + ")"


def _format(item: Any) -> str:
    if isinstance(item, np.ndarray) and item.ndim == 1:
        return format_vector(item)
    return str(item)


class Logger:
    """Writes ``<date time> <TAG> <message>`` lines; safe to share between threads.

    Message parts are concatenated as given; one-dimensional numpy arrays are
    written with :func:`format_vector`.
    """

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream
        self._lock = threading.Lock()

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def log(self, level: LogLevel, *args: Any) -> None:
        stamp = time.strftime("%Y-%m-%d %X", time.localtime())
        message = "".join(_format(a) for a in args)
        with self._lock:
            self.stream.write(f"{stamp} {level.tag} {message}\n")
            self.stream.flush()

    def info(self, *args: Any) -> None:
        self.log(LogLevel.INFO, *args)

    def warn(self, *args: Any) -> None:
        self.log(LogLevel.WARNING, *args)

    def crit(self, *args: Any) -> None:
        self.log(LogLevel.CRITICAL, *args)


_instance = Logger()


def get_logger() -> Logger:
    """The process-wide logger writing to standard output."""
    return _instance