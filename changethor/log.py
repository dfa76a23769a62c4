"""Console logging setup."""

import logging
from enum import Enum

from rich.console import Console
from rich.logging import RichHandler

# Chatty per-request loggers; their failures surface through our own messages.
_QUIET_LOGGERS = ("httpx", "httpcore")


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


def setup_logging(level: LogLevel = LogLevel.INFO) -> None:
    logging.basicConfig(
        level=LogLevel(level).value,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_path=False)],
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
