"""Log levels, log records and the stock formatters that render them."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Any, Callable, Optional, TextIO

LOG_VERSION = "0.1.0"
MAX_HANDLERS = 29
ROOT_HANDLER_NAME = "root"
DEFAULT_FILE_NAME = "logger/program.log"
DEFAULT_FILE_MODE = "a"

DATE_FORMAT_TIME = "%H:%M:%S"
DATE_FORMAT_DATE = "%Y-%m-%d"
DATE_FORMAT_SLASHED = "%Y/%m/%d %H:%M:%S"
DATE_FORMAT_DATETIME = "%Y-%m-%d %H:%M:%S"
DATE_FORMAT_RFC2822 = "%a, %d %b %Y %H:%M:%S %z"
DATE_FORMAT_ISO8601 = "%Y-%m-%dT%H:%M:%S%z"

# Rendered timestamps longer than this are dropped, as a fixed 32-byte buffer would.
_MAX_TIME_TEXT = 31

RESET = "\x1b[0m"
GREY = "\x1b[90m"

_LABELS = ("TRACE", "DEBUG", "INFO", "WARN", "ERROR", "FATAL")
_COLORS = ("\x1b[94m", "\x1b[36m", "\x1b[32m", "\x1b[33m", "\x1b[31m", "\x1b[35m")


class Level(IntEnum):
    """Severity of a log message, ordered from least to most severe."""

    TRACE = 0
    DEBUG = 1
    INFO = 2
    WARN = 3
    ERROR = 4
    FATAL = 5

    @property
    def label(self) -> str:
        return _LABELS[self.value]

    @property
    def color(self) -> str:
        return _COLORS[self.value]


Formatter = Callable[["Record", str], str]


@dataclass
class Record:
    """One log message, together with the settings of the handler emitting it."""

    level: Level
    file: str
    line: int
    message: str
    args: tuple[Any, ...] = ()
    time: Optional[datetime] = None
    handler_name: str = ROOT_HANDLER_NAME
    formatter: Optional[Formatter] = None
    stream: TextIO = field(default_factory=lambda: sys.stderr)
    date_fmt: str = DATE_FORMAT_TIME

    def __post_init__(self) -> None:
        self.level = Level(self.level)

    @property
    def text(self) -> str:
        """The message with its arguments substituted printf-style."""
        return self.message % self.args if self.args else self.message


def _time_text(record: Record) -> str:
    moment = record.time if record.time is not None else datetime.now()
    text = moment.strftime(record.date_fmt)
    return "" if len(text) > _MAX_TIME_TEXT else text


def dump_log(record: Record) -> None:
    """Write the formatted record, followed by a newline, to its stream and flush."""
    formatter = record.formatter or color_fmt1
    prefix = formatter(record, _time_text(record))
    record.stream.write(f"{prefix}{record.text}\n")
    record.stream.flush()


def color_fmt1(record: Record, time_text: str) -> str:
    """Coloured prefix: time, level and source location."""
    return (
        f"{time_text} {record.level.color}{record.level.label:<5}{RESET} "
        f"{GREY}[{record.file}:{record.line}]:{RESET} "
    )


def color_fmt2(record: Record, time_text: str) -> str:
    """Coloured prefix that also names the handler."""
    return (
        f"{time_text} ({record.handler_name}) "
        f"{record.level.color}{record.level.label:<5}{RESET} "
        f"{GREY}[{record.file}:{record.line}]:{RESET} "
    )


def no_color_fmt1(record: Record, time_text: str) -> str:
    """Plain prefix: time, level and source location."""
    return f"{time_text} {record.level.label:<5} [{record.file}:{record.line}]: "


def no_color_fmt2(record: Record, time_text: str) -> str:
    """Plain prefix that also names the handler."""
    return (
        f"{time_text} ({record.handler_name}) {record.level.label:<5} "
        f"[{record.file}:{record.line}]: "
    )