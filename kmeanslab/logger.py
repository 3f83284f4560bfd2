"""A small multi-handler logger: a root handler plus named stream and file handlers."""

from __future__ import annotations

import os
import sys
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Optional, TextIO

from kmeanslab.logformat import (
    DATE_FORMAT_SLASHED,
    DATE_FORMAT_TIME,
    DEFAULT_FILE_MODE,
    DEFAULT_FILE_NAME,
    MAX_HANDLERS,
    ROOT_HANDLER_NAME,
    Formatter,
    Level,
    Record,
    color_fmt1,
    dump_log,
    no_color_fmt1,
)

DumpFn = Callable[[Record], None]
LockFn = Callable[[bool], None]

_MODIFIABLE_MEMBERS = frozenset({"dump_fn", "fmt_fn", "level", "quiet", "date_fmt"})


@dataclass
class Handler:
    """A named destination for log records with its own level and format."""

    name: str
    dump_fn: Optional[DumpFn] = dump_log
    fmt_fn: Formatter = color_fmt1
    stream: TextIO = field(default_factory=lambda: sys.stderr)
    level: Level = Level.TRACE
    quiet: bool = False
    date_fmt: str = DATE_FORMAT_TIME

    def accepts(self, level: Level) -> bool:
        return not self.quiet and level >= self.level


class Logger:
    """Dispatches each message to the root handler and then to every added handler."""

    def __init__(self) -> None:
        self._lock_fn: Optional[LockFn] = None
        self._guard = threading.Lock()
        self.handlers: list[Handler] = [Handler(name=ROOT_HANDLER_NAME)]

    def _add_handler(self, handler: Handler) -> Handler:
        if len(self.handlers) >= MAX_HANDLERS:
            raise RuntimeError(f"maximum number of handlers reached: {MAX_HANDLERS}")
        self.handlers.append(handler)
        return handler

    @staticmethod
    def _check(level: Any, name: Optional[str]) -> Level:
        if not name:
            raise ValueError("a handler needs a name")
        return Level(level)

    def add_file_handler(
        self,
        filename: Optional[str] = None,
        filemode: Optional[str] = None,
        level: Any = Level.INFO,
        name: Optional[str] = None,
    ) -> Handler:
        """Open a file and add a handler writing uncoloured lines to it."""
        checked = self._check(level, name)
        stream = open(filename or DEFAULT_FILE_NAME, filemode or DEFAULT_FILE_MODE)
        try:
            return self._add_handler(
                Handler(
                    name=name,
                    dump_fn=dump_log,
                    fmt_fn=no_color_fmt1,
                    stream=stream,
                    level=checked,
                    date_fmt=DATE_FORMAT_SLASHED,
                )
            )
        except RuntimeError:
            stream.close()
            raise

    def add_stream_handler(
        self,
        stream: Optional[TextIO] = None,
        level: Any = Level.INFO,
        name: Optional[str] = None,
    ) -> Handler:
        """Add a handler writing coloured lines to a stream (stderr by default)."""
        checked = self._check(level, name)
        return self._add_handler(
            Handler(
                name=name,
                dump_fn=dump_log,
                fmt_fn=color_fmt1,
                stream=stream if stream is not None else sys.stderr,
                level=checked,
                date_fmt=DATE_FORMAT_TIME,
            )
        )

    def set_attribute(self, name: Optional[str], member: str, value: Any) -> None:
        """Change one modifiable setting of the handler called name (root if None)."""
        name = name or ROOT_HANDLER_NAME
        if member not in _MODIFIABLE_MEMBERS:
            raise AttributeError(f"handler's member can't be modified: {member}")
        if member == "level":
            value = Level(value)
        elif member == "quiet":
            value = bool(value)
        for handler in self.handlers:
            if handler.name == name:
                setattr(handler, member, value)
                return
        raise KeyError(f"handler's name not found: {name}")

    def set_lock(self, fn: Optional[LockFn]) -> None:
        """Install a callable invoked with True before and False after each message."""
        self._lock_fn = fn

    def _emit(self, level: Any, msg: str, args: tuple[Any, ...], depth: int) -> None:
        level = Level(level)
        frame = sys._getframe(depth)
        file = os.path.basename(frame.f_code.co_filename)
        line = frame.f_lineno
        with self._guard:
            if self._lock_fn is not None:
                self._lock_fn(True)
            try:
                moment: Optional[datetime] = None
                for index, handler in enumerate(self.handlers):
                    if handler.dump_fn is None:
                        if index == 0:
                            continue
                        break
                    if not handler.accepts(level):
                        continue
                    if moment is None:
                        moment = datetime.now()
                    handler.dump_fn(
                        Record(
                            level=level,
                            file=file,
                            line=line,
                            message=msg,
                            args=args,
                            time=moment,
                            handler_name=handler.name,
                            formatter=handler.fmt_fn,
                            stream=handler.stream,
                            date_fmt=handler.date_fmt,
                        )
                    )
            finally:
                if self._lock_fn is not None:
                    self._lock_fn(False)

    def log(self, level: Any, msg: str, *args: Any) -> None:
        """Log msg % args at the given level."""
        self._emit(level, msg, args, 2)

    def trace(self, msg: str, *args: Any) -> None:
        self._emit(Level.TRACE, msg, args, 2)

    def debug(self, msg: str, *args: Any) -> None:
        self._emit(Level.DEBUG, msg, args, 2)

    def info(self, msg: str, *args: Any) -> None:
        self._emit(Level.INFO, msg, args, 2)

    def warn(self, msg: str, *args: Any) -> None:
        self._emit(Level.WARN, msg, args, 2)

    def error(self, msg: str, *args: Any) -> None:
        self._emit(Level.ERROR, msg, args, 2)

    def fatal(self, msg: str, *args: Any) -> None:
        self._emit(Level.FATAL, msg, args, 2)


_DEFAULT_LOGGER: Optional[Logger] = None
_DEFAULT_LOCK = threading.Lock()


def get_logger() -> Logger:
    """Return the process-wide logger, creating it on first use."""
    global _DEFAULT_LOGGER
    with _DEFAULT_LOCK:
        if _DEFAULT_LOGGER is None:
            _DEFAULT_LOGGER = Logger()
        return _DEFAULT_LOGGER