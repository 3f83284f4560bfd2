import io
import re
from datetime import datetime

import pytest

from kmeanslab.logformat import (
    Level,
    Record,
    color_fmt1,
    color_fmt2,
    dump_log,
    no_color_fmt1,
    no_color_fmt2,
)

MOMENT = datetime(2025, 1, 2, 3, 4, 5)


def make_record(stream=None, **kwargs):
    defaults = dict(
        level=Level.INFO,
        file="main.c",
        line=10,
        message="hello",
        time=MOMENT,
        stream=stream if stream is not None else io.StringIO(),
    )
    defaults.update(kwargs)
    return Record(**defaults)


def test_level_labels_follow_severity_order():
    labels = [Level(value).label for value in range(6)]
    assert labels == ["TRACE", "DEBUG", "INFO", "WARN", "ERROR", "FATAL"]
    prefixes = [no_color_fmt1(make_record(level=value), "T") for value in range(6)]
    assert prefixes[0] == "T TRACE [main.c:10]: "
    assert prefixes[5] == "T FATAL [main.c:10]: "


def test_level_colors():
    assert Level(0).color == "\x1b[94m"
    assert Level(5).color == "\x1b[35m"
    colors = {color_fmt1(make_record(level=value), "T")[2:7] for value in range(6)}
    assert len(colors) == 6


def test_record_coerces_int_level():
    record = make_record(level=3)
    assert record.level is Level.WARN


def test_no_color_fmt1_pinned():
    record = make_record()
    assert no_color_fmt1(record, "03:04:05") == "03:04:05 INFO  [main.c:10]: "


def test_no_color_fmt2_includes_handler_name():
    record = make_record(handler_name="console", level=Level.ERROR)
    prefix = no_color_fmt2(record, "T")
    assert prefix == "T (console) ERROR [main.c:10]: "


@pytest.mark.parametrize("level", list(Level))
def test_color_fmt1_wraps_label_in_color(level):
    record = make_record(level=level)
    prefix = color_fmt1(record, "T")
    assert prefix.startswith("T " + level.color + level.label)
    assert prefix.endswith("\x1b[0m ")
    assert "[main.c:10]:" in prefix


def test_color_fmt2_has_handler_and_color():
    record = make_record(handler_name="file1", level=Level.DEBUG)
    prefix = color_fmt2(record, "T")
    assert prefix.startswith("T (file1) " + Level.DEBUG.color)
    assert "\x1b[90m[main.c:10]:\x1b[0m " in prefix


def test_plain_and_colored_agree_after_stripping_escapes():
    record = make_record(level=Level.WARN)
    colored = re.sub(r"\x1b\[\d+m", "", color_fmt1(record, "T"))
    assert colored == no_color_fmt1(record, "T")


def test_dump_log_formats_message_with_args():
    stream = io.StringIO()
    record = make_record(stream, message="Loaded %d rows", args=(150,), formatter=no_color_fmt1)
    dump_log(record)
    assert stream.getvalue() == no_color_fmt1(record, "03:04:05") + "Loaded 150 rows\n"


def test_dump_log_uses_date_format():
    stream = io.StringIO()
    record = make_record(stream, date_fmt="%Y/%m/%d %H:%M:%S", formatter=no_color_fmt1)
    dump_log(record)
    assert stream.getvalue().startswith("2025/01/02 03:04:05 INFO")


def test_dump_log_drops_overlong_time_text():
    stream = io.StringIO()
    record = make_record(stream, date_fmt="%Y-%m-%d " * 5, formatter=no_color_fmt1)
    dump_log(record)
    assert stream.getvalue() == no_color_fmt1(record, "") + "hello\n"


def test_dump_log_without_args_keeps_percent():
    stream = io.StringIO()
    record = make_record(stream, message="100% done", formatter=no_color_fmt1)
    dump_log(record)
    assert stream.getvalue().endswith("100% done\n")


def test_dump_log_defaults_to_color_formatter_and_current_time():
    stream = io.StringIO()
    record = make_record(stream, time=None)
    dump_log(record)
    output = stream.getvalue()
    assert re.match(r"\d\d:\d\d:\d\d ", output)
    assert Level.INFO.color in output
    assert output.endswith("hello\n")


def test_dump_log_flushes_stream():
    class CountingStream(io.StringIO):
        flushes = 0

        def flush(self):
            self.flushes += 1
            super().flush()

    stream = CountingStream()
    dump_log(make_record(stream))
    assert stream.flushes == 1