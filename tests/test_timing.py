from __future__ import annotations

import logging

from lyrics_parser.core.model import Font, Line
from lyrics_parser.core.timing import (
    DEFAULT_DURATION_MS,
    FontTiming,
    LineTiming,
    duration,
    effective_end,
    effective_start,
    resolve_fonts,
    resolve_line,
)


def test_end_from_next_line_start():
    lines = [Line(start=1000, text="a"), Line(start=5000, text="b")]
    assert effective_end(lines, 0) == 5000


def test_last_line_end_is_open():
    lines = [Line(start=1000, text="a")]
    assert effective_end(lines, 0) is None
    assert resolve_line(lines, 0) == LineTiming(start=1000, end=None, duration=DEFAULT_DURATION_MS)


def test_start_without_previous_is_zero():
    assert effective_start([Line(text="a")], 0) == 0


def test_start_falls_back_to_previous_end_then_start():
    assert effective_start([Line(start=0, end=2000), Line()], 1) == 2000
    assert effective_start([Line(start=700), Line()], 1) == 700


def test_duration():
    assert duration(1000, 3500) == 2500
    assert duration(1000, None) == 1000
    assert duration(None, 3500, default=250) == 250


def test_font_without_duration_or_next_defaults():
    assert resolve_fonts([Font(length=1)], 500) == [FontTiming(start=500, duration=1000, length=1)]


def test_font_chain():
    fonts = [Font(length=2, start=100, duration=200), Font(length=1), Font(length=1, start=900)]
    assert resolve_fonts(fonts, 0) == [
        FontTiming(100, 200, 2),
        FontTiming(300, 600, 1),
        FontTiming(900, 1000, 1),
    ]
    # resolving does not write back
    assert fonts[1].start is None


def test_out_of_order_fonts_warn_and_use_default(caplog):
    fonts = [Font(length=1, start=500), Font(length=1, start=200)]
    with caplog.at_level(logging.WARNING):
        timings = resolve_fonts(fonts, 0, default=800)
    assert timings[0].duration == 800
    assert "after the next font" in caplog.text


def test_earlier_next_start_leaves_line_open():
    lines = [Line(start=5000, text="b"), Line(start=1000, text="a")]
    assert effective_end(lines, 0) is None
    assert resolve_line(lines, 0) == LineTiming(start=5000, end=None, duration=DEFAULT_DURATION_MS)


def test_end_before_start_uses_default_duration():
    assert duration(5000, 1000, default=300) == 300
