from __future__ import annotations

import logging
from typing import NamedTuple, Sequence

from .model import Font, Line

logger = logging.getLogger(__name__)

DEFAULT_DURATION_MS = 1000


class LineTiming(NamedTuple):
    start: int
    end: int | None
    duration: int


class FontTiming(NamedTuple):
    start: int
    duration: int
    length: int


def effective_start(lines: Sequence[Line], index: int) -> int:
    """
    Own start, else previous line's end, else previous line's start, else 0.
    """
    line = lines[index]
    if line.start is not None:
        return line.start
    if index > 0:
        prev = lines[index - 1]
        if prev.end is not None:
            return prev.end
        if prev.start is not None:
            return prev.start
    return 0


def effective_end(lines: Sequence[Line], index: int) -> int | None:
    """Own end, else next line's start if it is not earlier; None means open-ended."""
    line = lines[index]
    if line.end is not None:
        return line.end
    if index + 1 < len(lines):
        nxt = lines[index + 1].start
        if nxt is not None and nxt >= effective_start(lines, index):
            return nxt
    return None


def duration(start: int | None, end: int | None, default: int = DEFAULT_DURATION_MS) -> int:
    if start is None or end is None or end < start:
        return default
    return end - start


def resolve_line(lines: Sequence[Line], index: int, default: int = DEFAULT_DURATION_MS) -> LineTiming:
    start = effective_start(lines, index)
    end = effective_end(lines, index)
    return LineTiming(start=start, end=end, duration=duration(start, end, default))


def resolve_fonts(
    fonts: Sequence[Font], line_start: int, default: int = DEFAULT_DURATION_MS
) -> list[FontTiming]:
    """
    Fill in font timing the same way lines are resolved:
    start falls back to the end of the previous font, then to the line start;
    duration falls back to the gap up to the next font's start, then to `default`.
    """
    out: list[FontTiming] = []
    for i, font in enumerate(fonts):
        if font.start is not None:
            start = font.start
        elif out:
            start = out[-1].start + out[-1].duration
        else:
            start = line_start

        if font.duration is not None:
            dur = font.duration
        else:
            nxt_start = fonts[i + 1].start if i + 1 < len(fonts) else None
            if nxt_start is not None and nxt_start < start:
                # font starts are expected to increase within a line
                logger.warning(
                    "Font %d starts at %s, after the next font (%s); using default duration",
                    i,
                    start,
                    nxt_start,
                )
            dur = duration(start, nxt_start, default)
        out.append(FontTiming(start=start, duration=dur, length=font.length))
    return out
