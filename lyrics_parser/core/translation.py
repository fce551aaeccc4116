from __future__ import annotations

import logging
from typing import Sequence

from .model import Document, Line

logger = logging.getLogger(__name__)

# (start distance, end distance); None when either side lacks the timestamp
Distance = tuple[int | None, int | None]


def _gap(a: int | None, b: int | None) -> int | None:
    if a is None or b is None:
        return None
    return abs(a - b)


def _smaller(a: int | None, b: int | None) -> bool:
    # a defined distance beats an undefined one
    return a is not None and (b is None or a < b)


def _closer(candidate: Distance, best: Distance) -> bool:
    c_start, c_end = candidate
    b_start, b_end = best
    if _smaller(c_start, b_start):
        return True
    if c_start == b_start:
        return _smaller(c_end, b_end)
    return False


def closest_line(lines: Sequence[Line], target: Line) -> Line | None:
    """
    Line nearest to `target` by start time, ties broken by end time.
    Lines sharing no timestamp with the target are never picked.
    """
    best: Line | None = None
    best_dist: Distance = (None, None)
    for line in lines:
        dist = (_gap(line.start, target.start), _gap(line.end, target.end))
        if _closer(dist, best_dist):
            best, best_dist = line, dist
    return best


def bind_translation(doc: Document, translation: Document) -> Document:
    """
    Attach the lines of a separately parsed translation document to the
    nearest lines of `doc`, and copy the translation's author/version.
    """
    if translation.author is not None:
        doc.translation_author = translation.author
    if translation.version is not None:
        doc.translation_version = translation.version

    lines = doc.lines or []
    unbound = 0
    for t_line in translation.lines or []:
        target = closest_line(lines, t_line)
        if target is None:
            unbound += 1
            continue
        target.translation = t_line.text
    if unbound:
        logger.debug("%d translation line(s) had no timed counterpart", unbound)
    return doc
