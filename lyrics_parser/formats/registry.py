from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable

from .base import LyricsFormat
from .lmlrc import LmlrcFormat
from .lrc import LrcFormat
from .nrc import NrcFormat
from .qrc import QrcFormat

logger = logging.getLogger(__name__)


class UnknownFormatError(KeyError):
    pass


FORMATS: dict[str, Callable[..., LyricsFormat]] = {
    "lrc": LrcFormat,
    "lmlrc": lambda **kw: LmlrcFormat("text", **kw),
    "lmlrc-json": lambda **kw: LmlrcFormat("json", **kw),
    "nrc": NrcFormat,
    "qrc": lambda **kw: QrcFormat("xml", **kw),
    "qrc-text": lambda **kw: QrcFormat("text", **kw),
}

_ALIASES = {
    "lmlrc_json": "lmlrc-json",
    "lmlrc.json": "lmlrc-json",
    "qrc_text": "qrc-text",
    "qrc-xml": "qrc",
}

_SUFFIXES = {
    ".lrc": "lrc",
    ".lmlrc": "lmlrc",
    ".nrc": "nrc",
    ".qrc": "qrc",
}


def get_format(name: str, **options: Any) -> LyricsFormat:
    key = name.strip().lower()
    key = _ALIASES.get(key, key)
    try:
        factory = FORMATS[key]
    except KeyError:
        raise UnknownFormatError(f"Unknown format {name!r}, expected one of: {', '.join(FORMATS)}") from None
    return factory(**options)


def guess_format(path: Path) -> str | None:
    """Format name from a file suffix; `song.lmlrc.json` -> lmlrc-json."""
    suffixes = [s.lower() for s in path.suffixes]
    if suffixes[-2:] == [".lmlrc", ".json"]:
        return "lmlrc-json"
    name = _SUFFIXES.get(suffixes[-1]) if suffixes else None
    if name is None:
        logger.debug("No format known for suffix of %s", path.name)
    return name
