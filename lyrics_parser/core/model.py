from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Union

from .errors import MalformedInputError


@dataclass(slots=True)
class Font:
    """Karaoke sub-span of a line: `length` characters highlighted for `duration` ms."""

    length: int
    start: int | None = None
    duration: int | None = None

    def __post_init__(self) -> None:
        if self.length <= 0:
            raise ValueError(f"Font length must be positive, got {self.length}")


@dataclass(slots=True)
class Line:
    start: int | None = None
    end: int | None = None
    text: str | None = None
    translation: str | None = None
    fonts: list[Font] | None = None


@dataclass(slots=True)
class Document:
    title: str | None = None
    artist: str | None = None
    album: str | None = None
    author: str | None = None
    translation_author: str | None = None
    version: str | None = None
    translation_version: str | None = None
    offset: int | float | None = None
    lines: list[Line] | None = None

    def to_dict(self) -> dict[str, Any]:
        """
        JSON-shaped view of the document.
        Unset fields are omitted, keys use the interchange (camelCase) names.
        """
        out: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None or f.name == "lines":
                continue
            out[_JSON_KEYS.get(f.name, f.name)] = value
        if self.lines is not None:
            out["lines"] = [_line_to_dict(ln) for ln in self.lines]
        return out

    @classmethod
    def from_dict(cls, data: Any) -> "Document":
        if not isinstance(data, dict):
            raise MalformedInputError(f"Expected a JSON object, got {type(data).__name__}")
        doc = cls()
        for name in DOCUMENT_FIELDS:
            key = _JSON_KEYS.get(name, name)
            if key not in data or name == "lines":
                continue
            types = (int, float) if name == "offset" else (str,)
            setattr(doc, name, _checked(data, key, types))
        raw_lines = data.get("lines")
        if raw_lines is not None:
            if not isinstance(raw_lines, list):
                raise MalformedInputError("'lines' must be a list")
            doc.lines = [_line_from_dict(raw) for raw in raw_lines]
        return doc


# Side channel between read stages, e.g. {"translation": Document(...)}
ExtraInfo = dict[str, Union[str, int, float, bool, Document]]

DOCUMENT_FIELDS: tuple[str, ...] = tuple(f.name for f in fields(Document))

_JSON_KEYS = {
    "translation_author": "translationAuthor",
    "translation_version": "translationVersion",
}


def _line_to_dict(line: Line) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for name in ("start", "end", "text", "translation"):
        value = getattr(line, name)
        if value is not None:
            out[name] = value
    if line.fonts is not None:
        out["fonts"] = [
            {k: v for k, v in (("start", f.start), ("duration", f.duration), ("length", f.length)) if v is not None}
            for f in line.fonts
        ]
    return out


def _checked(raw: dict[str, Any], key: str, types: tuple[type, ...]) -> Any:
    value = raw.get(key)
    # bool is an int subclass but never a valid time or text
    if value is not None and (isinstance(value, bool) or not isinstance(value, types)):
        raise MalformedInputError(f"'{key}' must be {' or '.join(t.__name__ for t in types)}, got {value!r}")
    return value


def _font_from_dict(raw: Any) -> Font:
    if not isinstance(raw, dict):
        raise MalformedInputError(f"Expected a font object, got {type(raw).__name__}")
    length = _checked(raw, "length", (int,))
    if length is None or length <= 0:
        raise MalformedInputError(f"Font length must be a positive integer, got {length!r}")
    return Font(length=length, start=_checked(raw, "start", (int,)), duration=_checked(raw, "duration", (int,)))


def _line_from_dict(raw: Any) -> Line:
    if not isinstance(raw, dict):
        raise MalformedInputError(f"Expected a line object, got {type(raw).__name__}")
    fonts = raw.get("fonts")
    if fonts is not None and not isinstance(fonts, list):
        raise MalformedInputError("'fonts' must be a list")
    return Line(
        start=_checked(raw, "start", (int,)),
        end=_checked(raw, "end", (int,)),
        text=_checked(raw, "text", (str,)),
        translation=_checked(raw, "translation", (str,)),
        fonts=None if fonts is None else [_font_from_dict(f) for f in fonts],
    )
