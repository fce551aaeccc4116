from __future__ import annotations

import json
from dataclasses import replace
from typing import Any

import regex

from lyrics_parser.core.errors import MalformedInputError
from lyrics_parser.core.model import Document, ExtraInfo, Line
from lyrics_parser.core.rules import Rule
from lyrics_parser.core.timing import DEFAULT_DURATION_MS
from lyrics_parser.core.translation import bind_translation


class LyricsFormat:
    """
    Format adapter consumed by LyricsParser.

    Subclasses supply the note patterns and info rules for reading and a
    `compile` routine for writing. To extend another format, copy its
    `note_rules()` / `info_rules()` lists and append to them.
    """

    name: str

    def __init__(self, *, default_duration_ms: int = DEFAULT_DURATION_MS):
        self.default_duration_ms = default_duration_ms

    def note_rules(self) -> list[regex.Pattern]:
        return []

    def info_rules(self) -> list[Rule]:
        return []

    def preprocess(self, text: str, doc: Document, extra_info: ExtraInfo) -> str:
        """Unwrap any envelope; returns the line-oriented lyric text."""
        return text

    def postprocess(self, doc: Document, extra_info: ExtraInfo) -> None:
        translation = extra_info.get("translation")
        if isinstance(translation, Document):
            bind_translation(doc, translation)

    def compile(self, doc: Document) -> str:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"


def update_last_line(doc: Document, **changes: Any) -> list[Line] | None:
    """Copy of `doc.lines` with the most recent line updated; unchanged when there is none."""
    if not doc.lines:
        return doc.lines
    return [*doc.lines[:-1], replace(doc.lines[-1], **changes)]


def decode_json(text: str, what: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedInputError(f"Invalid {what} JSON: {e}") from e
