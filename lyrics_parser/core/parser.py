from __future__ import annotations

import logging
from dataclasses import replace
from enum import Enum
from typing import TYPE_CHECKING

from .errors import PreconditionError
from .model import Document, ExtraInfo
from .rules import Rule, read_line, remove_blank_lines, split_to_lines, strip_notes
from .translation import bind_translation

if TYPE_CHECKING:
    import regex

    from lyrics_parser.formats.base import LyricsFormat

logger = logging.getLogger(__name__)


class ParserState(Enum):
    CREATED = "created"
    GOT_TEXT = "got_text"
    GOT_INFO = "got_info"


class LyricsParser:
    """
    Converts lyric text to a Document (read) and back (write) for one format.

    Setting `text` or `info` decides which direction is available; each
    direction runs once and is a no-op until new input is set.
    Not safe to share between threads.
    """

    def __init__(
        self,
        fmt: LyricsFormat,
        *,
        text: str | None = None,
        info: Document | None = None,
        extra_info: ExtraInfo | None = None,
    ):
        self.format = fmt
        self._state = ParserState.CREATED
        self._text = ""
        self._info = Document()
        self._extra_info: ExtraInfo = {}
        self._note_rules: tuple[regex.Pattern, ...] = tuple(fmt.note_rules())
        self._info_rules: tuple[Rule, ...] = tuple(fmt.info_rules())
        if text is not None:
            self.text = text
        if info is not None:
            self.info = info
        if extra_info is not None:
            self.extra_info = extra_info

    @property
    def state(self) -> ParserState:
        return self._state

    @property
    def text(self) -> str:
        return self._text

    @text.setter
    def text(self, value: str) -> None:
        self._text = value
        self._state = ParserState.GOT_TEXT

    @property
    def info(self) -> Document:
        return self._info

    @info.setter
    def info(self, value: Document) -> None:
        self._info = value
        self._state = ParserState.GOT_INFO

    @property
    def extra_info(self) -> ExtraInfo:
        return self._extra_info

    @extra_info.setter
    def extra_info(self, value: ExtraInfo) -> None:
        self._extra_info = value

    @property
    def note_rules(self) -> tuple[regex.Pattern, ...]:
        return self._note_rules

    @property
    def info_rules(self) -> tuple[Rule, ...]:
        return self._info_rules

    def read(self) -> Document:
        if self._state is ParserState.CREATED:
            raise PreconditionError("no text set")
        if self._state is ParserState.GOT_TEXT:
            self._read()
        return self._info

    def _read(self) -> None:
        doc = Document()
        extra: ExtraInfo = {}
        self._info, self._extra_info = doc, extra

        body = self.format.preprocess(self._text, doc, extra)
        raw_lines = split_to_lines(strip_notes(body, self._note_rules))
        for raw in raw_lines:
            doc = read_line(raw, self._info_rules, doc)
        if doc.lines is not None:
            doc.lines = remove_blank_lines(doc.lines)
        self.format.postprocess(doc, extra)

        self._info = doc
        self._state = ParserState.GOT_INFO
        logger.debug(
            "read %s: %d text line(s) -> %d lyric line(s)",
            self.format.name,
            len(raw_lines),
            len(doc.lines or []),
        )

    def write(self) -> str:
        if self._state is ParserState.CREATED:
            raise PreconditionError("no info set")
        if self._state is ParserState.GOT_INFO:
            self._write()
        return self._text

    def _write(self) -> None:
        self._text = ""
        doc = self._info
        if doc.lines is not None:
            doc = replace(doc, lines=remove_blank_lines(doc.lines))
        self._text = self.format.compile(doc)
        self._state = ParserState.GOT_TEXT
        logger.debug("wrote %s: %d lyric line(s), %d chars", self.format.name, len(doc.lines or []), len(self._text))

    def bind_translation(self, translation: Document) -> Document:
        return bind_translation(self._info, translation)
