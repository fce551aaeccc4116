from __future__ import annotations

import time
from dataclasses import replace
from typing import Callable
from xml.sax.saxutils import escape, unescape

import regex

from lyrics_parser.core.model import Document, ExtraInfo, Font, Line
from lyrics_parser.core.parser import LyricsParser
from lyrics_parser.core.rules import Rule, rule
from lyrics_parser.core.timing import DEFAULT_DURATION_MS, resolve_fonts, resolve_line

from .base import LyricsFormat
from .lrc import LrcFormat

KINDS = ("xml", "text")

_WORD_RE = regex.compile(r"(.+?)\((\d+),(\d+)\)")
_CONTENT_RE = regex.compile(r'LyricContent="([^"]*)"')
_TRANSLATION_RE = regex.compile(r'TranslationContent="([^"]*)"')
_QUOTE = {'"': "&quot;"}
_UNQUOTE = {"&quot;": '"'}


def _on_karaoke_line(m: regex.Match, doc: Document) -> list[Line]:
    start, dur = int(m.group(1)), int(m.group(2))
    fonts: list[Font] = []
    text = ""
    for wm in _WORD_RE.finditer(m.group(3)):
        word = wm.group(1)
        fonts.append(Font(length=len(word), start=int(wm.group(2)), duration=int(wm.group(3))))
        text += word
    return [*(doc.lines or []), Line(start=start, end=start + dur, text=text, fonts=fonts)]


def _braces_to_brackets(text: str) -> str:
    return text.replace("{", "[").replace("}", "]")


def _brackets_to_braces(line: str) -> str:
    return line.replace("[", "{", 1).replace("]", "}", 1)


class QrcFormat(LyricsFormat):
    """
    QRC karaoke lyrics. Each line is `[start,duration]` followed by
    `word(start,duration)` spans with absolute times.

    kind="xml" wraps the body (and an LRC translation with braces in place of
    brackets) in the QrcInfos XML attributes; kind="text" is the bare body.
    """

    def __init__(
        self,
        kind: str = "xml",
        *,
        default_duration_ms: int = DEFAULT_DURATION_MS,
        clock: Callable[[], float] = time.time,
    ):
        if kind not in KINDS:
            raise ValueError(f"QRC kind must be one of {KINDS}, got {kind!r}")
        super().__init__(default_duration_ms=default_duration_ms)
        self.kind = kind
        self.clock = clock

    @property
    def name(self) -> str:  # type: ignore[override]
        return "qrc" if self.kind == "xml" else "qrc-text"

    def note_rules(self) -> list[regex.Pattern]:
        return LrcFormat().note_rules()

    def info_rules(self) -> list[Rule]:
        rules = LrcFormat().info_rules()
        rules.append(rule("lines", r"^\[(\d+),(\d+)\](.*)$", _on_karaoke_line))
        return rules

    def preprocess(self, text: str, doc: Document, extra_info: ExtraInfo) -> str:
        if self.kind != "xml":
            return text
        content = _CONTENT_RE.search(text)
        translation = _TRANSLATION_RE.search(text)
        if translation:
            lrc_text = _braces_to_brackets(unescape(translation.group(1), _UNQUOTE))
            extra_info["translation"] = LyricsParser(LrcFormat(), text=lrc_text).read()
        return unescape(content.group(1), _UNQUOTE) if content else text

    def _karaoke_rows(self, doc: Document, inline_translation: bool) -> list[str]:
        # metadata as LRC tags, lines stripped
        header = LyricsParser(LrcFormat(), info=replace(doc, lines=None)).write()
        rows = [header] if header else []
        lines = doc.lines or []
        for i, line in enumerate(lines):
            if not line.text:
                continue
            timing = resolve_line(lines, i, self.default_duration_ms)
            row = f"[{timing.start},{timing.duration}]"
            if line.fonts:
                pos = 0
                for ft in resolve_fonts(line.fonts, timing.start, self.default_duration_ms):
                    row += f"{line.text[pos:pos + ft.length]}({ft.start},{ft.duration})"
                    pos += ft.length
            else:
                row += f"{line.text}({timing.start},{timing.duration})"
            rows.append(row)
            if inline_translation and line.translation:
                rows.append(f"{{{line.translation}}}")
        return rows

    def _translation_lrc(self, doc: Document) -> str:
        lines = doc.lines or []
        translated = Document(
            lines=[
                Line(start=resolve_line(lines, i).start, text=line.translation)
                for i, line in enumerate(lines)
                if line.text and line.translation
            ]
        )
        lrc = LyricsParser(LrcFormat(), info=translated).write()
        if not lrc:
            return ""
        return "\r\n".join(_brackets_to_braces(ln) for ln in lrc.split("\n"))

    def compile(self, doc: Document) -> str:
        if self.kind == "text":
            return "\n".join(self._karaoke_rows(doc, inline_translation=True))

        content = escape("\n".join(self._karaoke_rows(doc, inline_translation=False)), _QUOTE)
        translation = escape(self._translation_lrc(doc), _QUOTE)
        out = [
            '<?xml version="1.0" encoding="utf-8"?>',
            "<QrcInfos>",
            f'<QrcHeadInfo SaveTime="{int(self.clock() * 1000)}" Version="100"/>',
            '<LyricInfo LyricCount="1">',
            f'<Lyric_1 LyricType="1" LyricContent="{content}',
        ]
        if translation:
            out.append(f'" TranslationContent="{translation}')
        out += ['"/>', "</LyricInfo>", "</QrcInfos>"]
        return "\n".join(out)
