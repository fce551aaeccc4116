from __future__ import annotations

import json
from dataclasses import replace

import regex

from lyrics_parser.core.model import DOCUMENT_FIELDS, Document, ExtraInfo, Font, Line
from lyrics_parser.core.rules import Rule, rule
from lyrics_parser.core.timing import DEFAULT_DURATION_MS, duration, effective_start, resolve_fonts, resolve_line

from .base import LyricsFormat, decode_json, update_last_line
from .lrc import LrcFormat, metadata_lines

KINDS = ("text", "json")

# one font entry inside <...>: [offset+]duration[/length]
_FONT_RE = regex.compile(r"(?:(\d+)\+)?(\d+)(?:/(\d+))?")


def _on_line_time(m: regex.Match, doc: Document) -> list[Line]:
    start_raw, dur_raw = m.group(1), m.group(2)
    lines = list(doc.lines or [])
    if start_raw is not None:
        start = int(start_raw)
        if lines and lines[-1].end is None and (lines[-1].start is None or lines[-1].start <= start):
            lines[-1] = replace(lines[-1], end=start)
    else:
        start = effective_start([*lines, Line()], len(lines))
    line = Line(start=start)
    if dur_raw is not None:
        line.end = start + int(dur_raw)
    lines.append(line)
    return lines


def _on_text(m: regex.Match, doc: Document) -> list[Line] | None:
    return update_last_line(doc, text=m.group(1))


def _on_translation(m: regex.Match, doc: Document) -> list[Line] | None:
    return update_last_line(doc, translation=m.group(1))


def _on_fonts(m: regex.Match, doc: Document) -> list[Line] | None:
    if not doc.lines:
        return doc.lines
    line = doc.lines[-1]
    line_start = line.start or 0
    fonts = list(line.fonts or [])
    for fm in _FONT_RE.finditer(m.group(1)):
        offset, dur, length = fm.groups()
        if offset is not None:
            start = line_start + int(offset)
        elif fonts:
            prev = fonts[-1]
            start = (line_start if prev.start is None else prev.start) + (prev.duration or 0)
        else:
            start = line_start
        fonts.append(Font(length=int(length or 1) or 1, start=start, duration=int(dur)))
    return update_last_line(doc, fonts=fonts)


class LmlrcFormat(LyricsFormat):
    """
    LMLRC lyrics: `[start,duration]text{translation}<font timing>` per line,
    or the whole document as JSON when kind="json".
    """

    def __init__(self, kind: str = "text", *, default_duration_ms: int = DEFAULT_DURATION_MS):
        if kind not in KINDS:
            raise ValueError(f"LMLRC kind must be one of {KINDS}, got {kind!r}")
        super().__init__(default_duration_ms=default_duration_ms)
        self.kind = kind

    @property
    def name(self) -> str:  # type: ignore[override]
        return "lmlrc" if self.kind == "text" else "lmlrc-json"

    def note_rules(self) -> list[regex.Pattern]:
        notes = LrcFormat().note_rules()
        # # comment
        notes.append(regex.compile(r"#.*"))
        return notes

    def info_rules(self) -> list[Rule]:
        return [
            rule("title", r"^\[ti(?:tle)?\](.*)$"),
            rule("artist", r"^\[ar(?:tist)?\](.*)$"),
            rule("album", r"^\[al(?:bum)?\](.*)$"),
            rule("author", r"^\[(?:by|au(?:thor)?)\](.*)$"),
            rule("translation_author", r"^\[ta\](.*)$"),
            rule("version", r"^\[ve(?:rsion)?\](.*)$"),
            rule("translation_version", r"^\[tv\](.*)$"),
            rule("offset", r"^\[offset\](.*)$"),
            rule("lines", r"^\[(?:(\d+),)?(\d+)?\]", _on_line_time),
            # first run of text outside any bracket pair
            rule("lines", r"((?<![<([{][^>)\]}]*)[^<[{]+(?![>\]}]))", _on_text),
            rule("lines", r"\{(.*)\}", _on_translation),
            rule("lines", r"<((?:,?\d+(?:\+\d+)?(?:/\d+)?)*)>", _on_fonts),
        ]

    def preprocess(self, text: str, doc: Document, extra_info: ExtraInfo) -> str:
        if self.kind != "json":
            return text
        parsed = Document.from_dict(decode_json(text, "LMLRC"))
        for field in DOCUMENT_FIELDS:
            setattr(doc, field, getattr(parsed, field))
        return ""

    def _time_tag(self, start: int, end: int | None, prev: Line | None) -> str:
        dur = duration(start, end, self.default_duration_ms)
        # start is implied by the previous line's end, or 0 for the first line
        if (prev is None and not start) or (prev is not None and prev.end == start):
            return f"[{dur}]"
        return f"[{start},{dur}]"

    def _font_tag(self, line: Line, start: int) -> str:
        timings = resolve_fonts(line.fonts or [], start, self.default_duration_ms)
        parts: list[str] = []
        for i, ft in enumerate(timings):
            expected = start if i == 0 else timings[i - 1].start + timings[i - 1].duration
            piece = f"{ft.start - start}+" if ft.start != expected else ""
            piece += str(ft.duration)
            if ft.length > 1:
                piece += f"/{ft.length}"
            parts.append(piece)
        return "<" + ",".join(parts) + ">"

    def compile(self, doc: Document) -> str:
        if self.kind == "json":
            return json.dumps(doc.to_dict(), ensure_ascii=False)

        out = metadata_lines(doc, "[{tag}]{value}")
        lines = doc.lines or []
        for i, line in enumerate(lines):
            if not line.text:
                continue
            timing = resolve_line(lines, i, self.default_duration_ms)
            prev = lines[i - 1] if i > 0 else None
            row = self._time_tag(timing.start, timing.end, prev) + line.text
            if line.translation:
                row += f"{{{line.translation}}}"
            if line.fonts:
                row += self._font_tag(line, timing.start)
            out.append(row)
        return "\n".join(out)
