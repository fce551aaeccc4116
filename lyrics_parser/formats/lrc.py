from __future__ import annotations

from dataclasses import replace

import regex

from lyrics_parser.core.model import Document, Line
from lyrics_parser.core.rules import Rule, rule
from lyrics_parser.core.timing import effective_start

from .base import LyricsFormat, update_last_line

# (document field, tag) in the order tags are written
METADATA_TAGS: tuple[tuple[str, str], ...] = (
    ("title", "ti"),
    ("artist", "ar"),
    ("album", "al"),
    ("author", "by"),
    ("translation_author", "ta"),
    ("version", "ve"),
    ("translation_version", "tv"),
    ("offset", "offset"),
)

_TS = r"\[(\d+):(\d+)(?:[.:](\d+))?\]"  # [mm:ss] / [mm:ss.x] / [mm:ss.xx] / [mm:ss.xxx]


def parse_timestamp(minutes: str, seconds: str, frac: str | None) -> int:
    # "2" -> 200ms, "23" -> 230ms, "234" -> 234ms
    ms = int(frac.ljust(3, "0")[:3]) if frac else 0
    return (int(minutes) * 60 + int(seconds)) * 1000 + ms


def format_timestamp(ms: int) -> str:
    m, rem = divmod(int(ms), 60_000)
    s, ms2 = divmod(rem, 1_000)
    frac = f"{ms2:03d}"
    if frac.endswith("0"):
        frac = frac[:2]
    return f"{m:02d}:{s:02d}.{frac}"


def _on_timestamp(m: regex.Match, doc: Document) -> list[Line]:
    start = parse_timestamp(m.group(1), m.group(2), m.group(3))
    lines = list(doc.lines or [])
    if lines and (lines[-1].start is None or lines[-1].start <= start):
        # a later timestamp closes the previous line
        lines[-1] = replace(lines[-1], end=start)
    lines.append(Line(start=start))
    return lines


def _on_text(m: regex.Match, doc: Document) -> list[Line] | None:
    return update_last_line(doc, text=m.group(1))


def _on_translation(m: regex.Match, doc: Document) -> list[Line] | None:
    return update_last_line(doc, translation=m.group(1))


def metadata_lines(doc: Document, template: str) -> list[str]:
    """Header lines for every set metadata field, e.g. template "[{tag}:{value}]"."""
    out: list[str] = []
    for field, tag in METADATA_TAGS:
        value = getattr(doc, field)
        if value:
            out.append(template.format(tag=tag, value=value))
    return out


class LrcFormat(LyricsFormat):
    name = "lrc"

    def note_rules(self) -> list[regex.Pattern]:
        # // comment
        return [regex.compile(r"//.*")]

    def info_rules(self) -> list[Rule]:
        return [
            rule("title", r"^\[ti(?:tle)?:(.*)\]$"),
            rule("artist", r"^\[ar(?:tist)?:(.*)\]$"),
            rule("album", r"^\[al(?:bum)?:(.*)\]$"),
            rule("author", r"^\[(?:by|au(?:thor)?):(.*)\]$"),
            rule("translation_author", r"^\[ta:(.*)\]$"),
            rule("version", r"^\[ve(?:rsion)?:(.*)\]$"),
            rule("translation_version", r"^\[tv:(.*)\]$"),
            rule("offset", r"^\[offset:(.*)\]$"),
            rule("lines", "^" + _TS, _on_timestamp),
            rule("lines", r"^\[\d+:\d+(?:[.:]\d+)?\](.*)$", _on_text),
            rule("lines", r"^\{(.*)\}$", _on_translation),
        ]

    def compile(self, doc: Document) -> str:
        out = metadata_lines(doc, "[{tag}:{value}]")
        lines = doc.lines or []
        for i, line in enumerate(lines):
            start = effective_start(lines, i)
            if line.text:
                out.append(f"[{format_timestamp(start)}]{line.text}")
            if line.translation:
                out.append(f"{{{line.translation}}}")
        return "\n".join(out)
