from __future__ import annotations

import json
from typing import Any

import regex

from lyrics_parser.core.errors import MalformedInputError
from lyrics_parser.core.model import Document, ExtraInfo, Line
from lyrics_parser.core.parser import LyricsParser
from lyrics_parser.core.rules import Rule
from lyrics_parser.core.timing import effective_start

from .base import LyricsFormat, decode_json
from .lrc import LrcFormat

_LEADING_INT = regex.compile(r"^\s*([+-]?\d+)")


def _nickname(*users: Any) -> str | None:
    for user in users:
        if isinstance(user, dict) and user.get("nickname"):
            return str(user["nickname"])
    return None


def _lyric(section: dict[str, Any]) -> str:
    lyric = section.get("lyric")
    if lyric is None:
        return ""
    if not isinstance(lyric, str):
        raise MalformedInputError(f"NRC lyric must be a string, got {type(lyric).__name__}")
    return lyric


def _version_number(version: str | None) -> int | None:
    # leading integer of a version string, "2.1" -> 2
    m = _LEADING_INT.match(version or "1")
    return int(m.group(1)) if m else None


class NrcFormat(LyricsFormat):
    """
    NRC lyrics: a JSON envelope carrying an LRC body (`lrc.lyric`) and an
    optional LRC translation (`tlyric.lyric`) bound by timestamp.
    """

    name = "nrc"

    def note_rules(self) -> list[regex.Pattern]:
        return LrcFormat().note_rules()

    def info_rules(self) -> list[Rule]:
        return LrcFormat().info_rules()

    def preprocess(self, text: str, doc: Document, extra_info: ExtraInfo) -> str:
        data = decode_json(text, "NRC")
        if not isinstance(data, dict):
            raise MalformedInputError("NRC envelope must be a JSON object")

        body = ""
        lrc = data.get("lrc")
        if isinstance(lrc, dict):
            if lrc.get("version"):
                doc.version = str(lrc["version"])
            body = _lyric(lrc)

        author = _nickname(data.get("lyricUser"), data.get("lyricContributor"))
        if author:
            doc.author = author

        tlyric = data.get("tlyric")
        if isinstance(tlyric, dict):
            if tlyric.get("version"):
                doc.translation_version = str(tlyric["version"])
            translation = _lyric(tlyric)
            if translation:
                extra_info["translation"] = LyricsParser(LrcFormat(), text=translation).read()

        translation_author = _nickname(data.get("transUser"), data.get("translationContributor"))
        if translation_author:
            doc.translation_author = translation_author
        return body

    def _envelope(self, doc: Document, text: str, translation: str) -> dict[str, Any]:
        envelope: dict[str, Any] = {
            "code": 200,
            "sgc": False,
            "sfy": False,
            "qfy": False,
            "klyric": {"version": 0, "lyric": ""},
            "lrc": {"version": _version_number(doc.version), "lyric": text},
        }
        if doc.author:
            envelope["lyricUser"] = {"nickname": doc.author}
            envelope["lyricContributor"] = {"nickname": doc.author}
        if translation:
            envelope["tlyric"] = {"version": _version_number(doc.translation_version), "lyric": translation}
            if doc.translation_author:
                envelope["transUser"] = {"nickname": doc.translation_author}
                envelope["translationContributor"] = {"nickname": doc.translation_author}
        return envelope

    def compile(self, doc: Document) -> str:
        lines = doc.lines or []
        starts = [effective_start(lines, i) for i in range(len(lines))]
        text_doc = Document(
            title=doc.title,
            artist=doc.artist,
            album=doc.album,
            offset=doc.offset,
            lines=[Line(start=s, text=ln.text) for s, ln in zip(starts, lines)],
        )
        translation_doc = Document(lines=[Line(start=s, text=ln.translation) for s, ln in zip(starts, lines)])

        text = LyricsParser(LrcFormat(), info=text_doc).write()
        translation = LyricsParser(LrcFormat(), info=translation_doc).write()
        return json.dumps(self._envelope(doc, text, translation), ensure_ascii=False)
