from __future__ import annotations

from dataclasses import dataclass
from functools import reduce
from typing import Any, Callable, Iterable, Sequence, TypeVar, Union

import regex

from .model import DOCUMENT_FIELDS, Document, Line

Handler = Callable[["regex.Match", Document], Any]

_Entry = TypeVar("_Entry", bound=Union[str, Line])


@dataclass(frozen=True, slots=True)
class Rule:
    """
    One info-extraction rule: when `pattern` is found in a lyric line, the
    handler's return value is stored under `field` of the document.
    Without a handler the first capture group is stored.
    """

    field: str
    pattern: regex.Pattern
    handler: Handler | None = None

    def __post_init__(self) -> None:
        if self.field not in DOCUMENT_FIELDS:
            raise ValueError(f"Unknown document field: {self.field!r}")

    def apply(self, match: regex.Match, doc: Document) -> Any:
        handler = self.handler or default_handler(self.field)
        return handler(match, doc)


def rule(field: str, pattern: str, handler: Handler | None = None) -> Rule:
    return Rule(field=field, pattern=regex.compile(pattern), handler=handler)


def _coerce_number(raw: str) -> int | float | None:
    raw = raw.strip()
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        return float(raw)
    except ValueError:
        return None


def default_handler(field: str) -> Handler:
    if field == "offset":
        return lambda m, _doc: _coerce_number(m.group(1))
    return lambda m, _doc: m.group(1)


def strip_notes(text: str, patterns: Sequence[regex.Pattern]) -> str:
    """
    Remove every match of every note pattern.

    Patterns run in declared order; rounds repeat until nothing is removed,
    so removing one kind of note cannot leave a match of another behind.
    """
    while True:
        removed = False
        for pattern in patterns:
            notes = [m.group(0) for m in pattern.finditer(text) if m.group(0)]
            for note in notes:
                text = text.replace(note, "", 1)
            removed = removed or bool(notes)
        if not removed:
            return text


def _is_blank(entry: str | Line) -> bool:
    if isinstance(entry, Line):
        return not (entry.text or "").strip()
    return not entry.strip()


def remove_blank_lines(entries: Iterable[_Entry]) -> list[_Entry]:
    # works on raw text lines and on structured Line entries alike
    return [e for e in entries if not _is_blank(e)]


def split_to_lines(text: str) -> list[str]:
    return remove_blank_lines(ln.strip() for ln in text.splitlines())


def apply_rule(doc: Document, info_rule: Rule, line: str) -> Document:
    m = info_rule.pattern.search(line)
    if m:
        setattr(doc, info_rule.field, info_rule.apply(m, doc))
    return doc


def read_line(line: str, info_rules: Sequence[Rule], doc: Document) -> Document:
    """Fold one lyric line through the info rules, in declared order."""
    return reduce(lambda acc, r: apply_rule(acc, r, line), info_rules, doc)
