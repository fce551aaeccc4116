from __future__ import annotations

import pytest
import regex

from lyrics_parser.core.model import Document, Line
from lyrics_parser.core.rules import Rule, read_line, remove_blank_lines, rule, split_to_lines, strip_notes

NOTES = [regex.compile(r"//.*"), regex.compile(r"#.*")]


def test_strip_notes_removes_every_match():
    text = "[00:01.00]a // one\n# two\n[00:02.00]b # three"
    assert strip_notes(text, NOTES) == "[00:01.00]a \n\n[00:02.00]b "


def test_strip_notes_no_match_is_noop():
    text = "[00:01.00]plain line\n[00:02.00]another"
    assert strip_notes(text, NOTES) == text


def test_strip_notes_independent_of_pattern_order():
    # removing "c" exposes "ab"
    patterns = [regex.compile("ab"), regex.compile("c")]
    assert strip_notes("xacby", patterns) == "xy"
    assert strip_notes("xacby", list(reversed(patterns))) == "xy"


def test_split_to_lines_trims_and_drops_blank():
    assert split_to_lines("  a \r\n\n   \n b") == ["a", "b"]


def test_remove_blank_lines_idempotent_for_text():
    once = remove_blank_lines(["a", " ", "", "b"])
    assert once == ["a", "b"]
    assert remove_blank_lines(once) == once


def test_remove_blank_lines_idempotent_for_lines():
    lines = [Line(text="x"), Line(text="  "), Line(start=5), Line(text="y")]
    once = remove_blank_lines(lines)
    assert [ln.text for ln in once] == ["x", "y"]
    assert remove_blank_lines(once) == once


class TestDefaultHandler:
    offset_rule = rule("offset", r"^\[offset:(.*)\]$")

    def test_offset_coerced_to_int(self):
        assert read_line("[offset:-250]", [self.offset_rule], Document()).offset == -250

    def test_offset_float(self):
        assert read_line("[offset:1.5]", [self.offset_rule], Document()).offset == 1.5

    def test_offset_not_numeric(self):
        assert read_line("[offset:abc]", [self.offset_rule], Document()).offset is None

    def test_other_fields_verbatim(self):
        r = rule("title", r"^\[ti:(.*)\]$")
        assert read_line("[ti: Song ]", [r], Document()).title == " Song "


def test_rule_rejects_unknown_field():
    with pytest.raises(ValueError):
        Rule(field="nope", pattern=regex.compile("x"))


def test_read_line_runs_rules_in_order_on_same_field():
    def new_line(m, doc):
        return [*(doc.lines or []), Line(start=int(m.group(1)))]

    def set_text(m, doc):
        lines = list(doc.lines or [])
        lines[-1].text = m.group(1)
        return lines

    rules = [rule("lines", r"^<(\d+)>", new_line), rule("lines", r"^<\d+>(.*)$", set_text)]
    doc = Document()
    for raw in ("<100>first", "<200>second"):
        doc = read_line(raw, rules, doc)
    assert doc.lines == [Line(start=100, text="first"), Line(start=200, text="second")]


def test_unmatched_line_leaves_document_untouched():
    doc = read_line("random noise", [rule("title", r"^\[ti:(.*)\]$")], Document())
    assert doc == Document()


def test_strip_notes_ignores_empty_matches():
    assert strip_notes("a b", [regex.compile("x*")]) == "a b"
    assert strip_notes("axxb", [regex.compile("x*")]) == "ab"
