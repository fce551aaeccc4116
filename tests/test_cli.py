from __future__ import annotations

import pytest
from typer.testing import CliRunner

from lyrics_parser.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    for name in ("LYRICS_PARSER_FROM", "LYRICS_PARSER_TO", "LYRICS_PARSER_DEFAULT_DURATION"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def song(tmp_path):
    path = tmp_path / "song.lrc"
    path.write_text("[ti:Song]\n[00:01.00]hello\n[00:03.50]world\n", encoding="utf-8")
    return path


def test_formats():
    result = runner.invoke(app, ["formats"])
    assert result.exit_code == 0
    assert "lrc" in result.output.split()
    assert "qrc-text" in result.output.split()


def test_parse_stats(song):
    result = runner.invoke(app, ["parse", str(song)])
    assert result.exit_code == 0
    assert "format=lrc" in result.output
    assert "lines_total=2" in result.output
    assert "title=Song" in result.output


def test_convert_to_stdout(song):
    result = runner.invoke(app, ["convert", str(song), "--to", "lmlrc"])
    assert result.exit_code == 0
    assert result.output == "[ti]Song\n[1000,2500]hello\n[1000]world\n"


def test_convert_with_translation_to_file(song, tmp_path):
    tr = tmp_path / "song.zh.lrc"
    tr.write_text("[00:01.00]hola\n[00:03.50]mundo\n", encoding="utf-8")
    out = tmp_path / "out.lrc"
    result = runner.invoke(app, ["convert", str(song), "--translation", str(tr), "--out", str(out)])
    assert result.exit_code == 0
    assert out.read_text(encoding="utf-8") == "[ti:Song]\n[00:01.00]hello\n{hola}\n[00:03.50]world\n{mundo}"


def test_convert_malformed_envelope(tmp_path):
    bad = tmp_path / "bad.nrc"
    bad.write_text("not json", encoding="utf-8")
    result = runner.invoke(app, ["convert", str(bad), "--to", "lrc"])
    assert result.exit_code == 1
    assert "Error" in result.output


def test_unknown_format(song):
    result = runner.invoke(app, ["convert", str(song), "--to", "srt"])
    assert result.exit_code != 0


def test_config_saves_defaults():
    result = runner.invoke(app, ["config", "--to", "nrc"])
    assert result.exit_code == 0
    assert "to=nrc" in result.output
