from pathlib import Path

import pytest

from lyrics_parser.formats import LmlrcFormat, LrcFormat, QrcFormat, UnknownFormatError, get_format, guess_format


def test_get_format_by_name():
    assert isinstance(get_format("LRC"), LrcFormat)
    fmt = get_format("qrc-text")
    assert isinstance(fmt, QrcFormat)
    assert fmt.kind == "text"
    assert get_format("lmlrc_json").name == "lmlrc-json"


def test_get_format_passes_options():
    fmt = get_format("lmlrc", default_duration_ms=250)
    assert isinstance(fmt, LmlrcFormat)
    assert fmt.default_duration_ms == 250


def test_unknown_format():
    with pytest.raises(UnknownFormatError):
        get_format("srt")
    with pytest.raises(KeyError):
        get_format("srt")


def test_guess_format():
    assert guess_format(Path("song.LRC")) == "lrc"
    assert guess_format(Path("song.lmlrc.json")) == "lmlrc-json"
    assert guess_format(Path("song.qrc")) == "qrc"
    assert guess_format(Path("song.txt")) is None
    assert guess_format(Path("song")) is None
