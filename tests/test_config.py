from __future__ import annotations

import pytest

from lyrics_parser.config import load_config, save_config_formats


@pytest.fixture(autouse=True)
def clean_env(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    for name in ("LYRICS_PARSER_FROM", "LYRICS_PARSER_TO", "LYRICS_PARSER_DEFAULT_DURATION"):
        monkeypatch.delenv(name, raising=False)


class TestConfig:
    """load_config defaults, env overrides and saved config priority."""

    def test_defaults(self, tmp_path):
        cfg = load_config()
        assert cfg.source_format == "lrc"
        assert cfg.target_format == "lmlrc"
        assert cfg.default_duration_ms == 1000
        assert cfg.config_dir == tmp_path / "lyrics-parser"

    def test_env(self, monkeypatch):
        monkeypatch.setenv("LYRICS_PARSER_TO", "NRC")
        monkeypatch.setenv("LYRICS_PARSER_DEFAULT_DURATION", "500")
        cfg = load_config()
        assert cfg.target_format == "nrc"
        assert cfg.default_duration_ms == 500

    def test_bad_env_values_ignored(self, monkeypatch):
        monkeypatch.setenv("LYRICS_PARSER_FROM", "srt")
        monkeypatch.setenv("LYRICS_PARSER_DEFAULT_DURATION", "soon")
        cfg = load_config()
        assert cfg.source_format == "lrc"
        assert cfg.default_duration_ms == 1000

    def test_config_file_over_env(self, tmp_path, monkeypatch):
        (tmp_path / "lyrics-parser").mkdir(parents=True, exist_ok=True)
        (tmp_path / "lyrics-parser" / "config.json").write_text('{"to": "qrc"}', encoding="utf-8")
        monkeypatch.setenv("LYRICS_PARSER_TO", "nrc")
        assert load_config().target_format == "qrc"

    def test_save_and_load(self):
        save_config_formats(source="nrc")
        save_config_formats(target="qrc-text")
        cfg = load_config()
        assert (cfg.source_format, cfg.target_format) == ("nrc", "qrc-text")
