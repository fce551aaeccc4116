from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from lyrics_parser.core.timing import DEFAULT_DURATION_MS
from lyrics_parser.formats.registry import FORMATS

logger = logging.getLogger(__name__)


def _config_dir() -> Path:
    xdg = os.getenv("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "lyrics-parser"
    return Path.home() / ".config" / "lyrics-parser"


def _config_file() -> Path:
    return _config_dir() / "config.json"


@dataclass(frozen=True)
class AppConfig:
    config_dir: Path

    # Formats used when neither a flag nor the file suffix decides
    source_format: str
    target_format: str

    # Duration given to lines/fonts whose end cannot be inferred
    default_duration_ms: int


def load_config() -> AppConfig:
    config_dir = _config_dir()
    stored = _load_stored(config_dir)

    # Priority: config.json → env → built-in default
    source_format = _pick_format(stored.get("from"), os.getenv("LYRICS_PARSER_FROM"), "lrc")
    target_format = _pick_format(stored.get("to"), os.getenv("LYRICS_PARSER_TO"), "lmlrc")

    raw_duration = os.getenv("LYRICS_PARSER_DEFAULT_DURATION")
    try:
        default_duration_ms = int(raw_duration) if raw_duration else DEFAULT_DURATION_MS
    except ValueError:
        logger.warning("Ignoring non-integer LYRICS_PARSER_DEFAULT_DURATION=%r", raw_duration)
        default_duration_ms = DEFAULT_DURATION_MS

    return AppConfig(
        config_dir=config_dir,
        source_format=source_format,
        target_format=target_format,
        default_duration_ms=default_duration_ms,
    )


def _pick_format(*candidates: str | None) -> str:
    for c in candidates[:-1]:
        if c and c.lower() in FORMATS:
            return c.lower()
    return candidates[-1] or "lrc"


def _load_stored(config_dir: Path) -> dict[str, str]:
    cfg_path = config_dir / "config.json"
    if not cfg_path.exists():
        return {}
    try:
        data = json.loads(cfg_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Could not read %s: %s", cfg_path, e)
        return {}
    return data if isinstance(data, dict) else {}


def save_config_formats(*, source: str | None = None, target: str | None = None) -> Path:
    cfg_path = _config_file()
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    data = _load_stored(cfg_path.parent)
    if source:
        data["from"] = source.lower()
    if target:
        data["to"] = target.lower()
    cfg_path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    return cfg_path
