from __future__ import annotations

import json
import logging
from pathlib import Path

import typer

from lyrics_parser.config import AppConfig, load_config, save_config_formats
from lyrics_parser.core.errors import LyricsParserError
from lyrics_parser.core.model import Document
from lyrics_parser.core.parser import LyricsParser
from lyrics_parser.formats.base import LyricsFormat
from lyrics_parser.formats.registry import FORMATS, UnknownFormatError, get_format, guess_format
from lyrics_parser.logging_setup import setup_logging

logger = logging.getLogger(__name__)

app = typer.Typer(no_args_is_help=True, add_completion=False)


def _resolve_format(name: str | None, path: Path | None, fallback: str, cfg: AppConfig) -> LyricsFormat:
    chosen = name or (guess_format(path) if path else None) or fallback
    try:
        return get_format(chosen, default_duration_ms=cfg.default_duration_ms)
    except UnknownFormatError as e:
        raise typer.BadParameter(e.args[0]) from None


def _read(path: Path, fmt: LyricsFormat) -> Document:
    text = path.read_text(encoding="utf-8")
    try:
        return LyricsParser(fmt, text=text).read()
    except LyricsParserError as e:
        typer.echo(f"Error: {path}: {e}", err=True)
        raise typer.Exit(code=1) from e


@app.command()
def formats():
    """List supported lyric formats."""
    for name in FORMATS:
        typer.echo(name)


@app.command()
def parse(
    path: Path,
    source: str | None = typer.Option(None, "--from", "-f", help="Input format (default: from suffix)"),
    as_json: bool = typer.Option(False, "--json", help="Print the parsed document as JSON"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    """Parse a lyric file and print stats."""
    setup_logging(debug)
    cfg = load_config()
    fmt = _resolve_format(source, path, cfg.source_format, cfg)
    doc = _read(path, fmt)

    if as_json:
        typer.echo(json.dumps(doc.to_dict(), ensure_ascii=False, indent=2))
        return

    lines = doc.lines or []
    typer.echo(f"format={fmt.name}")
    typer.echo(f"lines_total={len(lines)}")
    typer.echo(f"lines_translated={sum(1 for ln in lines if ln.translation)}")
    typer.echo(f"lines_with_fonts={sum(1 for ln in lines if ln.fonts)}")
    typer.echo(f"offset={doc.offset or 0}")
    for key in ("title", "artist", "album", "author"):
        value = getattr(doc, key)
        if value:
            typer.echo(f"{key}={value}")


@app.command()
def convert(
    path: Path,
    source: str | None = typer.Option(None, "--from", "-f", help="Input format (default: from suffix)"),
    target: str | None = typer.Option(None, "--to", "-t", help="Output format"),
    out: Path | None = typer.Option(None, "--out", "-o", help="Output file (default: stdout)"),
    translation: Path | None = typer.Option(None, "--translation", help="Separate translation file to bind"),
    translation_source: str | None = typer.Option(
        None, "--translation-from", help="Format of the translation file (default: from suffix)"
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    """Convert a lyric file to another format."""
    setup_logging(debug)
    cfg = load_config()
    src_fmt = _resolve_format(source, path, cfg.source_format, cfg)
    dst_fmt = _resolve_format(target, out, cfg.target_format, cfg)

    parser = LyricsParser(src_fmt, text=path.read_text(encoding="utf-8"))
    try:
        parser.read()
    except LyricsParserError as e:
        typer.echo(f"Error: {path}: {e}", err=True)
        raise typer.Exit(code=1) from e

    if translation:
        tr_fmt = _resolve_format(translation_source, translation, "lrc", cfg)
        parser.bind_translation(_read(translation, tr_fmt))

    logger.info("Converting %s (%s) to %s", path, src_fmt.name, dst_fmt.name)
    data = LyricsParser(dst_fmt, info=parser.info).write()
    if out:
        out.write_text(data, encoding="utf-8")
    else:
        typer.echo(data)


@app.command()
def config(
    source: str | None = typer.Option(None, "--from", help="Default input format"),
    target: str | None = typer.Option(None, "--to", help="Default output format"),
):
    """Show or save default formats."""
    for name in (source, target):
        if name and name.lower() not in FORMATS:
            raise typer.BadParameter(f"format must be one of: {', '.join(FORMATS)}")
    if source or target:
        path = save_config_formats(source=source, target=target)
        typer.echo(f"Saved: {path}")
    cfg = load_config()
    typer.echo(f"from={cfg.source_format}")
    typer.echo(f"to={cfg.target_format}")
    typer.echo(f"default_duration_ms={cfg.default_duration_ms}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
