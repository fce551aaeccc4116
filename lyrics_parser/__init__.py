from lyrics_parser.core import (
    Document,
    Font,
    Line,
    LyricsParser,
    LyricsParserError,
    MalformedInputError,
    ParserState,
    PreconditionError,
    bind_translation,
)
from lyrics_parser.formats import get_format

__version__ = "0.1.0"

__all__ = [
    "Document",
    "Font",
    "Line",
    "LyricsParser",
    "LyricsParserError",
    "MalformedInputError",
    "ParserState",
    "PreconditionError",
    "bind_translation",
    "get_format",
]
