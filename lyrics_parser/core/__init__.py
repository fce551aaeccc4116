from .errors import LyricsParserError, MalformedInputError, PreconditionError
from .model import DOCUMENT_FIELDS, Document, ExtraInfo, Font, Line
from .parser import LyricsParser, ParserState
from .translation import bind_translation

__all__ = [
    "DOCUMENT_FIELDS",
    "Document",
    "ExtraInfo",
    "Font",
    "Line",
    "LyricsParser",
    "LyricsParserError",
    "MalformedInputError",
    "ParserState",
    "PreconditionError",
    "bind_translation",
]
