from .base import LyricsFormat
from .lmlrc import LmlrcFormat
from .lrc import LrcFormat
from .nrc import NrcFormat
from .qrc import QrcFormat
from .registry import FORMATS, UnknownFormatError, get_format, guess_format

__all__ = [
    "FORMATS",
    "LmlrcFormat",
    "LrcFormat",
    "LyricsFormat",
    "NrcFormat",
    "QrcFormat",
    "UnknownFormatError",
    "get_format",
    "guess_format",
]
