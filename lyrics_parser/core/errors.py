class LyricsParserError(Exception):
    pass


class PreconditionError(LyricsParserError, RuntimeError):
    """read()/write() called before its input was set."""


class MalformedInputError(LyricsParserError, ValueError):
    """A structural envelope (JSON, ...) could not be decoded."""
