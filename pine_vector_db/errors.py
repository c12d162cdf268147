"""Error taxonomy for pine-vector-db.

Every failure a store operation can surface is one of four kinds.  Each
kind has its own exception class so callers can either catch the family
(``PineError``) or switch on ``err.kind``.
"""

from __future__ import annotations

import enum


class ErrorKind(enum.Enum):
    IO = "io"
    ENCODING = "encoding"
    TEXT_ENCODING = "text_encoding"
    PATH_CONVERSION = "path_conversion"


class PineError(Exception):
    """Base class of all store errors."""

    kind: ErrorKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value!r}, message={self.message!r})"


class IOFailure(PineError):
    """Directory or file create, read, write or remove failed."""

    kind = ErrorKind.IO


class EncodingFailure(PineError):
    """A vector payload could not be serialized or deserialized."""

    kind = ErrorKind.ENCODING


class TextEncodingFailure(PineError):
    """An index entry does not hold valid UTF-8 text."""

    kind = ErrorKind.TEXT_ENCODING


class PathConversionFailure(PineError):
    """A cluster location cannot be rendered as UTF-8 text."""

    kind = ErrorKind.PATH_CONVERSION
