from __future__ import annotations


class MimeParamsError(ValueError):
    """Base error class for this package."""


class ParseError(MimeParamsError):
    """This exception (or a subclass) is raised when there is an error while
    parsing something.
    """

    #: This is the offset in the input data chunk (*NOT* the overall stream) in
    #: which the parse error occured.  It will be -1 if not specified.
    offset = -1


class DecodeError(ParseError):
    """This exception is raised when quoted-printable data can not be decoded.
    The data written so far must be treated as invalid.
    """


class TruncatedEscapeError(DecodeError):
    """An ``=`` escape is not followed by the two bytes it needs."""


class InvalidSoftBreakError(DecodeError):
    """An ``=\\r`` soft line break is not completed by ``\\n``."""


class InvalidEscapeError(DecodeError):
    """An ``=XX`` escape contains a byte that is not a hexadecimal digit."""

    #: The offending byte, as an integer.  It will be -1 if not specified.
    char = -1


class UnsupportedEncodingError(MimeParamsError):
    """Raised when an encoded parameter value names an unknown charset or
    encoding, or carries a malformed payload.  The parameter parser catches
    this and keeps the raw value.
    """
