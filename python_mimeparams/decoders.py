from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .exceptions import InvalidEscapeError, InvalidSoftBreakError, TruncatedEscapeError

if TYPE_CHECKING:  # pragma: no cover
    from typing import Protocol

    class SupportsWrite(Protocol):
        def write(self, __b: bytes) -> object: ...


logger = logging.getLogger(__name__)

CR = b"\r"[0]
LF = b"\n"[0]

# Maps the ordinal of every hexadecimal digit, in either case, to its value.
HEX_VALUES = {ord(c): int(c, 16) for c in "0123456789abcdefABCDEF"}


def _hex_value(data: bytes, i: int) -> int:
    value = HEX_VALUES.get(data[i])
    if value is None:
        e = InvalidEscapeError(
            "Invalid quoted-printable encoding; invalid escape sequence: %r is not a hex digit (at %d)"
            % (bytes([data[i]]), i)
        )
        e.offset = i
        e.char = data[i]
        raise e
    return value


def _decode(data: bytes, final: bool = True) -> tuple[bytearray, int]:
    """Decodes ``data`` and returns the decoded bytes along with the number of
    input bytes that were consumed.

    When ``final`` is false, an escape that is cut short by the end of the
    data is left unconsumed so that it can be completed by a later chunk.
    Otherwise it is an error.
    """
    decoded = bytearray()
    length = len(data)

    i = 0
    while i < length:
        # Copy the run of plain bytes up to the next escape in one go.
        eq_pos = data.find(b"=", i)
        if eq_pos == -1:
            decoded += data[i:]
            i = length
            break

        decoded += data[i:eq_pos]
        i = eq_pos

        # An escape is always three bytes long: '=XX' or '=\r\n'.
        if length - i < 3:
            if not final:
                break
            e = TruncatedEscapeError("Invalid quoted-printable encoding; truncated escape sequence at %d" % i)
            e.offset = i
            raise e

        if data[i + 1] == CR:
            if data[i + 2] != LF:
                e = InvalidSoftBreakError(
                    "Invalid quoted-printable encoding; CR must be followed by LF (at %d)" % (i + 2)
                )
                e.offset = i + 2
                raise e
            # Soft line break, nothing to output.
        else:
            decoded.append(_hex_value(data, i + 1) << 4 | _hex_value(data, i + 2))

        i += 3

    return decoded, i


def decode(data: bytes, out: SupportsWrite | bytearray) -> int:
    """Decodes a complete quoted-printable buffer.

    The decoded bytes are appended to ``out``, which is either a bytearray or
    a file-like object, and their count is returned.  Nothing is written when
    a :class:`~python_mimeparams.exceptions.DecodeError` is raised.
    """
    decoded, _ = _decode(data)
    if isinstance(out, bytearray):
        out.extend(decoded)
    else:
        out.write(bytes(decoded))
    return len(decoded)


def decodestring(data: bytes, header: bool = False) -> bytes:
    """Decodes ``data`` and returns the result.  With ``header`` set, the
    underscores of the RFC 2047 "Q" encoding are read as spaces first.
    """
    if header:
        data = data.replace(b"_", b" ")
    decoded, _ = _decode(data)
    return bytes(decoded)


class QuotedPrintableDecoder:
    """This object provides an interface to decode a stream of
    quoted-printable data.  It is instantiated with an "underlying object",
    and whenever a write() operation is performed, it will decode the
    incoming data as quoted-printable, and call write() on the underlying
    object.  An escape sequence that is split across two writes is cached
    until the rest of it arrives.

    :param underlying: the underlying object to pass writes to
    """

    def __init__(self, underlying: SupportsWrite) -> None:
        self.cache = b""
        self.underlying = underlying

    def write(self, data: bytes) -> int:
        """Takes any input data provided, decodes it as quoted-printable, and
        passes it on to the underlying object.

        :param data: quoted-printable data to decode
        """
        data_len = len(data)

        # Prepend any cache info to our data.
        if len(self.cache) > 0:
            data = self.cache + data

        decoded, consumed = _decode(data, final=False)

        # Write what we have, if anything.
        if len(decoded) > 0:
            self.underlying.write(bytes(decoded))

        self.cache = data[consumed:]
        if self.cache:
            logger.debug("Holding back %d bytes of an incomplete escape", len(self.cache))

        return data_len

    def close(self) -> None:
        """Close this decoder.  If the underlying object has a `close()`
        method, this function will call it.
        """
        if self.cache:
            logger.warning("Closing with %d undecoded bytes in the cache", len(self.cache))

        if hasattr(self.underlying, "close"):
            self.underlying.close()

    def finalize(self) -> None:
        """Finalize this object.  This should be called when no more data
        should be written to the stream.  A cached escape can not be
        completed anymore, so it raises a
        :class:`~python_mimeparams.exceptions.TruncatedEscapeError`.

        If the underlying object has a `finalize()` method, this function will
        call it.
        """
        if len(self.cache) > 0:
            decoded, _ = _decode(self.cache)
            self.underlying.write(bytes(decoded))
            self.cache = b""

        # Finalize our underlying stream.
        if hasattr(self.underlying, "finalize"):
            self.underlying.finalize()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(underlying={self.underlying!r})"
