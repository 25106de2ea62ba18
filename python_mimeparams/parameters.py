from __future__ import annotations

import logging
from enum import IntEnum
from typing import TYPE_CHECKING

from .values import DecodeStatus, decode_value, strip_delimiter

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Sequence
    from typing import TypeAlias

    from .values import DecodedValue

    Separators: TypeAlias = "str | Sequence[str]"


EQUALS = "="
QUOTE = '"'
BACKSLASH = "\\"


class QuoteState(IntEnum):
    """States of the quote-aware value scan.  An escape only ever covers the
    single character that follows the backslash.
    """

    UNQUOTED = 0
    ESCAPED = 1
    QUOTED = 2
    QUOTED_ESCAPED = 3


class _Cursor:
    """Scan state of a single parse call.

    ``chars[token_start:token_end]`` is the token being extracted and ``pos``
    the next unread index.  ``0 <= token_start <= token_end <= pos <= length``
    holds between steps.
    """

    __slots__ = ("chars", "pos", "length", "token_start", "token_end")

    def __init__(self, chars: str, pos: int, length: int) -> None:
        self.chars = chars
        self.pos = pos
        self.length = length
        self.token_start = pos
        self.token_end = pos

    def has_char(self) -> bool:
        return self.pos < self.length

    def at(self, ch: str) -> bool:
        return self.pos < self.length and self.chars[self.pos] == ch

    def get_token(self, quoted: bool) -> str | None:
        """Returns the current token with surrounding whitespace removed and,
        if ``quoted`` is set, the enclosing quotation marks stripped.  An empty
        token is returned as None.
        """
        chars = self.chars
        start = self.token_start
        end = self.token_end

        while start < end and chars[start].isspace():
            start += 1
        while end > start and chars[end - 1].isspace():
            end -= 1

        if quoted and end - start >= 2 and chars[start] == QUOTE and chars[end - 1] == QUOTE:
            start += 1
            end -= 1

        self.token_start = start
        self.token_end = end
        if end > start:
            return chars[start:end]
        return None

    def parse_token(self, terminators: str) -> str | None:
        """Reads a token up to, but excluding, the first of ``terminators``.
        Quotation marks are not special here.
        """
        chars = self.chars
        length = self.length
        pos = self.pos

        start = pos
        while pos < length and chars[pos] not in terminators:
            pos += 1

        self.pos = pos
        self.token_start = start
        self.token_end = pos
        return self.get_token(False)

    def parse_quoted_token(self, separator: str) -> str | None:
        """Reads a token up to the first ``separator`` found outside of
        quotation marks.  An unterminated quote runs to the end of the input.
        """
        chars = self.chars
        length = self.length
        pos = self.pos
        state = QuoteState.UNQUOTED

        start = pos
        while pos < length:
            ch = chars[pos]

            if state == QuoteState.UNQUOTED:
                if ch == separator:
                    break
                if ch == QUOTE:
                    state = QuoteState.QUOTED
                elif ch == BACKSLASH:
                    state = QuoteState.ESCAPED

            elif state == QuoteState.ESCAPED:
                # An escaped separator still ends the token.
                if ch == separator:
                    break
                state = QuoteState.UNQUOTED

            elif state == QuoteState.QUOTED:
                if ch == QUOTE:
                    state = QuoteState.UNQUOTED
                elif ch == BACKSLASH:
                    state = QuoteState.QUOTED_ESCAPED

            else:
                state = QuoteState.QUOTED

            pos += 1

        self.pos = pos
        self.token_start = start
        self.token_end = pos
        return self.get_token(True)


class ParameterParser:
    """Parses sequences of ``name=value`` pairs, such as the parameters of a
    ``Content-Disposition`` header::

        param1 = value; param2 = "anything goes; really"; param3

    Values containing a separator have to be quoted.  Values are optional:
    ``param3`` above is stored with a value of None.  Encoded values (RFC 2231
    and RFC 2047) are decoded, falling back to the raw value if that fails.
    When a name appears more than once, the last value wins.

    The parser keeps no state between calls, so an instance can be shared
    between threads.

    :param lower_case_names: Whether the names in the result are lower-cased.
    """

    def __init__(self, lower_case_names: bool = False) -> None:
        self.logger = logging.getLogger(__name__)
        self.lower_case_names = lower_case_names

    def parse(
        self, value: str | bytes | None, separator: Separators = ";", offset: int = 0, length: int | None = None
    ) -> dict[str, str | None]:
        """Parses ``value`` into a dictionary of names to decoded values.

        :param value: The string to parse.  Bytes are decoded as latin-1 and
                      None gives an empty result.
        :param separator: The character between two pairs.  If a sequence of
                          characters is given instead, the one that occurs
                          first in the input is used.
        :param offset: Where to start parsing.
        :param length: The index parsing stops at (exclusive), defaults to the
                       end of the input.  It is an end index, not a count.
        """
        params = self.parse_detailed(value, separator, offset, length)
        return {name: (decoded.value if decoded is not None else None) for name, decoded in params.items()}

    def parse_detailed(
        self, value: str | bytes | None, separator: Separators = ";", offset: int = 0, length: int | None = None
    ) -> dict[str, DecodedValue | None]:
        """Like :meth:`parse`, but keeps the :class:`DecodedValue` of every
        parameter, which tells the raw token and how it was decoded.
        """
        if value is None:
            return {}

        if isinstance(value, bytes):
            value = value.decode("latin-1")

        end = len(value) if length is None else length
        if not 0 <= offset <= end <= len(value):
            raise ValueError(
                "offset %d and length %r are out of range for a value of length %d" % (offset, length, len(value))
            )

        if isinstance(separator, str) and len(separator) == 1:
            sep = separator
        else:
            candidates = list(separator)
            if not candidates:
                return {}
            sep = self.select_separator(value, candidates, offset, end)

        return self._parse(_Cursor(value, offset, end), sep)

    @staticmethod
    def select_separator(value: str, separators: Sequence[str], offset: int = 0, end: int | None = None) -> str:
        """Returns the separator that occurs first in ``value[offset:end]``.
        Ties go to the earlier separator in ``separators``, and if none of them
        occurs the first one is returned.
        """
        for candidate in separators:
            if len(candidate) != 1:
                raise ValueError("separators must be single characters, not %r" % (candidate,))

        if end is None:
            end = len(value)

        selected = separators[0]
        index = end
        for candidate in separators:
            found = value.find(candidate, offset, end)
            if found != -1 and found < index:
                index = found
                selected = candidate
        return selected

    def _parse(self, cursor: _Cursor, separator: str) -> dict[str, DecodedValue | None]:
        params: dict[str, DecodedValue | None] = {}
        terminators = EQUALS + separator

        while cursor.has_char():
            name = cursor.parse_token(terminators)
            decoded = None

            if cursor.at(EQUALS):
                cursor.pos += 1
                raw = cursor.parse_quoted_token(separator)
                if raw is not None:
                    decoded = decode_value(name, raw)
                    if decoded.status == DecodeStatus.FALLBACK:
                        self.logger.debug("Could not decode the value of %r, keeping %r", name, raw)

            if cursor.at(separator):
                cursor.pos += 1

            if not name:
                if decoded is not None:
                    self.logger.debug("Skipping a value without a name at %d", cursor.token_start)
                continue

            name = strip_delimiter(name)
            if not name:
                continue
            if self.lower_case_names:
                name = name.lower()

            params[name] = decoded

        return params

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(lower_case_names={self.lower_case_names!r})"


def parse_parameters(
    value: str | bytes | None, separator: Separators = ";", lower_case_names: bool = False
) -> dict[str, str | None]:
    """Shortcut for ``ParameterParser(lower_case_names).parse(value, separator)``."""
    return ParameterParser(lower_case_names).parse(value, separator)
