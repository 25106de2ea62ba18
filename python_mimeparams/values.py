"""Decoding of encoded parameter values.

Two encodings are understood:

* RFC 2231 extended values, signalled by a trailing ``*`` on the parameter
  name: ``filename*=utf-8'en'%E2%82%AC%20rates``
* RFC 2047 encoded words anywhere in the value:
  ``=?utf-8?B?4oKsIHJhdGVz?=`` or ``=?iso-8859-1?Q?caf=E9_au_lait?=``

Decoding failures raise :class:`UnsupportedEncodingError`; only
:func:`decode_value` turns them into a fallback to the raw value.
"""

from __future__ import annotations

import base64
import binascii
import re
import string
from enum import IntEnum
from typing import NamedTuple

from .decoders import decodestring
from .exceptions import DecodeError, UnsupportedEncodingError

ENCODED_VALUE_DELIMITER = "*"
LANGUAGE_DELIMITER = "'"
ENCODED_TOKEN_MARKER = "=?"
ENCODED_TOKEN_FINISHER = "?="
LINEAR_WHITESPACE = " \t\r\n"

LINEAR_WHITESPACE_RE = re.compile(r"([ \t\r\n]+)")
HEX_DIGITS = frozenset(string.hexdigits)


class DecodeStatus(IntEnum):
    """How a parameter value came out of :func:`decode_value`."""

    #: There was nothing to decode, the value is the raw token.
    PLAIN = 0
    #: The value was decoded.
    DECODED = 1
    #: Decoding failed and the raw token was kept.
    FALLBACK = 2


class DecodedValue(NamedTuple):
    value: str
    raw: str
    status: DecodeStatus


def has_encoded_value(name: str | None) -> bool:
    """Returns whether a parameter name marks an RFC 2231 extended value."""
    return name is not None and name.endswith(ENCODED_VALUE_DELIMITER)


def strip_delimiter(name: str) -> str:
    if has_encoded_value(name):
        return name[:-1]
    return name


def _decode_charset(data: bytes, charset: str) -> str:
    try:
        return data.decode(charset, "replace")
    except (LookupError, ValueError):
        raise UnsupportedEncodingError("Unknown charset: %r" % charset) from None


def _unquote_percent(text: str) -> bytes:
    out = bytearray()
    length = len(text)

    i = 0
    while i < length:
        ch = text[i]
        if ch == "%":
            digits = text[i + 1 : i + 3]
            if len(digits) != 2 or not HEX_DIGITS.issuperset(digits):
                raise UnsupportedEncodingError("Invalid percent-encoding at %d in %r" % (i, text))
            out.append(int(digits, 16))
            i += 3
        else:
            try:
                out += ch.encode("latin-1")
            except UnicodeEncodeError:
                raise UnsupportedEncodingError("Invalid character %r in %r" % (ch, text)) from None
            i += 1

    return bytes(out)


def _rfc2231(text: str) -> tuple[str, bool]:
    lang_start = text.find(LANGUAGE_DELIMITER)
    if lang_start == -1:
        return text, False

    lang_end = text.find(LANGUAGE_DELIMITER, lang_start + 1)
    if lang_end == -1:
        return text, False

    charset = text[:lang_start]
    return _decode_charset(_unquote_percent(text[lang_end + 1 :]), charset), True


def decode_rfc2231(text: str) -> str:
    """Decodes an RFC 2231 ``charset'language'percent-encoded`` value.

    A value without both ``'`` delimiters is returned as-is.  The language
    part is ignored.
    """
    return _rfc2231(text)[0]


def _decode_word(word: str) -> str | None:
    """Decodes a single ``=?charset?encoding?encoded-text?=`` word.  Returns
    None if the word does not have that shape.
    """
    charset_pos = word.find("?", 2)
    if charset_pos == -1:
        return None

    encoding_pos = word.find("?", charset_pos + 1)
    if encoding_pos == -1:
        return None

    text_end = word.find(ENCODED_TOKEN_FINISHER, encoding_pos + 1)
    if text_end == -1 or text_end + len(ENCODED_TOKEN_FINISHER) != len(word):
        return None

    # RFC 2231 allows a language suffix on the charset: "utf-8*en".
    charset = word[2:charset_pos].partition(ENCODED_VALUE_DELIMITER)[0].lower()
    encoding = word[charset_pos + 1 : encoding_pos].upper()
    encoded_text = word[encoding_pos + 1 : text_end]
    if not encoded_text:
        return ""

    try:
        data = encoded_text.encode("ascii")
    except UnicodeEncodeError:
        raise UnsupportedEncodingError("Non-ASCII encoded text in %r" % word) from None

    if encoding == "B":
        try:
            decoded = base64.b64decode(data)
        except binascii.Error:
            raise UnsupportedEncodingError("Invalid base64 encoded text in %r" % word) from None
    elif encoding == "Q":
        try:
            decoded = decodestring(data, header=True)
        except DecodeError as e:
            raise UnsupportedEncodingError("Invalid Q encoded text in %r: %s" % (word, e)) from None
    else:
        raise UnsupportedEncodingError("Unknown RFC 2047 encoding: %r" % encoding)

    return _decode_charset(decoded, charset)


def _rfc2047(text: str) -> tuple[str, bool]:
    if ENCODED_TOKEN_MARKER not in text:
        return text, False

    chunks: list[str] = []
    space = ""
    previous_encoded = False
    found_encoded = False

    for token in LINEAR_WHITESPACE_RE.split(text):
        if not token:
            continue

        if token[0] in LINEAR_WHITESPACE:
            space = token
            continue

        if token.startswith(ENCODED_TOKEN_MARKER):
            word = _decode_word(token)
            if word is not None:
                # Whitespace between two adjacent encoded words is dropped.
                if not previous_encoded:
                    chunks.append(space)
                chunks.append(word)
                space = ""
                previous_encoded = found_encoded = True
                continue

        chunks.append(space)
        chunks.append(token)
        space = ""
        previous_encoded = False

    chunks.append(space)
    return "".join(chunks), found_encoded


def decode_encoded_words(text: str) -> str:
    """Decodes every RFC 2047 encoded word found in ``text``.  Words that do
    not follow the encoded-word grammar are kept as they are.
    """
    return _rfc2047(text)[0]


def decode_value(name: str | None, raw: str) -> DecodedValue:
    """Decodes the raw value of the parameter ``name``.

    Names ending in ``*`` select RFC 2231 decoding, every other name gets
    RFC 2047 decoding.  The other rule is never tried as well.  This never
    raises for bad content: a failure yields the raw value with the
    :attr:`DecodeStatus.FALLBACK` status.
    """
    try:
        if has_encoded_value(name):
            value, decoded = _rfc2231(raw)
        else:
            value, decoded = _rfc2047(raw)
    except UnsupportedEncodingError:
        return DecodedValue(raw, raw, DecodeStatus.FALLBACK)

    return DecodedValue(value, raw, DecodeStatus.DECODED if decoded else DecodeStatus.PLAIN)
