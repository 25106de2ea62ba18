from __future__ import annotations

import re

from .parameters import ParameterParser

FORM_DATA = "form-data"
ATTACHMENT = "attachment"

# The boundary of a Content-Type may be separated by either of these.
BOUNDARY_SEPARATORS = (";", ",")

_options_parser = ParameterParser(lower_case_names=True)

# Only escaped backslashes and quotes are unescaped, so that Windows paths
# survive for the IE6 fix below.
QUOTED_PAIR_RE = re.compile(r'\\([\\"])')


def _unquote(value: str) -> str:
    return QUOTED_PAIR_RE.sub(r"\1", value)


def parse_options_header(value: str | bytes | None) -> tuple[str, dict[str, str | None]]:
    """Parses a Content-Type or Content-Disposition header into a value in the
    following format::

        (content_type, {parameters})

    The main value and the parameter names are lower-cased.
    """
    if not value:
        return ("", {})

    if isinstance(value, bytes):
        value = value.decode("latin-1")

    # If we have no options, return the string as-is.
    if ";" not in value:
        return (value.lower().strip(), {})

    # Split at the first semicolon, to get our value and then options.
    ctype, rest = value.split(";", 1)
    options: dict[str, str | None] = {}

    for key, option in _options_parser.parse(rest, ";").items():
        if option is not None:
            option = _unquote(option)

            # If the value is a filename, we need to fix a bug on IE6 that
            # sends the full file path instead of the filename.
            if key == "filename":
                if option[1:3] == ":\\" or option[:2] == "\\\\":
                    option = option.split("\\")[-1]

        options[key] = option

    return ctype.lower().strip(), options


def get_boundary(content_type: str | bytes | None) -> bytes | None:
    """Returns the multipart boundary of a Content-Type header, or None if it
    has none.
    """
    params = _options_parser.parse(content_type, BOUNDARY_SEPARATORS)
    boundary = params.get("boundary")
    if not boundary:
        return None
    return boundary.encode("latin-1", "replace")


def get_file_name(content_disposition: str | bytes | None) -> str | None:
    """Returns the file name of a ``form-data`` or ``attachment``
    Content-Disposition header.

    None means that there is no file name at all.  A ``filename`` parameter
    without a value gives an empty string, as the part is still a file.

    The value goes through :func:`parse_options_header`, so escaped quotes
    and backslashes are unescaped and a full Windows path is reduced to its
    last component.
    """
    disposition, params = parse_options_header(content_disposition)
    if not (disposition.startswith(FORM_DATA) or disposition.startswith(ATTACHMENT)):
        return None

    if "filename" not in params:
        return None

    file_name = params["filename"]
    if file_name is None:
        return ""
    return file_name.strip()


def get_field_name(content_disposition: str | bytes | None) -> str | None:
    """Returns the field name of a ``form-data`` Content-Disposition header."""
    disposition, params = parse_options_header(content_disposition)
    if not disposition.startswith(FORM_DATA):
        return None

    field_name = params.get("name")
    if field_name is None:
        return None
    return field_name.strip()
