__version__ = "0.1.0"

from .decoders import QuotedPrintableDecoder, decode, decodestring
from .headers import get_boundary, get_field_name, get_file_name, parse_options_header
from .parameters import ParameterParser, parse_parameters
from .values import DecodedValue, DecodeStatus, decode_encoded_words, decode_rfc2231, decode_value

__all__ = (
    "DecodeStatus",
    "DecodedValue",
    "ParameterParser",
    "QuotedPrintableDecoder",
    "decode",
    "decode_encoded_words",
    "decode_rfc2231",
    "decode_value",
    "decodestring",
    "get_boundary",
    "get_field_name",
    "get_file_name",
    "parse_options_header",
    "parse_parameters",
)
