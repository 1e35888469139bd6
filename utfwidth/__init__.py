"""
Conversions between UTF-8, UTF-16, UTF-32 and the platform's narrow and wide string
forms, and terminal display width of the result.
"""
import logging

from utfwidth.config import NATIVE_WIDE_ENCODING, NativeWideEncoding
from utfwidth.errors import (
    DecodeException,
    UnicodeException,
    UnsupportedConversionException,
)
from utfwidth.policy import REPLACEMENT_CHARACTER, ConversionResult, ErrorPolicy
from utfwidth.router import (
    Encoding,
    Router,
    convert,
    decode_str,
    encode_str,
    s,
    s_to_u8s,
    u8s,
    u8s_to_s,
    u16s,
    u32s,
    us,
    us_to_ws,
    ws,
    ws_to_us,
)
from utfwidth.width import (
    CONTROL_WIDTH,
    classify,
    codepoints_width,
    uswidth,
    wcswidth,
    wcwidth,
    width,
    wswidth,
)

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "CONTROL_WIDTH",
    "ConversionResult",
    "DecodeException",
    "Encoding",
    "ErrorPolicy",
    "NATIVE_WIDE_ENCODING",
    "NativeWideEncoding",
    "REPLACEMENT_CHARACTER",
    "Router",
    "UnicodeException",
    "UnsupportedConversionException",
    "classify",
    "codepoints_width",
    "convert",
    "decode_str",
    "encode_str",
    "s",
    "s_to_u8s",
    "u16s",
    "u32s",
    "u8s",
    "u8s_to_s",
    "us",
    "us_to_ws",
    "uswidth",
    "wcswidth",
    "wcwidth",
    "width",
    "ws",
    "ws_to_us",
    "wswidth",
]
