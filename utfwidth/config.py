"""
Platform configuration, resolved once at import time.

The native wide encoding mirrors the width of the C ``wchar_t`` type: 16 bits
(UTF-16) on Windows, 32 bits (UTF-32) on Linux, macOS and most other systems. It can
be forced with the ``UTFWIDTH_NATIVE_WIDE`` environment variable. An unusable value
is logged and ignored when the module is imported; ``native_wide_encoding()`` still
rejects it.
"""
import ctypes
import enum
import logging
import os
from array import array

from utfwidth.errors import UnsupportedConversionException

logger = logging.getLogger(__name__)

NATIVE_WIDE_ENV_VAR = "UTFWIDTH_NATIVE_WIDE"


class NativeWideEncoding(enum.Enum):
    UTF16 = 16
    UTF32 = 32


def _typecode_for(unit_byte_count: int) -> str:
    for typecode in ("H", "I", "L"):
        if array(typecode).itemsize == unit_byte_count:
            return typecode
    raise RuntimeError(f"No array typecode holds {unit_byte_count} byte code units")


UTF16_TYPECODE = _typecode_for(2)
UTF32_TYPECODE = _typecode_for(4)


def native_wide_encoding() -> NativeWideEncoding:
    """
    Determine the native wide encoding. The environment variable wins over the
    platform's ``wchar_t`` width.
    """
    override = os.environ.get(NATIVE_WIDE_ENV_VAR)
    if override:
        match override.strip().lower().replace("-", "").replace("_", ""):
            case "utf16" | "16":
                return NativeWideEncoding.UTF16
            case "utf32" | "32":
                return NativeWideEncoding.UTF32
            case _:
                raise UnsupportedConversionException(
                    f"{NATIVE_WIDE_ENV_VAR} must be utf-16 or utf-32, got {override!r}"
                )

    return _wchar_encoding()


def _wchar_encoding() -> NativeWideEncoding:
    if ctypes.sizeof(ctypes.c_wchar) == 2:
        return NativeWideEncoding.UTF16
    return NativeWideEncoding.UTF32


def _import_time_encoding() -> NativeWideEncoding:
    try:
        return native_wide_encoding()
    except UnsupportedConversionException as error:
        logger.warning("%s, using the wchar_t width instead", error)
        return _wchar_encoding()


NATIVE_WIDE_ENCODING = _import_time_encoding()
logger.debug("Native wide encoding is %s", NATIVE_WIDE_ENCODING.name)
