"""
Validating conversions between UTF-8, UTF-16 and UTF-32 code unit sequences.

Decoding works one character at a time and reports how many units it consumed, so a
conversion can resynchronize after an invalid unit and apply the requested
``ErrorPolicy``. Encoding is unchecked: codepoints reaching an encoder have already
been validated by the decoding side.

Input sequences may be anything indexable that yields ints (bytes, bytearray,
memoryview, array, list). Outputs are bytes for UTF-8 and ``array.array`` for UTF-16
and UTF-32.
"""
from array import array
from collections.abc import Callable, MutableSequence, Sequence
from typing import NamedTuple

from utfwidth.config import UTF16_TYPECODE, UTF32_TYPECODE
from utfwidth.policy import (
    DEFAULT_POLICY,
    REPLACEMENT_CHARACTER,
    ConversionResult,
    ErrorPolicy,
)

_UTF_8_CONT_MASK = (1 << 6) - 1  # 0b0011_1111
_UTF_8_CONT_LEAD = 1 << 7  # 0b1000_0000

_UTF_16_SURROGATE_MASK = (1 << 10) - 1  # 0b11_1111_1111
_HIGH_SURROGATE_FIRST = 0xD800
_HIGH_SURROGATE_LAST = 0xDBFF
_LOW_SURROGATE_FIRST = 0xDC00
_LOW_SURROGATE_LAST = 0xDFFF

_MAX_CODEPOINT = 0x10FFFF

# Smallest codepoint that legitimately needs a sequence of the given length
_UTF_8_MIN_CODEPOINT = {2: 0x80, 3: 0x800, 4: 0x10000}


class DecodeResult(NamedTuple):
    codepoint: int
    consumed: int
    is_valid: bool


_EMPTY = DecodeResult(0, 0, False)
_INVALID = DecodeResult(0, 1, False)

Units = Sequence[int]


def is_surrogate(codepoint: int) -> bool:
    return _HIGH_SURROGATE_FIRST <= codepoint <= _LOW_SURROGATE_LAST


def is_valid_codepoint(codepoint: int) -> bool:
    """A Unicode scalar value: in range and not a surrogate."""
    return 0 <= codepoint <= _MAX_CODEPOINT and not is_surrogate(codepoint)


def _is_continuation(unit: int) -> bool:
    return 0b1000_0000 <= unit <= 0b1011_1111


def decode_one_utf8(units: Units, start: int = 0) -> DecodeResult:
    """
    Decode the character beginning at ``units[start]``.

    Any problem (unit outside 0-0xFF, bad leading byte, missing or malformed
    continuation, overlong form, surrogate, codepoint beyond U+10FFFF) yields an
    invalid result consuming exactly one unit, so the caller resumes at the very next
    byte.
    """
    if start >= len(units):
        return _EMPTY

    unit1 = units[start]
    if not 0 <= unit1 <= 0xFF:
        return _INVALID
    if unit1 < 0x80:
        return DecodeResult(unit1, 1, True)

    # 0x80-0xBF are stray continuations and 0xC0/0xC1 can only produce overlong
    # forms of ASCII
    if unit1 < 0xC2:
        return _INVALID
    if unit1 < 0xE0:
        length, codepoint = 2, unit1 & 0b0001_1111
    elif unit1 < 0xF0:
        length, codepoint = 3, unit1 & 0b0000_1111
    elif unit1 < 0xF5:
        length, codepoint = 4, unit1 & 0b0000_0111
    else:
        return _INVALID

    if start + length > len(units):
        return _INVALID
    for offset in range(1, length):
        unit = units[start + offset]
        if not _is_continuation(unit):
            return _INVALID
        codepoint = (codepoint << 6) | (unit & _UTF_8_CONT_MASK)

    if codepoint < _UTF_8_MIN_CODEPOINT[length]:
        return _INVALID
    if not is_valid_codepoint(codepoint):
        return _INVALID
    return DecodeResult(codepoint, length, True)


def decode_one_utf16(units: Units, start: int = 0) -> DecodeResult:
    """
    Decode the character beginning at ``units[start]``, combining a surrogate pair
    when one is present. Unpaired surrogates and units outside 0-0xFFFF are invalid
    and consume one unit.
    """
    if start >= len(units):
        return _EMPTY

    unit1 = units[start]
    if not 0 <= unit1 <= 0xFFFF:
        return _INVALID
    if not is_surrogate(unit1):
        return DecodeResult(unit1, 1, True)
    # lone low surrogate, or a high surrogate with nothing after it
    if unit1 > _HIGH_SURROGATE_LAST or start + 1 >= len(units):
        return _INVALID

    unit2 = units[start + 1]
    if not _LOW_SURROGATE_FIRST <= unit2 <= _LOW_SURROGATE_LAST:
        return _INVALID

    codepoint = 0x10000 + (
        ((unit1 - _HIGH_SURROGATE_FIRST) << 10) | (unit2 - _LOW_SURROGATE_FIRST)
    )
    return DecodeResult(codepoint, 2, True)


def decode_one_utf32(units: Units, start: int = 0) -> DecodeResult:
    if start >= len(units):
        return _EMPTY

    codepoint = units[start]
    if not is_valid_codepoint(codepoint):
        return _INVALID
    return DecodeResult(codepoint, 1, True)


def encode_utf8(codepoint: int, out: MutableSequence[int]) -> None:
    """Append the minimal UTF-8 form of ``codepoint`` to ``out``."""
    if codepoint <= 0x7F:
        out.append(codepoint)
    elif codepoint <= 0x7FF:
        out.extend(
            (
                0b1100_0000 | (codepoint >> 6),
                _UTF_8_CONT_LEAD | (codepoint & _UTF_8_CONT_MASK),
            )
        )
    elif codepoint <= 0xFFFF:
        out.extend(
            (
                0b1110_0000 | (codepoint >> 12),
                _UTF_8_CONT_LEAD | ((codepoint >> 6) & _UTF_8_CONT_MASK),
                _UTF_8_CONT_LEAD | (codepoint & _UTF_8_CONT_MASK),
            )
        )
    else:
        out.extend(
            (
                0b1111_0000 | (codepoint >> 18),
                _UTF_8_CONT_LEAD | ((codepoint >> 12) & _UTF_8_CONT_MASK),
                _UTF_8_CONT_LEAD | ((codepoint >> 6) & _UTF_8_CONT_MASK),
                _UTF_8_CONT_LEAD | (codepoint & _UTF_8_CONT_MASK),
            )
        )


def encode_utf16(codepoint: int, out: MutableSequence[int]) -> None:
    """Append ``codepoint`` to ``out``, as a surrogate pair above U+FFFF."""
    if codepoint <= 0xFFFF:
        out.append(codepoint)
    else:
        shifted = codepoint - 0x10000
        out.append(_HIGH_SURROGATE_FIRST + (shifted >> 10))
        out.append(_LOW_SURROGATE_FIRST + (shifted & _UTF_16_SURROGATE_MASK))


def encode_utf32(codepoint: int, out: MutableSequence[int]) -> None:
    out.append(codepoint)


def new_utf16() -> array:
    return array(UTF16_TYPECODE)


def new_utf32() -> array:
    return array(UTF32_TYPECODE)


def _transcode(
    units: Units,
    decode_one: Callable[[Units, int], DecodeResult],
    encode: Callable[[int, MutableSequence[int]], None],
    out: MutableSequence[int],
    policy: ErrorPolicy | str,
) -> tuple[MutableSequence[int], bool]:
    policy = ErrorPolicy.lookup(policy)
    is_valid = True
    index = 0
    end = len(units)

    while index < end:
        decoded = decode_one(units, index)
        if decoded.is_valid:
            encode(decoded.codepoint, out)
        else:
            is_valid = False
            match policy:
                case ErrorPolicy.SKIP_INVALID_VALUES:
                    pass
                case ErrorPolicy.STOP_ON_FIRST_ERROR:
                    return out, False
                case ErrorPolicy.USE_REPLACEMENT_CHARACTER:
                    encode(REPLACEMENT_CHARACTER, out)
        index += decoded.consumed

    return out, is_valid


def _to_utf8(
    units: Units,
    decode_one: Callable[[Units, int], DecodeResult],
    policy: ErrorPolicy | str,
) -> ConversionResult[bytes]:
    out, is_valid = _transcode(units, decode_one, encode_utf8, bytearray(), policy)
    return ConversionResult(bytes(out), is_valid)


def _to_utf16(
    units: Units,
    decode_one: Callable[[Units, int], DecodeResult],
    policy: ErrorPolicy | str,
) -> ConversionResult[array]:
    out, is_valid = _transcode(units, decode_one, encode_utf16, new_utf16(), policy)
    return ConversionResult(out, is_valid)


def _to_utf32(
    units: Units,
    decode_one: Callable[[Units, int], DecodeResult],
    policy: ErrorPolicy | str,
) -> ConversionResult[array]:
    out, is_valid = _transcode(units, decode_one, encode_utf32, new_utf32(), policy)
    return ConversionResult(out, is_valid)


def utf8_to_utf16(
    units: Units, policy: ErrorPolicy | str = DEFAULT_POLICY
) -> ConversionResult[array]:
    return _to_utf16(units, decode_one_utf8, policy)


def utf8_to_utf32(
    units: Units, policy: ErrorPolicy | str = DEFAULT_POLICY
) -> ConversionResult[array]:
    return _to_utf32(units, decode_one_utf8, policy)


def utf16_to_utf8(
    units: Units, policy: ErrorPolicy | str = DEFAULT_POLICY
) -> ConversionResult[bytes]:
    return _to_utf8(units, decode_one_utf16, policy)


def utf16_to_utf32(
    units: Units, policy: ErrorPolicy | str = DEFAULT_POLICY
) -> ConversionResult[array]:
    return _to_utf32(units, decode_one_utf16, policy)


def utf32_to_utf8(
    units: Units, policy: ErrorPolicy | str = DEFAULT_POLICY
) -> ConversionResult[bytes]:
    return _to_utf8(units, decode_one_utf32, policy)


def utf32_to_utf16(
    units: Units, policy: ErrorPolicy | str = DEFAULT_POLICY
) -> ConversionResult[array]:
    return _to_utf16(units, decode_one_utf32, policy)


def validate_utf32(
    units: Units, policy: ErrorPolicy | str = DEFAULT_POLICY
) -> ConversionResult[array]:
    """
    Check UTF-32 units for surrogates and values beyond U+10FFFF, applying
    ``policy`` to each one found.
    """
    return _to_utf32(units, decode_one_utf32, policy)
