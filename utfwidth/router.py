"""
Routing between the five supported string kinds.

Every ``(source, destination)`` pair is resolved once, when a ``Router`` is built,
into a short plan of steps:

1. identity: a copy, always valid;
2. reinterpretation: narrow <-> UTF-8 and wide <-> the native Unicode form share a
   code unit width, so the units are cast as they are, without validation;
3. direct transcoding between two Unicode forms;
4. for anything else, a pivot through the Unicode counterpart of the non-Unicode
   side (UTF-8 for narrow, the native Unicode form for wide).

No plan holds more than two transcoding steps and reinterpretable pairs hold none.
"""
import enum
import itertools
import logging
from array import array
from collections.abc import Callable, Sequence
from typing import Any, NamedTuple

from utfwidth import codec
from utfwidth.config import (
    NATIVE_WIDE_ENCODING,
    UTF16_TYPECODE,
    UTF32_TYPECODE,
    NativeWideEncoding,
)
from utfwidth.errors import UnsupportedConversionException
from utfwidth.policy import DEFAULT_POLICY, ConversionResult, ErrorPolicy

logger = logging.getLogger(__name__)


class Encoding(enum.Enum):
    """The kinds of code unit sequences the library converts between"""

    NARROW = "narrow"  # 8 bit units, assumed to hold UTF-8
    WIDE = "wide"  # the platform's wchar_t units, UTF-16 or UTF-32
    UTF8 = "utf-8"
    UTF16 = "utf-16"
    UTF32 = "utf-32"

    @property
    def is_unicode(self) -> bool:
        return self in (Encoding.UTF8, Encoding.UTF16, Encoding.UTF32)

    @classmethod
    def lookup(cls, encoding: "Encoding | str") -> "Encoding":
        """
        Resolve an ``Encoding`` from a member or a name such as "utf-8", "UTF_16",
        "utf32", "narrow" or "wide". An UnsupportedConversionException is raised for
        anything else.
        """
        if isinstance(encoding, Encoding):
            return encoding
        if not isinstance(encoding, str):
            raise UnsupportedConversionException(f"Unknown encoding {encoding!r}")

        match encoding.strip().lower().replace("_", "").replace("-", ""):
            case "utf8" | "u8":
                return cls.UTF8
            case "utf16" | "u16":
                return cls.UTF16
            case "utf32" | "u32":
                return cls.UTF32
            case "narrow" | "char":
                return cls.NARROW
            case "wide" | "wchar":
                return cls.WIDE
            case _:
                raise UnsupportedConversionException(f"Unknown encoding {encoding}")


Converter = Callable[[Sequence[int], ErrorPolicy], ConversionResult[Any]]


class Step(NamedTuple):
    """One stage of a conversion plan."""

    kind: str  # "copy", "reinterpret" or "transcode"
    source: Encoding
    destination: Encoding
    run: Converter

    def __str__(self) -> str:
        return f"{self.kind} {self.source.value} -> {self.destination.value}"


_TRANSCODERS: dict[tuple[Encoding, Encoding], Converter] = {
    (Encoding.UTF8, Encoding.UTF16): codec.utf8_to_utf16,
    (Encoding.UTF8, Encoding.UTF32): codec.utf8_to_utf32,
    (Encoding.UTF16, Encoding.UTF8): codec.utf16_to_utf8,
    (Encoding.UTF16, Encoding.UTF32): codec.utf16_to_utf32,
    (Encoding.UTF32, Encoding.UTF8): codec.utf32_to_utf8,
    (Encoding.UTF32, Encoding.UTF16): codec.utf32_to_utf16,
}


class Router:
    """
    A conversion strategy table for one native wide encoding.

    Plans are resolved for every pair of ``Encoding`` kinds at construction, so a
    conversion only looks its plan up and runs it.
    """

    def __init__(self, native_wide: NativeWideEncoding = NATIVE_WIDE_ENCODING) -> None:
        self.native_wide = native_wide
        self.native_unicode = (
            Encoding.UTF16
            if native_wide is NativeWideEncoding.UTF16
            else Encoding.UTF32
        )
        self._typecodes = {
            Encoding.NARROW: None,
            Encoding.UTF8: None,
            Encoding.UTF16: UTF16_TYPECODE,
            Encoding.UTF32: UTF32_TYPECODE,
            Encoding.WIDE: (
                UTF16_TYPECODE
                if native_wide is NativeWideEncoding.UTF16
                else UTF32_TYPECODE
            ),
        }
        self._reinterpretable = frozenset(
            [
                (Encoding.NARROW, Encoding.UTF8),
                (Encoding.UTF8, Encoding.NARROW),
                (Encoding.WIDE, self.native_unicode),
                (self.native_unicode, Encoding.WIDE),
            ]
        )
        self._table = {
            (source, destination): self._resolve(source, destination)
            for source, destination in itertools.product(Encoding, repeat=2)
        }
        logger.debug(
            "Built conversion table for native wide %s (%d pairs)",
            native_wide.name,
            len(self._table),
        )

    def is_reinterpretable(self, source: Encoding, destination: Encoding) -> bool:
        """True if units can be cast from one kind to the other without decoding."""
        return (source, destination) in self._reinterpretable

    def counterpart(self, encoding: Encoding) -> Encoding:
        """The Unicode form a kind pivots through."""
        if encoding is Encoding.NARROW:
            return Encoding.UTF8
        if encoding is Encoding.WIDE:
            return self.native_unicode
        return encoding

    def cast(self, units: Sequence[int], destination: Encoding) -> bytes | array:
        """Copy ``units`` into the container type of ``destination`` as they are."""
        typecode = self._typecodes[destination]
        if typecode is None:
            return bytes(units)
        return array(typecode, units)

    def _copy_step(self, source: Encoding, destination: Encoding, kind: str) -> Step:
        def run(units: Sequence[int], policy: ErrorPolicy) -> ConversionResult[Any]:
            return ConversionResult(self.cast(units, destination), True)

        return Step(kind, source, destination, run)

    def _resolve(self, source: Encoding, destination: Encoding) -> tuple[Step, ...]:
        if source is destination:
            return (self._copy_step(source, destination, "copy"),)
        if self.is_reinterpretable(source, destination):
            return (self._copy_step(source, destination, "reinterpret"),)
        if source.is_unicode and destination.is_unicode:
            transcoder = _TRANSCODERS[(source, destination)]
            return (Step("transcode", source, destination, transcoder),)

        pivot = (
            self.counterpart(source)
            if not source.is_unicode
            else self.counterpart(destination)
        )
        return self._resolve(source, pivot) + self._resolve(pivot, destination)

    def plan(
        self, source: Encoding | str, destination: Encoding | str
    ) -> tuple[Step, ...]:
        """The steps a conversion from ``source`` to ``destination`` runs."""
        key = (Encoding.lookup(source), Encoding.lookup(destination))
        try:
            return self._table[key]
        except KeyError as key_error:
            raise UnsupportedConversionException(
                f"No conversion from {key[0]} to {key[1]}"
            ) from key_error

    def transcoding_steps(
        self, source: Encoding | str, destination: Encoding | str
    ) -> int:
        return sum(step.kind == "transcode" for step in self.plan(source, destination))

    def convert(
        self,
        units: Sequence[int],
        source: Encoding | str,
        destination: Encoding | str,
        policy: ErrorPolicy | str = DEFAULT_POLICY,
    ) -> ConversionResult[Any]:
        """
        Convert ``units`` declared as ``source`` into ``destination``.

        Malformed input never raises: the result carries the (possibly partial) output
        and is invalid if any step met an invalid unit. An unknown encoding raises
        UnsupportedConversionException.
        """
        steps = self.plan(source, destination)
        policy = ErrorPolicy.lookup(policy)

        value: Any = units
        is_valid = True
        for step in steps:
            result = step.run(value, policy)
            value = result.value
            is_valid = is_valid and result.is_valid

        if not is_valid:
            logger.debug(
                "Invalid input converting %s -> %s under %s",
                steps[0].source.value,
                steps[-1].destination.value,
                policy.name,
            )
        return ConversionResult(value, is_valid)


default_router = Router()


def convert(
    units: Sequence[int],
    source: Encoding | str,
    destination: Encoding | str,
    policy: ErrorPolicy | str = DEFAULT_POLICY,
) -> ConversionResult[Any]:
    """Convert with the router for the platform's native wide encoding."""
    return default_router.convert(units, source, destination, policy)


def u8s(
    units: Sequence[int],
    source: Encoding | str,
    policy: ErrorPolicy | str = DEFAULT_POLICY,
) -> ConversionResult[bytes]:
    return convert(units, source, Encoding.UTF8, policy)


def u16s(
    units: Sequence[int],
    source: Encoding | str,
    policy: ErrorPolicy | str = DEFAULT_POLICY,
) -> ConversionResult[array]:
    return convert(units, source, Encoding.UTF16, policy)


def u32s(
    units: Sequence[int],
    source: Encoding | str,
    policy: ErrorPolicy | str = DEFAULT_POLICY,
) -> ConversionResult[array]:
    return convert(units, source, Encoding.UTF32, policy)


def us(
    units: Sequence[int],
    source: Encoding | str,
    policy: ErrorPolicy | str = DEFAULT_POLICY,
) -> ConversionResult[array]:
    """Convert to the Unicode form matching the native wide encoding."""
    return convert(units, source, default_router.native_unicode, policy)


def ws(
    units: Sequence[int],
    source: Encoding | str,
    policy: ErrorPolicy | str = DEFAULT_POLICY,
) -> ConversionResult[array]:
    return convert(units, source, Encoding.WIDE, policy)


def s(
    units: Sequence[int],
    source: Encoding | str,
    policy: ErrorPolicy | str = DEFAULT_POLICY,
) -> ConversionResult[bytes]:
    return convert(units, source, Encoding.NARROW, policy)


# Unchecked casts, for when a ConversionResult would only get in the way


def ws_to_us(units: Sequence[int]) -> array:
    return default_router.cast(units, default_router.native_unicode)


def us_to_ws(units: Sequence[int]) -> array:
    return default_router.cast(units, Encoding.WIDE)


def s_to_u8s(units: Sequence[int]) -> bytes:
    return bytes(units)


def u8s_to_s(units: Sequence[int]) -> bytes:
    return bytes(units)


def encode_str(
    text: str,
    destination: Encoding | str,
    policy: ErrorPolicy | str = DEFAULT_POLICY,
) -> ConversionResult[Any]:
    """
    Encode a Python string into ``destination``. The string is taken as a sequence of
    codepoints, so lone surrogates in it are treated as invalid input.
    """
    codepoints = codec.new_utf32()
    codepoints.extend(ord(char) for char in text)
    validated = codec.validate_utf32(codepoints, policy)
    result = convert(validated.value, Encoding.UTF32, destination, policy)
    return ConversionResult(result.value, validated.is_valid and result.is_valid)


def decode_str(
    units: Sequence[int],
    source: Encoding | str,
    policy: ErrorPolicy | str = DEFAULT_POLICY,
) -> ConversionResult[str]:
    """Decode ``units`` into a Python string."""
    result = convert(units, source, Encoding.UTF32, policy)
    # plans without a transcoding step never looked at the codepoints
    validated = codec.validate_utf32(result.value, policy)
    return ConversionResult(
        "".join(map(chr, validated.value)), result.is_valid and validated.is_valid
    )
