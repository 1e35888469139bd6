"""
Error policies and the result type shared by every conversion.

A conversion never raises on malformed input. Instead it returns a
``ConversionResult`` holding whatever was salvaged together with a validity flag,
so callers can inspect the partial output even when the input was ill-formed.
"""
import enum
from dataclasses import dataclass
from typing import Generic, TypeVar

from utfwidth.errors import DecodeException, UnsupportedConversionException

T = TypeVar("T")

REPLACEMENT_CHARACTER = 0xFFFD


class ErrorPolicy(enum.Enum):
    """Determines what happens when an invalid sequence is encountered"""

    # Emit U+FFFD for each invalid unit and keep going
    USE_REPLACEMENT_CHARACTER = "replace"
    # Drop invalid units and keep going
    SKIP_INVALID_VALUES = "skip"
    # Return what was converted before the first invalid unit
    STOP_ON_FIRST_ERROR = "stop"

    @classmethod
    def lookup(cls, policy: "ErrorPolicy | str") -> "ErrorPolicy":
        """Accept either a member or its short name ("replace", "skip", "stop")."""
        if isinstance(policy, ErrorPolicy):
            return policy
        try:
            return cls(policy.lower())
        except (AttributeError, ValueError) as error:
            raise UnsupportedConversionException(
                f"Unknown error policy {policy!r}"
            ) from error


DEFAULT_POLICY = ErrorPolicy.USE_REPLACEMENT_CHARACTER


@dataclass(frozen=True)
class ConversionResult(Generic[T]):
    """
    The output of a conversion paired with whether the input was well formed.

    Unlike a plain success/failure type, ``value`` is always populated: on failure it
    holds the partial result as governed by the ``ErrorPolicy`` in effect.
    """

    value: T
    is_valid: bool

    def __bool__(self) -> bool:
        return self.is_valid

    def unwrap(self) -> T:
        """Return the value, raising DecodeException if the input was ill-formed."""
        if not self.is_valid:
            raise DecodeException("Input contained invalid code units", self.value)
        return self.value
