"""Exceptions raised by utfwidth."""
from typing import Any


class UnicodeException(Exception):
    """Base class for exceptions"""


class DecodeException(UnicodeException):
    """Indicates an input sequence could not be converted cleanly"""

    def __init__(self, message: str, partial: Any = None) -> None:
        super().__init__(message)
        self.partial = partial


class UnsupportedConversionException(UnicodeException, ValueError):
    """Indicates an unsupported (or unknown) encoding or encoding pair"""
