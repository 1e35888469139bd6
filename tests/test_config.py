"""Tests for utfwidth.config"""
import ctypes
import importlib
import logging

import pytest

from utfwidth import config
from utfwidth.config import (
    NATIVE_WIDE_ENV_VAR,
    NativeWideEncoding,
    native_wide_encoding,
)
from utfwidth.errors import UnsupportedConversionException


def test_default_follows_wchar(monkeypatch) -> None:
    """Without an override the wchar_t width decides."""
    monkeypatch.delenv(NATIVE_WIDE_ENV_VAR, raising=False)
    expected = (
        NativeWideEncoding.UTF16
        if ctypes.sizeof(ctypes.c_wchar) == 2
        else NativeWideEncoding.UTF32
    )

    assert native_wide_encoding() is expected


@pytest.mark.parametrize(
    "value,expected",
    [
        ("utf-16", NativeWideEncoding.UTF16),
        ("UTF16", NativeWideEncoding.UTF16),
        ("16", NativeWideEncoding.UTF16),
        ("utf_32", NativeWideEncoding.UTF32),
        (" utf-32 ", NativeWideEncoding.UTF32),
    ],
)
def test_environment_override(monkeypatch, value: str, expected) -> None:
    """The environment variable forces the native wide encoding."""
    monkeypatch.setenv(NATIVE_WIDE_ENV_VAR, value)

    assert native_wide_encoding() is expected


def test_environment_override_unknown(monkeypatch) -> None:
    """Anything but UTF-16 or UTF-32 is rejected."""
    monkeypatch.setenv(NATIVE_WIDE_ENV_VAR, "utf-8")

    with pytest.raises(UnsupportedConversionException):
        native_wide_encoding()


def test_typecodes_have_expected_widths() -> None:
    """The array typecodes hold 2 and 4 byte code units."""
    from array import array

    assert array(config.UTF16_TYPECODE).itemsize == 2
    assert array(config.UTF32_TYPECODE).itemsize == 4


def test_import_ignores_bad_override(monkeypatch, caplog) -> None:
    """A bad override is logged at import, leaving the wchar_t width in effect."""
    expected = "UTF16" if ctypes.sizeof(ctypes.c_wchar) == 2 else "UTF32"
    monkeypatch.setenv(NATIVE_WIDE_ENV_VAR, "ebcdic")
    try:
        with caplog.at_level(logging.WARNING, logger="utfwidth.config"):
            reloaded = importlib.reload(config)

        assert reloaded.NATIVE_WIDE_ENCODING.name == expected
        assert "ebcdic" in caplog.text
        with pytest.raises(UnsupportedConversionException):
            reloaded.native_wide_encoding()
    finally:
        monkeypatch.undo()
        importlib.reload(config)
