"""Tests for utfwidth.width"""
import itertools

import pytest

from utfwidth import CONTROL_WIDTH, classify, width, wswidth
from utfwidth.config import NativeWideEncoding
from utfwidth.router import Encoding, Router, encode_str
from utfwidth.width import WIDE, ZERO_WIDTH, codepoints_width, uswidth

WIDTH_CASES = [
    (13, "Hello, World!"),
    (6, "Résumé"),
    (6, "😂😂😂"),
    (0, ""),
    (2, "👩🏼‍🚀"),
    (4, "𐌀𐌍𐌓𐌀"),
    (11, "𝕄𝕒𝕥𝕙𝕖𝕞𝕒𝕥𝕚𝕔𝕤"),
    (6, "🌍🌎🌏"),
    (2, "👨‍👩‍👧‍👦"),
    (10, "𠔻𠕋𠖊𠖍𠖐"),
    (2, "𠮷"),
    (6, "𠀤𠀧𠁀"),
    (4, "𠊛好"),
    (6, "𪚥𪆷𪃹"),
    (6, "𪜈𪜋𪜌"),
    (7, "اَلْعَرَبِيَّةُ"),
]

ROUTERS = [Router(NativeWideEncoding.UTF16), Router(NativeWideEncoding.UTF32)]


def test_classify_ascii() -> None:
    """Printable ASCII is one column."""
    assert all(classify(codepoint) == 1 for codepoint in range(0x20, 0x7F))


def test_classify_null() -> None:
    """NUL takes no space."""
    assert classify(0) == 0


@pytest.mark.parametrize("codepoint", [0x01, 0x09, 0x0A, 0x1B, 0x1F, 0x7F, 0x85, 0x9F])
def test_classify_control_characters(codepoint: int) -> None:
    """C0 and C1 controls and DEL are not printable."""
    assert classify(codepoint) == CONTROL_WIDTH


@pytest.mark.parametrize(
    "codepoint",
    [0x0301, 0x064E, 0x1160, 0x200B, 0x200D, 0xFE0F, 0xFEFF, 0x1F3FB, 0xE0100],
)
def test_classify_zero_width(codepoint: int) -> None:
    """Combining marks, joiners, format characters and skin tones are zero width."""
    assert classify(codepoint) == 0


@pytest.mark.parametrize(
    "codepoint",
    [0x1100, 0x2329, 0x4E2D, 0xAC00, 0xFF21, 0x1F602, 0x1FAFF, 0x20BB7, 0x3134A],
)
def test_classify_wide(codepoint: int) -> None:
    """East Asian wide, fullwidth and emoji codepoints are two columns."""
    assert classify(codepoint) == 2


@pytest.mark.parametrize(
    "codepoint", [0x00A0, 0x00E9, 0x303F, 0x2764, 0x10300, 0x1D540]
)
def test_classify_narrow(codepoint: int) -> None:
    """Everything else is one column."""
    assert classify(codepoint) == 1


def test_tables_are_sorted_and_disjoint() -> None:
    """Both interval tables can be binary searched."""
    for table in (ZERO_WIDTH, WIDE):
        for (_, last), (first, _) in itertools.pairwise(table):
            assert last < first


@pytest.mark.parametrize("expected,text", WIDTH_CASES)
def test_width_cases(expected: int, text: str) -> None:
    """Test the width of each known string."""
    assert width(text) == expected


@pytest.mark.parametrize("expected,text", WIDTH_CASES)
def test_width_from_utf8_bytes(expected: int, text: str) -> None:
    """Bytes are measured as UTF-8 by default."""
    assert width(text.encode("utf-8")) == expected


@pytest.mark.parametrize("router", ROUTERS)
@pytest.mark.parametrize("expected,text", WIDTH_CASES)
def test_width_same_in_every_encoding(router: Router, expected: int, text: str) -> None:
    """Converting a string does not change its width."""
    for kind in Encoding:
        units = router.convert(text.encode("utf-8"), Encoding.UTF8, kind).value
        assert width(units, kind, router) == expected


@pytest.mark.parametrize("expected,text", WIDTH_CASES)
def test_uswidth_and_wswidth(expected: int, text: str) -> None:
    """The named helpers agree with width."""
    assert uswidth(encode_str(text, "utf-16").value, "utf-16") == expected
    assert uswidth(encode_str(text, "utf-32").value, Encoding.UTF32) == expected
    assert wswidth(encode_str(text, Encoding.WIDE).value) == expected


def test_width_example_strings() -> None:
    """Chinese characters are two columns and emoji sequences collapse."""
    assert width("中国人") == 6
    assert width("😂🌎👨‍👩‍👧‍👦") == 6


def test_width_combining_characters() -> None:
    """é written as e + combining acute accent is one column."""
    assert width("e\u0301") == 1


def test_width_mixed_content() -> None:
    """Mixed ASCII, CJK and emoji add up."""
    assert width("Hello 你好") == 10
    assert width("🤖 Agent") == 8
    assert width("ＡＢ") == 4


@pytest.mark.parametrize("text", ["a\tb", "line\n", "\x1b[31m", "\x7f", "a\x85"])
def test_control_character_fails_whole_string(text: str) -> None:
    """A single control character makes the width undefined."""
    assert width(text) == CONTROL_WIDTH


def test_null_is_zero_width() -> None:
    """NUL does not end the scan and adds nothing."""
    assert width("a\x00b") == 2


def test_skin_tone() -> None:
    """A skin tone modifier folds into its base."""
    assert width("👍🏽") == 2
    assert width("👍🏽👍🏿") == 4


def test_profession_with_dingbat() -> None:
    """A ZWJ sequence ending in a dingbat and VS16 counts once."""
    assert width("👨‍⚕️") == 2


def test_tag_sequence() -> None:
    """Tag characters after a flag base fold into it."""
    england = "🏴\U000E0067\U000E0062\U000E0065\U000E006E\U000E0067\U000E007F"
    assert width(england) == 2


def test_trailing_joiner() -> None:
    """A joiner at the end of the text is swallowed."""
    assert width("😂‍") == 2


def test_joiner_before_non_emoji() -> None:
    """A joiner only swallows emoji; other text after it still counts."""
    assert width("😂‍a") == 3


def test_modifier_without_base() -> None:
    """A skin tone on its own is zero width."""
    assert width("\U0001F3FB") == 0


def test_regional_indicators_are_not_paired() -> None:
    """Flag pairs are not folded: each regional indicator counts."""
    assert width("🇺🇸") == 4


def test_control_after_emoji() -> None:
    """The scan still fails on a control character following an emoji."""
    assert codepoints_width([0x1F602, 0x200D, 0x0A]) == CONTROL_WIDTH


def test_invalid_units_are_dropped() -> None:
    """Ill-formed units contribute nothing."""
    assert width(b"ab\xff\xc0") == 2
    assert width([0x61, 0xD800, 0x62], "utf-16") == 2


def test_encoding_required_for_unit_lists() -> None:
    """A list of ints has no implied encoding."""
    with pytest.raises(TypeError):
        width([0x61, 0x62])


def test_encoding_rejected_for_str() -> None:
    """A str is always measured as codepoints."""
    with pytest.raises(TypeError):
        width("ab", "utf-8")
