"""
Terminal display width of codepoint sequences.

Each codepoint is classified from static interval tables (zero width, double width)
in the manner of Markus Kuhn's ``wcwidth``. On top of that, a sequence scan folds
emoji modifier sequences (skin tones, variation selectors, tag sequences and
zero-width-joiner chains) into the width of their base emoji.

The tables are a pragmatic approximation of the East Asian Width property, not a
faithful copy of the Unicode data files.
"""
import logging
from bisect import bisect_right
from collections.abc import Sequence
from functools import lru_cache

from utfwidth.errors import UnicodeException
from utfwidth.policy import ErrorPolicy
from utfwidth.router import Encoding, Router, default_router

logger = logging.getLogger(__name__)

# Returned instead of a width when the input holds a control character
CONTROL_WIDTH = -1

ZERO_WIDTH_JOINER = 0x200D
VARIATION_SELECTOR_16 = 0xFE0F

Interval = tuple[int, int]

# Non-spacing characters: categories Me, Mn and Cf (minus U+00AD), Hangul Jamo
# medial vowels and final consonants, U+200B, and the emoji skin tone modifiers.
# fmt: off
ZERO_WIDTH: tuple[Interval, ...] = (
    (0x0300, 0x036F), (0x0483, 0x0486), (0x0488, 0x0489),
    (0x0591, 0x05BD), (0x05BF, 0x05BF), (0x05C1, 0x05C2),
    (0x05C4, 0x05C5), (0x05C7, 0x05C7), (0x0600, 0x0603),
    (0x0610, 0x0615), (0x064B, 0x065E), (0x0670, 0x0670),
    (0x06D6, 0x06E4), (0x06E7, 0x06E8), (0x06EA, 0x06ED),
    (0x070F, 0x070F), (0x0711, 0x0711), (0x0730, 0x074A),
    (0x07A6, 0x07B0), (0x07EB, 0x07F3), (0x0901, 0x0902),
    (0x093C, 0x093C), (0x0941, 0x0948), (0x094D, 0x094D),
    (0x0951, 0x0954), (0x0962, 0x0963), (0x0981, 0x0981),
    (0x09BC, 0x09BC), (0x09C1, 0x09C4), (0x09CD, 0x09CD),
    (0x09E2, 0x09E3), (0x0A01, 0x0A02), (0x0A3C, 0x0A3C),
    (0x0A41, 0x0A42), (0x0A47, 0x0A48), (0x0A4B, 0x0A4D),
    (0x0A70, 0x0A71), (0x0A81, 0x0A82), (0x0ABC, 0x0ABC),
    (0x0AC1, 0x0AC5), (0x0AC7, 0x0AC8), (0x0ACD, 0x0ACD),
    (0x0AE2, 0x0AE3), (0x0B01, 0x0B01), (0x0B3C, 0x0B3C),
    (0x0B3F, 0x0B3F), (0x0B41, 0x0B43), (0x0B4D, 0x0B4D),
    (0x0B56, 0x0B56), (0x0B82, 0x0B82), (0x0BC0, 0x0BC0),
    (0x0BCD, 0x0BCD), (0x0C3E, 0x0C40), (0x0C46, 0x0C48),
    (0x0C4A, 0x0C4D), (0x0C55, 0x0C56), (0x0CBC, 0x0CBC),
    (0x0CBF, 0x0CBF), (0x0CC6, 0x0CC6), (0x0CCC, 0x0CCD),
    (0x0CE2, 0x0CE3), (0x0D41, 0x0D43), (0x0D4D, 0x0D4D),
    (0x0DCA, 0x0DCA), (0x0DD2, 0x0DD4), (0x0DD6, 0x0DD6),
    (0x0E31, 0x0E31), (0x0E34, 0x0E3A), (0x0E47, 0x0E4E),
    (0x0EB1, 0x0EB1), (0x0EB4, 0x0EB9), (0x0EBB, 0x0EBC),
    (0x0EC8, 0x0ECD), (0x0F18, 0x0F19), (0x0F35, 0x0F35),
    (0x0F37, 0x0F37), (0x0F39, 0x0F39), (0x0F71, 0x0F7E),
    (0x0F80, 0x0F84), (0x0F86, 0x0F87), (0x0F90, 0x0F97),
    (0x0F99, 0x0FBC), (0x0FC6, 0x0FC6), (0x102D, 0x1030),
    (0x1032, 0x1032), (0x1036, 0x1037), (0x1039, 0x1039),
    (0x1058, 0x1059), (0x1160, 0x11FF), (0x135F, 0x135F),
    (0x1712, 0x1714), (0x1732, 0x1734), (0x1752, 0x1753),
    (0x1772, 0x1773), (0x17B4, 0x17B5), (0x17B7, 0x17BD),
    (0x17C6, 0x17C6), (0x17C9, 0x17D3), (0x17DD, 0x17DD),
    (0x180B, 0x180D), (0x18A9, 0x18A9), (0x1920, 0x1922),
    (0x1927, 0x1928), (0x1932, 0x1932), (0x1939, 0x193B),
    (0x1A17, 0x1A18), (0x1B00, 0x1B03), (0x1B34, 0x1B34),
    (0x1B36, 0x1B3A), (0x1B3C, 0x1B3C), (0x1B42, 0x1B42),
    (0x1B6B, 0x1B73), (0x1DC0, 0x1DCA), (0x1DFE, 0x1DFF),
    (0x200B, 0x200F), (0x202A, 0x202E), (0x2060, 0x2063),
    (0x206A, 0x206F), (0x20D0, 0x20EF), (0x302A, 0x302F),
    (0x3099, 0x309A), (0xA806, 0xA806), (0xA80B, 0xA80B),
    (0xA825, 0xA826), (0xFB1E, 0xFB1E), (0xFE00, 0xFE0F),
    (0xFE20, 0xFE23), (0xFEFF, 0xFEFF), (0xFFF9, 0xFFFB),
    (0x10A01, 0x10A03), (0x10A05, 0x10A06), (0x10A0C, 0x10A0F),
    (0x10A38, 0x10A3A), (0x10A3F, 0x10A3F), (0x1D167, 0x1D169),
    (0x1D173, 0x1D182), (0x1D185, 0x1D18B), (0x1D1AA, 0x1D1AD),
    (0x1D242, 0x1D244), (0x1F3FB, 0x1F3FF), (0xE0001, 0xE0001),
    (0xE0020, 0xE007F), (0xE0100, 0xE01EF),
)
# fmt: on

# Spacing characters of East Asian Wide (W) and Fullwidth (F) blocks, plus the
# emoji and pictograph planes.
WIDE: tuple[Interval, ...] = (
    (0x1100, 0x115F),  # Hangul Jamo initial consonants
    (0x2329, 0x232A),  # angle brackets
    (0x2E80, 0x303E),  # CJK radicals .. CJK symbols, except U+303F
    (0x3040, 0xA4CF),  # .. Yi
    (0xAC00, 0xD7A3),  # Hangul syllables
    (0xF900, 0xFAFF),  # CJK compatibility ideographs
    (0xFE10, 0xFE19),  # vertical forms
    (0xFE30, 0xFE6F),  # CJK compatibility forms
    (0xFF00, 0xFF60),  # fullwidth forms
    (0xFFE0, 0xFFE6),
    (0x1F000, 0x1FAFF),  # emoji, symbols and pictographs
    (0x20000, 0x2FFFD),
    (0x30000, 0x3FFFD),
)

EMOJI_BASES: tuple[Interval, ...] = (
    (0x2600, 0x27BF),  # miscellaneous symbols, dingbats
    (0x1F000, 0x1FAFF),
)

SKIN_TONE_MODIFIERS: Interval = (0x1F3FB, 0x1F3FF)
TAG_CHARACTERS: Interval = (0xE0020, 0xE007F)


def _check_table(table: tuple[Interval, ...]) -> tuple[int, ...]:
    """Make sure a table is sorted and disjoint, returning its interval starts."""
    previous_last = -1
    for first, last in table:
        if first > last or first <= previous_last:
            raise UnicodeException(f"Width table out of order at {first:#x}")
        previous_last = last
    return tuple(first for first, _ in table)


_ZERO_WIDTH_FIRSTS = _check_table(ZERO_WIDTH)
_WIDE_FIRSTS = _check_table(WIDE)


def _in_table(
    codepoint: int, table: tuple[Interval, ...], firsts: Sequence[int]
) -> bool:
    index = bisect_right(firsts, codepoint) - 1
    return index >= 0 and codepoint <= table[index][1]


def _in_interval(codepoint: int, interval: Interval) -> bool:
    return interval[0] <= codepoint <= interval[1]


def is_emoji_base(codepoint: int) -> bool:
    return any(_in_interval(codepoint, interval) for interval in EMOJI_BASES)


def is_emoji_modifier(codepoint: int) -> bool:
    """Codepoints swallowed after an emoji base without adding width."""
    return (
        _in_interval(codepoint, SKIN_TONE_MODIFIERS)
        or codepoint == ZERO_WIDTH_JOINER
        or codepoint == VARIATION_SELECTOR_16
        or _in_interval(codepoint, TAG_CHARACTERS)
    )


@lru_cache(maxsize=4096)
def classify(codepoint: int) -> int:
    """
    Column width of a single codepoint:

    - 0 for NUL, combining marks, format characters and skin tone modifiers;
    - -1 for other C0/C1 control characters and DEL;
    - 2 for East Asian wide and fullwidth characters and emoji;
    - 1 for everything else.
    """
    # printable ASCII
    if 0x20 <= codepoint < 0x7F:
        return 1
    if codepoint == 0:
        return 0
    if codepoint < 0x20 or 0x7F <= codepoint < 0xA0:
        return CONTROL_WIDTH
    if _in_table(codepoint, ZERO_WIDTH, _ZERO_WIDTH_FIRSTS):
        return 0
    if _in_table(codepoint, WIDE, _WIDE_FIRSTS):
        return 2
    return 1


wcwidth = classify


def codepoints_width(codepoints: Sequence[int]) -> int:
    """
    Total column width of a codepoint sequence, or -1 if it holds a control
    character.

    An emoji base counts its own width and absorbs the modifiers following it. A
    zero-width joiner in that run also absorbs the emoji after it, so a whole ZWJ
    chain (family, profession sequences) takes the width of its first emoji.
    """
    total = 0
    index = 0
    end = len(codepoints)

    while index < end:
        codepoint = codepoints[index]
        char_width = classify(codepoint)
        if char_width < 0:
            return CONTROL_WIDTH

        total += char_width
        index += 1
        if not is_emoji_base(codepoint):
            continue

        while index < end and is_emoji_modifier(codepoints[index]):
            if codepoints[index] == ZERO_WIDTH_JOINER and index + 1 < end:
                index += 1
                if is_emoji_base(codepoints[index]):
                    index += 1
            else:
                index += 1

    return total


wcswidth = codepoints_width


def width(
    text: str | Sequence[int],
    encoding: Encoding | str | None = None,
    router: Router = default_router,
) -> int:
    """
    Number of terminal columns ``text`` occupies, or -1 if it holds a control
    character.

    A ``str`` is measured as its codepoints. Other sequences are code units in the
    declared ``encoding``; bytes-like objects default to UTF-8. Ill-formed units are
    dropped before measuring, so they contribute no width.
    """
    if isinstance(text, str):
        if encoding is not None:
            raise TypeError("encoding is not accepted for str input")
        return codepoints_width([ord(char) for char in text])

    if encoding is None:
        if not isinstance(text, (bytes, bytearray, memoryview)):
            raise TypeError(f"encoding is required for {type(text).__name__} input")
        encoding = Encoding.UTF8

    codepoints = router.convert(
        text, encoding, Encoding.UTF32, ErrorPolicy.SKIP_INVALID_VALUES
    )
    if not codepoints:
        logger.debug("Ignoring invalid %s units while measuring width", encoding)
    return codepoints_width(codepoints.value)


def uswidth(units: Sequence[int], encoding: Encoding | str) -> int:
    return width(units, encoding)


def wswidth(units: Sequence[int], router: Router = default_router) -> int:
    """Width of a native wide sequence."""
    return width(units, Encoding.WIDE, router)
