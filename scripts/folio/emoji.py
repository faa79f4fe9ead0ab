"""
Emoji detection for the content quality gate.

Every code point in the candidate ranges is reported on its own: a
compound glyph such as 🏗️ (U+1F3D7 U+FE0F) yields two occurrences, and
ZWJ sequences yield one occurrence per joined code point plus one per
joiner.
"""

import re
from dataclasses import dataclass


# ── Candidate ranges ───────────────────────────────────────────────────
#
# Each: (first, last, description)

EMOJI_RANGES = [
    (0x1F600, 0x1F64F, "Emoticons"),
    (0x1F300, 0x1F5FF, "Miscellaneous Symbols and Pictographs"),
    (0x1F680, 0x1F6FF, "Transport and Map Symbols"),
    (0x2600, 0x26FF, "Miscellaneous Symbols"),
    (0x2700, 0x27BF, "Dingbats"),
    (0x2B00, 0x2BFF, "Miscellaneous Symbols and Arrows"),
    (0x1F900, 0x1F9FF, "Supplemental Symbols and Pictographs"),
    (0x1FA70, 0x1FAFF, "Symbols and Pictographs Extended-A"),
    (0x1F004, 0x1F0CF, "Mahjong and playing cards"),
    (0x1F170, 0x1F251, "Enclosed alphanumerics and regional indicators"),
    (0x1F18E, 0x1F18E, "Negative squared AB"),
    (0x3030, 0x3030, "Wavy dash"),
    (0x303D, 0x303D, "Part alternation mark"),
    (0x3297, 0x3297, "Circled ideograph congratulation"),
    (0x3299, 0x3299, "Circled ideograph secret"),
    (0x1F3FB, 0x1F3FF, "Fitzpatrick skin tone modifiers"),
    (0x200D, 0x200D, "Zero width joiner"),
    (0xFE0F, 0xFE0F, "Variation selector-16"),
]

# Extra characters removed by strip_emojis() on top of EMOJI_RANGES
# (arrows, clocks, media controls, geometric shapes).
STRIP_EXTRA_RANGES = [
    (0x1F1E0, 0x1F1FF),
    (0x1F018, 0x1F270),
    (0x2194, 0x2199),
    (0x21A9, 0x21AA),
    (0x231A, 0x231B),
    (0x2328, 0x2328),
    (0x238C, 0x238C),
    (0x23CF, 0x23CF),
    (0x23E9, 0x23F3),
    (0x23F8, 0x23FA),
    (0x24C2, 0x24C2),
    (0x25AA, 0x25AB),
    (0x25B6, 0x25B6),
    (0x25C0, 0x25C0),
    (0x25FB, 0x25FE),
    (0x2934, 0x2935),
]


def _char_class(ranges):
    parts = []
    for first, last in ranges:
        if first == last:
            parts.append(re.escape(chr(first)))
        else:
            parts.append(f"{re.escape(chr(first))}-{re.escape(chr(last))}")
    return re.compile("[" + "".join(parts) + "]")


EMOJI_PATTERN = _char_class([(first, last) for first, last, _ in EMOJI_RANGES])

STRIP_PATTERN = _char_class(
    [(first, last) for first, last, _ in EMOJI_RANGES] + STRIP_EXTRA_RANGES
)


@dataclass(frozen=True)
class EmojiOccurrence:
    char: str
    offset: int
    line: int
    column: int

    @property
    def codepoint(self):
        return ord(self.char)

    @property
    def unicode(self):
        """Code point label, e.g. U+1F680."""
        return f"U+{self.codepoint:04X}"


def line_and_column(text, offset):
    """
    1-based line and column of a character offset. Columns count code
    points, so an astral emoji advances the column by one, not two as a
    UTF-16 count would.
    """
    line = text.count("\n", 0, offset) + 1
    line_start = text.rfind("\n", 0, offset) + 1
    return line, offset - line_start + 1


class EmojiScanner:
    """
    Finds emoji candidates in text and classifies them against an
    allow-list of exactly-matching characters.

    Usage:
        scanner = EmojiScanner(config.allow_list)
        for occ in scanner.violations(text):
            print(occ.line, occ.column, occ.unicode)
    """

    def __init__(self, allowed=()):
        self.allowed = frozenset(allowed)

    def scan(self, text):
        """Every candidate code point in text, in order of appearance."""
        return [
            EmojiOccurrence(match.group(0), match.start(), *line_and_column(text, match.start()))
            for match in EMOJI_PATTERN.finditer(text)
        ]

    def is_approved(self, char):
        return char in self.allowed

    def violations(self, text):
        return [occ for occ in self.scan(text) if not self.is_approved(occ.char)]


def strip_emojis(text):
    """Remove every emoji candidate. Returns (new_text, removed_count)."""
    return STRIP_PATTERN.subn("", text)
