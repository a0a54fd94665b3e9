"""Byte and codepoint classification for the decoder and the recognizer.

Bytes are classified by their role in UTF-8 (one table entry per value).
Codepoints are classified by the notation field a private-use value stands
for, so the grammar can treat `M` and U+1D803 as the same lane.
"""

from dataclasses import dataclass
from enum import Enum


class ByteCategory(Enum):
    ASCII = "ascii"
    UTF8_LEAD2 = "utf8_lead2"
    UTF8_LEAD3 = "utf8_lead3"
    UTF8_LEAD4 = "utf8_lead4"
    UTF8_CONT = "utf8_cont"
    INVALID = "invalid"


@dataclass(frozen=True)
class ByteCode:
    value: int
    hex: str
    category: ByteCategory
    sequence_length: int  # total bytes in a sequence this byte leads, 0 if it cannot lead
    payload_mask: int     # bits of this byte that carry codepoint data


def classify_byte(value: int) -> ByteCode:
    """Classify a single byte value."""
    h = f"0x{value:02X}"
    if value < 0x80:
        return ByteCode(value, h, ByteCategory.ASCII, 1, 0x7F)
    if value < 0xC0:
        return ByteCode(value, h, ByteCategory.UTF8_CONT, 0, 0x3F)
    if value < 0xE0:
        return ByteCode(value, h, ByteCategory.UTF8_LEAD2, 2, 0x1F)
    if value < 0xF0:
        return ByteCode(value, h, ByteCategory.UTF8_LEAD3, 3, 0x0F)
    if value < 0xF8:
        return ByteCode(value, h, ByteCategory.UTF8_LEAD4, 4, 0x07)
    return ByteCode(value, h, ByteCategory.INVALID, 0, 0x00)


# Build the complete table
BYTE_TABLE = [classify_byte(v) for v in range(256)]


# UTF-16 surrogate blocks
LEAD_SURROGATE_FIRST = 0xD800
TRAIL_SURROGATE_FIRST = 0xDC00
SURROGATE_LAST = 0xDFFF
MAX_CODEPOINT = 0x10FFFF


def is_lead_surrogate(unit: int) -> bool:
    return LEAD_SURROGATE_FIRST <= unit < TRAIL_SURROGATE_FIRST


def is_trail_surrogate(unit: int) -> bool:
    return TRAIL_SURROGATE_FIRST <= unit <= SURROGATE_LAST


def combine_surrogates(lead: int, trail: int) -> int:
    """Join a UTF-16 surrogate pair into one scalar value."""
    return 0x10000 + ((lead - LEAD_SURROGATE_FIRST) << 10) + (trail - TRAIL_SURROGATE_FIRST)


# Private-use encodings of grammar fields
PREFIX_CODEPOINT = 0x1D800
LANE_CODEPOINTS = {0x1D801: "B", 0x1D802: "L", 0x1D803: "M", 0x1D804: "R"}
COORD_FIRST = 0x1D80C
COORD_LAST = 0x1D9FF
SYMBOL_FIRST = 0x40001
SYMBOL_LAST = 0x4F428
PUNCTUATION_FIRST = 0x4F2A1  # S38700

LANE_LETTERS = "BLMR"


class FieldClass(Enum):
    PREFIX = "prefix"
    LANE = "lane"
    COORDINATE = "coordinate"
    SYMBOL = "symbol"
    PUNCTUATION = "punctuation"
    OTHER = "other"


def classify_codepoint(cp: int) -> FieldClass:
    """Classify a private-use codepoint by the notation field it encodes.

    Punctuation symbols are a sub-range of the symbol range and are reported
    as PUNCTUATION.
    """
    if cp == PREFIX_CODEPOINT:
        return FieldClass.PREFIX
    if cp in LANE_CODEPOINTS:
        return FieldClass.LANE
    if COORD_FIRST <= cp <= COORD_LAST:
        return FieldClass.COORDINATE
    if PUNCTUATION_FIRST <= cp <= SYMBOL_LAST:
        return FieldClass.PUNCTUATION
    if SYMBOL_FIRST <= cp <= SYMBOL_LAST:
        return FieldClass.SYMBOL
    return FieldClass.OTHER


def is_symbol_codepoint(cp: int) -> bool:
    return SYMBOL_FIRST <= cp <= SYMBOL_LAST


def is_punctuation_codepoint(cp: int) -> bool:
    return PUNCTUATION_FIRST <= cp <= SYMBOL_LAST


def is_coordinate_codepoint(cp: int) -> bool:
    return COORD_FIRST <= cp <= COORD_LAST


def is_lane(cp: int) -> bool:
    """True for the lane letters B, L, M, R and their codepoints."""
    return cp in LANE_CODEPOINTS or (cp < 0x80 and chr(cp) in LANE_LETTERS)


def lane_letter(cp: int) -> str:
    if cp in LANE_CODEPOINTS:
        return LANE_CODEPOINTS[cp]
    if cp < 0x80 and chr(cp) in LANE_LETTERS:
        return chr(cp)
    raise ValueError(f"Not a lane: U+{cp:04X}")
