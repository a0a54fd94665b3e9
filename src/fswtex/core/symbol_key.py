"""Symbol key and coordinate arithmetic.

A symbol key is `S` followed by three hex digits (base), a fill digit 0-5
and a rotation digit 0-f, e.g. `S10005`. Each base has 6 fills x 16
rotations = 96 variants, so keys map onto a dense linear id:

    id = (base - 0x100) * 96 + fill * 16 + rotation

The same id is reachable from the private-use symbol codepoints
(U+40001 + id) and selects glyphs in the two Sutton SignWriting fonts.
"""

from .codepoints import COORD_FIRST, COORD_LAST, SYMBOL_FIRST, SYMBOL_LAST

HEX_DIGITS = "0123456789abcdef"
BASE_FIRST = 0x100
BASE_LAST = 0x38B
VARIANTS = 96  # 6 fills * 16 rotations

MAX_SYMBOL_ID = SYMBOL_LAST - SYMBOL_FIRST

# Glyph codepoints in the fill and line fonts
FILL_GLYPH_BASE = 0x100001
LINE_GLYPH_BASE = 0xF0001

# Codepoint coordinates start at this value
COORD_ORIGIN = 250


def _hex_value(text: str) -> int:
    value = 0
    for ch in text:
        digit = HEX_DIGITS.find(ch)
        if digit < 0:
            raise ValueError(f"Invalid hex digit in symbol key: {ch!r}")
        value = value * 16 + digit
    return value


def symbol_id_from_key(key: str) -> int:
    """Decode a symbol key such as 'S10005' to its linear id."""
    if len(key) != 6 or key[0] != "S":
        raise ValueError(f"Symbol key must be 'S' plus 5 digits, got {key!r}")
    base = _hex_value(key[1:4])
    if not BASE_FIRST <= base <= BASE_LAST:
        raise ValueError(f"Symbol base must be 100-38b, got {key[1:4]!r}")
    fill = _hex_value(key[4])
    if fill > 5:
        raise ValueError(f"Symbol fill must be 0-5, got {key[4]!r}")
    return (base - BASE_FIRST) * VARIANTS + _hex_value(key[4:6])


def symbol_key_from_id(symbol_id: int) -> str:
    """Encode a linear symbol id back to its key."""
    if not 0 <= symbol_id <= MAX_SYMBOL_ID:
        raise ValueError(f"Symbol id must be 0-{MAX_SYMBOL_ID}, got {symbol_id}")
    base, variant = divmod(symbol_id, VARIANTS)
    return f"S{base + BASE_FIRST:03x}{variant >> 4:x}{variant & 0xF:x}"


def symbol_id_from_codepoint(cp: int) -> int:
    """Decode a private-use symbol codepoint to its linear id."""
    if not SYMBOL_FIRST <= cp <= SYMBOL_LAST:
        raise ValueError(f"Not a symbol codepoint: U+{cp:04X}")
    return cp - SYMBOL_FIRST


def coordinate_from_digits(digits: str) -> int:
    """Decode a three-digit numeral coordinate."""
    if len(digits) != 3 or not all("0" <= d <= "9" for d in digits):
        raise ValueError(f"Coordinate must be 3 decimal digits, got {digits!r}")
    return 100 * int(digits[0]) + 10 * int(digits[1]) + int(digits[2])


def coordinate_from_codepoint(cp: int) -> int:
    """Decode a private-use coordinate codepoint."""
    if not COORD_FIRST <= cp <= COORD_LAST:
        raise ValueError(f"Not a coordinate codepoint: U+{cp:04X}")
    return cp - COORD_FIRST + COORD_ORIGIN


def fill_glyph(symbol_id: int) -> int:
    """Codepoint of the symbol in the fill font."""
    return FILL_GLYPH_BASE + symbol_id


def line_glyph(symbol_id: int) -> int:
    """Codepoint of the symbol in the line (outline) font."""
    return LINE_GLYPH_BASE + symbol_id
