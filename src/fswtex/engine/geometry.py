"""Symbol decoder and geometry mapper.

Turns a completed token buffer into a SignToken: the spelling prefix
grouped for the spelling diagram, the lane, and each symbol's placement
relative to the lane's centre. The declared size is skipped.

Coordinates are nominally 250-749 around a centre of (500, 500). Lane
origins shift x so that left and right lane signs sit off centre:

    B  500    L  550    M  500    R  450
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from ..core.codepoints import (
    PREFIX_CODEPOINT,
    is_coordinate_codepoint,
    is_symbol_codepoint,
    lane_letter,
)
from ..core.errors import InvariantViolation
from ..core.symbol_key import (
    coordinate_from_codepoint,
    coordinate_from_digits,
    symbol_id_from_codepoint,
    symbol_id_from_key,
    symbol_key_from_id,
)

Y_ORIGIN = 500

# Starts a new column in the spelling diagram
GROUP_SEPARATOR_KEY = "S38800"
GROUP_SEPARATOR_ID = symbol_id_from_key(GROUP_SEPARATOR_KEY)


class Lane(Enum):
    B = "B"  # box / horizontal
    L = "L"
    M = "M"
    R = "R"

    @property
    def x_origin(self) -> int:
        return _LANE_X_ORIGIN[self]


_LANE_X_ORIGIN = {Lane.B: 500, Lane.L: 550, Lane.M: 500, Lane.R: 450}


@dataclass(frozen=True)
class Placement:
    symbol_id: int
    x: int
    y: int
    dx: int  # x relative to the lane origin
    dy: int  # y relative to the centre line

    @property
    def key(self) -> str:
        return symbol_key_from_id(self.symbol_id)


@dataclass(frozen=True)
class SignToken:
    lane: Lane
    placements: tuple[Placement, ...]
    prefix_groups: tuple[tuple[int, ...], ...] = ()

    @property
    def prefix(self) -> tuple[int, ...]:
        return tuple(sid for group in self.prefix_groups for sid in group)


class _Cursor:
    """Read position within a token buffer."""

    def __init__(self, codepoints: Sequence[int]) -> None:
        self.codepoints = tuple(codepoints)
        self.index = 0

    def done(self) -> bool:
        return self.index >= len(self.codepoints)

    def peek(self) -> int | None:
        if self.done():
            return None
        return self.codepoints[self.index]

    def take(self, count: int = 1) -> tuple[int, ...]:
        chunk = self.codepoints[self.index:self.index + count]
        if len(chunk) < count:
            raise InvariantViolation(f"token ends early at index {self.index}: {self.text()!r}")
        self.index += count
        return chunk

    def text(self) -> str:
        return "".join(chr(cp) for cp in self.codepoints)


def _is_ascii_digit(cp: int | None) -> bool:
    return cp is not None and ord("0") <= cp <= ord("9")


def _starts_symbol(cp: int | None) -> bool:
    return cp is not None and (cp == ord("S") or is_symbol_codepoint(cp))


def _read_symbol(cursor: _Cursor) -> int:
    if cursor.peek() == ord("S"):
        key = "".join(chr(cp) for cp in cursor.take(6))
        try:
            return symbol_id_from_key(key)
        except ValueError as e:
            raise InvariantViolation(f"bad symbol key in {cursor.text()!r}: {e}") from e
    cp = cursor.take()[0]
    if not is_symbol_codepoint(cp):
        raise InvariantViolation(f"expected a symbol at index {cursor.index - 1} of {cursor.text()!r}")
    return symbol_id_from_codepoint(cp)


def _read_coordinate(cursor: _Cursor, width: bool = False) -> int:
    """Read one coordinate; a numeral width also consumes its 'x'."""
    if _is_ascii_digit(cursor.peek()):
        value = coordinate_from_digits("".join(chr(cp) for cp in cursor.take(3)))
        if width and cursor.take()[0] != ord("x"):
            raise InvariantViolation(f"missing 'x' in {cursor.text()!r}")
        return value
    cp = cursor.take()[0]
    if not is_coordinate_codepoint(cp):
        raise InvariantViolation(f"expected a coordinate at index {cursor.index - 1} of {cursor.text()!r}")
    return coordinate_from_codepoint(cp)


def group_prefix(symbol_ids: Sequence[int]) -> tuple[tuple[int, ...], ...]:
    """Split prefix symbols into spelling groups at each separator symbol."""
    groups: list[tuple[int, ...]] = []
    current: list[int] = []
    for sid in symbol_ids:
        if sid == GROUP_SEPARATOR_ID:
            if current:
                groups.append(tuple(current))
            current = []
            continue
        current.append(sid)
    if current:
        groups.append(tuple(current))
    return tuple(groups)


def decode_sign(codepoints: Sequence[int]) -> SignToken:
    """Decode a completed token buffer."""
    cursor = _Cursor(codepoints)

    prefix: list[int] = []
    if cursor.peek() in (ord("A"), PREFIX_CODEPOINT):
        cursor.take()
        while _starts_symbol(cursor.peek()):
            prefix.append(_read_symbol(cursor))

    lane_cp = cursor.take()[0]
    try:
        lane = Lane(lane_letter(lane_cp))
    except ValueError as e:
        raise InvariantViolation(f"expected a lane in {cursor.text()!r}") from e

    # Declared size is not used
    _read_coordinate(cursor, width=True)
    _read_coordinate(cursor)

    placements: list[Placement] = []
    while not cursor.done():
        sid = _read_symbol(cursor)
        x = _read_coordinate(cursor, width=True)
        y = _read_coordinate(cursor)
        placements.append(Placement(sid, x, y, x - lane.x_origin, y - Y_ORIGIN))

    if not placements:
        raise InvariantViolation(f"sign without placements: {cursor.text()!r}")
    return SignToken(lane, tuple(placements), group_prefix(prefix))


def decode_fsw(text: str) -> SignToken:
    """Decode a sign given as a Python string."""
    return decode_sign([ord(c) for c in text])
