"""FSW grammar as a transition table.

A recognizer position has three levels:

    phase    START, PUNCTUATION, PREFIX, VISUAL
    mode     START, SIZE, SYMBOL, PLACEMENT
    submode  where we are inside the current field

Every field may be written in ASCII or as a single private-use codepoint,
and the two forms can be mixed freely within one sign:

    SignToken   := Prefix? Visual | PunctSymbol Placement
    Prefix      := 'A' Symbol+
    Visual      := Lane Size (Symbol Placement)+
    Lane        := 'B' | 'L' | 'M' | 'R'
    Size        := Coord 'x' Coord
    Placement   := Coord 'x' Coord
    Symbol      := 'S' Base Fill Rotation

Symbol bases and coordinates are three-character numerals whose legal
digits depend on the digits already seen; both are instances of
NumeralRule. The symbol and coordinate-pair sub-machines are built once
per call site by the same factory functions.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable

from ..core.codepoints import PREFIX_CODEPOINT, FieldClass, classify_codepoint, is_lane

DIGITS = "0123456789"
HEX = "0123456789abcdef"
FILL_DIGITS = "012345"


class Phase(Enum):
    START = "start"
    PUNCTUATION = "punctuation"
    PREFIX = "prefix"
    VISUAL = "visual"


class Mode(Enum):
    START = "start"
    SIZE = "size"
    SYMBOL = "symbol"
    PLACEMENT = "placement"


class Submode(Enum):
    START = "start"
    # symbol key
    FIRST = "first"
    SECOND = "second"
    THIRD = "third"
    FILL = "fill"
    ROTATION = "rotation"
    # coordinate pair
    FIRST_W = "first_w"
    SECOND_W = "second_w"
    THIRD_W = "third_w"
    X = "x"
    FIRST_H = "first_h"
    SECOND_H = "second_h"
    THIRD_H = "third_h"
    END = "end"


@dataclass(frozen=True)
class Position:
    phase: Phase
    mode: Mode
    submode: Submode

    def __str__(self) -> str:
        return f"{self.phase.value}/{self.mode.value}/{self.submode.value}"


START = Position(Phase.START, Mode.START, Submode.START)


@dataclass(frozen=True)
class NumeralRule:
    """Legal characters of a three-character numeral, by prefix.

    `second` maps a set of first digits to the legal second digits;
    `third` maps (first, second) digit sets to the legal third digits.
    The first matching guard wins.
    """
    name: str
    first: str
    second: tuple[tuple[str, str], ...]
    third: tuple[tuple[str, str, str], ...]

    def allowed(self, prefix: str) -> str:
        if not prefix:
            return self.first
        if len(prefix) == 1:
            for guard, allowed in self.second:
                if prefix[0] in guard:
                    return allowed
        elif len(prefix) == 2:
            for guard1, guard2, allowed in self.third:
                if prefix[0] in guard1 and prefix[1] in guard2:
                    return allowed
        return ""

    def accepts(self, cp: int, prefix: str) -> bool:
        return cp < 0x80 and chr(cp) in self.allowed(prefix)


# 250-749: 2 -> 5-9, 3-6 -> 0-9, 7 -> 0-4
COORDINATE = NumeralRule(
    "coordinate digit",
    first="234567",
    second=(("2", "56789"), ("3456", DIGITS), ("7", "01234")),
    third=((DIGITS, DIGITS, DIGITS),),
)

# 100-38b
SYMBOL_BASE = NumeralRule(
    "symbol digit",
    first="123",
    second=(("12", HEX), ("3", "012345678")),
    third=(("12", HEX, HEX), ("3", "01234567", HEX), ("3", "8", "0123456789ab")),
)

# 387-38b
PUNCTUATION_BASE = NumeralRule(
    "punctuation digit",
    first="3",
    second=(("3", "8"),),
    third=(("3", "8", "789ab"),),
)


Predicate = Callable[[int, str], bool]


@dataclass(frozen=True)
class Edge:
    """One legal continuation.

    `digit` edges extend the numeral being matched; all other edges start a
    new field and clear it.
    """
    expected: str
    accepts: Predicate
    target: Position
    digit: bool = False


def literal(ch: str) -> Predicate:
    value = ord(ch)
    return lambda cp, numeral: cp == value


def field(*classes: FieldClass) -> Predicate:
    """Private-use codepoints standing for one of the given fields."""
    return lambda cp, numeral: classify_codepoint(cp) in classes


def one_of(chars: str) -> Predicate:
    return lambda cp, numeral: cp < 0x80 and chr(cp) in chars


def lane(cp: int, numeral: str) -> bool:
    return is_lane(cp)


def prefix_marker(cp: int, numeral: str) -> bool:
    return cp == ord("A") or cp == PREFIX_CODEPOINT


SYMBOL_CODEPOINT = field(FieldClass.SYMBOL, FieldClass.PUNCTUATION)
PUNCTUATION_CODEPOINT = field(FieldClass.PUNCTUATION)
COORDINATE_CODEPOINT = field(FieldClass.COORDINATE)


def symbol_machine(phase: Phase, rule: NumeralRule, done: Position) -> dict[Position, tuple[Edge, ...]]:
    """`S` already seen: base digits, fill, rotation, then `done`."""
    def at(submode: Submode) -> Position:
        return Position(phase, Mode.SYMBOL, submode)

    digit = rule.accepts
    return {
        at(Submode.FIRST): (Edge(rule.name, digit, at(Submode.SECOND), digit=True),),
        at(Submode.SECOND): (Edge(rule.name, digit, at(Submode.THIRD), digit=True),),
        at(Submode.THIRD): (Edge(rule.name, digit, at(Submode.FILL), digit=True),),
        at(Submode.FILL): (Edge("fill digit 0-5", one_of(FILL_DIGITS), at(Submode.ROTATION)),),
        at(Submode.ROTATION): (Edge("rotation digit 0-f", one_of(HEX), done),),
    }


def coordinate_pair_machine(phase: Phase, mode: Mode, done: Position) -> dict[Position, tuple[Edge, ...]]:
    """Width and height, each a numeral or one coordinate codepoint.

    A numeral width is followed by a literal `x`; a codepoint width is not.
    """
    def at(submode: Submode) -> Position:
        return Position(phase, mode, submode)

    digit = COORDINATE.accepts
    name = COORDINATE.name
    return {
        at(Submode.FIRST_W): (
            Edge(name, digit, at(Submode.SECOND_W), digit=True),
            Edge("coordinate codepoint", COORDINATE_CODEPOINT, at(Submode.FIRST_H)),
        ),
        at(Submode.SECOND_W): (Edge(name, digit, at(Submode.THIRD_W), digit=True),),
        at(Submode.THIRD_W): (Edge(name, digit, at(Submode.X), digit=True),),
        at(Submode.X): (Edge("'x'", literal("x"), at(Submode.FIRST_H)),),
        at(Submode.FIRST_H): (
            Edge(name, digit, at(Submode.SECOND_H), digit=True),
            Edge("coordinate codepoint", COORDINATE_CODEPOINT, done),
        ),
        at(Submode.SECOND_H): (Edge(name, digit, at(Submode.THIRD_H), digit=True),),
        at(Submode.THIRD_H): (Edge(name, digit, done, digit=True),),
    }


def _build_transitions() -> dict[Position, tuple[Edge, ...]]:
    prefix_symbol = Position(Phase.PREFIX, Mode.SYMBOL, Submode.START)
    prefix_first = Position(Phase.PREFIX, Mode.SYMBOL, Submode.FIRST)
    visual_start = Position(Phase.VISUAL, Mode.START, Submode.START)
    size_first = Position(Phase.VISUAL, Mode.SIZE, Submode.FIRST_W)
    symbol_start = Position(Phase.VISUAL, Mode.SYMBOL, Submode.START)
    symbol_first = Position(Phase.VISUAL, Mode.SYMBOL, Submode.FIRST)
    placement_first = Position(Phase.VISUAL, Mode.PLACEMENT, Submode.FIRST_W)
    placement_end = Position(Phase.VISUAL, Mode.PLACEMENT, Submode.END)
    punct_first = Position(Phase.PUNCTUATION, Mode.SYMBOL, Submode.FIRST)
    punct_placement = Position(Phase.PUNCTUATION, Mode.PLACEMENT, Submode.FIRST_W)
    punct_end = Position(Phase.PUNCTUATION, Mode.PLACEMENT, Submode.END)

    table: dict[Position, tuple[Edge, ...]] = {
        START: (
            Edge("prefix marker", prefix_marker, prefix_symbol),
            Edge("lane", lane, size_first),
            Edge("'S'", literal("S"), punct_first),
            Edge("punctuation codepoint", PUNCTUATION_CODEPOINT, punct_placement),
        ),
        prefix_symbol: (
            Edge("'S'", literal("S"), prefix_first),
            Edge("symbol codepoint", SYMBOL_CODEPOINT, visual_start),
        ),
        visual_start: (
            Edge("lane", lane, size_first),
            Edge("'S'", literal("S"), prefix_first),
            Edge("symbol codepoint", SYMBOL_CODEPOINT, visual_start),
        ),
        symbol_start: (
            Edge("'S'", literal("S"), symbol_first),
            Edge("symbol codepoint", SYMBOL_CODEPOINT, placement_first),
        ),
        placement_end: (
            Edge("'S'", literal("S"), symbol_first),
            Edge("symbol codepoint", SYMBOL_CODEPOINT, placement_first),
        ),
        punct_end: (),
    }
    table.update(symbol_machine(Phase.PREFIX, SYMBOL_BASE, visual_start))
    table.update(coordinate_pair_machine(Phase.VISUAL, Mode.SIZE, symbol_start))
    table.update(symbol_machine(Phase.VISUAL, SYMBOL_BASE, placement_first))
    table.update(coordinate_pair_machine(Phase.VISUAL, Mode.PLACEMENT, placement_end))
    table.update(symbol_machine(Phase.PUNCTUATION, PUNCTUATION_BASE, punct_placement))
    table.update(coordinate_pair_machine(Phase.PUNCTUATION, Mode.PLACEMENT, punct_end))
    return table


TRANSITIONS = _build_transitions()

# Positions where one full placement has just been matched
ACCEPTING = frozenset({
    Position(Phase.VISUAL, Mode.PLACEMENT, Submode.END),
    Position(Phase.PUNCTUATION, Mode.PLACEMENT, Submode.END),
})
