"""Token recognizer: codepoint stream to literals and completed sign tokens.

The recognizer consumes one codepoint per step. Each step has one of
three outcomes:

  ADVANCE   the codepoint continues the candidate token; it is buffered
  FLUSH     it does not; the buffer and the codepoint go out unchanged
  COMPLETE  a full sign was buffered and the codepoint ends it

After COMPLETE the ending codepoint is examined again from the start
position, so it either opens the next token or passes through as text.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, Iterator, Union

from ..core.errors import GrammarMismatch, InvariantViolation
from .grammar import ACCEPTING, START, TRANSITIONS, Edge, Phase, Position

# Punctuation signs are drawn as if written M500x500<symbol><placement>
IMPLICIT_WRAPPER = tuple(ord(c) for c in "M500x500")


class Outcome(Enum):
    ADVANCE = "advance"
    FLUSH = "flush"
    COMPLETE = "complete"


@dataclass(frozen=True)
class Literal:
    """Codepoints to copy to the output as they are."""
    codepoints: tuple[int, ...]

    @property
    def text(self) -> str:
        return "".join(chr(cp) for cp in self.codepoints)


@dataclass(frozen=True)
class CompletedToken:
    """A buffered sign, ready for the symbol decoder."""
    codepoints: tuple[int, ...]
    punctuation: bool = False

    @property
    def text(self) -> str:
        return "".join(chr(cp) for cp in self.codepoints)


Event = Union[Literal, CompletedToken]


@dataclass(frozen=True)
class RecognizerState:
    position: Position = START
    pending: tuple[int, ...] = ()
    numeral: str = ""  # digits of the numeral being matched


INITIAL = RecognizerState()


@dataclass(frozen=True)
class StepResult:
    outcome: Outcome
    state: RecognizerState
    events: tuple[Event, ...] = ()
    mismatch: GrammarMismatch | None = None


def _edges(position: Position) -> tuple[Edge, ...]:
    edges = TRANSITIONS.get(position)
    if edges is None:
        raise InvariantViolation(f"no transitions defined for position {position}")
    return edges


def _expected(edges: tuple[Edge, ...]) -> str:
    names: list[str] = []
    for edge in edges:
        if edge.expected not in names:
            names.append(edge.expected)
    return " or ".join(names) or "end of token"


def complete_token(state: RecognizerState) -> CompletedToken:
    if state.position not in ACCEPTING:
        raise InvariantViolation(f"cannot complete a token at {state.position}")
    if state.position.phase is Phase.PUNCTUATION:
        return CompletedToken(IMPLICIT_WRAPPER + state.pending, punctuation=True)
    return CompletedToken(state.pending)


def step(state: RecognizerState, cp: int) -> StepResult:
    """Advance the automaton by one codepoint."""
    edges = _edges(state.position)
    for edge in edges:
        if edge.accepts(cp, state.numeral):
            numeral = state.numeral + chr(cp) if edge.digit else ""
            return StepResult(
                Outcome.ADVANCE,
                RecognizerState(edge.target, state.pending + (cp,), numeral),
            )

    if state.position in ACCEPTING:
        token = complete_token(state)
        restart = step(INITIAL, cp)
        return StepResult(Outcome.COMPLETE, restart.state, (token,) + restart.events)

    mismatch = None
    if state.pending:
        mismatch = GrammarMismatch(state.position, _expected(edges), cp, state.pending)
    return StepResult(Outcome.FLUSH, INITIAL, (Literal(state.pending + (cp,)),), mismatch)


def finish(state: RecognizerState) -> tuple[Event, ...]:
    """Events owed at end of stream."""
    if state.position in ACCEPTING:
        return (complete_token(state),)
    if state.pending:
        return (Literal(state.pending),)
    return ()


@dataclass
class Recognizer:
    """Stateful wrapper around `step` for streaming use."""
    on_mismatch: Callable[[GrammarMismatch], None] | None = None
    state: RecognizerState = field(default=INITIAL)

    def feed(self, cp: int) -> list[Event]:
        result = step(self.state, cp)
        self.state = result.state
        if result.mismatch is not None and self.on_mismatch is not None:
            self.on_mismatch(result.mismatch)
        return list(result.events)

    def finish(self) -> list[Event]:
        events = list(finish(self.state))
        self.state = INITIAL
        return events

    def reset(self) -> None:
        self.state = INITIAL

    def feed_all(self, codepoints: Iterable[int]) -> Iterator[Event]:
        """Run a whole codepoint sequence, end of stream included."""
        for cp in codepoints:
            yield from self.feed(cp)
        yield from self.finish()


def recognize_text(text: str) -> list[Event]:
    """Recognize a Python string; mostly useful in tests."""
    return list(Recognizer().feed_all(ord(c) for c in text))
