"""Error kinds raised while converting FSW documents.

Encoding errors and invariant violations are fatal and unwind to the CLI.
Grammar mismatches are records, not exceptions: the recognizer resolves them
by flushing its buffer and only reports them to an optional observer.
"""

from dataclasses import dataclass
from enum import Enum


class ErrorKind(Enum):
    ENCODING = "encoding"
    GRAMMAR = "grammar"
    INVARIANT = "invariant"
    USAGE = "usage"


class FswError(Exception):
    """Base class for fatal conversion errors."""

    kind: ErrorKind = ErrorKind.INVARIANT


class EncodingError(FswError):
    """Malformed multi-byte or surrogate sequence in the input bytes."""

    kind = ErrorKind.ENCODING

    def __init__(self, offset: int, data: bytes, encoding: str, reason: str):
        self.offset = offset
        self.data = bytes(data)
        self.encoding = encoding
        self.reason = reason
        super().__init__(
            f"Badly formed {encoding} input at byte {offset}: {reason} "
            f"({self.data.hex(' ') or 'no bytes'})"
        )


class InvariantViolation(FswError):
    """The recognizer or decoder reached a state that should not exist."""

    kind = ErrorKind.INVARIANT

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Internal error: {detail}")


class UsageError(FswError):
    """Bad command line or unusable input/output path."""

    kind = ErrorKind.USAGE


class GlossFormatError(ValueError):
    """A glossary line did not have the expected shape."""


@dataclass(frozen=True)
class GrammarMismatch:
    """A codepoint that did not continue the candidate token."""
    position: object
    expected: str
    actual: int
    pending: tuple[int, ...]

    kind = ErrorKind.GRAMMAR

    def __str__(self) -> str:
        return (f"expected {self.expected} at {self.position}, "
                f"got U+{self.actual:04X}; flushed {len(self.pending)} codepoint(s)")
