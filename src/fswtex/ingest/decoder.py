"""Codepoint decoder: raw bytes of unknown encoding to Unicode scalar values.

The encoding is decided once per stream from its first bytes:

    00 00 FE FF    UTF-32 BE
    FF FE 00 00    UTF-32 LE
    FE FF          UTF-16 BE
    FF FE          UTF-16 LE
    EF BB BF       UTF-8
    (anything else) UTF-8 without a byte-order mark

The byte-order mark itself is consumed. Bytes read while probing that are
not part of a mark are decoded as content. A sequence cut short by the end
of the stream ends the codepoint sequence quietly; a malformed one raises
EncodingError.
"""
from __future__ import annotations

import io
from enum import Enum
from typing import BinaryIO, Iterator

from ..core.codepoints import (
    BYTE_TABLE,
    ByteCategory,
    MAX_CODEPOINT,
    combine_surrogates,
    is_lead_surrogate,
    is_trail_surrogate,
)
from ..core.errors import EncodingError

END_OF_STREAM = -1


class Encoding(Enum):
    UNKNOWN = "unknown"
    UTF8 = "utf8"
    UTF16LE = "utf16le"
    UTF16BE = "utf16be"
    UTF32LE = "utf32le"
    UTF32BE = "utf32be"


# Checked in order; UTF-32 LE must win over UTF-16 LE.
BYTE_ORDER_MARKS = (
    (b"\x00\x00\xfe\xff", Encoding.UTF32BE),
    (b"\xff\xfe\x00\x00", Encoding.UTF32LE),
    (b"\xfe\xff", Encoding.UTF16BE),
    (b"\xff\xfe", Encoding.UTF16LE),
    (b"\xef\xbb\xbf", Encoding.UTF8),
)


class CodepointDecoder:
    """Pull codepoints one at a time from a binary stream."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self._lookahead = bytearray()
        self._offset = 0
        self._encoding = Encoding.UNKNOWN

    @property
    def encoding(self) -> Encoding:
        return self._encoding

    @property
    def offset(self) -> int:
        """Bytes consumed so far, byte-order mark included."""
        return self._offset

    def __iter__(self) -> Iterator[int]:
        while True:
            cp = self.next()
            if cp == END_OF_STREAM:
                return
            yield cp

    def next(self) -> int:
        """Return the next codepoint, or END_OF_STREAM."""
        if self._encoding is Encoding.UNKNOWN:
            self._detect()
        if self._encoding is Encoding.UTF8:
            return self._next_utf8()
        if self._encoding is Encoding.UTF16LE:
            return self._next_utf16("little")
        if self._encoding is Encoding.UTF16BE:
            return self._next_utf16("big")
        if self._encoding is Encoding.UTF32LE:
            return self._next_utf32("little")
        return self._next_utf32("big")

    # -- byte supply ------------------------------------------------------

    def _take(self, count: int) -> bytes:
        """Consume up to `count` bytes, lookahead first."""
        data = bytes(self._lookahead[:count])
        del self._lookahead[:count]
        while len(data) < count:
            chunk = self._stream.read(count - len(data))
            if not chunk:
                break
            data += chunk
        self._offset += len(data)
        return data

    def _untake(self, data: bytes) -> None:
        self._lookahead[:0] = data
        self._offset -= len(data)

    # -- detection --------------------------------------------------------

    def _detect(self) -> None:
        head = self._take(4)
        for mark, encoding in BYTE_ORDER_MARKS:
            if head.startswith(mark):
                self._encoding = encoding
                self._untake(head[len(mark):])
                return
        self._encoding = Encoding.UTF8
        self._untake(head)

    # -- per-encoding rules -----------------------------------------------

    def _next_utf8(self) -> int:
        start = self._offset
        lead = self._take(1)
        if not lead:
            return END_OF_STREAM
        code = BYTE_TABLE[lead[0]]
        if code.category is ByteCategory.UTF8_CONT:
            raise EncodingError(start, lead, "utf8", "continuation byte without a lead byte")
        if code.category is ByteCategory.INVALID:
            raise EncodingError(start, lead, "utf8", "byte cannot start a sequence")

        value = lead[0] & code.payload_mask
        tail = self._take(code.sequence_length - 1)
        for b in tail:
            if BYTE_TABLE[b].category is not ByteCategory.UTF8_CONT:
                raise EncodingError(start, lead + tail, "utf8", "missing continuation byte")
            value = (value << 6) | (b & 0x3F)
        # A valid prefix cut short by end of input
        if len(tail) < code.sequence_length - 1:
            return END_OF_STREAM
        return self._scalar(value, start, lead + tail, "utf8")

    def _next_utf16(self, byteorder: str) -> int:
        name = "utf16le" if byteorder == "little" else "utf16be"
        start = self._offset
        first = self._take(2)
        if len(first) < 2:
            return END_OF_STREAM
        unit = int.from_bytes(first, byteorder)
        if is_trail_surrogate(unit):
            raise EncodingError(start, first, name, "trail surrogate without a lead surrogate")
        if not is_lead_surrogate(unit):
            return unit
        second = self._take(2)
        if len(second) < 2:
            return END_OF_STREAM
        trail = int.from_bytes(second, byteorder)
        if not is_trail_surrogate(trail):
            raise EncodingError(start, first + second, name, "lead surrogate without a trail surrogate")
        return combine_surrogates(unit, trail)

    def _next_utf32(self, byteorder: str) -> int:
        name = "utf32le" if byteorder == "little" else "utf32be"
        start = self._offset
        data = self._take(4)
        if len(data) < 4:
            return END_OF_STREAM
        return self._scalar(int.from_bytes(data, byteorder), start, data, name)

    @staticmethod
    def _scalar(value: int, start: int, data: bytes, name: str) -> int:
        if value > MAX_CODEPOINT:
            raise EncodingError(start, data, name, f"value 0x{value:X} is beyond U+10FFFF")
        if is_lead_surrogate(value) or is_trail_surrogate(value):
            raise EncodingError(start, data, name, f"surrogate U+{value:04X} is not a scalar value")
        return value


def decode_bytes(data: bytes) -> list[int]:
    """Decode an in-memory buffer to a list of codepoints."""
    return list(CodepointDecoder(io.BytesIO(data)))


def decode_text(data: bytes) -> str:
    """Decode an in-memory buffer to a string, encoding detected as above."""
    return "".join(chr(cp) for cp in decode_bytes(data))
