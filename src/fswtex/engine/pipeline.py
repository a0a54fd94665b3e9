"""Conversion pipeline — bytes in, LaTeX with TikZ drawings out.

Usage:
    python -m fswtex.engine.pipeline [input] [output]

Runs a document through:
1. Codepoint decoding (encoding detected from the first bytes)
2. Token recognition (text passes through, signs are buffered)
3. Symbol decoding (sign buffer to placements)
4. Drawing emission (TikZ, framed by preamble and trailer comments)
"""

import io
import sys
import time
from contextlib import ExitStack
from dataclasses import dataclass
from pathlib import Path

from ..core.errors import GrammarMismatch, UsageError
from ..ingest.decoder import CodepointDecoder
from .config import ConverterConfig
from .emitter import TikzEmitter
from .geometry import decode_sign
from .recognizer import CompletedToken, Recognizer


@dataclass
class ConversionStats:
    """Counters for one conversion run."""
    encoding: str = "unknown"
    codepoints: int = 0
    bytes_read: int = 0
    signs: int = 0
    punctuation: int = 0
    flushes: int = 0
    elapsed: float = 0.0


def convert(source, sink, config=None, frame=True, command_line=None, log=None):
    """Convert one byte stream into one text stream.

    Args:
        source: Binary stream to read
        sink: Text stream to write
        config: ConverterConfig (defaults if None)
        frame: Write the preamble and trailer comments
        command_line: Shown in the preamble banner
        log: Optional callable taking one message string

    Returns:
        ConversionStats for the run.
    """
    config = config or ConverterConfig()
    stats = ConversionStats()
    t0 = time.time()

    def _mismatch(mismatch: GrammarMismatch):
        stats.flushes += 1
        if log:
            log(f"  flushed near codepoint {stats.codepoints}: {mismatch}")

    decoder = CodepointDecoder(source)
    recognizer = Recognizer(on_mismatch=_mismatch)
    emitter = TikzEmitter(sink, config)

    def _dispatch(events):
        for event in events:
            if isinstance(event, CompletedToken):
                emitter.write_sign(decode_sign(event.codepoints))
                if event.punctuation:
                    stats.punctuation += 1
            else:
                emitter.write_literal(event.codepoints)

    if frame:
        emitter.write_preamble(command_line)
    for cp in decoder:
        stats.codepoints += 1
        _dispatch(recognizer.feed(cp))
    _dispatch(recognizer.finish())
    if frame:
        emitter.write_trailer()

    stats.encoding = decoder.encoding.value
    stats.bytes_read = decoder.offset
    stats.signs = emitter.signs
    stats.elapsed = time.time() - t0
    if log:
        log(f"  Encoding: {stats.encoding}, {stats.bytes_read:,} bytes, "
            f"{stats.codepoints:,} codepoints")
        log(f"  Signs: {stats.signs} ({stats.punctuation} punctuation), "
            f"flushes: {stats.flushes} ({stats.elapsed:.2f}s)")
    return stats


def convert_bytes(data, config=None, frame=False):
    """Convert an in-memory document and return the output text."""
    out = io.StringIO()
    convert(io.BytesIO(data), out, config, frame=frame)
    return out.getvalue()


def convert_text(text, config=None, frame=False):
    """Convert a Python string (encoded as UTF-8 first)."""
    return convert_bytes(text.encode("utf-8"), config, frame=frame)


def utf8_stdout(stack):
    """Standard output as UTF-8 with no newline translation.

    The wrapper is detached again when `stack` closes, so stdout itself
    stays open.
    """
    buffer = getattr(sys.stdout, "buffer", None)
    if buffer is None:
        return sys.stdout
    sys.stdout.flush()
    sink = io.TextIOWrapper(buffer, encoding="utf-8", newline="", write_through=True)
    stack.callback(sink.detach)
    return sink


def run_conversion(input_path=None, output_path=None, config=None,
                   command_line=None, verbose=False, log_file=None):
    """Open the input/output pair and convert.

    No input path reads standard input; no output path writes standard
    output. Progress goes to stderr when verbose and to log_file if given,
    never into the converted document.
    """
    try:
        log = open(log_file, "w", encoding="utf-8") if log_file else None
    except OSError as e:
        raise UsageError(f"Cannot open {log_file}: {e.strerror}") from e

    def _log(msg):
        if log:
            log.write(msg + "\n")
        if verbose:
            print(msg, file=sys.stderr)

    source_name = input_path or "<stdin>"
    _log(f"=== fswtex: {source_name} -> {output_path or '<stdout>'} ===")

    try:
        with ExitStack() as stack:
            try:
                if input_path:
                    source = stack.enter_context(open(input_path, "rb"))
                else:
                    source = sys.stdin.buffer
                if output_path:
                    sink = stack.enter_context(
                        open(output_path, "w", encoding="utf-8", newline=""))
                else:
                    sink = utf8_stdout(stack)
            except OSError as e:
                raise UsageError(f"Cannot open {e.filename}: {e.strerror}") from e

            stats = convert(source, sink, config, frame=True,
                            command_line=command_line, log=_log)
            sink.flush()
    finally:
        if log:
            log.close()
    return stats


if __name__ == "__main__":
    args = sys.argv[1:]
    if len(args) > 2:
        print("Usage: python -m fswtex.engine.pipeline [input] [output]")
        sys.exit(2)
    line = " ".join(["fswtex"] + [Path(a).name for a in args])
    run_conversion(*args, command_line=line, verbose=True)
