"""
Command-line interface for fswtex.

Converts FSW notation inside LaTeX sources to TikZ drawings, and runs the
glossary helper tools.
"""
from __future__ import annotations

import argparse
import sys
from contextlib import ExitStack

from ..core.errors import EncodingError, GlossFormatError, InvariantViolation, UsageError
from ..engine.config import DEFAULT_ROTATION, ConverterConfig

EXIT_OK = 0
EXIT_INPUT = 1
EXIT_INTERNAL = 3


def _error(message: str) -> None:
    print(f"ERROR: {message}", file=sys.stderr)


def _write_stdout(text: str) -> None:
    from ..engine.pipeline import utf8_stdout

    with ExitStack() as stack:
        utf8_stdout(stack).write(text)


def build_config(args: argparse.Namespace) -> ConverterConfig:
    config = ConverterConfig(
        mirror=not args.no_mirror,
        rotation=args.rotate,
        spelling=args.spelling,
    )
    if args.font_size:
        config = config.with_font_size(args.font_size)
    return config


def cmd_convert(args: argparse.Namespace) -> int:
    """Convert a document (stdin/stdout when paths are left out)."""
    from ..engine.pipeline import run_conversion

    command_line = " ".join(["fswtex"] + (args.argv or []))
    run_conversion(
        args.input,
        args.output,
        build_config(args),
        command_line=command_line,
        verbose=args.verbose,
        log_file=args.log_file,
    )
    return EXIT_OK


def cmd_extract_gloss(args: argparse.Namespace) -> int:
    """Print the word pairs of every glossary block in a file."""
    from ..gloss.extract import extract_glossary, format_pairs

    try:
        pairs = extract_glossary(args.file)
    except OSError as e:
        raise UsageError(f"Cannot read {args.file}: {e.strerror}") from e
    _write_stdout(format_pairs(pairs))
    if args.verbose:
        print(f"{len(pairs)} pair(s) from {args.file}", file=sys.stderr)
    return EXIT_OK


def cmd_sort_gloss(args: argparse.Namespace) -> int:
    """Merge extracted glossaries and print them in gloss order."""
    from ..gloss.extract import format_pairs
    from ..gloss.sort import merge_glossaries

    try:
        pairs = merge_glossaries(args.files)
    except OSError as e:
        raise UsageError(f"Cannot read {e.filename}: {e.strerror}") from e
    _write_stdout(format_pairs(pairs))
    return EXIT_OK


def _add_convert_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("input", nargs="?", help="Input file (default: stdin)")
    parser.add_argument("output", nargs="?", help="Output file (default: stdout)")
    parser.add_argument(
        "--font-size",
        metavar="NAME",
        help=r"Macro holding the font size in points (default: \f@size)",
    )
    parser.add_argument(
        "--no-mirror",
        action="store_true",
        help="Do not mirror signs top to bottom",
    )
    parser.add_argument(
        "--rotate",
        type=int,
        default=DEFAULT_ROTATION,
        metavar="DEG",
        help="Rotation applied to each sign (default: %(default)s)",
    )
    parser.add_argument(
        "--spelling",
        action="store_true",
        help="Draw the spelling prefix above each sign",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=argparse.SUPPRESS,
        help="Report progress on stderr",
    )
    parser.add_argument("--log-file", help="Also write progress to this file")


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="fswtex",
        description="Formal SignWriting in LaTeX to TikZ",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Report progress on stderr",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Convert command
    convert_parser = subparsers.add_parser("convert", help="Convert a document")
    _add_convert_arguments(convert_parser)
    convert_parser.set_defaults(func=cmd_convert)

    # Glossary commands
    extract_parser = subparsers.add_parser("extract-gloss", help="Extract glossary word pairs")
    extract_parser.add_argument("file", help="LaTeX source to search")
    extract_parser.set_defaults(func=cmd_extract_gloss)

    sort_parser = subparsers.add_parser("sort-gloss", help="Merge and sort extracted glossaries")
    sort_parser.add_argument("files", nargs="+", help="Files written by extract-gloss")
    sort_parser.set_defaults(func=cmd_sort_gloss)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)
    args.argv = list(sys.argv[1:] if argv is None else argv)

    if args.command is None:
        # Default to stdin -> stdout conversion
        args.input = args.output = args.font_size = args.log_file = None
        args.no_mirror = args.spelling = False
        args.rotate = DEFAULT_ROTATION
        args.func = cmd_convert

    try:
        return args.func(args)
    except (EncodingError, UsageError, GlossFormatError) as e:
        _error(str(e))
        return EXIT_INPUT
    except InvariantViolation as e:
        _error(str(e))
        return EXIT_INTERNAL


if __name__ == "__main__":
    sys.exit(main())
