"""Glossary extraction.

Finds every \\begin{glossary} ... \\end{glossary} block in a LaTeX source
and pulls out its word pairs. Inside a block, entries are separated by
blank lines and each entry is two lines:

    \\textbf{house / home}\\\\
    M518x529S14c20481x471S27106503x489

A gloss with ' / ' alternatives yields one pair per alternative, all with
the same notation. Output alternates gloss line and notation line so the
result can be fed to the sort tool.
"""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator

from ..core.errors import GlossFormatError
from ..ingest.decoder import decode_text

BEGIN_MARKER = r"\begin{glossary}"
END_MARKER = r"\end{glossary}"
GLOSS_OPEN = r"\textbf{"
GLOSS_CLOSE = "}\\\\"


def parse_gloss(line: str) -> list[str]:
    """Alternatives of one `\\textbf{...}\\\\` line."""
    if not line.startswith(GLOSS_OPEN) or not line.endswith(GLOSS_CLOSE):
        raise GlossFormatError(f"not a gloss line: {line!r}")
    inner = line[len(GLOSS_OPEN):-len(GLOSS_CLOSE)]
    return [word.strip() for word in inner.split(" / ")]


def _glossary_lines(text: str) -> Iterator[list[str]]:
    """Line lists of each glossary block."""
    pos = 0
    while True:
        start = text.find(BEGIN_MARKER, pos)
        if start < 0:
            return
        body_start = start + len(BEGIN_MARKER)
        end = text.find(END_MARKER, body_start)
        body = text[body_start:] if end < 0 else text[body_start:end]
        yield body.splitlines()
        if end < 0:
            return
        pos = end + len(END_MARKER)


def iter_glossary_pairs(text: str) -> Iterator[tuple[str, str]]:
    """Yield (gloss, notation) pairs from every glossary block."""
    for lines in _glossary_lines(text):
        entry: list[str] = []
        for line in lines + [""]:
            line = line.strip()
            if line:
                entry.append(line)
                continue
            if len(entry) == 2:
                gloss, notation = entry
                for word in parse_gloss(gloss):
                    yield word, notation
            elif len(entry) > 2:
                raise GlossFormatError(f"expected a gloss and a notation line, got: {entry!r}")
            entry = []


def extract_glossary(path) -> list[tuple[str, str]]:
    text = decode_text(Path(path).read_bytes())
    return list(iter_glossary_pairs(text))


def format_pairs(pairs: Iterable[tuple[str, str]]) -> str:
    """One gloss line then one notation line per pair."""
    return "".join(f"{gloss}\n{notation}\n" for gloss, notation in pairs)
