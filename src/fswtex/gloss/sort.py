"""Merge and sort extracted glossaries.

Input files hold alternating gloss / notation lines as written by the
extract tool. Entries from all files are merged by lower-cased gloss (a
later file replaces an earlier entry with the same key) and listed in key
order. Signs are turned horizontal for the printed glossary: the middle
lane becomes the box lane.
"""
from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable

from ..core.codepoints import LANE_CODEPOINTS
from ..ingest.decoder import decode_text

_LANE_CHARS = {letter: chr(cp) for cp, letter in LANE_CODEPOINTS.items()}
LANE_M = _LANE_CHARS["M"]
LANE_B = _LANE_CHARS["B"]

# \n\r is one break as well
_LINE_BREAK = re.compile(r"\r\n|\n\r|\r|\n")


def read_pairs(text: str) -> list[tuple[str, str]]:
    lines = _LINE_BREAK.split(text)
    if lines and lines[-1] == "":
        lines.pop()
    if len(lines) % 2:
        lines.append("")
    return [(lines[i], lines[i + 1]) for i in range(0, len(lines), 2)]


def to_horizontal(fsw: str) -> str:
    """Replace the first middle-lane marker with the box lane."""
    for index, ch in enumerate(fsw):
        if ch == "M":
            return fsw[:index] + "B" + fsw[index + 1:]
        if ch == LANE_M:
            return fsw[:index] + LANE_B + fsw[index + 1:]
    return fsw


def merge_glossaries(paths: Iterable) -> list[tuple[str, str]]:
    entries: dict[str, tuple[str, str]] = {}
    for path in paths:
        text = decode_text(Path(path).read_bytes())
        for gloss, notation in read_pairs(text):
            entries[gloss.lower()] = (gloss, to_horizontal(notation))
    return [entries[key] for key in sorted(entries)]
