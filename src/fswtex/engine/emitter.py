"""Drawing emitter: SignToken to TikZ.

Each sign becomes one brace-scoped tikzpicture. Every symbol is drawn
twice at the same point: first in the fill font in white (so overlapping
symbols hide what is behind them), then in the line font. Positions are
scaled by <font size>/30 points so signs grow with the surrounding text.

The preamble and trailer are LaTeX comments listing what the including
document must provide.
"""
from __future__ import annotations

from typing import Iterable, Sequence, TextIO

from ..core.symbol_key import fill_glyph, line_glyph
from .config import ConverterConfig
from .geometry import Lane, SignToken

# Spelling diagram grid, in sign units
SPELLING_PITCH = 60
SPELLING_BOTTOM = 150

FILL_FONT = "SuttonSignWritingFill.ttf"
LINE_FONT = "SuttonSignWritingLine.ttf"


def scaled(config: ConverterConfig, value: int) -> str:
    return f"{config.font_size}/30*{value} pt"


def point(config: ConverterConfig, x: int, y: int) -> str:
    return f"({scaled(config, x)},{scaled(config, y)})"


def transform_options(config: ConverterConfig) -> list[str]:
    """Rotation and mirroring, left out when they match TikZ's defaults."""
    options = []
    if config.rotation != 0:
        options.append(f"rotate={config.rotation}")
    if config.mirror:
        options.append("yscale=-1")
    return options


def picture_options(config: ConverterConfig) -> str:
    options = transform_options(config)
    return f"[{','.join(options)}]" if options else ""


def node_options(config: ConverterConfig, *base: str) -> str:
    return ",".join([*base, *transform_options(config)])


def render_spelling(groups: Sequence[Sequence[int]], config: ConverterConfig) -> list[str]:
    """Prefix groups as columns of small boxed outline glyphs above the sign."""
    if not groups:
        return []
    columns = len(groups)
    rows = max(len(group) for group in groups)
    options = node_options(config, "draw", "anchor=center")
    draws = []
    for column, group in enumerate(groups):
        x = SPELLING_PITCH * column - SPELLING_PITCH * (columns - 1) // 2
        for row, symbol_id in enumerate(group):
            y = SPELLING_BOTTOM + SPELLING_PITCH * (rows - 1 - row)
            draws.append(
                rf"\draw{point(config, x, y)} node [{options}] "
                rf"{{\swline\scriptsize\char{line_glyph(symbol_id)}}};"
            )
    return draws


def render_sign(sign: SignToken, config: ConverterConfig) -> str:
    """TikZ code for one sign."""
    parts = ["{"]
    if config.namespaced:
        parts.append(r"\makeatletter")
    parts.append(r"\begin{tikzpicture}" + picture_options(config))
    if sign.lane is not Lane.B:
        # Keeps column width the same whatever the lane
        parts.append(rf"\draw[white]{point(config, -90, -12)}rectangle{point(config, 110, -10)};")
    if config.spelling:
        parts.extend(render_spelling(sign.prefix_groups, config))

    fill_options = node_options(config, "color=white", "anchor=north west")
    line_options = node_options(config, "anchor=north west")
    for placement in sign.placements:
        at = point(config, placement.dx, -placement.dy)
        parts.append(rf"\draw{at} node [{fill_options}] {{\swfill\char{fill_glyph(placement.symbol_id)}}};")
        parts.append(rf"\draw{at} node [{line_options}] {{\swline\char{line_glyph(placement.symbol_id)}}};")

    parts.append(r"\end{tikzpicture}")
    parts.append("}")
    if sign.lane is not Lane.B:
        parts.append("\\\\")
    return "".join(parts)


def render_preamble(config: ConverterConfig, command_line: str | None = None) -> str:
    lines = []
    if command_line:
        lines.append("% This file was generated by:")
        lines.append(f"%    {command_line}")
    lines.append("% In order for this conversion to work your document needs a few things.")
    lines.append(r"% \usepackage{fontspec}")
    lines.append(r"% \usepackage{tikz}")
    if config.rotation != 0:
        lines.append(f"% Signs are drawn rotated by {config.rotation} degrees.")
    if config.mirror:
        lines.append("% Signs are drawn mirrored top to bottom.")
    lines.append(rf"% \newfontfamily\swfill{{{FILL_FONT}}}")
    lines.append(rf"% \newfontfamily\swline{{{LINE_FONT}}}")
    if config.custom_font_size and config.namespaced:
        lines.append(rf"% \makeatletter\newcommand{{{config.font_size}}}{{\f@size}}\makeatother")
    lines.append(r"% \begin{document}")
    return "\n".join(lines) + "\n\n"


def render_trailer(config: ConverterConfig, signs: int) -> str:
    lines = ["", f"% Converted {signs} sign(s)."]
    if config.spelling:
        lines.append("% Spelling diagrams use the line font at \\scriptsize.")
    lines.append(r"% \end{document}")
    return "\n".join(lines) + "\n"


class TikzEmitter:
    """Write converted output to a text stream."""

    def __init__(self, sink: TextIO, config: ConverterConfig | None = None) -> None:
        self.sink = sink
        self.config = config or ConverterConfig()
        self.signs = 0

    def write_preamble(self, command_line: str | None = None) -> None:
        self.sink.write(render_preamble(self.config, command_line))

    def write_literal(self, codepoints: Iterable[int]) -> None:
        self.sink.write("".join(chr(cp) for cp in codepoints))

    def write_sign(self, sign: SignToken) -> None:
        self.sink.write(render_sign(sign, self.config))
        self.signs += 1

    def write_trailer(self) -> None:
        self.sink.write(render_trailer(self.config, self.signs))
