"""Run options for the drawing emitter."""
from __future__ import annotations

from dataclasses import dataclass, replace

DEFAULT_FONT_SIZE = r"\f@size"
DEFAULT_ROTATION = -90


@dataclass(frozen=True)
class ConverterConfig:
    """Configuration for TikZ output.

    font_size is the macro holding the current font size in points; the
    drawing is scaled by font_size/30. A name containing '@' is internal to
    LaTeX and needs \\makeatletter around each drawing.
    """
    font_size: str = DEFAULT_FONT_SIZE
    mirror: bool = True
    rotation: int = DEFAULT_ROTATION
    spelling: bool = False

    @property
    def namespaced(self) -> bool:
        return "@" in self.font_size

    @property
    def custom_font_size(self) -> bool:
        return self.font_size != DEFAULT_FONT_SIZE

    def with_font_size(self, name: str) -> ConverterConfig:
        """Use another size macro, given with or without its backslash."""
        return replace(self, font_size="\\" + name.lstrip("\\"))
