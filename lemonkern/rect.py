"""Rectangles of 32-bit ARGB pixels and the operations that compose them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from lemonkern.colour import ALPHA_MASK, alpha_blend

GLYPH_HEIGHT = 16


def _clip(
    dest: "Rect2D", x: int, y: int, width: int, height: int
) -> tuple[int, int, int, int]:
    """First visible column and row of a ``width`` x ``height`` area at (x, y),
    and its width and height clipped to the right and bottom edges of ``dest``."""
    start_x = -x if x < 0 else 0
    start_y = -y if y < 0 else 0
    if y + height >= dest.height:
        height = dest.height - y
    if x + width >= dest.width:
        width = dest.width - x
    return start_x, start_y, width, height


@dataclass
class Rect2D:
    """A positioned rectangle holding ``width * height`` ARGB pixels, row by row."""

    width: int
    height: int
    fb: list[int] = field(default_factory=list, repr=False)
    x: int = 0
    y: int = 0
    bpp: int = 32
    cursor_x: int = 0
    cursor_y: int = 0

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError("rectangle dimensions must not be negative")
        needed = self.width * self.height
        if not self.fb:
            self.fb = [0] * needed
        elif len(self.fb) < needed:
            raise ValueError(f"framebuffer holds {len(self.fb)} pixels, {needed} needed")

    @classmethod
    def blank(cls, width: int, height: int, colour: int = 0) -> "Rect2D":
        """A rectangle at the origin filled with ``colour``."""
        if width < 0 or height < 0:
            raise ValueError("rectangle dimensions must not be negative")
        return cls(width, height, [colour & 0xFFFFFFFF] * (width * height))

    def _rows(self, src_width: int, x: int, y: int, width: int, height: int):
        """Yield (source offset, destination offset, count) for each visible row."""
        start_x, start_y, width, height = _clip(self, x, y, width, height)
        count = width - start_x
        if count <= 0:
            return
        for row in range(start_y, height):
            yield (
                row * src_width + start_x,
                (row + y) * self.width + start_x + x,
                count,
            )

    def blit(self, src: "Rect2D") -> None:
        """Copy ``src`` onto this rectangle at the position ``src`` carries."""
        for s, d, n in self._rows(src.width, src.x, src.y, src.width, src.height):
            self.fb[d : d + n] = src.fb[s : s + n]

    def blit_alpha(self, src: "Rect2D") -> None:
        """Draw ``src`` blending each pixel by its alpha.

        Fully transparent pixels are skipped and opaque ones copied.
        """
        fb = self.fb
        for s, d, n in self._rows(src.width, src.x, src.y, src.width, src.height):
            for offset, colour in enumerate(src.fb[s : s + n]):
                alpha = colour & ALPHA_MASK
                if alpha == 0:
                    continue
                if alpha == ALPHA_MASK:
                    fb[d + offset] = colour
                else:
                    fb[d + offset] = alpha_blend(colour, fb[d + offset])

    def blit_keyed(self, src: "Rect2D") -> None:
        """Draw ``src``, skipping fully transparent pixels and copying the rest."""
        fb = self.fb
        for s, d, n in self._rows(src.width, src.x, src.y, src.width, src.height):
            for offset, colour in enumerate(src.fb[s : s + n]):
                if colour & ALPHA_MASK:
                    fb[d + offset] = colour

    def fill(self, width: int, height: int, x: int, y: int, colour: int) -> None:
        """Fill a ``width`` x ``height`` area at (x, y) with ``colour``, clipped."""
        colour &= 0xFFFFFFFF
        for _, d, n in self._rows(width, x, y, width, height):
            self.fb[d : d + n] = [colour] * n

    def blit_pixels(
        self, width: int, height: int, x: int, y: int, pixels: Sequence[int]
    ) -> None:
        """Copy a bare ``width`` x ``height`` pixel array to (x, y), clipped."""
        if len(pixels) < width * height:
            raise ValueError(f"{width * height} pixels needed, {len(pixels)} given")
        for s, d, n in self._rows(width, x, y, width, height):
            self.fb[d : d + n] = list(pixels[s : s + n])

    def fill_row(self, colour: int, length: int, x: int, y: int) -> None:
        """Fill ``length`` pixels of row ``y`` from column ``x``, clipped.

        Rows outside the rectangle and runs starting past its right edge are
        ignored.
        """
        if x >= self.width or y >= self.height or y < 0:
            return
        start_x = x if x >= 0 else 0
        stop_x = -x if x < 0 else 0
        if x + length >= self.width:
            length = self.width - x
        count = length - stop_x
        if count <= 0:
            return
        offset = y * self.width + start_x
        self.fb[offset : offset + count] = [colour & 0xFFFFFFFF] * count

    def scroll(self, colour: int) -> None:
        """Move the contents up one text line and fill the freed line with ``colour``."""
        colour &= 0xFFFFFFFF
        line = self.width * GLYPH_HEIGHT
        total = self.width * self.height
        if self.height <= GLYPH_HEIGHT:
            self.fb[:total] = [colour] * total
            return
        kept = total - line
        self.fb[:kept] = self.fb[line:total]
        self.fb[kept:total] = [colour] * line