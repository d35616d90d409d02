"""Graphics processors: software rasterising and selection of the fastest GPU."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Callable, MutableSequence, Optional, Sequence

Framebuffer = MutableSequence[int]


def _stride(bpp: int) -> int:
    """Bytes per pixel for ``bpp``; only whole-byte depths of 8 to 32 bits work."""
    if bpp < 8 or bpp > 32 or bpp & 0b111:
        raise ValueError(f"unsupported colour depth: {bpp} bits per pixel")
    return bpp >> 3


def _check_buffer(fb: Sequence[int], width: int, height: int, stride: int) -> None:
    needed = max(width, 0) * max(height, 0) * stride
    if len(fb) < needed:
        raise ValueError(f"framebuffer holds {len(fb)} bytes, {needed} needed")


def _clip(
    x: int, y: int, width: int, height: int, src_width: int, src_height: int
) -> tuple[int, int, int, int]:
    """First visible column and row, and the clipped source size."""
    start_x = -x if x < 0 else 0
    start_y = -y if y < 0 else 0
    if y + src_height >= height:
        src_height = height - y
    if x + src_width >= width:
        src_width = width - x
    return start_x, start_y, src_width, src_height


def software_rect_fill(
    fb: Framebuffer,
    width: int,
    height: int,
    bpp: int,
    x: int,
    y: int,
    src_width: int,
    src_height: int,
    colour: int,
) -> int:
    """Fill a rectangle of ``fb`` with ``colour``, clipped to the framebuffer."""
    stride = _stride(bpp)
    _check_buffer(fb, width, height, stride)
    start_x, start_y, src_width, src_height = _clip(x, y, width, height, src_width, src_height)
    count = src_width - start_x
    if count <= 0:
        return 1
    pixel = (colour & ((1 << (8 * stride)) - 1)).to_bytes(stride, "little")
    run = pixel * count
    for row in range(start_y, src_height):
        offset = ((row + y) * width + start_x + x) * stride
        fb[offset : offset + len(run)] = run
    return 1


def software_rect_draw(
    fb: Framebuffer,
    width: int,
    height: int,
    src_fb: Sequence[int],
    src_width: int,
    src_height: int,
    x: int,
    y: int,
    bpp: int,
) -> int:
    """Copy the image ``src_fb`` into ``fb`` at (x, y), clipped to ``fb``."""
    stride = _stride(bpp)
    _check_buffer(fb, width, height, stride)
    _check_buffer(src_fb, src_width, src_height, stride)
    src_row = src_width * stride
    start_x, start_y, clipped_width, clipped_height = _clip(
        x, y, width, height, src_width, src_height
    )
    length = (clipped_width - start_x) * stride
    if length <= 0:
        return 1
    for row in range(start_y, clipped_height):
        src = row * src_row + start_x * stride
        dest = ((row + y) * width + start_x + x) * stride
        fb[dest : dest + length] = src_fb[src : src + length]
    return 1


def software_line_draw(
    fb: Framebuffer,
    width: int,
    height: int,
    bpp: int,
    x1: int,
    y1: int,
    x2: int,
    y2: int,
    colour: int,
) -> int:
    """Draw a line from (x1, y1) towards (x2, y2); the end point is not drawn.

    Points outside the framebuffer are skipped.
    """
    stride = _stride(bpp)
    _check_buffer(fb, width, height, stride)
    pixel = (colour & ((1 << (8 * stride)) - 1)).to_bytes(stride, "little")
    dx, sx = abs(x2 - x1), (1 if x1 < x2 else -1)
    dy, sy = abs(y2 - y1), (1 if y1 < y2 else -1)
    err = (dx if dx > dy else -dy) >> 2
    for _ in range(dx + dy):
        if x1 == x2 and y1 == y2:
            break
        e2 = err
        if 0 <= x1 < width and 0 <= y1 < height:
            offset = (y1 * width + x1) * stride
            fb[offset : offset + stride] = pixel
        if e2 > -dx:
            err -= dy
            x1 += sx
        if e2 < dy:
            err += dx
            y1 += sy
    return 1


@dataclass
class Gpu:
    """A graphics processor: a name, a speed ranking and its drawing routines.

    Capabilities come from ``cap_impl`` when one is given, otherwise from the
    ``caps`` table; capabilities not listed there are 0, as for software.
    """

    name: str
    ranking: int = 0
    caps: dict[int, int] = field(default_factory=dict)
    cap_impl: Optional[Callable[[int], int]] = None
    fill_impl: Callable[..., int] = software_rect_fill
    draw_impl: Callable[..., int] = software_rect_draw
    line_impl: Callable[..., int] = software_line_draw

    def get_cap(self, cap: int) -> int:
        """Value of capability ``cap`` for this GPU."""
        if self.cap_impl is not None:
            return self.cap_impl(cap)
        return self.caps.get(cap, 0)

    def rect_fill(
        self,
        fb: Framebuffer,
        width: int,
        height: int,
        bpp: int,
        x: int,
        y: int,
        src_width: int,
        src_height: int,
        colour: int,
    ) -> int:
        """Fill a rectangle; raises ValueError for unsupported depths."""
        _stride(bpp)
        return self.fill_impl(fb, width, height, bpp, x, y, src_width, src_height, colour)

    def rect_draw(
        self,
        fb: Framebuffer,
        width: int,
        height: int,
        src_fb: Sequence[int],
        src_width: int,
        src_height: int,
        x: int,
        y: int,
        bpp: int,
    ) -> int:
        """Copy an image; raises ValueError for unsupported depths."""
        _stride(bpp)
        return self.draw_impl(fb, width, height, src_fb, src_width, src_height, x, y, bpp)

    def line_draw(
        self,
        fb: Framebuffer,
        width: int,
        height: int,
        bpp: int,
        x1: int,
        y1: int,
        x2: int,
        y2: int,
        colour: int,
    ) -> int:
        """Draw a line; raises ValueError for unsupported depths."""
        _stride(bpp)
        return self.line_impl(fb, width, height, bpp, x1, y1, x2, y2, colour)


@dataclass
class GpuRegistry:
    """Registered GPUs, starting with the software renderer."""

    gpus: list[Gpu] = field(default_factory=list)
    _software: Optional[Gpu] = field(default=None, init=False, repr=False)
    _fastest: Optional[Gpu] = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        software = self.create("Software")
        software.ranking = 0
        self._software = software
        self._fastest = software
        self.register(software)

    @property
    def software(self) -> Gpu:
        assert self._software is not None
        return self._software

    def create(self, name: str) -> Gpu:
        """A new GPU; once a software GPU exists it starts as a copy of it, ranked 1."""
        if self._software is not None:
            return replace(
                self._software, name=name, ranking=1, caps=dict(self._software.caps)
            )
        return Gpu(name)

    def register(self, gpu: Gpu) -> None:
        """Add ``gpu``; it becomes the default if it outranks the current one."""
        if self._fastest is None or gpu.ranking > self._fastest.ranking:
            self._fastest = gpu
        self.gpus.append(gpu)

    def default(self) -> Gpu:
        """The fastest registered GPU."""
        assert self._fastest is not None
        return self._fastest