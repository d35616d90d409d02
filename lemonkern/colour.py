"""Colour conversions: legacy palette, alpha blending and depth reduction."""

from __future__ import annotations

from typing import Sequence

LEGACY_COLOURS = (
    0x000000,
    0x0000AA,
    0x00AA00,
    0x00AAAA,
    0xAA0000,
    0xAA00AA,
    0xAA5500,
    0xAAAAAA,
    0x555555,
    0x5555FF,
    0x55FF55,
    0x55FFFF,
    0xFF5555,
    0xFF55FF,
    0xFFFF55,
    0xFFFFFF,
)

ALPHA_MASK = 0xFF000000
RED_MASK = 0x00FF0000
GREEN_MASK = 0x0000FF00
_CHANNEL = 0xFF


def legacy_colour(colour: int) -> int:
    """Map a palette index below 16 to its RGB value; other values pass through."""
    if 0 <= colour < len(LEGACY_COLOURS):
        return LEGACY_COLOURS[colour]
    return colour


def _channels(colour: int) -> tuple[int, int, int]:
    return (colour >> 16) & _CHANNEL, (colour >> 8) & _CHANNEL, colour & _CHANNEL


def alpha_blend(top: int, bottom: int) -> int:
    """Blend ``top`` over ``bottom`` by ``top``'s alpha; the result is opaque."""
    alpha = (top >> 24) & _CHANNEL
    inverted = _CHANNEL - alpha
    top_r, top_g, top_b = _channels(top)
    bottom_r, bottom_g, bottom_b = _channels(bottom)
    red = alpha * top_r + inverted * bottom_r + 256
    green = alpha * top_g + inverted * bottom_g + 256
    blue = alpha * top_b + inverted * bottom_b + 256
    output = (red << 8) & RED_MASK
    output |= green & GREEN_MASK
    output |= blue >> 8
    return (output | ALPHA_MASK) & 0xFFFFFFFF


def degrade_step(c: int, t: int) -> int:
    """Move channel value ``c`` one step towards ``t``."""
    if c == t:
        return c
    return (c + 1) & _CHANNEL if t > c else (c - 1) & _CHANNEL


def rgb_degrade(colour: int, target: int) -> int:
    """Move each channel of ``colour`` one step towards ``target``; result is opaque."""
    if (colour | ALPHA_MASK) == (target | ALPHA_MASK):
        return (target | ALPHA_MASK) & 0xFFFFFFFF
    r, g, b = (degrade_step(c, t) for c, t in zip(_channels(colour), _channels(target)))
    return (r << 16) | (g << 8) | b | ALPHA_MASK


def rgb32_to_rgb4(colour: int) -> int:
    """Reduce a 32-bit colour to 1:1:1 BGR, shifted left by one bit."""
    r, g, b = (channel // 0x80 for channel in _channels(colour))
    return (b << 3) | (g << 2) | (r << 1)


def rgb4_to_attr(pixels: Sequence[int], which: int) -> int:
    """Gather bit ``which`` of 8 pixels into a byte; the first pixel is the top bit."""
    if len(pixels) != 8:
        raise ValueError("a plane byte takes exactly 8 pixels")
    attr = 0
    for value in pixels:
        attr = (attr << 1) | ((value >> which) & 1)
    return attr


def rgb_align(component: int, bpp: int) -> int:
    """Round a screen dimension down to a multiple of 8, with 16 as minimum."""
    if component < 16:
        return 16
    return (component // 8) * 8


def vga_palette(bpp: int) -> list[tuple[int, int, int]]:
    """The 256 DAC entries loaded for ``bpp``: 1:1:1 for 4 bits, else 3:3:2 in 6-bit."""
    if bpp == 4:
        return [
            (((i >> 2) & 1) * 0xFF, ((i >> 1) & 1) * 0xFF, (i & 1) * 0xFF)
            for i in range(256)
        ]
    return [
        (((i >> 5) & 0b111) * 36 // 4, ((i >> 2) & 0b111) * 36 // 4, (i & 0b11) * 85 // 4)
        for i in range(256)
    ]


def _crunch_planar(pixels: Sequence[int]) -> bytes:
    out = bytearray()
    for group in range(len(pixels) // 8):
        reduced = [rgb32_to_rgb4(p) for p in pixels[group * 8 : group * 8 + 8]]
        out.extend(rgb4_to_attr(reduced, plane) for plane in (3, 2, 1, 0))
    return bytes(out)


def _crunch_332(colour: int) -> bytes:
    r, g, b = _channels(colour)
    return bytes([((r // 32) << 5) | ((g // 32) << 2) | (b // 64)])


def _crunch_555(colour: int) -> bytes:
    r, g, b = _channels(colour)
    return (((r // 8) << 10) | ((g // 8) << 5) | (b // 8)).to_bytes(2, "little")


def _crunch_565(colour: int) -> bytes:
    r, g, b = _channels(colour)
    return (((r // 8) << 11) | ((g // 4) << 5) | (b // 8)).to_bytes(2, "little")


def _crunch_888(colour: int) -> bytes:
    return (colour & 0xFFFFFF).to_bytes(3, "little")


def _crunch_8888(colour: int) -> bytes:
    return (colour & 0xFFFFFFFF).to_bytes(4, "little")


_PACKERS = {
    8: _crunch_332,
    15: _crunch_555,
    16: _crunch_565,
    24: _crunch_888,
    32: _crunch_8888,
}


def crunch(pixels: Sequence[int], width: int, height: int, bpp: int) -> bytes:
    """Convert 32-bit pixels to the framebuffer format for ``bpp``.

    Depth 4 is planar: every 8 pixels become 4 bytes, one per bit plane.
    """
    count = width * height
    if count < 0 or len(pixels) < count:
        raise ValueError(f"{count} pixels needed, {len(pixels)} given")
    pixels = pixels[:count]
    if bpp == 4:
        return _crunch_planar(pixels)
    try:
        pack = _PACKERS[bpp]
    except KeyError:
        raise ValueError(f"unsupported colour depth: {bpp} bits per pixel") from None
    return b"".join(pack(p) for p in pixels)