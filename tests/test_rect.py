import pytest

from lemonkern.colour import alpha_blend
from lemonkern.rect import GLYPH_HEIGHT, Rect2D


def pixel(rect, x, y):
    return rect.fb[y * rect.width + x]


def test_blank_fills_every_pixel():
    rect = Rect2D.blank(3, 2, 0xFF123456)
    assert rect.fb == [0xFF123456] * 6


def test_blank_rejects_negative_size():
    with pytest.raises(ValueError):
        Rect2D.blank(-1, 2)


def test_short_framebuffer_rejected():
    with pytest.raises(ValueError):
        Rect2D(4, 4, [1, 2, 3])


def test_blit_copies_at_position():
    dest = Rect2D.blank(4, 4, 0)
    src = Rect2D(2, 2, [1, 2, 3, 4], x=1, y=1)
    dest.blit(src)
    assert pixel(dest, 1, 1) == 1
    assert pixel(dest, 2, 1) == 2
    assert pixel(dest, 1, 2) == 3
    assert pixel(dest, 2, 2) == 4
    assert sum(1 for p in dest.fb if p) == 4


def test_blit_clips_negative_offset():
    dest = Rect2D.blank(4, 4, 0)
    src = Rect2D(2, 2, [1, 2, 3, 4], x=-1, y=-1)
    dest.blit(src)
    assert pixel(dest, 0, 0) == 4
    assert sum(1 for p in dest.fb if p) == 1


def test_blit_clips_right_and_bottom():
    dest = Rect2D.blank(4, 4, 0)
    src = Rect2D(2, 2, [1, 2, 3, 4], x=3, y=3)
    dest.blit(src)
    assert pixel(dest, 3, 3) == 1
    assert len(dest.fb) == 16
    assert sum(1 for p in dest.fb if p) == 1


def test_blit_fully_offscreen_changes_nothing():
    dest = Rect2D.blank(4, 4, 7)
    src = Rect2D.blank(2, 2, 9)
    src.x = 10
    dest.blit(src)
    assert dest.fb == [7] * 16


def test_blit_alpha_skips_transparent_copies_opaque():
    dest = Rect2D.blank(2, 1, 0xFF0000FF)
    src = Rect2D(2, 1, [0x00FFFFFF, 0xFF00FF00])
    dest.blit_alpha(src)
    assert dest.fb == [0xFF0000FF, 0xFF00FF00]


def test_blit_alpha_blends_partial():
    bottom = 0xFF0000FF
    top = 0x80FF0000
    dest = Rect2D.blank(1, 1, bottom)
    dest.blit_alpha(Rect2D(1, 1, [top]))
    assert dest.fb == [alpha_blend(top, bottom)]


def test_blit_keyed_copies_any_visible_pixel():
    dest = Rect2D.blank(3, 1, 5)
    src = Rect2D(3, 1, [0x00ABCDEF, 0x80ABCDEF, 0xFFABCDEF])
    dest.blit_keyed(src)
    assert dest.fb == [5, 0x80ABCDEF, 0xFFABCDEF]


def test_fill_clips_to_rect():
    rect = Rect2D.blank(4, 4, 0)
    rect.fill(3, 3, 2, 2, 0xFFFFFFFF)
    filled = {(x, y) for y in range(4) for x in range(4) if pixel(rect, x, y)}
    assert filled == {(2, 2), (3, 2), (2, 3), (3, 3)}


def test_fill_negative_origin():
    rect = Rect2D.blank(4, 4, 0)
    rect.fill(2, 2, -1, -1, 1)
    assert pixel(rect, 0, 0) == 1
    assert sum(rect.fb) == 1


def test_blit_pixels_round_trip():
    rect = Rect2D.blank(3, 3, 0)
    data = list(range(1, 10))
    rect.blit_pixels(3, 3, 0, 0, data)
    assert rect.fb == data


def test_blit_pixels_needs_enough_data():
    rect = Rect2D.blank(3, 3, 0)
    with pytest.raises(ValueError):
        rect.blit_pixels(2, 2, 0, 0, [1, 2, 3])


def test_fill_row_clips_right_edge():
    rect = Rect2D.blank(4, 2, 0)
    rect.fill_row(1, 10, 2, 1)
    assert rect.fb == [0, 0, 0, 0, 0, 0, 1, 1]


def test_fill_row_negative_start():
    rect = Rect2D.blank(4, 1, 0)
    rect.fill_row(1, 3, -1, 0)
    assert rect.fb == [1, 1, 0, 0]


@pytest.mark.parametrize("x, y", [(4, 0), (0, 2), (0, -1)])
def test_fill_row_offscreen_is_ignored(x, y):
    rect = Rect2D.blank(4, 2, 0)
    rect.fill_row(1, 2, x, y)
    assert rect.fb == [0] * 8


def test_scroll_moves_one_line_up():
    width = 2
    height = GLYPH_HEIGHT * 2
    rect = Rect2D(width, height, [row for row in range(height) for _ in range(width)])
    rect.scroll(0xFF000000)
    assert pixel(rect, 0, 0) == GLYPH_HEIGHT
    assert pixel(rect, 1, GLYPH_HEIGHT - 1) == height - 1
    assert rect.fb[width * GLYPH_HEIGHT :] == [0xFF000000] * (width * GLYPH_HEIGHT)
    assert len(rect.fb) == width * height


def test_scroll_short_rect_clears():
    rect = Rect2D.blank(2, 4, 3)
    rect.scroll(8)
    assert rect.fb == [8] * 8