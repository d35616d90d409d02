import pytest

from lemonkern.windows import (
    BACKGROUND_COLOUR,
    TERTIARY_HEIGHT,
    TERTIARY_MARGIN,
    WINDOW_PADDING,
    MouseEvent,
    WindowManager,
)


@pytest.fixture
def wm():
    return WindowManager(640, 480)


def test_create_window_is_centred_and_numbered(wm):
    first = wm.create_window("Title", "prog", 100, 50)
    second = wm.create_window("Other", "prog2", 40, 40)
    assert first.x == 640 // 2 - 100 // 2
    assert first.y == 480 // 2 - 50 // 2
    assert (first.id, second.id) == (0, 1)
    assert wm.window_count == 2
    assert [b.text for b in wm.buttons] == ["prog", "prog2"]
    assert first.rect.width == 100 and first.rect.height == 50


def test_create_window_rejects_empty_size(wm):
    with pytest.raises(ValueError):
        wm.create_window("t", "p", 0, 10)


def test_move_window_clamps_vertically(wm):
    window = wm.create_window("t", "p", 100, 50)
    wm.move_window(window, -30, -5)
    assert (window.x, window.y) == (-30, 0)
    wm.move_window(window, 10, 100000)
    limit = wm.height - wm.taskbar_full_height - (WINDOW_PADDING * 2 - TERTIARY_HEIGHT)
    assert window.y == limit
    wm.move_window(window, 10, 20)
    assert window.y == 20


def test_window_at_prefers_topmost(wm):
    lower = wm.create_window("a", "a", 100, 50)
    upper = wm.create_window("b", "b", 100, 50)
    assert wm.window_at(lower.x + 10, lower.y + 10) is upper
    wm.raise_window(lower)
    assert wm.window_at(lower.x + 10, lower.y + 10) is lower
    assert wm.windows[-1] is lower
    assert wm.window_at(0, 0) is None


def test_window_at_edges_are_exclusive(wm):
    window = wm.create_window("a", "a", 100, 50)
    assert wm.window_at(window.x, window.y + 5) is None
    assert wm.window_at(window.x + 1, window.y + 1) is window
    assert wm.window_at(window.x + window.frame_width, window.y + 5) is None


def test_close_window_removes_window_and_button(wm):
    window = wm.create_window("a", "a", 100, 50)
    assert wm.close_window(window) is True
    assert window not in wm.windows
    assert window.taskbar not in wm.buttons
    assert wm.window_count == 0
    assert wm.close_window(window) is False


def test_titles_and_program_names(wm):
    window = wm.create_window("a", "a", 100, 50)
    wm.set_title(window, "New title")
    wm.set_progname(window, "newprog")
    assert window.text == "New title"
    assert window.taskbar.text == "newprog"
    assert wm.taskbar_updated is True


def test_taskbar_click_triggers_once_per_press(wm):
    clicks = []
    button = wm.create_taskbar("Start", clicks.append)
    button.priv = "payload"
    wm.button_at(0)
    event = MouseEvent(x=button.x + 1, y=wm.taskbar_y + 10, left=True)
    wm.handle_mouse(event)
    wm.handle_mouse(event)
    assert clicks == ["payload"]
    wm.handle_mouse(MouseEvent(x=button.x + 1, y=wm.taskbar_y + 10, left=False))
    wm.handle_mouse(event)
    assert clicks == ["payload", "payload"]


def test_drag_by_title_bar(wm):
    window = wm.create_window("a", "a", 100, 50)
    start_x, start_y = window.x, window.y
    grab_x, grab_y = window.x + 10, window.y + 5
    wm.handle_mouse(MouseEvent(grab_x, grab_y, left=True))
    assert wm.active_window is window
    assert (window.x, window.y) == (start_x, start_y)
    wm.handle_mouse(MouseEvent(grab_x, grab_y, left=True, bdelta_x=5, bdelta_y=-3))
    assert (window.x, window.y) == (start_x + 5, start_y + 3)
    wm.handle_mouse(MouseEvent(grab_x, grab_y, left=False))
    wm.handle_mouse(MouseEvent(grab_x, grab_y, left=False, bdelta_x=7, bdelta_y=7))
    assert (window.x, window.y) == (start_x + 5, start_y + 3)


def test_click_in_content_delivers_local_coordinates(wm):
    window = wm.create_window("a", "a", 100, 50)
    received = []
    window.send_event = lambda event, priv: received.append((event, priv))
    window.priv = "ctx"
    x = window.x + WINDOW_PADDING + 10
    y = window.y + TERTIARY_HEIGHT + WINDOW_PADDING + TERTIARY_MARGIN + 5
    wm.handle_mouse(MouseEvent(x, y, left=True))
    assert len(received) == 1
    event, priv = received[0]
    assert (event.x, event.y) == (10, 5)
    assert priv == "ctx"
    assert (window.x, window.y) == (640 // 2 - 50, 480 // 2 - 25)


def test_click_on_desktop_clears_active_window(wm):
    window = wm.create_window("a", "a", 100, 50)
    wm.raise_window(window)
    wm.handle_mouse(MouseEvent(1, 1, left=True))
    assert wm.active_window is None


def test_resize_updates_geometry_and_background(wm):
    wm.background.fb[0] = 0xFF123456
    wm.resize(800, 600)
    assert (wm.width, wm.height) == (800, 600)
    assert wm.taskbar_y == 600 - wm.taskbar_height - 2
    assert wm.background.width == 800
    assert wm.background.height == 600 - wm.taskbar_height - 2
    assert wm.background.fb[0] == 0xFF123456
    assert wm.background.fb[-1] == BACKGROUND_COLOUR
    assert wm.taskbar_updated is True


def test_resize_rejects_bad_size(wm):
    with pytest.raises(ValueError):
        wm.resize(0, 100)


def test_raise_unknown_window_raises(wm):
    other = WindowManager(100, 100).create_window("a", "a", 10, 10)
    with pytest.raises(ValueError):
        wm.raise_window(other)