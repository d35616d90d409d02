"""Window and taskbar management: placement, stacking, hit testing and dragging."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Optional

from lemonkern.rect import Rect2D

TERTIARY_HEIGHT = 18
TERTIARY_MARGIN = 2
WINDOW_PADDING = 2

TASKBAR_HEIGHT = 28
TASKBAR_MARGIN = 2
TASKBAR_ICON_SIZE = 16
TASKBAR_CHAR_SIZE = 8
TASKBAR_TEXT_MARGIN = 4
TASKBAR_EDGE = 3

ICON_PIXELS = 16 * 16

BACKGROUND_COLOUR = 0xFF008080

Callback = Callable[[Any], Any]


def _default_callback(priv: Any) -> int:
    return 0


def _default_event_handler(event: Any, priv: Any) -> None:
    return None


@dataclass(eq=False)
class TaskbarButton:
    """A taskbar entry; ``x`` and ``right`` are its horizontal extent once laid out."""

    text: str
    onclick: Callback = _default_callback
    contextmenu: Callback = _default_callback
    priv: Any = None
    icon: list[int] = field(default_factory=lambda: [0] * ICON_PIXELS, repr=False)
    x: int = 0
    right: int = 0


@dataclass
class MouseEvent:
    """Mouse position, left button state and movement since the last event."""

    x: int
    y: int
    left: bool = False
    bdelta_x: int = 0
    bdelta_y: int = 0


@dataclass(eq=False)
class Window:
    """A window: title, content rectangle, screen position and taskbar button."""

    text: str
    rect: Rect2D
    taskbar: TaskbarButton
    x: int = 0
    y: int = 0
    id: int = 0
    shown: bool = True
    priv: Any = None
    send_event: Callable[[Any, Any], Any] = _default_event_handler

    @property
    def frame_width(self) -> int:
        return self.rect.width + WINDOW_PADDING * 2

    @property
    def frame_height(self) -> int:
        return self.rect.height + TERTIARY_HEIGHT + TERTIARY_MARGIN * 2 + WINDOW_PADDING


class WindowManager:
    """Windows in stacking order (last on top), taskbar buttons and mouse handling."""

    def __init__(self, width: int, height: int, taskbar_height: int = TASKBAR_HEIGHT) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("screen dimensions must be positive")
        self.width = width
        self.height = height
        self.taskbar_height = taskbar_height
        self.windows: list[Window] = []
        self.buttons: list[TaskbarButton] = []
        self.window_count = 0
        self.taskbar_updated = False
        self.active_window: Optional[Window] = None
        self.background = Rect2D.blank(width, height - taskbar_height - 2, BACKGROUND_COLOUR)
        self._taskbar_click = False
        self._window_click = False
        self._window_holding = False
        self._drag_window: Optional[Window] = None
        self._title_click = False
        self._title_holding = False

    @property
    def taskbar_y(self) -> int:
        """Top row of the taskbar, including its highlight line."""
        return self.height - self.taskbar_height - 2

    @property
    def taskbar_full_height(self) -> int:
        return self.taskbar_height + 2

    def create_taskbar(self, text: str, onclick: Callback = _default_callback) -> TaskbarButton:
        """Add a taskbar button labelled ``text`` that calls ``onclick(priv)``."""
        button = TaskbarButton(text=text, onclick=onclick)
        self.buttons.append(button)
        self.taskbar_updated = True
        return button

    def create_window(self, text: str, progname: str, width: int, height: int) -> Window:
        """Create a window centred on the screen, with its own taskbar button."""
        if width <= 0 or height <= 0:
            raise ValueError("window dimensions must be positive")
        button = self.create_taskbar(progname)
        window = Window(
            text=text,
            rect=Rect2D(width, height),
            taskbar=button,
            x=self.width // 2 - width // 2,
            y=self.height // 2 - height // 2,
            id=self.window_count,
        )
        self.windows.append(window)
        self.window_count += 1
        return window

    def move_window(self, window: Window, x: int, y: int) -> None:
        """Move ``window``, keeping its top edge within the usable screen height."""
        usable = self.height - self.taskbar_full_height
        bottom = WINDOW_PADDING * 2 - TERTIARY_HEIGHT
        if y < 0:
            y = 0
        elif y > usable - bottom:
            y = usable - bottom
        window.x = x
        window.y = y

    def close_window(self, window: Window) -> bool:
        """Remove ``window`` and its button; False if it is not open here."""
        if window not in self.windows:
            return False
        self.window_count -= 1
        self.windows.remove(window)
        if window.taskbar in self.buttons:
            self.buttons.remove(window.taskbar)
        if self.active_window is window:
            self.active_window = None
        if self._drag_window is window:
            self._drag_window = None
            self._window_holding = False
        self.taskbar_updated = True
        return True

    def set_title(self, window: Window, text: str) -> None:
        """Change the title bar text of ``window``."""
        window.text = text

    def set_progname(self, window: Window, text: str) -> None:
        """Change the label of the taskbar button of ``window``."""
        self.taskbar_set_text(window.taskbar, text)

    def taskbar_set_text(self, button: TaskbarButton, text: str) -> None:
        """Change the label of ``button``."""
        button.text = text
        self.taskbar_updated = True

    def _layout_buttons(self) -> None:
        offset = 0
        for button in self.buttons:
            chars = len(button.text)
            text_margin = TASKBAR_TEXT_MARGIN if chars else 0
            content = TASKBAR_ICON_SIZE + chars * TASKBAR_CHAR_SIZE + text_margin
            button.x = TASKBAR_MARGIN + offset
            button.right = TASKBAR_MARGIN * 2 + 1 + content + offset
            offset += content + TASKBAR_MARGIN * 2 + 1 + TASKBAR_MARGIN * 2
        self.taskbar_updated = False

    def window_at(self, x: int, y: int) -> Optional[Window]:
        """The topmost window whose frame strictly contains (x, y), or None."""
        for window in reversed(self.windows):
            if (
                window.y < y < window.y + window.frame_height
                and window.x < x < window.x + window.frame_width
            ):
                return window
        return None

    def button_at(self, x: int) -> Optional[TaskbarButton]:
        """The taskbar button covering column ``x``, or None."""
        if self.taskbar_updated:
            self._layout_buttons()
        return next((b for b in self.buttons if b.x <= x <= b.right), None)

    def raise_window(self, window: Window) -> None:
        """Bring ``window`` to the top of the stack and make it active."""
        if window not in self.windows:
            raise ValueError("window is not managed here")
        if self.window_count > 1:
            self.windows.remove(window)
            self.windows.append(window)
        self.active_window = window

    def resize(self, width: int, height: int) -> None:
        """Change the screen size, keeping what the old background showed."""
        if width <= 0 or height <= 0:
            raise ValueError("screen dimensions must be positive")
        self.width = width
        self.height = height
        background = Rect2D.blank(width, height - self.taskbar_height - 2, BACKGROUND_COLOUR)
        background.blit(self.background)
        self.background = background
        self.taskbar_updated = True

    def handle_mouse(self, event: MouseEvent) -> None:
        """Route a mouse event to the taskbar or window stack, then to the active window."""
        if event.y > self.taskbar_y:
            self._taskbar_event(event)
        else:
            self._window_event(event)
        if self.active_window is not None:
            self._send_window_event(event, self.active_window)

    def _taskbar_event(self, event: MouseEvent) -> None:
        if event.left == self._taskbar_click or not event.left:
            self._taskbar_click = event.left
            return
        self._taskbar_click = event.left
        if (
            event.y < self.taskbar_y + TASKBAR_EDGE
            or event.x < TASKBAR_EDGE
            or event.y > self.height - TASKBAR_EDGE
        ):
            return
        button = self.button_at(event.x)
        if button is not None:
            button.onclick(button.priv)

    def _window_event(self, event: MouseEvent) -> None:
        if event.left != self._window_click:
            self._window_click = event.left
            if not event.left and self._window_holding:
                self._drag_window = None
                self._window_holding = False
                return
            window = self.window_at(event.x, event.y)
            if window is None:
                self.active_window = None
                return
            self._drag_window = window
            self.raise_window(window)
            self._window_holding = event.y < window.y + 3 + TERTIARY_HEIGHT
        self._window_click = event.left
        if self._window_holding and self._drag_window is not None:
            self._title_event(event, self._drag_window)

    def _title_event(self, event: MouseEvent, window: Window) -> None:
        if event.left != self._title_click:
            self._title_click = event.left
            self._title_holding = (
                event.y > window.y + 1
                and event.x > window.x + 1
                and event.y < window.y + 3 + TERTIARY_HEIGHT
                and event.x < window.x + WINDOW_PADDING * 2 + window.rect.width
            )
        if not self._title_holding:
            return
        self.move_window(window, window.x + event.bdelta_x, window.y - event.bdelta_y)

    def _send_window_event(self, event: MouseEvent, window: Window) -> None:
        title = TERTIARY_HEIGHT + WINDOW_PADDING + TERTIARY_MARGIN
        ax = event.x - window.x - WINDOW_PADDING
        ay = event.y - window.y - title
        if ax < 0 or ay < 0 or ax > window.rect.width or ay > window.rect.height:
            return
        local = replace(
            event,
            x=ax,
            y=ay,
            bdelta_x=window.x - ax,
            bdelta_y=window.y - title - event.y,
        )
        window.send_event(local, window.priv)