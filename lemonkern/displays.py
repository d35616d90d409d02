"""Displays, their resize and colour-depth handlers, and change listeners."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, Optional


class DisplayType(Enum):
    """What kind of output a display drives."""

    VGA = auto()
    VIRTUAL = auto()


class DisplayEvent(Enum):
    """Changes that display listeners are told about."""

    RESIZE = auto()
    CRUNCH = auto()
    DESTROY = auto()


ResizeHandler = Callable[["Display", int, int], Any]
CrunchHandler = Callable[["Display", int], Any]
Listener = Callable[["Display", DisplayEvent, Any], Any]


@dataclass
class Display:
    """One display with its driver handlers and listeners."""

    kind: DisplayType = DisplayType.VGA
    resize_handler: Optional[ResizeHandler] = None
    crunch_handler: Optional[CrunchHandler] = None
    selectable: bool = False
    width: int = 0
    height: int = 0
    bpp: int = 0
    listeners: list[tuple[Listener, Any]] = field(default_factory=list)

    def listen(self, callback: Listener, priv: Any = None) -> None:
        """Call ``callback(display, event, priv)`` on every change."""
        self.listeners.append((callback, priv))

    def trigger_listeners(self, event: DisplayEvent) -> None:
        """Tell every listener, in the order they registered, about ``event``."""
        for callback, priv in list(self.listeners):
            callback(self, event, priv)

    def resize(self, width: int, height: int) -> None:
        """Resize through the driver, then announce the resize."""
        if self.resize_handler is not None:
            self.resize_handler(self, width, height)
        self.trigger_listeners(DisplayEvent.RESIZE)

    def crunch(self, bpp: int) -> None:
        """Change colour depth through the driver, then announce it.

        A resize is announced as well, as a depth change can resize too.
        """
        if self.crunch_handler is not None:
            self.crunch_handler(self, bpp)
        self.trigger_listeners(DisplayEvent.CRUNCH)
        self.trigger_listeners(DisplayEvent.RESIZE)

    def close(self) -> None:
        """Announce destruction and drop all listeners."""
        self.trigger_listeners(DisplayEvent.DESTROY)
        self.listeners.clear()


@dataclass
class DisplayRegistry:
    """The registered displays, in registration order."""

    displays: list[Display] = field(default_factory=list)

    def create(
        self,
        kind: DisplayType,
        resize: Optional[ResizeHandler] = None,
        crunch: Optional[CrunchHandler] = None,
    ) -> Display:
        """Create a display; only a real one made before any is registered is selectable."""
        selectable = kind is not DisplayType.VIRTUAL and not self.displays
        return Display(kind=kind, resize_handler=resize, crunch_handler=crunch, selectable=selectable)

    def register(self, display: Display) -> None:
        """Add ``display`` to the registry."""
        self.displays.append(display)

    def get_default(self) -> Optional[Display]:
        """The first selectable registered display, or None."""
        return next((d for d in self.displays if d.selectable), None)