"""Display constants and the mouse and keyboard input state."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Hashable, Optional

BUFFER_W = 720
BUFFER_H = 720
FRAMES_N = 60.0

DISP_SCALE = 1
DISP_W = BUFFER_W * DISP_SCALE
DISP_H = BUFFER_H * DISP_SCALE

KEY_SEEN = 1
KEY_RELEASED = 2


class EventKind(enum.Enum):
    TIMER = "timer"
    KEY_DOWN = "key_down"
    KEY_UP = "key_up"
    MOUSE_AXES = "mouse_axes"
    MOUSE_BUTTON_DOWN = "mouse_button_down"
    MOUSE_BUTTON_UP = "mouse_button_up"
    DISPLAY_CLOSE = "display_close"


@dataclass(frozen=True)
class Event:
    """An input event, independent of the windowing library."""

    kind: EventKind
    x: int = 0
    y: int = 0
    key: Optional[Hashable] = None


@dataclass
class Mouse:
    """Pointer position, last click and last release, plus their board cells."""

    x: int = -1
    y: int = -1
    x_clk: int = -1
    y_clk: int = -1
    i_clk: int = -1
    j_clk: int = -1
    x_rls: int = -1
    y_rls: int = -1
    i_rls: int = -1
    j_rls: int = -1

    def update(self, event: Event) -> None:
        if event.kind is EventKind.TIMER:
            self.x_rls = -1
            self.y_rls = -1
        elif event.kind is EventKind.MOUSE_AXES:
            self.x, self.y = event.x, event.y
        elif event.kind is EventKind.MOUSE_BUTTON_DOWN:
            self.x_clk, self.y_clk = event.x, event.y
        elif event.kind is EventKind.MOUSE_BUTTON_UP:
            self.x_rls, self.y_rls = event.x, event.y


@dataclass
class Keyboard:
    """Key flags; a key pressed between two ticks is seen for at least one tick."""

    _keys: dict = field(default_factory=dict)

    def update(self, event: Event) -> None:
        if event.kind is EventKind.TIMER:
            self._keys = {k: v & KEY_SEEN for k, v in self._keys.items() if v & KEY_SEEN}
        elif event.kind is EventKind.KEY_DOWN:
            self._keys[event.key] = KEY_SEEN | KEY_RELEASED
        elif event.kind is EventKind.KEY_UP:
            flags = self._keys.get(event.key, 0) & KEY_RELEASED
            if flags:
                self._keys[event.key] = flags
            else:
                self._keys.pop(event.key, None)

    def pressed(self, key: Hashable) -> bool:
        return bool(self._keys.get(key, 0))

    def clear(self) -> None:
        self._keys.clear()