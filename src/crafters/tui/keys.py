"""Raw terminal key input.

``decode`` is pure: it turns the bytes of one terminal read into
``KeyEvent`` values. ``RawInput`` puts the tty in non-canonical mode and
feeds decoded events to a handler from the event loop.
"""

from __future__ import annotations

import asyncio
import os
import termios
from dataclasses import dataclass
from typing import Callable, TextIO

ESC = "\x1b"

_CSI_KEYS = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
    "H": "home",
    "F": "end",
    "Z": "backtab",
}

_TILDE_KEYS = {
    "1": "home",
    "2": "insert",
    "3": "delete",
    "4": "end",
    "5": "pageup",
    "6": "pagedown",
}

_CONTROL_KEYS = {
    "\r": "return",
    "\n": "return",
    "\t": "tab",
    "\x7f": "backspace",
    "\x08": "backspace",
    " ": "space",
}


@dataclass(frozen=True)
class KeyEvent:
    name: str
    ctrl: bool = False
    meta: bool = False

    @property
    def is_char(self) -> bool:
        """A single printable character with no modifier."""
        return len(self.name) == 1 and not self.ctrl and not self.meta


def _escape(data: str, i: int) -> tuple[KeyEvent, int]:
    """Decode the escape sequence starting at ``data[i]``; return the event and next index."""
    if i + 1 >= len(data):
        return KeyEvent("escape"), i + 1

    nxt = data[i + 1]
    if nxt in "[O":
        j = i + 2
        params = ""
        while j < len(data) and (data[j].isdigit() or data[j] == ";"):
            params += data[j]
            j += 1
        if j >= len(data):
            return KeyEvent("escape"), i + 1
        final = data[j]
        if final == "~":
            return KeyEvent(_TILDE_KEYS.get(params.split(";")[0], "unknown")), j + 1
        if final in _CSI_KEYS:
            return KeyEvent(_CSI_KEYS[final]), j + 1
        return KeyEvent("unknown"), j + 1

    if nxt == ESC:
        return KeyEvent("escape"), i + 1

    inner = _single(data[i + 1])
    return KeyEvent(inner.name, ctrl=inner.ctrl, meta=True), i + 2


def _single(ch: str) -> KeyEvent:
    if ch in _CONTROL_KEYS:
        return KeyEvent(_CONTROL_KEYS[ch])
    code = ord(ch)
    if 1 <= code <= 26:
        return KeyEvent(chr(code + 96), ctrl=True)
    return KeyEvent(ch)


def decode(data: bytes) -> list[KeyEvent]:
    """Split one terminal read into key events."""
    text = data.decode("utf-8", errors="ignore")
    events: list[KeyEvent] = []
    i = 0
    while i < len(text):
        if text[i] == ESC:
            event, i = _escape(text, i)
        else:
            event = _single(text[i])
            i += 1
        events.append(event)
    return events


class RawInput:
    """Context manager: non-canonical, no-echo, no-signal tty read by the loop."""

    def __init__(self, stream: TextIO, handler: Callable[[KeyEvent], None]):
        self.fd = stream.fileno()
        self.handler = handler
        self._saved: list | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    def __enter__(self) -> RawInput:
        self._saved = termios.tcgetattr(self.fd)
        mode = termios.tcgetattr(self.fd)
        mode[0] &= ~(termios.IXON | termios.ICRNL)
        mode[3] &= ~(termios.ECHO | termios.ICANON | termios.ISIG | termios.IEXTEN)
        mode[6][termios.VMIN] = 1
        mode[6][termios.VTIME] = 0
        termios.tcsetattr(self.fd, termios.TCSAFLUSH, mode)
        self._loop = asyncio.get_running_loop()
        self._loop.add_reader(self.fd, self._on_readable)
        return self

    def __exit__(self, *exc_info: object) -> None:
        if self._loop is not None:
            self._loop.remove_reader(self.fd)
        if self._saved is not None:
            termios.tcsetattr(self.fd, termios.TCSADRAIN, self._saved)

    def _on_readable(self) -> None:
        data = os.read(self.fd, 1024)
        for event in decode(data):
            self.handler(event)
