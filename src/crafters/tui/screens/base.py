"""Screen base class."""

from __future__ import annotations

from rich.console import RenderableType

from crafters.tui.keys import KeyEvent
from crafters.tui.state import AppState


class Screen:
    """A full-window view. ``busy`` screens ignore keys."""

    def __init__(self, state: AppState):
        self.state = state
        self.busy = False

    def on_mount(self) -> None:
        """Called each time the route switches to this screen."""

    def handle_key(self, event: KeyEvent) -> None:
        raise NotImplementedError

    def render(self) -> RenderableType:
        raise NotImplementedError
