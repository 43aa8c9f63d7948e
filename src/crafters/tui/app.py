"""Interactive shell: render loop, key routing and the error boundary."""

from __future__ import annotations

import asyncio
import logging
import sys

from rich.console import Console, Group, RenderableType
from rich.live import Live
from rich.padding import Padding
from rich.text import Text

from crafters.errors import CraftersError
from crafters.tui.components import dialog_frame, toast_panel
from crafters.tui.keys import KeyEvent, RawInput
from crafters.tui.screens.base import Screen
from crafters.tui.screens.claude_config import ClaudeConfigScreen
from crafters.tui.screens.credentials import CredentialsScreen
from crafters.tui.screens.domains import DomainsScreen
from crafters.tui.screens.home import HomeScreen
from crafters.tui.state import AppState, Route
from crafters.tui.theme import theme

log = logging.getLogger(__name__)

FRAME_SECONDS = 0.08

SCREENS: dict[Route, type[Screen]] = {
    Route.HOME: HomeScreen,
    Route.DOMAINS: DomainsScreen,
    Route.CLAUDE_CONFIG: ClaudeConfigScreen,
    Route.CREDENTIALS: CredentialsScreen,
}


class CraftersApp:
    def __init__(self, state: AppState | None = None, screens: dict[Route, type[Screen]] | None = None):
        self.state = state or AppState()
        self.screens = screens or SCREENS
        self.screen: Screen = self.screens[Route.HOME](self.state)
        self._route = Route.HOME

    def _sync_route(self) -> None:
        """Mount a fresh screen when the router moved."""
        route = self.state.router.current
        if route is self._route:
            return
        self._route = route
        self.screen = self.screens[route](self.state)
        self.screen.on_mount()

    def handle_key(self, event: KeyEvent) -> None:
        """Ctrl+C, then Escape on an idle dialog, then the dialog, then the screen."""
        if event.ctrl and event.name == "c":
            self.state.request_exit()
            return
        if self.state.fatal is not None:
            return
        try:
            dialogs = self.state.dialogs
            if dialogs.is_open:
                if event.name == "escape":
                    if not dialogs.current.busy:
                        dialogs.clear()
                else:
                    dialogs.current.handle_key(event)
            else:
                self.screen.handle_key(event)
            self._sync_route()
        except Exception as exc:
            log.debug("key handler failed", exc_info=exc)
            self.state.fail(exc)

    def render(self) -> RenderableType:
        if self.state.fatal is not None:
            return self._render_fatal(self.state.fatal)
        try:
            parts: list[RenderableType] = [Padding(self.screen.render(), (1, 2))]
            dialog = self.state.dialogs.current
            if dialog is not None:
                parts.append(dialog_frame(dialog.title, dialog.render()))
            if self.state.toasts.current is not None:
                parts.append(toast_panel(self.state.toasts.current))
            return Group(*parts)
        except Exception as exc:
            log.debug("render failed", exc_info=exc)
            self.state.fail(exc)
            return self._render_fatal(exc)

    @staticmethod
    def _render_fatal(exc: BaseException) -> RenderableType:
        return Padding(
            Group(
                Text("A fatal error occurred!", style="error"),
                Text(""),
                Text(str(exc) or type(exc).__name__, style="muted"),
                Text(""),
                Text("Press Ctrl+C to exit", style="muted"),
            ),
            2,
        )

    async def run(self, console: Console | None = None) -> None:
        console = console or Console(theme=theme)
        console.set_window_title("Crafters")
        self.state.config.reload()
        with RawInput(sys.stdin, self.handle_key), Live(
            get_renderable=self.render,
            console=console,
            screen=True,
            auto_refresh=False,
        ) as live:
            while not self.state.exit_requested:
                self._sync_route()
                live.refresh()
                await self.state.wait_dirty(FRAME_SECONDS)
        await self.state.drain()
        console.set_window_title("")


def launch_tui() -> None:
    """Run the interactive shell until the user exits."""
    if not sys.stdin.isatty():
        raise CraftersError("The interactive shell needs a terminal. Run `crafters --help` for commands.")
    # Nothing may write to the terminal while the screen is active.
    logging.basicConfig(handlers=[logging.NullHandler()], force=True)
    asyncio.run(CraftersApp().run())
