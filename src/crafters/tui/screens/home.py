"""Home screen: the main menu."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from rich.align import Align
from rich.console import Group, RenderableType
from rich.table import Table
from rich.text import Text

from crafters.config import get_config_path
from crafters.tui.components import Menu, MenuItem
from crafters.tui.keys import KeyEvent
from crafters.tui.screens.base import Screen
from crafters.tui.state import AppState, Route

LOGO = r"""
                  __ _
  ___ _ __ __ _ / _| |_ ___ _ __ ___
 / __| '__/ _` | |_| __/ _ \ '__/ __|
| (__| | | (_| |  _| ||  __/ |  \__ \
 \___|_|  \__,_|_|  \__\___|_|  |___/
"""

MENU_ITEMS = [
    MenuItem("Domains", "Manage subdomains", Route.DOMAINS.value),
    MenuItem("Claude Config", "Install/update Claude Code configuration", Route.CLAUDE_CONFIG.value),
    MenuItem("Credentials", "View or change login credentials", Route.CREDENTIALS.value),
    MenuItem("Exit", "Quit the application", "exit"),
]


def _version() -> str:
    try:
        return version("crafters")
    except PackageNotFoundError:
        return "dev"


class HomeScreen(Screen):
    def __init__(self, state: AppState):
        super().__init__(state)
        self.menu = Menu(MENU_ITEMS, self._select)

    def _select(self, item: MenuItem) -> None:
        if item.value == "exit":
            self.state.request_exit()
            return
        self.state.router.navigate(Route(item.value))

    def handle_key(self, event: KeyEvent) -> None:
        if event.name == "q" and not event.ctrl:
            self.state.request_exit()
            return
        if self.menu.handle_key(event):
            self.state.invalidate()

    def render(self) -> RenderableType:
        footer = Table.grid(expand=True)
        footer.add_column()
        footer.add_column(justify="right")
        footer.add_row(Text(str(get_config_path()), style="muted"), Text(f"v{_version()}", style="muted"))
        return Group(
            Align.center(Text(LOGO, style="primary")),
            Align.center(self.menu.render()),
            Text(""),
            footer,
        )
