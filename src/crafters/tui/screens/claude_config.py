"""Claude Config screen: install or update claude-dx."""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable

from rich.console import Group, RenderableType
from rich.text import Text

from crafters_common import InstallResult
from crafters.services.claude_dx import install_claude_dx, is_installed
from crafters.tui.components import Menu, MenuItem, header, spinner
from crafters.tui.keys import KeyEvent
from crafters.tui.screens.base import Screen
from crafters.tui.state import AppState, Route, ToastVariant

Installer = Callable[[bool], Awaitable[InstallResult]]

MENU_ITEMS = [
    MenuItem("Install", "Clone and install Claude DX config (skip existing)", "install"),
    MenuItem("Update", "Pull latest and overwrite all config", "update"),
]


def describe(result: InstallResult) -> str:
    parts = []
    if result.commands.copied:
        parts.append(f"{len(result.commands.copied)} commands")
    if result.agents:
        parts.append(f"{len(result.agents)} agents")
    if result.skills:
        parts.append(f"{len(result.skills)} skills")
    return ", ".join(parts) if parts else "Nothing new to install"


class ClaudeConfigScreen(Screen):
    def __init__(
        self,
        state: AppState,
        *,
        installer: Installer = install_claude_dx,
        installed: Callable[[], bool] = is_installed,
    ):
        super().__init__(state)
        self.installer = installer
        self.installed_check = installed
        self.installed: bool | None = None
        self.menu = Menu(MENU_ITEMS, self._select)
        self.pending: asyncio.Task[Any] | None = None

    def on_mount(self) -> None:
        self.installed = self.installed_check()

    def handle_key(self, event: KeyEvent) -> None:
        if self.busy:
            return
        if event.name == "escape":
            self.state.router.navigate(Route.HOME)
        elif self.menu.handle_key(event):
            self.state.invalidate()

    def _select(self, item: MenuItem) -> None:
        self.busy = True
        self.pending = self.state.spawn(self.run(force=item.value == "update"))

    async def run(self, force: bool) -> None:
        self.busy = True
        self.state.invalidate()
        try:
            result = await self.installer(force)
            self.state.toasts.show(describe(result), ToastVariant.SUCCESS, title="Updated" if force else "Installed")
            self.installed = True
        except Exception as exc:
            self.state.toasts.error(exc)
        finally:
            self.busy = False
            self.state.invalidate()

    def render(self) -> RenderableType:
        parts: list[RenderableType] = [header("Claude Code Configuration", "esc:back"), Text("")]
        if self.installed is not None:
            if self.installed:
                parts.append(Text("claude-dx is installed", style="success"))
            else:
                parts.append(Text("claude-dx is not installed", style="warning"))
            parts.append(Text(""))
        parts.append(spinner("Working...") if self.busy else self.menu.render())
        return Group(*parts)
