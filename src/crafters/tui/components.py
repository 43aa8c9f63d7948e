"""Reusable TUI widgets: menu, spinner line, toast, dialog frame, yes/no."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from rich.align import Align
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.spinner import Spinner
from rich.table import Table
from rich.text import Text

from crafters.tui.keys import KeyEvent
from crafters.tui.state import Toast
from crafters.tui.theme import TOAST_STYLES

DIALOG_WIDTH = 60
# rich's "dots" spinner: braille frames at 80 ms.
SPINNER_NAME = "dots"


@dataclass(frozen=True)
class MenuItem:
    label: str
    description: str
    value: str


class Menu:
    """Vertical menu; up/k and down/j wrap around, Enter selects."""

    def __init__(self, items: list[MenuItem], on_select: Callable[[MenuItem], None]):
        self.items = items
        self.on_select = on_select
        self.selected = 0

    def handle_key(self, event: KeyEvent) -> bool:
        if event.ctrl or event.meta:
            return False
        if event.name in ("up", "k"):
            self.selected = self.selected - 1 if self.selected > 0 else len(self.items) - 1
            return True
        if event.name in ("down", "j"):
            self.selected = self.selected + 1 if self.selected < len(self.items) - 1 else 0
            return True
        if event.name == "return":
            self.on_select(self.items[self.selected])
            return True
        return False

    def render(self) -> RenderableType:
        grid = Table.grid(padding=(0, 1))
        grid.add_column(width=1)
        grid.add_column()
        grid.add_column(style="muted")
        for index, item in enumerate(self.items):
            if index == self.selected:
                grid.add_row(Text(">", style="primary"), Text(item.label, style="title"), item.description)
            else:
                grid.add_row(" ", Text(item.label, style="muted"), item.description)
        return grid


def spinner(message: str, style: str = "muted") -> RenderableType:
    return Spinner(SPINNER_NAME, text=Text(message, style=style), style=style)


def selectable_row(selected: bool, *parts: tuple[str, str]) -> Text:
    """One list row with the ``>`` marker when selected."""
    row = Text(no_wrap=True, overflow="ellipsis")
    row.append("> " if selected else "  ", style="primary" if selected else "muted")
    for content, style in parts:
        row.append(content, style=style)
    if selected:
        row.stylize("selected")
    return row


def yes_no(selected: int) -> Text:
    """``[Yes]  [No]`` with ``selected`` 0 (yes) or 1 (no) highlighted."""
    text = Text()
    text.append("[Yes]", style="danger" if selected == 0 else "muted")
    text.append("  ")
    text.append("[No]", style="title" if selected == 1 else "muted")
    return text


def dialog_frame(title: str, body: RenderableType) -> RenderableType:
    panel = Panel(
        Group(Text(title, style="title"), Text(""), body),
        width=DIALOG_WIDTH,
        border_style="border",
        padding=(1, 2),
    )
    return Align.center(panel)


def toast_panel(toast: Toast) -> RenderableType:
    style = TOAST_STYLES[toast.variant]
    return Align.right(
        Panel(
            Text(toast.message, style="text"),
            title=toast.title,
            title_align="left",
            border_style=style,
            width=DIALOG_WIDTH,
        )
    )


def header(title: str, hint: str, subtitle: str = "") -> RenderableType:
    grid = Table.grid(expand=True)
    grid.add_column()
    grid.add_column(justify="right")
    left = Text(title, style="primary")
    if subtitle:
        left.append(f" - {subtitle}", style="muted")
    grid.add_row(left, Text(hint, style="muted"))
    return grid
