"""Domains screen: list CNAME records, add and remove subdomains."""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Any, Callable

from rich.console import Group, RenderableType
from rich.text import Text

from crafters_common import DnsRecord, ResolvedConfig, VercelProject
from crafters.config import resolve_config
from crafters.services.provisioning import Provisioner
from crafters.tui.components import header, selectable_row, spinner, yes_no
from crafters.tui.keys import KeyEvent
from crafters.tui.screens.base import Screen
from crafters.tui.state import AppState, Route, ToastVariant

ProvisionerFactory = Callable[[ResolvedConfig], Provisioner]

MAX_VISIBLE = 8
CURSOR = "▌"


def _cycle(index: int, size: int, step: int) -> int:
    if size == 0:
        return 0
    return (index + step) % size


class DomainsScreen(Screen):
    def __init__(
        self,
        state: AppState,
        *,
        resolve: Callable[[], ResolvedConfig] = resolve_config,
        provisioner_factory: ProvisionerFactory = Provisioner.from_config,
    ):
        super().__init__(state)
        self.resolve = resolve
        self.provisioner_factory = provisioner_factory
        self.config: ResolvedConfig | None = None
        self.records: list[DnsRecord] = []
        self.selected = 0
        self.pending: asyncio.Task[Any] | None = None

    @property
    def base_domain(self) -> str:
        return self.config.base_domain if self.config else ""

    def on_mount(self) -> None:
        self.refresh()

    def refresh(self) -> None:
        self.busy = True
        self.pending = self.state.spawn(self.load())

    async def load(self) -> None:
        self.busy = True
        self.state.invalidate()
        try:
            self.config = self.resolve()
            async with self.provisioner_factory(self.config) as provisioner:
                self.records = await provisioner.list_domains()
            self.selected = min(self.selected, max(len(self.records) - 1, 0))
        except Exception as exc:
            self.state.toasts.error(exc)
        finally:
            self.busy = False
            self.state.invalidate()

    def handle_key(self, event: KeyEvent) -> None:
        if self.busy or event.ctrl or event.meta:
            return

        if event.name == "escape":
            self.state.router.navigate(Route.HOME)
        elif event.name == "r":
            self.refresh()
        elif event.name in ("up", "k") and self.records:
            self.selected = _cycle(self.selected, len(self.records), -1)
        elif event.name in ("down", "j") and self.records:
            self.selected = _cycle(self.selected, len(self.records), 1)
        elif event.name == "a" and self.config:
            dialog = AddDomainDialog(self.state, self.config, self.provisioner_factory)
            self.state.dialogs.replace(dialog, on_close=lambda: self._after_add(dialog))
        elif event.name == "d" and self.records and self.config:
            record = self.records[self.selected]
            self.state.dialogs.replace(
                ConfirmRemoveDialog(
                    self.state,
                    self.config,
                    record.name,
                    self.provisioner_factory,
                    on_done=self.refresh,
                )
            )
        self.state.invalidate()

    def _after_add(self, dialog: AddDomainDialog) -> None:
        if dialog.step is AddStep.DONE:
            self.refresh()

    def render(self) -> RenderableType:
        parts: list[RenderableType] = [
            header("Domains", "a:add  d:remove  r:refresh  esc:back", self.base_domain),
            Text(""),
        ]
        if self.busy:
            parts.append(spinner("Loading domains..."))
        elif not self.records:
            parts.append(Text("No CNAME records found. Press 'a' to add one.", style="muted"))
        else:
            for index, record in enumerate(self.records):
                selected = index == self.selected
                parts.append(
                    selectable_row(
                        selected,
                        (record.fqdn(self.base_domain), "secondary" if selected else "text"),
                        (" → ", "muted"),
                        (record.cname or "", "muted"),
                    )
                )
            parts.append(Text(""))
            parts.append(Text(f"{len(self.records)} record(s)", style="muted"))
        return Group(*parts)


# ---------------------------------------------------------------------------
# Add domain dialog
# ---------------------------------------------------------------------------


class AddStep(str, Enum):
    SUBDOMAIN = "subdomain"
    LOADING = "loading"
    PROJECT = "project"
    ADDING = "adding"
    DONE = "done"


_HINTS = {
    AddStep.SUBDOMAIN: "Enter to continue, Esc to cancel",
    AddStep.PROJECT: "Type to filter, ↑↓ navigate, Enter to select, Backspace on empty filter goes back",
    AddStep.DONE: "Press Enter or Esc to close",
}


class AddDomainDialog:
    """Subdomain input, then a filtered Vercel project picker, then the add.

    SUBDOMAIN -> LOADING -> PROJECT -> ADDING -> DONE. A failed project load
    returns to SUBDOMAIN; a failed add returns to PROJECT.
    """

    title = "Add Domain"

    def __init__(self, state: AppState, config: ResolvedConfig, provisioner_factory: ProvisionerFactory):
        self.state = state
        self.config = config
        self.provisioner_factory = provisioner_factory
        self.step = AddStep.SUBDOMAIN
        self.subdomain = ""
        self.projects: list[VercelProject] = []
        self.filter = ""
        self.index = 0
        self.added_domain = ""
        self.pending: asyncio.Task[Any] | None = None

    @property
    def filtered(self) -> list[VercelProject]:
        query = self.filter.lower()
        if not query:
            return self.projects
        return [p for p in self.projects if query in p.name.lower()]

    @property
    def busy(self) -> bool:
        return self.step in (AddStep.LOADING, AddStep.ADDING)

    def handle_key(self, event: KeyEvent) -> None:
        if self.busy:
            return

        if self.step is AddStep.DONE:
            if event.name == "return":
                self.state.dialogs.clear()
            return

        if event.name == "return":
            if self.step is AddStep.SUBDOMAIN and self.subdomain:
                self.step = AddStep.LOADING
                self.pending = self.state.spawn(self.load_projects())
            elif self.step is AddStep.PROJECT and self.filtered:
                project = self.filtered[self.index]
                self.step = AddStep.ADDING
                self.pending = self.state.spawn(self.add(project.name))
        elif event.name == "backspace":
            if self.step is AddStep.SUBDOMAIN:
                self.subdomain = self.subdomain[:-1]
            elif not self.filter:
                self.step = AddStep.SUBDOMAIN
            else:
                self.filter = self.filter[:-1]
                self.index = 0
        elif self.step is AddStep.PROJECT and event.name in ("up", "backtab"):
            self.index = _cycle(self.index, len(self.filtered), -1)
        elif self.step is AddStep.PROJECT and event.name in ("down", "tab"):
            self.index = _cycle(self.index, len(self.filtered), 1)
        elif event.is_char:
            if self.step is AddStep.SUBDOMAIN:
                self.subdomain += event.name
            else:
                self.filter += event.name
                self.index = 0
        self.state.invalidate()

    async def load_projects(self) -> None:
        self.step = AddStep.LOADING
        self.state.invalidate()
        try:
            async with self.provisioner_factory(self.config) as provisioner:
                self.projects = await provisioner.list_projects()
            self.filter = ""
            self.index = 0
            self.step = AddStep.PROJECT
        except Exception as exc:
            self.state.toasts.error(exc)
            self.step = AddStep.SUBDOMAIN
        self.state.invalidate()

    async def add(self, project: str) -> None:
        self.step = AddStep.ADDING
        self.state.invalidate()
        try:
            async with self.provisioner_factory(self.config) as provisioner:
                outcome = await provisioner.add(self.subdomain, project)
            outcome.raise_for_failure()
            self.added_domain = outcome.full_domain
            self.step = AddStep.DONE
            if outcome.warnings:
                self.state.toasts.show("\n".join(outcome.warnings), ToastVariant.WARNING, title="Partially configured")
        except Exception as exc:
            self.state.toasts.error(exc)
            self.step = AddStep.PROJECT
        self.state.invalidate()

    def _window(self) -> tuple[int, list[VercelProject]]:
        start = max(0, self.index - MAX_VISIBLE + 1)
        return start, self.filtered[start : start + MAX_VISIBLE]

    def render(self) -> RenderableType:
        editing = self.step is AddStep.SUBDOMAIN
        line = Text("Subdomain: ", style="muted")
        line.append(self.subdomain + (CURSOR if editing else ""), style="primary" if editing else "text")
        parts: list[RenderableType] = [line]

        if self.step is AddStep.LOADING:
            parts.append(spinner("Loading projects..."))

        if self.step in (AddStep.PROJECT, AddStep.ADDING):
            filtered = self.filtered
            picker = Text("Project: ", style="muted")
            picker.append(self.filter + CURSOR, style="primary")
            picker.append(f" ({len(filtered)}/{len(self.projects)})", style="muted")
            parts.append(picker)
            start, visible = self._window()
            for offset, project in enumerate(visible):
                selected = start + offset == self.index
                cells = [(project.name, "secondary" if selected else "text")]
                if project.framework:
                    cells.append((f" ({project.framework})", "muted"))
                parts.append(selectable_row(selected, *cells))
            hidden = len(filtered) - start - len(visible)
            if hidden > 0:
                parts.append(Text(f"   +{hidden} more, type to filter", style="muted"))

        if self.step is AddStep.ADDING:
            parts.append(spinner("Adding domain..."))

        if self.step is AddStep.DONE:
            done = Text("✓ ", style="success")
            done.append("Domain configured", style="text")
            parts += [
                done,
                Text(f"http://{self.added_domain}", style="underline"),
                Text(f"https://{self.added_domain}", style="secondary"),
                Text("SSL certificate may take a few minutes to provision.", style="muted"),
            ]

        hint = _HINTS.get(self.step)
        if hint:
            parts += [Text(""), Text(hint, style="muted")]
        return Group(*parts)


# ---------------------------------------------------------------------------
# Remove confirmation
# ---------------------------------------------------------------------------


class ConfirmRemoveDialog:
    title = "Remove Domain"

    def __init__(
        self,
        state: AppState,
        config: ResolvedConfig,
        subdomain: str,
        provisioner_factory: ProvisionerFactory,
        on_done: Callable[[], None] | None = None,
    ):
        self.state = state
        self.config = config
        self.subdomain = subdomain
        self.provisioner_factory = provisioner_factory
        self.on_done = on_done
        self.selected = 1
        self.removing = False
        self.pending: asyncio.Task[Any] | None = None

    @property
    def busy(self) -> bool:
        return self.removing

    def handle_key(self, event: KeyEvent) -> None:
        if self.busy:
            return
        if event.name in ("left", "h"):
            self.selected = 0
        elif event.name in ("right", "l"):
            self.selected = 1
        elif event.name == "return":
            if self.selected == 0:
                self.removing = True
                self.pending = self.state.spawn(self.remove())
            else:
                self.state.dialogs.clear()
        self.state.invalidate()

    async def remove(self) -> None:
        self.removing = True
        self.state.invalidate()
        full_domain = self.config.full_domain(self.subdomain)
        try:
            async with self.provisioner_factory(self.config) as provisioner:
                outcome = await provisioner.remove(self.subdomain, self.subdomain)
            outcome.raise_for_failure()
        except Exception as exc:
            self.state.toasts.error(exc)
            self.removing = False
            self.state.invalidate()
            return

        if outcome.warnings:
            self.state.toasts.show("\n".join(outcome.warnings), ToastVariant.WARNING, title=f"{full_domain} removed")
        else:
            self.state.toasts.show(f"{full_domain} removed", ToastVariant.SUCCESS)
        self.removing = False
        if self.state.dialogs.current is self:
            self.state.dialogs.clear()
        if self.on_done:
            self.on_done()

    def render(self) -> RenderableType:
        question = Text(f"Remove {self.config.full_domain(self.subdomain)}?", style="text")
        if self.removing:
            return Group(question, spinner("Removing..."))
        return Group(question, yes_no(self.selected))
