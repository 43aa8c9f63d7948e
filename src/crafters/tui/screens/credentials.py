"""Credentials screen: show masked config, log in and out."""

from __future__ import annotations

from dataclasses import dataclass

from rich.console import Group, RenderableType
from rich.table import Table
from rich.text import Text

from crafters_common import DEFAULT_BASE_DOMAIN, SpaceshipCredentials, StoredConfig, VercelCredentials
from crafters.config import delete_config, get_config_path, mask, save_config
from crafters.tui.components import header, spinner, yes_no
from crafters.tui.keys import KeyEvent
from crafters.tui.screens.base import Screen
from crafters.tui.state import AppState, Route, ToastVariant

CURSOR = "▌"


class CredentialsScreen(Screen):
    def on_mount(self) -> None:
        self.state.config.reload()

    def handle_key(self, event: KeyEvent) -> None:
        if self.busy or event.ctrl or event.meta:
            return
        logged_in = self.state.config.is_logged_in
        if event.name == "escape":
            self.state.router.navigate(Route.HOME)
        elif event.name == "l" and logged_in:
            self.state.dialogs.replace(ConfirmLogoutDialog(self.state))
        elif event.name == "a" and not logged_in:
            self.state.dialogs.replace(LoginDialog(self.state))

    def render(self) -> RenderableType:
        cfg = self.state.config
        hint = ("l:logout" if cfg.is_logged_in else "a:login") + "  esc:back"
        parts: list[RenderableType] = [header("Credentials", hint), Text("")]

        if cfg.loading:
            parts.append(spinner("Loading config..."))
        elif cfg.config is None:
            parts.append(Text("Not logged in. Press 'a' to add credentials.", style="warning"))
        else:
            stored = cfg.config
            grid = Table.grid(padding=(0, 1))
            grid.add_column(style="muted")
            grid.add_column()
            grid.add_row("Base Domain:", Text(stored.base_domain, style="secondary"))
            grid.add_row("Spaceship Key:", mask(stored.spaceship.api_key))
            grid.add_row("Vercel Token:", mask(stored.vercel.token))
            if stored.vercel.team_id:
                grid.add_row("Vercel Team:", stored.vercel.team_id)
            parts += [grid, Text(""), Text(f"Config: {get_config_path()}", style="muted")]
        return Group(*parts)


# ---------------------------------------------------------------------------
# Dialogs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LoginField:
    key: str
    label: str
    required: bool = False


LOGIN_FIELDS = (
    LoginField("spaceship_key", "Spaceship API Key", required=True),
    LoginField("spaceship_secret", "Spaceship API Secret", required=True),
    LoginField("vercel_token", "Vercel Token", required=True),
    LoginField("vercel_team_id", "Vercel Team ID (optional)"),
    LoginField("base_domain", "Base Domain"),
)


class LoginDialog:
    """Five fields filled in order. Enter advances, Backspace on empty goes back."""

    title = "Login"

    def __init__(self, state: AppState):
        self.state = state
        self.values = {field.key: "" for field in LOGIN_FIELDS}
        self.values["base_domain"] = DEFAULT_BASE_DOMAIN
        self.field_index = 0
        self.saving = False

    @property
    def current(self) -> LoginField:
        return LOGIN_FIELDS[self.field_index]

    @property
    def busy(self) -> bool:
        return self.saving

    def handle_key(self, event: KeyEvent) -> None:
        if self.saving:
            return
        key = self.current.key
        if event.name == "return":
            if self.field_index < len(LOGIN_FIELDS) - 1:
                self.field_index += 1
            else:
                self.save()
        elif event.name == "backspace":
            if not self.values[key] and self.field_index > 0:
                self.field_index -= 1
            else:
                self.values[key] = self.values[key][:-1]
        elif event.is_char:
            self.values[key] += event.name
        self.state.invalidate()

    def save(self) -> None:
        missing = [f for f in LOGIN_FIELDS if f.required and not self.values[f.key]]
        if missing:
            self.state.toasts.show("Key, secret, and token are required", ToastVariant.ERROR)
            return

        self.saving = True
        try:
            save_config(
                StoredConfig(
                    spaceship=SpaceshipCredentials(
                        api_key=self.values["spaceship_key"],
                        api_secret=self.values["spaceship_secret"],
                    ),
                    vercel=VercelCredentials(
                        token=self.values["vercel_token"],
                        team_id=self.values["vercel_team_id"] or None,
                    ),
                    base_domain=self.values["base_domain"] or DEFAULT_BASE_DOMAIN,
                )
            )
        except Exception as exc:
            self.state.toasts.error(exc)
            self.saving = False
            return

        self.state.toasts.show("Credentials saved", ToastVariant.SUCCESS)
        self.state.config.reload()
        self.state.dialogs.clear()

    def render(self) -> RenderableType:
        grid = Table.grid(padding=(0, 1))
        grid.add_column(style="muted")
        grid.add_column()
        for index, field in enumerate(LOGIN_FIELDS):
            if index < self.field_index:
                grid.add_row(f"{field.label}:", Text(self.values[field.key], style="text"))
            elif index == self.field_index:
                grid.add_row(f"{field.label}:", Text(self.values[field.key] + CURSOR, style="primary"))
            else:
                grid.add_row(f"{field.label}:", "")
        parts: list[RenderableType] = [grid]
        if self.saving:
            parts.append(spinner("Saving..."))
        parts += [Text(""), Text("Enter to continue, Esc to cancel", style="muted")]
        return Group(*parts)


class ConfirmLogoutDialog:
    title = "Logout"
    busy = False

    def __init__(self, state: AppState):
        self.state = state
        self.selected = 1

    def handle_key(self, event: KeyEvent) -> None:
        if event.name in ("left", "h"):
            self.selected = 0
        elif event.name in ("right", "l"):
            self.selected = 1
        elif event.name == "return":
            if self.selected == 0:
                self.logout()
            else:
                self.state.dialogs.clear()
        self.state.invalidate()

    def logout(self) -> None:
        if delete_config():
            self.state.toasts.show("Credentials removed", ToastVariant.SUCCESS)
        else:
            self.state.toasts.show("No credentials found", ToastVariant.WARNING)
        self.state.config.reload()
        self.state.dialogs.clear()

    def render(self) -> RenderableType:
        return Group(Text("Remove stored credentials?", style="text"), yes_no(self.selected))
