"""Shared TUI state: route, dialog, toast and stored config.

Screens and dialogs receive one ``AppState`` and mutate it; every mutation
calls ``invalidate()`` so the render loop redraws on its next tick.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Coroutine, Protocol

from rich.console import RenderableType

from crafters_common import StoredConfig
from crafters.config import load_config
from crafters.tui.keys import KeyEvent

log = logging.getLogger(__name__)

DEFAULT_TOAST_MS = 5000


class Route(str, Enum):
    HOME = "home"
    DOMAINS = "domains"
    CLAUDE_CONFIG = "claude"
    CREDENTIALS = "credentials"


class Router:
    def __init__(self, on_change: Callable[[Route], None] | None = None):
        self.current = Route.HOME
        self._on_change = on_change

    def navigate(self, route: Route) -> None:
        self.current = route
        if self._on_change:
            self._on_change(route)


class Dialog(Protocol):
    title: str

    @property
    def busy(self) -> bool: ...

    def handle_key(self, event: KeyEvent) -> None: ...

    def render(self) -> RenderableType: ...


@dataclass
class DialogEntry:
    dialog: Dialog
    on_close: Callable[[], None] | None = None


class DialogLayer:
    """At most one modal dialog. ``replace`` swaps it, ``clear`` closes it."""

    def __init__(self, on_change: Callable[[], None] | None = None):
        self._entry: DialogEntry | None = None
        self._on_change = on_change

    def _changed(self) -> None:
        if self._on_change:
            self._on_change()

    def replace(self, dialog: Dialog, on_close: Callable[[], None] | None = None) -> None:
        self._entry = DialogEntry(dialog, on_close)
        self._changed()

    def clear(self) -> None:
        entry, self._entry = self._entry, None
        if entry and entry.on_close:
            entry.on_close()
        self._changed()

    @property
    def is_open(self) -> bool:
        return self._entry is not None

    @property
    def current(self) -> Dialog | None:
        return self._entry.dialog if self._entry else None

    @property
    def stack(self) -> list[DialogEntry]:
        return [self._entry] if self._entry else []


class ToastVariant(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Toast:
    message: str
    variant: ToastVariant = ToastVariant.INFO
    title: str | None = None


class ToastLayer:
    """One transient message. Each ``show`` replaces it and restarts the timer."""

    def __init__(
        self,
        on_change: Callable[[], None] | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
    ):
        self.current: Toast | None = None
        self._on_change = on_change
        self._loop = loop
        self._timer: asyncio.TimerHandle | None = None

    def show(
        self,
        message: str,
        variant: ToastVariant = ToastVariant.INFO,
        title: str | None = None,
        duration_ms: int = DEFAULT_TOAST_MS,
    ) -> None:
        self.current = Toast(message, variant, title)
        if self._timer is not None:
            self._timer.cancel()
        loop = self._loop or asyncio.get_running_loop()
        self._timer = loop.call_later(duration_ms / 1000, self.dismiss)
        if self._on_change:
            self._on_change()

    def error(self, exc: object) -> None:
        if isinstance(exc, BaseException) and str(exc):
            self.show(str(exc), ToastVariant.ERROR)
        else:
            self.show("An unknown error has occurred", ToastVariant.ERROR)

    def dismiss(self) -> None:
        self.current = None
        self._timer = None
        if self._on_change:
            self._on_change()


class ConfigState:
    """The stored credentials as the TUI last read them."""

    def __init__(self, on_change: Callable[[], None] | None = None):
        self.config: StoredConfig | None = None
        self.loading = True
        self._on_change = on_change

    @property
    def is_logged_in(self) -> bool:
        return self.config is not None

    def reload(self) -> None:
        self.config = load_config()
        self.loading = False
        if self._on_change:
            self._on_change()


class AppState:
    """Everything a screen may touch, shared by the whole TUI."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._dirty = asyncio.Event()
        self.router = Router(lambda _route: self.invalidate())
        self.dialogs = DialogLayer(self.invalidate)
        self.toasts = ToastLayer(self.invalidate, loop)
        self.config = ConfigState(self.invalidate)
        self.exit_requested = False
        self.fatal: BaseException | None = None
        self._tasks: set[asyncio.Task[Any]] = set()

    def invalidate(self) -> None:
        self._dirty.set()

    async def wait_dirty(self, timeout: float) -> None:
        """Return on the next mutation or after ``timeout`` seconds."""
        try:
            await asyncio.wait_for(self._dirty.wait(), timeout)
        except asyncio.TimeoutError:
            pass
        self._dirty.clear()

    def request_exit(self) -> None:
        self.exit_requested = True
        self.invalidate()

    def spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task[Any]:
        """Run a screen workflow in the background; escapes freeze the UI."""
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    def _task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            log.debug("background task failed", exc_info=exc)
            self.fail(exc)
        self.invalidate()

    def fail(self, exc: BaseException) -> None:
        self.fatal = exc
        self.invalidate()

    async def drain(self) -> None:
        for task in list(self._tasks):
            task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
