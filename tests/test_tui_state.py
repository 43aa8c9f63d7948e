"""Tests for the TUI state layers and key decoding."""

from __future__ import annotations

import pytest

from crafters.config import save_config
from crafters.tui.keys import KeyEvent, decode
from crafters.tui.state import (
    DEFAULT_TOAST_MS,
    AppState,
    DialogLayer,
    Route,
    Router,
    ToastLayer,
    ToastVariant,
)


class StubDialog:
    title = "Stub"
    busy = False

    def handle_key(self, event):
        pass

    def render(self):
        return ""


# ---------------------------------------------------------------------------
# Key decoding
# ---------------------------------------------------------------------------


class TestDecode:
    def test_printable(self):
        assert decode(b"ab") == [KeyEvent("a"), KeyEvent("b")]

    @pytest.mark.parametrize(
        "data,name",
        [
            (b"\x1b[A", "up"),
            (b"\x1b[B", "down"),
            (b"\x1b[C", "right"),
            (b"\x1b[D", "left"),
            (b"\x1bOA", "up"),
            (b"\x1b[Z", "backtab"),
            (b"\x1b[3~", "delete"),
            (b"\r", "return"),
            (b"\t", "tab"),
            (b"\x7f", "backspace"),
            (b" ", "space"),
            (b"\x1b", "escape"),
        ],
    )
    def test_named_keys(self, data, name):
        assert decode(data) == [KeyEvent(name)]

    def test_ctrl_c(self):
        (event,) = decode(b"\x03")
        assert event == KeyEvent("c", ctrl=True)
        assert not event.is_char

    def test_meta(self):
        assert decode(b"\x1bx") == [KeyEvent("x", meta=True)]

    def test_sequence_then_char(self):
        assert decode(b"\x1b[Aj") == [KeyEvent("up"), KeyEvent("j")]

    def test_utf8(self):
        (event,) = decode("ñ".encode())
        assert event.is_char


# ---------------------------------------------------------------------------
# Layers
# ---------------------------------------------------------------------------


class TestRouter:
    def test_navigate_notifies(self):
        seen: list[Route] = []
        router = Router(seen.append)
        assert router.current is Route.HOME
        router.navigate(Route.DOMAINS)
        assert router.current is Route.DOMAINS
        assert seen == [Route.DOMAINS]


class TestDialogLayer:
    def test_at_most_one(self):
        layer = DialogLayer()
        first, second = StubDialog(), StubDialog()
        layer.replace(first)
        layer.replace(second)
        assert layer.current is second
        assert len(layer.stack) == 1

    def test_clear_runs_on_close(self):
        closed: list[str] = []
        layer = DialogLayer()
        layer.replace(StubDialog(), on_close=lambda: closed.append("closed"))
        layer.clear()
        assert not layer.is_open
        assert layer.stack == []
        assert closed == ["closed"]

    def test_replace_does_not_run_on_close(self):
        closed: list[str] = []
        layer = DialogLayer()
        layer.replace(StubDialog(), on_close=lambda: closed.append("first"))
        layer.replace(StubDialog())
        assert closed == []


class TestToastLayer:
    def test_show_schedules_dismiss(self, fake_loop):
        toasts = ToastLayer(loop=fake_loop)
        toasts.show("Saved", ToastVariant.SUCCESS, title="Done")

        assert toasts.current.message == "Saved"
        assert toasts.current.title == "Done"
        (timer,) = fake_loop.timers
        assert timer.delay == DEFAULT_TOAST_MS / 1000
        timer.callback()
        assert toasts.current is None

    def test_new_toast_restarts_timer(self, fake_loop):
        toasts = ToastLayer(loop=fake_loop)
        toasts.show("one")
        toasts.show("two", duration_ms=1000)

        first, second = fake_loop.timers
        assert first.cancelled
        assert not second.cancelled
        assert second.delay == 1.0
        assert toasts.current.message == "two"

    def test_error_message(self, fake_loop):
        toasts = ToastLayer(loop=fake_loop)
        toasts.error(ValueError("bad input"))
        assert toasts.current.message == "bad input"
        assert toasts.current.variant is ToastVariant.ERROR

    @pytest.mark.parametrize("value", [ValueError(""), "not an exception", None])
    def test_unknown_error(self, value, fake_loop):
        toasts = ToastLayer(loop=fake_loop)
        toasts.error(value)
        assert toasts.current.message == "An unknown error has occurred"


class TestAppState:
    def test_config_reload(self, stored_config, tui_state):
        state = tui_state
        assert state.config.loading
        state.config.reload()
        assert not state.config.loading
        assert not state.config.is_logged_in

        save_config(stored_config)
        state.config.reload()
        assert state.config.is_logged_in

    @pytest.mark.anyio
    async def test_spawned_failure_is_fatal(self):
        state = AppState()

        async def boom():
            raise RuntimeError("escaped")

        task = state.spawn(boom())
        with pytest.raises(RuntimeError):
            await task
        assert isinstance(state.fatal, RuntimeError)

    @pytest.mark.anyio
    async def test_wait_dirty_returns_on_invalidate(self):
        state = AppState()
        state.invalidate()
        await state.wait_dirty(5)
        assert not state._dirty.is_set()
